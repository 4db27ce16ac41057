"""Week lifecycle manager.

Creates, edits, completes and deletes an athlete's training weeks through the
storage collaborator, keeping the in-memory WeekCollection in step.

State machine for a week: (none) -> active -> completed (terminal).
At steady state exactly one week per athlete is active; between a deleted
active week and the next load there may be none, never two.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any, Protocol

from loguru import logger
from pydantic import ValidationError

from speedform.storage.base import WEEKLY_DATA, Storage
from speedform.utils.calendar import week_end, week_start
from speedform.weeks.collection import WeekCollection
from speedform.weeks.errors import (
    InvalidField,
    InvalidMeasurementValue,
    NoActiveWeek,
    PermissionDenied,
    WeekLocked,
)
from speedform.weeks.fields import get_field
from speedform.weeks.models import CompletionResult, ValidationResult, WeekRecord, WeekStatus
from speedform.weeks.validation import validate_for_completion


class Caller(Protocol):
    """Whoever is making a write; only coach capability matters here."""

    @property
    def is_coach(self) -> bool: ...


class WeekLifecycleManager:
    def __init__(
        self,
        storage: Storage,
        *,
        today: Callable[[], date] | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._today = today or date.today
        self._now = now or (lambda: datetime.now(UTC))

    def ensure_active_week(self, athlete_id: int | str, weeks: WeekCollection) -> WeekRecord:
        """Return the athlete's active week, creating it when there is none.

        A new week takes the next sequence number, the current Sunday-Saturday
        window and zero volume, and is persisted before it is returned.

        Args:
            athlete_id: Athlete owning the weeks
            weeks: The athlete's loaded weeks; updated in place

        Returns:
            The existing or newly created active week

        Raises:
            StorageFailure: If the insert is rejected
        """
        if weeks.athlete_id != athlete_id:
            raise ValueError(f"Collection belongs to athlete {weeks.athlete_id}, not {athlete_id}")
        if weeks.active is not None:
            return weeks.active

        today = self._today()
        draft = WeekRecord(
            athlete_id=athlete_id,
            sequence=weeks.next_sequence,
            start_date=week_start(today),
            end_date=week_end(today),
            status=WeekStatus.ACTIVE,
            total_volume=0,
        )
        row = self._storage.insert(WEEKLY_DATA, draft.to_row())
        week = WeekRecord.model_validate(row)
        weeks.add(week)
        logger.info(f"Created active week {week.sequence} for athlete {athlete_id} ({week.date_range})")
        return week

    def update_measurement(
        self,
        weeks: WeekCollection,
        week_id: Any,
        field_name: str,
        value: Any,
        caller: Caller,
    ) -> WeekRecord:
        """Persist one measurement on one week.

        Args:
            weeks: The athlete's loaded weeks; updated in place
            week_id: Week to edit
            field_name: Registered measurement field
            value: New value; numeric text is parsed, empty text clears a number
            caller: Whoever is writing (coach capability gates coach notes)

        Returns:
            The updated week

        Raises:
            InvalidField: If field_name is not a measurement field
            InvalidMeasurementValue: If value does not fit the field
            PermissionDenied: If a non-coach writes coach notes
            WeekLocked: If a completed week is edited outside coach notes
            WeekNotFound: If week_id is not loaded
            StorageFailure: If the patch is rejected
        """
        field = get_field(field_name)
        if field is None:
            logger.warning(f"Rejected write to unknown field {field_name!r} on week {week_id}")
            raise InvalidField(field_name)
        if field.coach_only and not caller.is_coach:
            logger.warning(f"Rejected non-coach write to {field_name} on week {week_id}")
            raise PermissionDenied(f"Only a coach can edit {field.label}")

        week = weeks.get(week_id)
        if not week.is_active and not field.coach_only:
            logger.warning(f"Week {week.sequence} is completed; only coach notes can change")
            raise WeekLocked(f"Week {week.sequence} is completed; only coach notes can change")

        if field.is_numeric and isinstance(value, str) and not value.strip():
            value = None
        if field.is_numeric and isinstance(value, bool):
            logger.warning(f"Rejected boolean for numeric field {field_name} on week {week_id}")
            raise InvalidMeasurementValue(field_name, value)
        try:
            updated = week.model_copy(update={field_name: value})
            updated = WeekRecord.model_validate(updated.model_dump())
        except ValidationError as e:
            logger.warning(f"Rejected value {value!r} for {field_name} on week {week_id}")
            raise InvalidMeasurementValue(field_name, value) from e

        coerced = getattr(updated, field_name)
        self._storage.patch(WEEKLY_DATA, week.id, {field_name: coerced})
        weeks.replace(updated)
        logger.debug(f"Week {week.sequence} of athlete {week.athlete_id}: {field_name} = {coerced!r}")
        return updated

    def validate_for_completion(self, week: WeekRecord, weeks: WeekCollection | None = None) -> ValidationResult:
        return validate_for_completion(week, weeks)

    def complete_week(self, weeks: WeekCollection, week: WeekRecord) -> CompletionResult:
        """Mark a week completed and roll over to the next one.

        The caller validates first; this does not re-check required fields.

        Raises:
            NoActiveWeek: If the week is already completed
            StorageFailure: If either write is rejected
        """
        current = weeks.get(week.id)
        if not current.is_active:
            logger.warning(f"Week {current.sequence} of athlete {current.athlete_id} is already completed")
            raise NoActiveWeek(f"Week {current.sequence} is already completed")

        completed_at = self._now()
        self._storage.patch(
            WEEKLY_DATA,
            current.id,
            {"status": WeekStatus.COMPLETED.value, "completed_at": completed_at.isoformat()},
        )
        completed = current.model_copy(update={"status": WeekStatus.COMPLETED, "completed_at": completed_at})
        weeks.replace(completed)
        logger.info(f"Completed week {completed.sequence} for athlete {completed.athlete_id}")

        next_week = self.ensure_active_week(completed.athlete_id, weeks)
        return CompletionResult(completed_week=completed, next_week=next_week)

    def delete_week(self, weeks: WeekCollection, week_id: Any) -> None:
        """Delete a week unconditionally.

        Deleting the active week leaves none until the next ensure_active_week.
        """
        week = weeks.get(week_id)
        self._storage.delete(WEEKLY_DATA, week.id)
        weeks.remove(week.id)
        logger.info(f"Deleted week {week.sequence} (id={week.id}) for athlete {week.athlete_id}")
