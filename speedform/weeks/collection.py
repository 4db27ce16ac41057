"""One athlete's weeks, with the single-active-week invariant built in.

The active week is held apart from the completed weeks, so a collection
with two active weeks cannot be constructed or reached through its methods.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from loguru import logger
from pydantic import ValidationError

from speedform.weeks.errors import WeekInvariantError, WeekNotFound
from speedform.weeks.models import WeekRecord


class WeekCollection:
    def __init__(self, athlete_id: int | str, weeks: Iterable[WeekRecord] = ()) -> None:
        self.athlete_id = athlete_id
        self._active: WeekRecord | None = None
        self._completed: list[WeekRecord] = []
        for week in sorted(weeks, key=lambda w: w.sequence):
            self.add(week)

    @classmethod
    def from_rows(cls, athlete_id: int | str, rows: Iterable[dict[str, Any]]) -> WeekCollection:
        """Build a collection from stored rows.

        Raises:
            WeekInvariantError: If a row is malformed or the rows break the
                single-active-week or sequence rules
        """
        try:
            weeks = [WeekRecord.model_validate(row) for row in rows]
            return cls(athlete_id, weeks)
        except ValidationError as e:
            logger.error(f"Stored weeks of athlete {athlete_id} contain a malformed row: {e}")
            raise WeekInvariantError(f"Stored weeks of athlete {athlete_id} contain a malformed row") from e
        except WeekInvariantError as e:
            logger.error(f"Stored weeks of athlete {athlete_id} are inconsistent: {e}")
            raise

    def __iter__(self) -> Iterator[WeekRecord]:
        yield from self._completed
        if self._active is not None:
            yield self._active

    def __len__(self) -> int:
        return len(self._completed) + (1 if self._active is not None else 0)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"WeekCollection(athlete_id={self.athlete_id!r}, sequences={[w.sequence for w in self]})"

    @property
    def active(self) -> WeekRecord | None:
        return self._active

    @property
    def completed(self) -> list[WeekRecord]:
        return list(self._completed)

    @property
    def max_sequence(self) -> int:
        last = self._last()
        return last.sequence if last else 0

    @property
    def next_sequence(self) -> int:
        return self.max_sequence + 1

    def _last(self) -> WeekRecord | None:
        if self._active is not None:
            return self._active
        return self._completed[-1] if self._completed else None

    def get(self, week_id: Any) -> WeekRecord:
        for week in self:
            if week.id == week_id:
                return week
        raise WeekNotFound(f"Week {week_id} is not loaded for athlete {self.athlete_id}")

    def add(self, week: WeekRecord) -> None:
        """Append a week; it must be the newest and may not be a second active week."""
        if week.athlete_id != self.athlete_id:
            raise WeekInvariantError(
                f"Week {week.id} belongs to athlete {week.athlete_id}, not {self.athlete_id}"
            )
        if week.sequence <= self.max_sequence:
            raise WeekInvariantError(
                f"Week sequence {week.sequence} must be above current maximum {self.max_sequence}"
            )
        if week.is_active:
            if self._active is not None:
                raise WeekInvariantError(
                    f"Athlete {self.athlete_id} already has active week {self._active.sequence}"
                )
            self._active = week
        else:
            if self._active is not None:
                raise WeekInvariantError(
                    f"Completed week {week.sequence} cannot follow active week {self._active.sequence}"
                )
            self._completed.append(week)

    def replace(self, week: WeekRecord) -> None:
        """Swap in an updated copy of a loaded week (same id and sequence).

        An active week may turn completed; a completed week never turns active.
        """
        current = self.get(week.id)
        if current.sequence != week.sequence:
            raise WeekInvariantError(f"Week {week.id} cannot change sequence")
        if current.is_active:
            if week.is_active:
                self._active = week
            else:
                self._active = None
                self._completed.append(week)
        else:
            if week.is_active:
                raise WeekInvariantError(f"Completed week {week.id} cannot become active again")
            idx = next(i for i, w in enumerate(self._completed) if w.id == week.id)
            self._completed[idx] = week

    def remove(self, week_id: Any) -> WeekRecord:
        week = self.get(week_id)
        if week.is_active:
            self._active = None
        else:
            self._completed = [w for w in self._completed if w.id != week_id]
        return week

    def previous_completed(self, week: WeekRecord) -> WeekRecord | None:
        """Return the completed week immediately preceding `week`, if any."""
        earlier = [w for w in self._completed if w.sequence < week.sequence]
        return earlier[-1] if earlier else None

    def latest_value(self, field_name: str) -> Any:
        """Most recent non-empty value of a measurement across the weeks."""
        for week in reversed(list(self)):
            value = getattr(week, field_name, None)
            if value not in (None, ""):
                return value
        return None

    def to_rows(self) -> list[dict[str, Any]]:
        return [week.to_row() for week in self]
