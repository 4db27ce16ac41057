"""Session controller: the single owner of AppState.

Every user action goes through here. The controller loads data, hands the
selected athlete's WeekCollection to the lifecycle manager, and moves the
view between login, coach dashboard and athlete pages.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from speedform.athletes.models import Athlete, progress_percentage
from speedform.athletes.repository import AthleteRepository
from speedform.state.models import AppState, View
from speedform.storage.base import WEEKLY_DATA, Storage
from speedform.users.auth_service import authenticate
from speedform.users.models import User
from speedform.weeks.collection import WeekCollection
from speedform.weeks.errors import MissingRequiredFields, NoActiveWeek, PermissionDenied
from speedform.weeks.export import export_filename, export_weeks_csv
from speedform.weeks.lifecycle import WeekLifecycleManager
from speedform.weeks.models import ValidationResult, WeekRecord


class CompletionOutcome(BaseModel):
    """Result of completing the active week, with warnings to show the user."""

    completed_week: WeekRecord
    next_week: WeekRecord
    warnings: list[str] = Field(default_factory=list)


class AppController:
    def __init__(
        self,
        storage: Storage,
        state: AppState | None = None,
        manager: WeekLifecycleManager | None = None,
    ) -> None:
        self.storage = storage
        self.state = state or AppState()
        self.manager = manager or WeekLifecycleManager(storage)
        self.athletes = AthleteRepository(storage)

    # ---- Session ----

    def sign_in(self, email: str, password: str) -> User:
        """Sign in and open the landing view for the user's role.

        Raises:
            AuthenticationFailed: If the credentials do not match
            StorageFailure: If a lookup is rejected
        """
        user = authenticate(self.storage, email, password)
        self.state = AppState(current_user=user)

        if user.is_coach:
            self.load_roster()
            self.state.view = View.COACH_DASHBOARD
        else:
            if user.athlete_id is None:
                logger.warning(f"User {user.id} has no linked athlete")
            else:
                self.state.selected_athlete = self.athletes.get(user.athlete_id)
                self.load_weeks(user.athlete_id)
            self.state.view = View.ATHLETE_PORTAL
        return user

    def sign_out(self) -> None:
        logger.info("Signed out")
        self.state = AppState()

    def _require_user(self) -> User:
        if self.state.current_user is None:
            logger.warning("Rejected action: no user is signed in")
            raise PermissionDenied("Sign in first")
        return self.state.current_user

    def _require_coach(self) -> User:
        user = self._require_user()
        if not user.is_coach:
            logger.warning(f"Rejected coach-only action by user {user.id}")
            raise PermissionDenied("Coach access required")
        return user

    # ---- Roster ----

    def load_roster(self) -> list[Athlete]:
        self._require_coach()
        self.state.athletes = self.athletes.list_roster()
        return self.state.athletes

    def select_athlete(self, athlete_id: int | str) -> WeekCollection:
        """Open one athlete's detail page (coach)."""
        self._require_coach()
        self.state.selected_athlete = self.athletes.get(athlete_id)
        weeks = self.load_weeks(athlete_id)
        self.state.view = View.ATHLETE_DETAIL
        return weeks

    def back_to_dashboard(self) -> None:
        self._require_coach()
        self.state.view = View.COACH_DASHBOARD

    def onboard_athlete(self, athlete: Athlete) -> Athlete:
        self._require_coach()
        created = self.athletes.create(athlete)
        self.load_roster()
        return created

    def update_profile(self, athlete_id: int | str, **fields: Any) -> Athlete:
        if not self._can_edit_athlete(athlete_id):
            logger.warning(f"Not allowed to edit athlete {athlete_id}")
            raise PermissionDenied(f"Not allowed to edit athlete {athlete_id}")
        updated = self.athletes.update_profile(athlete_id, **fields)
        self._refresh_athlete(updated)
        return updated

    def toggle_public(self, athlete_id: int | str) -> Athlete:
        """Flip whether an athlete's dashboard is published."""
        if not self._can_edit_athlete(athlete_id):
            logger.warning(f"Not allowed to publish athlete {athlete_id}")
            raise PermissionDenied(f"Not allowed to publish athlete {athlete_id}")
        current = self.athletes.get(athlete_id)
        updated = self.athletes.set_public(athlete_id, not current.is_public)
        self._refresh_athlete(updated)
        return updated

    def _refresh_athlete(self, athlete: Athlete) -> None:
        self.state.athletes = [athlete if a.id == athlete.id else a for a in self.state.athletes]
        if self.state.selected_athlete is not None and self.state.selected_athlete.id == athlete.id:
            self.state.selected_athlete = athlete

    def progress_for(self, athlete: Athlete) -> float | None:
        """Progress toward target VO2, preferring the latest logged value."""
        current = None
        weeks = self.state.weeks
        if weeks is not None and weeks.athlete_id == athlete.id:
            current = weeks.latest_value("vo2_max")
        return progress_percentage(athlete.baseline_vo2, current or athlete.current_vo2, athlete.target_vo2)

    # ---- Weeks ----

    def load_weeks(self, athlete_id: int | str) -> WeekCollection:
        """Reload an athlete's weeks and make sure one is active."""
        rows = self.storage.query(WEEKLY_DATA, {"athlete_id": athlete_id}, order="week_num.asc")
        weeks = WeekCollection.from_rows(athlete_id, rows)
        self.state.weeks = weeks
        self.manager.ensure_active_week(athlete_id, weeks)
        return weeks

    @property
    def can_edit(self) -> bool:
        athlete = self.state.selected_athlete
        return athlete is not None and self._can_edit_athlete(athlete.id)

    def _can_edit_athlete(self, athlete_id: int | str) -> bool:
        user = self.state.current_user
        if user is None:
            return False
        return user.is_coach or user.athlete_id == athlete_id

    def _require_edit(self) -> tuple[User, WeekCollection]:
        user = self._require_user()
        weeks = self.state.require_weeks()
        if not self._can_edit_athlete(weeks.athlete_id):
            logger.warning(f"User {user.id} tried to edit weeks of athlete {weeks.athlete_id}")
            raise PermissionDenied(f"Not allowed to edit weeks of athlete {weeks.athlete_id}")
        return user, weeks

    def update_measurement(self, week_id: Any, field_name: str, value: Any) -> WeekRecord:
        user, weeks = self._require_edit()
        return self.manager.update_measurement(weeks, week_id, field_name, value, user)

    def update_active_measurement(self, field_name: str, value: Any) -> WeekRecord:
        weeks = self.state.require_weeks()
        if weeks.active is None:
            logger.warning(f"Athlete {weeks.athlete_id} has no active week")
            raise NoActiveWeek(f"Athlete {weeks.athlete_id} has no active week")
        return self.update_measurement(weeks.active.id, field_name, value)

    def validate_active_week(self) -> ValidationResult:
        weeks = self.state.require_weeks()
        if weeks.active is None:
            logger.warning(f"Athlete {weeks.athlete_id} has no active week")
            raise NoActiveWeek(f"Athlete {weeks.athlete_id} has no active week")
        return self.manager.validate_for_completion(weeks.active, weeks)

    def complete_active_week(self) -> CompletionOutcome:
        """Validate and complete the active week, rolling over to the next.

        Raises:
            NoActiveWeek: If there is no active week
            MissingRequiredFields: If required measurements are missing
            PermissionDenied: If the user may not edit this athlete
        """
        _, weeks = self._require_edit()
        week = weeks.active
        if week is None:
            logger.warning(f"Athlete {weeks.athlete_id} has no active week")
            raise NoActiveWeek(f"Athlete {weeks.athlete_id} has no active week")

        result = self.manager.validate_for_completion(week, weeks)
        if not result.valid:
            logger.warning(f"Week {week.sequence} not completed, missing: {result.missing}")
            raise MissingRequiredFields(result.missing)

        completion = self.manager.complete_week(weeks, week)
        return CompletionOutcome(
            completed_week=completion.completed_week,
            next_week=completion.next_week,
            warnings=result.warnings,
        )

    def delete_week(self, week_id: Any) -> None:
        _, weeks = self._require_edit()
        self.manager.delete_week(weeks, week_id)

    def export_csv(self) -> tuple[str, str]:
        """Return (filename, csv text) for the selected athlete's weeks."""
        athlete = self.state.selected_athlete
        weeks = self.state.require_weeks()
        slug = athlete.slug if athlete is not None else None
        return export_filename(slug, weeks.athlete_id), export_weeks_csv(weeks)
