"""Week record models.

One WeekRecord per athlete per training week, mirroring a `weekly_data` row.
The sequence number is stored as `week_num`.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from speedform.utils.calendar import format_week_range


class WeekStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"


class WeekRecord(BaseModel):
    """A training week and its measurements.

    Measurement values are unconstrained here: range checks are advisory and
    live in completion validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str | None = None
    athlete_id: int | str
    sequence: int = Field(alias="week_num", ge=1)
    start_date: date | None = None
    end_date: date | None = None
    status: WeekStatus = WeekStatus.ACTIVE
    completed_at: datetime | None = None

    vo2_max: float | None = None
    resting_hr: int | None = None
    hrv: float | None = None
    weight: float | None = None
    sleep_quality: int | None = None
    total_volume: float | None = None
    low_aerobic_load: float | None = None
    easy_miles: float | None = None
    stairmaster_sessions: int | None = None

    aerobic_duration: str | None = None
    aerobic_avg_hr: int | None = None
    aerobic_pace: str | None = None
    aerobic_hr_zones: str | None = None
    aerobic_notes: str | None = None

    threshold_workout: str | None = None
    threshold_avg_pace: str | None = None
    threshold_avg_hr: int | None = None
    threshold_max_hr: int | None = None
    threshold_recovery_hr: int | None = None
    threshold_notes: str | None = None

    speed_workout: str | None = None
    speed_avg_pace: str | None = None
    speed_avg_hr: int | None = None
    speed_max_hr: int | None = None
    speed_recovery_hr: int | None = None
    speed_notes: str | None = None

    long_run_distance: float | None = None
    long_run_avg_pace: str | None = None
    long_run_avg_hr: int | None = None
    long_run_notes: str | None = None

    form_notes: str | None = None
    weekly_observations: str | None = None
    coach_notes: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == WeekStatus.ACTIVE

    @property
    def date_range(self) -> str:
        return format_week_range(self.start_date, self.end_date)

    def to_row(self) -> dict[str, Any]:
        """Serialize as a storage row (JSON-safe, `week_num` column name)."""
        row = self.model_dump(mode="json", by_alias=True)
        if row.get("id") is None:
            row.pop("id", None)
        return row


class ValidationResult(BaseModel):
    """Outcome of checking a week before completion.

    Attributes:
        valid: True when every required measurement is present
        missing: Labels of missing required measurements, in stable order
        warnings: Advisory messages; never block completion
    """

    valid: bool
    missing: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CompletionResult(BaseModel):
    completed_week: WeekRecord
    next_week: WeekRecord
