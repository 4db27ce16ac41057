"""Completion checks for a training week.

Required measurements gate completion. Sanity checks against the previous
completed week only produce advisory warnings.
"""

from __future__ import annotations

from speedform.weeks.collection import WeekCollection
from speedform.weeks.fields import REQUIRED_FOR_COMPLETION, label_for
from speedform.weeks.models import ValidationResult, WeekRecord

VO2_JUMP_POINTS = 10
VOLUME_JUMP_RATIO = 2
RESTING_HR_MIN = 35
RESTING_HR_MAX = 100
VOLUME_HIGH = 150


def _fmt(value: float) -> str:
    """Render a number without a trailing '.0'."""
    return f"{value:g}" if float(value).is_integer() else f"{value:.1f}"


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return value == 0


def missing_required_fields(week: WeekRecord) -> list[str]:
    """Labels of required measurements that are absent, zero or empty."""
    return [label_for(name) for name in REQUIRED_FOR_COMPLETION if _is_missing(getattr(week, name))]


def completion_warnings(week: WeekRecord, last_week: WeekRecord | None) -> list[str]:
    """Advisory sanity checks for a week that already has its required fields."""
    warnings: list[str] = []

    if last_week is not None:
        if week.vo2_max is not None and last_week.vo2_max:
            change = abs(week.vo2_max - last_week.vo2_max)
            if change > VO2_JUMP_POINTS:
                warnings.append(
                    f"VO2 max changed by {_fmt(change)} points since last week (was {_fmt(last_week.vo2_max)})"
                )
        if week.total_volume is not None and last_week.total_volume:
            if week.total_volume > VOLUME_JUMP_RATIO * last_week.total_volume:
                ratio = week.total_volume / last_week.total_volume
                warnings.append(
                    f"Volume is {ratio:.1f}x last week's (was {_fmt(last_week.total_volume)} miles)"
                )

    if week.resting_hr is not None and (week.resting_hr > RESTING_HR_MAX or week.resting_hr < RESTING_HR_MIN):
        warnings.append(f"Unusual resting HR: {week.resting_hr} bpm")

    if week.total_volume is not None and week.total_volume > VOLUME_HIGH:
        warnings.append(f"Very high volume: {_fmt(week.total_volume)} miles this week")

    return warnings


def validate_for_completion(week: WeekRecord, weeks: WeekCollection | None = None) -> ValidationResult:
    """Check whether a week may be completed.

    Args:
        week: Week to check
        weeks: The athlete's weeks, used to find the preceding completed week

    Returns:
        ValidationResult; warnings are only computed when the week is valid
    """
    missing = missing_required_fields(week)
    if missing:
        return ValidationResult(valid=False, missing=missing)

    last_week = weeks.previous_completed(week) if weeks is not None else None
    return ValidationResult(valid=True, warnings=completion_warnings(week, last_week))
