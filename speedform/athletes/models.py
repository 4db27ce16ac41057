"""Athlete profile models.

Defines the athlete's identity and fixed baseline/target metrics, plus the
derived display values the dashboard shows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Athlete(BaseModel):
    """Athlete profile mirroring an `athletes` row.

    Attributes:
        baseline_vo2: VO2 max at onboarding
        current_vo2: Last VO2 max copied onto the profile, if any
        target_vo2: Goal VO2 max
        baseline_mileage: Weekly mileage at onboarding
        hrv_low: Lower bound of the athlete's HRV reference band
        hrv_high: Upper bound of the athlete's HRV reference band
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    name: str
    email: str | None = None
    slug: str | None = None
    baseline_vo2: float | None = None
    current_vo2: float | None = None
    target_vo2: float | None = None
    baseline_mileage: float | None = None
    hrv_low: float | None = None
    hrv_high: float | None = None
    starting_weight: float | None = None
    age: int | None = None
    is_public: bool = False
    published_at: datetime | None = None

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(mode="json")
        if row.get("id") is None:
            row.pop("id", None)
        return row


PROFILE_FIELDS = frozenset(
    {
        "name",
        "email",
        "slug",
        "baseline_vo2",
        "current_vo2",
        "target_vo2",
        "baseline_mileage",
        "hrv_low",
        "hrv_high",
        "starting_weight",
        "age",
    }
)


def progress_percentage(
    baseline_vo2: float | None,
    current_vo2: float | None,
    target_vo2: float | None,
) -> float | None:
    """Share of the baseline-to-target VO2 gap closed so far, in percent.

    Not capped: regressions go negative and overshoot goes past 100.
    Returns None when an input is missing or zero, or the gap is zero.
    """
    if not baseline_vo2 or not current_vo2 or not target_vo2:
        return None
    if target_vo2 == baseline_vo2:
        return None
    return round((current_vo2 - baseline_vo2) / (target_vo2 - baseline_vo2) * 100, 1)


def hrv_band_label(athlete: Athlete, hrv: float | None) -> Literal["balanced", "unbalanced"] | None:
    """Advisory label for an HRV reading against the athlete's reference band."""
    if hrv is None or athlete.hrv_low is None or athlete.hrv_high is None:
        return None
    return "balanced" if athlete.hrv_low <= hrv <= athlete.hrv_high else "unbalanced"


def slugify(name: str) -> str:
    return "-".join("".join(ch if ch.isalnum() else " " for ch in name.lower()).split())
