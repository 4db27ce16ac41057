"""Registry of the measurement fields an athlete or coach may write.

Anything not registered here (id, athlete_id, week_num, status, dates)
is managed by the lifecycle and never written field-by-field.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FieldKind(StrEnum):
    NUMBER = "number"
    INTEGER = "integer"
    TEXT = "text"


@dataclass(frozen=True)
class MeasurementField:
    name: str
    label: str
    kind: FieldKind
    coach_only: bool = False

    @property
    def is_numeric(self) -> bool:
        return self.kind in (FieldKind.NUMBER, FieldKind.INTEGER)


def _session(prefix: str, label: str, *, workout: bool, max_hr: bool) -> list[MeasurementField]:
    fields = []
    if workout:
        fields.append(MeasurementField(f"{prefix}_workout", f"{label} WORKOUT", FieldKind.TEXT))
    fields += [
        MeasurementField(f"{prefix}_avg_pace", f"{label} PACE", FieldKind.TEXT),
        MeasurementField(f"{prefix}_avg_hr", f"{label} HR", FieldKind.INTEGER),
    ]
    if max_hr:
        fields += [
            MeasurementField(f"{prefix}_max_hr", f"{label} MAX HR", FieldKind.INTEGER),
            MeasurementField(f"{prefix}_recovery_hr", f"{label} RECOVERY HR", FieldKind.INTEGER),
        ]
    fields.append(MeasurementField(f"{prefix}_notes", f"{label} NOTES", FieldKind.TEXT))
    return fields


_FIELDS: list[MeasurementField] = [
    MeasurementField("vo2_max", "VO2 MAX", FieldKind.NUMBER),
    MeasurementField("resting_hr", "RESTING HR", FieldKind.INTEGER),
    MeasurementField("hrv", "HRV", FieldKind.NUMBER),
    MeasurementField("weight", "WEIGHT", FieldKind.NUMBER),
    MeasurementField("sleep_quality", "SLEEP QUALITY", FieldKind.INTEGER),
    MeasurementField("total_volume", "TOTAL VOLUME", FieldKind.NUMBER),
    MeasurementField("low_aerobic_load", "AEROBIC LOAD", FieldKind.NUMBER),
    MeasurementField("easy_miles", "EASY MILES", FieldKind.NUMBER),
    MeasurementField("stairmaster_sessions", "STAIRMASTER", FieldKind.INTEGER),
    # Aerobic session
    MeasurementField("aerobic_duration", "AEROBIC DURATION", FieldKind.TEXT),
    MeasurementField("aerobic_avg_hr", "AEROBIC HR", FieldKind.INTEGER),
    MeasurementField("aerobic_pace", "AEROBIC PACE", FieldKind.TEXT),
    MeasurementField("aerobic_hr_zones", "AEROBIC HR ZONES", FieldKind.TEXT),
    MeasurementField("aerobic_notes", "AEROBIC NOTES", FieldKind.TEXT),
    *_session("threshold", "THRESHOLD", workout=True, max_hr=True),
    *_session("speed", "SPEED", workout=True, max_hr=True),
    MeasurementField("long_run_distance", "LONG RUN DISTANCE", FieldKind.NUMBER),
    *_session("long_run", "LONG RUN", workout=False, max_hr=False),
    MeasurementField("form_notes", "FORM NOTES", FieldKind.TEXT),
    MeasurementField("weekly_observations", "OBSERVATIONS", FieldKind.TEXT),
    MeasurementField("coach_notes", "COACH NOTES", FieldKind.TEXT, coach_only=True),
]

MEASUREMENT_FIELDS: dict[str, MeasurementField] = {f.name: f for f in _FIELDS}

# Order is part of the contract: missing-field lists are reported in this order.
REQUIRED_FOR_COMPLETION: tuple[str, ...] = ("vo2_max", "resting_hr", "total_volume")


def get_field(name: str) -> MeasurementField | None:
    return MEASUREMENT_FIELDS.get(name)


def label_for(name: str) -> str:
    field = MEASUREMENT_FIELDS.get(name)
    return field.label if field else name.replace("_", " ").upper()
