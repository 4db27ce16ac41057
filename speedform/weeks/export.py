"""CSV export of an athlete's weeks.

Pure in-memory rendering: one header row, one row per week in sequence order,
every cell quoted, blank for missing values.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable

from speedform.weeks.models import WeekRecord

CSV_COLUMNS: list[tuple[str, str]] = [
    ("Week", "sequence"),
    ("Date", "date_range"),
    ("Status", "status"),
    ("VO2", "vo2_max"),
    ("HR", "resting_hr"),
    ("HRV", "hrv"),
    ("Weight", "weight"),
    ("Sleep", "sleep_quality"),
    ("Volume", "total_volume"),
    ("Aerobic Load", "low_aerobic_load"),
    ("Aerobic Dur", "aerobic_duration"),
    ("Aerobic HR", "aerobic_avg_hr"),
    ("Aerobic Pace", "aerobic_pace"),
    ("Aerobic Zones", "aerobic_hr_zones"),
    ("Aerobic Notes", "aerobic_notes"),
    ("Threshold Work", "threshold_workout"),
    ("Threshold Pace", "threshold_avg_pace"),
    ("Threshold HR", "threshold_avg_hr"),
    ("Threshold Max", "threshold_max_hr"),
    ("Threshold Rec", "threshold_recovery_hr"),
    ("Threshold Notes", "threshold_notes"),
    ("Speed Work", "speed_workout"),
    ("Speed Pace", "speed_avg_pace"),
    ("Speed HR", "speed_avg_hr"),
    ("Speed Max", "speed_max_hr"),
    ("Speed Rec", "speed_recovery_hr"),
    ("Speed Notes", "speed_notes"),
    ("Long Dist", "long_run_distance"),
    ("Long Pace", "long_run_avg_pace"),
    ("Long HR", "long_run_avg_hr"),
    ("Long Notes", "long_run_notes"),
    ("Easy", "easy_miles"),
    ("Stairs", "stairmaster_sessions"),
    ("Form", "form_notes"),
    ("Observations", "weekly_observations"),
    ("Coach Notes", "coach_notes"),
]


def _cell(value: object) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_weeks_csv(weeks: Iterable[WeekRecord]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in CSV_COLUMNS])
    for week in sorted(weeks, key=lambda w: w.sequence):
        writer.writerow([_cell(getattr(week, attr)) for _, attr in CSV_COLUMNS])
    return output.getvalue()


def export_filename(slug: str | None, athlete_id: int | str) -> str:
    return f"{slug or f'athlete_{athlete_id}'}_data.csv"
