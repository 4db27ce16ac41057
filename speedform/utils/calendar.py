"""Week-window helpers for training weeks.

Training weeks run Sunday-Saturday.
"""

from datetime import date, timedelta


def week_start(d: date) -> date:
    """Return Sunday of the training week containing d."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_end(d: date) -> date:
    """Return Saturday of the training week containing d."""
    return week_start(d) + timedelta(days=6)


def format_week_range(start: date | None, end: date | None) -> str:
    """Render a week window the way the dashboard shows it, e.g. 'Oct 12 - Oct 18'."""
    if start is None or end is None:
        return ""
    return f"{start:%b} {start.day} - {end:%b} {end.day}"
