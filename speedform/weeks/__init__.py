"""Weeks module - the weekly training-cycle state machine.

This module provides:
- WeekRecord and the measurement field registry
- WeekCollection, which holds at most one active week
- Completion validation with advisory warnings
- WeekLifecycleManager for create / edit / complete / delete
- CSV export
"""

from speedform.weeks.collection import WeekCollection
from speedform.weeks.errors import (
    InvalidField,
    InvalidMeasurementValue,
    MissingRequiredFields,
    NoActiveWeek,
    PermissionDenied,
    WeekInvariantError,
    WeekLocked,
    WeekNotFound,
)
from speedform.weeks.export import export_weeks_csv
from speedform.weeks.lifecycle import WeekLifecycleManager
from speedform.weeks.models import CompletionResult, ValidationResult, WeekRecord, WeekStatus
from speedform.weeks.validation import validate_for_completion

__all__ = [
    "CompletionResult",
    "InvalidField",
    "InvalidMeasurementValue",
    "MissingRequiredFields",
    "NoActiveWeek",
    "PermissionDenied",
    "ValidationResult",
    "WeekCollection",
    "WeekInvariantError",
    "WeekLifecycleManager",
    "WeekLocked",
    "WeekNotFound",
    "WeekRecord",
    "WeekStatus",
    "export_weeks_csv",
    "validate_for_completion",
]
