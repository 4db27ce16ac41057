"""Error types for the week lifecycle.

Business rule violations raised to the immediate caller; none are retried.
"""


class InvalidField(ValueError):
    """Raised when a write targets a column that is not a measurement field."""

    def __init__(self, field_name: str, message: str | None = None):
        self.field_name = field_name
        self.message = message or f"Unrecognized measurement field: {field_name}"
        super().__init__(self.message)


class InvalidMeasurementValue(InvalidField):
    """Raised when a value cannot be coerced to the field's kind."""

    def __init__(self, field_name: str, value: object):
        self.value = value
        super().__init__(field_name, f"Invalid value {value!r} for measurement field {field_name}")


class PermissionDenied(PermissionError):
    """Raised when the caller lacks the capability for a write."""


class NoActiveWeek(RuntimeError):
    """Raised when completion is attempted on a week that is not active.

    Guards against double completion creating a duplicate next week.
    """


class MissingRequiredFields(ValueError):
    """Raised when completion is attempted before required measurements exist."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class WeekLocked(PermissionError):
    """Raised when a completed week is edited outside of coach notes."""


class WeekNotFound(LookupError):
    """Raised when a week id is not part of the loaded collection."""


class WeekInvariantError(ValueError):
    """Raised when a set of weeks would hold two active weeks or out-of-order sequences."""
