"""Scheduling error taxonomy."""


class SchedulingError(Exception):
    """Base class for scheduling failures."""


class InvalidRequest(SchedulingError):
    """Precondition violation: bad duration, horizon, date or time input."""


class SlotConflict(SchedulingError):
    """Raised by the booking writer when the commit-time re-check fails."""

    def __init__(self, message: str, conflicts: list | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []
