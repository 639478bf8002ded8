"""Error kinds raised by the day/night cycle service."""

from __future__ import annotations


class DayNightError(Exception):
    """Base class for every fatal error the service surfaces."""


class ConfigurationError(DayNightError, ValueError):
    """Malformed configuration, e.g. a time that is not HH:MM."""


class SinkError(DayNightError):
    """Writing to or broadcasting via the external store failed."""

    def __init__(self, message: str, operation: str, target: str) -> None:
        super().__init__(message)
        self.operation = operation
        self.target = target


class ClockError(DayNightError):
    """The wall clock could not be read or the sleep delay not computed."""


class InvariantViolation(DayNightError, AssertionError):
    """A PhaseSchedule is not sorted, zero-based and exactly two triggers long."""
