"""Day/night phase schedule.

Two configured start times are rotated onto a zero-based timeline so the
earliest one sits at midnight. After the rotation a phase lookup is a plain
"last trigger at or before now" scan, also when night runs past midnight.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum

from .errors import ConfigurationError, InvariantViolation

DAY_LENGTH = timedelta(days=1)
TIME_FORMAT = "%H:%M"


class Phase(Enum):
    DAY = "Day"
    NIGHT = "Night"

    def __str__(self) -> str:
        return self.value


# Tie rank for triggers sharing a start time. The scan keeps the last match,
# so the higher rank wins: equal boundaries resolve to Day.
_TIE_RANK = {Phase.NIGHT: 0, Phase.DAY: 1}


def parse_time(s: str) -> time:
    """Parse 'HH:MM' (or 'H:MM') 24-hour string into datetime.time."""
    parts = s.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts) or len(parts[1]) != 2:
        raise ConfigurationError(f"Invalid time format (expected HH:MM): {s!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ConfigurationError(f"Time out of range (expected 00:00-23:59): {s!r}")
    return time(hour, minute)


def format_time(t: time) -> str:
    return t.strftime(TIME_FORMAT)


def _since_midnight(t: time) -> timedelta:
    return timedelta(hours=t.hour, minutes=t.minute, seconds=t.second, microseconds=t.microsecond)


def _shift(t: time, offset: timedelta) -> time:
    """Add a signed offset to a time of day, wrapping within 24 hours."""
    wrapped = (_since_midnight(t) + offset) % DAY_LENGTH
    return (datetime.min + wrapped).time()


@dataclass(frozen=True)
class PhaseTrigger:
    start: time
    phase: Phase

    def sort_key(self) -> tuple[time, int]:
        return self.start, _TIE_RANK[self.phase]


class PhaseSchedule:
    """Map any time of day to exactly one of the two configured phases."""

    def __init__(self, day_start: time, night_start: time) -> None:
        self.day_start = day_start
        self.night_start = night_start

        triggers = sorted(
            [PhaseTrigger(day_start, Phase.DAY), PhaseTrigger(night_start, Phase.NIGHT)],
            key=PhaseTrigger.sort_key,
        )
        # shift that rotates the earliest boundary onto midnight
        self.zero_offset = timedelta(0) - _since_midnight(triggers[0].start)
        self.triggers = tuple(
            PhaseTrigger(_shift(t.start, self.zero_offset), t.phase) for t in triggers
        )
        self._check_invariants()

    @classmethod
    def from_strings(cls, day_start: str, night_start: str) -> PhaseSchedule:
        return cls(parse_time(day_start), parse_time(night_start))

    def current_phase(self, now: time | datetime) -> Phase:
        """Return the phase active at ``now``.

        A boundary belongs to the phase it starts.
        """
        if isinstance(now, datetime):
            now = now.time()
        self._check_invariants()

        normalized = _shift(now, self.zero_offset)
        phase = None
        for trigger in self.triggers:
            if trigger.start <= normalized:
                phase = trigger.phase
        if phase is None:
            raise InvariantViolation(f"No trigger covers normalized time {normalized}")
        return phase

    def _check_invariants(self) -> None:
        if len(self.triggers) != 2:
            raise InvariantViolation(f"Expected exactly two triggers, got {len(self.triggers)}")
        if self.triggers[0].start != time(0):
            raise InvariantViolation(f"Earliest trigger starts at {self.triggers[0].start}, not 00:00")
        if self.triggers[0].sort_key() > self.triggers[1].sort_key():
            raise InvariantViolation("Triggers are not sorted by start time")

    def __repr__(self) -> str:
        return (
            f"PhaseSchedule(day_start={format_time(self.day_start)!r}, "
            f"night_start={format_time(self.night_start)!r})"
        )
