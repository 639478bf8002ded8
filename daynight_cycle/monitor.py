"""Minute-by-minute phase monitor that publishes transitions."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable

from .errors import ClockError
from .schedule import Phase, PhaseSchedule, format_time
from .sink import Sink

log = logging.getLogger(__name__)

NAMESPACE = "day-night-cycle"
FIELD_DAY_START = "start_time_day"
FIELD_NIGHT_START = "start_time_night"
FIELD_PHASE = "current_phase"

_NS_PER_MINUTE = 60 * 1_000_000_000


def channel_for(field: str) -> str:
    return f"{NAMESPACE}/{field}"


def seconds_until_next_minute(now: datetime) -> float:
    """Return the delay from ``now`` to the next whole wall-clock minute.

    The result lies in (0, 60]: exactly on a boundary it is a full minute.
    """
    elapsed_ns = now.second * 1_000_000_000 + now.microsecond * 1_000
    return (_NS_PER_MINUTE - elapsed_ns) / 1_000_000_000


class PhaseMonitor:
    """Track the active phase and push every change to the sink.

    ``clock`` and ``sleep`` default to local wall-clock time and
    ``time.sleep``; the loop owns the current phase and nothing else
    mutates it.
    """

    def __init__(
        self,
        schedule: PhaseSchedule,
        sink: Sink,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._schedule = schedule
        self._sink = sink
        self._clock = clock
        self._sleep = sleep
        self._phase: Phase | None = None

    @property
    def phase(self) -> Phase | None:
        return self._phase

    def run(self) -> None:
        """Publish the initial state, then check once per minute forever."""
        self.start()
        while True:
            self.wait_for_next_minute()
            self.check()

    def start(self) -> Phase:
        """Determine the starting phase and publish the full schedule."""
        self._phase = self._schedule.current_phase(self._now())
        fields = {
            FIELD_DAY_START: format_time(self._schedule.day_start),
            FIELD_NIGHT_START: format_time(self._schedule.night_start),
            FIELD_PHASE: str(self._phase),
        }
        self._sink.set_fields(NAMESPACE, fields)
        for field, value in fields.items():
            self._sink.broadcast(channel_for(field), value)
        log.debug("schedule_published", extra=fields)
        log.info("phase_start", extra={"phase": str(self._phase)})
        return self._phase

    def check(self, now: datetime | None = None) -> bool:
        """Recompute the phase; publish and return True when it changed."""
        if self._phase is None:
            raise RuntimeError("PhaseMonitor.start() must be called before check()")
        new_phase = self._schedule.current_phase(now if now is not None else self._now())
        if new_phase == self._phase:
            log.debug("phase_unchanged", extra={"phase": str(self._phase)})
            return False

        old_phase, self._phase = self._phase, new_phase
        self._sink.set_field(NAMESPACE, FIELD_PHASE, str(new_phase))
        self._sink.broadcast(channel_for(FIELD_PHASE), str(new_phase))
        log.info("phase_changed", extra={"old_phase": str(old_phase), "new_phase": str(new_phase)})
        return True

    def wait_for_next_minute(self) -> None:
        delay = seconds_until_next_minute(self._now())
        self._sleep(delay)

    def _now(self) -> datetime:
        try:
            return self._clock()
        except (OSError, OverflowError, ValueError) as exc:
            raise ClockError(f"Cannot read wall clock: {exc}") from exc
