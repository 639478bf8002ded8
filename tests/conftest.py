"""Shared fixtures: an in-memory sink and a controllable clock."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Mapping

import pytest


class RecordingSink:
    """Sink that records every call instead of talking to redis."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.hashes: dict[str, dict[str, str]] = {}
        self.fail_on: str | None = None

    def set_fields(self, collection: str, fields: Mapping[str, str]) -> None:
        self._maybe_fail("set_fields")
        self.calls.append(("set_fields", collection, dict(fields)))
        self.hashes.setdefault(collection, {}).update(fields)

    def set_field(self, collection: str, field: str, value: str) -> None:
        self._maybe_fail("set_field")
        self.calls.append(("set_field", collection, field, value))
        self.hashes.setdefault(collection, {})[field] = value

    def broadcast(self, channel: str, message: str) -> None:
        self._maybe_fail("broadcast")
        self.calls.append(("broadcast", channel, message))

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            from daynight_cycle.errors import SinkError

            raise SinkError(f"{operation} failed", operation, "test")


class FakeClock:
    """Wall clock that only moves when told to (or when slept on)."""

    def __init__(self, start: datetime) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 15, 12, 0, 30))
