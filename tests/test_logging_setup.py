"""Tests for JSON logging and verbosity handling."""

import json
import logging

import pytest

from daynight_cycle.logging_setup import JSONFormatter, resolve_level


class TestResolveLevel:
    @pytest.mark.parametrize("verbosity, expected", [
        (0, logging.WARNING),
        (1, logging.INFO),
        (2, logging.DEBUG),
        (5, logging.DEBUG),
    ])
    def test_verbosity(self, verbosity: int, expected: int) -> None:
        assert resolve_level(verbosity) == expected

    def test_quiet(self) -> None:
        assert resolve_level(2, quiet=True) == logging.CRITICAL

    def test_explicit_level_wins(self) -> None:
        assert resolve_level(0, quiet=True, level="debug") == logging.DEBUG

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            resolve_level(level="chatty")


class TestJSONFormatter:
    def test_extra_fields(self) -> None:
        record = logging.LogRecord("daynight_cycle.monitor", logging.INFO, __file__, 1,
                                   "phase_changed", (), None)
        record.old_phase = "Day"
        record.new_phase = "Night"
        out = json.loads(JSONFormatter().format(record))
        assert out["msg"] == "phase_changed"
        assert out["level"] == "INFO"
        assert out["logger"] == "daynight_cycle.monitor"
        assert out["old_phase"] == "Day"
        assert out["new_phase"] == "Night"
        assert "args" not in out
