"""Structured JSON logging setup compatible with journalctl."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_SKIP = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message"}

# -v steps from the default WARNING level
_VERBOSITY_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


class JSONFormatter(logging.Formatter):
    """Emit one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        out: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # merge extra fields (skip standard LogRecord attributes)
        for k, v in record.__dict__.items():
            if k not in _SKIP:
                out[k] = v
        if record.exc_info and record.exc_info[1]:
            out["exception"] = self.formatException(record.exc_info)
        return json.dumps(out, default=str, ensure_ascii=False)


def resolve_level(verbosity: int = 0, quiet: bool = False, level: str | None = None) -> int:
    """Pick the root log level from -v count, --quiet, or an explicit name."""
    if level:
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    if quiet:
        return logging.CRITICAL
    return _VERBOSITY_LEVELS[min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)]


def setup_logging(level: int = logging.WARNING) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter())
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
