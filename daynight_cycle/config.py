"""Configuration loading from YAML with environment variable overrides."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError
from .schedule import parse_time


@dataclass(frozen=True)
class Config:
    # schedule (HH:MM strings)
    day_start: str = "06:00"
    night_start: str = "02:00"

    # sink
    redis_url: str = "redis://127.0.0.1:6379/0"

    def __post_init__(self) -> None:
        for fld in ("day_start", "night_start"):
            value = getattr(self, fld)
            if not isinstance(value, str):
                raise ConfigurationError(f"{fld} must be an HH:MM string, got {value!r}")
            try:
                parse_time(value)
            except ConfigurationError as exc:
                raise ConfigurationError(f"{fld}: {exc}") from exc
        if not isinstance(self.redis_url, str):
            raise ConfigurationError(f"redis_url must be a string, got {self.redis_url!r}")

    def with_overrides(self, **overrides: str | None) -> Config:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes) if changes else self


_SECTIONS = ("schedule", "redis")

_ENV_MAP = {
    "DNC_DAY_START": "day_start",
    "DNC_NIGHT_START": "night_start",
    "DNC_REDIS_URL": "redis_url",
}


def load_config(config_path: str | Path | None = None) -> Config:
    """Load config from YAML file, then override with environment variables."""
    raw: dict[str, Any] = {}
    if config_path and Path(config_path).exists():
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f) or {}
        except OSError as exc:
            raise ConfigurationError(f"Cannot read {config_path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Cannot parse {config_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping")

    # flatten nested yaml sections into flat keys for the dataclass
    flat: dict[str, Any] = {}
    for section in _SECTIONS:
        body = raw.get(section)
        if body is None:
            # empty section, e.g. every entry commented out
            continue
        if not isinstance(body, dict):
            raise ConfigurationError(f"Config section {section!r} must be a mapping")
        flat.update(body)
    # also accept top-level keys; any other section ends up unknown
    for k, v in raw.items():
        if k not in _SECTIONS:
            flat[k] = v

    for env_key, cfg_key in _ENV_MAP.items():
        val = os.environ.get(env_key)
        if val is not None:
            flat[cfg_key] = val

    known = {f.name for f in dataclasses.fields(Config)}
    unknown = sorted(set(flat) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    return Config(**flat)
