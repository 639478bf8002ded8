"""Service entry point: publish the day/night schedule and follow phase changes."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from .config import Config, load_config
from .errors import ConfigurationError, DayNightError
from .logging_setup import resolve_level, setup_logging
from .monitor import PhaseMonitor
from .schedule import PhaseSchedule
from .sink import RedisSink

log = logging.getLogger(__name__)


def _version() -> str:
    try:
        return version("daynight-cycle")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daynight-cycle",
        description="daynight-cycle: publish the current day/night phase to redis",
    )
    parser.add_argument("-c", "--config", default="/etc/daynight-cycle/config.yaml",
                        help="Path to config YAML file")
    parser.add_argument("--day", default=None, metavar="HH:MM",
                        help="Start of the day phase (default 06:00)")
    parser.add_argument("--night", default=None, metavar="HH:MM",
                        help="Start of the night phase (default 02:00)")
    parser.add_argument("-v", "--verbosity", action="count", default=0,
                        help="Increase log verbosity (repeatable)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log fatal errors")
    parser.add_argument("--log-level", default=None,
                        help="Explicit log level (DEBUG/INFO/WARNING/ERROR), overrides -v/-q")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return parser


def run(cfg: Config) -> None:
    """Connect to the sink and run the monitor until the process is killed."""
    schedule = PhaseSchedule.from_strings(cfg.day_start, cfg.night_start)
    sink = RedisSink.connect(cfg.redis_url)
    try:
        PhaseMonitor(schedule, sink).run()
    finally:
        sink.close()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        level = resolve_level(args.verbosity, args.quiet, args.log_level)
    except ValueError as exc:
        print(f"daynight-cycle: {exc}", file=sys.stderr)
        sys.exit(2)
    setup_logging(level=level)

    try:
        cfg = load_config(args.config).with_overrides(day_start=args.day, night_start=args.night)
    except ConfigurationError as exc:
        log.critical("config_load_failed", extra={"error": str(exc)})
        sys.exit(1)

    try:
        run(cfg)
    except DayNightError as exc:
        log.critical("fatal_error", extra={"error": str(exc), "kind": type(exc).__name__})
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("interrupted")
        sys.exit(130)
