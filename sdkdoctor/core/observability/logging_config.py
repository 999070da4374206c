"""
Logging configuration — one setup call for the CLI process.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
what is configured here. Level precedence:

    --debug  >  --verbose  >  --quiet  >  SDKDOCTOR_LOG_LEVEL  >  WARNING

A log file can be added with SDKDOCTOR_LOG_FILE (and its own level via
SDKDOCTOR_LOG_FILE_LEVEL); it always gets the full-detail format.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

ENV_LEVEL = "SDKDOCTOR_LOG_LEVEL"
ENV_FILE = "SDKDOCTOR_LOG_FILE"
ENV_FILE_LEVEL = "SDKDOCTOR_LOG_FILE_LEVEL"

_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FMT_MINIMAL = "%(message)s"

# level ceiling → (format, datefmt); first match wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, _FMT_DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)

_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Event-loop debug output, chatty below WARNING
_NOISY_LOGGERS = ("asyncio",)


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if env is None else env
    return env.get(ENV_LEVEL, "WARNING")


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _FMT_MINIMAL, None
    for ceiling, candidate_fmt, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= ceiling:
            fmt, datefmt = candidate_fmt, candidate_datefmt
            break

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_DETAILED, _FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Where to also write records, if anywhere.
        log_file_level: Level for ``log_file``; the console level if unset.
        quiet_third_party: Hold noisy library loggers at WARNING unless
            the console runs at DEBUG.
    """
    console_level = _level_number(level)
    handlers = [_console_handler(console_level)]
    lowest = console_level

    if log_file:
        file_level = _level_number(log_file_level or level)
        handlers.append(_file_handler(log_file, file_level))
        lowest = min(lowest, file_level)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(lowest)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A closed console stream must not turn into tracebacks on stderr.
    logging.raiseExceptions = False


def setup_from_environment(level: str, quiet_third_party: bool = True) -> None:
    """``setup_logging`` with the file settings taken from the environment."""
    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=quiet_third_party,
    )


def _level_number(name: str | None) -> int:
    """Numeric level for ``name``; WARNING for anything unrecognised."""
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else logging.WARNING
