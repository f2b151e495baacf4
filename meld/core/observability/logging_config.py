"""
Logging configuration — one-time setup for the meld CLI.

Every module logs through ``logging.getLogger(__name__)``; this module
decides where that output goes. Console output goes to stderr so the
generated file list on stdout stays clean for piping.

Level precedence:
    --debug / --verbose / --quiet  >  MELD_LOG_LEVEL  >  WARNING

MELD_LOG_FILE adds a file handler (always full detail format), at
MELD_LOG_FILE_LEVEL or the console level.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV = "MELD_LOG_LEVEL"
LOG_FILE_ENV = "MELD_LOG_FILE"
LOG_FILE_LEVEL_ENV = "MELD_LOG_FILE_LEVEL"

# ── Formats, most detailed first ────────────────────────────────

_FMT_DEBUG = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S")
_FMT_INFO = ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S")
_FMT_PLAIN = ("%(levelname)s: %(message)s", None)
_FMT_FILE = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return (environ or {}).get(LOG_LEVEL_ENV, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to WARNING.
        log_file: Optional path of a log file to append to.
        log_file_level: Level for the file handler; defaults to ``level``.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG
    elif console_level <= logging.INFO:
        fmt, datefmt = _FMT_INFO
    else:
        fmt, datefmt = _FMT_PLAIN

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_FILE[0], datefmt=_FMT_FILE[1]))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
