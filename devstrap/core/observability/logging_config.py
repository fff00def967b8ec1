"""
Logging for the devstrap process.

``main.cli`` calls :func:`resolve_level` with its ``--debug`` /
``--verbose`` / ``--quiet`` flags, then :func:`setup_logging` once.

    --debug  >  --verbose  >  --quiet  >  $DEVSTRAP_LOG_LEVEL  >  WARNING

A run transcript can be kept with ``$DEVSTRAP_LOG_FILE``; its level
comes from ``$DEVSTRAP_LOG_FILE_LEVEL`` and defaults to DEBUG, so the
file holds every command devstrap ran even when the console is quiet.

Log records go to stderr.  The ``[INFO]`` / ``[SUCCESS]`` status lines
belong to the console reporter, not to logging.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV_VAR = "DEVSTRAP_LOG_LEVEL"
LOG_FILE_ENV_VAR = "DEVSTRAP_LOG_FILE"
LOG_FILE_LEVEL_ENV_VAR = "DEVSTRAP_LOG_FILE_LEVEL"

_DEBUG_FORMAT = ("%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S")
_VERBOSE_FORMAT = ("%(asctime)s devstrap: %(message)s", "%H:%M:%S")
_QUIET_FORMAT = ("devstrap: %(levelname)s: %(message)s", None)

_FILE_FORMAT = ("%(asctime)s %(levelname)-7s %(name)s  %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LOG_LEVEL_ENV_VAR) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Configure the root logger.  Safe to call more than once.

    ``log_file`` and ``log_file_level`` fall back to
    ``$DEVSTRAP_LOG_FILE`` and ``$DEVSTRAP_LOG_FILE_LEVEL``.
    """
    env = os.environ if environ is None else environ
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        fmt, datefmt = _DEBUG_FORMAT
    elif console_level <= logging.INFO:
        fmt, datefmt = _VERBOSE_FORMAT
    else:
        fmt, datefmt = _QUIET_FORMAT

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    log_file = log_file or env.get(LOG_FILE_ENV_VAR)
    if log_file:
        file_level = _parse_level(log_file_level or env.get(LOG_FILE_LEVEL_ENV_VAR), default=logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Level name to its numeric value; unknown names give ``default``."""
    if not level:
        return default
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else default
