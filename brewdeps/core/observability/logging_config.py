"""
Logging configuration — one setup call for the brewdeps process.

Called once at startup by ``brewdeps.main``.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  BREWDEPS_LOG_LEVEL env var  >  WARNING (default)

Optional file output via BREWDEPS_LOG_FILE / BREWDEPS_LOG_FILE_LEVEL.

Backend and git output is never routed through logging; it goes
straight to the terminal according to each command's stdio policy.
Console records therefore carry a ``brewdeps:`` tag so they stand
apart from brew's own lines on the same screen.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

LOG_LEVEL_ENV = "BREWDEPS_LOG_LEVEL"
LOG_FILE_ENV = "BREWDEPS_LOG_FILE"
LOG_FILE_LEVEL_ENV = "BREWDEPS_LOG_FILE_LEVEL"

# ── Console tiers ───────────────────────────────────────────────
#
# (threshold, format, datefmt): the first tier whose threshold is
# >= the console level wins.

_CONSOLE_TIERS: tuple[tuple[int, str, str | None], ...] = (
    # --debug: every external command with its cwd, file:line context
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    # --verbose: clone / tap / add / rm progress, timestamped
    (logging.INFO, "%(asctime)s brewdeps: %(message)s", "%H:%M:%S"),
    # default and --quiet: only problems, tagged with their severity
    (logging.CRITICAL, "brewdeps: %(levelname)s: %(message)s", None),
)

# File output — always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    *,
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
    env = os.environ if environ is None else environ
    return env.get(LOG_LEVEL_ENV, "WARNING")


def console_formatter(level: int) -> logging.Formatter:
    """Formatter for the console tier matching ``level``."""
    for threshold, fmt, datefmt in _CONSOLE_TIERS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    _, fmt, datefmt = _CONSOLE_TIERS[-1]
    return logging.Formatter(fmt, datefmt=datefmt)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the entire process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file; its directory is created.
        log_file_level: Level for the log file; defaults to ``level``.
    """
    console_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(root_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant (unknown → WARNING)."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
