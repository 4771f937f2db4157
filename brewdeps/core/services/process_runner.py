"""
Process runner — the single place where external commands are started.

Every backend and git invocation goes through ``ProcessRunner``,
which owns stdio policy, logging and exit-status handling.
Components receive a runner by reference; tests substitute a
recording fake with the same two methods.

Stdio policies:
    INHERIT  stdout and stderr go to the caller's terminal
    QUIET    routine output (stdout) is discarded, errors still show
    SILENT   both streams are discarded
"""

from __future__ import annotations

import enum
import logging
import subprocess
import time
from pathlib import Path

from brewdeps.core.errors import CommandFailureError

logger = logging.getLogger(__name__)


class Stdio(str, enum.Enum):
    """How a command's output streams are handled."""

    INHERIT = "inherit"
    QUIET = "quiet"
    SILENT = "silent"


_STREAMS: dict[Stdio, tuple[int | None, int | None]] = {
    Stdio.INHERIT: (None, None),
    Stdio.QUIET: (subprocess.DEVNULL, None),
    Stdio.SILENT: (subprocess.DEVNULL, subprocess.DEVNULL),
}


class ProcessRunner:
    """Run external commands synchronously.

    No timeouts: these are one-shot setup and maintenance commands,
    and a hung command hangs the caller.
    """

    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        stdio: Stdio = Stdio.INHERIT,
    ) -> None:
        """Run ``cmd``; raise ``CommandFailureError`` on a non-zero exit."""
        stdio = Stdio(stdio)
        stdout, stderr = _STREAMS[stdio]
        logger.debug("Executing: %s (cwd=%s, stdio=%s)", " ".join(cmd), cwd, stdio.value)
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            raise CommandFailureError(cmd, 127, str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, cmd[0])
        if result.returncode != 0:
            raise CommandFailureError(cmd, result.returncode)

    def read(self, cmd: list[str], *, cwd: Path | None = None) -> str:
        """Run ``cmd`` and return its stdout without the trailing newline.

        stderr is inherited.  Raises ``CommandFailureError`` on a
        non-zero exit.
        """
        logger.debug("Reading: %s (cwd=%s)", " ".join(cmd), cwd)
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            raise CommandFailureError(cmd, 127, str(e)) from e

        if result.returncode != 0:
            raise CommandFailureError(cmd, result.returncode)
        return result.stdout.rstrip("\n")
