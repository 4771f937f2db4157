"""
Git operations on the backend and tap clones.

Thin wrappers that build ``git`` argv lists and hand them to the
process runner.  No decision logic lives here; see
``backend_installer`` for when each one is used.
"""

from __future__ import annotations

import logging
from pathlib import Path

from brewdeps.core.errors import CommandFailureError
from brewdeps.core.services.process_runner import ProcessRunner

logger = logging.getLogger(__name__)


class GitClient:
    """Run git commands through a ``ProcessRunner``."""

    def __init__(self, runner: ProcessRunner, git: str = "git") -> None:
        self.runner = runner
        self.git = git

    def _cmd(self, *args: str) -> list[str]:
        return [self.git, *args]

    def clone(self, url: str, dest: Path, *, branch: str, depth: int = 1) -> None:
        """Shallow clone ``url`` at ``branch`` into ``dest``."""
        self.runner.run(
            self._cmd("clone", url, "-b", branch, "--depth", str(depth), str(dest)),
        )

    def get_config(self, key: str, *, cwd: Path) -> str:
        """Read a config value; an unset key (or a non-repo) reads as ``""``."""
        try:
            return self.runner.read(self._cmd("config", key), cwd=cwd).strip()
        except CommandFailureError as e:
            logger.debug("git config %s unreadable in %s (exit %d)", key, cwd, e.returncode)
            return ""

    def set_config(self, key: str, value: str, *, cwd: Path) -> None:
        self.runner.run(self._cmd("config", key, value), cwd=cwd)

    def fetch(self, *, cwd: Path, remote: str = "origin", depth: int | None = None) -> None:
        args = ["fetch"]
        if depth is not None:
            args.append(f"--depth={depth}")
        args.append(remote)
        self.runner.run(self._cmd(*args), cwd=cwd)

    def reset_hard(self, ref: str, *, cwd: Path) -> None:
        self.runner.run(self._cmd("reset", "--hard", ref), cwd=cwd)
