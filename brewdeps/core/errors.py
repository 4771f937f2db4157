"""
Error taxonomy — every failure brewdeps surfaces to its callers.

All errors derive from ``BrewDepsError`` so entry points can catch
the whole family in one place.  Each carries enough context
(command, package name, URL, path) to log usefully.
"""

from __future__ import annotations


class BrewDepsError(Exception):
    """Base class for all brewdeps errors."""


class BootstrapError(BrewDepsError):
    """Clone, fetch, tap or download failure while preparing the backend."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.path = path


class ParseError(BrewDepsError, ValueError):
    """Malformed or empty backend output, or an unparsable version string."""


class NotFoundError(BrewDepsError):
    """The backend (or our tap) does not know the queried package."""

    def __init__(self, package: str, message: str | None = None) -> None:
        super().__init__(message or f"Cannot find formula for {package}")
        self.package = package


class NotInstalledError(BrewDepsError):
    """A keg-level query was made for a package that is not installed."""

    def __init__(self, package: str) -> None:
        super().__init__(f"Formula {package} is not installed, can't get prefix")
        self.package = package


class CommandFailureError(BrewDepsError):
    """An external command exited non-zero (or could not be started)."""

    def __init__(
        self,
        cmd: list[str],
        returncode: int,
        stderr: str = "",
        *,
        package: str | None = None,
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        self.package = package
        super().__init__(self._describe())

    def _describe(self) -> str:
        msg = f"Command failed (exit {self.returncode}): {' '.join(self.cmd)}"
        if self.package:
            msg = f"{self.package}: {msg}"
        if self.stderr:
            msg += f"\n{self.stderr.strip()}"
        return msg

    def for_package(self, package: str) -> CommandFailureError:
        """Return a copy of this error tagged with the package it concerns."""
        return CommandFailureError(
            self.cmd, self.returncode, self.stderr, package=package,
        )
