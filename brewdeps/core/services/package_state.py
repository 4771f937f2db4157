"""
Package state — list, query, install, remove and upgrade formulas.

The backend is the only source of truth for what is installed and
what is outdated; nothing here caches its answers.  Keg-level
questions (installed? linked? which version is active?) are answered
from the cellar on disk without invoking the backend.

Upgrades do not use ``brew upgrade``: each outdated formula is
removed and re-added, and the replacement comes from our tap rather
than from the backend's default upstream.
"""

from __future__ import annotations

import logging
from pathlib import Path

from brewdeps.core.errors import (
    CommandFailureError,
    NotFoundError,
    NotInstalledError,
    ParseError,
)
from brewdeps.core.models.config import BrewConfig
from brewdeps.core.models.package import PackageRecord, PackageRef, package_name
from brewdeps.core.models.version import VersionValue
from brewdeps.core.services.info_parser import parse_info
from brewdeps.core.services.process_runner import ProcessRunner, Stdio

logger = logging.getLogger(__name__)


class PackageStateManager:
    """Reconcile package state against the vendored backend."""

    def __init__(self, config: BrewConfig, runner: ProcessRunner | None = None) -> None:
        self.config = config
        self.runner = runner or ProcessRunner()

    def _brew(self, *args: str) -> list[str]:
        return [str(self.config.brew), *args]

    def _tap_formula(self, name: str) -> bool:
        """Whether our tap carries its own formula for ``name``."""
        tap = self.config.tap_path
        return (tap / f"{name}.rb").is_file() or (tap / "Formula" / f"{name}.rb").is_file()

    def _formula_ref(self, name: str) -> str:
        """Tap-qualified formula name when our tap has one, else the bare name."""
        if self._tap_formula(name):
            return f"{self.config.tap}/{name}"
        return name

    # ── Observe ──────────────────────────────────────────────────

    def list(self) -> list[PackageRecord]:
        """All installed formulas, as reported by ``brew list --versions``.

        Each line reads ``name version [version ...]``; the highest
        listed version is reported.  The listing says nothing about
        bottles, so ``bottled`` is ``None``.
        """
        out = self.runner.read(self._brew("list", "--versions"))
        records = []
        for line in out.splitlines():
            fields = line.split()
            if not fields:
                continue
            if len(fields) < 2:
                raise ParseError(f"No version in brew list line: {line!r}")
            name, versions = fields[0], fields[1:]
            newest = max(VersionValue.parse(v) for v in versions)
            records.append(PackageRecord(name=name, version=newest, bottled=None))
        return records

    def outdated(self) -> list[PackageRecord]:
        """Full records for every installed formula the backend considers outdated."""
        out = self.runner.read(self._brew("outdated"))
        names = [line.split()[0] for line in out.splitlines() if line.strip()]
        return [self.info(name) for name in names]

    def info(self, pkg: PackageRef) -> PackageRecord:
        """Query the backend for a formula's current record.

        Raises:
            NotFoundError: the backend fails, says nothing, or says
                something unparsable about ``pkg``.
        """
        name = package_name(pkg)
        ref = self._formula_ref(name)
        try:
            json_text = self.runner.read(
                self._brew("info", "--json=v1", ref), cwd=self.config.tap_path,
            )
        except CommandFailureError as e:
            raise NotFoundError(name) from e

        if not json_text.strip():
            raise NotFoundError(name, f"brew didn't give us any info for {name}")
        try:
            return parse_info(json_text)
        except ParseError as e:
            raise NotFoundError(name, f"Cannot parse info for {name}: {e}") from e

    def installed(self, pkg: PackageRef) -> bool:
        """Whether at least one keg of ``pkg`` exists in the cellar."""
        return bool(self._kegs(package_name(pkg)))

    def linked(self, pkg: PackageRef) -> bool:
        """Whether ``pkg`` has a linked-keg marker."""
        return (self.config.linked_kegs / package_name(pkg)).is_symlink()

    def prefix(self, pkg: PackageRef | None = None) -> Path:
        """Active keg directory of ``pkg``, or the installation prefix.

        The active keg is the one with the highest version.

        Raises:
            NotInstalledError: no kegs exist for ``pkg``.
            ParseError: a keg directory name is not a valid version.
        """
        if pkg is None:
            return self.config.prefix
        name = package_name(pkg)
        kegs = self._kegs(name)
        if not kegs:
            raise NotInstalledError(name)
        _, newest = max(((VersionValue.parse(k.name), k) for k in kegs), key=lambda vk: vk[0])
        return newest

    def _kegs(self, name: str) -> list[Path]:
        cellar = self.config.cellar / name
        if not cellar.is_dir():
            return []
        return [p for p in cellar.iterdir() if p.is_dir()]

    # ── Act ──────────────────────────────────────────────────────

    def add(self, pkg: PackageRef) -> None:
        """Install ``pkg`` (preferring a bottle) and link it if possible.

        Unlink and link failures are tolerated: an unlinked package
        refuses ``unlink``, and keg-only formulas refuse ``link``.
        Install failures propagate.
        """
        name = package_name(pkg)
        tap = self.config.tap_path
        logger.info("add(%s)", name)

        if self.linked(name):
            try:
                self.runner.run(self._brew("unlink", "--quiet", name), cwd=tap, stdio=Stdio.QUIET)
            except CommandFailureError as e:
                logger.warning("unlink %s failed (exit %d), continuing", name, e.returncode)

        try:
            self.runner.run(self._brew("install", "--force-bottle", self._formula_ref(name)), cwd=tap)
        except CommandFailureError as e:
            raise e.for_package(name) from e

        try:
            self.runner.run(self._brew("link", name), cwd=tap, stdio=Stdio.QUIET)
        except CommandFailureError:
            logger.info("%s was not linked (keg-only?)", name)

    def remove(self, pkg: PackageRef) -> None:
        """Force-remove every installed version of ``pkg``."""
        name = package_name(pkg)
        logger.info("rm(%s)", name)
        try:
            self.runner.run(self._brew("rm", "--force", name))
        except CommandFailureError as e:
            raise e.for_package(name) from e

    def upgrade(self) -> list[PackageRecord]:
        """Remove and re-add every outdated formula, in order.

        Stops at the first failure.  Packages handled before it stay
        upgraded; the failing one may be left removed; the rest stay
        at their old version.

        Returns:
            The outdated records that were upgraded.
        """
        done: list[PackageRecord] = []
        for record in self.outdated():
            logger.info("Upgrading %s", record)
            self.remove(record)
            self.add(record)
            done.append(record)
        if done:
            logger.info("Upgraded %d package(s)", len(done))
        return done
