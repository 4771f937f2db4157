"""
Shared test fixtures and backend doubles.

No test ever runs git, brew, curl or tar.  Two doubles stand in for
``ProcessRunner``:

    FakeRunner  records every command and answers from scripted rules
    FakeBrew    additionally simulates brew's cellar / linked-keg state
                on the temporary prefix
"""

from __future__ import annotations

import io
import json
import os
import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pytest

from brewdeps.core.errors import CommandFailureError
from brewdeps.core.models.config import BrewConfig
from brewdeps.core.models.version import VersionValue
from brewdeps.core.services.process_runner import Stdio


@dataclass
class Call:
    cmd: list[str]
    cwd: Path | None
    stdio: Stdio | None     # None for read()

    @property
    def args(self) -> tuple[str, ...]:
        """The argv without the executable."""
        return tuple(self.cmd[1:])


@dataclass
class _Rule:
    args: tuple[str, ...]
    output: str
    returncode: int
    effect: Callable[[list[str], Path | None], None] | None


class FakeRunner:
    """Recording ProcessRunner double driven by argv-prefix rules."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self._rules: list[_Rule] = []

    def on(
        self,
        *args: str,
        output: str = "",
        returncode: int = 0,
        effect: Callable[[list[str], Path | None], None] | None = None,
    ) -> None:
        """Answer commands whose argv (after the executable) starts with ``args``.

        Later rules win over earlier ones.
        """
        self._rules.append(_Rule(tuple(args), output, returncode, effect))

    def _answer(self, cmd: list[str], cwd: Path | None) -> str:
        for rule in reversed(self._rules):
            if tuple(cmd[1:1 + len(rule.args)]) == rule.args:
                if rule.effect:
                    rule.effect(cmd, cwd)
                if rule.returncode:
                    raise CommandFailureError(cmd, rule.returncode)
                return rule.output
        return ""

    def run(self, cmd: list[str], *, cwd: Path | None = None, stdio: Stdio = Stdio.INHERIT) -> None:
        self.calls.append(Call(list(cmd), cwd, Stdio(stdio)))
        self._answer(cmd, cwd)

    def read(self, cmd: list[str], *, cwd: Path | None = None) -> str:
        self.calls.append(Call(list(cmd), cwd, None))
        return self._answer(cmd, cwd)

    def called(self, *args: str) -> bool:
        return any(c.args[: len(args)] == args for c in self.calls)

    def find(self, *args: str) -> list[Call]:
        return [c for c in self.calls if c.args[: len(args)] == args]


class FakeBrew(FakeRunner):
    """A brew that keeps its state in the prefix's cellar.

    Attributes:
        catalog: formula name → ``(latest version, bottled)``.
        fail_install: formulas whose install exits non-zero.
        keg_only: formulas that refuse to link.
    """

    def __init__(self, config: BrewConfig) -> None:
        super().__init__()
        self.config = config
        self.catalog: dict[str, tuple[str, bool]] = {}
        self.fail_install: set[str] = set()
        self.keg_only: set[str] = set()

    # ── State helpers ────────────────────────────────────────────

    def kegs(self, name: str) -> list[str]:
        cellar = self.config.cellar / name
        if not cellar.is_dir():
            return []
        return sorted((p.name for p in cellar.iterdir()), key=VersionValue.parse)

    def installed_names(self) -> list[str]:
        if not self.config.cellar.is_dir():
            return []
        return sorted(p.name for p in self.config.cellar.iterdir() if self.kegs(p.name))

    def is_linked(self, name: str) -> bool:
        return (self.config.linked_kegs / name).is_symlink()

    # ── Dispatch ─────────────────────────────────────────────────

    def _answer(self, cmd: list[str], cwd: Path | None) -> str:
        if cmd[0] != str(self.config.brew):
            return super()._answer(cmd, cwd)

        sub, rest = cmd[1], cmd[2:]
        fail = CommandFailureError(cmd, 1)

        if sub == "list":
            return "\n".join(f"{n} {' '.join(self.kegs(n))}" for n in self.installed_names())

        if sub == "outdated":
            return "\n".join(
                n for n in self.installed_names()
                if n in self.catalog
                and VersionValue.parse(self.kegs(n)[-1]) < VersionValue.parse(self.catalog[n][0])
            )

        name = rest[-1].split("/")[-1] if rest else ""

        if sub == "info":
            if name not in self.catalog:
                raise fail
            version, bottled = self.catalog[name]
            return json.dumps([{"name": name, "versions": {"stable": version, "bottle": bottled}}])

        if sub == "install":
            if name in self.fail_install or name not in self.catalog:
                raise fail
            (self.config.cellar / name / self.catalog[name][0]).mkdir(parents=True, exist_ok=True)
            return ""

        if sub == "rm":
            if not self.kegs(name):
                raise fail
            shutil.rmtree(self.config.cellar / name)
            marker = self.config.linked_kegs / name
            if marker.is_symlink():
                marker.unlink()
            return ""

        if sub == "link":
            if name in self.keg_only or not self.kegs(name) or self.is_linked(name):
                raise fail
            self.config.linked_kegs.mkdir(parents=True, exist_ok=True)
            keg = self.config.cellar / name / self.kegs(name)[-1]
            os.symlink(keg, self.config.linked_kegs / name)
            return ""

        if sub == "unlink":
            if not self.is_linked(name):
                raise fail
            (self.config.linked_kegs / name).unlink()
            return ""

        return super()._answer(cmd, cwd)


# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture
def config(tmp_path: Path) -> BrewConfig:
    """A BrewConfig rooted in an isolated temporary prefix."""
    return BrewConfig(prefix=tmp_path / "usr", cache_dir=tmp_path / "cache")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fake_brew(config: BrewConfig) -> FakeBrew:
    config.tap_path.mkdir(parents=True, exist_ok=True)
    return FakeBrew(config)


@pytest.fixture
def make_keg(config: BrewConfig) -> Callable[..., Path]:
    """Create ``Cellar/<name>/<version>`` directories."""

    def _make(name: str, *versions: str) -> Path:
        for v in versions:
            (config.cellar / name / v).mkdir(parents=True, exist_ok=True)
        return config.cellar / name

    return _make


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def make_exe() -> Callable[[Path], Path]:
    """Create an executable stub file."""
    return _make_executable


@pytest.fixture
def make_tarball() -> Callable[[dict[str, bytes]], bytes]:
    """Build an in-memory ``.tar.gz`` from ``{member name: contents}``."""

    def _make(files: dict[str, bytes]) -> bytes:
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            for name, data in files.items():
                info = tarfile.TarInfo(name)
                info.size = len(data)
                info.mode = 0o755
                tar.addfile(info, io.BytesIO(data))
        return buf.getvalue()

    return _make


@pytest.fixture
def installed_backend(config: BrewConfig, fake_runner: FakeRunner) -> FakeRunner:
    """A prefix where brew, the tools bundle and the tap are all present."""
    _make_executable(config.brew)
    _make_executable(config.otool)
    config.tap_path.mkdir(parents=True)
    fake_runner.on("config", "remote.origin.url", output=config.brew_url)
    return fake_runner
