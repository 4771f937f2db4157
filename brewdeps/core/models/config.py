"""
BrewConfig — the installation prefix and everything derived from it.

Constructed once at startup (see ``brewdeps.core.config.loader``) and
handed to every component by reference.  Tests build their own with
an isolated ``prefix``.

Layout under the prefix::

    <prefix>/bin/brew                       backend executable
    <prefix>/Library/Taps/<org>/homebrew-<name>   extra formula tap
    <prefix>/Cellar/<name>/<version>        installed kegs
    <prefix>/Library/LinkedKegs/<name>      symlink marker of a linked keg
"""

from __future__ import annotations

import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


def default_prefix() -> Path:
    """The prefix brewdeps uses when none is configured.

    Derived from brewdeps' own install location, so it does not depend
    on the caller's working directory.
    """
    return Path(__file__).resolve().parents[2] / "deps" / "usr"


class BrewConfig(BaseModel):
    """Process-wide backend configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    prefix: Path = Field(default_factory=default_prefix)

    # ── Backend repository ───────────────────────────────────────
    brew_url: str = "https://github.com/Homebrew/homebrew.git"
    brew_branch: str = "master"

    # ── Helper tools bundle ──────────────────────────────────────
    bottle_server: str = "https://juliabottles.s3.amazonaws.com"
    tools_bundle: str = "cctools_bundle.tar.gz"

    # ── Extra formula tap ────────────────────────────────────────
    tap: str = "staticfloat/juliadeps"
    tap_branch: str = "master"
    old_tap_dir: str = "staticfloat-juliadeps"   # pre-rename tap layout

    # ── Environment ──────────────────────────────────────────────
    cache_env_var: str = "HOMEBREW_CACHE"
    cache_dir: Path | None = None         # None = ~/Library/Caches/brewdeps/
    library_path_var: str | None = None   # None = platform default

    @field_validator("prefix", mode="after")
    @classmethod
    def _absolute_prefix(cls, value: Path) -> Path:
        return value.expanduser().absolute()

    @field_validator("tap")
    @classmethod
    def _tap_has_org(cls, value: str) -> str:
        org, _, name = value.partition("/")
        if not org or not name or "/" in name:
            raise ValueError(f"tap must look like 'org/name', got {value!r}")
        return value

    # ── Derived paths ────────────────────────────────────────────

    @property
    def bin_dir(self) -> Path:
        return self.prefix / "bin"

    @property
    def sbin_dir(self) -> Path:
        return self.prefix / "sbin"

    @property
    def lib_dir(self) -> Path:
        return self.prefix / "lib"

    @property
    def brew(self) -> Path:
        """The backend executable."""
        return self.bin_dir / "brew"

    @property
    def otool(self) -> Path:
        """Marker binary of the helper tools bundle."""
        return self.bin_dir / "otool"

    @property
    def cellar(self) -> Path:
        return self.prefix / "Cellar"

    @property
    def linked_kegs(self) -> Path:
        return self.prefix / "Library" / "LinkedKegs"

    @property
    def tap_path(self) -> Path:
        org, name = self.tap.split("/")
        return self.prefix / "Library" / "Taps" / org / f"homebrew-{name}"

    @property
    def old_tap_path(self) -> Path:
        return self.prefix / "Library" / "Taps" / self.old_tap_dir

    @property
    def tools_bundle_url(self) -> str:
        return f"{self.bottle_server.rstrip('/')}/{self.tools_bundle}"

    @property
    def fetch_refspec(self) -> str:
        return f"+refs/heads/{self.brew_branch}:refs/remotes/origin/{self.brew_branch}"

    def resolved_library_path_var(self, platform: str | None = None) -> str:
        """Name of the dynamic-library search path variable."""
        if self.library_path_var:
            return self.library_path_var
        if (platform or sys.platform) == "darwin":
            return "DYLD_FALLBACK_LIBRARY_PATH"
        return "LD_LIBRARY_PATH"
