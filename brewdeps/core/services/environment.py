"""
Environment configuration — make the vendored backend findable.

Applied once at process start, before any backend command runs:

    - prepend ``<prefix>/bin`` and ``<prefix>/sbin`` to ``PATH``
    - append ``<prefix>/lib`` to the dynamic-library search path
    - point the backend's cache variable at a brewdeps-private directory,
      separate from the cache of a user-managed Homebrew

Every step checks before mutating, so applying twice is harmless.
Directories are not created here; the backend does that on first use.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from pathlib import Path

from brewdeps.core.models.config import BrewConfig

logger = logging.getLogger(__name__)

# Relative to $HOME
_CACHE_SUBDIR = Path("Library") / "Caches" / "brewdeps"


def _split(value: str) -> list[str]:
    return [p for p in value.split(os.pathsep) if p]


class EnvironmentConfigurator:
    """Apply brewdeps' environment mutations to a mapping.

    Args:
        config: Backend configuration.
        environ: Mapping to mutate (default: ``os.environ``).
        platform: Platform name used to pick the library path variable
            (default: ``sys.platform``).
    """

    def __init__(
        self,
        config: BrewConfig,
        environ: MutableMapping[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        self.config = config
        self.environ = os.environ if environ is None else environ
        self.platform = platform or sys.platform

    def cache_dir(self) -> Path:
        """The private cache directory exported to the backend."""
        if self.config.cache_dir is not None:
            return self.config.cache_dir
        home = self.environ.get("HOME") or str(Path.home())
        return Path(home) / _CACHE_SUBDIR

    def apply(self) -> None:
        cfg = self.config
        env = self.environ

        # ── Executable search path (prepend) ───────────────────────
        path = _split(env.get("PATH", ""))
        if str(cfg.bin_dir) not in path:
            env["PATH"] = os.pathsep.join([str(cfg.bin_dir), str(cfg.sbin_dir), *path])
            logger.debug("Prepended %s to PATH", cfg.bin_dir)

        # ── Dynamic-library search path (append) ───────────────────
        lib_var = cfg.resolved_library_path_var(self.platform)
        libs = _split(env.get(lib_var, ""))
        if str(cfg.lib_dir) not in libs:
            env[lib_var] = os.pathsep.join([*libs, str(cfg.lib_dir)])
            logger.debug("Appended %s to %s", cfg.lib_dir, lib_var)

        # ── Private download cache ─────────────────────────────────
        env[cfg.cache_env_var] = str(self.cache_dir()) + os.sep
