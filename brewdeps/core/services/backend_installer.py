"""
Backend installer — bootstrap and refresh the vendored Homebrew.

``ensure_installed()`` is idempotent and runs on every process start:

    1. create the prefix
    2. shallow-clone the backend if ``bin/brew`` is missing
    3. repair the clone in place if its origin URL is foreign
    4. drop the obsolete tap directory and prune
    5. fetch the helper tools bundle if ``bin/otool`` is missing
    6. tap our formula repository if it is missing

Each step checks before acting, so a second call on a healthy prefix
issues no clone, download or tap.  Network failures are never
retried; they surface immediately as ``BootstrapError``.
"""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from collections.abc import Callable
from pathlib import Path

from brewdeps.core.errors import BootstrapError, CommandFailureError
from brewdeps.core.models.config import BrewConfig
from brewdeps.core.services.download import download_and_extract
from brewdeps.core.services.git_ops import GitClient
from brewdeps.core.services.package_state import PackageStateManager
from brewdeps.core.services.process_runner import ProcessRunner, Stdio

logger = logging.getLogger(__name__)


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class BackendInstaller:
    """Make sure the vendored backend exists and is configured correctly.

    Args:
        config: Backend configuration.
        runner: Process runner for brew and git.
        downloader: ``(url, dest)`` callable used for the tools bundle.
    """

    def __init__(
        self,
        config: BrewConfig,
        runner: ProcessRunner | None = None,
        downloader: Callable[[str, Path], None] = download_and_extract,
    ) -> None:
        self.config = config
        self.runner = runner or ProcessRunner()
        self.git = GitClient(self.runner)
        self.downloader = downloader

    def ensure_installed(self) -> None:
        cfg = self.config
        cfg.prefix.mkdir(parents=True, exist_ok=True)

        if not _is_executable(cfg.brew):
            self._clone()

        if self.git.get_config("remote.origin.url", cwd=cfg.prefix) != cfg.brew_url:
            self._repair_remote()

        if cfg.old_tap_path.is_dir():
            logger.info("Removing obsolete tap %s", cfg.old_tap_path)
            shutil.rmtree(cfg.old_tap_path)
            self.runner.run([str(cfg.brew), "prune"])

        if not _is_executable(cfg.otool):
            self._install_tools()

        if not cfg.tap_path.is_dir():
            self._tap()

    def _clone(self) -> None:
        cfg = self.config
        logger.info("Cloning brew from %s", cfg.brew_url)
        try:
            self.git.clone(cfg.brew_url, cfg.prefix, branch=cfg.brew_branch, depth=1)
        except CommandFailureError as e:
            logger.error("Could not clone %s/%s into %s", cfg.brew_url, cfg.brew_branch, cfg.prefix)
            raise BootstrapError(
                f"Could not clone {cfg.brew_url}/{cfg.brew_branch} into {cfg.prefix}",
                url=cfg.brew_url,
                path=str(cfg.prefix),
            ) from e

    def _repair_remote(self) -> None:
        """Point an existing clone at the canonical remote and hard-reset it."""
        cfg = self.config
        logger.warning("Clone at %s has a foreign origin, resetting to %s", cfg.prefix, cfg.brew_url)
        try:
            self.git.set_config("remote.origin.url", cfg.brew_url, cwd=cfg.prefix)
            self.git.set_config("remote.origin.fetch", cfg.fetch_refspec, cwd=cfg.prefix)
            self.git.fetch(cwd=cfg.prefix, depth=1)
            self.git.reset_hard(f"origin/{cfg.brew_branch}", cwd=cfg.prefix)
        except CommandFailureError as e:
            raise BootstrapError(
                f"Could not repair clone at {cfg.prefix} from {cfg.brew_url}",
                url=cfg.brew_url,
                path=str(cfg.prefix),
            ) from e

    def _install_tools(self) -> None:
        cfg = self.config
        url = cfg.tools_bundle_url
        try:
            self.downloader(url, cfg.bin_dir)
        except (OSError, tarfile.TarError) as e:
            logger.error("Could not download/extract %s into %s", url, cfg.bin_dir)
            raise BootstrapError(
                f"Could not download/extract {url} into {cfg.bin_dir}: {e}",
                url=url,
                path=str(cfg.bin_dir),
            ) from e

    def _tap(self) -> None:
        cfg = self.config
        logger.info("Tapping %s", cfg.tap)
        try:
            self.runner.run([str(cfg.brew), "tap", cfg.tap], stdio=Stdio.QUIET)
        except CommandFailureError as e:
            logger.error("Could not tap %s", cfg.tap)
            raise BootstrapError(
                f"Could not tap {cfg.tap}", path=str(cfg.tap_path),
            ) from e

    def update(self, packages: PackageStateManager | None = None) -> None:
        """Sync the backend and tap clones to their remotes, then upgrade.

        Strictly ordered: if the backend sync fails, neither the tap
        sync nor the upgrade runs.
        """
        cfg = self.config
        logger.info("Updating backend at %s", cfg.prefix)
        self.git.fetch(cwd=cfg.prefix, depth=1)
        self.git.reset_hard(f"origin/{cfg.brew_branch}", cwd=cfg.prefix)

        logger.info("Updating tap %s", cfg.tap)
        self.git.fetch(cwd=cfg.tap_path)
        self.git.reset_hard(f"origin/{cfg.tap_branch}", cwd=cfg.tap_path)

        (packages or PackageStateManager(cfg, self.runner)).upgrade()
