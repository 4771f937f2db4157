"""
Bootstrap use case — bring the vendored backend up for this process.

Entry points call ``bootstrap()`` once at start-up.  Environment
mutations come first: every backend command issued by the installer
sees the private PATH and cache directory.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping

from brewdeps.core.models.config import BrewConfig
from brewdeps.core.services.backend_installer import BackendInstaller
from brewdeps.core.services.environment import EnvironmentConfigurator
from brewdeps.core.services.package_state import PackageStateManager
from brewdeps.core.services.process_runner import ProcessRunner

logger = logging.getLogger(__name__)


def bootstrap(
    config: BrewConfig,
    runner: ProcessRunner | None = None,
    *,
    environ: MutableMapping[str, str] | None = None,
    installer: BackendInstaller | None = None,
) -> PackageStateManager:
    """Configure the environment, ensure the backend, return a state manager.

    Raises:
        BootstrapError: clone, repair, download or tap failed.
    """
    runner = runner or ProcessRunner()
    EnvironmentConfigurator(config, environ).apply()
    (installer or BackendInstaller(config, runner)).ensure_installed()
    logger.debug("Backend ready at %s", config.prefix)
    return PackageStateManager(config, runner)
