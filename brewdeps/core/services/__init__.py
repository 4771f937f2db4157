"""
Backend services — package re-exports.

    from brewdeps.core.services import PackageStateManager, ProcessRunner

Leaf modules (runner, git, download, parser) come first; the
installer and state manager are built on top of them.
"""

# ── Leaves ──
from brewdeps.core.services.info_parser import parse_info  # noqa: F401
from brewdeps.core.services.process_runner import ProcessRunner, Stdio  # noqa: F401

# ── Environment ──
from brewdeps.core.services.environment import EnvironmentConfigurator  # noqa: F401

# ── Package state & bootstrap ──
from brewdeps.core.services.package_state import PackageStateManager  # noqa: F401
from brewdeps.core.services.backend_installer import BackendInstaller  # noqa: F401
