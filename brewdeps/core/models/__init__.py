"""
Domain models — configuration, package records and versions.

All models are re-exported here for convenient access:

    from brewdeps.core.models import BrewConfig, PackageRecord, VersionValue
"""

from brewdeps.core.models.config import BrewConfig, default_prefix
from brewdeps.core.models.package import PackageRecord, PackageRef, package_name
from brewdeps.core.models.version import VersionValue

__all__ = [
    # config.py
    "BrewConfig",
    # package.py
    "PackageRecord",
    "PackageRef",
    # version.py
    "VersionValue",
    "default_prefix",
    "package_name",
]
