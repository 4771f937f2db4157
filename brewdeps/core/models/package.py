"""
PackageRecord — one backend formula as brewdeps knows it.

Records are only ever built from parsed backend output (``brew info``
or ``brew list``); they are immutable values.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from brewdeps.core.models.version import VersionValue

if TYPE_CHECKING:
    from brewdeps.core.models.config import BrewConfig


class PackageRecord(BaseModel):
    """A formula with its version and bottle availability.

    ``bottled`` is ``None`` when the source of the record cannot tell
    (``brew list --versions`` says nothing about bottles).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    version: VersionValue
    bottled: bool | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _parse_version(cls, value: object) -> object:
        if isinstance(value, str):
            return VersionValue.parse(value)
        return value

    @field_serializer("version")
    def _dump_version(self, value: VersionValue) -> str:
        return str(value)

    def cellar_path(self, config: BrewConfig) -> Path:
        """Keg directory for this exact version."""
        return config.cellar / self.name / str(self.version)

    def __str__(self) -> str:
        suffix = " (bottled)" if self.bottled else ""
        return f"{self.name}: {self.version}{suffix}"


PackageRef = Union[str, PackageRecord]


def package_name(pkg: PackageRef) -> str:
    """Name of a package given either its name or a fetched record."""
    if isinstance(pkg, PackageRecord):
        return pkg.name
    return pkg
