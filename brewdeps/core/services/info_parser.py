"""
Parse ``brew info --json=v1`` output into a ``PackageRecord``.

Pure function, no I/O.  Missing or malformed fields are errors:
nothing is defaulted.
"""

from __future__ import annotations

import json
from typing import Any

from brewdeps.core.errors import ParseError
from brewdeps.core.models.package import PackageRecord
from brewdeps.core.models.version import VersionValue


def _require(obj: dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in obj:
        raise ParseError(f"Missing '{key}' in {where}")
    value = obj[key]
    # bool is an int subclass; never accept one for the other
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise ParseError(
            f"Expected {kind.__name__} for '{key}' in {where}, got {type(value).__name__}"
        )
    return value


def parse_info(json_text: str) -> PackageRecord:
    """Convert backend package-info JSON into a record.

    Expects a JSON array and uses its first element.

    Raises:
        ParseError: empty input, empty array, invalid JSON, or absent /
            mistyped ``name``, ``versions.stable`` or ``versions.bottle``.
    """
    if not json_text or not json_text.strip():
        raise ParseError("Backend returned no package info")

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in package info: {e}") from e

    if not isinstance(data, list):
        raise ParseError(f"Expected a JSON array, got {type(data).__name__}")
    if not data:
        raise ParseError("Package info array is empty")

    obj = data[0]
    if not isinstance(obj, dict):
        raise ParseError(f"Expected a JSON object, got {type(obj).__name__}")

    name = _require(obj, "name", str, "package info")
    if not name:
        raise ParseError("Empty 'name' in package info")
    versions = _require(obj, "versions", dict, f"info for {name}")
    stable = _require(versions, "stable", str, f"versions of {name}")
    bottled = _require(versions, "bottle", bool, f"versions of {name}")

    return PackageRecord(name=name, version=VersionValue.parse(stable), bottled=bottled)
