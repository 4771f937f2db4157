"""
Configuration loader — reads brewdeps.yml into a BrewConfig.

Configuration is optional: with no file every field takes its
default and the prefix lives under the brewdeps install directory.
The file is located by, in order:

    explicit path  >  $BREWDEPS_CONFIG  >  none (defaults)

It reads YAML, validates against the Pydantic schema, and returns
a frozen ``BrewConfig``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from brewdeps.core.models.config import BrewConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BREWDEPS_CONFIG"


class ConfigError(Exception):
    """Raised when brewdeps configuration is invalid or unreadable."""


def find_config_file() -> Path | None:
    """Config file named by ``$BREWDEPS_CONFIG``, if any."""
    value = os.environ.get(CONFIG_ENV_VAR)
    return Path(value) if value else None


def load_config(path: Path | None = None) -> BrewConfig:
    """Load and validate brewdeps configuration.

    Args:
        path: Explicit path to a YAML file.  If None, falls back to
            ``$BREWDEPS_CONFIG``, then to built-in defaults.

    Returns:
        Validated BrewConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No config file, using defaults")
        return BrewConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file means "all defaults"
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Relative prefixes are relative to the config file, not the cwd
    prefix = data.get("prefix")
    if isinstance(prefix, str) and not Path(prefix).expanduser().is_absolute():
        data["prefix"] = str(path.parent.resolve() / prefix)

    try:
        config = BrewConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid brewdeps configuration: {e}") from e

    logger.info("Loaded config from %s (prefix=%s)", path, config.prefix)
    return config
