"""
Shared CLI plumbing — config, bootstrap and error reporting.

The backend is bootstrapped at most once per process: the first
command that needs it runs ``bootstrap()`` and caches the resulting
state manager on the click context object.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from brewdeps.core.config.loader import load_config
from brewdeps.core.models.config import BrewConfig
from brewdeps.core.services.package_state import PackageStateManager
from brewdeps.core.services.process_runner import ProcessRunner
from brewdeps.core.use_cases.bootstrap import bootstrap


def get_config(ctx: click.Context) -> BrewConfig:
    """Resolve (and cache) the BrewConfig for this invocation."""
    obj = ctx.find_root().obj
    if obj.get("config") is None:
        config_path: Path | None = obj.get("config_path")
        obj["config"] = load_config(config_path)
    return obj["config"]


def get_runner(ctx: click.Context) -> ProcessRunner:
    obj = ctx.find_root().obj
    if obj.get("runner") is None:
        obj["runner"] = ProcessRunner()
    return obj["runner"]


def get_packages(ctx: click.Context) -> PackageStateManager:
    """State manager on a bootstrapped backend."""
    obj = ctx.find_root().obj
    if obj.get("packages") is None:
        obj["packages"] = bootstrap(
            get_config(ctx),
            get_runner(ctx),
            environ=obj.get("environ"),
        )
    return obj["packages"]


def fail(message: str, *, as_json: bool = False) -> NoReturn:
    """Report an error and exit 1."""
    if as_json:
        click.echo(json.dumps({"error": message}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)
