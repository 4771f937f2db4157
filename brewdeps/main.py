"""
brewdeps — CLI entrypoint.

Usage:
    python -m brewdeps.main --help
    brewdeps setup
    brewdeps packages add libpng
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import click

from brewdeps import __version__
from brewdeps.core.config.loader import ConfigError
from brewdeps.core.errors import BrewDepsError
from brewdeps.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)
from brewdeps.ui.cli.common import fail, get_config, get_packages, get_runner


@click.group()
@click.version_option(version=__version__, prog_name="brewdeps")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to brewdeps.yml (default: $BREWDEPS_CONFIG or built-in defaults).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """brewdeps — a private Homebrew for native library dependencies."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@click.pass_context
def setup(ctx: click.Context) -> None:
    """Install or repair the vendored backend."""
    try:
        mgr = get_packages(ctx)
    except (BrewDepsError, ConfigError) as e:
        fail(str(e))

    if not ctx.obj.get("quiet"):
        click.secho("✅ Backend ready", fg="green", bold=True)
        click.echo(f"   Prefix: {mgr.prefix()}")


@cli.command()
@click.pass_context
def update(ctx: click.Context) -> None:
    """Sync the backend and tap, then upgrade outdated formulas."""
    from brewdeps.core.services.backend_installer import BackendInstaller

    try:
        mgr = get_packages(ctx)
        BackendInstaller(get_config(ctx), get_runner(ctx)).update(mgr)
    except (BrewDepsError, ConfigError) as e:
        fail(str(e))

    if not ctx.obj.get("quiet"):
        click.secho("✅ Backend updated", fg="green", bold=True)


@cli.command()
@click.argument("name", required=False)
@click.pass_context
def prefix(ctx: click.Context, name: str | None) -> None:
    """Print the installation prefix, or the active keg of NAME."""
    from brewdeps.core.services.package_state import PackageStateManager

    try:
        click.echo(str(PackageStateManager(get_config(ctx)).prefix(name)))
    except (BrewDepsError, ConfigError) as e:
        fail(str(e))


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved configuration and derived paths."""
    try:
        cfg = get_config(ctx)
    except ConfigError as e:
        fail(str(e), as_json=as_json)

    data = cfg.model_dump(mode="json")
    data["paths"] = {
        "brew": str(cfg.brew),
        "cellar": str(cfg.cellar),
        "tap": str(cfg.tap_path),
        "linked_kegs": str(cfg.linked_kegs),
    }

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("⚙️  brewdeps configuration", fg="cyan", bold=True)
    for key, value in data.items():
        if key == "paths":
            continue
        click.echo(f"   {key:<18} {value}")
    click.echo()
    for key, value in data["paths"].items():
        click.echo(f"   {key:<18} {value}")


# ── Register sub-command groups from brewdeps/ui/cli/ ─────────────

from brewdeps.ui.cli.packages import packages  # noqa: E402

cli.add_command(packages)


if __name__ == "__main__":
    cli()
