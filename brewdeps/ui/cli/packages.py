"""
CLI commands for vendored package management.

Thin wrappers over ``brewdeps.core.services.package_state``.
"""

from __future__ import annotations

import json

import click

from brewdeps.core.config.loader import ConfigError
from brewdeps.core.errors import BrewDepsError
from brewdeps.core.models.package import PackageRecord
from brewdeps.ui.cli.common import fail, get_config, get_packages


def _record_dict(record: PackageRecord) -> dict:
    return record.model_dump(mode="json")


@click.group()
def packages() -> None:
    """Packages — list, outdated, info, add, rm, upgrade, status."""


# ── Observe ─────────────────────────────────────────────────────


@packages.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List installed formulas."""
    try:
        records = get_packages(ctx).list()
    except (BrewDepsError, ConfigError) as e:
        fail(str(e), as_json=as_json)

    if as_json:
        click.echo(json.dumps([_record_dict(r) for r in records], indent=2))
        return

    if not records:
        click.secho("No packages installed", fg="yellow")
        return

    click.secho(f"📦 Installed ({len(records)}):", fg="cyan", bold=True)
    for r in records:
        click.echo(f"   {r.name:<30} {r.version}")


@packages.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def outdated(ctx: click.Context, as_json: bool) -> None:
    """List installed formulas with a newer version available."""
    try:
        records = get_packages(ctx).outdated()
    except (BrewDepsError, ConfigError) as e:
        fail(str(e), as_json=as_json)

    if as_json:
        click.echo(json.dumps([_record_dict(r) for r in records], indent=2))
        return

    if not records:
        click.secho("✅ All packages up to date", fg="green")
        return

    click.secho(f"📦 Outdated ({len(records)}):", fg="yellow", bold=True)
    for r in records:
        click.echo(f"   {r}")


@packages.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show the backend's record for a formula."""
    try:
        record = get_packages(ctx).info(name)
    except (BrewDepsError, ConfigError) as e:
        fail(str(e), as_json=as_json)

    if as_json:
        click.echo(json.dumps(_record_dict(record), indent=2))
        return
    click.echo(str(record))


@packages.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show whether a formula is installed and linked (no backend call)."""
    from brewdeps.core.services.package_state import PackageStateManager

    try:
        mgr = PackageStateManager(get_config(ctx))
    except ConfigError as e:
        fail(str(e), as_json=as_json)

    result = {"name": name, "installed": mgr.installed(name), "linked": mgr.linked(name)}
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    inst = "✅ installed" if result["installed"] else "❌ not installed"
    link = "linked" if result["linked"] else "not linked"
    click.echo(f"{name}: {inst}, {link}")


# ── Act ─────────────────────────────────────────────────────────


@packages.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def add(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Install (or reinstall) formulas, preferring bottles."""
    try:
        mgr = get_packages(ctx)
        for name in names:
            mgr.add(name)
            click.secho(f"✅ {name}", fg="green")
    except (BrewDepsError, ConfigError) as e:
        fail(str(e))


@packages.command("rm")
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def rm_cmd(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Force-remove formulas."""
    try:
        mgr = get_packages(ctx)
        for name in names:
            mgr.remove(name)
            click.secho(f"🗑  {name}", fg="green")
    except (BrewDepsError, ConfigError) as e:
        fail(str(e))


@packages.command()
@click.pass_context
def upgrade(ctx: click.Context) -> None:
    """Upgrade every outdated formula (remove, then re-add)."""
    try:
        done = get_packages(ctx).upgrade()
    except (BrewDepsError, ConfigError) as e:
        fail(str(e))

    if not done:
        click.secho("✅ All packages up to date", fg="green")
        return
    for r in done:
        click.echo(f"   ⬆️  {r}")
