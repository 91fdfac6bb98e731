"""Cache tier commands."""

from __future__ import annotations

import asyncio

import click

from vdc.cache import BuildLifecycle, TieredCacheStore
from vdc.cli.output import format_option, to_json
from vdc.config import VDCConfig


def _store(ctx: click.Context) -> tuple[VDCConfig, TieredCacheStore]:
    config: VDCConfig = ctx.obj["config"]
    return config, TieredCacheStore(config.cache_dir, ctx.obj["reporter"])


@click.group("cache")
def cache_group() -> None:
    """Manage the active/rolling cache tiers."""


@cache_group.command("rotate")
@click.option(
    "--force",
    is_flag=True,
    help="Rotate even when the run is not a production build.",
)
@click.pass_context
def rotate_command(ctx: click.Context, force: bool) -> None:
    """Move the active tier to rolling before a build.

    Runs only for production builds (--production, VDC_PRODUCTION or the
    config file) unless --force is given.
    """
    config, store = _store(ctx)
    lifecycle = BuildLifecycle(store, production=config.production or force)
    if asyncio.run(lifecycle.before_build()):
        click.echo("Cache tiers rotated")
    else:
        click.echo("Not a production build, cache tiers left as they are")


@cache_group.command("reconcile")
@click.pass_context
def reconcile_command(ctx: click.Context) -> None:
    """Settle the tiers after a build."""
    _, store = _store(ctx)
    asyncio.run(BuildLifecycle(store).after_build())
    click.echo("Cache tiers reconciled")


@cache_group.command("status")
@format_option
@click.pass_context
def status_command(ctx: click.Context, output_format: str) -> None:
    """Show which tiers exist and how many artifacts they hold."""
    _, store = _store(ctx)
    statuses = store.status()
    if output_format == "json":
        click.echo(to_json(statuses))
        return
    for status in statuses:
        if not status.exists:
            click.echo(f"{status.tier.value:8} absent")
            continue
        click.echo(
            f"{status.tier.value:8} {status.videos} videos, "
            f"{status.screenshots} screenshot sets  ({status.path})"
        )
