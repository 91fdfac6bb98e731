"""Screenshots command."""

from __future__ import annotations

import asyncio

import click

from vdc.cli.output import fail, format_option, to_json
from vdc.cli.runtime import asset_from_argument, open_runtime
from vdc.config import VDCConfig
from vdc.domain import ScreenshotResult, SkippedAsset
from vdc.exceptions import VDCError
from vdc.logging import Reporter


async def _screenshots(
    config: VDCConfig,
    reporter: Reporter,
    source: str,
    media_type: str | None,
    timestamps: tuple[str, ...],
    width: int | None,
) -> ScreenshotResult | SkippedAsset:
    async with open_runtime(config, reporter) as runtime:
        resolved = await runtime.resolver.resolve(
            asset_from_argument(source, media_type)
        )
        if isinstance(resolved, SkippedAsset):
            return resolved
        return await runtime.converter.take_screenshots(
            resolved,
            {"timestamps": timestamps or None, "width": width},
        )


@click.command("screenshots")
@click.argument("source")
@click.option(
    "--timestamp",
    "-t",
    "timestamps",
    multiple=True,
    help="Seconds ('1.5') or share of the duration ('50%'). Repeatable.",
)
@click.option("--width", type=int, default=None, help="Frame width (default 600).")
@click.option("--media-type", default=None, help="Override the guessed media type.")
@format_option
@click.pass_context
def screenshots_command(
    ctx: click.Context,
    source: str,
    timestamps: tuple[str, ...],
    width: int | None,
    media_type: str | None,
    output_format: str,
) -> None:
    """Extract JPEG frames from SOURCE at the given timestamps.

    Examples:

    \b
        vdc screenshots intro.mov -t 0 -t 50% --width 320
    """
    config: VDCConfig = ctx.obj["config"]
    reporter: Reporter = ctx.obj["reporter"]
    json_output = output_format == "json"

    try:
        outcome = asyncio.run(
            _screenshots(config, reporter, source, media_type, timestamps, width)
        )
    except VDCError as e:
        fail(e, json_output)

    if isinstance(outcome, SkippedAsset):
        click.echo(f"Skipped {outcome.asset_id}: {outcome.reason}")
        return

    if json_output:
        click.echo(
            to_json(
                {
                    "cache_key": str(outcome.cache_key),
                    "from_cache": outcome.from_cache,
                    "paths": [str(p) for p in outcome.paths],
                }
            )
        )
        return
    for path in outcome.paths:
        click.echo(str(path))
