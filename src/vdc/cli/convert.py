"""Convert command."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any

import click

from vdc.cli.output import echo_fields, fail, format_option, to_json
from vdc.cli.runtime import asset_from_argument, open_runtime
from vdc.config import VDCConfig
from vdc.core import format_file_size
from vdc.domain import ConversionResult, SkippedAsset, VideoDescription
from vdc.exceptions import VDCError
from vdc.logging import Reporter

logger = logging.getLogger(__name__)

ANCHORS = click.Choice(["start", "center", "end"])


async def _convert(
    config: VDCConfig,
    reporter: Reporter,
    source: str,
    media_type: str | None,
    profile: str,
    values: dict[str, Any],
) -> tuple[ConversionResult, VideoDescription] | SkippedAsset:
    async with open_runtime(config, reporter) as runtime:
        resolved = await runtime.resolver.resolve(
            asset_from_argument(source, media_type)
        )
        if isinstance(resolved, SkippedAsset):
            return resolved
        result = await runtime.converter.convert(resolved, profile, values)
        description = await runtime.converter.describe(result.public_path)
        return result, description


@click.command("convert")
@click.argument("source")
@click.option(
    "--profile",
    "-p",
    default="h264",
    show_default=True,
    help="Profile: h264, h265, vp9, webp, gif or a configured custom profile.",
)
@click.option("--media-type", default=None, help="Override the guessed media type.")
@click.option("--max-width", type=int, default=None, help="Maximum output width.")
@click.option("--max-height", type=int, default=None, help="Maximum output height.")
@click.option("--duration", type=float, default=None, help="Squeeze into N seconds.")
@click.option("--fps", type=int, default=None, help="Output frame rate.")
@click.option("--saturation", type=float, default=None, help="Saturation multiplier.")
@click.option("--overlay", default=None, help="Overlay image, relative to the root.")
@click.option("--overlay-x", type=ANCHORS, default=None, help="Horizontal anchor.")
@click.option("--overlay-y", type=ANCHORS, default=None, help="Vertical anchor.")
@click.option("--overlay-padding", type=int, default=None, help="Padding in pixels.")
@click.option("--crf", type=int, default=None, help="Constant rate factor.")
@click.option(
    "--no-crf",
    is_flag=True,
    help="Disable CRF so --max-rate/--buf-size control the rate (h264/h265).",
)
@click.option("--preset", default=None, help="Encoder preset (h264/h265).")
@click.option("--max-rate", default=None, help="Maximum bitrate, e.g. 1500k.")
@click.option("--buf-size", default=None, help="Rate control buffer size.")
@click.option("--bitrate", default=None, help="Target bitrate (vp9).")
@click.option("--min-rate", default=None, help="Minimum bitrate (vp9).")
@click.option("--cpu-used", type=int, default=None, help="Speed/quality (vp9).")
@click.option("--public-path", default=None, help="Path under the public dir.")
@format_option
@click.pass_context
def convert_command(
    ctx: click.Context,
    source: str,
    profile: str,
    media_type: str | None,
    output_format: str,
    **option_values: Any,
) -> None:
    """Convert SOURCE (a file path or http(s) URL) with a profile.

    Cached artifacts from this or the previous build are reused; the
    result is published under the public directory.

    Examples:

    \b
        vdc convert intro.mov --profile vp9 --max-width 1280
        vdc convert intro.mov -p gif --duration 3 --fps 10 --max-width 480
        vdc convert intro.mov --no-crf --max-rate 2M --buf-size 4M
    """
    config: VDCConfig = ctx.obj["config"]
    reporter: Reporter = ctx.obj["reporter"]
    json_output = output_format == "json"
    no_crf = option_values.pop("no_crf")
    values = {k: v for k, v in option_values.items() if v is not None}
    if no_crf:
        if "crf" in values:
            raise click.UsageError("--crf and --no-crf are mutually exclusive")
        values["crf"] = None

    try:
        outcome = asyncio.run(
            _convert(config, reporter, source, media_type, profile, values)
        )
    except VDCError as e:
        fail(e, json_output)

    if isinstance(outcome, SkippedAsset):
        if json_output:
            click.echo(to_json({"status": "skipped", "reason": outcome.reason}))
        else:
            click.echo(f"Skipped {outcome.asset_id}: {outcome.reason}")
        return

    result, description = outcome
    if json_output:
        click.echo(
            to_json(
                {
                    "status": "completed",
                    "cache_key": str(result.cache_key),
                    "from_cache": result.from_cache,
                    "video": asdict(description),
                }
            )
        )
        return

    echo_fields(
        {
            "path": description.path,
            "file": description.absolute_path,
            "cache key": result.cache_key,
            "from cache": "yes" if result.from_cache else "no",
            "format": description.format_long_name,
            "duration": description.duration,
            "size": (
                format_file_size(description.size)
                if description.size is not None
                else None
            ),
            "dimensions": (
                f"{description.width}x{description.height}"
                if description.width and description.height
                else None
            ),
        }
    )
