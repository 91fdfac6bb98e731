"""Probe command: print stream metadata."""

from __future__ import annotations

from pathlib import Path

import click

from vdc.cli.output import echo_fields, fail, format_option, to_json
from vdc.config import VDCConfig
from vdc.core import format_file_size
from vdc.exceptions import VDCError
from vdc.introspector import FFprobeProber
from vdc.tools import locate_tool


@click.command("probe")
@click.argument("source", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@format_option
@click.pass_context
def probe_command(ctx: click.Context, source: Path, output_format: str) -> None:
    """Show the stream metadata ffprobe reports for SOURCE."""
    config: VDCConfig = ctx.obj["config"]
    json_output = output_format == "json"
    try:
        ffprobe = locate_tool(
            "ffprobe",
            config.ffprobe_path,
            config.cache_bin_dir,
            config.download_binaries,
        )
        metadata = FFprobeProber(ffprobe).probe(source)
    except VDCError as e:
        fail(e, json_output)

    if json_output:
        click.echo(to_json(metadata))
        return

    echo_fields(
        {
            "format": metadata.format_long_name or metadata.format_name,
            "duration": metadata.source_duration,
            "size": (
                format_file_size(metadata.size) if metadata.size is not None else None
            ),
            "bit rate": metadata.bit_rate,
            "dimensions": (
                f"{metadata.width}x{metadata.height}"
                if metadata.width and metadata.height
                else None
            ),
            "frame rate": metadata.current_fps,
        }
    )
    for stream in metadata.streams:
        click.echo(f"  #{stream.index} {stream.codec_type}: {stream.codec_name or '?'}")
