"""CLI module for the Video Delivery Converter."""

import logging
from pathlib import Path

import click

from vdc.cli.output import error_exit, exit_code_for
from vdc.config import ConfigSource, get_config
from vdc.exceptions import ConfigurationError
from vdc.logging import LoggingReporter, configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="vdc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.vdc/config.toml or VDC_CONFIG_PATH).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Override log format (default: text).",
)
@click.option(
    "--root-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Project root; relative paths and overlays resolve against it.",
)
@click.option(
    "--production",
    is_flag=True,
    help="Treat this run as a production build (enables tier rotation).",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_format: str | None,
    root_dir: Path | None,
    production: bool,
) -> None:
    """Video Delivery Converter - cached multi-format video conversion."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        cli_source = ConfigSource(
            root_dir=root_dir,
            production=True if production else None,
            logging_level=log_level.lower() if log_level else None,
            logging_format=log_format,
        )
        try:
            ctx.obj["config"] = get_config(config_path, cli=cli_source)
        except ConfigurationError as e:
            error_exit(str(e), exit_code_for(e))

    config = ctx.obj["config"]
    configure_logging(
        level=config.logging.level,
        file=config.logging.file,
        fmt=config.logging.format,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
    )
    ctx.obj.setdefault("reporter", LoggingReporter(logging.getLogger("vdc.cli")))
    logger.debug(
        "Configuration loaded",
        extra={
            "root_dir": str(config.root_dir),
            "cache_dir": str(config.cache_dir),
            "production": config.production,
        },
    )


# Defer import to avoid circular dependency
def _register_commands():
    from vdc.cli.cache import cache_group
    from vdc.cli.convert import convert_command
    from vdc.cli.probe import probe_command
    from vdc.cli.screenshots import screenshots_command

    main.add_command(convert_command)
    main.add_command(screenshots_command)
    main.add_command(probe_command)
    main.add_command(cache_group)


_register_commands()
