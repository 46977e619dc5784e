"""Entry point for the ``idml-resolve`` command."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from idml_resolve import __version__
from idml_resolve.cli.commands import batch, resolve, swatches
from idml_resolve.config import LOG_LEVELS, Config
from idml_resolve.exceptions import ConfigError

console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route package logging through rich at ``level``."""
    logger = logging.getLogger("idml_resolve")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


@click.group()
@click.version_option(__version__, prog_name="idml-resolve")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides config)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """Resolve IDML page items into placed, styled element records."""
    try:
        config = Config.load(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    level = (log_level or config.log_level).upper()
    configure_logging(level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(resolve)
cli.add_command(batch)
cli.add_command(swatches)


if __name__ == "__main__":
    cli()
