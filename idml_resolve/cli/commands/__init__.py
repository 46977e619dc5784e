"""CLI commands for idml-resolve."""

from idml_resolve.cli.commands.batch import batch
from idml_resolve.cli.commands.resolve import resolve
from idml_resolve.cli.commands.swatches import swatches

__all__ = ["resolve", "batch", "swatches"]
