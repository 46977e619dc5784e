"""Command-line interface for idml-resolve."""

from idml_resolve.cli.main import cli

__all__ = ["cli"]
