"""Swatches command - list the resolved document colors and gradients."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from idml_resolve import IdmlPackage, IdmlResolver
from idml_resolve.diagnostics import DiagnosticLog
from idml_resolve.exceptions import IdmlResolveError

console = Console()


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--gradients/--no-gradients", default=True, help="Include gradient swatches")
@click.pass_context
def swatches(ctx: click.Context, input_file: Path, gradients: bool) -> None:
    """List the swatches of INPUT_FILE as resolved RGBA values."""
    try:
        package = IdmlPackage.open(input_file)
    except IdmlResolveError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    log = DiagnosticLog()
    resources = IdmlResolver(config=ctx.obj.get("config")).load_resources(package, log)

    table = Table(title="Colors")
    table.add_column("Swatch", style="cyan")
    table.add_column("Hex")
    table.add_column("R", justify="right")
    table.add_column("G", justify="right")
    table.add_column("B", justify="right")
    for key, color in resources.colors.items():
        hex_value = color.to_hex()
        table.add_row(
            key,
            f"[{hex_value}]■[/] {hex_value}",
            f"{color.r:.3f}",
            f"{color.g:.3f}",
            f"{color.b:.3f}",
        )
    console.print(table)

    if gradients and resources.gradients:
        gtable = Table(title="Gradients")
        gtable.add_column("Swatch", style="cyan")
        gtable.add_column("Type", style="green")
        gtable.add_column("Stops")
        for key, gradient in resources.gradients.items():
            stops = ", ".join(f"{s.color.to_hex()}@{s.position:.2f}" for s in gradient.stops)
            gtable.add_row(key, gradient.type.value, stops)
        console.print(gtable)

    console.print(f"\n[bold]Total:[/bold] {len(resources.colors)} colors, {len(resources.gradients)} gradients")
    for d in log:
        console.print(f"[yellow]{d.severity.value}:[/yellow] {d.code} {d.element_id or ''} {d.message}")
