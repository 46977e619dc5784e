"""Resolve command - resolve one IDML document to JSON."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from idml_resolve import ConversionResult, IdmlResolver
from idml_resolve.config import Config
from idml_resolve.exceptions import IdmlResolveError

console = Console()


def print_diagnostics(result: ConversionResult, target: Console = console) -> None:
    """Print the diagnostics report as a table."""
    if not len(result.diagnostics):
        target.print("[green]No diagnostics[/green]")
        return

    table = Table(title="Diagnostics")
    table.add_column("Severity")
    table.add_column("Code", style="cyan")
    table.add_column("Element", style="dim")
    table.add_column("Message")
    colors = {"error": "red", "warning": "yellow", "info": "blue"}
    for d in result.diagnostics:
        color = colors[d.severity.value]
        table.add_row(f"[{color}]{d.severity.value}[/{color}]", d.code, d.element_id or "", d.message)
    target.print(table)


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output JSON file (default: stdout)")
@click.option("-p", "--precision", type=int, help="Path coordinate precision")
@click.option(
    "--unit-scale",
    type=float,
    help="Divide point lengths by this factor on export (72 for inches)",
)
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.option("--quiet", "-q", is_flag=True, help="Do not print the diagnostics table")
@click.pass_context
def resolve(
    ctx: click.Context,
    input_file: Path,
    output: Path | None,
    precision: int | None,
    unit_scale: float | None,
    pretty: bool,
    quiet: bool,
) -> None:
    """Resolve the page items of INPUT_FILE.

    INPUT_FILE: Path to an .idml package.
    """
    config: Config = ctx.obj.get("config") or Config.load()
    scale = unit_scale if unit_scale is not None else config.unit_scale
    if scale <= 0:
        raise click.BadParameter("must be positive", param_hint="--unit-scale")

    resolver = IdmlResolver(config=config, precision=precision)
    try:
        result = resolver.resolve_file(input_file)
    except IdmlResolveError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    payload = json.dumps(result.to_dict(unit_scale=scale), indent=2 if pretty else None)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        if not quiet:
            console.print(f"[green]Wrote[/green] {output}")
    else:
        click.echo(payload)

    if not quiet:
        print_diagnostics(result, Console(stderr=True) if not output else console)
