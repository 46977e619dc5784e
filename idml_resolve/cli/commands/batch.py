"""Batch command - resolve multiple IDML files."""

from __future__ import annotations

import concurrent.futures
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import Progress

from idml_resolve import ConversionResult, IdmlResolver
from idml_resolve.config import Config

console = Console()


@click.command()
@click.argument("inputs", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--output-dir", "-o", type=click.Path(path_type=Path), required=True, help="Output directory")
@click.option("--batch-file", type=click.Path(exists=True, path_type=Path), help="File containing list of inputs")
@click.option("-p", "--precision", type=int, help="Path coordinate precision")
@click.option("--unit-scale", type=float, help="Divide point lengths by this factor on export")
@click.option("--suffix", default="", help="Output filename suffix")
@click.option("-j", "--jobs", type=int, default=4, help="Parallel jobs")
@click.option("--continue-on-error", is_flag=True, help="Continue processing on errors")
@click.pass_context
def batch(
    ctx: click.Context,
    inputs: tuple[Path, ...],
    output_dir: Path,
    batch_file: Optional[Path],
    precision: Optional[int],
    unit_scale: Optional[float],
    suffix: str,
    jobs: int,
    continue_on_error: bool,
) -> None:
    """Resolve multiple IDML files to JSON.

    INPUTS: Paths to .idml files or folders containing them.
    """
    config: Config = ctx.obj.get("config") or Config.load()
    scale = unit_scale if unit_scale is not None else config.unit_scale

    # Collect all input files
    all_inputs: list[Path] = []
    for path in inputs:
        if path.is_dir():
            all_inputs.extend(sorted(path.glob("*.idml")))
        else:
            all_inputs.append(path)

    if batch_file:
        with open(batch_file) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    all_inputs.append(Path(line))

    if not all_inputs:
        console.print("[red]Error:[/red] No input files specified")
        raise SystemExit(1)

    output_dir.mkdir(parents=True, exist_ok=True)

    resolver = IdmlResolver(config=config, precision=precision)

    success_count = 0
    error_count = 0

    def process_file(input_path: Path) -> ConversionResult:
        result = resolver.resolve_file(input_path)
        output_path = output_dir / f"{input_path.stem}{suffix}.json"
        output_path.write_text(json.dumps(result.to_dict(unit_scale=scale), indent=2) + "\n", encoding="utf-8")
        return result

    with Progress(console=console) as progress:
        task = progress.add_task("[green]Resolving...", total=len(all_inputs))

        with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, jobs)) as executor:
            future_to_path = {executor.submit(process_file, p): p for p in all_inputs}

            for future in concurrent.futures.as_completed(future_to_path):
                input_path = future_to_path[future]
                try:
                    result = future.result()
                    if result.success:
                        success_count += 1
                    else:
                        error_count += 1
                        if not continue_on_error:
                            console.print(f"[red]Error in {input_path}:[/red] {result.errors}")
                            raise SystemExit(1)
                except SystemExit:
                    raise
                except Exception as e:
                    error_count += 1
                    if not continue_on_error:
                        console.print(f"[red]Error processing {input_path}:[/red] {e}")
                        raise SystemExit(1)
                finally:
                    progress.advance(task)

    # Summary
    console.print()
    console.print("[bold]Batch complete:[/bold]")
    console.print(f"  [green]Success:[/green] {success_count}")
    console.print(f"  [red]Failed:[/red] {error_count}")
    console.print(f"  [blue]Output:[/blue] {output_dir}")

    if error_count > 0 and not continue_on_error:
        raise SystemExit(1)
