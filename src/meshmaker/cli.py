"""CLI entry point for meshmaker.

Usage:
    meshmaker [options] file.map
    meshmaker -c 1.5 -o mesh -S emd_1234.map     # STL at contour 1.5
    meshmaker -s -D -t 0.5 emd_1234.map          # smoothed, decimated VTP
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from meshmaker.core.contracts import MeshMakerConfig
from meshmaker.core.logging import setup_logging
from meshmaker.core.options import USAGE, build_config

app = typer.Typer(name="meshmaker", help="Generate a mesh from an MRC/MAP file", add_completion=False)
console = Console(stderr=True)

# Tokens are handed to build_config untouched; click must not parse them.
RAW_TOKENS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}


def _print_plan(config: MeshMakerConfig) -> None:
    from meshmaker.core.pipeline import describe_stages

    table = Table(title=f"Pipeline: {config.input_path} -> {config.output_path}")
    table.add_column("#", style="dim")
    table.add_column("Stage", style="cyan")
    table.add_column("Parameters", style="green")
    for i, (stage, params) in enumerate(describe_stages(config), 1):
        rendered = ", ".join(f"{k}={v}" for k, v in params.items()) or "-"
        table.add_row(str(i), stage.value, rendered)
    console.print(table)


@app.command(context_settings=RAW_TOKENS, add_help_option=False)
def main(ctx: typer.Context) -> None:
    """Generate a mesh from the MAP/MRC file using the specified options."""
    result = build_config(list(ctx.args))

    if result.show_help:
        console.print(USAGE, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(0)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {escape(str(warning))}[/yellow]", highlight=False)

    if not result.ok:
        for error in result.errors:
            console.print(f"[red]{escape(str(error))}[/red]", highlight=False)
        console.print("[red]Aborting...[/red]")
        raise typer.Exit(1)

    config = result.config
    setup_logging(verbose=config.verbose)

    from meshmaker.core.errors import StageError
    from meshmaker.core.pipeline import run_pipeline

    if config.verbose:
        _print_plan(config)

    try:
        run_pipeline(config)
    except StageError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]", highlight=False)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
