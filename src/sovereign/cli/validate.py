"""CLI command: sovereign validate <directory> — bracket balance check."""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.table import Table

from sovereign.pipeline import validate as validate_files
from sovereign.sources import read_file_map

console = Console(stderr=True)


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.pass_context
def validate(ctx: click.Context, directory: str) -> None:
    """Check JavaScript/TypeScript files for unbalanced brackets."""
    tree = read_file_map(directory, ctx.obj["config"])
    issues = validate_files(tree.files)

    if not issues:
        console.print("[green]All brackets balanced.[/green]")
        return

    table = Table(title="Structural issues", show_lines=False)
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Problem")
    for issue in issues:
        table.add_row(issue.file, str(issue.line), str(issue.column), issue.message)
    console.print(table)
    console.print(f"\n[red]{len(issues)} structural issue(s)[/red]")
    sys.exit(1)
