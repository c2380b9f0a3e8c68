"""CLI command: sovereign clean <directory> --output <dir> — write a cleaned copy."""

from __future__ import annotations

import json
import shutil
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from sovereign.envtemplate import ENV_TEMPLATE_NAME, generate_env_example
from sovereign.pipeline import liberate
from sovereign.scanner.models import ChangeType
from sovereign.sources import read_file_map, write_file_map

console = Console(stderr=True)

_CHANGE_COLORS = {
    ChangeType.REMOVED: "red",
    ChangeType.MODIFIED: "yellow",
    ChangeType.REPLACED: "magenta",
}


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    required=True,
    help="Directory that receives the cleaned project.",
)
@click.option("--dry-run", is_flag=True, help="Report changes without writing.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def clean(
    ctx: click.Context,
    directory: str,
    output: str,
    dry_run: bool,
    output_format: str,
) -> None:
    """Remove proprietary signatures and write the result to OUTPUT."""
    source = Path(directory).resolve()
    target = Path(output).resolve()
    if target == source or source in target.parents:
        raise click.BadParameter(
            "must not be the source directory or inside it", param_hint="'--output'"
        )

    tree = read_file_map(source, ctx.obj["config"])
    result = liberate(tree.files, ctx.obj["registry"])

    if not dry_run:
        written = write_file_map(result.files, target)
        # Oversized files were never loaded; carry them over untouched
        for rel in tree.oversized:
            dest = target / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source / rel, dest)
        written += len(tree.oversized)
        if ENV_TEMPLATE_NAME not in result.files:
            target.mkdir(parents=True, exist_ok=True)
            (target / ENV_TEMPLATE_NAME).write_text(
                generate_env_example(result.files), encoding="utf-8"
            )
            written += 1
        console.print(f"Wrote {written} files to [cyan]{target}[/cyan]")

    if output_format == "json":
        click.echo(json.dumps(result.report.to_dict(), indent=2))
    else:
        _print_changes(result.report)

    for rel in tree.unreadable:
        console.print(f"[yellow]Could not read {rel}, not included in the output[/yellow]")

    if result.validation:
        for issue in result.validation:
            console.print(
                f"[red]{issue.file}:{issue.line}:{issue.column}[/red] {issue.message}"
            )
        sys.exit(1)


def _print_changes(report) -> None:
    if not report.changes:
        console.print("[green]Nothing to clean.[/green]")
    else:
        table = Table(title="Changes", show_lines=False)
        table.add_column("Type", style="bold", width=9)
        table.add_column("File", style="cyan")
        table.add_column("Details")
        for change in report.changes:
            color = _CHANGE_COLORS.get(change.type, "white")
            table.add_row(
                f"[{color}]{change.type.value}[/{color}]",
                change.file,
                change.details,
            )
        console.print(table)

    console.print(
        f"\nScore: {report.score_before} ({report.grade_before}) -> "
        f"{report.score_after} ({report.grade_after})"
    )
    console.print(
        f"Cleaned {report.files_cleaned}/{report.files_processed} files, "
        f"removed {report.files_removed}, {report.lines_removed} lines dropped"
    )
