"""CLI commands: sovereign scan / audit <directory> — sovereignty analysis."""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from sovereign.config import SovereignConfig
from sovereign.report import assemble, format_text
from sovereign.scanner.engine import ScanEngine
from sovereign.scanner.models import ScanResult, Severity
from sovereign.scanner.scoring import passes_threshold
from sovereign.sources import read_file_map

console = Console(stderr=True)

SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.MAJOR: "yellow",
    Severity.MINOR: "blue",
}


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option(
    "--min-score",
    type=click.IntRange(0, 100),
    default=0,
    help="Exit with status 1 when the score is below this value.",
)
@click.pass_context
def scan(
    ctx: click.Context,
    directory: str,
    output_format: str,
    min_score: int,
) -> None:
    """Scan a project for proprietary code-generator signatures."""
    result = _scan_directory(ctx, directory)

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        console.print(
            f"[bold]Sovereign[/bold] scanning [cyan]{directory}[/cyan]\n"
        )
        print_scan_result(result)

    if not passes_threshold(result.score, min_score):
        console.print(
            f"\n[red]Score {result.score} is below the minimum of {min_score}[/red]"
        )
        sys.exit(1)


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--min-score",
    type=click.IntRange(0, 100),
    default=None,
    help="Minimum passing score (defaults to the configured gate).",
)
@click.pass_context
def audit(ctx: click.Context, directory: str, min_score: int | None) -> None:
    """Pre-build gate: fail when the project is not sovereign enough."""
    config: SovereignConfig = ctx.obj["config"]
    threshold = config.min_score if min_score is None else min_score
    result = _scan_directory(ctx, directory)

    if not passes_threshold(result.score, threshold):
        click.echo(format_text(assemble(result)))
        console.print(
            f"\n[red]Audit failed:[/red] score {result.score} ({result.grade}) "
            f"is below {threshold}"
        )
        sys.exit(1)

    console.print(
        f"[green]Audit passed:[/green] score {result.score} ({result.grade}), "
        f"minimum {threshold}"
    )


def _scan_directory(ctx: click.Context, directory: str) -> ScanResult:
    tree = read_file_map(directory, ctx.obj["config"])
    engine = ScanEngine(ctx.obj["registry"])
    return engine.scan(tree.files)


def print_scan_result(result: ScanResult) -> None:
    """Render issues and proprietary files as Rich tables."""
    if result.proprietary_files:
        files_table = Table(title="Proprietary files", show_lines=False)
        files_table.add_column("File", style="cyan")
        for path in result.proprietary_files:
            files_table.add_row(path)
        console.print(files_table)

    if not result.issues:
        if not result.proprietary_files:
            console.print("[green]No proprietary patterns detected.[/green]")
        _print_summary(result)
        return

    table = Table(title="Issues", show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Pattern")
    table.add_column("Match", max_width=50)

    for issue in result.issues:
        color = SEVERITY_COLORS.get(issue.severity, "white")
        table.add_row(
            f"[{color}]{issue.severity.value}[/{color}]",
            issue.file,
            str(issue.line),
            issue.pattern_name,
            issue.matched_text[:50],
        )

    console.print(table)
    _print_summary(result)


def _print_summary(result: ScanResult) -> None:
    summary = result.summary
    console.print(
        f"\nScanned {result.total_files_scanned} files "
        f"({result.total_lines} lines)"
    )
    console.print(
        f"Critical: {summary.critical}  Major: {summary.major}  "
        f"Minor: {summary.minor}"
    )
    console.print(f"Score: [bold]{result.score}/100[/bold] (grade {result.grade})")
