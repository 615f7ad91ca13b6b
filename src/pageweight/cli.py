"""CLI entry point for pageweight."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pageweight.adapters.base import RecordSourceError, ThroughputEstimator
from pageweight.adapters.json_file import (
    FixedThroughputEstimator,
    JsonDocumentLoader,
    JsonRecordProvider,
    JsonThroughputEstimator,
)
from pageweight.analyzers.byte_weight import META
from pageweight.analyzers.pipeline import AuditPipeline
from pageweight.analyzers.scoring import compute_log_normal_score
from pageweight.config import load_score_options, load_throughput
from pageweight.formatting import format_bytes_to_kb, format_ms
from pageweight.models.schemas import AuditOutcome

app = typer.Typer(help="Network payload weight audit.")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Network payload weight audit."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@app.command()
def audit(
    source: str = typer.Argument(..., help="JSON records document (path or URL)"),
    throughput: float | None = typer.Option(
        None, "--throughput", "-t", help="Throughput in bytes/ms (overrides the document)"
    ),
    score_podr: float | None = typer.Option(None, "--score-podr", help="Point of diminishing returns in bytes"),
    score_median: float | None = typer.Option(None, "--score-median", help="Bytes that score 0.5"),
    bundle_threshold: int | None = typer.Option(
        None, "--bundle-threshold", help="Script size in bytes above which requests are flagged"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
) -> None:
    """Audit the total byte weight of a page load."""
    asyncio.run(_audit(source, throughput, score_podr, score_median, bundle_threshold, output))


async def _audit(
    source: str,
    throughput: float | None,
    score_podr: float | None,
    score_median: float | None,
    bundle_threshold: int | None,
    output: Path | None,
) -> None:
    """Async implementation of audit."""
    try:
        options = load_score_options(score_podr, score_median, bundle_threshold)
        fixed_throughput = load_throughput(throughput)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
        loader = JsonDocumentLoader(client=client)
        estimator: ThroughputEstimator
        if fixed_throughput is not None:
            estimator = FixedThroughputEstimator(fixed_throughput)
        else:
            estimator = JsonThroughputEstimator(loader)

        pipeline = AuditPipeline(
            record_provider=JsonRecordProvider(loader),
            throughput_estimator=estimator,
            options=options,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Auditing network payload...", total=None)
            try:
                outcome = await pipeline.run(source)
            except (RecordSourceError, httpx.HTTPError, OSError) as e:
                console.print(f"[red]Error loading {escape(source)}: {escape(str(e))}[/red]")
                raise typer.Exit(1)

    _print_outcome(outcome)

    if output:
        output.write_text(json.dumps(outcome.to_report(), indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


def _print_outcome(outcome: AuditOutcome) -> None:
    """Render an audit outcome to the console."""
    passed = outcome.score >= 0.9
    color = "green" if passed else "yellow" if outcome.score >= 0.5 else "red"
    title = META.description if passed else META.failure_description

    console.print()
    console.print(
        Panel(
            f"[bold][{color}]{outcome.score * 100:.0f}[/{color}][/bold] / 100  {outcome.display_value}",
            title=title,
            expand=False,
        )
    )
    console.print(f"[dim]{outcome.total_completed_requests} completed requests[/dim]")
    console.print()

    if not outcome.top_results:
        return

    table = Table(title="Largest Requests", show_header=True)
    for heading in outcome.details.headings:
        justify = "left" if heading.key == "url" else "right"
        table.add_column(heading.text, justify=justify, overflow="fold")

    for item in outcome.top_results:
        url = f"[yellow]{escape(item.url)}[/yellow]" if item.flagged else escape(item.url)
        table.add_row(url, format_bytes_to_kb(item.total_bytes, 1), format_ms(item.total_ms))

    console.print(table)

    if any(item.flagged for item in outcome.top_results):
        console.print("[yellow]![/yellow] Highlighted scripts exceed the bundle size limit")


@app.command()
def score(
    value: float = typer.Argument(..., help="Total bytes to score"),
    score_podr: float | None = typer.Option(None, "--score-podr", help="Point of diminishing returns in bytes"),
    score_median: float | None = typer.Option(None, "--score-median", help="Bytes that score 0.5"),
) -> None:
    """Evaluate the scoring curve for a byte count."""
    try:
        options = load_score_options(score_podr, score_median)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    result = compute_log_normal_score(value, options.score_podr, options.score_median)
    console.print(f"{result:.4f}")


@app.command()
def meta() -> None:
    """Show audit metadata."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Name", META.name)
    table.add_row("Description", META.description)
    table.add_row("Failure", META.failure_description)
    table.add_row("Display Mode", META.score_display_mode)
    table.add_row("Requires", ", ".join(META.required_artifacts))
    table.add_row("Help", META.help_text)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from pageweight import __version__

    console.print(f"pageweight v{__version__}")


if __name__ == "__main__":
    app()
