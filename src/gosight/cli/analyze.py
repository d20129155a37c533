"""``gosight analyze``: run the analysis and emit report, store and graph."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..analysis.engine import AnalysisEngine
from ..exceptions import GosightError
from ..formatters import JsonFormatter, RichFormatter
from ..logging_config import get_logger, setup_logging
from ..storage import GraphDB, save_report
from ..summary import summarize
from ..visualization import write_graph
from . import app
from ._common import console, resolve_config


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Root directory of the Go sources",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Report format: rich | json",
        click_type=click.Choice(["rich", "json"], case_sensitive=False),
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON report to this file instead of stdout",
    ),
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Store the report graph in this SQLite database",
    ),
    graph: Optional[Path] = typer.Option(
        None,
        "--graph",
        help="Export the call graph to this file",
    ),
    graph_format: str = typer.Option(
        "json",
        "--graph-format",
        help="Graph export format: json | dot",
        click_type=click.Choice(["json", "dot"], case_sensitive=False),
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=64,
    ),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Abort on the first file that cannot be read or parsed",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    top: int = typer.Option(15, "--top", help="Hotspots to list in rich output", min=1),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also append log records to this file", dir_okay=False
    ),
):
    """
    Analyze a Go source tree.

    Extracts functions, types, globals and imports, scores every function
    (cyclomatic, cognitive, Halstead, maintainability) and flags recursive,
    duplicated and unused code.

    [bold cyan]Examples:[/bold cyan]

      gosight analyze ./myservice

      gosight analyze . --format json -o report.json

      gosight analyze . --db graph.db --graph calls.dot --graph-format dot
    """
    logger = get_logger("cli")

    try:
        settings = resolve_config(
            config=config, workers=workers, fail_fast=fail_fast, verbose=verbose, quiet=quiet
        )
        setup_logging(settings.verbosity, str(log_file) if log_file else None)
        report = AnalysisEngine(settings).run(path)
        summary = summarize(report, settings.thresholds)

        if output_format == "json":
            formatter = JsonFormatter()
            if output is not None:
                output.write_text(formatter.format(report, summary), encoding="utf-8")
                console.print(f"[green]Report written to {output}[/green]")
            else:
                formatter.render(report, summary)
        else:
            RichFormatter(console=console, top=top).render(report, summary)

        if db is not None:
            with GraphDB(db) as store:
                count = save_report(store.conn, report)
            console.print(f"[green]Stored {count} functions in {db}[/green]")

        if graph is not None:
            write_graph(report, graph, graph_format)
            console.print(f"[green]Graph written to {graph}[/green]")

    except GosightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
