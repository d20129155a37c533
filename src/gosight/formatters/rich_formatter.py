"""Rich terminal formatter for gosight."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisReport
from ..summary import CodeSummary
from .base import BaseFormatter


def _complexity_label(cc: int) -> str:
    if cc > 20:
        return f"[red bold]{cc}[/red bold]"
    elif cc > 10:
        return f"[red]{cc}[/red]"
    elif cc > 5:
        return f"[yellow]{cc}[/yellow]"
    else:
        return f"[green]{cc}[/green]"


def _maintainability_label(mi: float) -> str:
    if mi < 30:
        return f"[red bold]{mi:.1f}[/red bold]"
    elif mi < 50:
        return f"[red]{mi:.1f}[/red]"
    elif mi < 70:
        return f"[yellow]{mi:.1f}[/yellow]"
    else:
        return f"[green]{mi:.1f}[/green]"


class RichFormatter(BaseFormatter):
    """Summary panel, complexity distribution, hotspot table and scan errors."""

    def __init__(self, console: Optional[Console] = None, top: int = 15) -> None:
        self.console = console or Console(stderr=True)
        self.top = top

    def render(self, report: AnalysisReport, summary: CodeSummary) -> None:
        self._print_summary(report, summary)
        self._print_distribution(summary)
        self._print_hotspots(summary)
        self._print_errors(report)

    def format(self, report: AnalysisReport, summary: CodeSummary) -> str:
        # Rich output goes directly to console; return empty string
        self.render(report, summary)
        return ""

    def _print_summary(self, report: AnalysisReport, summary: CodeSummary) -> None:
        body = (
            f"[bold]Files:[/bold] {report.files_analyzed}    "
            f"[bold]Functions:[/bold] {summary.total_functions}    "
            f"[bold]Lines:[/bold] {summary.total_lines}\n"
            f"[bold]Avg complexity:[/bold] {summary.avg_complexity:.2f}    "
            f"[bold]Avg maintainability:[/bold] {summary.avg_maintainability:.1f}    "
            f"[bold]Avg nesting:[/bold] {summary.avg_nesting_depth:.2f}\n"
            f"[bold]Recursive:[/bold] {summary.recursive_functions}    "
            f"[bold]Duplicates:[/bold] {summary.duplicate_functions}    "
            f"[bold]Unused:[/bold] {summary.unused_functions}"
        )
        self.console.print(
            Panel(body, title="[bold cyan]gosight[/bold cyan]", subtitle=report.root, expand=False)
        )

    def _print_distribution(self, summary: CodeSummary) -> None:
        dist = summary.distribution
        table = Table(title="Complexity distribution", show_header=True, header_style="bold")
        table.add_column("Bucket")
        table.add_column("Functions", justify="right")
        table.add_row("[green]Low (<=5)[/green]", str(dist.low))
        table.add_row("[yellow]Medium (<=10)[/yellow]", str(dist.medium))
        table.add_row("[red]High (>10)[/red]", str(dist.high))
        self.console.print(table)

    def _print_hotspots(self, summary: CodeSummary) -> None:
        if not summary.hotspots:
            self.console.print("[green]No hotspots found.[/green]")
            return

        table = Table(
            title=f"Hotspots ({len(summary.hotspots)})", show_header=True, header_style="bold"
        )
        table.add_column("Function", style="cyan", no_wrap=True)
        table.add_column("File")
        table.add_column("CC", justify="right")
        table.add_column("MI", justify="right")
        table.add_column("Issues")
        for hotspot in summary.hotspots[: self.top]:
            table.add_row(
                hotspot.name,
                hotspot.file,
                _complexity_label(hotspot.complexity),
                _maintainability_label(hotspot.maintainability),
                ", ".join(hotspot.issues),
            )
        self.console.print(table)
        if len(summary.hotspots) > self.top:
            self.console.print(f"[dim]... {len(summary.hotspots) - self.top} more[/dim]")

    def _print_errors(self, report: AnalysisReport) -> None:
        if not report.errors:
            return
        self.console.print(
            f"\n[yellow]{len(report.errors)} file(s) could not be fully analyzed:[/yellow]"
        )
        for issue in report.errors:
            where = f"{issue.path} ({issue.function})" if issue.function else issue.path
            self.console.print(
                f"  [dim]{issue.stage}[/dim] {escape(where)}: {escape(issue.reason)}"
            )
