"""
Rich console rendering for comparison and clone results.
"""

from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from mirror.diff_engine import RESULT_TAGS, render_summary, result_detail, summarize_results
from mirror.materializer import MaterializeReport
from mirror.models import DiffDiffer, DiffResult, DiffStatus

RESULT_STYLES = {
    DiffStatus.MATCH: "green",
    DiffStatus.DIFFER: "yellow",
    DiffStatus.NOT_FOUND: "red",
    DiffStatus.ERROR: "red",
}

SUMMARY_STYLES = {
    DiffStatus.MATCH: "green",
    DiffStatus.DIFFER: "red",
    DiffStatus.NOT_FOUND: "red",
    DiffStatus.ERROR: "red",
}


class ResultConsole:
    """Prints DiffResults and clone reports."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def info(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning: {escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error: {escape(message)}[/red]")

    def print_result(self, result: DiffResult) -> None:
        """Print one result line, with the diff or expected location below it."""
        style = RESULT_STYLES[result.status]
        self.console.print(f"[{style}]{escape(RESULT_TAGS[result.status])}[/{style}] {escape(result.path)}")
        if isinstance(result, DiffDiffer):
            self.console.print(Syntax(result.diff, "diff", theme="ansi_dark", background_color="default"))
        detail = result_detail(result)
        if detail is not None:
            self.console.print(f"[dim]{escape(detail)}[/dim]")

    def print_results(self, results: Iterable[DiffResult]) -> None:
        """Print every result followed by the summary counts."""
        results = list(results)
        for result in results:
            self.print_result(result)

        summary = summarize_results(results)
        self.console.print()
        styles: List[str] = [SUMMARY_STYLES[s] for s in SUMMARY_STYLES if summary.count(s)]
        for style, line in zip(styles, render_summary(summary)):
            self.console.print(f"[{style}]{escape(line)}[/{style}]")

    def print_clone_report(self, report: MaterializeReport) -> None:
        """Print the files a clone wrote or skipped."""
        for path in report.written:
            self.console.print(f"[dim]  \\[WRITE] {escape(path)}[/dim]")
        for path in report.skipped:
            self.console.print(f"[dim]  \\[SKIP]  {escape(path)} (already exists)[/dim]")

        if report.non_solidity:
            self.warning("Vyper contract detected. Skipping foundry.toml generation.")
            self.info(f"Clone complete. Source files written to {report.output_dir}")
            return

        if report.foundry_config:
            self.info(f"Generated foundry.toml (solc {report.solc_version})")
        if report.remappings_file:
            count = len(report.remappings)
            self.info(f"Generated remappings.txt ({count} {'entry' if count == 1 else 'entries'})")

        self.success(f"Clone complete. Run 'cd {report.output_dir} && forge build' to compile.")
