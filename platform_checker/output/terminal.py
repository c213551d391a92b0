"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from platform_checker.models.problem import CheckResult, CheckSummary, Verbosity


class TerminalFormatter:
    """Format check summaries for terminal display using Rich.

    Shows a table with the status of each check, followed by the failure
    message of every failed check.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_summary(self, summary: CheckSummary) -> None:
        """Display a check summary.

        Args:
            summary: The summary to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(summary)
            return

        table = Table(title=f"Platform Checks: {escape(summary.project)}")
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Problems", justify="right")
        table.add_column("Details")

        for result in summary.results:
            table.add_row(
                escape(result.name),
                self._status(result),
                str(len(result.problems)),
                self._details(result),
            )
        self._console.print(table)

        for result in summary.failed:
            self._print_failure(result)

        status_color = "red" if summary.has_failures else "green"
        status = "FAILED" if summary.has_failures else "PASS"
        self._console.print(
            f"\n[bold]Status:[/bold] [{status_color}]{status}[/{status_color}]"
        )

    def _print_quiet_output(self, summary: CheckSummary) -> None:
        if not summary.has_failures:
            self._console.print(
                f"[green]PASS[/green] - {escape(summary.project)} satisfies all checks"
            )
            return
        self._console.print(
            f"[red]FAILED[/red] - {len(summary.failed)} check(s) failed"
        )
        for result in summary.failed:
            self._console.print(f"  - {escape(result.name)}")

    @staticmethod
    def _status(result: CheckResult) -> str:
        if result.skipped:
            return "[yellow]SKIPPED[/yellow]"
        if result.passed:
            return "[green]PASS[/green]"
        return "[red]FAILED[/red]"

    @staticmethod
    def _details(result: CheckResult) -> str:
        if result.report_path:
            return f"See {escape(result.report_path)}"
        if result.skipped and result.message:
            return escape(result.message)
        return ""

    def _print_failure(self, result: CheckResult) -> None:
        """Print the failure message of a check, and its problems when verbose.

        Args:
            result: A failed check result.
        """
        body = result.message or "Check failed"
        if self._verbosity == Verbosity.VERBOSE and result.problems:
            lines = [body, ""]
            lines.extend(
                f"{p.configuration}: {p.dependency}: {p.message}"
                for p in result.problems
            )
            body = "\n".join(lines)
        panel = Panel(
            Text(body),
            title=f"[bold red]{escape(result.name)}[/bold red]",
            border_style="red",
        )
        self._console.print(panel)
