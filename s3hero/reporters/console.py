"""Console reporter using Rich library for formatted CLI output.

Shows a header per audited formula, one line per finding and a final
summary table.
"""

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from s3hero.formula.models import AuditResult, Finding
from s3hero.models import ResultStatus
from s3hero.reporters.base import Reporter

STATUS_MARKUP = {
    ResultStatus.PASS: "[bold green]PASSED[/bold green]",
    ResultStatus.WARN: "[bold yellow]WARNINGS[/bold yellow]",
    ResultStatus.FAIL: "[bold red]FAILED[/bold red]",
    ResultStatus.ERROR: "[bold red]ERROR[/bold red]",
}

SHORT_STATUS = {
    ResultStatus.PASS: "[green]PASS[/green]",
    ResultStatus.WARN: "[yellow]WARN[/yellow]",
    ResultStatus.FAIL: "[red]FAIL[/red]",
    ResultStatus.ERROR: "[red]ERROR[/red]",
}


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress per-finding output (only show summary)
        console: Console to print to (mainly for tests)
    """

    def __init__(self, quiet: bool = False, console: Console | None = None):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console or Console(legacy_windows=True)
        self.quiet = quiet

    def on_descriptor_start(self, source: str) -> None:
        self.console.print()
        self.console.print(
            Rule(f"[bold cyan]Auditing: {source}[/bold cyan]", style="cyan", characters="-")
        )

    def on_finding(self, source: str, finding: Finding) -> None:
        """Displays one finding with its severity."""
        if self.quiet:
            return

        if finding.is_error:
            label = "[red][ERROR][/red]"
        else:
            label = "[yellow][WARN][/yellow]"

        subject = f"{finding.subject}: " if finding.subject else ""
        self.console.print(
            f"  {label} {finding.check_id}: {subject}{finding.message}",
            highlight=False,
        )

    def on_descriptor_complete(self, result: AuditResult) -> None:
        duration_str = ""
        if result.duration_seconds > 0:
            duration_str = f" in {result.duration_seconds:.1f}s"

        self.console.print()
        self.console.print(f"{result.name}: {STATUS_MARKUP[result.status]}{duration_str}")

        if result.error_message:
            self.console.print(f"   [dim red]{result.error_message}[/dim red]")

    def on_run_complete(self, results: dict[str, AuditResult]) -> None:
        """Displays a summary table comparing all audited formulae."""
        if not results:
            self.console.print("[yellow]No results to display.[/yellow]")
            return

        self.console.print()
        self.console.print(
            Rule("[bold]Formula Audit Summary[/bold]", style="magenta", characters="-")
        )

        table = Table(
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Formula", style="cyan", no_wrap=True)
        table.add_column("Source", no_wrap=True)
        table.add_column("Errors", justify="right")
        table.add_column("Warnings", justify="right")
        table.add_column("Status", justify="center", no_wrap=True)

        for source, result in results.items():
            errors = sum(1 for f in result.findings if f.is_error)
            warnings = len(result.findings) - errors
            table.add_row(
                result.name,
                source,
                str(errors),
                str(warnings),
                SHORT_STATUS[result.status],
            )

        self.console.print(table)
        self.console.print()
