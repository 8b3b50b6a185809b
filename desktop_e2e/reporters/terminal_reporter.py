"""Terminal reporter for scenario results.

Human-readable output using the rich library, with a plain-text mode for
logs and dumb terminals.
"""

import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import ResultStatus, TestResult, TestSuiteResult


logger = logging.getLogger(__name__)


STATUS_SYMBOLS = {
    ResultStatus.PASSED: ("✓", "[PASS]"),
    ResultStatus.FAILED: ("✗", "[FAIL]"),
    ResultStatus.SKIPPED: ("⊘", "[SKIP]"),
    ResultStatus.ERROR: ("⚠", "[ERROR]"),
}

STATUS_COLORS = {
    ResultStatus.PASSED: "green",
    ResultStatus.FAILED: "red",
    ResultStatus.SKIPPED: "yellow",
    ResultStatus.ERROR: "magenta",
}


class TerminalReporter:
    """Human-readable terminal reporter.

    Attributes:
        console: Rich console for output
        verbose: Whether to show verbose output
        show_logs: Whether to show scenario logs
    """

    def __init__(
        self,
        verbose: bool = False,
        show_logs: bool = False,
        no_ui: bool = False,
        console: Console = None,
    ):
        self.console = console or Console(force_terminal=not no_ui, no_color=no_ui)
        self.verbose = verbose
        self.show_logs = show_logs
        self.no_ui = no_ui

    def print_header(self) -> None:
        if self.no_ui:
            self.console.print("Desktop E2E Runner")
            self.console.print("=" * 60)
        else:
            title = Text("Desktop E2E Runner", style="bold cyan")
            self.console.print(Panel(title, border_style="cyan"))

    def print_start(self, total_scenarios: int) -> None:
        msg = f"Running {total_scenarios} scenario{'s' if total_scenarios != 1 else ''}..."
        if self.no_ui:
            self.console.print(msg)
        else:
            self.console.print(f"\n[bold]{msg}[/bold]\n")

    def print_scenario_result(self, result: TestResult) -> None:
        """Print one scenario line plus failure details."""
        rich_symbol, plain_symbol = STATUS_SYMBOLS[result.status]
        color = STATUS_COLORS[result.status]
        indent = "    "

        if self.no_ui:
            line = (
                f"{plain_symbol} {result.scenario_name} "
                f"({result.duration_seconds:.1f}s) "
                f"[{result.passed_count}/{result.total_count}]"
            )
        else:
            line = (
                f"[{color}]{rich_symbol}[/{color}] {result.scenario_name} "
                f"[dim]({result.duration_seconds:.1f}s)[/dim] "
                f"[{result.passed_count}/{result.total_count}]"
            )
        self.console.print(line, markup=not self.no_ui)

        if result.status in (ResultStatus.FAILED, ResultStatus.ERROR) and result.error_message:
            kind = f" ({result.failure_kind.value})" if result.failure_kind else ""
            if self.no_ui:
                self.console.print(f"{indent}Error{kind}: {result.error_message}", markup=False)
            else:
                self.console.print(f"{indent}[red]Error{kind}:[/red] {result.error_message}")

        for assertion in result.assertion_results:
            if assertion.status != ResultStatus.FAILED:
                continue
            msg = assertion.message or f"Expected {assertion.expected}, got {assertion.actual}"
            if self.no_ui:
                self.console.print(f"{indent}  - {msg}", markup=False)
            else:
                self.console.print(f"{indent}  [dim]• {msg}[/dim]")

        if self.verbose and result.state_history:
            states = " → ".join(s.value for s in result.state_history)
            self.console.print(f"{indent}States: {states}", markup=False)

        if self.show_logs and result.logs:
            self.console.print(f"{indent}Logs:")
            for log in result.logs:
                self.console.print(f"      {log}", markup=False)

    def print_summary(self, suite_result: TestSuiteResult) -> None:
        self.console.print("")

        if self.no_ui:
            self.console.print("=" * 60)
            self.console.print("Summary")
            self.console.print("-" * 60)
            self.console.print(f"Total:    {suite_result.total_tests}")
            self.console.print(f"Passed:   {suite_result.passed_tests}")
            self.console.print(f"Failed:   {suite_result.failed_tests}")
            self.console.print(f"Skipped:  {suite_result.skipped_tests}")
            self.console.print(f"Errors:   {suite_result.error_tests}")
            self.console.print(f"Duration: {suite_result.total_duration_seconds:.1f}s")
            self.console.print(f"Success Rate: {suite_result.success_rate:.1f}%")
            self.console.print("=" * 60)
            return

        table = Table(title="Summary", show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="dim")
        table.add_column("Value", justify="right")

        table.add_row("Total Scenarios", str(suite_result.total_tests))
        table.add_row("Passed", f"[green]{suite_result.passed_tests}[/green]")
        failed = suite_result.failed_tests
        table.add_row("Failed", f"[red]{failed}[/red]" if failed else "0")
        if suite_result.skipped_tests:
            table.add_row("Skipped", f"[yellow]{suite_result.skipped_tests}[/yellow]")
        if suite_result.error_tests:
            table.add_row("Errors", f"[magenta]{suite_result.error_tests}[/magenta]")
        table.add_row("Duration", f"{suite_result.total_duration_seconds:.1f}s")

        rate = suite_result.success_rate
        rate_color = "green" if rate == 100 else "yellow" if rate >= 80 else "red"
        table.add_row("Success Rate", f"[{rate_color}]{rate:.1f}%[/{rate_color}]")

        self.console.print(table)

    def print_final_status(self, suite_result: TestSuiteResult) -> None:
        ok = suite_result.failed_tests == 0 and suite_result.error_tests == 0
        if self.no_ui:
            self.console.print("\nAll scenarios PASSED" if ok else "\nSome scenarios FAILED")
        elif ok:
            self.console.print("\n[bold green]✓ All scenarios PASSED[/bold green]")
        else:
            self.console.print("\n[bold red]✗ Some scenarios FAILED[/bold red]")

    def report_suite(self, suite_result: TestSuiteResult) -> None:
        self.print_summary(suite_result)
        self.print_final_status(suite_result)
