"""Rich-based presentation of dependency reports.

Two layouts are supported:
- list (default): bullet lists of regular and dev dependencies
- command: ready-to-run ``npm install`` / ``npm install -D`` lines

Per-file failures are printed as a warning summary after the project's
dependencies so they cannot be mistaken for part of the report.

Usage:
    printer = ReportPrinter(command_mode=False)
    with printer.scanning("my-app"):
        report = aggregator.build_report(project)
    printer.print_report(report)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Optional, Sequence

from rich.console import Console
from rich.text import Text

from deplist.runtime.report import CategorizedReport

logger = logging.getLogger("deplist.runtime.display")

# How many failed files are listed before the summary is truncated
_MAX_LISTED_FAILURES = 5


def format_deps(deps: Sequence[str]) -> str:
    """Join dependency names with spaces."""
    return " ".join(deps)


def install_command(deps: Sequence[str], dev: bool = False) -> str:
    return f"npm install {'-D ' if dev else ''}{format_deps(deps)}"


class ReportPrinter:
    """Prints CategorizedReports to a Rich console.

    Attributes:
        command_mode: Print npm install commands instead of lists.
        show_progress: Show a spinner while a project is scanned.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        command_mode: bool = False,
        show_progress: bool = True,
    ) -> None:
        self.console = console or Console()
        self.command_mode = command_mode
        self.show_progress = show_progress

    @contextmanager
    def scanning(self, project_name: str) -> Generator[None, None, None]:
        """Spinner shown while ``project_name`` is being scanned."""
        if not self.show_progress or not self.console.is_terminal:
            yield
            return
        with self.console.status(Text(f"Scanning {project_name}...", style="cyan")):
            yield

    def print_no_projects(self) -> None:
        self.console.print(Text("No package.json files found.", style="yellow"))

    def print_report(self, report: CategorizedReport) -> None:
        """Print one project's report followed by its failure summary."""
        if report.is_empty:
            self.console.print(
                Text(
                    f'No external dependencies found for project "{report.project}".\n',
                    style="yellow",
                )
            )
        else:
            self._print_header(report)
            if self.command_mode:
                self._print_commands(report)
            else:
                self._print_lists(report)
            self.console.print("\n")
        self.print_failures(report)

    def print_failures(self, report: CategorizedReport) -> None:
        if not report.failures:
            return
        count = len(report.failures)
        self.console.print(
            Text(
                f"Warning: {count} file(s) in {report.project} could not be scanned:",
                style="bold red",
            )
        )
        for failure in report.failures[:_MAX_LISTED_FAILURES]:
            self.console.print(
                Text(f"  {failure.kind}: {failure.message}", style="red")
            )
        if count > _MAX_LISTED_FAILURES:
            self.console.print(
                Text(f"  ... and {count - _MAX_LISTED_FAILURES} more", style="red")
            )
        self.console.print()

    def _print_header(self, report: CategorizedReport) -> None:
        header = Text.assemble(("Project:", "bold green"), (f" {report.project}", "bold"))
        self.console.print(header)

    def _print_lists(self, report: CategorizedReport) -> None:
        if report.regular:
            self.console.print(Text("Regular Dependencies:", style="green"))
            for dep in report.regular:
                self.console.print(Text(f"- {dep}"))
        else:
            self.console.print(Text("No regular dependencies found.", style="yellow"))

        if report.dev:
            self.console.print(Text("\nDev Dependencies:", style="blue"))
            for dep in report.dev:
                self.console.print(Text(f"- {dep}"))
        else:
            self.console.print(Text("No dev dependencies found.", style="yellow"))

    def _print_commands(self, report: CategorizedReport) -> None:
        if report.regular:
            self.console.print(Text("Regular Dependencies:", style="bold green"))
            self.console.print(Text(f" {install_command(report.regular)}", style="green"))

        if report.dev:
            if report.regular:
                self.console.print()
            self.console.print(Text("Dev Dependencies:", style="bold blue"))
            self.console.print(
                Text(f" {install_command(report.dev, dev=True)}", style="blue")
            )


__all__ = ["ReportPrinter", "format_deps", "install_command"]
