"""Tests for report rendering."""

from pathlib import Path

from rich.console import Console

from deplist.runtime.display import ReportPrinter, format_deps, install_command
from deplist.runtime.report import CategorizedReport, FileFailure


def _printer(command_mode: bool = False):
    console = Console(record=True, width=120, color_system=None)
    return ReportPrinter(console=console, command_mode=command_mode), console


def _report(regular=(), dev=(), failures=()) -> CategorizedReport:
    return CategorizedReport(
        project="web",
        root=Path("/ws"),
        regular=tuple(regular),
        dev=tuple(dev),
        failures=tuple(failures),
    )


def test_install_command() -> None:
    assert format_deps(["a", "b"]) == "a b"
    assert install_command(["react", "lodash"]) == "npm install react lodash"
    assert install_command(["jest"], dev=True) == "npm install -D jest"


def test_list_layout() -> None:
    printer, console = _printer()

    printer.print_report(_report(regular=["lodash", "react"], dev=["jest"]))
    output = console.export_text()

    assert "Project: web" in output
    assert "Regular Dependencies:\n- lodash\n- react\n" in output
    assert "Dev Dependencies:\n- jest\n" in output


def test_list_layout_with_one_empty_bucket() -> None:
    printer, console = _printer()

    printer.print_report(_report(dev=["vitest"]))
    output = console.export_text()

    assert "No regular dependencies found." in output
    assert "- vitest" in output
    assert "No dev dependencies found." not in output


def test_command_layout() -> None:
    printer, console = _printer(command_mode=True)

    printer.print_report(_report(regular=["axios", "react"], dev=["@types/react", "jest"]))
    output = console.export_text()

    assert " npm install axios react\n" in output
    assert " npm install -D @types/react jest\n" in output
    assert "- axios" not in output


def test_command_layout_skips_empty_bucket() -> None:
    printer, console = _printer(command_mode=True)

    printer.print_report(_report(regular=["axios"]))

    assert "npm install -D" not in console.export_text()


def test_empty_report_notice() -> None:
    printer, console = _printer()

    printer.print_report(_report())
    output = console.export_text()

    assert 'No external dependencies found for project "web".' in output
    assert "Project:" not in output


def test_failures_are_summarized() -> None:
    failures = [
        FileFailure(path=f"/ws/src/f{i}.js", kind="ParseError", message=f"/ws/src/f{i}.js: Invalid javascript syntax")
        for i in range(7)
    ]
    printer, console = _printer()

    printer.print_report(_report(regular=["react"], failures=failures))
    output = console.export_text()

    assert "Warning: 7 file(s) in web could not be scanned:" in output
    assert "ParseError: /ws/src/f0.js" in output
    assert "f5.js" not in output
    assert "... and 2 more" in output


def test_no_projects_notice() -> None:
    printer, console = _printer()

    printer.print_no_projects()

    assert console.export_text() == "No package.json files found.\n"


def test_scanning_is_silent_without_a_terminal() -> None:
    printer, console = _printer()

    with printer.scanning("web"):
        pass

    assert console.export_text() == ""
