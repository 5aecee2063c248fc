"""Scan command implementation."""

import logging
import time
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from deplist.export.json import export_json
from deplist.parsers.base import ConfigurationError
from deplist.parsers.npm.detector import NpmDetector
from deplist.runtime.aggregator import ProjectAggregator
from deplist.runtime.config_loader import load_scan_config
from deplist.runtime.display import ReportPrinter
from deplist.runtime.report import CategorizedReport

logger = logging.getLogger("deplist.cli.scan")


def scan_command(args, console: Optional[Console] = None) -> int:
    """Execute scan command.

    Args:
        args: Parsed command-line arguments.
        console: Console for the report (stdout by default).

    Returns:
        int: Exit code.
    """
    try:
        return _scan_command_impl(args, console)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Error: %s", e, exc_info=True)
        return 1


def _scan_command_impl(args, console: Optional[Console]) -> int:
    root = Path(getattr(args, "path", None) or ".").expanduser().resolve()
    if not root.is_dir():
        logger.error("Not a directory: %s", root)
        return 1

    config = load_scan_config(getattr(args, "config", None))
    workers = getattr(args, "workers", None)
    if workers is not None:
        config = load_scan_config({**config.to_dict(), "max_workers": workers})

    logger.debug("=== deplist scan ===")
    logger.debug("Root: %s", root)
    logger.debug("Workers: %d", config.max_workers)
    logger.debug("Extensions: %s", ", ".join(config.file_extensions))

    start_time = time.time()
    printer = ReportPrinter(
        console=console,
        command_mode=getattr(args, "command", False),
        show_progress=not getattr(args, "verbose", False),
    )

    detector = NpmDetector(root, config)
    projects = detector.detect_projects()
    if not projects:
        printer.print_no_projects()
        return 0

    aggregator = ProjectAggregator(max_workers=config.max_workers)
    reports: List[CategorizedReport] = []
    for project in projects:
        with printer.scanning(project.name):
            report = aggregator.build_report(project)
        reports.append(report)
        printer.print_report(report)

    json_output = getattr(args, "json", None)
    if json_output:
        export_json(reports, Path(json_output))

    failed = sum(len(r.failures) for r in reports)
    logger.info(
        "Scanned %d project(s) in %.2fs (%d file(s) failed)",
        len(reports),
        time.time() - start_time,
        failed,
    )
    return 0


__all__ = ["scan_command"]
