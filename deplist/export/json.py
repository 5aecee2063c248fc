"""JSON export for dependency reports."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

from deplist import __version__
from deplist.runtime.report import CategorizedReport

logger = logging.getLogger("deplist.export.json")


def reports_to_dict(reports: Iterable[CategorizedReport]) -> Dict[str, Any]:
    return {
        "tool": "deplist",
        "version": __version__,
        "projects": [report.to_dict() for report in reports],
    }


def export_json(reports: Iterable[CategorizedReport], output_path: Path) -> None:
    """Export reports to a JSON file.

    Args:
        reports: Reports to export, in display order.
        output_path: Output file path.
    """
    logger.info("Exporting reports to JSON: %s", output_path)

    data = reports_to_dict(reports)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")

    logger.info("JSON export completed: %d project(s)", len(data["projects"]))


__all__ = ["export_json", "reports_to_dict"]
