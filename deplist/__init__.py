"""deplist - list the npm packages referenced by JavaScript/TypeScript projects.

Source files are parsed with tree-sitter, module references (imports,
requires, dynamic imports, re-exports) are collected from the syntax tree
and resolved to package names, then categorized per project into regular
and dev dependencies.
"""

__version__ = "1.3.0"

from deplist.config.schema import ScanConfig
from deplist.parsers.base import ParseError, ReadError
from deplist.parsers.npm.code_parser import NpmCodeParser, extract_specifiers
from deplist.parsers.npm.detector import NpmDetector
from deplist.parsers.npm.resolver import resolve_package_name
from deplist.parsers.npm.walker import walk
from deplist.runtime.aggregator import ProjectAggregator, build_report
from deplist.runtime.report import CategorizedReport, ProjectDescriptor

__all__ = [
    "__version__",
    "CategorizedReport",
    "NpmCodeParser",
    "NpmDetector",
    "ParseError",
    "ProjectAggregator",
    "ProjectDescriptor",
    "ReadError",
    "ScanConfig",
    "build_report",
    "extract_specifiers",
    "resolve_package_name",
    "walk",
]
