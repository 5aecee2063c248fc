"""NPM ecosystem parser package.

This package provides dependency analysis for Node.js/npm projects,
including:
- Detection of package.json projects and their main/dev source files
- Parsing of JavaScript/TypeScript into syntax trees (tree-sitter)
- A generic visitor walk over those trees
- Extraction of import/require/re-export specifiers
- Resolution of specifiers to package names
"""

from deplist.parsers.npm.code_parser import NpmCodeParser, dialect_for_path, extract_specifiers
from deplist.parsers.npm.detector import NpmDetector
from deplist.parsers.npm.resolver import resolve_package_name
from deplist.parsers.npm.syntax import SyntaxNode, TreeSitterAdapter
from deplist.parsers.npm.walker import walk

__all__ = [
    "NpmCodeParser",
    "NpmDetector",
    "SyntaxNode",
    "TreeSitterAdapter",
    "dialect_for_path",
    "extract_specifiers",
    "resolve_package_name",
    "walk",
]
