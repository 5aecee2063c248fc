"""NPM code parser for JavaScript/TypeScript files.

Parses JS/TS source into a syntax tree and walks it to collect the module
specifiers the file references.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from deplist.parsers.base import ParseError, ReadError, read_source
from deplist.parsers.npm.syntax import (
    ParseAdapter,
    SyntaxNode,
    TreeSitterAdapter,
    string_literal_value,
)
from deplist.parsers.npm.walker import Visitor, walk

logger = logging.getLogger("deplist.parsers.npm.code_parser")

_DIALECT_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}


def dialect_for_path(file_path: Union[str, Path]) -> str:
    """Pick the grammar for a file; the JavaScript grammar covers JSX."""
    return _DIALECT_BY_SUFFIX.get(Path(file_path).suffix.lower(), "javascript")


def _single_string_argument(call: SyntaxNode) -> Optional[str]:
    """Value of the only argument of ``call`` when it is a string literal."""
    arguments = call.child("arguments")
    if arguments is None or arguments.kind != "arguments":
        return None
    values = [arg for arg in arguments.children() if arg.kind != "comment"]
    if len(values) != 1:
        return None
    return string_literal_value(values[0])


class NpmCodeParser:
    """Code parser for JavaScript/TypeScript files.

    Extracts:
    - ES6 imports: import x from 'module'
    - CommonJS requires: const x = require('module')
    - Dynamic imports: import('module')
    - Re-exports: export * from 'module', export { x } from 'module'
    """

    def __init__(self, adapter: Optional[ParseAdapter] = None) -> None:
        self.adapter: ParseAdapter = adapter or TreeSitterAdapter()

    def extract_specifiers(
        self, source_text: str, dialect: str = "javascript"
    ) -> List[str]:
        """Collect the module specifiers referenced by a program.

        Args:
            source_text: Program text.
            dialect: Grammar to parse with (javascript, typescript, tsx).

        Returns:
            List[str]: Specifiers in traversal order, duplicates included.

        Raises:
            ParseError: If the text is not a valid program.
        """
        root = self.adapter.parse(source_text, dialect)
        specifiers: List[str] = []
        walk(root, self._visitors(specifiers.append))
        return specifiers

    def parse_file(
        self,
        file_path: Path,
        file_reader: Callable[[Path], str] = read_source,
    ) -> List[str]:
        """Read and extract one source file.

        Raises:
            ReadError: If the file cannot be read.
            ParseError: If the file cannot be parsed; ``path`` is set.
        """
        try:
            content = file_reader(file_path)
        except OSError as e:
            raise ReadError(f"Cannot read file: {e}", file_path) from e
        try:
            specifiers = self.extract_specifiers(content, dialect_for_path(file_path))
        except ParseError as e:
            if e.path is None:
                e.path = str(file_path)
            raise
        logger.debug("%s: %d module reference(s)", file_path, len(specifiers))
        return specifiers

    def _visitors(self, emit: Callable[[str], None]) -> Dict[str, Visitor]:
        def source_clause(node: SyntaxNode) -> None:
            # import ... from 'm' / export * from 'm' / export { x } from 'm'
            specifier = string_literal_value(node.child("source"))
            if specifier is not None:
                emit(specifier)

        def call_expression(node: SyntaxNode) -> None:
            if node.get("optional_chain") is not None:
                return
            callee = node.child("function")
            if callee is None:
                return
            is_require = callee.kind == "identifier" and callee.text == "require"
            if is_require or callee.kind == "import":
                specifier = _single_string_argument(node)
                if specifier is not None:
                    emit(specifier)

        return {
            "import_statement": source_clause,
            "export_statement": source_clause,
            "call_expression": call_expression,
        }


_default_parser: Optional[NpmCodeParser] = None


def extract_specifiers(source_text: str, dialect: str = "javascript") -> List[str]:
    """Module-level shortcut for ``NpmCodeParser().extract_specifiers``."""
    global _default_parser
    if _default_parser is None:
        _default_parser = NpmCodeParser()
    return _default_parser.extract_specifiers(source_text, dialect)


__all__ = ["NpmCodeParser", "dialect_for_path", "extract_specifiers"]
