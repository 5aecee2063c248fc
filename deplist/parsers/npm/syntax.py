"""Syntax tree model and the tree-sitter parse adapter.

The extraction rules never touch tree-sitter objects directly. Source text
is parsed by a ``ParseAdapter`` into plain ``SyntaxNode`` objects: a kind
tag, an ordered mapping of named child slots and an optional source
location. Tree-sitter re-creates its Python node wrappers on every access,
so converting once gives every node a stable identity for the walker's
visited set.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser

from deplist.parsers.base import ParseError

logger = logging.getLogger("deplist.parsers.npm.syntax")

# Slot holding children that the grammar does not name
CHILDREN_SLOT = "children"
# Scalar slot holding the source text of leaves and string literals
TEXT_SLOT = "text"

DIALECTS = ("javascript", "typescript", "tsx")

_LANGUAGE_FACTORIES: Dict[str, Callable[[], Any]] = {
    "javascript": ts_javascript.language,
    "typescript": ts_typescript.language_typescript,
    "tsx": ts_typescript.language_tsx,
}

# Kinds whose source text is kept even though they have named children
_TEXT_KINDS = frozenset({"string", "template_string"})

# Backslash escapes inside a string literal, including line continuations
_ESCAPE_RE = re.compile(
    r"\\(?:u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|x([0-9a-fA-F]{2})"
    r"|(\r\n|[\n\r\u2028\u2029])|(.))",
    re.DOTALL,
)

_SINGLE_CHAR_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


@dataclass(frozen=True)
class SourceLocation:
    """Start/end position of a node (1-based lines, 0-based columns)."""

    line: int
    column: int
    end_line: int
    end_column: int


@dataclass(eq=False)
class SyntaxNode:
    """A node of a parsed program.

    Attributes:
        kind: Node kind tag (tree-sitter grammar type, e.g. ``call_expression``).
        fields: Named child slots in source order. A slot holds a node, a
            list of nodes, or a scalar such as the ``text`` of a leaf.
        loc: Source location, never part of ``fields``.
    """

    kind: str
    fields: Dict[str, Any] = field(default_factory=dict)
    loc: Optional[SourceLocation] = None

    def get(self, slot: str, default: Any = None) -> Any:
        return self.fields.get(slot, default)

    def child(self, slot: str) -> Optional["SyntaxNode"]:
        """Return the single node held by ``slot``, if any."""
        value = self.fields.get(slot)
        if isinstance(value, SyntaxNode):
            return value
        if isinstance(value, list) and value and isinstance(value[0], SyntaxNode):
            return value[0]
        return None

    def children(self, slot: str = CHILDREN_SLOT) -> List["SyntaxNode"]:
        """Return the nodes held by ``slot`` as a list."""
        value = self.fields.get(slot)
        if isinstance(value, SyntaxNode):
            return [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, SyntaxNode)]
        return []

    @property
    def text(self) -> Optional[str]:
        value = self.fields.get(TEXT_SLOT)
        return value if isinstance(value, str) else None

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind!r}, slots={list(self.fields)!r})"


@runtime_checkable
class ParseAdapter(Protocol):
    """Turns source text into a ``SyntaxNode`` tree.

    Implementations raise ``ParseError`` when the text is not a valid
    program in the requested dialect.
    """

    def parse(self, source_text: str, dialect: str = "javascript") -> SyntaxNode:
        """Parse ``source_text`` and return the program root."""


class TreeSitterAdapter:
    """ParseAdapter backed by the tree-sitter JavaScript/TypeScript grammars.

    Parsers are not shared between threads: each thread lazily builds its
    own parser per dialect, so one adapter can serve a thread pool.
    """

    _languages: Dict[str, Language] = {}
    _languages_lock = threading.Lock()

    def __init__(self) -> None:
        self._local = threading.local()

    @classmethod
    def _language(cls, dialect: str) -> Language:
        with cls._languages_lock:
            language = cls._languages.get(dialect)
            if language is None:
                factory = _LANGUAGE_FACTORIES.get(dialect)
                if factory is None:
                    raise ValueError(
                        f"Unsupported dialect {dialect!r}; expected one of {DIALECTS}"
                    )
                language = Language(factory())
                cls._languages[dialect] = language
                logger.debug("Loaded tree-sitter grammar for %s", dialect)
            return language

    def _parser(self, dialect: str) -> Parser:
        parsers = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = self._local.parsers = {}
        parser = parsers.get(dialect)
        if parser is None:
            parser = parsers[dialect] = Parser(self._language(dialect))
        return parser

    def parse(self, source_text: str, dialect: str = "javascript") -> SyntaxNode:
        """Parse source text into a ``SyntaxNode`` tree.

        Args:
            source_text: Program text.
            dialect: One of ``javascript``, ``typescript`` or ``tsx``.

        Returns:
            SyntaxNode: The ``program`` root.

        Raises:
            ParseError: If the grammar reports a syntax error.
            ValueError: If the dialect is unknown.
        """
        source = source_text.encode("utf-8")
        tree = self._parser(dialect).parse(source)
        root = tree.root_node
        if root.has_error:
            line, column = _first_error_position(root)
            raise ParseError(f"Invalid {dialect} syntax", line=line, column=column)
        return _convert(root, source)


def _first_error_position(root: Node) -> Tuple[int, int]:
    """Locate the first ERROR or MISSING node (1-based line, 1-based column)."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1, node.start_point[1] + 1
        # only subtrees that contain an error are worth entering
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return root.start_point[0] + 1, root.start_point[1] + 1


def _make_node(ts_node: Node, source: bytes) -> SyntaxNode:
    start, end = ts_node.start_point, ts_node.end_point
    node = SyntaxNode(
        kind=ts_node.type,
        loc=SourceLocation(start[0] + 1, start[1], end[0] + 1, end[1]),
    )
    if ts_node.named_child_count == 0 or ts_node.type in _TEXT_KINDS:
        node.fields[TEXT_SLOT] = source[ts_node.start_byte:ts_node.end_byte].decode(
            "utf-8", errors="replace"
        )
    return node


def _add_to_slot(fields: Dict[str, Any], slot: str, node: SyntaxNode) -> None:
    if slot == CHILDREN_SLOT:
        fields.setdefault(slot, []).append(node)
        return
    existing = fields.get(slot)
    if existing is None:
        fields[slot] = node
    elif isinstance(existing, list):
        existing.append(node)
    else:
        fields[slot] = [existing, node]


def _convert(ts_root: Node, source: bytes) -> SyntaxNode:
    """Convert a tree-sitter tree without recursion.

    Anonymous tokens (punctuation, keywords) are dropped unless the grammar
    gives them a field name.
    """
    root = _make_node(ts_root, source)
    stack = [(ts_root, root)]
    while stack:
        ts_node, node = stack.pop()
        for index, ts_child in enumerate(ts_node.children):
            slot = ts_node.field_name_for_child(index)
            if slot is None and not ts_child.is_named:
                continue
            child = _make_node(ts_child, source)
            _add_to_slot(node.fields, slot or CHILDREN_SLOT, child)
            stack.append((ts_child, child))
    return root


def _decode_escape(match: "re.Match[str]") -> str:
    code_point, hex4, hex2, continuation, char = match.groups()
    if continuation is not None:
        return ""
    if code_point is not None or hex4 is not None or hex2 is not None:
        value = int(code_point or hex4 or hex2, 16)
        return chr(value) if value <= 0x10FFFF else match.group(0)
    if char == "0":
        return "\0"
    return _SINGLE_CHAR_ESCAPES.get(char, char)


def string_literal_value(node: Optional[SyntaxNode]) -> Optional[str]:
    """Return the value of a plain string literal node, else ``None``.

    Only ``'...'`` and ``"..."`` literals qualify; template strings do not.
    Escape sequences are decoded, so ``'x\\u002Fy'`` has the value ``x/y``.
    """
    if node is None or node.kind != "string":
        return None
    text = node.text
    if text is None or len(text) < 2 or text[0] not in "'\"" or text[-1] != text[0]:
        return None
    value = _ESCAPE_RE.sub(_decode_escape, text[1:-1])
    # \uD83D\uDE00 style pairs decode to two surrogates; join them
    return value.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


__all__ = [
    "CHILDREN_SLOT",
    "DIALECTS",
    "ParseAdapter",
    "SourceLocation",
    "SyntaxNode",
    "TreeSitterAdapter",
    "string_literal_value",
]
