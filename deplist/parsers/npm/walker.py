"""Cycle-safe, visitor-dispatching walk over a syntax tree.

``walk`` accepts ``SyntaxNode`` trees produced by the parse adapters as well
as ESTree-shaped mappings (``{"type": "ImportDeclaration", ...}``) such as a
Babel JSON dump, so extraction rules can be tested against hand-built trees.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterator, Optional

from deplist.parsers.npm.syntax import SyntaxNode

logger = logging.getLogger("deplist.parsers.npm.walker")

Visitor = Callable[[Any], None]

# Position metadata, never children even when shaped like a node
METADATA_SLOTS = frozenset({"loc", "range"})


def node_kind(value: Any) -> Optional[str]:
    """Return the kind tag of ``value`` or ``None`` when it is not a node."""
    if isinstance(value, SyntaxNode):
        return value.kind
    if isinstance(value, Mapping):
        kind = value.get("type")
        if isinstance(kind, str):
            return kind
    return None


def _slots(node: Any) -> Iterator[tuple]:
    items = node.fields.items() if isinstance(node, SyntaxNode) else node.items()
    for slot, value in items:
        if slot not in METADATA_SLOTS:
            yield slot, value


def _child_nodes(node: Any) -> list:
    children = []
    for _slot, value in _slots(node):
        if isinstance(value, (list, tuple)):
            children.extend(item for item in value if node_kind(item) is not None)
        elif node_kind(value) is not None:
            children.append(value)
    return children


def walk(root: Any, visitors: Mapping[str, Visitor]) -> None:
    """Traverse ``root`` depth-first, dispatching on node kind.

    Each distinct node object is entered at most once: the visited set is
    keyed by identity, so shared subtrees are walked once and back-references
    cannot loop. ``visitors[kind](node)`` runs before the node's children,
    which are taken in slot order with sequences expanded in order. Values
    that are not nodes end their branch silently.

    Args:
        root: Tree root (``SyntaxNode`` or ESTree-style mapping).
        visitors: Mapping from node kind to callback.
    """
    visited: set = set()
    stack = [root]
    while stack:
        node = stack.pop()
        kind = node_kind(node)
        if kind is None or id(node) in visited:
            continue
        visited.add(id(node))

        visitor = visitors.get(kind)
        if visitor is not None:
            visitor(node)

        stack.extend(reversed(_child_nodes(node)))
    logger.debug("Walked %d node(s)", len(visited))


__all__ = ["METADATA_SLOTS", "Visitor", "node_kind", "walk"]
