"""
jinjalens.variables - Variable Tree and Resolution
==================================================

The variable tree describes the names a template may reference. It is
supplied by the host (usually built from JSON) and is read-only here.

Tree Model
----------
Every node is one of three variants::

    ObjectNode(children)   nested mapping, key -> node
    Leaf(description)      a value with a human readable description
    ArrayMarker()          a list-shaped value

``VariableTree`` wraps the root ``ObjectNode`` and offers immutable
builders (``with_variable``, ``merge``).

Resolution
----------
- ``check_undefined_variables``: shallow, root-only existence check for
  expression blocks.
- ``property_candidates``: children of a dotted path, for ``news.`` style
  completion.
- ``flatten_variables``: every node as a completion, depth first.

Usage Example
-------------
>>> tree = VariableTree.from_mapping({"news": {"headline": "Title"}})
>>> [c.label for c in property_candidates(tree, "news")]
['headline']
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinjalens.models import (
    Block,
    BlockKind,
    CompletionCandidate,
    CompletionKind,
    Diagnostic,
    DiagnosticBuilder,
)
from jinjalens.tables import BUILTIN_NAMES, LITERAL_PATTERN


logger = logging.getLogger(__name__)

ARRAY_DETAIL = "Array"


# =============================================================================
# Tree Model
# =============================================================================

@dataclass(frozen=True)
class Leaf:
    """A value known only by its description."""

    description: str = ""


@dataclass(frozen=True)
class ArrayMarker:
    """A list-shaped value; it has no addressable children."""


@dataclass(frozen=True)
class ObjectNode:
    """A nested mapping of child names to nodes."""

    children: Mapping[str, VariableNode] = field(default_factory=dict)


VariableNode = Leaf | ArrayMarker | ObjectNode


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _to_node(value: Any) -> VariableNode:
    if isinstance(value, (Leaf, ArrayMarker, ObjectNode)):
        return value
    if isinstance(value, Mapping):
        return ObjectNode({str(k): _to_node(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return ArrayMarker()
    if isinstance(value, str):
        return Leaf(value)
    return Leaf(_json_type_name(value))


def _merge_nodes(base: VariableNode, overlay: VariableNode) -> VariableNode:
    if isinstance(base, ObjectNode) and isinstance(overlay, ObjectNode):
        merged = dict(base.children)
        for key, child in overlay.children.items():
            merged[key] = _merge_nodes(merged[key], child) if key in merged else child
        return ObjectNode(merged)
    return overlay


def _insert(node: VariableNode | None, parts: list[str], description: str) -> VariableNode:
    if not parts:
        return Leaf(description)
    children = dict(node.children) if isinstance(node, ObjectNode) else {}
    head, rest = parts[0], parts[1:]
    children[head] = _insert(children.get(head), rest, description)
    return ObjectNode(children)


class VariableTree:
    """
    Immutable snapshot of the known template variables.

    Parameters
    ----------
    root : ObjectNode | None
        Top-level mapping; an empty tree when omitted.
    """

    def __init__(self, root: ObjectNode | None = None) -> None:
        self.root = root or ObjectNode()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> VariableTree:
        """
        Build a tree from plain nested data such as parsed JSON.

        dicts become objects, lists become arrays, strings become leaf
        descriptions and other scalars become leaves described by their
        JSON type name.

        Raises
        ------
        TypeError
            If ``mapping`` is not a mapping.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(
                f"Variable tree must be built from a mapping, got {type(mapping).__name__}"
            )
        return cls(_to_node(mapping))

    def with_variable(self, path: str, description: str = "") -> VariableTree:
        """
        Return a new tree with ``path`` added as a leaf.

        Missing intermediate objects are created; a leaf standing in the
        way is replaced by an object.

        Raises
        ------
        ValueError
            If ``path`` has an empty segment.
        """
        parts = path.strip().split(".")
        if not all(parts):
            raise ValueError(f"Invalid variable path '{path}'")
        root = _insert(self.root, parts, description)
        return VariableTree(root)

    def merge(self, other: VariableTree) -> VariableTree:
        """Return a new tree with ``other`` deep-merged over this one."""
        return VariableTree(_merge_nodes(self.root, other.root))

    def get(self, path: str) -> VariableNode | None:
        """Return the node at a dotted path, or ``None`` if any segment is missing."""
        node: VariableNode = self.root
        for part in path.split("."):
            if not isinstance(node, ObjectNode) or part not in node.children:
                return None
            node = node.children[part]
        return node

    def keys(self) -> Iterator[str]:
        return iter(self.root.children)

    def __contains__(self, name: object) -> bool:
        return name in self.root.children

    def __len__(self) -> int:
        return len(self.root.children)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, VariableTree) and self.root == other.root

    def __repr__(self) -> str:
        return f"VariableTree({list(self.root.children)!r})"


def as_tree(variables: VariableTree | Mapping[str, Any] | None) -> VariableTree:
    """Accept a tree, plain nested data or ``None`` (empty tree)."""
    if variables is None:
        return VariableTree()
    if isinstance(variables, VariableTree):
        return variables
    return VariableTree.from_mapping(variables)


def load_variables(path: Path) -> VariableTree:
    """
    Load a variable tree from a JSON file holding one object.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file is not JSON or does not hold an object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Variables file {path} must contain a JSON object")
    return VariableTree.from_mapping(data)


# Built-in variables of the prompt editor this package was written for.
DEFAULT_VARIABLES = VariableTree.from_mapping({
    "system": {
        "time": "Current timestamp",
        "user": "Current user info",
        "environment": "Runtime environment",
    },
    "news": {
        "headline": "News article headline",
        "source": "News source name",
        "published_at": "Publication timestamp",
        "symbols_mentioned": "Array of financial symbols",
        "body": "Full article content",
    },
    "rollups": {
        "btc": {
            "full": "Complete BTC analysis",
            "summary": "BTC summary data",
            "price": "Current BTC price",
        },
    },
    "recent_news": {
        "btc": "Array of recent BTC news items",
    },
    "templates": {
        "instructions": {
            "4o": "GPT-4 instruction template",
        },
    },
})


# =============================================================================
# Candidates
# =============================================================================

def _object_detail(node: ObjectNode) -> str:
    return f"Object with {len(node.children)} properties"


def _node_detail(node: VariableNode) -> str:
    if isinstance(node, ObjectNode):
        return _object_detail(node)
    if isinstance(node, ArrayMarker):
        return ARRAY_DETAIL
    return node.description


def property_candidates(tree: VariableTree, object_path: str) -> list[CompletionCandidate]:
    """
    Completions for the children of ``object_path``.

    Returns an empty list when a segment is missing or the path does not
    end on an object. Nested objects are tagged ``VARIABLE``, everything
    else ``PROPERTY``.
    """
    node = tree.get(object_path)
    if not isinstance(node, ObjectNode):
        return []
    return [
        CompletionCandidate(
            label=key,
            kind=CompletionKind.VARIABLE if isinstance(child, ObjectNode) else CompletionKind.PROPERTY,
            apply_text=key,
            detail=_node_detail(child),
        )
        for key, child in node.children.items()
    ]


def flatten_variables(tree: VariableTree) -> list[CompletionCandidate]:
    """
    Every node of the tree as a completion, depth first.

    Labels are the node's own key; the inserted text is its full dotted
    path. The result is proportional to tree size, so hosts calling this
    on every keystroke should cache it per tree.
    """
    candidates: list[CompletionCandidate] = []

    def visit(node: ObjectNode, prefix: str) -> None:
        for key, child in node.children.items():
            path = f"{prefix}.{key}" if prefix else key
            candidates.append(CompletionCandidate(
                label=key,
                kind=CompletionKind.VARIABLE,
                apply_text=path,
                detail=_node_detail(child),
            ))
            if isinstance(child, ObjectNode):
                visit(child, path)

    visit(tree.root, "")
    return candidates


# =============================================================================
# Undefined Variable Check
# =============================================================================

def _is_checkable(expression: str) -> bool:
    if any(ch in expression for ch in "[\"'("):
        return False
    if any(ch.isspace() for ch in expression):
        return False
    if LITERAL_PATTERN.match(expression):
        return False
    return expression.split(".")[0] not in BUILTIN_NAMES


def check_undefined_variables(
    blocks: Iterable[Block],
    tree: VariableTree,
) -> list[Diagnostic]:
    """
    Report expression roots that are not top-level keys of ``tree``.

    Only simple references (``name``, ``name.attr``, optionally followed
    by filters) are checked; anything with brackets, quotes, calls,
    spaces, literals or ``loop``/``super`` is skipped. Nothing is
    reported when the tree is empty.
    """
    builder = DiagnosticBuilder()
    if not len(tree):
        return builder.build()

    for block in blocks:
        if block.kind is not BlockKind.EXPRESSION:
            continue
        expression = block.content.split("|")[0].strip()
        if not expression or not _is_checkable(expression):
            continue
        root = expression.split(".")[0]
        if root and root not in tree:
            start = block.content_offset + block.content.index(root)
            builder.error(start, start + len(root), f"Undefined variable '{root}'")

    return builder.build()
