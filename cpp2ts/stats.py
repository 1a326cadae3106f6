"""Node-kind statistics over a normalized tree."""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel

from .nodes import Node


def _children(value) -> list:
    if isinstance(value, BaseModel):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, BaseModel)]
    return []


def iter_nodes(nodes: list[Node]):
    """Yield every normalized node reachable from *nodes*, depth-first."""
    stack = list(reversed(nodes))
    while stack:
        model = stack.pop()
        if hasattr(model, "kind"):
            yield model
        nested: list = []
        for name in type(model).model_fields:
            nested.extend(_children(getattr(model, name)))
        stack.extend(reversed(nested))


def count_node_kinds(nodes: list[Node]) -> dict[str, int]:
    """Return a frequency map of node kinds in the given normalized tree.

    Args:
        nodes: Top-level normalized nodes, as returned by the normalizer.

    Returns:
        A dict mapping node kind strings to their occurrence counts.
        ``Declarator`` and ``Choice`` values are walked but not counted.
        Empty dict for an empty input list.
    """
    return dict(Counter(node.kind.value for node in iter_nodes(nodes)))
