"""CST snapshot: tree-sitter nodes copied into plain, read-only values."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CstNode(BaseModel):
    """One concrete-syntax-tree node: kind, source text and every child in order.

    Anonymous tokens (punctuation, keywords) are kept as children; their
    ``kind`` is the token itself, e.g. ``";"`` or ``"namespace"``.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    text: str = ""
    children: tuple[CstNode, ...] = ()

    @classmethod
    def leaf(cls, kind: str, text: str | None = None) -> CstNode:
        """Build a childless node; a token's text defaults to its kind."""
        return cls(kind=kind, text=kind if text is None else text)

    @classmethod
    def of(cls, kind: str, *children: CstNode, text: str = "") -> CstNode:
        return cls(kind=kind, text=text, children=tuple(children))


def snapshot(node) -> CstNode:
    """Copy a tree-sitter node (and its whole subtree) into a ``CstNode``."""
    text = node.text.decode("utf-8") if node.text is not None else ""
    return CstNode(
        kind=node.type,
        text=text,
        children=tuple(snapshot(child) for child in node.children),
    )


def walk(node: CstNode):
    """Yield *node* and all of its descendants, depth-first, in source order."""
    yield node
    for child in node.children:
        yield from walk(child)
