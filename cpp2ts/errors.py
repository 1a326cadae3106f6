"""Errors raised by the conversion pipeline."""

from __future__ import annotations

from . import constants


class ConversionError(Exception):
    """Base error for this package."""


class UnsupportedConstruct(ConversionError):
    """A CST kind or normalized variant with no registered handler.

    Always fatal for the file being converted.  The payload is the
    unrecognised kind plus the kind of its immediate enclosing node, which
    is what a new handler needs to be written against.
    """

    def __init__(self, node_kind: str, context_kind: str = constants.FILE_CONTEXT):
        self.node_kind = node_kind
        self.context_kind = context_kind
        super().__init__(
            f"Unhandled node type '{node_kind}' in context '{context_kind}'"
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": "UnsupportedConstruct",
            "nodeKind": self.node_kind,
            "contextKind": self.context_kind,
        }


class DispatchMismatch(ConversionError):
    """The renderer's dispatch table does not cover exactly the node variants."""


class FormatterError(ConversionError):
    """Raised when the external formatter fails."""
