"""Composable API functions for the C++ -> TypeScript pipeline.

Each function corresponds to a CLI workflow (plain, --pretty, --tree) but is
callable programmatically without argparse.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import TypeAdapter

from .cst import CstNode
from .formatter import Formatter, PrettierFormatter
from .nodes import Node
from .normalizer import Normalizer
from .parser import Parser, TreeSitterParserFactory
from .renderer import Renderer, render_nodes
from .stats import count_node_kinds
from . import constants

logger = logging.getLogger(__name__)

_NODE_LIST = TypeAdapter(list[Node])


def parse_source(source: str) -> CstNode:
    """Parse C++ source text into a ``CstNode`` snapshot.

    Args:
        source: The C++ source code text.

    Returns:
        The ``translation_unit`` root.
    """
    return Parser(TreeSitterParserFactory()).parse(source, constants.LANGUAGE)


def normalize_source(source: str) -> list[Node]:
    """Parse and normalize source into its top-level normalized nodes."""
    logger.info("Normalizing source (%d chars)", len(source))
    return Normalizer().normalize(parse_source(source))


def convert_cst(root: CstNode) -> str:
    """Normalize and render an already-parsed tree.

    Args:
        root: A ``translation_unit`` ``CstNode``.

    Returns:
        The generated TypeScript text.

    Raises:
        UnsupportedConstruct: on the first construct without a handler.
    """
    nodes = Normalizer().normalize(root)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Node kinds: %s", count_node_kinds(nodes))
    return render_nodes(nodes, Renderer())


def convert(source: str) -> str:
    """C++ source text -> TypeScript text, unformatted."""
    logger.info("Converting source (%d chars)", len(source))
    return convert_cst(parse_source(source))


def pretty(source: str, formatter: Optional[Formatter] = None) -> str:
    """Convert, then run the result through *formatter* (prettier by default)."""
    formatter = formatter or PrettierFormatter()
    return formatter.format(convert(source))


def dump_tree(source: str) -> str:
    """Normalize source and return the tree as indented JSON.

    Args:
        source: The C++ source code text.

    Returns:
        A JSON array, one element per top-level node.
    """
    nodes = normalize_source(source)
    return json.dumps(_NODE_LIST.dump_python(nodes, mode="json"), indent=2)


def load_tree(text: str) -> list[Node]:
    """Inverse of :func:`dump_tree`."""
    return _NODE_LIST.validate_json(text)
