"""Tree-Sitter Parsing Layer."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .cst import CstNode, snapshot
from . import constants

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


class Parser:
    """Parses source text and snapshots the tree into a ``CstNode``."""

    def __init__(self, parser_factory: ParserFactory | None = None):
        self._factory = parser_factory or TreeSitterParserFactory()

    def parse(self, source: str, language: str = constants.LANGUAGE) -> CstNode:
        parser = self._factory.get_parser(language)
        tree = parser.parse(source.encode("utf-8"))
        logger.debug("Parsed %d bytes of %s", len(source.encode("utf-8")), language)
        return snapshot(tree.root_node)
