"""Tests for the composable API functions in cpp2ts.api."""

import json
import logging

import cpp2ts.api
from cpp2ts.api import (
    convert,
    convert_cst,
    dump_tree,
    load_tree,
    normalize_source,
    parse_source,
    pretty,
)
from cpp2ts.cst import CstNode
from cpp2ts.formatter import Formatter, NullFormatter
from cpp2ts.nodes import Declaration, NodeKind

SIMPLE_SOURCE = "int x = 42;\n"

NAMESPACE_SOURCE = """\
namespace geo {
  double scale(double v) { return v * 2; }
}
"""


class _ShoutingFormatter(Formatter):
    def format(self, text: str) -> str:
        return text.upper()


class TestParseSource:
    def test_returns_translation_unit(self):
        root = parse_source(SIMPLE_SOURCE)
        assert isinstance(root, CstNode)
        assert root.kind == "translation_unit"

    def test_snapshot_keeps_anonymous_tokens(self):
        root = parse_source(SIMPLE_SOURCE)
        (declaration,) = root.children
        assert declaration.children[-1].kind == ";"


class TestNormalizeSource:
    def test_returns_normalized_nodes(self):
        nodes = normalize_source(SIMPLE_SOURCE)
        assert len(nodes) == 1
        assert isinstance(nodes[0], Declaration)

    def test_namespace_is_kept_in_tree(self):
        (namespace,) = normalize_source(NAMESPACE_SOURCE)
        assert namespace.kind == NodeKind.NAMESPACE
        assert namespace.body[0].name == "scale"


class TestConvert:
    def test_convert_source(self):
        assert convert(SIMPLE_SOURCE) == "let x: number = 42"

    def test_convert_cst_matches_convert(self):
        assert convert_cst(parse_source(NAMESPACE_SOURCE)) == convert(NAMESPACE_SOURCE)

    def test_empty_source(self):
        assert convert("") == ""


class TestDebugLogging:
    def test_kind_counts_skipped_when_debug_is_off(self, monkeypatch, caplog):
        calls = []
        monkeypatch.setattr(cpp2ts.api, "count_node_kinds", lambda nodes: calls.append(nodes))
        caplog.set_level(logging.INFO, logger="cpp2ts.api")
        assert convert(SIMPLE_SOURCE) == "let x: number = 42"
        assert calls == []

    def test_kind_counts_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="cpp2ts.api")
        convert(SIMPLE_SOURCE)
        assert any("Node kinds" in record.getMessage() for record in caplog.records)


class TestPretty:
    def test_uses_given_formatter(self):
        assert pretty(SIMPLE_SOURCE, formatter=_ShoutingFormatter()) == "LET X: NUMBER = 42"

    def test_null_formatter_is_identity(self):
        assert pretty(SIMPLE_SOURCE, formatter=NullFormatter()) == convert(SIMPLE_SOURCE)


class TestDumpTree:
    def test_returns_json_array(self):
        data = json.loads(dump_tree(SIMPLE_SOURCE))
        assert isinstance(data, list)
        assert data[0]["kind"] == "declaration"
        assert data[0]["declarators"][0]["name"] == "x"

    def test_dump_loads_back_to_same_tree(self):
        assert load_tree(dump_tree(NAMESPACE_SOURCE)) == normalize_source(NAMESPACE_SOURCE)
