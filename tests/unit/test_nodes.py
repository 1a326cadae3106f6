"""Tests for the normalized node models and their invariants."""

import pytest
from pydantic import ValidationError

from cpp2ts.nodes import Choice, IfStatement, NodeKind, Path, Reference


class TestIfStatementInvariants:
    def test_else_must_be_last(self):
        with pytest.raises(ValidationError):
            IfStatement(
                choices=[
                    Choice(condition=Reference(name="a")),
                    Choice(),
                    Choice(condition=Reference(name="b")),
                ]
            )

    def test_chain_must_start_with_condition(self):
        with pytest.raises(ValidationError):
            IfStatement(choices=[Choice()])

    def test_valid_chain(self):
        statement = IfStatement(choices=[Choice(condition=Reference(name="a")), Choice()])
        assert statement.kind == NodeKind.IF_STATEMENT


class TestPathInvariants:
    def test_path_needs_steps(self):
        with pytest.raises(ValidationError):
            Path(steps=[])


class TestImmutability:
    def test_nodes_are_frozen(self):
        reference = Reference(name="a")
        with pytest.raises(ValidationError):
            reference.name = "b"
