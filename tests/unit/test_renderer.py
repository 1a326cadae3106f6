"""Tests for Renderer -- hand-built normalized nodes to TypeScript text."""

from __future__ import annotations

import dataclasses
from types import SimpleNamespace

import pytest

from cpp2ts.errors import DispatchMismatch, UnsupportedConstruct
from cpp2ts.nodes import (
    AssignmentExpression,
    BinaryExpression,
    Block,
    BooleanLiteral,
    BreakStatement,
    CallExpression,
    CaseStatement,
    Choice,
    ConditionalExpression,
    ContinueStatement,
    Declaration,
    Declarator,
    DoStatement,
    ForStatement,
    FunctionDefinition,
    IfStatement,
    IndexStep,
    Namespace,
    NullLiteral,
    NumberLiteral,
    Parameter,
    ParenthesizedExpression,
    Path,
    Reference,
    ReturnStatement,
    StringLiteral,
    SwitchStatement,
    ThrowStatement,
    UnaryExpression,
    UpdateExpression,
    UserDefinedLiteral,
    WhileStatement,
)
from cpp2ts.renderer import (
    ConversionState,
    Module,
    Renderer,
    Scope,
    check_dispatch,
    flatten_name,
    format_number,
    render_nodes,
    ts_type,
)


def _render(*nodes) -> str:
    return render_nodes(list(nodes))


def _ref(name: str) -> Reference:
    return Reference(name=name)


def _num(value: str) -> NumberLiteral:
    return NumberLiteral(value=value)


def _let(name: str, init=None, type_name: str | None = "int") -> Declaration:
    return Declaration(
        declarators=[Declarator(name=name, type_name=type_name, init=init)]
    )


def _assign(name: str, value: str) -> AssignmentExpression:
    return AssignmentExpression(left=_ref(name), operator="=", right=_num(value))


def _in_function(*statements) -> str:
    return _render(FunctionDefinition(name="f", body=list(statements)))


def _ternary(test: str, success: str, failure: str) -> ConditionalExpression:
    return ConditionalExpression(test=_ref(test), success=_num(success), failure=_num(failure))


class TestFormatNumber:
    def test_leading_dot_gets_zero(self):
        assert format_number(".5") == "0.5"

    def test_plain_numbers_are_unchanged(self):
        assert format_number("5") == "5"
        assert format_number("3.14") == "3.14"

    def test_suffixes_are_dropped(self):
        assert format_number("1.0f") == "1.0"
        assert format_number("10UL") == "10"
        assert format_number("7ll") == "7"

    def test_hex_digits_survive_suffix_stripping(self):
        assert format_number("0xFF") == "0xFF"
        assert format_number("0xFFu") == "0xFF"

    def test_digit_separators(self):
        assert format_number("1'000'000") == "1_000_000"

    def test_legacy_octal_gets_prefix(self):
        assert format_number("017") == "0o17"
        assert format_number("017u") == "0o17"
        assert format_number("0'17") == "0o17"

    def test_zero_and_fractions_are_not_octal(self):
        assert format_number("0") == "0"
        assert format_number("0.5") == "0.5"
        assert format_number("089") == "089"


class TestTypes:
    def test_primitive_types(self):
        assert ts_type("int") == "number"
        assert ts_type("unsigned long") == "number"
        assert ts_type("bool") == "boolean"
        assert ts_type("std::string") == "string"
        assert ts_type("void") == "void"

    def test_auto_and_missing_types_are_omitted(self):
        assert ts_type("auto") is None
        assert ts_type(None) is None

    def test_other_types_pass_through_with_dots(self):
        assert ts_type("geo::Point") == "geo.Point"


class TestConversionState:
    def test_state_is_immutable(self):
        state = ConversionState.top_level(Module())
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.scope = Scope.NAMESPACE

    def test_descend_leaves_original_untouched(self):
        state = ConversionState.top_level(Module())
        inner = state.descend(path=("N",), scope=Scope.NAMESPACE)
        assert state.path == ()
        assert inner.module is state.module

    def test_flatten_name_only_in_namespace_scope(self):
        state = ConversionState.top_level(Module())
        assert flatten_name("x", state) == "x"
        assert flatten_name("x", state.descend(path=("A", "B"), scope=Scope.NAMESPACE)) == "A_B_x"
        assert flatten_name("x", state.descend(path=("A",), scope=Scope.FUNCTION)) == "x"

    def test_module_skips_empty_segments(self):
        module = Module()
        module.open_segment().append("a")
        module.open_segment()
        module.open_segment().extend(["b", "c"])
        assert module.to_text() == "a\nb\nc"


class TestRenderDeclarations:
    def test_typed_declaration(self):
        assert _render(_let("x", _num("1"))) == "let x: number = 1"

    def test_const_declaration(self):
        decl = Declaration(
            declarators=[
                Declarator(name="k", type_name="double", init=_num(".5"), is_const=True)
            ]
        )
        assert _render(decl) == "const k: number = 0.5"

    def test_untyped_uninitialized(self):
        assert _render(_let("y", type_name="auto")) == "let y"

    def test_namespace_member_is_flattened_once(self):
        text = _render(Namespace(name="N", body=[_let("x", _num("1"))]), _let("y", _num("2")))
        assert text == "let N_x: number = 1\nlet y: number = 2"
        assert text.count("N_x") == 1

    def test_nested_namespaces(self):
        inner = Namespace(name="B", body=[_let("z")])
        assert _render(Namespace(name="A", body=[inner])) == "let A_B_z: number"

    def test_function_with_parameters(self):
        function = FunctionDefinition(
            name="add",
            parameters=[
                Parameter(name="a", type_name="int"),
                Parameter(name="b", type_name="int", default=_num("2")),
            ],
            return_type="int",
            body=[
                ReturnStatement(
                    statement=BinaryExpression(operator="+", left=_ref("a"), right=_ref("b"))
                )
            ],
        )
        assert _render(function) == (
            "function add(a: number, b: number = 2): number {\n"
            "  return a + b\n"
            "}"
        )

    def test_namespaced_function_keeps_locals_unflattened(self):
        function = FunctionDefinition(name="f", return_type="void", body=[_let("y", _num("2"))])
        assert _render(Namespace(name="N", body=[function])) == (
            "function N_f(): void {\n"
            "  let y: number = 2\n"
            "}"
        )

    def test_segments_keep_declaration_order(self):
        text = _render(
            _let("a"),
            FunctionDefinition(name="f", body=[]),
            _let("b"),
        )
        assert text.splitlines() == ["let a: number", "function f() {", "}", "let b: number"]


class TestRenderStatements:
    def test_if_else_if_else(self):
        statement = IfStatement(
            choices=[
                Choice(
                    condition=BinaryExpression(operator=">", left=_ref("x"), right=_num("0")),
                    statements=[_assign("y", "1")],
                ),
                Choice(
                    condition=BinaryExpression(operator="<", left=_ref("x"), right=_num("0")),
                    statements=[_assign("y", "2")],
                ),
                Choice(statements=[_assign("y", "0")]),
            ]
        )
        assert _render(statement) == (
            "if (x > 0) {\n"
            "  y = 1\n"
            "} else if (x < 0) {\n"
            "  y = 2\n"
            "} else {\n"
            "  y = 0\n"
            "}"
        )

    def test_switch_keeps_source_order(self):
        statement = SwitchStatement(
            condition=_ref("c"),
            statements=[
                CaseStatement(test=_ref("A"), statements=[BreakStatement()]),
                CaseStatement(is_default=True, statements=[BreakStatement()]),
                CaseStatement(test=_ref("B"), statements=[ContinueStatement()]),
            ],
        )
        assert _render(statement) == (
            "switch (c) {\n"
            "  case A:\n"
            "    break\n"
            "  default:\n"
            "    break\n"
            "  case B:\n"
            "    continue\n"
            "}"
        )

    def test_for_with_declaration_init(self):
        statement = ForStatement(
            init=[
                Declaration(
                    declarators=[
                        Declarator(name="i", type_name="int", init=_num("0")),
                        Declarator(name="j", init=_num("1")),
                    ]
                )
            ],
            test=BinaryExpression(operator="<", left=_ref("i"), right=_ref("n")),
            update=UpdateExpression(operator="++", expression=_ref("i")),
            body=[],
        )
        assert _render(statement) == "for (let i: number = 0, j = 1; i < n; i++) {\n}"

    def test_empty_for_header(self):
        assert _render(ForStatement(body=[BreakStatement()])) == "for (;;) {\n  break\n}"

    def test_while_and_do(self):
        decrement = UpdateExpression(operator="--", expression=_ref("x"))
        assert _render(WhileStatement(condition=_ref("x"), statements=[decrement])) == (
            "while (x) {\n  x--\n}"
        )
        assert _render(DoStatement(statements=[decrement], condition=_ref("x"))) == (
            "do {\n  x--\n} while (x)"
        )

    def test_sibling_blocks_keep_their_braces(self):
        assert _in_function(
            Block(statements=[_let("y", _num("1"))]),
            Block(statements=[_let("y", _num("2"))]),
        ) == (
            "function f() {\n"
            "  {\n"
            "    let y: number = 1\n"
            "  }\n"
            "  {\n"
            "    let y: number = 2\n"
            "  }\n"
            "}"
        )

    def test_block_inside_case(self):
        statement = SwitchStatement(
            condition=_ref("c"),
            statements=[
                CaseStatement(
                    test=_num("1"),
                    statements=[Block(statements=[_let("y", _num("1")), BreakStatement()])],
                ),
            ],
        )
        assert _render(statement) == (
            "switch (c) {\n"
            "  case 1:\n"
            "    {\n"
            "      let y: number = 1\n"
            "      break\n"
            "    }\n"
            "}"
        )

    def test_return_and_throw(self):
        error = CallExpression(object=_ref("Error"), args=[StringLiteral(value='"bad"')])
        assert _in_function(ReturnStatement(), ThrowStatement(expression=error)) == (
            "function f() {\n"
            "  return\n"
            '  throw Error("bad")\n'
            "}"
        )


class TestRenderExpressions:
    def test_word_operators_are_mapped(self):
        expression = BinaryExpression(
            operator="and",
            left=_ref("a"),
            right=UnaryExpression(operator="not", expression=_ref("b")),
        )
        assert _render(expression) == "a && !b"

    def test_binary_without_right_operand_renders_prefix(self):
        assert _render(BinaryExpression(operator="-", left=_num("5"))) == "-5"

    def test_prefix_update(self):
        assert _render(UpdateExpression(operator="++", expression=_ref("i"), is_postfix=False)) == "++i"

    def test_call_with_single_line_args(self):
        call = CallExpression(object=_ref("f"), args=[_ref("a"), _ref("b"), _ref("c")])
        assert _render(call) == "f(a, b, c)"

    def test_multi_line_arg_splits_argument_list(self):
        call = CallExpression(object=_ref("f"), args=[_ref("a"), _ternary("t", "1", "2")])
        assert _render(call) == (
            "f(\n"
            "  a,\n"
            "  t\n"
            "    ? 1\n"
            "    : 2\n"
            ")"
        )

    def test_conditional_in_declaration(self):
        assert _render(_let("v", _ternary("t", "1", "2"), type_name=None)) == (
            "let v = t\n  ? 1\n  : 2"
        )

    def test_multi_line_parenthesized_collapses(self):
        expression = ParenthesizedExpression(value=_ternary("t", "1", "2"))
        assert _render(expression) == "(t ? 1 : 2)"

    def test_path(self):
        path = Path(
            steps=[
                CallExpression(object=_ref("get"), args=[]),
                Reference(name="items"),
                IndexStep(expression=_num("0")),
                Reference(name="size"),
            ]
        )
        assert _render(path) == "get().items[0].size"

    def test_literals(self):
        assert _render(NullLiteral()) == "null"
        assert _render(BooleanLiteral(value="true")) == "true"
        assert _render(StringLiteral(value="'c'")) == "'c'"
        assert _render(UserDefinedLiteral(text="10_km")) == "10_km"


class TestRendererDispatch:
    def test_renderer_dispatch_is_total(self):
        Renderer()

    def test_incomplete_table_is_rejected(self):
        with pytest.raises(DispatchMismatch):
            check_dispatch({})

    def test_unknown_variant_raises(self):
        state = ConversionState.top_level(Module())
        with pytest.raises(UnsupportedConstruct) as excinfo:
            Renderer().render(SimpleNamespace(kind="lambda"), state)
        assert excinfo.value.to_dict() == {
            "kind": "UnsupportedConstruct",
            "nodeKind": "lambda",
            "contextKind": "file",
        }

    def test_unknown_nested_variant_names_its_parent(self):
        statement = ReturnStatement.model_construct(statement=SimpleNamespace(kind="lambda"))
        with pytest.raises(UnsupportedConstruct) as excinfo:
            _render(statement)
        assert excinfo.value.context_kind == "return_statement"
