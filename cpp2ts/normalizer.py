"""Normalizer: tree-sitter C++ CST -> normalized tree.

Every CST production the converter understands has one ``_normalize_*``
builder registered in a dispatch table.  Builders walk the production's
children in source order and fill named slots; punctuation and keywords are
consumed as slot separators or dropped.  Any child that has no slot to go in
raises :class:`UnsupportedConstruct` naming the child kind and the production
it appeared in.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .cst import CstNode
from .errors import UnsupportedConstruct
from .nodes import (
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
    Node,
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
from . import constants

logger = logging.getLogger(__name__)

COMMENT_TYPES = frozenset({"comment"})

DROPPED_PREPROC_TYPES = frozenset(
    {
        "preproc_include",
        "preproc_def",
        "preproc_function_def",
        "preproc_call",
    }
)

PREPROC_ALTERNATIVE_TYPES = frozenset(
    {"preproc_else", "preproc_elif", "preproc_elifdef"}
)

TYPE_SPECIFIER_TYPES = frozenset(
    {
        "primitive_type",
        "type_identifier",
        "sized_type_specifier",
        "qualified_identifier",
        "template_type",
        "placeholder_type_specifier",
        "auto",
    }
)

NAME_DECLARATOR_TYPES = frozenset(
    {
        "identifier",
        "field_identifier",
        "qualified_identifier",
        "pointer_declarator",
        "reference_declarator",
        "array_declarator",
    }
)

WRAPPING_DECLARATOR_TYPES = frozenset({"pointer_declarator", "reference_declarator"})

CONST_QUALIFIERS = frozenset({"const", "constexpr"})

IGNORED_SPECIFIER_TYPES = frozenset(
    {"storage_class_specifier", "virtual", "explicit", "attribute_declaration"}
)

BINARY_OPERATORS = frozenset(
    {
        "*", "/", "%", "+", "-",
        "<<", ">>",
        "<", "<=", ">", ">=", "<=>",
        "==", "!=",
        "&", "^", "|",
        "&&", "||",
        "and", "or", "bitand", "bitor", "xor",
    }
)

UNARY_OPERATORS = frozenset({"!", "-", "+", "~", "not", "compl"})

UPDATE_OPERATORS = frozenset({"++", "--"})

ASSIGNMENT_OPERATORS = frozenset(
    {"=", "+=", "-=", "*=", "/=", "%=", "<<=", ">>=", "&=", "^=", "|="}
)


def flatten_qualified(text: str) -> str:
    """``a::b::c`` -> ``a_b_c``; leading ``::`` (global scope) is dropped."""
    parts = [part.strip() for part in text.split(constants.SCOPE_SEPARATOR)]
    return constants.NAME_SEPARATOR.join(part for part in parts if part)


class Normalizer:
    """Folds a C++ CST into the normalized tree.

    ``_ITEM_DISPATCH`` covers declaration-level items (translation unit and
    namespace bodies), ``_STMT_DISPATCH`` statements and ``_EXPR_DISPATCH``
    expressions.  Declaration-level items fall back to the statement table.
    """

    def __init__(self):
        self._context: list[str] = []
        self._EXPR_DISPATCH: dict[str, Callable[[CstNode], Node]] = {
            "identifier": self._normalize_identifier,
            "field_identifier": self._normalize_identifier,
            "this": self._normalize_identifier,
            "qualified_identifier": self._normalize_qualified_identifier,
            "number_literal": self._normalize_number_literal,
            "true": self._normalize_boolean_literal,
            "false": self._normalize_boolean_literal,
            "null": self._normalize_null_literal,
            "nullptr": self._normalize_null_literal,
            "string_literal": self._normalize_string_literal,
            "char_literal": self._normalize_string_literal,
            "raw_string_literal": self._normalize_string_literal,
            "concatenated_string": self._normalize_concatenated_string,
            "user_defined_literal": self._normalize_user_defined_literal,
            "binary_expression": self._normalize_binary_expression,
            "unary_expression": self._normalize_unary_expression,
            "update_expression": self._normalize_update_expression,
            "parenthesized_expression": self._normalize_parenthesized_expression,
            "conditional_expression": self._normalize_conditional_expression,
            "assignment_expression": self._normalize_assignment_expression,
            "call_expression": self._normalize_call_expression,
            "field_expression": self._normalize_field_expression,
            "subscript_expression": self._normalize_subscript_expression,
        }
        self._STMT_DISPATCH: dict[str, Callable[[CstNode], Node | list[Node]]] = {
            "compound_statement": self._normalize_block,
            "declaration": self._normalize_declaration,
            "expression_statement": self._normalize_expression_statement,
            "if_statement": self._normalize_if_statement,
            "for_statement": self._normalize_for_statement,
            "while_statement": self._normalize_while_statement,
            "do_statement": self._normalize_do_statement,
            "switch_statement": self._normalize_switch_statement,
            "case_statement": self._normalize_case_statement,
            "return_statement": self._normalize_return_statement,
            "throw_statement": self._normalize_throw_statement,
            "break_statement": self._normalize_break_statement,
            "continue_statement": self._normalize_continue_statement,
            "preproc_if": self._normalize_preproc_block,
            "preproc_ifdef": self._normalize_preproc_block,
        }
        self._ITEM_DISPATCH: dict[str, Callable[[CstNode], Node | list[Node]]] = {
            "namespace_definition": self._normalize_namespace_definition,
            "function_definition": self._normalize_function_definition,
        }

    # ── entry point ──────────────────────────────────────────────

    def normalize(self, root: CstNode) -> list[Node]:
        """Normalize a whole translation unit into its top-level nodes."""
        if root.kind != "translation_unit":
            raise UnsupportedConstruct(root.kind, constants.FILE_CONTEXT)
        self._context = [constants.FILE_CONTEXT]
        nodes = self._normalize_items(root)
        logger.debug("Normalized %d top-level nodes", len(nodes))
        return nodes

    def handled_kinds(self) -> frozenset[str]:
        """Every CST kind that has a builder or is dropped as noise."""
        return (
            frozenset(self._EXPR_DISPATCH)
            | frozenset(self._STMT_DISPATCH)
            | frozenset(self._ITEM_DISPATCH)
            | COMMENT_TYPES
            | DROPPED_PREPROC_TYPES
        )

    # ── dispatchers ──────────────────────────────────────────────

    def _is_noise(self, node: CstNode) -> bool:
        return node.kind in COMMENT_TYPES or node.kind in DROPPED_PREPROC_TYPES

    def _dispatch(self, handler: Callable, node: CstNode, parent: CstNode, *args):
        self._context.append(parent.kind)
        try:
            return handler(node, *args)
        finally:
            self._context.pop()

    def _incomplete(self, node: CstNode) -> UnsupportedConstruct:
        """Error for a production that ended before all of its slots were filled."""
        context = self._context[-1] if self._context else constants.FILE_CONTEXT
        return UnsupportedConstruct(node.kind, context)

    def _item(self, node: CstNode, parent: CstNode) -> list[Node]:
        handler = self._ITEM_DISPATCH.get(node.kind)
        if handler is None:
            return self._statement(node, parent)
        return _as_list(self._dispatch(handler, node, parent))

    def _statement(self, node: CstNode, parent: CstNode) -> list[Node]:
        handler = self._STMT_DISPATCH.get(node.kind)
        if handler is None:
            raise UnsupportedConstruct(node.kind, parent.kind)
        return _as_list(self._dispatch(handler, node, parent))

    def _expr(self, node: CstNode, parent: CstNode) -> Node:
        handler = self._EXPR_DISPATCH.get(node.kind)
        if handler is None:
            raise UnsupportedConstruct(node.kind, parent.kind)
        return self._dispatch(handler, node, parent)

    def _normalize_items(self, node: CstNode) -> list[Node]:
        """Declaration-level children of a translation unit or namespace body."""
        items: list[Node] = []
        for child in node.children:
            if self._is_noise(child) or child.kind in ("{", "}"):
                continue
            items.extend(self._item(child, node))
        return items

    # ── namespaces & preprocessor ────────────────────────────────

    def _normalize_namespace_definition(self, node: CstNode) -> Node | list[Node]:
        """Named namespaces become ``Namespace``; anonymous ones are transparent."""
        name: Optional[str] = None
        body: Optional[list[Node]] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("namespace", "inline"):
                continue
            if kind in ("identifier", "namespace_identifier", "nested_namespace_specifier"):
                if name is not None or body is not None:
                    raise UnsupportedConstruct(kind, node.kind)
                name = flatten_qualified(child.text)
            elif kind == "declaration_list":
                if body is not None:
                    raise UnsupportedConstruct(kind, node.kind)
                body = self._normalize_items(child)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if name is None:
            return body or []
        return Namespace(name=name, body=body or [])

    def _normalize_preproc_block(self, node: CstNode) -> list[Node]:
        """Keep the first branch of ``#if``/``#ifdef``; drop condition and alternatives."""
        items: list[Node] = []
        seen_condition = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("\n", "#endif"):
                continue
            if kind in ("#if", "#ifdef", "#ifndef"):
                continue
            if kind in PREPROC_ALTERNATIVE_TYPES:
                continue
            if not seen_condition:
                seen_condition = True
                continue
            items.extend(self._item(child, node))
        return items

    # ── declarations ─────────────────────────────────────────────

    def _normalize_declaration(self, node: CstNode) -> Declaration | list[Node]:
        """``T a, b = 1;``; function prototypes normalize to nothing."""
        type_name: Optional[str] = None
        is_const = False
        declarators: list[Declarator] = []
        prototypes = 0
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in (",", ";"):
                continue
            if kind in IGNORED_SPECIFIER_TYPES:
                continue
            if kind == "type_qualifier":
                is_const = is_const or child.text in CONST_QUALIFIERS
            elif kind in TYPE_SPECIFIER_TYPES and type_name is None and not declarators:
                type_name = self._type_text(child)
            elif self._is_function_declarator(child):
                prototypes += 1
            elif kind == "init_declarator":
                declarators.append(
                    self._dispatch(
                        self._normalize_init_declarator, child, node, type_name, is_const
                    )
                )
            elif kind in NAME_DECLARATOR_TYPES:
                declarators.append(
                    Declarator(
                        name=self._declarator_name(child, node),
                        type_name=type_name,
                        is_const=is_const,
                    )
                )
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if not declarators:
            if prototypes:
                return []
            raise self._incomplete(node)
        return Declaration(declarators=declarators)

    def _normalize_init_declarator(
        self, node: CstNode, type_name: Optional[str], is_const: bool
    ) -> Declarator:
        name: Optional[str] = None
        init: Optional[Node] = None
        seen_equals = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind == "=":
                seen_equals = True
            elif not seen_equals and name is None and kind in NAME_DECLARATOR_TYPES:
                name = self._declarator_name(child, node)
            elif seen_equals and init is None:
                init = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if name is None:
            raise self._incomplete(node)
        return Declarator(name=name, type_name=type_name, init=init, is_const=is_const)

    def _declarator_name(self, node: CstNode, parent: CstNode) -> str:
        """Name declared by *node*, looking through ``*``, ``&`` and ``[]``."""
        if node.kind in ("identifier", "field_identifier"):
            return node.text
        if node.kind == "qualified_identifier":
            return flatten_qualified(node.text)
        if node.kind in ("pointer_declarator", "reference_declarator", "array_declarator"):
            for child in node.children:
                if child.kind in NAME_DECLARATOR_TYPES:
                    return self._declarator_name(child, node)
        raise UnsupportedConstruct(node.kind, parent.kind)

    def _is_function_declarator(self, node: CstNode) -> bool:
        if node.kind == "function_declarator":
            return True
        if node.kind in WRAPPING_DECLARATOR_TYPES:
            return any(self._is_function_declarator(child) for child in node.children)
        return False

    def _type_text(self, node: CstNode) -> str:
        if node.kind in ("placeholder_type_specifier", "auto"):
            return "auto"
        return " ".join(node.text.split())

    # ── functions ────────────────────────────────────────────────

    def _normalize_function_definition(self, node: CstNode) -> FunctionDefinition:
        return_type: Optional[str] = None
        name: Optional[str] = None
        parameters: list[Parameter] = []
        body: Optional[list[Node]] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in IGNORED_SPECIFIER_TYPES:
                continue
            if kind == "type_qualifier":
                continue
            if kind in TYPE_SPECIFIER_TYPES and return_type is None and name is None:
                return_type = self._type_text(child)
            elif self._is_function_declarator(child) and name is None:
                name, parameters = self._normalize_function_declarator(child, node)
            elif kind == "compound_statement" and name is not None and body is None:
                body = self._dispatch(self._normalize_compound_statement, child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if name is None or body is None:
            raise self._incomplete(node)
        return FunctionDefinition(
            name=name, parameters=parameters, return_type=return_type, body=body
        )

    def _normalize_function_declarator(
        self, node: CstNode, parent: CstNode
    ) -> tuple[str, list[Parameter]]:
        if node.kind in WRAPPING_DECLARATOR_TYPES:
            inner = next(c for c in node.children if self._is_function_declarator(c))
            return self._normalize_function_declarator(inner, node)
        name: Optional[str] = None
        parameters: Optional[list[Parameter]] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("type_qualifier", "noexcept"):
                continue
            if kind in ("identifier", "field_identifier", "qualified_identifier") and name is None:
                name = self._declarator_name(child, node)
            elif kind == "parameter_list" and name is not None and parameters is None:
                parameters = self._normalize_parameter_list(child)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if name is None:
            raise UnsupportedConstruct(node.kind, parent.kind)
        return name, parameters or []

    def _normalize_parameter_list(self, node: CstNode) -> list[Parameter]:
        parameters: list[Parameter] = []
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("(", ")", ","):
                continue
            if kind in ("parameter_declaration", "optional_parameter_declaration"):
                parameter = self._normalize_parameter_declaration(child, len(parameters))
                if parameter is not None:
                    parameters.append(parameter)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        return parameters

    def _normalize_parameter_declaration(
        self, node: CstNode, position: int
    ) -> Optional[Parameter]:
        """``const T& name = default``; a lone ``void`` list entry yields ``None``."""
        type_name: Optional[str] = None
        name: Optional[str] = None
        default: Optional[Node] = None
        is_const = False
        is_ref = False
        seen_equals = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind == "type_qualifier":
                is_const = is_const or child.text in CONST_QUALIFIERS
            elif kind in TYPE_SPECIFIER_TYPES and type_name is None:
                type_name = self._type_text(child)
            elif kind in NAME_DECLARATOR_TYPES and name is None and not seen_equals:
                name = self._declarator_name(child, node)
                is_ref = kind == "reference_declarator"
            elif kind == "=":
                seen_equals = True
            elif seen_equals and default is None:
                default = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if name is None:
            if type_name == "void":
                return None
            name = f"arg{position}"
        return Parameter(
            name=name,
            type_name=type_name,
            default=default,
            is_const=is_const,
            is_ref=is_ref,
        )

    # ── statements ───────────────────────────────────────────────

    def _normalize_compound_statement(self, node: CstNode) -> list[Node]:
        statements: list[Node] = []
        for child in node.children:
            if self._is_noise(child) or child.kind in ("{", "}"):
                continue
            statements.extend(self._statement(child, node))
        return statements

    def _normalize_block(self, node: CstNode) -> Block:
        """A ``{ ... }`` standing as a statement keeps its own scope."""
        return Block(statements=self._normalize_compound_statement(node))

    def _body(self, node: CstNode, parent: CstNode) -> list[Node]:
        """Body of an if/else/for/while/do: its own braces are spliced away."""
        if node.kind == "compound_statement":
            return self._dispatch(self._normalize_compound_statement, node, parent)
        return self._statement(node, parent)

    def _normalize_expression_statement(self, node: CstNode) -> list[Node]:
        expression: Optional[Node] = None
        for child in node.children:
            if self._is_noise(child) or child.kind == ";":
                continue
            if expression is not None:
                raise UnsupportedConstruct(child.kind, node.kind)
            expression = self._expr(child, node)
        return [] if expression is None else [expression]

    def _normalize_condition_clause(self, node: CstNode) -> Node:
        """``( expr )`` of an if/while/switch/do condition."""
        condition: Optional[Node] = None
        for child in node.children:
            if self._is_noise(child) or child.kind in ("(", ")"):
                continue
            if condition is not None:
                raise UnsupportedConstruct(child.kind, node.kind)
            condition = self._expr(child, node)
        if condition is None:
            raise self._incomplete(node)
        return condition

    def _normalize_if_statement(self, node: CstNode) -> IfStatement:
        """Collect the whole if/else-if/else chain as one flat list of choices.

        Older grammars expose ``else`` as a bare token followed by the
        alternative; newer ones wrap both in an ``else_clause``.  Either way an
        alternative that is itself an ``if_statement`` is spliced in.
        """
        condition: Optional[Node] = None
        statements: list[Node] = []
        alternatives: Optional[list[Choice]] = None
        in_else = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("if", "constexpr"):
                continue
            if alternatives is not None:
                raise UnsupportedConstruct(kind, node.kind)
            if kind == "condition_clause" and condition is None:
                condition = self._dispatch(self._normalize_condition_clause, child, node)
            elif condition is None:
                raise UnsupportedConstruct(kind, node.kind)
            elif kind == "else" and not in_else:
                in_else = True
            elif kind == "else_clause" and not in_else:
                alternatives = self._dispatch(self._normalize_else_clause, child, node)
            elif in_else:
                alternatives = self._alternative_choices(child, node)
            else:
                statements.extend(self._body(child, node))
        if condition is None:
            raise self._incomplete(node)
        choices = [Choice(condition=condition, statements=statements)]
        return IfStatement(choices=choices + (alternatives or []))

    def _normalize_else_clause(self, node: CstNode) -> list[Choice]:
        alternatives: Optional[list[Choice]] = None
        for child in node.children:
            if self._is_noise(child) or child.kind == "else":
                continue
            if alternatives is not None:
                raise UnsupportedConstruct(child.kind, node.kind)
            alternatives = self._alternative_choices(child, node)
        return alternatives or [Choice()]

    def _alternative_choices(self, node: CstNode, parent: CstNode) -> list[Choice]:
        if node.kind == "if_statement":
            return self._dispatch(self._normalize_if_statement, node, parent).choices
        return [Choice(statements=self._body(node, parent))]

    def _normalize_for_statement(self, node: CstNode) -> ForStatement:
        """``for (init; test; update) body``: slots advance on ``;`` and ``)``.

        A declaration initializer carries its own ``;`` and so moves straight
        on to the test slot.
        """
        slots = ("init", "test", "update", "body")
        slot = 0
        init: list[Node] = []
        test: Optional[Node] = None
        update: Optional[Node] = None
        body: list[Node] = []
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("for", "("):
                continue
            current = slots[slot]
            if kind == ";" and current in ("init", "test"):
                slot += 1
            elif kind == ")" and current == "update":
                slot += 1
            elif current == "init" and kind == "declaration":
                init.extend(self._statement(child, node))
                slot += 1
            elif current == "init" and not init:
                init.append(self._expr(child, node))
            elif current == "test" and test is None:
                test = self._expr(child, node)
            elif current == "update" and update is None:
                update = self._expr(child, node)
            elif current == "body":
                body.extend(self._body(child, node))
            else:
                raise UnsupportedConstruct(kind, node.kind)
        return ForStatement(init=init, test=test, update=update, body=body)

    def _normalize_while_statement(self, node: CstNode) -> WhileStatement:
        condition: Optional[Node] = None
        statements: list[Node] = []
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind == "while":
                continue
            if kind == "condition_clause" and condition is None:
                condition = self._dispatch(self._normalize_condition_clause, child, node)
            elif condition is not None:
                statements.extend(self._body(child, node))
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if condition is None:
            raise self._incomplete(node)
        return WhileStatement(condition=condition, statements=statements)

    def _normalize_do_statement(self, node: CstNode) -> DoStatement:
        statements: Optional[list[Node]] = None
        condition: Optional[Node] = None
        seen_while = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind in ("do", ";"):
                continue
            if kind == "while" and statements is not None:
                seen_while = True
            elif not seen_while and statements is None:
                statements = self._body(child, node)
            elif seen_while and condition is None and kind == "parenthesized_expression":
                condition = self._dispatch(self._normalize_condition_clause, child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if condition is None:
            raise self._incomplete(node)
        return DoStatement(statements=statements or [], condition=condition)

    def _normalize_switch_statement(self, node: CstNode) -> SwitchStatement:
        condition: Optional[Node] = None
        statements: Optional[list[Node]] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind == "switch":
                continue
            if kind == "condition_clause" and condition is None:
                condition = self._dispatch(self._normalize_condition_clause, child, node)
            elif kind == "compound_statement" and condition is not None and statements is None:
                statements = self._dispatch(self._normalize_compound_statement, child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if condition is None:
            raise self._incomplete(node)
        return SwitchStatement(condition=condition, statements=statements or [])

    def _normalize_case_statement(self, node: CstNode) -> CaseStatement:
        """``case X:`` / ``default:`` followed by the statements it labels."""
        is_default = False
        test: Optional[Node] = None
        statements: list[Node] = []
        seen_colon = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child) or kind == "case":
                continue
            if kind == "default" and not seen_colon:
                is_default = True
            elif kind == ":" and not seen_colon:
                seen_colon = True
            elif not seen_colon and test is None and not is_default:
                test = self._expr(child, node)
            elif seen_colon:
                statements.extend(self._statement(child, node))
            else:
                raise UnsupportedConstruct(kind, node.kind)
        return CaseStatement(is_default=is_default, test=test, statements=statements)

    def _optional_operand(self, node: CstNode, keyword: str) -> Optional[Node]:
        operand: Optional[Node] = None
        for child in node.children:
            if self._is_noise(child) or child.kind in (keyword, ";"):
                continue
            if operand is not None:
                raise UnsupportedConstruct(child.kind, node.kind)
            operand = self._expr(child, node)
        return operand

    def _normalize_return_statement(self, node: CstNode) -> ReturnStatement:
        return ReturnStatement(statement=self._optional_operand(node, "return"))

    def _normalize_throw_statement(self, node: CstNode) -> ThrowStatement:
        """A bare rethrow (``throw;``) has no target counterpart."""
        expression = self._optional_operand(node, "throw")
        if expression is None:
            raise self._incomplete(node)
        return ThrowStatement(expression=expression)

    def _normalize_break_statement(self, node: CstNode) -> BreakStatement:
        return BreakStatement()

    def _normalize_continue_statement(self, node: CstNode) -> ContinueStatement:
        return ContinueStatement()

    # ── expressions ──────────────────────────────────────────────

    def _normalize_identifier(self, node: CstNode) -> Reference:
        return Reference(name=node.text)

    def _normalize_qualified_identifier(self, node: CstNode) -> Reference:
        return Reference(name=flatten_qualified(node.text))

    def _normalize_number_literal(self, node: CstNode) -> NumberLiteral:
        return NumberLiteral(value=node.text)

    def _normalize_boolean_literal(self, node: CstNode) -> BooleanLiteral:
        return BooleanLiteral(value=node.kind)

    def _normalize_null_literal(self, node: CstNode) -> NullLiteral:
        return NullLiteral()

    def _normalize_string_literal(self, node: CstNode) -> StringLiteral:
        return StringLiteral(value=node.text)

    def _normalize_user_defined_literal(self, node: CstNode) -> UserDefinedLiteral:
        return UserDefinedLiteral(text=node.text)

    def _normalize_concatenated_string(self, node: CstNode) -> Node:
        """Adjacent literals ``"a" "b"`` become ``"a" + "b"``."""
        parts = [
            self._expr(child, node)
            for child in node.children
            if not self._is_noise(child)
        ]
        joined = parts[0]
        for part in parts[1:]:
            joined = BinaryExpression(operator="+", left=joined, right=part)
        return joined

    def _normalize_binary_expression(self, node: CstNode) -> BinaryExpression:
        """``left op right``.  A missing right operand is kept as ``None``."""
        left: Optional[Node] = None
        operator: Optional[str] = None
        right: Optional[Node] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind in BINARY_OPERATORS and left is not None and operator is None:
                operator = kind
            elif left is None:
                left = self._expr(child, node)
            elif operator is not None and right is None:
                right = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if left is None or operator is None:
            raise self._incomplete(node)
        if right is None:
            logger.debug("binary_expression without right operand: %r", node.text)
        return BinaryExpression(operator=operator, left=left, right=right)

    def _normalize_unary_expression(self, node: CstNode) -> UnaryExpression:
        operator: Optional[str] = None
        expression: Optional[Node] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind in UNARY_OPERATORS and operator is None:
                operator = kind
            elif operator is not None and expression is None:
                expression = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if operator is None or expression is None:
            raise self._incomplete(node)
        return UnaryExpression(operator=operator, expression=expression)

    def _normalize_update_expression(self, node: CstNode) -> UpdateExpression:
        """``i++`` is postfix because the operand is seen before the operator."""
        operator: Optional[str] = None
        expression: Optional[Node] = None
        is_postfix = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind in UPDATE_OPERATORS and operator is None:
                operator = kind
                is_postfix = expression is not None
            elif expression is None:
                expression = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if operator is None or expression is None:
            raise self._incomplete(node)
        return UpdateExpression(
            operator=operator, expression=expression, is_postfix=is_postfix
        )

    def _normalize_parenthesized_expression(self, node: CstNode) -> ParenthesizedExpression:
        return ParenthesizedExpression(value=self._normalize_condition_clause(node))

    def _normalize_conditional_expression(self, node: CstNode) -> ConditionalExpression:
        """``test ? success : failure``: slots advance on ``?`` and ``:``."""
        slots = ("test", "success", "failure")
        parts: dict[str, Node] = {}
        slot = 0
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            current = slots[slot]
            if kind == "?" and current == "test" and current in parts:
                slot += 1
            elif kind == ":" and current == "success" and current in parts:
                slot += 1
            elif current not in parts:
                parts[current] = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if len(parts) != len(slots):
            raise self._incomplete(node)
        return ConditionalExpression(**parts)

    def _normalize_assignment_expression(self, node: CstNode) -> AssignmentExpression:
        left: Optional[Node] = None
        operator: Optional[str] = None
        right: Optional[Node] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind in ASSIGNMENT_OPERATORS and left is not None and operator is None:
                operator = kind
            elif left is None:
                left = self._expr(child, node)
            elif operator is not None and right is None:
                right = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if left is None or operator is None or right is None:
            raise self._incomplete(node)
        return AssignmentExpression(left=left, operator=operator, right=right)

    def _normalize_call_expression(self, node: CstNode) -> CallExpression:
        callee: Optional[Node] = None
        args: Optional[list[Node]] = None
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind == "argument_list" and callee is not None and args is None:
                args = self._normalize_argument_list(child)
            elif callee is None:
                callee = self._expr(child, node)
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if callee is None:
            raise self._incomplete(node)
        return CallExpression(object=callee, args=args or [])

    def _normalize_argument_list(self, node: CstNode) -> list[Node]:
        return [
            self._expr(child, node)
            for child in node.children
            if not self._is_noise(child) and child.kind not in ("(", ")", ",")
        ]

    def _path_steps(self, node: CstNode, parent: CstNode) -> list[Node]:
        """Steps contributed by a path head; nested paths are spliced flat."""
        head = self._expr(node, parent)
        if isinstance(head, Path):
            return list(head.steps)
        return [head]

    def _normalize_field_expression(self, node: CstNode) -> Path:
        """``a.b`` / ``a->b``."""
        steps: list[Node] = []
        seen_operator = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind in (".", "->") and steps and not seen_operator:
                seen_operator = True
            elif not steps:
                steps = self._path_steps(child, node)
            elif seen_operator and kind == "field_identifier":
                steps.append(Reference(name=child.text))
                seen_operator = False
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if not steps or seen_operator:
            raise self._incomplete(node)
        return Path(steps=steps)

    def _normalize_subscript_expression(self, node: CstNode) -> Path:
        """``a[i]``, either with a ``subscript_argument_list`` or bare brackets."""
        steps: list[Node] = []
        in_brackets = False
        for child in node.children:
            kind = child.kind
            if self._is_noise(child):
                continue
            if kind == "[" and steps and not in_brackets:
                in_brackets = True
            elif kind == "]" and in_brackets:
                in_brackets = False
            elif not steps:
                steps = self._path_steps(child, node)
            elif kind == "subscript_argument_list" and not in_brackets:
                steps.append(IndexStep(
                    expression=self._dispatch(self._normalize_subscript_argument_list, child, node)
                ))
            elif in_brackets:
                steps.append(IndexStep(expression=self._expr(child, node)))
            else:
                raise UnsupportedConstruct(kind, node.kind)
        if not steps:
            raise self._incomplete(node)
        return Path(steps=steps)

    def _normalize_subscript_argument_list(self, node: CstNode) -> Node:
        index: Optional[Node] = None
        for child in node.children:
            if self._is_noise(child) or child.kind in ("[", "]"):
                continue
            if index is not None:
                raise UnsupportedConstruct(child.kind, node.kind)
            index = self._expr(child, node)
        if index is None:
            raise self._incomplete(node)
        return index


def _as_list(result: Node | list[Node]) -> list[Node]:
    return result if isinstance(result, list) else [result]
