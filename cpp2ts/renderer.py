"""Renderer: normalized tree -> TypeScript source lines."""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .errors import DispatchMismatch, UnsupportedConstruct
from .nodes import (
    CaseStatement,
    Declaration,
    Declarator,
    Node,
    NodeKind,
)
from . import constants

logger = logging.getLogger(__name__)

_HEX_SUFFIX = re.compile(r"[uUlLzZ]+$")
_DECIMAL_SUFFIX = re.compile(r"[uUlLfFzZ]+$")
_LEGACY_OCTAL = re.compile(r"0_?([0-7][0-7_]*)")


class Scope(Enum):
    """Naming mode for declarations: only namespace members are flattened."""

    NONE = "none"
    NAMESPACE = "namespace"
    FUNCTION = "function"


class Module:
    """Ordered arena of output segments, one per independently emitted block."""

    def __init__(self):
        self.segments: list[list[str]] = []

    def open_segment(self) -> list[str]:
        segment: list[str] = []
        self.segments.append(segment)
        return segment

    def to_text(self) -> str:
        return "\n".join("\n".join(segment) for segment in self.segments if segment)


@dataclass(frozen=True)
class ConversionState:
    """Context threaded through rendering; callees get copies, never the original."""

    module: Module
    body: list[str]
    path: tuple[str, ...] = ()
    scope: Scope = Scope.NONE

    @classmethod
    def top_level(cls, module: Module) -> ConversionState:
        return cls(module=module, body=module.open_segment())

    def descend(self, **overrides) -> ConversionState:
        return dataclasses.replace(self, **overrides)

    def scratch(self) -> ConversionState:
        return dataclasses.replace(self, body=[])


def format_number(text: str) -> str:
    """C++ numeric literal text -> TypeScript numeric literal text.

    ``.5`` -> ``0.5``; type suffixes (``1.0f``, ``10UL``) are dropped and digit
    separators (``1'000``) become ``_``.  Legacy octal ``017`` becomes ``0o17``.
    """
    text = text.replace("'", "_")
    if text[:2].lower() in ("0x", "0b"):
        text = _HEX_SUFFIX.sub("", text)
    else:
        text = _DECIMAL_SUFFIX.sub("", text)
        octal = _LEGACY_OCTAL.fullmatch(text)
        if octal:
            text = "0o" + octal.group(1)
    if text.startswith("."):
        text = "0" + text
    return text


def ts_type(type_name: Optional[str]) -> Optional[str]:
    """Map a C++ type spelling to TypeScript; ``None`` means "leave it out"."""
    if not type_name:
        return None
    if type_name in constants.TYPE_MAP:
        return constants.TYPE_MAP[type_name] or None
    words = type_name.split()
    if words and all(constants.TYPE_MAP.get(word) == "number" for word in words):
        return "number"
    return type_name.replace(constants.SCOPE_SEPARATOR, constants.FIELD_SEPARATOR)


def flatten_name(name: str, state: ConversionState) -> str:
    """Declaration-site name: namespace members get the enclosing path prefixed."""
    if state.scope is Scope.NAMESPACE:
        return constants.NAME_SEPARATOR.join((*state.path, name))
    return name


def indent(lines: list[str], levels: int = 1) -> list[str]:
    prefix = constants.INDENT * levels
    return [prefix + line for line in lines]


def wrap(prefix: str, lines: list[str], suffix: str = "") -> list[str]:
    """Glue *prefix* onto the first line and *suffix* onto the last of a group."""
    if not lines:
        return [prefix + suffix]
    out = [prefix + lines[0], *lines[1:]]
    out[-1] = out[-1] + suffix
    return out


def join_inline(lines: list[str]) -> str:
    """Collapse a multi-line rendering onto one line."""
    text = ""
    for line in (line.strip() for line in lines):
        if not text or text.endswith("(") or line.startswith(")"):
            text += line
        else:
            text += " " + line
    return text


def check_dispatch(dispatch: dict) -> None:
    """Raise :class:`DispatchMismatch` unless *dispatch* covers exactly the node kinds."""
    missing = sorted(kind.value for kind in set(NodeKind) - set(dispatch))
    extra = sorted(str(key) for key in set(dispatch) - set(NodeKind))
    if missing or extra:
        raise DispatchMismatch(f"Renderer dispatch missing {missing}, unexpected {extra}")


class Renderer:
    """Renders normalized nodes into the ``body`` of a :class:`ConversionState`.

    The dispatch table must cover exactly the :class:`NodeKind` variants;
    construction fails with :class:`DispatchMismatch` otherwise.
    """

    def __init__(self):
        self._context: list[str] = []
        self._DISPATCH: dict[NodeKind, Callable[[Node, ConversionState], None]] = {
            NodeKind.NAMESPACE: self._render_namespace,
            NodeKind.DECLARATION: self._render_declaration,
            NodeKind.FUNCTION_DEFINITION: self._render_function_definition,
            NodeKind.PARAMETER: self._render_parameter,
            NodeKind.BLOCK: self._render_block,
            NodeKind.IF_STATEMENT: self._render_if_statement,
            NodeKind.FOR_STATEMENT: self._render_for_statement,
            NodeKind.WHILE_STATEMENT: self._render_while_statement,
            NodeKind.DO_STATEMENT: self._render_do_statement,
            NodeKind.SWITCH_STATEMENT: self._render_switch_statement,
            NodeKind.CASE_STATEMENT: self._render_case_statement,
            NodeKind.RETURN_STATEMENT: self._render_return_statement,
            NodeKind.THROW_STATEMENT: self._render_throw_statement,
            NodeKind.BREAK_STATEMENT: self._render_break_statement,
            NodeKind.CONTINUE_STATEMENT: self._render_continue_statement,
            NodeKind.BINARY_EXPRESSION: self._render_binary_expression,
            NodeKind.UNARY_EXPRESSION: self._render_unary_expression,
            NodeKind.UPDATE_EXPRESSION: self._render_update_expression,
            NodeKind.CONDITIONAL_EXPRESSION: self._render_conditional_expression,
            NodeKind.ASSIGNMENT_EXPRESSION: self._render_assignment_expression,
            NodeKind.CALL_EXPRESSION: self._render_call_expression,
            NodeKind.PARENTHESIZED_EXPRESSION: self._render_parenthesized_expression,
            NodeKind.PATH: self._render_path,
            NodeKind.INDEX_STEP: self._render_index_step,
            NodeKind.REFERENCE: self._render_reference,
            NodeKind.NUMBER_LITERAL: self._render_number_literal,
            NodeKind.BOOLEAN_LITERAL: self._render_boolean_literal,
            NodeKind.NULL_LITERAL: self._render_null_literal,
            NodeKind.STRING_LITERAL: self._render_string_literal,
            NodeKind.USER_DEFINED_LITERAL: self._render_user_defined_literal,
        }
        check_dispatch(self._DISPATCH)

    # ── dispatchers ──────────────────────────────────────────────

    def render(self, node: Node, state: ConversionState) -> None:
        """Append the rendering of *node* to ``state.body``."""
        kind = getattr(node, "kind", None)
        handler = self._DISPATCH.get(kind)
        if handler is None:
            context = self._context[-1] if self._context else constants.FILE_CONTEXT
            raise UnsupportedConstruct(str(kind or type(node).__name__), context)
        self._context.append(NodeKind(kind).value)
        try:
            handler(node, state)
        finally:
            self._context.pop()

    def _lines(self, node: Node, state: ConversionState) -> list[str]:
        scratch = state.scratch()
        self.render(node, scratch)
        return scratch.body

    def _inline(self, node: Node, state: ConversionState) -> str:
        return join_inline(self._lines(node, state))

    def _statements(self, statements: list[Node], state: ConversionState) -> list[str]:
        scratch = state.scratch()
        for statement in statements:
            self.render(statement, scratch)
        return scratch.body

    def _block(
        self, header: list[str], statements: list[Node], state: ConversionState
    ) -> list[str]:
        """``header {`` + indented statements + ``}``; header may span lines."""
        return [*wrap("", header, " {"), *indent(self._statements(statements, state)), "}"]

    # ── declarations ─────────────────────────────────────────────

    def _render_namespace(self, node, state: ConversionState) -> None:
        """Namespaces emit nothing themselves; members render flattened.

        Each member gets its own segment so that functions (which always open
        a segment) stay in declaration order with their siblings.
        """
        inner = state.descend(path=(*state.path, node.name), scope=Scope.NAMESPACE)
        for member in node.body:
            self.render(member, inner.descend(body=state.module.open_segment()))

    def _declarator_text(self, declarator: Declarator, state: ConversionState) -> list[str]:
        name = flatten_name(declarator.name, state)
        type_name = ts_type(declarator.type_name)
        head = f"{name}: {type_name}" if type_name else name
        if declarator.init is None:
            return [head]
        return wrap(f"{head} = ", self._lines(declarator.init, state))

    def _render_declaration(self, node: Declaration, state: ConversionState) -> None:
        for declarator in node.declarators:
            keyword = "const" if declarator.is_const and declarator.init else "let"
            state.body.extend(
                wrap(f"{keyword} ", self._declarator_text(declarator, state))
            )

    def _render_function_definition(self, node, state: ConversionState) -> None:
        """Top-level and namespace functions open a fresh module segment."""
        target = state.body if state.scope is Scope.FUNCTION else state.module.open_segment()
        name = flatten_name(node.name, state)
        parameters = ", ".join(self._inline(p, state) for p in node.parameters)
        return_type = ts_type(node.return_type)
        signature = f"function {name}({parameters})"
        if return_type:
            signature += f": {return_type}"
        inner = state.descend(scope=Scope.FUNCTION)
        target.extend(self._block([signature], node.body, inner))

    def _render_parameter(self, node, state: ConversionState) -> None:
        type_name = ts_type(node.type_name)
        text = f"{node.name}: {type_name}" if type_name else node.name
        if node.default is not None:
            text += f" = {self._inline(node.default, state)}"
        state.body.append(text)

    # ── statements ───────────────────────────────────────────────

    def _render_block(self, node, state: ConversionState) -> None:
        state.body.extend(["{", *indent(self._statements(node.statements, state)), "}"])

    def _render_if_statement(self, node, state: ConversionState) -> None:
        """One ``if``, then ``else if``/``else`` per further choice, in order."""
        lines: list[str] = []
        for position, choice in enumerate(node.choices):
            body = indent(self._statements(choice.statements, state))
            if choice.condition is None:
                lines.append("} else {")
            else:
                opener = "if (" if position == 0 else "} else if ("
                lines.extend(wrap(opener, self._lines(choice.condition, state), ") {"))
            lines.extend(body)
        lines.append("}")
        state.body.extend(lines)

    def _for_init(self, init: list[Node], state: ConversionState) -> str:
        parts: list[str] = []
        for node in init:
            if node.kind is NodeKind.DECLARATION:
                declarators = [
                    join_inline(self._declarator_text(declarator, state))
                    for declarator in node.declarators
                ]
                parts.append("let " + ", ".join(declarators))
            else:
                parts.append(self._inline(node, state))
        return ", ".join(parts)

    def _render_for_statement(self, node, state: ConversionState) -> None:
        init = self._for_init(node.init, state)
        test = self._inline(node.test, state) if node.test is not None else ""
        update = self._inline(node.update, state) if node.update is not None else ""
        clauses = init + ";" + (" " + test if test else "") + ";"
        header = f"for ({clauses}{' ' + update if update else ''})"
        state.body.extend(self._block([header], node.body, state))

    def _render_while_statement(self, node, state: ConversionState) -> None:
        header = wrap("while (", self._lines(node.condition, state), ")")
        state.body.extend(self._block(header, node.statements, state))

    def _render_do_statement(self, node, state: ConversionState) -> None:
        state.body.append("do {")
        state.body.extend(indent(self._statements(node.statements, state)))
        state.body.extend(wrap("} while (", self._lines(node.condition, state), ")"))

    def _render_switch_statement(self, node, state: ConversionState) -> None:
        """Cases keep source order; no ``break`` is added or removed."""
        header = wrap("switch (", self._lines(node.condition, state), ")")
        state.body.extend(self._block(header, node.statements, state))

    def _render_case_statement(self, node: CaseStatement, state: ConversionState) -> None:
        if node.is_default:
            state.body.append("default:")
        else:
            state.body.extend(wrap("case ", self._lines(node.test, state), ":"))
        state.body.extend(indent(self._statements(node.statements, state)))

    def _render_return_statement(self, node, state: ConversionState) -> None:
        if node.statement is None:
            state.body.append("return")
        else:
            state.body.extend(wrap("return ", self._lines(node.statement, state)))

    def _render_throw_statement(self, node, state: ConversionState) -> None:
        state.body.extend(wrap("throw ", self._lines(node.expression, state)))

    def _render_break_statement(self, node, state: ConversionState) -> None:
        state.body.append("break")

    def _render_continue_statement(self, node, state: ConversionState) -> None:
        state.body.append("continue")

    # ── expressions ──────────────────────────────────────────────

    def _operator(self, operator: str) -> str:
        return constants.OPERATOR_MAP.get(operator, operator)

    def _render_binary_expression(self, node, state: ConversionState) -> None:
        operator = self._operator(node.operator)
        left = self._inline(node.left, state)
        if node.right is None:
            # Lone operand: re-emit the operator as a prefix.
            state.body.append(f"{operator}{left}")
            return
        right = self._inline(node.right, state)
        state.body.append(f"{left} {operator} {right}")

    def _render_unary_expression(self, node, state: ConversionState) -> None:
        state.body.append(f"{self._operator(node.operator)}{self._inline(node.expression, state)}")

    def _render_update_expression(self, node, state: ConversionState) -> None:
        operand = self._inline(node.expression, state)
        if node.is_postfix:
            state.body.append(f"{operand}{node.operator}")
        else:
            state.body.append(f"{node.operator}{operand}")

    def _render_conditional_expression(self, node, state: ConversionState) -> None:
        """``test`` / ``? success`` / ``: failure``, continuations two levels in."""
        test = self._lines(node.test, state)
        success = self._lines(node.success, state)
        failure = self._lines(node.failure, state)
        lines = [test[0], *indent(test[1:], 2)]
        lines.append(f"{constants.INDENT}? {success[0]}")
        lines.extend(indent(success[1:], 2))
        lines.append(f"{constants.INDENT}: {failure[0]}")
        lines.extend(indent(failure[1:], 2))
        state.body.extend(lines)

    def _render_assignment_expression(self, node, state: ConversionState) -> None:
        left = self._inline(node.left, state)
        state.body.extend(wrap(f"{left} {node.operator} ", self._lines(node.right, state)))

    def _render_call_expression(self, node, state: ConversionState) -> None:
        """Single-line arguments share one line; any multi-line argument splits them all."""
        callee = "".join(line.strip() for line in self._lines(node.object, state))
        args = [self._lines(arg, state) for arg in node.args]
        if all(len(arg) == 1 for arg in args):
            state.body.append(f"{callee}({', '.join(arg[0] for arg in args)})")
            return
        lines = [f"{callee}("]
        for position, arg in enumerate(args):
            suffix = "," if position < len(args) - 1 else ""
            lines.extend(indent(wrap("", arg, suffix)))
        lines.append(")")
        state.body.extend(lines)

    def _render_parenthesized_expression(self, node, state: ConversionState) -> None:
        state.body.append(f"({self._inline(node.value, state)})")

    def _render_path(self, node, state: ConversionState) -> None:
        text = ""
        for position, step in enumerate(node.steps):
            if step.kind is NodeKind.REFERENCE:
                separator = constants.FIELD_SEPARATOR if position else ""
                text += separator + step.name
            else:
                text += self._inline(step, state)
        state.body.append(text)

    def _render_index_step(self, node, state: ConversionState) -> None:
        state.body.append(f"[{self._inline(node.expression, state)}]")

    def _render_reference(self, node, state: ConversionState) -> None:
        state.body.append(node.name)

    # ── literals ─────────────────────────────────────────────────

    def _render_number_literal(self, node, state: ConversionState) -> None:
        state.body.append(format_number(node.value))

    def _render_boolean_literal(self, node, state: ConversionState) -> None:
        state.body.append(node.value)

    def _render_null_literal(self, node, state: ConversionState) -> None:
        state.body.append("null")

    def _render_string_literal(self, node, state: ConversionState) -> None:
        state.body.append(node.value)

    def _render_user_defined_literal(self, node, state: ConversionState) -> None:
        state.body.append(node.text)


def render_nodes(nodes: list[Node], renderer: Renderer | None = None) -> str:
    """Render top-level nodes, each with a fresh top-level state, into one text."""
    renderer = renderer or Renderer()
    module = Module()
    for node in nodes:
        renderer.render(node, ConversionState.top_level(module))
    logger.debug("Rendered %d segments", len(module.segments))
    return module.to_text()
