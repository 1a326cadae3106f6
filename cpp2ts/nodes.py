"""Normalized tree: the compact, uniform intermediate form between CST and output."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeKind(str, Enum):
    # Declarations
    NAMESPACE = "namespace"
    DECLARATION = "declaration"
    FUNCTION_DEFINITION = "function_definition"
    PARAMETER = "parameter"
    # Statements
    BLOCK = "block"
    IF_STATEMENT = "if_statement"
    FOR_STATEMENT = "for_statement"
    WHILE_STATEMENT = "while_statement"
    DO_STATEMENT = "do_statement"
    SWITCH_STATEMENT = "switch_statement"
    CASE_STATEMENT = "case_statement"
    RETURN_STATEMENT = "return_statement"
    THROW_STATEMENT = "throw_statement"
    BREAK_STATEMENT = "break_statement"
    CONTINUE_STATEMENT = "continue_statement"
    # Expressions
    BINARY_EXPRESSION = "binary_expression"
    UNARY_EXPRESSION = "unary_expression"
    UPDATE_EXPRESSION = "update_expression"
    CONDITIONAL_EXPRESSION = "conditional_expression"
    ASSIGNMENT_EXPRESSION = "assignment_expression"
    CALL_EXPRESSION = "call_expression"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    PATH = "path"
    INDEX_STEP = "index"
    REFERENCE = "reference"
    # Literals
    NUMBER_LITERAL = "number_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    NULL_LITERAL = "null_literal"
    STRING_LITERAL = "string_literal"
    USER_DEFINED_LITERAL = "user_defined_literal"


class NormalizedNode(BaseModel):
    """Base for every normalized variant: immutable once built."""

    model_config = ConfigDict(frozen=True)


# ── declarations ─────────────────────────────────────────────────


class Declarator(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type_name: Optional[str] = None
    init: Optional[Node] = None
    is_const: bool = False


class Namespace(NormalizedNode):
    kind: Literal[NodeKind.NAMESPACE] = NodeKind.NAMESPACE
    name: str
    body: list[Node] = []


class Declaration(NormalizedNode):
    kind: Literal[NodeKind.DECLARATION] = NodeKind.DECLARATION
    declarators: list[Declarator] = []


class Parameter(NormalizedNode):
    kind: Literal[NodeKind.PARAMETER] = NodeKind.PARAMETER
    name: str
    type_name: Optional[str] = None
    default: Optional[Node] = None
    is_const: bool = False
    is_ref: bool = False


class FunctionDefinition(NormalizedNode):
    kind: Literal[NodeKind.FUNCTION_DEFINITION] = NodeKind.FUNCTION_DEFINITION
    name: str
    parameters: list[Parameter] = []
    return_type: Optional[str] = None
    body: list[Node] = []


# ── statements ───────────────────────────────────────────────────


class Choice(BaseModel):
    """One arm of an if/else-if/else chain; ``condition`` is absent for ``else``."""

    model_config = ConfigDict(frozen=True)

    condition: Optional[Node] = None
    statements: list[Node] = []


class Block(NormalizedNode):
    """Nested braces with their own scope; bodies of control statements are not wrapped."""

    kind: Literal[NodeKind.BLOCK] = NodeKind.BLOCK
    statements: list[Node] = []


class IfStatement(NormalizedNode):
    kind: Literal[NodeKind.IF_STATEMENT] = NodeKind.IF_STATEMENT
    choices: list[Choice]

    @model_validator(mode="after")
    def _else_is_last(self) -> IfStatement:
        if not self.choices or self.choices[0].condition is None:
            raise ValueError("an if statement starts with a conditioned choice")
        for choice in self.choices[:-1]:
            if choice.condition is None:
                raise ValueError("an unconditioned else must be the last choice")
        return self


class ForStatement(NormalizedNode):
    kind: Literal[NodeKind.FOR_STATEMENT] = NodeKind.FOR_STATEMENT
    init: list[Node] = []
    test: Optional[Node] = None
    update: Optional[Node] = None
    body: list[Node] = []


class WhileStatement(NormalizedNode):
    kind: Literal[NodeKind.WHILE_STATEMENT] = NodeKind.WHILE_STATEMENT
    condition: Node
    statements: list[Node] = []


class DoStatement(NormalizedNode):
    kind: Literal[NodeKind.DO_STATEMENT] = NodeKind.DO_STATEMENT
    statements: list[Node] = []
    condition: Node


class SwitchStatement(NormalizedNode):
    kind: Literal[NodeKind.SWITCH_STATEMENT] = NodeKind.SWITCH_STATEMENT
    condition: Node
    statements: list[Node] = []


class CaseStatement(NormalizedNode):
    kind: Literal[NodeKind.CASE_STATEMENT] = NodeKind.CASE_STATEMENT
    is_default: bool = False
    test: Optional[Node] = None
    statements: list[Node] = []


class ReturnStatement(NormalizedNode):
    kind: Literal[NodeKind.RETURN_STATEMENT] = NodeKind.RETURN_STATEMENT
    statement: Optional[Node] = None


class ThrowStatement(NormalizedNode):
    kind: Literal[NodeKind.THROW_STATEMENT] = NodeKind.THROW_STATEMENT
    expression: Node


class BreakStatement(NormalizedNode):
    kind: Literal[NodeKind.BREAK_STATEMENT] = NodeKind.BREAK_STATEMENT


class ContinueStatement(NormalizedNode):
    kind: Literal[NodeKind.CONTINUE_STATEMENT] = NodeKind.CONTINUE_STATEMENT


# ── expressions ──────────────────────────────────────────────────


class BinaryExpression(NormalizedNode):
    """``right`` is absent when the parser handed us a lone operand."""

    kind: Literal[NodeKind.BINARY_EXPRESSION] = NodeKind.BINARY_EXPRESSION
    operator: str
    left: Node
    right: Optional[Node] = None


class UnaryExpression(NormalizedNode):
    kind: Literal[NodeKind.UNARY_EXPRESSION] = NodeKind.UNARY_EXPRESSION
    operator: str
    expression: Node


class UpdateExpression(NormalizedNode):
    kind: Literal[NodeKind.UPDATE_EXPRESSION] = NodeKind.UPDATE_EXPRESSION
    operator: str
    expression: Node
    is_postfix: bool = True


class ConditionalExpression(NormalizedNode):
    kind: Literal[NodeKind.CONDITIONAL_EXPRESSION] = NodeKind.CONDITIONAL_EXPRESSION
    test: Node
    success: Node
    failure: Node


class AssignmentExpression(NormalizedNode):
    kind: Literal[NodeKind.ASSIGNMENT_EXPRESSION] = NodeKind.ASSIGNMENT_EXPRESSION
    left: Node
    operator: str
    right: Node


class CallExpression(NormalizedNode):
    kind: Literal[NodeKind.CALL_EXPRESSION] = NodeKind.CALL_EXPRESSION
    object: Node
    args: list[Node] = []


class ParenthesizedExpression(NormalizedNode):
    kind: Literal[NodeKind.PARENTHESIZED_EXPRESSION] = NodeKind.PARENTHESIZED_EXPRESSION
    value: Node


class IndexStep(NormalizedNode):
    kind: Literal[NodeKind.INDEX_STEP] = NodeKind.INDEX_STEP
    expression: Node


class Reference(NormalizedNode):
    kind: Literal[NodeKind.REFERENCE] = NodeKind.REFERENCE
    name: str


class Path(NormalizedNode):
    """Flat member/index chain: a head expression, then references and index steps."""

    kind: Literal[NodeKind.PATH] = NodeKind.PATH
    steps: list[Node]

    @model_validator(mode="after")
    def _has_steps(self) -> Path:
        if not self.steps:
            raise ValueError("a path needs at least one step")
        return self


# ── literals ─────────────────────────────────────────────────────


class NumberLiteral(NormalizedNode):
    kind: Literal[NodeKind.NUMBER_LITERAL] = NodeKind.NUMBER_LITERAL
    value: str


class BooleanLiteral(NormalizedNode):
    kind: Literal[NodeKind.BOOLEAN_LITERAL] = NodeKind.BOOLEAN_LITERAL
    value: str


class NullLiteral(NormalizedNode):
    kind: Literal[NodeKind.NULL_LITERAL] = NodeKind.NULL_LITERAL


class StringLiteral(NormalizedNode):
    kind: Literal[NodeKind.STRING_LITERAL] = NodeKind.STRING_LITERAL
    value: str


class UserDefinedLiteral(NormalizedNode):
    kind: Literal[NodeKind.USER_DEFINED_LITERAL] = NodeKind.USER_DEFINED_LITERAL
    text: str


Node = Annotated[
    Union[
        Namespace,
        Declaration,
        FunctionDefinition,
        Parameter,
        Block,
        IfStatement,
        ForStatement,
        WhileStatement,
        DoStatement,
        SwitchStatement,
        CaseStatement,
        ReturnStatement,
        ThrowStatement,
        BreakStatement,
        ContinueStatement,
        BinaryExpression,
        UnaryExpression,
        UpdateExpression,
        ConditionalExpression,
        AssignmentExpression,
        CallExpression,
        ParenthesizedExpression,
        Path,
        IndexStep,
        Reference,
        NumberLiteral,
        BooleanLiteral,
        NullLiteral,
        StringLiteral,
        UserDefinedLiteral,
    ],
    Field(discriminator="kind"),
]

for _model in (Declarator, Choice, *NormalizedNode.__subclasses__()):
    _model.model_rebuild()
