"""AST node types for parsed Monkey programs.

The node set is closed: ``Statement`` and ``Expression`` are unions over the
concrete variants below, and consumers dispatch over those unions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union, cast

from monkey.tokens import Token


class _NodeMixin:
    __slots__ = ()

    # Every node dataclass declares this as its first field
    token: Token

    def token_literal(self) -> str:
        """Literal text of the node's leading token."""
        return self.token.literal

    def __str__(self) -> str:
        from monkey.render import render

        return render(cast("Node", self))


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Identifier(_NodeMixin):
    """Name reference, also used for let targets and parameters."""

    token: Token
    value: str


@dataclass(frozen=True, slots=True)
class IntegerLiteral(_NodeMixin):
    """Integer literal in signed 64-bit range."""

    token: Token
    value: int


@dataclass(frozen=True, slots=True)
class Boolean(_NodeMixin):
    token: Token
    value: bool


@dataclass(frozen=True, slots=True)
class PrefixExpression(_NodeMixin):
    """Unary ``!x`` or ``-x``."""

    token: Token
    operator: str
    right: Expression


@dataclass(frozen=True, slots=True)
class InfixExpression(_NodeMixin):
    """Binary operator application; ``token`` is the operator token."""

    token: Token
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True, slots=True)
class IfExpression(_NodeMixin):
    token: Token
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None


@dataclass(frozen=True, slots=True)
class FunctionLiteral(_NodeMixin):
    """``fn(params) { body }``."""

    token: Token
    parameters: tuple[Identifier, ...]
    body: BlockStatement


@dataclass(frozen=True, slots=True)
class CallExpression(_NodeMixin):
    """Call of ``function`` (identifier or function literal); ``token`` is '('."""

    token: Token
    function: Expression
    arguments: tuple[Expression, ...]


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LetStatement(_NodeMixin):
    """``let <name> = <value>;``"""

    token: Token
    name: Identifier
    value: Expression


@dataclass(frozen=True, slots=True)
class ReturnStatement(_NodeMixin):
    token: Token
    return_value: Expression


@dataclass(frozen=True, slots=True)
class ExpressionStatement(_NodeMixin):
    """A bare expression used as a statement; ``token`` is its first token."""

    token: Token
    expression: Expression


@dataclass(frozen=True, slots=True)
class BlockStatement(_NodeMixin):
    """Brace-delimited statement list; ``token`` is '{'."""

    token: Token
    statements: tuple[Statement, ...]


@dataclass(frozen=True, slots=True)
class Program:
    """Root node: the ordered top-level statements."""

    statements: tuple[Statement, ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        from monkey.render import render

        return render(self)


Expression = Union[
    Identifier,
    IntegerLiteral,
    Boolean,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]

Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]

Node = Union[Program, Statement, Expression]
