"""Human-readable AST tree dump."""

from __future__ import annotations

import sys
from typing import TextIO

from monkey.ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)


def dump_ast(program: Program, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Program\n")
    for stmt in program.statements:
        _dump_statement(stmt, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_statement(stmt: Statement, depth: int, f: TextIO) -> None:
    if isinstance(stmt, LetStatement):
        f.write(f"{_indent(depth)}LetStatement {stmt.name.value}\n")
        _dump_expression(stmt.value, depth + 1, f)
    elif isinstance(stmt, ReturnStatement):
        f.write(f"{_indent(depth)}ReturnStatement\n")
        _dump_expression(stmt.return_value, depth + 1, f)
    elif isinstance(stmt, ExpressionStatement):
        f.write(f"{_indent(depth)}ExpressionStatement\n")
        _dump_expression(stmt.expression, depth + 1, f)
    elif isinstance(stmt, BlockStatement):
        _dump_block(stmt, "BlockStatement", depth, f)


def _dump_block(block: BlockStatement, label: str, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}{label}\n")
    for stmt in block.statements:
        _dump_statement(stmt, depth + 1, f)


def _dump_expression(expr: Expression, depth: int, f: TextIO) -> None:
    if isinstance(expr, Identifier):
        f.write(f"{_indent(depth)}Identifier({expr.value})\n")
    elif isinstance(expr, IntegerLiteral):
        f.write(f"{_indent(depth)}IntegerLiteral({expr.value})\n")
    elif isinstance(expr, Boolean):
        f.write(f"{_indent(depth)}Boolean({expr.token_literal()})\n")
    elif isinstance(expr, PrefixExpression):
        f.write(f"{_indent(depth)}Prefix {expr.operator}\n")
        _dump_expression(expr.right, depth + 1, f)
    elif isinstance(expr, InfixExpression):
        f.write(f"{_indent(depth)}Infix {expr.operator}\n")
        _dump_expression(expr.left, depth + 1, f)
        _dump_expression(expr.right, depth + 1, f)
    elif isinstance(expr, IfExpression):
        f.write(f"{_indent(depth)}If\n")
        _dump_expression(expr.condition, depth + 1, f)
        _dump_block(expr.consequence, "Then", depth + 1, f)
        if expr.alternative is not None:
            _dump_block(expr.alternative, "Else", depth + 1, f)
    elif isinstance(expr, FunctionLiteral):
        params = ", ".join(p.value for p in expr.parameters)
        f.write(f"{_indent(depth)}Function({params})\n")
        _dump_block(expr.body, "Body", depth + 1, f)
    elif isinstance(expr, CallExpression):
        f.write(f"{_indent(depth)}Call\n")
        _dump_expression(expr.function, depth + 1, f)
        for arg in expr.arguments:
            _dump_expression(arg, depth + 1, f)
