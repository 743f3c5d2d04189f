"""Canonical source renderer — converts an AST back to fully parenthesised text."""

from __future__ import annotations

from monkey.ast import (
    BlockStatement,
    Boolean,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
)


def render(node: Node) -> str:
    """Render any AST node to its canonical source form.

    Operator applications are wrapped in parentheses so the rendering shows how
    the parser grouped them, e.g. ``a + b * c`` renders as ``(a + (b * c))``.
    """
    if isinstance(node, (Program, BlockStatement)):
        return "".join(render(stmt) for stmt in node.statements)

    # Statements
    if isinstance(node, LetStatement):
        return f"{node.token_literal()} {render(node.name)} = {render(node.value)};"
    if isinstance(node, ReturnStatement):
        return f"{node.token_literal()} {render(node.return_value)};"
    if isinstance(node, ExpressionStatement):
        return render(node.expression)

    # Expressions
    if isinstance(node, Identifier):
        return node.value
    if isinstance(node, (IntegerLiteral, Boolean)):
        return node.token_literal()
    if isinstance(node, PrefixExpression):
        return f"({node.operator}{render(node.right)})"
    if isinstance(node, InfixExpression):
        return f"({render(node.left)} {node.operator} {render(node.right)})"
    if isinstance(node, IfExpression):
        out = f"if{render(node.condition)} {render(node.consequence)}"
        if node.alternative is not None:
            out += f"else {render(node.alternative)}"
        return out
    if isinstance(node, FunctionLiteral):
        params = ", ".join(render(p) for p in node.parameters)
        return f"{node.token_literal()}({params}) {render(node.body)}"
    if isinstance(node, CallExpression):
        args = ", ".join(render(a) for a in node.arguments)
        return f"{render(node.function)}({args})"

    raise TypeError(f"cannot render {type(node).__name__}")
