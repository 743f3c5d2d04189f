"""Monkey language front end: lexer, AST, and Pratt parser."""

from __future__ import annotations

__version__ = "0.1.0"

from monkey.debug import dump_ast  # noqa: E402

__all__ = ["__version__", "check", "dump_ast"]


def check(source: str, filename: str = "input.monkey") -> list[str]:
    """Parse source text and return the syntax error messages (empty if none)."""
    from monkey.lexer import Lexer
    from monkey.parser import Parser

    parser = Parser(Lexer(source, filename))
    parser.parse_program()
    return parser.errors()
