"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from monkey.ast import Expression, ExpressionStatement, Program
from monkey.lexer import Lexer, tokenize
from monkey.parser import Parser
from monkey.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns (Program, errors)."""

    def _parse(source: str, max_depth: int | None = None) -> tuple[Program, list[str]]:
        lexer = Lexer(source, "test.monkey")
        parser = Parser(lexer) if max_depth is None else Parser(lexer, max_depth=max_depth)
        program = parser.parse_program()
        return program, parser.errors()

    return _parse


@pytest.fixture
def parse_ok(parse_source):
    """Return a helper that parses source and asserts there were no errors."""

    def _parse(source: str) -> Program:
        program, errors = parse_source(source)
        assert errors == [], f"unexpected parser errors: {errors}"
        return program

    return _parse


@pytest.fixture
def parse_expr(parse_ok):
    """Return a helper that parses a single expression statement and returns its expression."""

    def _parse(source: str) -> Expression:
        program = parse_ok(source)
        assert len(program.statements) == 1, f"expected 1 statement, got {len(program.statements)}"
        stmt = program.statements[0]
        assert isinstance(stmt, ExpressionStatement), (
            f"Expected ExpressionStatement, got {type(stmt).__name__}"
        )
        return stmt.expression

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_literals(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token literals match the expected list."""
    actual = [t.literal for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


@pytest.fixture
def check_tokens():
    """Return a helper asserting both types and literals of a token list."""

    def _check(tokens: list[Token], expected: list[tuple[TokenType, str]]) -> None:
        assert_types(tokens, [tt for tt, _ in expected])
        assert_literals(tokens, [lit for _, lit in expected])

    return _check
