"""Tests for parser diagnostics and recovery."""

from __future__ import annotations

import logging

import pytest

from monkey import check
from monkey.ast import LetStatement
from monkey.config import MAX_DEPTH_CEILING
from monkey.errors import ParseError
from monkey.lexer import Lexer
from monkey.parser import Parser, parse


class TestExpectedToken:
    def test_missing_let_identifier(self, parse_source):
        _, errors = parse_source("let x = 5; let = 10; let foobar = 838383;")
        assert errors == ["expected next token to be IDENT, got = instead"]

    def test_recovery_keeps_later_statements(self, parse_source):
        program, _ = parse_source("let x = 5; let = 10; let foobar = 838383;")
        names = [s.name.value for s in program.statements if isinstance(s, LetStatement)]
        assert names == ["x", "foobar"]

    def test_missing_assign(self, parse_source):
        _, errors = parse_source("let x 5;")
        assert errors == ["expected next token to be =, got INT instead"]

    def test_one_error_per_statement(self, parse_source):
        _, errors = parse_source("let = 1; let 2; let x 3;")
        assert errors == [
            "expected next token to be IDENT, got = instead",
            "expected next token to be IDENT, got INT instead",
            "expected next token to be =, got INT instead",
        ]

    def test_unclosed_group(self, parse_source):
        _, errors = parse_source("(1 + 2;")
        assert errors == ["expected next token to be ), got ; instead"]

    def test_unclosed_call(self, parse_source):
        _, errors = parse_source("add(1, 2")
        assert errors == ["expected next token to be ), got EOF instead"]

    def test_if_without_paren(self, parse_source):
        _, errors = parse_source("if x { 1 }")
        assert errors == ["expected next token to be (, got IDENT instead"]

    def test_bad_parameter(self, parse_source):
        _, errors = parse_source("fn(1) {}")
        assert errors == ["expected next token to be IDENT, got INT instead"]

    def test_unterminated_block(self, parse_source):
        _, errors = parse_source("if (x) { 1")
        assert errors == ["expected next token to be }, got EOF instead"]


class TestNoPrefix:
    def test_semicolon(self, parse_source):
        _, errors = parse_source(";")
        assert errors == ["no prefix parse function for ; found"]

    def test_dangling_operator(self, parse_source):
        _, errors = parse_source("5 + ;")
        assert errors == ["no prefix parse function for ; found"]

    def test_illegal_token(self, parse_source):
        _, errors = parse_source("let x = @;")
        assert errors == ["no prefix parse function for ILLEGAL found"]

    def test_error_in_block_recovers_inside_block(self, parse_source):
        program, errors = parse_source("if (x) { * ; y } z;")
        assert errors == ["no prefix parse function for * found"]
        assert str(program) == "ifx yz"


class TestRecoveryAcrossBlocks:
    def test_failed_function_skips_whole_body(self, parse_source):
        program, errors = parse_source("fn(1) { a; b; }")
        assert errors == ["expected next token to be IDENT, got INT instead"]
        assert program.statements == ()

    def test_failed_if_keeps_following_let(self, parse_source):
        program, errors = parse_source("if x { a; } let y = 2;")
        assert errors == ["expected next token to be (, got IDENT instead"]
        (stmt,) = program.statements
        assert isinstance(stmt, LetStatement)
        assert stmt.name.value == "y"

    def test_else_branch_is_skipped_too(self, parse_source):
        program, errors = parse_source("if x { a } else { b } let y = 2;")
        assert errors == ["expected next token to be (, got IDENT instead"]
        assert str(program) == "let y = 2;"

    def test_trailing_semicolon_after_skipped_block(self, parse_source):
        program, errors = parse_source("if (c) { if y { 1 }; 2 }")
        assert errors == ["expected next token to be (, got IDENT instead"]
        assert str(program) == "ifc 2"


class TestIntegerConversion:
    def test_too_large(self, parse_source):
        _, errors = parse_source("9223372036854775808;")
        assert errors == ['could not parse "9223372036854775808" as integer']

    def test_very_long_literal(self, parse_source):
        literal = "9" * 5000
        _, errors = parse_source(literal)
        assert errors == [f'could not parse "{literal}" as integer']


class TestBareReturn:
    def test_return_semicolon(self, parse_source):
        program, errors = parse_source("return ;")
        assert errors == ["expected expression after return, got ; instead"]
        assert program.statements == ()

    def test_return_at_eof(self, parse_source):
        _, errors = parse_source("return")
        assert errors == ["expected expression after return, got EOF instead"]

    def test_return_before_brace(self, parse_source):
        _, errors = parse_source("fn() { return }")
        assert errors == ["expected expression after return, got } instead"]


class TestNestingDepth:
    def test_deep_parentheses(self, parse_source):
        source = "(" * 10000 + "1" + ")" * 10000 + ";"
        program, errors = parse_source(source)
        assert errors == ["maximum nesting depth of 100 exceeded"]
        assert program.statements == ()

    def test_within_limit(self, parse_source):
        source = "(" * 40 + "1" + ")" * 40
        _, errors = parse_source(source)
        assert errors == []

    def test_custom_limit(self, parse_source):
        _, errors = parse_source("((1))", max_depth=2)
        assert errors == ["maximum nesting depth of 2 exceeded"]

    def test_deep_prefix_chain(self, parse_source):
        _, errors = parse_source("-" * 5000 + "1")
        assert errors == ["maximum nesting depth of 100 exceeded"]

    def test_parsing_continues_after_limit(self, parse_source):
        program, errors = parse_source("(" * 500 + "1; let x = 2;")
        assert errors == ["maximum nesting depth of 100 exceeded"]
        assert len(program.statements) == 1

    def test_oversized_limit_is_capped(self, caplog):
        source = "(" * 5000 + "1" + ")" * 5000
        with caplog.at_level(logging.WARNING, logger="monkey.config"):
            parser = Parser(Lexer(source, "test.monkey"), max_depth=100000)
        parser.parse_program()
        assert parser.errors() == [f"maximum nesting depth of {MAX_DEPTH_CEILING} exceeded"]
        assert "exceeds ceiling" in caplog.text

    def test_nested_ifs_at_ceiling(self, parse_source):
        source = "if (x) {" * 1000 + "}" * 1000
        _, errors = parse_source(source, max_depth=MAX_DEPTH_CEILING)
        assert errors[0] == f"maximum nesting depth of {MAX_DEPTH_CEILING} exceeded"


class TestErrorsAccessor:
    def test_errors_returns_copy(self):
        parser = Parser(Lexer("let = 1;"))
        parser.parse_program()
        parser.errors().clear()
        assert len(parser.errors()) == 1

    def test_diagnostic_span(self):
        parser = Parser(Lexer("let x = 1;\nlet = 2;"))
        parser.parse_program()
        (diag,) = parser.diagnostics()
        assert diag.span.start.line == 2
        assert diag.span.start.column == 5

    def test_check_helper(self):
        assert check("let x = 1;") == []
        assert check(";") == ["no prefix parse function for ; found"]


class TestParseHelper:
    def test_success(self):
        program = parse("let x = 1;")
        assert len(program.statements) == 1

    def test_raises_with_all_diagnostics(self):
        with pytest.raises(ParseError) as exc_info:
            parse("let = 1; let x 2;", "bad.monkey")
        err = exc_info.value
        assert err.messages == [
            "expected next token to be IDENT, got = instead",
            "expected next token to be =, got INT instead",
        ]
        assert "bad.monkey:1:5" in str(err)
