"""Monkey parser — builds an AST from a lexer using Pratt expression parsing."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

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
from monkey.config import DEFAULT_MAX_DEPTH, ParserConfig, clamp_max_depth
from monkey.errors import Diagnostic, ParseError
from monkey.lexer import Lexer
from monkey.tokens import Span, Token, TokenType

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]

_INT64_MAX = 2**63 - 1
_INT64_DIGITS = len(str(_INT64_MAX))


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -X or !X
    CALL = 7  # myFunction(X)


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}


class Parser:
    """Pratt parser over a Lexer with one token of lookahead.

    Syntax errors never raise: each failing routine returns None and records a
    diagnostic, and parse_program() resumes at the next statement boundary.
    """

    def __init__(self, lexer: Lexer, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._lexer = lexer
        self._max_depth = clamp_max_depth(max_depth, "Parser")
        self._depth = 0
        self._depth_exceeded = False
        self._diagnostics: list[Diagnostic] = []

        self._prefix_parse_fns: dict[TokenType, PrefixParseFn] = {}
        self._infix_parse_fns: dict[TokenType, InfixParseFn] = {}

        self.register_prefix(TokenType.IDENT, self._parse_identifier)
        self.register_prefix(TokenType.INT, self._parse_integer_literal)
        self.register_prefix(TokenType.TRUE, self._parse_boolean)
        self.register_prefix(TokenType.FALSE, self._parse_boolean)
        self.register_prefix(TokenType.BANG, self._parse_prefix_expression)
        self.register_prefix(TokenType.MINUS, self._parse_prefix_expression)
        self.register_prefix(TokenType.LPAREN, self._parse_grouped_expression)
        self.register_prefix(TokenType.IF, self._parse_if_expression)
        self.register_prefix(TokenType.FUNCTION, self._parse_function_literal)

        for tt in (
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.SLASH,
            TokenType.ASTERISK,
            TokenType.EQ,
            TokenType.NOT_EQ,
            TokenType.LT,
            TokenType.GT,
        ):
            self.register_infix(tt, self._parse_infix_expression)
        self.register_infix(TokenType.LPAREN, self._parse_call_expression)

        # Prime current and peek
        self._cur = lexer.next_token()
        self._peek = lexer.next_token()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register_prefix(self, tt: TokenType, fn: PrefixParseFn) -> None:
        self._prefix_parse_fns[tt] = fn

    def register_infix(self, tt: TokenType, fn: InfixParseFn) -> None:
        self._infix_parse_fns[tt] = fn

    def errors(self) -> list[str]:
        """Accumulated error messages, in the order they were found."""
        return [d.message for d in self._diagnostics]

    def diagnostics(self) -> list[Diagnostic]:
        """Accumulated errors with their source spans."""
        return list(self._diagnostics)

    def parse_program(self) -> Program:
        statements: list[Statement] = []

        while not self._cur_token_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self._synchronize(_STATEMENT_END)
            self._next_token()

        return Program(tuple(statements))

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _next_token(self) -> None:
        self._cur = self._peek
        self._peek = self._lexer.next_token()

    def _cur_token_is(self, tt: TokenType) -> bool:
        return self._cur.type == tt

    def _peek_token_is(self, tt: TokenType) -> bool:
        return self._peek.type == tt

    def _expect_peek(self, tt: TokenType) -> bool:
        """Advance if the next token has type *tt*, else record an error."""
        if self._peek_token_is(tt):
            self._next_token()
            return True
        self._peek_error(tt)
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self._peek.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self._cur.type, Precedence.LOWEST)

    def _synchronize(self, stop: frozenset[TokenType]) -> bool:
        """Skip to the next statement boundary outside any nested braces.

        Stops on a token in *stop* at brace depth zero, on EOF, or on the '}'
        closing a skipped block (or the ';' right after it). Returns True only
        when stopped on a '}' that closes the enclosing block, one not opened
        during the skip.
        """
        depth = 0
        while not self._cur_token_is(TokenType.EOF):
            tt = self._cur.type
            if tt == TokenType.LBRACE:
                depth += 1
            elif tt == TokenType.RBRACE:
                if depth == 0:
                    if tt in stop:
                        return True
                else:
                    depth -= 1
                    # An else branch belongs to the skipped statement
                    if depth == 0 and not self._peek_token_is(TokenType.ELSE):
                        if self._peek_token_is(TokenType.SEMICOLON):
                            self._next_token()
                        return False
            elif depth == 0 and tt in stop:
                return False
            self._next_token()
        return False

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _error(self, message: str, span: Span) -> None:
        self._diagnostics.append(Diagnostic(message, span))

    def _peek_error(self, tt: TokenType) -> None:
        self._error(
            f"expected next token to be {tt.value}, got {self._peek.type.value} instead",
            self._peek.span,
        )

    def _no_prefix_parse_fn_error(self, tok: Token) -> None:
        self._error(f"no prefix parse function for {tok.type.value} found", tok.span)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> Statement | None:
        if self._cur_token_is(TokenType.LET):
            return self._parse_let_statement()
        if self._cur_token_is(TokenType.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> LetStatement | None:
        tok = self._cur

        if not self._expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self._cur, self._cur.literal)

        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return LetStatement(tok, name, value)

    def _parse_return_statement(self) -> ReturnStatement | None:
        tok = self._cur

        # A bare return is an error; the value is never implied
        if self._peek.type in _BLOCK_STATEMENT_END:
            self._error(
                f"expected expression after return, got {self._peek.type.value} instead",
                self._peek.span,
            )
            return None
        self._next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return ReturnStatement(tok, value)

    def _parse_expression_statement(self) -> ExpressionStatement | None:
        tok = self._cur

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return ExpressionStatement(tok, expression)

    def _parse_block_statement(self) -> BlockStatement | None:
        tok = self._cur  # {
        statements: list[Statement] = []
        self._next_token()

        while not self._cur_token_is(TokenType.RBRACE):
            if self._cur_token_is(TokenType.EOF):
                self._error("expected next token to be }, got EOF instead", self._cur.span)
                return None

            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                closes_block = self._synchronize(_BLOCK_STATEMENT_END)
                if closes_block or self._cur_token_is(TokenType.EOF):
                    continue
            self._next_token()

        return BlockStatement(tok, tuple(statements))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Parse an expression whose operators bind tighter than *precedence*."""
        if self._depth >= self._max_depth:
            if not self._depth_exceeded:
                self._depth_exceeded = True
                self._error(f"maximum nesting depth of {self._max_depth} exceeded", self._cur.span)
            return None

        self._depth += 1
        try:
            return self._parse_expression(precedence)
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._depth_exceeded = False

    def _parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self._prefix_parse_fns.get(self._cur.type)
        if prefix is None:
            self._no_prefix_parse_fn_error(self._cur)
            return None

        left = prefix()
        if left is None:
            return None

        while not self._peek_token_is(TokenType.SEMICOLON) and precedence < self._peek_precedence():
            infix = self._infix_parse_fns.get(self._peek.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)
            if left is None:
                return None

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(self._cur, self._cur.literal)

    def _parse_integer_literal(self) -> Expression | None:
        tok = self._cur
        text = tok.literal
        digits = text.lstrip("0") or "0"
        if (
            not (text.isascii() and text.isdigit())
            or len(digits) > _INT64_DIGITS
            or int(digits) > _INT64_MAX
        ):
            self._error(f'could not parse "{text}" as integer', tok.span)
            return None
        return IntegerLiteral(tok, int(digits))

    def _parse_boolean(self) -> Expression:
        return Boolean(self._cur, self._cur_token_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Expression | None:
        tok = self._cur
        self._next_token()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(tok, tok.literal, right)

    def _parse_infix_expression(self, left: Expression) -> Expression | None:
        tok = self._cur
        precedence = self._cur_precedence()
        self._next_token()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(tok, left, tok.literal, right)

    def _parse_grouped_expression(self) -> Expression | None:
        self._next_token()

        exp = self.parse_expression(Precedence.LOWEST)
        if exp is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        return exp

    def _parse_if_expression(self) -> Expression | None:
        tok = self._cur

        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None

        if not self._expect_peek(TokenType.LBRACE):
            return None
        consequence = self._parse_block_statement()
        if consequence is None:
            return None

        alternative: BlockStatement | None = None
        if self._peek_token_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(tok, condition, consequence, alternative)

    def _parse_function_literal(self) -> Expression | None:
        tok = self._cur

        if not self._expect_peek(TokenType.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None

        if not self._expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(tok, parameters, body)

    def _parse_function_parameters(self) -> tuple[Identifier, ...] | None:
        identifiers: list[Identifier] = []

        if self._peek_token_is(TokenType.RPAREN):
            self._next_token()
            return ()

        if not self._expect_peek(TokenType.IDENT):
            return None
        identifiers.append(Identifier(self._cur, self._cur.literal))

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(self._cur, self._cur.literal))

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return tuple(identifiers)

    def _parse_call_expression(self, function: Expression) -> Expression | None:
        tok = self._cur  # (
        arguments = self._parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(tok, function, arguments)

    def _parse_call_arguments(self) -> tuple[Expression, ...] | None:
        args: list[Expression] = []

        if self._peek_token_is(TokenType.RPAREN):
            self._next_token()
            return ()

        self._next_token()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        args.append(arg)

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return tuple(args)


# Module-level constants
_STATEMENT_END: frozenset[TokenType] = frozenset({TokenType.SEMICOLON, TokenType.EOF})
_BLOCK_STATEMENT_END: frozenset[TokenType] = frozenset(
    {TokenType.SEMICOLON, TokenType.RBRACE, TokenType.EOF}
)


def parse(
    source: str,
    filename: str = "input.monkey",
    config: ParserConfig | None = None,
) -> Program:
    """Convenience function: parse source text, raising ParseError on any syntax error."""
    if config is None:
        config = ParserConfig()
    parser = Parser(Lexer(source, filename), max_depth=config.max_depth)
    program = parser.parse_program()
    diagnostics = parser.diagnostics()
    if diagnostics:
        raise ParseError(diagnostics, source, filename)
    return program
