"""Monkey lexer — converts source text into a stream of tokens, one at a time."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from monkey.tokens import Position, Span, Token, TokenType, is_digit, is_letter, lookup_ident

_SINGLE_CHAR: dict[str, TokenType] = {
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "!": TokenType.BANG,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

# Two-character operators, keyed by first char: (second char, type)
_DOUBLE_CHAR: dict[str, tuple[str, TokenType]] = {
    "=": ("=", TokenType.EQ),
    "!": ("=", TokenType.NOT_EQ),
}

_WHITESPACE = frozenset(" \t\n\r")


class Lexer:
    """Pull-based scanner: each call to next_token() consumes one token.

    ``ch`` is the character under the cursor and becomes ``""`` once input is
    exhausted; after every read ``read_position == position + 1``.
    """

    def __init__(self, source: str, filename: str = "input.monkey") -> None:
        self.source = source
        self.filename = filename
        self._position = 0
        self._read_position = 1
        self._ch = source[0] if source else ""
        self._line = 1
        self._col = 1

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Skip whitespace and return the next token.

        Unrecognised characters become ILLEGAL tokens. At end of input EOF is
        returned, and keeps being returned on further calls.
        """
        self._skip_whitespace()
        start = self._current_pos()
        ch = self._ch

        if ch == "":
            return Token(TokenType.EOF, "", Span(start, start))

        if ch in _DOUBLE_CHAR:
            second, tt = _DOUBLE_CHAR[ch]
            if self._peek_char() == second:
                self._read_char()
                self._read_char()
                return self._make(tt, ch + second, start)

        if ch in _SINGLE_CHAR:
            self._read_char()
            return self._make(_SINGLE_CHAR[ch], ch, start)

        if is_letter(ch):
            word = self._read_while(is_letter)
            return self._make(lookup_ident(word), word, start)

        if is_digit(ch):
            number = self._read_while(is_digit)
            return self._make(TokenType.INT, number, start)

        self._read_char()
        return self._make(TokenType.ILLEGAL, ch, start)

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _read_char(self) -> None:
        if self._ch == "":
            return
        if self._ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        self._position = self._read_position
        self._read_position += 1
        if self._position < len(self.source):
            self._ch = self.source[self._position]
        else:
            self._ch = ""

    def _peek_char(self) -> str:
        if self._read_position >= len(self.source):
            return ""
        return self.source[self._read_position]

    def _read_while(self, pred: Callable[[str], bool]) -> str:
        start = self._position
        while self._ch != "" and pred(self._ch):
            self._read_char()
        return self.source[start : self._position]

    def _skip_whitespace(self) -> None:
        while self._ch in _WHITESPACE:
            self._read_char()

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._position)

    def _make(self, tt: TokenType, literal: str, start: Position) -> Token:
        return Token(tt, literal, Span(start, self._current_pos()))


def tokenize(source: str, filename: str = "input.monkey") -> list[Token]:
    """Convenience function: tokenize source text and return the token list."""
    return list(Lexer(source, filename))
