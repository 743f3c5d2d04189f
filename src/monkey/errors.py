"""Diagnostics and error types with formatted source context."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from monkey.tokens import Span


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single syntax error message anchored to a source span."""

    message: str
    span: Span

    def format(self, source: str, filename: str = "input.monkey") -> str:
        lines = source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class ParseError(Exception):
    """Raised by parse() when the parser collected one or more diagnostics."""

    def __init__(
        self,
        diagnostics: Sequence[Diagnostic],
        source: str,
        filename: str = "input.monkey",
    ) -> None:
        self.diagnostics = tuple(diagnostics)
        self.source = source
        self.filename = filename
        super().__init__(self.format(filename))

    @property
    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    def format(self, filename: str | None = None) -> str:
        name = filename if filename is not None else self.filename
        return "\n\n".join(d.format(self.source, name) for d in self.diagnostics)
