"""Error types with formatted source context."""

from __future__ import annotations

from clay.tokens import Position, Span, TokenType, describe


class SourceError(Exception):
    """Base for errors that point at a location in Clay source text."""

    tag = "error"

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    @property
    def position(self) -> Position:
        return self.span.start

    def format(self, filename: str = "input.clay") -> str:
        lines = self.source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

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
            f"{self.tag}: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class LexError(SourceError):
    """Raised on the first lexing error: illegal character or bad numeral."""

    tag = "lex error"

    def __init__(self, message: str, position: Position, source: str) -> None:
        super().__init__(message, Span(position, position), source)


class ParseError(SourceError):
    """Raised on the first structural parse error.

    ``expected`` and ``actual`` name the token types involved when the error
    is a token mismatch (``actual`` is None when input ran out), and
    ``reason`` describes the construct being parsed, e.g. "defining a match
    clause".
    """

    tag = "parse error"

    def __init__(
        self,
        message: str,
        span: Span,
        source: str,
        expected: TokenType | None = None,
        actual: TokenType | None = None,
        reason: str | None = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.reason = reason
        super().__init__(message, span, source)

    @classmethod
    def mismatch(
        cls,
        expected: TokenType,
        actual: TokenType | None,
        reason: str,
        span: Span,
        source: str,
    ) -> ParseError:
        """Build the standard expected-vs-actual diagnostic."""
        message = f"expected {describe(expected)} when {reason}, found {describe(actual)}"
        return cls(message, span, source, expected=expected, actual=actual, reason=reason)
