"""Clay lexer — converts source text into a lazy stream of tokens."""

from __future__ import annotations

import math
from collections.abc import Iterator

from clay.errors import LexError
from clay.tokens import Position, Span, Token, TokenType, is_digit, is_ident_char, lookup_identifier

# Integer literals are unsigned machine words.
MAX_INTEGER = 2**64 - 1
_MAX_INTEGER_DIGITS = len(str(MAX_INTEGER))

_SINGLE: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.PERIOD,
    "%": TokenType.PERCENT,
}

# First character -> (second character -> two-character type, one-character fallback)
_DOUBLE: dict[str, tuple[dict[str, TokenType], TokenType]] = {
    "!": ({"=": TokenType.BANG_EQUAL}, TokenType.BANG),
    "=": ({"=": TokenType.DOUBLE_EQUAL}, TokenType.EQUAL),
    "&": ({"&": TokenType.AND}, TokenType.AMPERSAND),
    "|": ({"|": TokenType.OR}, TokenType.BAR),
    "+": ({"=": TokenType.PLUS_EQUAL}, TokenType.PLUS),
    "-": ({"=": TokenType.MINUS_EQUAL, ">": TokenType.ARROW}, TokenType.MINUS),
    "*": ({"=": TokenType.ASTERISK_EQUAL}, TokenType.ASTERISK),
    "/": ({"=": TokenType.SLASH_EQUAL}, TokenType.SLASH),
    "<": ({"=": TokenType.LT_EQUAL}, TokenType.LT),
    ">": ({"=": TokenType.GT_EQUAL}, TokenType.GT),
    ":": ({"=": TokenType.COLON_EQUAL}, TokenType.COLON),
}

_WHITESPACE = frozenset(" \t\r\n")


class Lexer:
    """Tokenize Clay source text, one token at a time.

    The lexer is an iterator: each step consumes at least one character, so
    iteration always terminates. End of input ends the iteration rather than
    producing a token.
    """

    def __init__(self, source: str, filename: str = "input.clay") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        tok = self.next_token()
        if tok is None:
            raise StopIteration
        return tok

    def tokenize(self) -> list[Token]:
        """Tokenize the remaining source and return the token list."""
        return list(self)

    def next_token(self) -> Token | None:
        """Return the next token, or None once the source is exhausted."""
        self._skip_whitespace()
        if self._pos >= len(self._source):
            return None

        ch = self._peek()

        if ch in _SINGLE:
            start = self._current_pos()
            self._advance()
            return self._make(_SINGLE[ch], ch, start)

        if ch in _DOUBLE:
            return self._lex_operator(ch)

        if is_digit(ch):
            return self._lex_number()

        if ch == '"':
            return self._lex_string()

        if is_ident_char(ch):
            return self._lex_identifier()

        raise self._error(f"illegal character {ch!r}")

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _make(self, tt: TokenType, value: str | int | float, start: Position) -> Token:
        raw = self._source[start.offset : self._pos]
        return Token(tt, value, raw, Span(start, self._current_pos()))

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._source) and self._peek() in _WHITESPACE:
            self._advance()

    # ------------------------------------------------------------------
    # Token scanners
    # ------------------------------------------------------------------

    def _lex_operator(self, ch: str) -> Token:
        start = self._current_pos()
        pairs, single = _DOUBLE[ch]
        self._advance()
        second = self._peek()
        if second in pairs:
            self._advance()
            return self._make(pairs[second], ch + second, start)
        return self._make(single, ch, start)

    def _lex_number(self) -> Token:
        start = self._current_pos()
        is_float = False
        while self._pos < len(self._source):
            ch = self._peek()
            if is_digit(ch):
                self._advance()
            elif ch == "." and is_digit(self._peek(1)):
                # A '.' not followed by a digit ends the numeral
                is_float = True
                self._advance()
            else:
                break
        text = self._source[start.offset : self._pos]

        if not is_float:
            # int() refuses very long digit strings, so check the significant digits first
            digits = text.lstrip("0") or "0"
            if len(digits) > _MAX_INTEGER_DIGITS or int(digits) > MAX_INTEGER:
                raise self._error(f"could not parse '{text}' as an integer: out of range", start)
            return self._make(TokenType.INTEGER, int(digits), start)

        try:
            number = float(text)
        except ValueError:
            raise self._error(f"could not parse '{text}' as a float", start) from None
        if math.isinf(number):
            raise self._error(f"could not parse '{text}' as a float: out of range", start)
        return self._make(TokenType.FLOAT, number, start)

    def _lex_string(self) -> Token:
        start = self._current_pos()
        self._advance()  # consume opening quote
        content_start = self._pos

        while self._pos < len(self._source):
            ch = self._peek()
            if ch == '"':
                content = self._source[content_start : self._pos]
                self._advance()  # consume closing quote
                return self._make(TokenType.STRING, content, start)
            if ch == "\\" and self._pos + 1 < len(self._source):
                # Escaped character is kept verbatim but cannot close the string
                self._advance()
            self._advance()

        raise self._error("unterminated string literal", start)

    def _lex_identifier(self) -> Token:
        start = self._current_pos()
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            self._advance()
        text = self._source[start.offset : self._pos]
        return self._make(lookup_identifier(text), text, start)


def tokenize(source: str, filename: str = "input.clay") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
