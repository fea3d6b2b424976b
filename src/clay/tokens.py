"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Structural (single-character)
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    COMMA = auto()  # ,
    PERIOD = auto()  # .
    COLON = auto()  # :

    # Operators
    PLUS = auto()  # +
    MINUS = auto()  # -
    ASTERISK = auto()  # *
    SLASH = auto()  # /
    PERCENT = auto()  # %
    BANG = auto()  # !
    EQUAL = auto()  # =
    DOUBLE_EQUAL = auto()  # ==
    BANG_EQUAL = auto()  # !=
    LT = auto()  # <
    LT_EQUAL = auto()  # <=
    GT = auto()  # >
    GT_EQUAL = auto()  # >=
    AMPERSAND = auto()  # &
    AND = auto()  # &&
    BAR = auto()  # |
    OR = auto()  # ||
    ARROW = auto()  # ->

    # Compound assignment
    PLUS_EQUAL = auto()  # +=
    MINUS_EQUAL = auto()  # -=
    ASTERISK_EQUAL = auto()  # *=
    SLASH_EQUAL = auto()  # /=
    COLON_EQUAL = auto()  # :=

    # Literals (value is the parsed payload)
    UNDERSCORE = auto()  # _
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()  # value is the verbatim contents between the quotes

    # Identifiers and keywords
    IDENTIFIER = auto()
    MATCH = auto()
    IMPORT = auto()
    RETURN = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with resolved value and original source text."""

    type: TokenType
    value: str | int | float
    raw: str
    span: Span

    @property
    def position(self) -> Position:
        return self.span.start


KEYWORDS: dict[str, TokenType] = {
    "match": TokenType.MATCH,
    "import": TokenType.IMPORT,
    "return": TokenType.RETURN,
}

# Human-readable spelling of each token type, used in diagnostics.
DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.COMMA: "','",
    TokenType.PERIOD: "'.'",
    TokenType.COLON: "':'",
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.ASTERISK: "'*'",
    TokenType.SLASH: "'/'",
    TokenType.PERCENT: "'%'",
    TokenType.BANG: "'!'",
    TokenType.EQUAL: "'='",
    TokenType.DOUBLE_EQUAL: "'=='",
    TokenType.BANG_EQUAL: "'!='",
    TokenType.LT: "'<'",
    TokenType.LT_EQUAL: "'<='",
    TokenType.GT: "'>'",
    TokenType.GT_EQUAL: "'>='",
    TokenType.AMPERSAND: "'&'",
    TokenType.AND: "'&&'",
    TokenType.BAR: "'|'",
    TokenType.OR: "'||'",
    TokenType.ARROW: "'->'",
    TokenType.PLUS_EQUAL: "'+='",
    TokenType.MINUS_EQUAL: "'-='",
    TokenType.ASTERISK_EQUAL: "'*='",
    TokenType.SLASH_EQUAL: "'/='",
    TokenType.COLON_EQUAL: "':='",
    TokenType.UNDERSCORE: "'_'",
    TokenType.INTEGER: "integer",
    TokenType.FLOAT: "float",
    TokenType.STRING: "string",
    TokenType.IDENTIFIER: "identifier",
    TokenType.MATCH: "'match'",
    TokenType.IMPORT: "'import'",
    TokenType.RETURN: "'return'",
}


def describe(tt: TokenType | None) -> str:
    """Return the diagnostic spelling of a token type (None means end of input)."""
    if tt is None:
        return "end of input"
    return DESCRIPTIONS[tt]


def lookup_identifier(text: str) -> TokenType:
    """Classify an identifier-shaped run as a keyword, '_' or a plain identifier."""
    if text == "_":
        return TokenType.UNDERSCORE
    return KEYWORDS.get(text, TokenType.IDENTIFIER)


def is_ident_char(ch: str) -> bool:
    """Return True if ch is a valid identifier character (ASCII letter or '_')."""
    return ch == "_" or (ch.isascii() and ch.isalpha())


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return len(ch) == 1 and ch in "0123456789"
