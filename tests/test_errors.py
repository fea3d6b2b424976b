"""Test error messages, position accuracy, and context snippets."""

import pytest

from clay.errors import LexError, ParseError, SourceError
from clay.lexer import tokenize
from clay.parser import parse
from clay.tokens import Position, Span, TokenType


class TestTaxonomy:
    def test_lex_error_is_source_error(self):
        with pytest.raises(SourceError):
            tokenize("$")

    def test_parse_error_is_source_error(self):
        with pytest.raises(SourceError):
            parse("x :=")

    def test_lex_and_parse_are_distinct(self):
        assert not issubclass(LexError, ParseError)
        assert not issubclass(ParseError, LexError)


class TestErrorFormatting:
    def test_format_contains_line(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("x := 1 $ 2")
        formatted = exc_info.value.format()
        assert "x := 1 $ 2" in formatted

    def test_format_contains_carets(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("$")
        assert "^" in exc_info.value.format()

    def test_lex_tag(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("$")
        assert exc_info.value.format().startswith("lex error:")

    def test_parse_tag(self):
        with pytest.raises(ParseError) as exc_info:
            parse("(1")
        assert exc_info.value.format().startswith("parse error:")

    def test_format_contains_position(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("line1\nline2\n  $")
        assert "3:3" in exc_info.value.format()

    def test_format_with_custom_filename(self):
        with pytest.raises(ParseError) as exc_info:
            parse("(1", "main.clay")
        formatted = exc_info.value.format("main.clay")
        assert "--> main.clay:" in formatted

    def test_str_is_formatted(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("$")
        assert str(exc_info.value) == exc_info.value.format()

    def test_caret_underlines_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse("x match ( 1 )")
        last_line = exc_info.value.format().splitlines()[-1]
        # '(' is at column 9
        assert last_line.endswith(" " * 8 + "^")

    def test_multiline_span(self):
        err = ParseError(
            "test error",
            Span(Position(1, 1, 0), Position(2, 5, 10)),
            "first line\nsecond line",
        )
        formatted = err.format("test.clay")
        assert "parse error: test error" in formatted
        assert "^" * len("first line") in formatted

    def test_position_past_source(self):
        err = LexError("boom", Position(5, 1, 99), "one line")
        assert "5:1" in err.format()


class TestParseErrorDetails:
    def test_mismatch_fields(self):
        with pytest.raises(ParseError) as exc_info:
            parse("(1 2")
        err = exc_info.value
        assert err.expected == TokenType.RPAREN
        assert err.actual == TokenType.INTEGER
        assert err.reason == "closing a grouped expression"
        assert err.position.column == 4

    def test_mismatch_message(self):
        with pytest.raises(ParseError) as exc_info:
            parse("(1 2")
        assert exc_info.value.message == (
            "expected ')' when closing a grouped expression, found integer"
        )

    def test_end_of_input(self):
        with pytest.raises(ParseError, match="found end of input") as exc_info:
            parse("f(1, 2")
        assert exc_info.value.actual is None
        assert exc_info.value.expected == TokenType.RPAREN
