"""Tests for parser error messages and positions."""

from __future__ import annotations

import pytest

from clay.errors import LexError, ParseError
from clay.parser import Parser, parse
from clay.tokens import TokenType


class TestMismatchDetails:
    def test_expected_and_actual(self):
        with pytest.raises(ParseError) as exc_info:
            parse("f(1 2)")
        err = exc_info.value
        assert err.expected == TokenType.RPAREN
        assert err.actual == TokenType.INTEGER
        assert err.reason == "listing call arguments"

    def test_end_of_input_has_no_actual(self):
        with pytest.raises(ParseError) as exc_info:
            parse("[1, 2")
        assert exc_info.value.actual is None
        assert exc_info.value.message.endswith("found end of input")

    def test_end_of_input_points_past_last_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse("x := (1 +\n  2")
        pos = exc_info.value.position
        assert (pos.line, pos.column) == (2, 4)

    def test_missing_operand_points_past_keyword(self):
        with pytest.raises(ParseError) as exc_info:
            parse("return")
        pos = exc_info.value.position
        assert (pos.line, pos.column) == (1, 7)

    def test_empty_token_list(self):
        assert Parser([]).parse_program().statements == ()


class TestMissingParts:
    def test_missing_assignment_value(self):
        with pytest.raises(ParseError, match="expected expression when assigning with ':=', found end of input"):
            parse("x :=")

    def test_missing_update_value(self):
        with pytest.raises(ParseError, match="expected expression when assigning with '=', found '\\)'"):
            parse("x = )")

    def test_missing_index(self):
        with pytest.raises(ParseError, match="expected expression when reading an index"):
            parse("a[]")

    def test_missing_map_value(self):
        with pytest.raises(ParseError, match="expected expression when reading a map value"):
            parse("{1: }")

    def test_missing_map_key(self):
        with pytest.raises(ParseError, match="expected expression when reading a map key, found ':'"):
            parse("{: 1}")

    def test_missing_call_argument(self):
        with pytest.raises(ParseError, match="expected expression when listing call arguments, found ','"):
            parse("f(1, , 2)")


class TestNestedErrors:
    def test_error_inside_function_body(self):
        with pytest.raises(ParseError, match="closing an index expression") as exc_info:
            parse("f := |x| -> {\n  return x[0\n}")
        assert exc_info.value.position.line == 3

    def test_error_inside_match_arm(self):
        with pytest.raises(ParseError, match="separating match clauses"):
            parse("x match { 1 -> |y| -> y 2 -> 3 }")

    def test_first_error_wins(self):
        with pytest.raises(ParseError, match="grouped expression"):
            parse("(1 2\n[3 4")


class TestLexErrorsSurface:
    def test_lex_error_before_parsing(self):
        # Tokenizing happens before parsing, so the lex error is reported
        # even though a parse error appears earlier in the source
        with pytest.raises(LexError, match="illegal character"):
            parse("(1 2 $")

    def test_bad_float(self):
        with pytest.raises(LexError, match="could not parse '1.2.3' as a float"):
            parse("x := 1.2.3")
