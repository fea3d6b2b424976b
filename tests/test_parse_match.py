"""Tests for match expressions."""

from __future__ import annotations

import pytest

from clay.ast import (
    CallExpression,
    InfixExpression,
    MatchClause,
    MatchExpression,
    StringLiteral,
    UnderscoreLiteral,
)
from clay.errors import ParseError
from clay.parser import parse
from clay.tokens import TokenType
from tests.conftest import TOK, ident, infix, integer, returns


def string(value: str) -> StringLiteral:
    return StringLiteral(TOK, value)


class TestClauses:
    def test_full_match(self, parse_expr):
        expr = parse_expr('x match { 1 -> "one", 2, 3 -> "few", _ -> "many" }')
        assert expr == MatchExpression(
            TOK,
            ident("x"),
            (
                MatchClause(TOK, (integer(1),), returns(string("one"))),
                MatchClause(TOK, (integer(2), integer(3)), returns(string("few"))),
            ),
            returns(string("many")),
        )

    def test_clause_order_kept(self, parse_expr):
        expr = parse_expr("x match { 3 -> 0, 1 -> 0, 2 -> 0 }")
        assert [c.predicates[0].value for c in expr.clauses] == [3, 1, 2]

    def test_expression_predicates(self, parse_expr):
        expr = parse_expr("x match { a + 1 -> 0 }")
        assert expr.clauses[0].predicates == (infix("+", ident("a"), integer(1)),)

    def test_block_body(self, parse_expr):
        expr = parse_expr("x match { 1 -> { return 2 } }")
        assert expr.clauses[0].body == returns(integer(2))

    def test_both_body_forms_equal(self, parse_expr):
        assert parse_expr("x match { 1 -> 2 }") == parse_expr("x match { 1 -> { return 2 } }")

    def test_clause_token(self, parse_expr):
        expr = parse_expr("x match { 7 -> 0 }")
        assert expr.clauses[0].token.raw == "7"

    def test_trailing_comma(self, parse_expr):
        expr = parse_expr("x match { 1 -> 2, }")
        assert len(expr.clauses) == 1

    def test_empty(self, parse_expr):
        expr = parse_expr("x match {}")
        assert expr == MatchExpression(TOK, ident("x"), (), None)

    def test_multiline(self, parse_expr):
        expr = parse_expr('x match {\n  1 -> "a",\n  _ -> "b"\n}')
        assert len(expr.clauses) == 1
        assert expr.default == returns(string("b"))


class TestDefault:
    def test_no_default(self, parse_expr):
        expr = parse_expr("x match { 1 -> 2 }")
        assert expr.default is None

    def test_default_only(self, parse_expr):
        expr = parse_expr("x match { _ -> 0 }")
        assert expr.clauses == ()
        assert expr.default == returns(integer(0))

    def test_default_position_does_not_matter(self, parse_expr):
        first = parse_expr("x match { _ -> 0, 1 -> 1 }")
        last = parse_expr("x match { 1 -> 1, _ -> 0 }")
        assert first == last

    def test_underscore_among_predicates(self, parse_expr):
        expr = parse_expr("x match { _, 1 -> 2 }")
        assert expr.default is None
        assert expr.clauses[0].predicates == (UnderscoreLiteral(TOK), integer(1))

    def test_duplicate_default(self):
        with pytest.raises(ParseError, match="more than one '_' clause") as exc_info:
            parse("x match { _ -> 1, _ -> 2 }")
        assert exc_info.value.span.start.column == 19


class TestSubject:
    def test_subject_kept(self, parse_expr):
        assert parse_expr("x match { 1 -> 2 }").subject == ident("x")

    def test_call_subject(self, parse_expr):
        expr = parse_expr("f(1) match { 1 -> 2 }")
        assert expr.subject == CallExpression(TOK, ident("f"), (integer(1),))

    def test_binds_tighter_than_operators(self, parse_expr):
        expr = parse_expr("a + b match { 1 -> 2 }")
        assert isinstance(expr, InfixExpression)
        assert expr.left == ident("a")
        assert isinstance(expr.right, MatchExpression)
        assert expr.right.subject == ident("b")

    def test_grouped_subject(self, parse_expr):
        expr = parse_expr("(a + b) match { 1 -> 2 }")
        assert expr.subject == infix("+", ident("a"), ident("b"))

    def test_as_definition_value(self, parse_source):
        stmt = parse_source('size := n match { 0 -> "none", _ -> "some" }').statements[0]
        assert isinstance(stmt.value, MatchExpression)


class TestErrors:
    def test_missing_open_brace(self):
        with pytest.raises(ParseError, match="expected '\\{' when opening a match expression"):
            parse("x match 1")

    def test_missing_arrow(self):
        with pytest.raises(ParseError, match="expected '->' when defining a match clause, found integer"):
            parse("x match { 1 2 }")

    def test_missing_comma(self):
        with pytest.raises(ParseError, match="expected ',' when separating match clauses, found integer"):
            parse("x match { 1 -> 2 3 -> 4 }")

    def test_unclosed(self):
        with pytest.raises(ParseError, match="expected '}' when closing a match expression, found end of input"):
            parse("x match { 1 -> 2,")

    def test_unclosed_without_trailing_comma(self):
        with pytest.raises(ParseError) as exc_info:
            parse("x match { 1 -> 2")
        err = exc_info.value
        assert err.message == "expected '}' when closing a match expression, found end of input"
        assert err.expected == TokenType.RBRACE
        assert err.actual is None

    def test_unclosed_before_first_clause(self):
        with pytest.raises(ParseError, match="expected '}' when closing a match expression"):
            parse("x match {")

    def test_missing_body(self):
        with pytest.raises(ParseError, match="expected a body when defining a match clause"):
            parse("x match { 1 ->")

    def test_missing_predicate(self):
        with pytest.raises(ParseError, match="expected expression when defining a match clause, found '->'"):
            parse("x match { -> 1 }")
