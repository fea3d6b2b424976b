"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from clay.ast import (
    BlockStatement,
    Expression,
    ExpressionStatement,
    InfixExpression,
    IntegerLiteral,
    NormalIdentifier,
    Program,
    ReturnStatement,
    Statement,
)
from clay.lexer import tokenize
from clay.parser import parse
from clay.tokens import Position, Span, Token, TokenType

# Placeholder for the token slot of hand-built expected nodes. Tokens are
# excluded from node equality, so any token will do.
TOK = Token(TokenType.IDENTIFIER, "_", "_", Span(Position(1, 1, 0), Position(1, 2, 1)))


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns the token list."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Program."""

    def _parse(source: str, filename: str = "test.clay") -> Program:
        return parse(source, filename)

    return _parse


@pytest.fixture
def parse_expr():
    """Return a helper that parses a single expression statement and returns its expression."""

    def _parse(source: str) -> Expression:
        program = parse(source)
        assert len(program.statements) == 1, f"Expected 1 statement, got {program.statements}"
        stmt = program.statements[0]
        assert isinstance(stmt, ExpressionStatement), f"Expected ExpressionStatement, got {stmt}"
        return stmt.expression

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[object]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def ident(*names: str) -> NormalIdentifier:
    return NormalIdentifier(TOK, names)


def integer(value: int) -> IntegerLiteral:
    return IntegerLiteral(TOK, value)


def infix(operator: str, left: Expression, right: Expression) -> InfixExpression:
    return InfixExpression(TOK, operator, left, right)


def block(*statements: Statement) -> BlockStatement:
    return BlockStatement(TOK, statements)


def returns(value: Expression) -> BlockStatement:
    """The block a single-expression body is wrapped in: { return value }."""
    return BlockStatement(TOK, (ReturnStatement(TOK, value),))
