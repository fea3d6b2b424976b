"""Human-readable AST and token dumps for the CLI and REPL."""

from __future__ import annotations

import sys
from typing import TextIO

from clay.ast import (
    ArrayLiteral,
    AssignStatement,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    DefinitionIdentifier,
    ExpressionStatement,
    FloatLiteral,
    FunctionLiteral,
    IfExpression,
    ImportStatement,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    MapLiteral,
    MatchClause,
    MatchExpression,
    NormalIdentifier,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    UnderscoreLiteral,
    UpdateStatement,
)
from clay.tokens import Token


def dump_ast(program: Program, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Program\n")
    for stmt in program.statements:
        _dump_node(stmt, 1, file)


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one token per line with its position."""
    for tok in tokens:
        pos = tok.position
        file.write(f"{pos.line}:{pos.column} {tok.type.name} {tok.raw!r}\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _label(node: object) -> str:
    """One-line description of a node, without its children."""
    if isinstance(node, (NormalIdentifier, DefinitionIdentifier)):
        sep = "." if isinstance(node, NormalIdentifier) else ", "
        return f"{type(node).__name__} {sep.join(node.names)}"
    if isinstance(node, (StringLiteral, IntegerLiteral, FloatLiteral, BooleanLiteral)):
        return f"{type(node).__name__}({node.value!r})"
    if isinstance(node, UnderscoreLiteral):
        return "Underscore"
    if isinstance(node, (InfixExpression, PrefixExpression)):
        return f"{type(node).__name__} {node.operator}"
    if isinstance(node, UpdateStatement):
        return f"UpdateStatement {node.operator}"
    if isinstance(node, ImportStatement):
        return f"ImportStatement {node.name}"
    if isinstance(node, FunctionLiteral):
        return f"FunctionLiteral |{', '.join(node.parameters)}|"
    return type(node).__name__


def _dump_node(node: object, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}{_label(node)}\n")
    for child in _children(node):
        _dump_node(child, depth + 1, f)


def _children(node: object) -> list[object]:
    if isinstance(node, BlockStatement):
        return list(node.statements)
    if isinstance(node, ExpressionStatement):
        return [node.expression]
    if isinstance(node, AssignStatement):
        return [node.names, node.value]
    if isinstance(node, UpdateStatement):
        return [node.target, node.value]
    if isinstance(node, ReturnStatement):
        return [node.value]
    if isinstance(node, ArrayLiteral):
        return list(node.elements)
    if isinstance(node, MapLiteral):
        return [item for pair in node.pairs for item in pair]
    if isinstance(node, IndexExpression):
        return [node.left, node.index]
    if isinstance(node, FunctionLiteral):
        return [node.body]
    if isinstance(node, CallExpression):
        return [node.function, *node.arguments]
    if isinstance(node, PrefixExpression):
        return [node.right]
    if isinstance(node, InfixExpression):
        return [node.left, node.right]
    if isinstance(node, IfExpression):
        arms: list[object] = [node.condition, node.consequence]
        if node.alternative is not None:
            arms.append(node.alternative)
        return arms
    if isinstance(node, MatchExpression):
        children: list[object] = [node.subject, *node.clauses]
        if node.default is not None:
            children.append(node.default)
        return children
    if isinstance(node, MatchClause):
        return [*node.predicates, node.body]
    return []
