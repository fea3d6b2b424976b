"""AST node types for parsed Clay programs.

Every node keeps the token that introduced it for diagnostics. The token is
excluded from equality, hashing and repr, so two trees compare equal when
they have the same structure regardless of where in the source they came
from.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from clay.tokens import Token


def _token_field():
    return field(compare=False, repr=False)


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NormalIdentifier:
    """Dotted identifier path, e.g. ``a.b.c``."""

    token: Token = _token_field()
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DefinitionIdentifier:
    """Comma-separated identifiers introduced by ``:=``."""

    token: Token = _token_field()
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class StringLiteral:
    token: Token = _token_field()
    value: str


@dataclass(frozen=True, slots=True)
class BooleanLiteral:
    token: Token = _token_field()
    value: bool


@dataclass(frozen=True, slots=True)
class UnderscoreLiteral:
    """The ``_`` wildcard."""

    token: Token = _token_field()


@dataclass(frozen=True, slots=True)
class IntegerLiteral:
    token: Token = _token_field()
    value: int


@dataclass(frozen=True, slots=True)
class FloatLiteral:
    token: Token = _token_field()
    value: float


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    token: Token = _token_field()
    elements: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class MapLiteral:
    """``{key: value, ...}`` with keys unique by structural equality."""

    token: Token = _token_field()
    pairs: tuple[tuple[Expression, Expression], ...]


@dataclass(frozen=True, slots=True)
class IndexExpression:
    token: Token = _token_field()
    left: Expression
    index: Expression


@dataclass(frozen=True, slots=True)
class FunctionLiteral:
    """``|params| -> body``; the body is always a block."""

    token: Token = _token_field()
    parameters: tuple[str, ...]
    body: BlockStatement


@dataclass(frozen=True, slots=True)
class CallExpression:
    token: Token = _token_field()
    function: Expression
    arguments: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class PrefixExpression:
    token: Token = _token_field()
    operator: str
    right: Expression


@dataclass(frozen=True, slots=True)
class InfixExpression:
    token: Token = _token_field()
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True, slots=True)
class IfExpression:
    """Conditional with block-shaped arms. No surface syntax builds it yet."""

    token: Token = _token_field()
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None


@dataclass(frozen=True, slots=True)
class MatchClause:
    """One or more alternative predicates mapped to a single body."""

    token: Token = _token_field()
    predicates: tuple[Expression, ...]
    body: BlockStatement


@dataclass(frozen=True, slots=True)
class MatchExpression:
    """``subject match { p1, p2 -> body, _ -> default }``."""

    token: Token = _token_field()
    subject: Expression
    clauses: tuple[MatchClause, ...]
    default: BlockStatement | None


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BlockStatement:
    token: Token = _token_field()
    statements: tuple[Statement, ...]


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    token: Token = _token_field()
    expression: Expression


@dataclass(frozen=True, slots=True)
class AssignStatement:
    """``a, b := value``, introducing new bindings."""

    token: Token = _token_field()
    names: DefinitionIdentifier
    value: Expression


@dataclass(frozen=True, slots=True)
class UpdateStatement:
    """``a.b = value`` or a compound form such as ``a += value``."""

    token: Token = _token_field()
    target: NormalIdentifier
    operator: str
    value: Expression


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    token: Token = _token_field()
    value: Expression


@dataclass(frozen=True, slots=True)
class ImportStatement:
    token: Token = _token_field()
    name: str
    module: Token = _token_field()


@dataclass(frozen=True, slots=True)
class Program:
    """Root node: the ordered top-level statements."""

    statements: tuple[Statement, ...]


Expression = (
    NormalIdentifier
    | DefinitionIdentifier
    | StringLiteral
    | BooleanLiteral
    | UnderscoreLiteral
    | IntegerLiteral
    | FloatLiteral
    | ArrayLiteral
    | MapLiteral
    | IndexExpression
    | FunctionLiteral
    | CallExpression
    | PrefixExpression
    | InfixExpression
    | IfExpression
    | MatchExpression
)

Statement = (
    BlockStatement
    | ExpressionStatement
    | AssignStatement
    | UpdateStatement
    | ReturnStatement
    | ImportStatement
)
