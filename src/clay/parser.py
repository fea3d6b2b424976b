"""Clay parser — converts a token stream into an AST by precedence climbing.

The parser keeps a cursor on the *current* token. Every parse routine starts
with the cursor on the first token of its construct and leaves it on the last
token it consumed; the statement loops step over one token between
statements.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum, IntEnum, auto

from clay.ast import (
    ArrayLiteral,
    AssignStatement,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    DefinitionIdentifier,
    Expression,
    ExpressionStatement,
    FloatLiteral,
    FunctionLiteral,
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
    Statement,
    StringLiteral,
    UnderscoreLiteral,
    UpdateStatement,
)
from clay.errors import ParseError
from clay.lexer import tokenize
from clay.tokens import Position, Span, Token, TokenType, describe


class Precedence(IntEnum):
    LOWEST = 0
    AND = 1
    OR = 2
    EQUALS = 3
    LESSGREATER = 4
    SUM = 5
    PRODUCT = 6
    PREFIX = 7
    CALL = 8
    INDEX = 9
    MATCH = 10


class IdentShape(Enum):
    NORMAL = auto()  # dotted path: a.b.c
    DESTRUCTURING = auto()  # comma list: a, b, c (a lone identifier counts too)


class Parser:
    """Pratt parser over a materialised Clay token list."""

    def __init__(self, tokens: list[Token], source: str = "", filename: str = "input.clay") -> None:
        self._tokens = tokens
        self._source = source
        self._filename = filename
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _current(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _peek(self) -> Token | None:
        idx = self._pos + 1
        if idx < len(self._tokens):
            return self._tokens[idx]
        return None

    def _current_is(self, tt: TokenType) -> bool:
        tok = self._current()
        return tok is not None and tok.type == tt

    def _peek_is(self, tt: TokenType) -> bool:
        tok = self._peek()
        return tok is not None and tok.type == tt

    def _advance(self) -> None:
        if self._pos < len(self._tokens):
            self._pos += 1

    def _mark(self) -> int:
        """Save the cursor for a later _reset()."""
        return self._pos

    def _reset(self, mark: int) -> None:
        self._pos = mark

    def _expect_peek(self, tt: TokenType, reason: str) -> Token:
        """Advance onto the next token, which must be of type tt."""
        tok = self._peek()
        if tok is None or tok.type != tt:
            raise self._mismatch(tt, tok, reason)
        self._advance()
        return tok

    def _require_more(self, closer: TokenType, reason: str) -> None:
        """Fail with a missing-closer error when the input ends before the next token."""
        if self._peek() is None:
            raise self._mismatch(closer, None, reason)

    def _require_expression(self, precedence: Precedence, reason: str) -> Expression:
        expr = self.parse_expression(precedence)
        if expr is None:
            tok = self._current()
            found = describe(tok.type if tok is not None else None)
            raise self._error(f"expected expression when {reason}, found {found}", tok, reason)
        return expr

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        statements: list[Statement] = []
        while self._current() is not None:
            stmt = self.parse_statement()
            if stmt is None:
                break
            statements.append(stmt)
            self._advance()
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        """Parse one statement starting at the cursor, or return None if none starts here."""
        tok = self._current()
        if tok is None:
            return None
        if tok.type == TokenType.IMPORT:
            return self._parse_import_statement()
        if tok.type == TokenType.IDENTIFIER:
            return self._parse_identifier_statement()
        if tok.type == TokenType.RETURN:
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_import_statement(self) -> ImportStatement:
        token = self._tokens[self._pos]
        module = self._peek()
        if module is None:
            raise self._error(
                "expected module name after 'import', found end of input", None, "importing a module"
            )
        self._advance()
        return ImportStatement(token, module.raw, module)

    def _parse_return_statement(self) -> ReturnStatement:
        token = self._tokens[self._pos]
        self._advance()
        value = self._require_expression(Precedence.LOWEST, "returning a value")
        return ReturnStatement(token, value)

    def _parse_expression_statement(self) -> ExpressionStatement | None:
        token = self._tokens[self._pos]
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None
        return ExpressionStatement(token, expr)

    def _parse_identifier_statement(self) -> Statement | None:
        """Resolve ``a, b := v`` / ``a.b = v`` against a plain expression statement."""
        mark = self._mark()
        idents, shape = self._scan_identifiers("naming an assignment target")

        op = self._peek()
        if op is None or op.type not in _ASSIGNMENT_OPERATORS:
            # Not an assignment: re-read the whole region as an expression
            self._reset(mark)
            return self._parse_expression_statement()

        first = idents[0]
        names = tuple(str(t.value) for t in idents)
        reason = f"assigning with {describe(op.type)}"
        self._advance()  # onto the assignment operator

        if op.type == TokenType.COLON_EQUAL:
            if shape is IdentShape.NORMAL:
                raise self._error(
                    "cannot define a dotted path with ':=', use '=' to update it", op, reason
                )
            self._advance()
            value = self._require_expression(Precedence.LOWEST, reason)
            return AssignStatement(op, DefinitionIdentifier(first, names), value)

        if len(idents) > 1 and shape is IdentShape.DESTRUCTURING:
            raise self._error(
                f"cannot update several identifiers with {describe(op.type)}, use ':=' to define them",
                op,
                reason,
            )
        self._advance()
        value = self._require_expression(Precedence.LOWEST, reason)
        return UpdateStatement(op, NormalIdentifier(first, names), op.raw, value)

    def _scan_identifiers(self, reason: str) -> tuple[list[Token], IdentShape]:
        """Scan an identifier chain joined by '.' or ','.

        Leaves the cursor on the last identifier. Returns an empty list (and
        does not move) when the cursor is not on an identifier.
        """
        tok = self._current()
        if tok is None or tok.type != TokenType.IDENTIFIER:
            return [], IdentShape.DESTRUCTURING

        idents = [tok]
        shape = IdentShape.DESTRUCTURING
        while True:
            sep = self._peek()
            if sep is None or sep.type not in (TokenType.PERIOD, TokenType.COMMA):
                break
            sep_shape = IdentShape.NORMAL if sep.type == TokenType.PERIOD else IdentShape.DESTRUCTURING
            if len(idents) > 1 and sep_shape is not shape:
                raise self._error("cannot mix '.' and ',' in an identifier chain", sep, reason)
            shape = sep_shape
            self._advance()
            idents.append(self._expect_peek(TokenType.IDENTIFIER, reason))
        return idents, shape

    def _parse_block_statement(self) -> BlockStatement:
        token = self._tokens[self._pos]  # '{'
        self._advance()

        statements: list[Statement] = []
        while self._current() is not None and not self._current_is(TokenType.RBRACE):
            stmt = self.parse_statement()
            if stmt is None:
                break
            statements.append(stmt)
            self._advance()

        if not self._current_is(TokenType.RBRACE):
            raise self._mismatch(TokenType.RBRACE, self._current(), "closing a block")
        return BlockStatement(token, tuple(statements))

    def _parse_arm_body(self, reason: str) -> BlockStatement:
        """Parse a ``{ ... }`` block, or a single expression wrapped as ``{ return expr }``."""
        nxt = self._peek()
        if nxt is None:
            raise self._error(f"expected a body when {reason}, found end of input", None, reason)
        self._advance()
        if nxt.type == TokenType.LBRACE:
            return self._parse_block_statement()
        value = self._require_expression(Precedence.LOWEST, reason)
        return BlockStatement(nxt, (ReturnStatement(nxt, value),))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self, precedence: Precedence = Precedence.LOWEST) -> Expression | None:
        """Parse an expression binding tighter than ``precedence``.

        Returns None when no expression can start at the cursor.
        """
        tok = self._current()
        if tok is None:
            return None
        prefix = _PREFIX_RULES.get(tok.type)
        if prefix is None:
            return None
        left = prefix(self)

        while True:
            nxt = self._peek()
            if nxt is None or precedence >= _precedence_of(nxt.type):
                break
            infix = _INFIX_RULES.get(nxt.type)
            if infix is None:
                break
            self._advance()
            left = infix(self, left)
        return left

    # Prefix rules --------------------------------------------------------

    def _parse_integer_literal(self) -> IntegerLiteral:
        tok = self._tokens[self._pos]
        return IntegerLiteral(tok, int(tok.value))

    def _parse_float_literal(self) -> FloatLiteral:
        tok = self._tokens[self._pos]
        return FloatLiteral(tok, float(tok.value))

    def _parse_string_literal(self) -> StringLiteral:
        tok = self._tokens[self._pos]
        return StringLiteral(tok, str(tok.value))

    def _parse_underscore_literal(self) -> UnderscoreLiteral:
        return UnderscoreLiteral(self._tokens[self._pos])

    def _parse_identifier(self) -> NormalIdentifier | BooleanLiteral:
        first = self._tokens[self._pos]
        names = [str(first.value)]
        while self._peek_is(TokenType.PERIOD):
            self._advance()
            field_tok = self._expect_peek(TokenType.IDENTIFIER, "naming a field after '.'")
            names.append(str(field_tok.value))
        if len(names) == 1 and names[0] in _BOOLEANS:
            return BooleanLiteral(first, _BOOLEANS[names[0]])
        return NormalIdentifier(first, tuple(names))

    def _parse_grouped_expression(self) -> Expression:
        self._advance()  # consume '('
        expr = self._require_expression(Precedence.LOWEST, "parsing a grouped expression")
        self._expect_peek(TokenType.RPAREN, "closing a grouped expression")
        return expr

    def _parse_array_literal(self) -> ArrayLiteral:
        token = self._tokens[self._pos]
        elements = self._parse_expression_list(TokenType.RBRACKET, "listing array elements")
        return ArrayLiteral(token, tuple(elements))

    def _parse_map_literal(self) -> MapLiteral:
        token = self._tokens[self._pos]
        pairs: list[tuple[Expression, Expression]] = []
        seen: set[Expression] = set()

        while not self._peek_is(TokenType.RBRACE):
            self._require_more(TokenType.RBRACE, "closing a map literal")
            self._advance()
            key = self._require_expression(Precedence.LOWEST, "reading a map key")
            self._expect_peek(TokenType.COLON, "separating a map key from its value")
            self._advance()
            value = self._require_expression(Precedence.LOWEST, "reading a map value")
            if key in seen:
                raise self._error("duplicate key in map literal", key.token, "defining a map literal")
            seen.add(key)
            pairs.append((key, value))
            if not self._peek_is(TokenType.RBRACE):
                self._require_more(TokenType.RBRACE, "closing a map literal")
                self._expect_peek(TokenType.COMMA, "separating map entries")

        self._advance()  # onto '}'
        return MapLiteral(token, tuple(pairs))

    def _parse_function_literal(self) -> FunctionLiteral:
        token = self._tokens[self._pos]
        parameters: tuple[str, ...] = ()

        # '||' is a parameterless function; '|' opens a parameter list
        if token.type == TokenType.BAR:
            self._advance()
            idents, shape = self._scan_identifiers("declaring function parameters")
            if idents:
                if shape is IdentShape.NORMAL:
                    raise self._error(
                        "function parameters must be plain identifiers",
                        idents[0],
                        "declaring function parameters",
                    )
                self._expect_peek(TokenType.BAR, "closing function parameters")
            elif not self._current_is(TokenType.BAR):
                raise self._mismatch(TokenType.BAR, self._current(), "closing function parameters")
            parameters = tuple(str(t.value) for t in idents)

        self._expect_peek(TokenType.ARROW, "declaring a function body")
        body = self._parse_arm_body("defining a function body")
        return FunctionLiteral(token, parameters, body)

    def _parse_prefix_expression(self) -> PrefixExpression:
        token = self._tokens[self._pos]
        self._advance()
        right = self._require_expression(
            Precedence.PREFIX, f"reading the operand of {describe(token.type)}"
        )
        return PrefixExpression(token, token.raw, right)

    # Infix rules ---------------------------------------------------------

    def _parse_infix_expression(self, left: Expression) -> InfixExpression:
        token = self._tokens[self._pos]
        precedence = _precedence_of(token.type)
        self._advance()
        right = self._require_expression(
            precedence, f"reading the right operand of {describe(token.type)}"
        )
        return InfixExpression(token, token.raw, left, right)

    def _parse_call_expression(self, function: Expression) -> CallExpression:
        token = self._tokens[self._pos]
        arguments = self._parse_expression_list(TokenType.RPAREN, "listing call arguments")
        return CallExpression(token, function, tuple(arguments))

    def _parse_index_expression(self, left: Expression) -> IndexExpression:
        token = self._tokens[self._pos]
        self._advance()
        index = self._require_expression(Precedence.LOWEST, "reading an index")
        self._expect_peek(TokenType.RBRACKET, "closing an index expression")
        return IndexExpression(token, left, index)

    def _parse_match_expression(self, subject: Expression) -> MatchExpression:
        token = self._tokens[self._pos]
        reason = "defining a match clause"
        self._expect_peek(TokenType.LBRACE, "opening a match expression")

        clauses: list[MatchClause] = []
        default: BlockStatement | None = None

        while not self._peek_is(TokenType.RBRACE):
            self._require_more(TokenType.RBRACE, "closing a match expression")
            self._advance()
            clause_tok = self._tokens[self._pos]

            if clause_tok.type == TokenType.UNDERSCORE and self._peek_is(TokenType.ARROW):
                if default is not None:
                    raise self._error("match expression has more than one '_' clause", clause_tok, reason)
                self._advance()  # onto '->'
                default = self._parse_arm_body(reason)
            else:
                predicates = [self._require_expression(Precedence.LOWEST, reason)]
                while self._peek_is(TokenType.COMMA):
                    self._advance()
                    self._advance()
                    predicates.append(self._require_expression(Precedence.LOWEST, reason))
                self._expect_peek(TokenType.ARROW, reason)
                body = self._parse_arm_body(reason)
                clauses.append(MatchClause(clause_tok, tuple(predicates), body))

            if not self._peek_is(TokenType.RBRACE):
                self._require_more(TokenType.RBRACE, "closing a match expression")
                self._expect_peek(TokenType.COMMA, "separating match clauses")

        self._advance()  # onto '}'
        return MatchExpression(token, subject, tuple(clauses), default)

    # Shared --------------------------------------------------------------

    def _parse_expression_list(self, end: TokenType, reason: str) -> list[Expression]:
        """Parse ``a, b, c`` after the opening token, up to and including ``end``."""
        if self._peek_is(end):
            self._advance()
            return []

        self._advance()
        items = [self._require_expression(Precedence.LOWEST, reason)]
        while self._peek_is(TokenType.COMMA):
            self._advance()
            self._advance()
            items.append(self._require_expression(Precedence.LOWEST, reason))
        self._expect_peek(end, reason)
        return items

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _end_span(self) -> Span:
        """Zero-width span just past the last token."""
        if self._tokens:
            end = self._tokens[-1].span.end
        else:
            end = Position(1, 1, 0)
        return Span(end, end)

    def _error(self, message: str, tok: Token | None, reason: str | None = None) -> ParseError:
        span = tok.span if tok is not None else self._end_span()
        actual = tok.type if tok is not None else None
        return ParseError(message, span, self._source, actual=actual, reason=reason)

    def _mismatch(self, expected: TokenType, found: Token | None, reason: str) -> ParseError:
        span = found.span if found is not None else self._end_span()
        actual = found.type if found is not None else None
        return ParseError.mismatch(expected, actual, reason, span, self._source)


# ----------------------------------------------------------------------
# Dispatch tables
# ----------------------------------------------------------------------

_BOOLEANS: dict[str, bool] = {"true": True, "false": False}

_ASSIGNMENT_OPERATORS: frozenset[TokenType] = frozenset(
    {
        TokenType.COLON_EQUAL,
        TokenType.EQUAL,
        TokenType.PLUS_EQUAL,
        TokenType.MINUS_EQUAL,
        TokenType.ASTERISK_EQUAL,
        TokenType.SLASH_EQUAL,
    }
)

_PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.DOUBLE_EQUAL: Precedence.EQUALS,
    TokenType.BANG_EQUAL: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.LT_EQUAL: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.GT_EQUAL: Precedence.LESSGREATER,
    TokenType.OR: Precedence.OR,
    TokenType.AND: Precedence.AND,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.PERCENT: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
    TokenType.MATCH: Precedence.MATCH,
}

_PREFIX_RULES: dict[TokenType, Callable[[Parser], Expression]] = {
    TokenType.INTEGER: Parser._parse_integer_literal,
    TokenType.FLOAT: Parser._parse_float_literal,
    TokenType.STRING: Parser._parse_string_literal,
    TokenType.UNDERSCORE: Parser._parse_underscore_literal,
    TokenType.IDENTIFIER: Parser._parse_identifier,
    TokenType.LPAREN: Parser._parse_grouped_expression,
    TokenType.LBRACKET: Parser._parse_array_literal,
    TokenType.LBRACE: Parser._parse_map_literal,
    TokenType.BAR: Parser._parse_function_literal,
    TokenType.OR: Parser._parse_function_literal,
    TokenType.MINUS: Parser._parse_prefix_expression,
    TokenType.BANG: Parser._parse_prefix_expression,
}

# Token types that never begin an expression
_NON_PREFIX: frozenset[TokenType] = frozenset(
    {
        TokenType.RPAREN,
        TokenType.RBRACE,
        TokenType.RBRACKET,
        TokenType.COMMA,
        TokenType.PERIOD,
        TokenType.COLON,
        TokenType.PLUS,
        TokenType.ASTERISK,
        TokenType.SLASH,
        TokenType.PERCENT,
        TokenType.EQUAL,
        TokenType.DOUBLE_EQUAL,
        TokenType.BANG_EQUAL,
        TokenType.LT,
        TokenType.LT_EQUAL,
        TokenType.GT,
        TokenType.GT_EQUAL,
        TokenType.AMPERSAND,
        TokenType.AND,
        TokenType.ARROW,
        TokenType.PLUS_EQUAL,
        TokenType.MINUS_EQUAL,
        TokenType.ASTERISK_EQUAL,
        TokenType.SLASH_EQUAL,
        TokenType.COLON_EQUAL,
        TokenType.MATCH,
        TokenType.IMPORT,
        TokenType.RETURN,
    }
)

_INFIX_RULES: dict[TokenType, Callable[[Parser, Expression], Expression]] = {
    TokenType.DOUBLE_EQUAL: Parser._parse_infix_expression,
    TokenType.BANG_EQUAL: Parser._parse_infix_expression,
    TokenType.LT: Parser._parse_infix_expression,
    TokenType.LT_EQUAL: Parser._parse_infix_expression,
    TokenType.GT: Parser._parse_infix_expression,
    TokenType.GT_EQUAL: Parser._parse_infix_expression,
    TokenType.OR: Parser._parse_infix_expression,
    TokenType.AND: Parser._parse_infix_expression,
    TokenType.PLUS: Parser._parse_infix_expression,
    TokenType.MINUS: Parser._parse_infix_expression,
    TokenType.ASTERISK: Parser._parse_infix_expression,
    TokenType.SLASH: Parser._parse_infix_expression,
    TokenType.PERCENT: Parser._parse_infix_expression,
    TokenType.LPAREN: Parser._parse_call_expression,
    TokenType.LBRACKET: Parser._parse_index_expression,
    TokenType.MATCH: Parser._parse_match_expression,
}


def _precedence_of(tt: TokenType) -> Precedence:
    return _PRECEDENCES.get(tt, Precedence.LOWEST)


def _check_dispatch_tables() -> None:
    """Fail at import if a token type has no prefix classification or an
    infix-capable type has no construction rule."""
    unclassified = set(TokenType) - set(_PREFIX_RULES) - _NON_PREFIX
    if unclassified:
        names = ", ".join(sorted(tt.name for tt in unclassified))
        raise RuntimeError(f"token types with no prefix classification: {names}")
    both = set(_PREFIX_RULES) & _NON_PREFIX
    if both:
        names = ", ".join(sorted(tt.name for tt in both))
        raise RuntimeError(f"token types classified as both prefix and non-prefix: {names}")
    if set(_PRECEDENCES) != set(_INFIX_RULES):
        mismatch = set(_PRECEDENCES) ^ set(_INFIX_RULES)
        names = ", ".join(sorted(tt.name for tt in mismatch))
        raise RuntimeError(f"precedence and infix tables disagree on: {names}")


_check_dispatch_tables()


def parse(source: str, filename: str = "input.clay") -> Program:
    """Convenience function: parse source text and return a Program AST."""
    tokens = tokenize(source, filename)
    return Parser(tokens, source, filename).parse_program()
