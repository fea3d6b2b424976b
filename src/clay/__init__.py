"""Clay language front end: tokenizer and Pratt parser."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clay.ast import Program

__version__ = "0.1.0"


def parse(source: str, filename: str = "input.clay") -> Program:
    """Tokenize and parse Clay source into a Program AST."""
    from clay.parser import parse as _parse

    return _parse(source, filename)
