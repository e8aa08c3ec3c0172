"""
Tokenizer for serious expressions.

Converts an expression string into a list of spanned tokens. Digits and
``.`` accumulate into a pending numeric literal which is parsed as a float
when any other character (or the end of input) is reached.
"""

from __future__ import annotations

import logging
import math
from enum import StrEnum, auto

from serious.errors import BadParseError, LiteralOverflowError, Span
from serious.expressions import Operation

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    OPERATOR = auto()
    CONSTANT = auto()
    IDENTIFIER = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "span", "operation", "value", "name")

    def __init__(
        self,
        kind: TokenKind,
        span: Span,
        operation: Operation | None = None,
        value: float | None = None,
        name: str | None = None,
    ) -> None:
        self.kind = kind
        self.span = span
        self.operation = operation
        self.value = value
        self.name = name

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in self.__slots__)

    def __hash__(self) -> int:
        return hash(tuple(getattr(self, slot) for slot in self.__slots__))

    def __repr__(self) -> str:
        if self.kind == TokenKind.OPERATOR:
            payload = f", {self.operation.value!r}" if self.operation else ""
        elif self.kind == TokenKind.CONSTANT:
            payload = f", {self.value!r}"
        elif self.kind == TokenKind.IDENTIFIER:
            payload = f", {self.name!r}"
        else:
            payload = ""
        return f"Token({self.kind}{payload}, span={self.span})"


_PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
}

_OPERATORS: dict[str, Operation] = {op.value: op for op in Operation}

_LITERAL_CHARS = frozenset("0123456789.")


def _is_letter(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _parse_literal(literal: str, start: int) -> Token:
    """Parse an accumulated literal into a CONSTANT token."""
    end = start + len(literal)
    try:
        value = float(literal)
    except ValueError:
        raise BadParseError("invalid float literal", start, end) from None
    if math.isinf(value):
        raise LiteralOverflowError("number too large to fit in f64", start, end)
    return Token(TokenKind.CONSTANT, Span(start=start, end=end), value=value)


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Raises:
        BadParseError: On empty input, invalid characters, or malformed literals.
        LiteralOverflowError: If a literal is too large to fit in a float.
    """
    if not source:
        raise BadParseError("expected token", 0, 1)

    tokens: list[Token] = []
    literal_start = 0
    literal: list[str] = []

    for i, c in enumerate(source):
        if c in _LITERAL_CHARS:
            if not literal:
                literal_start = i
            literal.append(c)
            continue

        if literal:
            tokens.append(_parse_literal("".join(literal), literal_start))
            literal = []

        span = Span(start=i, end=i + 1)
        if c in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[c], span))
        elif c in _OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, span, operation=_OPERATORS[c]))
        elif _is_letter(c):
            tokens.append(Token(TokenKind.IDENTIFIER, span, name=c))
        elif c == " ":
            continue
        else:
            raise BadParseError(f"invalid character '{c}'", i, i + 1)

    if literal:
        tokens.append(_parse_literal("".join(literal), literal_start))

    logger.debug("Tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens
