"""
Error types for serious expression tokenizing, building, and evaluation.

Every stage raises a subclass of :class:`SeriousError`. Each error carries
its kind, a message, and a half-open span into the expression
text so callers can point at the offending characters.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(StrEnum):
    """Categories of failure shared by all pipeline stages."""

    BAD_PARSE = "bad_parse"
    UNBOUND_IDENTIFIER = "unbound_identifier"
    UNDEFINED_OPERATION = "undefined_operation"
    OVERFLOW = "overflow"


class Span(BaseModel):
    """Half-open ``[start, end)`` range of character offsets into the source."""

    start: int = Field(ge=0, description="First offset covered")
    end: int = Field(ge=0, description="Offset one past the last covered")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"

    def __len__(self) -> int:
        return self.end - self.start

    def union(self, other: Span) -> Span:
        """Smallest span covering both spans."""
        return Span(start=min(self.start, other.start), end=max(self.end, other.end))

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


class SeriousError(Exception):
    """Base exception for all serious errors."""

    kind: ErrorKind = ErrorKind.BAD_PARSE

    def __init__(self, message: str, start: int, end: int) -> None:
        self.message = message
        self.span = Span(start=start, end=end)
        super().__init__(message)

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}, {self.message!r}, span={self.span})"

    def render(self, text: str) -> str:
        """
        Format the error against its source text with a caret underline.

        Returns:
            Three lines: the message, the source, and ``^`` markers under
            the span (at least one marker, clipped to the end of the text).
        """
        start = min(self.start, len(text))
        width = max(1, min(self.end, len(text) + 1) - start)
        marker = " " * start + "^" * width
        return f"{self.message}\n{text}\n{marker}"


class BadParseError(SeriousError):
    """
    Raised when expression text cannot be tokenized or built into a tree.

    Examples:
    - Invalid characters or malformed float literals
    - Unmatched parentheses
    - A constant directly after an operand (``x3``)
    - A unary minus after a binary operator (``3*-2``)
    """

    kind = ErrorKind.BAD_PARSE


class LiteralOverflowError(BadParseError):
    """Raised when a numeric literal is too large to fit in a float."""

    kind = ErrorKind.OVERFLOW


class UnboundIdentifierError(SeriousError):
    """Raised when evaluation reaches a variable missing from the bindings."""

    kind = ErrorKind.UNBOUND_IDENTIFIER


class UndefinedOperationError(SeriousError):
    """
    Raised when an operation has no finite real result.

    Examples:
    - Division by zero
    - ``0 ^ 0``
    - Results that are infinite or NaN
    """

    kind = ErrorKind.UNDEFINED_OPERATION
