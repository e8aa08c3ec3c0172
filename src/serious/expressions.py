"""
Expression tree types for serious.

The tree builder produces these nodes and the evaluator walks them:

- Constants: 2, 0.5, 17.25
- Identifiers: single ASCII letters (x, y, A)
- Binary operations: +, -, *, /, ^

Every node records the span of source text it was built from. Nodes are
frozen, so a tree can be shared between threads and evaluated repeatedly.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from serious.errors import Span

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Operation(StrEnum):
    """Binary operators, valued by their source symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    EXPONENTIATE = "^"

    @property
    def precedence(self) -> int:
        """Binding strength; higher binds tighter."""
        return _PRECEDENCE[self]

    @property
    def right_associative(self) -> bool:
        return self is Operation.EXPONENTIATE


_PRECEDENCE: dict[Operation, int] = {
    Operation.ADD: 0,
    Operation.SUBTRACT: 0,
    Operation.MULTIPLY: 1,
    Operation.DIVIDE: 1,
    Operation.EXPONENTIATE: 2,
}


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Constant(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")
    span: Span

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return repr(self.value)


class Identifier(BaseModel):
    """A variable, resolved against the bindings at evaluation time."""

    name: str = Field(min_length=1, max_length=1, description="Single ASCII letter")
    span: Span

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryOp(BaseModel):
    """
    Binary operation: left op right.

    The span covers both operands, and the enclosing parentheses when the
    operation was written as a parenthesized group.
    """

    left: Expression
    op: Operation
    right: Expression
    span: Span

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expression = Constant | Identifier | BinaryOp

# Rebuild models for recursive forward references
BinaryOp.model_rebuild()
