"""
serious - concise mathematical expressions.

- The numeric type is ``float``; infinities and NaNs are errors.
- Variables are single letters within ``[A-Za-z]``.
- Multiplication is implicit where an operator is omitted (``4x``, ``2(x + 1)``).
- All operations are infix binary, except for the unary minus.
- ``+ -`` bind loosest, then ``* /``, then ``^``; ``^`` groups right to left.

Usage:
    from serious import create_context, run

    context = create_context(x=3, y=4)
    result = run("(x^2 + y^2)^0.5", context)
    # result == 5.0
"""

from __future__ import annotations

from collections.abc import Mapping

from serious._version import get_version
from serious.context import create_context
from serious.errors import (
    BadParseError,
    ErrorKind,
    LiteralOverflowError,
    SeriousError,
    Span,
    UnboundIdentifierError,
    UndefinedOperationError,
)
from serious.evaluator import evaluate
from serious.expressions import BinaryOp, Constant, Expression, Identifier, Operation
from serious.parser import build, parse
from serious.tokenizer import Token, TokenKind, tokenize

__version__ = get_version()


def run(source: str, context: Mapping[str, float] | None = None) -> float:
    """Tokenize, build, and evaluate an expression in one call.

    Raises:
        SeriousError: The first error from any stage.
    """
    return evaluate(parse(source), context)


interpret = run

__all__ = [
    "__version__",
    "run",
    "interpret",
    "tokenize",
    "build",
    "parse",
    "evaluate",
    "create_context",
    # Tree
    "Expression",
    "Constant",
    "Identifier",
    "BinaryOp",
    "Operation",
    "Token",
    "TokenKind",
    # Errors
    "ErrorKind",
    "Span",
    "SeriousError",
    "BadParseError",
    "LiteralOverflowError",
    "UnboundIdentifierError",
    "UndefinedOperationError",
]
