"""
Expression evaluator for serious.

Walks an expression tree against a mapping of bound variables. Pure
evaluation: no I/O, no side effects, and the tree is never modified.

Any operation whose result is not a finite real number is an error rather
than a silently propagated infinity or NaN. The walk is post-order over an
explicit stack, left operand before right, so tree depth does not consume
interpreter stack frames.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from serious.errors import UnboundIdentifierError, UndefinedOperationError
from serious.expressions import BinaryOp, Constant, Expression, Identifier, Operation

logger = logging.getLogger(__name__)


def evaluate(expr: Expression, context: Mapping[str, float] | None = None) -> float:
    """Evaluate an expression tree against bound variables.

    Args:
        expr: Tree from :func:`serious.parser.parse` or :func:`serious.parser.build`.
        context: Variable name -> value. Only read.

    Returns:
        The computed value. Every operation result is finite; a tree that is
        a lone identifier returns its bound value as given.

    Raises:
        UnboundIdentifierError: If a variable is missing from the context.
        UndefinedOperationError: On division by zero, ``0 ^ 0``, or a result
            that is infinite or NaN.
    """
    result = _interpret(expr, context if context is not None else {})
    logger.debug("Evaluated expression spanning %s = %r", expr.span, result)
    return result


def _interpret(expr: Expression, ctx: Mapping[str, float]) -> float:
    """Evaluate operands before their operation, left subtree first."""
    values: list[float] = []
    pending: list[tuple[Expression, bool]] = [(expr, False)]

    while pending:
        node, operands_ready = pending.pop()

        if isinstance(node, Constant):
            values.append(node.value)
        elif isinstance(node, Identifier):
            if node.name not in ctx:
                raise UnboundIdentifierError(
                    f"identifier '{node.name}' is not bound", node.span.start, node.span.end
                )
            values.append(float(ctx[node.name]))
        elif isinstance(node, BinaryOp):
            if operands_ready:
                right = values.pop()
                left = values.pop()
                values.append(_interpret_binary(node, left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            raise TypeError(f"Unknown expression type: {type(node).__name__}")

    return values[0]


def _interpret_binary(expr: BinaryOp, left: float, right: float) -> float:
    """Apply a binary operation, rejecting results outside the reals."""
    start, end = expr.span.start, expr.span.end
    described = f"({left!r}) {expr.op.value} ({right!r})"

    if expr.op == Operation.ADD:
        result = left + right
    elif expr.op == Operation.SUBTRACT:
        result = left - right
    elif expr.op == Operation.MULTIPLY:
        result = left * right
    elif expr.op == Operation.DIVIDE:
        if right == 0:
            raise UndefinedOperationError("division by zero is undefined", start, end)
        result = left / right
    elif expr.op == Operation.EXPONENTIATE:
        if left == 0 and right == 0:
            raise UndefinedOperationError(f"{described} is undefined", start, end)
        result = _power(left, right)
    else:
        raise TypeError(f"Unknown binary op: {expr.op}")

    if math.isinf(result):
        raise UndefinedOperationError(f"{described} is infinity", start, end)
    if math.isnan(result):
        raise UndefinedOperationError(f"{described} is undefined", start, end)
    return result


def _power(base: float, exponent: float) -> float:
    """IEEE ``pow``: overflow gives infinity and domain errors give NaN.

    ``math.pow`` raises where C ``pow`` would return these values, so the
    exceptions are translated back.
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0 and exponent < 0:
            return math.inf
        return math.nan
