"""
Precedence-climbing tree builder for serious expressions.

Operators (precedence low to high):
    +  -      0   left-associative
    *  /      1   left-associative
    ^         2   right-associative

Beyond ordinary infix notation the builder handles:

- Implicit multiplication: an operand followed directly by an identifier or
  a parenthesized group multiplies them (``4x``, ``2(x + 1)``, ``(a)(b)``).
  A constant in that position is rejected, so ``x3`` is an error.
- Unary minus: a ``-`` opening an expression or a parenthesized group reads
  as ``0 - operand``. Anywhere else it must be wrapped in parentheses,
  e.g. ``3*(-2x)`` rather than ``3*-2x``.

Each scope (the whole input, or the inside of a parenthesized group) keeps
its own operand/operator stack. Opening a group pushes a scope and closing
it folds the scope into a single operand of the enclosing one, so nesting
depth is bounded by memory rather than the interpreter stack.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from serious.errors import BadParseError, Span
from serious.expressions import BinaryOp, Constant, Expression, Identifier, Operation
from serious.tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


def _folds_before(top: Operation, incoming: Operation) -> bool:
    """Whether the stacked operator must be folded before pushing ``incoming``."""
    if top.precedence != incoming.precedence:
        return top.precedence > incoming.precedence
    return not incoming.right_associative


class _Scope:
    """Operand/operator stacks for the tokens in ``[open_index + 1, end)``."""

    __slots__ = ("open_index", "end", "operands", "operators")

    def __init__(self, open_index: int | None, end: int) -> None:
        self.open_index = open_index
        self.end = end
        self.operands: list[Expression] = []
        self.operators: list[Operation] = []

    def fold(self) -> None:
        """Replace the top two operands with their combination under the top operator."""
        right = self.operands.pop()
        left = self.operands.pop()
        op = self.operators.pop()
        self.operands.append(
            BinaryOp(left=left, op=op, right=right, span=left.span.union(right.span))
        )

    def push_operator(self, op: Operation) -> None:
        while self.operators and _folds_before(self.operators[-1], op):
            self.fold()
        self.operators.append(op)

    def finish(self) -> Expression:
        while self.operators:
            self.fold()
        return self.operands[0]


class _Builder:
    """Builds an expression tree from a complete token sequence."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.paren_matches = _match_parens(tokens)

    def expected_expression(self, index: int) -> BadParseError:
        """Error for a missing operand at ``index`` (possibly past the last token)."""
        if index < len(self.tokens):
            tok = self.tokens[index]
            return BadParseError("expected expression", tok.start, tok.end)
        end = self.tokens[-1].end if self.tokens else 0
        return BadParseError("expected expression", end, end + 1)

    def build(self) -> Expression:
        scopes = [_Scope(None, len(self.tokens))]
        i = 0
        expect_operand = True
        leading = True

        while True:
            scope = scopes[-1]

            if expect_operand:
                if i >= scope.end:
                    raise self.expected_expression(scope.end)
                tok = self.tokens[i]
                if tok.kind == TokenKind.OPEN_PAREN:
                    close = self.paren_matches.get(i)
                    if close is None:
                        raise BadParseError("failed to match paren", tok.start, tok.end)
                    scopes.append(_Scope(i, close))
                    i += 1
                    leading = True
                    continue
                node, i = self.parse_operand(i, leading)
                scope.operands.append(node)
                expect_operand = False
                leading = False
                continue

            if i >= scope.end:
                node = scope.finish()
                if scope.open_index is None:
                    return node
                scopes.pop()
                span = Span(
                    start=self.tokens[scope.open_index].start, end=self.tokens[scope.end].end
                )
                scopes[-1].operands.append(node.model_copy(update={"span": span}))
                i = scope.end + 1
                continue

            tok = self.tokens[i]
            if tok.kind == TokenKind.OPERATOR:
                assert tok.operation is not None
                op = tok.operation
                i += 1
            elif tok.kind in (TokenKind.IDENTIFIER, TokenKind.OPEN_PAREN):
                op = Operation.MULTIPLY
            elif tok.kind == TokenKind.CONSTANT:
                raise BadParseError(
                    "constant on RHS of implicit multiplication", tok.start, tok.end
                )
            else:
                raise BadParseError("expected expression", tok.start, tok.end)

            scope.push_operator(op)
            expect_operand = True

    def parse_operand(self, i: int, leading: bool) -> tuple[Expression, int]:
        """Read one non-parenthesized operand at ``i``.

        Returns:
            The operand and the index of the first token after it. For a
            unary minus the synthesized zero consumes nothing, leaving the
            ``-`` to be read as an ordinary subtraction.
        """
        tok = self.tokens[i]

        if tok.kind == TokenKind.CONSTANT:
            assert tok.value is not None
            return Constant(value=tok.value, span=tok.span), i + 1

        if tok.kind == TokenKind.IDENTIFIER:
            assert tok.name is not None
            return Identifier(name=tok.name, span=tok.span), i + 1

        if tok.kind == TokenKind.OPERATOR and tok.operation is Operation.SUBTRACT:
            if leading:
                return Constant(value=0.0, span=Span(start=tok.start, end=tok.start)), i
            raise BadParseError(
                "expected expression; wrap in parens for unary minus", tok.start, tok.end
            )

        raise BadParseError("expected expression", tok.start, tok.end)


def _match_parens(tokens: Sequence[Token]) -> dict[int, int]:
    """Map the index of each matched ``(`` to the index of its ``)``.

    Unmatched parentheses are left out; the builder reports them when it
    reaches them.
    """
    matches: dict[int, int] = {}
    open_indices: list[int] = []
    for i, tok in enumerate(tokens):
        if tok.kind == TokenKind.OPEN_PAREN:
            open_indices.append(i)
        elif tok.kind == TokenKind.CLOSE_PAREN and open_indices:
            matches[open_indices.pop()] = i
    return matches


def build(tokens: Sequence[Token]) -> Expression:
    """Build a full token sequence into an expression tree.

    Args:
        tokens: Output of :func:`serious.tokenizer.tokenize`.

    Returns:
        Root of the expression tree.

    Raises:
        BadParseError: If the tokens do not form a valid expression.
    """
    try:
        tree = _Builder(tokens).build()
    except BadParseError as e:
        logger.debug("Build failed: %r", e)
        raise
    logger.debug("Built tree spanning %s from %d tokens", tree.span, len(tokens))
    return tree


def parse(source: str) -> Expression:
    """Parse an expression string into a tree.

    Args:
        source: Expression string (e.g., "4x^2 + 2xy")

    Returns:
        Root of the expression tree.

    Raises:
        BadParseError: If the expression is invalid.
        LiteralOverflowError: If a literal is too large to fit in a float.
    """
    return build(tokenize(source))
