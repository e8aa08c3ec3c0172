"""
Binding contexts for serious evaluation.

Usage::

    from serious import create_context, run

    context = create_context(x=12.34, y=9999)
    run("34.2x + y^2(-2x^3 + 1)/5.2", context)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import StringConstraints, TypeAdapter

VariableName = Annotated[str, StringConstraints(pattern=r"^[A-Za-z]$")]

Context = dict[VariableName, float]

_CONTEXT_ADAPTER: TypeAdapter[dict[str, float]] = TypeAdapter(Context)


def create_context(mapping: Mapping[str, Any] | None = None, /, **values: Any) -> dict[str, float]:
    """Build a validated binding context.

    Keyword arguments override entries from ``mapping``.

    Args:
        mapping: Optional variable name -> value mapping.
        **values: Additional bindings, e.g. ``x=3, y=4``.

    Returns:
        New dict of single-letter names to floats.

    Raises:
        pydantic.ValidationError: If a name is not a single ASCII letter or a
            value is not a number. (Subclass of ``ValueError``.)
    """
    merged: dict[str, Any] = dict(mapping or {})
    merged.update(values)
    return _CONTEXT_ADAPTER.validate_python(merged)
