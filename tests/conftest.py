"""Shared pytest fixtures for serious tests."""

import pytest

from serious import create_context


@pytest.fixture
def xy_context() -> dict[str, float]:
    """Return bindings for the right triangle x=3, y=4."""
    return create_context(x=3, y=4)


@pytest.fixture
def empty_context() -> dict[str, float]:
    """Return a context with nothing bound."""
    return {}
