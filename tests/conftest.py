"""Shared fixtures for formcraft tests."""

import pytest

from formcraft.field_types import create_default_registry


@pytest.fixture
def registry():
    """A fresh registry with the built-in field types."""
    return create_default_registry()
