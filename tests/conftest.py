"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from todo_index.core.tags import TagRegistry
from todo_index.db import InMemoryTodoIndex
from todo_index.models import Tag

_TESTS_ROOT = Path(__file__).parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_TESTS_ROOT)
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> TagRegistry:
    """Registry with the tags used throughout the tests."""
    return TagRegistry([Tag(name="TODO"), Tag(name="FIXME"), Tag(name="NOTE")])


@pytest.fixture
def todo_index() -> InMemoryTodoIndex:
    return InMemoryTodoIndex()
