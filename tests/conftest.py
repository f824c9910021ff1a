"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import strawberry

# Add src directory to path so imports work without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bills.graphql.executor import RequestExecutor  # noqa: E402
from bills.store import EntityStore, create_store  # noqa: E402


@pytest.fixture
def store() -> EntityStore:
    """A freshly seeded store: Pasha (id 1) and Ira (id 2), no bills."""
    return create_store()


@pytest.fixture
def empty_store() -> EntityStore:
    return create_store(seed=False)


@pytest.fixture
def mock_info(store: EntityStore) -> Any:
    """Create a mock GraphQL info object whose context carries the store."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"store": store}
    return info


@pytest.fixture
def executor(store: EntityStore) -> RequestExecutor:
    return RequestExecutor(store)


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
