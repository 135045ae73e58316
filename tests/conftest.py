"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from searcher.api.main import create_app
from tests.helpers.fakes import ExplodingSearcher, MockSearcher


@pytest.fixture
def mock_searcher() -> MockSearcher:
    """A backend that accepts everything."""
    return MockSearcher()


@pytest.fixture
def exploding_searcher() -> ExplodingSearcher:
    """A backend that always raises."""
    return ExplodingSearcher()


@pytest.fixture
def client(mock_searcher: MockSearcher) -> Iterator[TestClient]:
    """Test client for an app wired to mock_searcher."""
    with TestClient(create_app(mock_searcher)) as test_client:
        yield test_client


@pytest.fixture
def exploding_client(exploding_searcher: ExplodingSearcher) -> Iterator[TestClient]:
    """Test client for an app whose backend always raises."""
    with TestClient(create_app(exploding_searcher)) as test_client:
        yield test_client
