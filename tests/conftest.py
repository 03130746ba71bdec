"""
Pytest configuration and shared fixtures.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from fastapi.testclient import TestClient

from api.database import BookRepository
from api.dependencies import get_book_repository
from api.main import app
from api.models import BookResponse


@pytest.fixture
def sample_book():
    """Create a sample stored book for testing."""
    return BookResponse(
        _id="652f1c0e9b1e8a3d4c2f0a11",
        code="d5fE_asz",
        title="The New Turing Omnibus",
        author="Alexander K. Dewdney"
    )


@pytest.fixture
def sample_book_document():
    """Raw MongoDB document for the sample book."""
    return {
        "_id": ObjectId("652f1c0e9b1e8a3d4c2f0a11"),
        "code": "d5fE_asz",
        "title": "The New Turing Omnibus",
        "author": "Alexander K. Dewdney",
        "__v": 0
    }


@pytest.fixture
def mock_book_repository():
    """Create a mock book repository for testing."""
    repository = AsyncMock(spec=BookRepository)
    repository.list_books.return_value = []
    repository.get_book_by_title.return_value = None
    repository.delete_book_by_title.return_value = None
    return repository


@pytest.fixture
def client(mock_book_repository):
    """Create test client with the repository dependency overridden."""
    app.dependency_overrides[get_book_repository] = lambda: mock_book_repository
    yield TestClient(app)
    app.dependency_overrides = {}


@pytest.fixture
def mock_collection():
    """Create a mock motor collection."""
    collection = AsyncMock()
    # find() is synchronous in motor and returns an async cursor
    collection.find = MagicMock()
    return collection


class AsyncCursor:
    """Minimal async iterator standing in for a motor cursor."""

    def __init__(self, documents):
        self._documents = list(documents)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._documents:
            raise StopAsyncIteration
        return self._documents.pop(0)


@pytest.fixture
def async_cursor():
    """Factory for async cursors over a list of documents."""
    return AsyncCursor
