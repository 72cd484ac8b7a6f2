"""
Pytest configuration and shared fixtures.
"""

import copy
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from books_api.database import BookDatabaseService, serialize_document
from books_api.main import app, get_book_service
from books_api.models import UpdateOutcome
from books_api.pagination import PageWindow


class InMemoryBookService:
    """
    Dictionary-backed stand-in for BookDatabaseService.
    Mirrors the driver behaviour the handlers rely on.
    """

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}

    async def list_books(self, window: PageWindow) -> List[Dict[str, Any]]:
        if window.is_past_store_range:
            return []
        ordered = sorted(self.documents.values(), key=lambda doc: (doc["title"], doc["_id"]))
        page = ordered[window.skip:window.skip + window.limit]
        return [serialize_document(doc) for doc in page]

    async def get_book(self, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        book = self.documents.get(book_id)
        return serialize_document(book) if book else None

    async def create_book(self, book: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        book["_id"] = ObjectId()
        self.documents[book["_id"]] = copy.deepcopy(book)
        return str(book["_id"]), serialize_document(book)

    async def delete_book(self, book_id: ObjectId) -> int:
        return 1 if self.documents.pop(book_id, None) is not None else 0

    async def update_book(self, book_id: ObjectId, updates: Dict[str, Any]) -> UpdateOutcome:
        book = self.documents.get(book_id)
        if book is None:
            return UpdateOutcome(matched_count=0, modified_count=0)
        changed = any(book.get(field) != value for field, value in updates.items())
        book.update(copy.deepcopy(updates))
        return UpdateOutcome(matched_count=1, modified_count=1 if changed else 0)

    async def health_check(self) -> Dict:
        return {"status": "healthy"}


@pytest.fixture
def book_service():
    """Create an empty in-memory book service."""
    return InMemoryBookService()


@pytest.fixture
def mock_book_service():
    """Create a mock book service for asserting store access."""
    return AsyncMock(spec=BookDatabaseService)


@pytest.fixture
def client(book_service):
    """Create a test client backed by the in-memory service."""
    app.dependency_overrides[get_book_service] = lambda: book_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mock_client(mock_book_service):
    """Create a test client backed by a mock service."""
    app.dependency_overrides[get_book_service] = lambda: mock_book_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_book():
    """Create sample book data for testing."""
    return {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "pages": 304,
        "genres": ["science fiction", "fantasy"],
        "rating": 9,
    }


@pytest.fixture
def seed_books(book_service):
    """Insert books with the given titles directly into the in-memory store."""
    def _seed(titles):
        ids = []
        for title in titles:
            book_id = ObjectId()
            book_service.documents[book_id] = {
                "_id": book_id,
                "title": title,
                "author": "Anonymous",
                "pages": 100,
                "genres": ["misc"],
                "rating": 5,
            }
            ids.append(str(book_id))
        return ids
    return _seed
