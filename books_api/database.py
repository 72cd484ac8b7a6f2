"""
Database layer for the FastAPI application.

``MongoStore`` owns the motor client lifecycle; ``BookDatabaseService`` wraps
the books collection and issues exactly one driver call per operation.
"""

from typing import Any, Dict, List, Optional, Tuple

import structlog
from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from books_api.models import UpdateOutcome
from books_api.pagination import PageWindow

logger = structlog.get_logger(__name__)

# _id breaks ties between equal titles so page windows stay stable
TITLE_ORDER = [("title", 1), ("_id", 1)]


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a BSON document into JSON-compatible values."""
    return jsonable_encoder(document, custom_encoder={ObjectId: str})


class MongoStore:
    """
    Provides a live handle to the books collection.
    Connection failures are raised, never retried.
    """

    def __init__(
        self,
        connection_uri: str,
        database_name: str,
        collection_name: str,
        server_selection_timeout_ms: int = 5000
    ):
        self.connection_uri = connection_uri
        self.database_name = database_name
        self.collection_name = collection_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> AsyncIOMotorCollection:
        """Establish the connection and verify it with a ping."""
        try:
            self.client = AsyncIOMotorClient(
                self.connection_uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms
            )
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            await self.client.admin.command("ping")
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)
            return self.collection

        except Exception as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            self.close()
            raise

    def close(self) -> None:
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")


class BookDatabaseService:
    """Book operations over a single MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def list_books(self, window: PageWindow) -> List[Dict[str, Any]]:
        """
        Get one page of books sorted by title.

        Args:
            window: Skip/limit window to apply after sorting

        Returns:
            Serialized documents, possibly empty
        """
        if window.is_past_store_range:
            # No collection can hold that many documents
            return []

        try:
            cursor = self.collection.find().sort(TITLE_ORDER).skip(window.skip).limit(window.limit)
            books = await cursor.to_list(length=window.limit)
            return [serialize_document(book) for book in books]

        except Exception as e:
            logger.error("Failed to list books", page=window.page, error=str(e))
            raise

    async def get_book(self, book_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Get a single book, or None if no document has this id."""
        try:
            book = await self.collection.find_one({"_id": book_id})
            return serialize_document(book) if book else None

        except Exception as e:
            logger.error("Failed to get book", book_id=str(book_id), error=str(e))
            raise

    async def create_book(self, book: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """
        Insert a book.

        The driver adds ``_id`` to the inserted mapping, so the returned
        document is the submitted body plus its new identifier.

        Returns:
            Tuple of (new identifier, serialized document)
        """
        try:
            result = await self.collection.insert_one(book)
            book_id = str(result.inserted_id)
            logger.info("Book inserted", book_id=book_id, title=book.get("title"))
            return book_id, serialize_document(book)

        except Exception as e:
            logger.error("Failed to insert book", title=book.get("title"), error=str(e))
            raise

    async def delete_book(self, book_id: ObjectId) -> int:
        """Delete a book and return the number of removed documents."""
        try:
            result = await self.collection.delete_one({"_id": book_id})
            logger.info("Book delete executed", book_id=str(book_id), deleted=result.deleted_count)
            return result.deleted_count

        except Exception as e:
            logger.error("Failed to delete book", book_id=str(book_id), error=str(e))
            raise

    async def update_book(self, book_id: ObjectId, updates: Dict[str, Any]) -> UpdateOutcome:
        """Merge the given fields into a book with ``$set``."""
        try:
            result = await self.collection.update_one({"_id": book_id}, {"$set": updates})
            logger.info("Book update executed",
                        book_id=str(book_id),
                        fields=sorted(updates),
                        matched=result.matched_count,
                        modified=result.modified_count)
            return UpdateOutcome(
                matched_count=result.matched_count,
                modified_count=result.modified_count
            )

        except Exception as e:
            logger.error("Failed to update book", book_id=str(book_id), error=str(e))
            raise

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.collection.database.command("ping")
            return {"status": "healthy"}
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
