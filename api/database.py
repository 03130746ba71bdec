"""
MongoDB access for the Library API.
Handles connection, indexing, and the single-call CRUD operations behind
each book endpoint.
"""

from typing import Any, Dict, List, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from api.models import BookCreate, BookResponse, BookUpdate

logger = structlog.get_logger(__name__)


class MongoDBManager:
    """
    Async MongoDB manager owning the client handle for the books collection.
    """

    def __init__(self, connection_url: str, database_name: str, collection_name: str):
        """
        Initialize MongoDB manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the books collection
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.collection_name = collection_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB and make sure indexes exist."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        """Create the unique index on code and a lookup index on title."""
        try:
            await self.collection.create_index("code", unique=True)
            await self.collection.create_index("title")
            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        if self.client is None:
            return {"status": "unavailable"}
        try:
            await self.database.command("ping")
            books_count = await self.collection.count_documents({})
            return {
                "status": "healthy",
                "books_collection": "accessible",
                "books_count": books_count
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }


class BookRepository:
    """
    Book operations against a single MongoDB collection.

    Every method issues exactly one storage call. Failures are logged and
    re-raised so the caller decides how to report them.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @staticmethod
    def _title_filter(title: str) -> Dict[str, str]:
        # Titles are stored trimmed
        return {"title": title.strip()}

    async def list_books(self) -> List[BookResponse]:
        """Return every book in storage order."""
        try:
            books = []
            async for book_doc in self.collection.find({}):
                books.append(BookResponse.from_document(book_doc))
            logger.debug("Retrieved books", count=len(books))
            return books

        except Exception as e:
            logger.error("Failed to retrieve books", error=str(e))
            raise

    async def get_book_by_title(self, title: str) -> Optional[BookResponse]:
        """
        Get the first book with the given title.

        Args:
            title: Exact book title

        Returns:
            BookResponse if found, None otherwise
        """
        try:
            book_doc = await self.collection.find_one(self._title_filter(title))
            return BookResponse.from_document(book_doc)

        except Exception as e:
            logger.error("Failed to retrieve book", title=title, error=str(e))
            raise

    async def create_book(self, book: BookCreate) -> BookResponse:
        """
        Insert a new book.

        Args:
            book: Validated book fields

        Returns:
            The stored book including its generated identifier

        Raises:
            DuplicateKeyError: if another book already uses ``book.code``
        """
        book_doc = book.model_dump()
        try:
            result = await self.collection.insert_one(book_doc)
            book_doc["_id"] = result.inserted_id
            logger.debug("Successfully inserted book", code=book.code, title=book.title)
            return BookResponse.from_document(book_doc)

        except DuplicateKeyError:
            logger.warning("Book code already exists", code=book.code)
            raise

        except Exception as e:
            logger.error("Failed to insert book", code=book.code, error=str(e))
            raise

    async def update_book_by_title(self, title: str, update: BookUpdate) -> Optional[BookResponse]:
        """
        Overwrite the supplied fields of the first book with the given title.

        Args:
            title: Exact title of the book to update
            update: Fields to overwrite

        Returns:
            The book after the update, or None if no book has that title
        """
        update_data = update.to_update_document()
        try:
            if not update_data:
                # $set with no fields is rejected by the server
                book_doc = await self.collection.find_one(self._title_filter(title))
            else:
                book_doc = await self.collection.find_one_and_update(
                    self._title_filter(title),
                    {"$set": update_data},
                    return_document=ReturnDocument.AFTER
                )

            if book_doc is None:
                logger.warning("Book not found for update", title=title)
            else:
                logger.debug("Successfully updated book", title=title, fields=sorted(update_data))
            return BookResponse.from_document(book_doc)

        except Exception as e:
            logger.error("Failed to update book", title=title, error=str(e))
            raise

    async def delete_book_by_title(self, title: str) -> Optional[BookResponse]:
        """
        Delete the first book with the given title.

        Args:
            title: Exact title of the book to delete

        Returns:
            The book as it was before deletion, or None if no book matched
        """
        try:
            book_doc = await self.collection.find_one_and_delete(self._title_filter(title))

            if book_doc is None:
                logger.warning("Book not found for deletion", title=title)
            else:
                logger.debug("Successfully deleted book", title=title)
            return BookResponse.from_document(book_doc)

        except Exception as e:
            logger.error("Failed to delete book", title=title, error=str(e))
            raise
