"""
FastAPI main application for the Bookstore Books API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional

import structlog
from fastapi import Body, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from books_api.config import config
from books_api.database import BookDatabaseService, MongoStore
from books_api.exceptions import BookAPIError, BookNotFoundError, StoreFaultError
from books_api.models import (
    BookCreatedResponse, BookDeletedResponse, BookUpdatedResponse,
    ErrorResponse, HealthResponse
)
from books_api.pagination import PageWindow
from books_api.validation import parse_object_id, validate_book_updates, validate_new_book
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )
    logger.info("Starting Bookstore Books API")

    # A failed connection aborts startup before the server accepts requests
    store = MongoStore(
        connection_uri=config.mongodb_uri,
        database_name=config.mongodb_database,
        collection_name=config.mongodb_collection,
        server_selection_timeout_ms=config.server_selection_timeout_ms
    )
    collection = await store.connect()
    app.state.store = store
    app.state.book_service = BookDatabaseService(collection)
    logger.info("App listening", host=config.host, port=config.port)

    yield

    # Shutdown
    logger.info("Shutting down Bookstore Books API")
    store.close()


# Create FastAPI application
app = FastAPI(
    title=config.api_title,
    description=config.api_description,
    version=config.api_version,
    lifespan=lifespan
)


def get_book_service(request: Request) -> BookDatabaseService:
    """Resolve the book service attached to the running application."""
    service = getattr(request.app.state, "book_service", None)
    if service is None:
        raise StoreFaultError("Internal Server Error", details="Database service not available")
    return service


# Exception handlers
@app.exception_handler(BookAPIError)
async def book_api_exception_handler(request: Request, exc: BookAPIError):
    """Render API errors as error envelopes."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, details=exc.details).model_dump(exclude_none=True)
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report unparseable request bodies as client errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="Malformed request body",
            details=str(exc.errors())
        ).model_dump(exclude_none=True)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal Server Error",
            details=str(exc) if config.debug else None
        ).model_dump(exclude_none=True)
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint."""
    service = getattr(request.app.state, "book_service", None)
    db_status = "unavailable"
    if service:
        health_info = await service.health_check()
        db_status = health_info.get("status", "unknown")

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        timestamp=datetime.utcnow(),
        version=config.api_version,
        database_status=db_status
    )


# Books endpoints
@app.get("/api/books", tags=["Books"])
async def list_books(
    page: Optional[str] = Query(None, description="Page number (starts from 1)"),
    service: BookDatabaseService = Depends(get_book_service)
):
    """
    Get one page of books sorted by title.

    - **page**: Page number; missing, non-numeric or values below 1 mean page 1
    """
    window = PageWindow.from_query(page, config.books_per_page)
    try:
        books = await service.list_books(window)
    except Exception as e:
        raise StoreFaultError("Internal Server Error", details=str(e))

    return JSONResponse(status_code=status.HTTP_200_OK, content=books)


@app.get("/api/books/{book_id}", tags=["Books"])
async def get_book(
    book_id: str,
    service: BookDatabaseService = Depends(get_book_service)
):
    """Get a single book by its document id."""
    object_id = parse_object_id(book_id)
    try:
        book = await service.get_book(object_id)
    except Exception as e:
        raise StoreFaultError("Internal Server Error", details=str(e))

    if not book:
        raise BookNotFoundError("Book not found")

    return JSONResponse(status_code=status.HTTP_200_OK, content=book)


@app.post("/api/books", tags=["Books"], status_code=status.HTTP_201_CREATED)
async def create_book(
    book: Any = Body(None),
    service: BookDatabaseService = Depends(get_book_service)
):
    """
    Add a book.

    The body must contain truthy values for title, author, pages, genres and
    rating. Any other fields are stored as given.
    """
    book = validate_new_book(book)
    try:
        book_id, document = await service.create_book(book)
    except Exception as e:
        raise StoreFaultError("An error occurred while adding the book.", details=str(e))

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=BookCreatedResponse(bookId=book_id, book=document).model_dump()
    )


@app.delete("/api/books/{book_id}", tags=["Books"])
async def delete_book(
    book_id: str,
    service: BookDatabaseService = Depends(get_book_service)
):
    """Delete a book by its document id."""
    object_id = parse_object_id(book_id)
    try:
        deleted_count = await service.delete_book(object_id)
    except Exception as e:
        raise StoreFaultError("An error occurred while deleting the book.", details=str(e))

    if deleted_count == 0:
        raise BookNotFoundError("Book not found.")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=BookDeletedResponse(deletedId=book_id).model_dump()
    )


@app.patch("/api/books/{book_id}", tags=["Books"])
async def update_book(
    book_id: str,
    updates: Any = Body(None),
    service: BookDatabaseService = Depends(get_book_service)
):
    """
    Partially update a book.

    Only title, author, pages, genres and rating may be changed; the document
    id can never be overwritten.
    """
    object_id = parse_object_id(book_id)
    updates = validate_book_updates(updates)
    try:
        outcome = await service.update_book(object_id, updates)
    except Exception as e:
        raise StoreFaultError("An error occurred while updating the book.", details=str(e))

    if outcome.matched_count == 0:
        raise BookNotFoundError("Book not found.")

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=BookUpdatedResponse(
            updatedId=book_id,
            modifiedCount=outcome.modified_count
        ).model_dump()
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "books_api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="info"
    )
