"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class BookCreatedResponse(BaseModel):
    """Response returned after inserting a book."""
    message: str = Field("Book added successfully!", description="Outcome message")
    bookId: str = Field(..., description="Identifier assigned by the database")
    book: Dict[str, Any] = Field(..., description="The document as submitted")


class BookDeletedResponse(BaseModel):
    """Response returned after deleting a book."""
    message: str = Field("Book deleted successfully!", description="Outcome message")
    deletedId: str = Field(..., description="Identifier of the removed book")


class BookUpdatedResponse(BaseModel):
    """Response returned after a partial update."""
    message: str = Field("Book updated successfully!", description="Outcome message")
    updatedId: str = Field(..., description="Identifier of the updated book")
    modifiedCount: int = Field(..., ge=0, description="Number of documents whose content changed")


class UpdateOutcome(BaseModel):
    """Counts reported by the driver for a single-document update."""
    matched_count: int = Field(..., ge=0)
    modified_count: int = Field(..., ge=0)


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="Underlying error details")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
