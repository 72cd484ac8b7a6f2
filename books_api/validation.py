"""
Request validation for the books API.

All checks here are synchronous and run before any database access.
"""

import re
from typing import Any, Dict, List

from bson import ObjectId

from books_api.exceptions import BookValidationError

REQUIRED_FIELDS = ("title", "author", "pages", "genres", "rating")

# Fields a PATCH request may overwrite
MUTABLE_FIELDS = frozenset(REQUIRED_FIELDS)

ID_FIELD = "_id"

_OBJECT_ID_HEX = re.compile(r"[0-9a-fA-F]{24}")

INVALID_ID_MESSAGE = "Id not a valid Document Id"
MISSING_FIELDS_MESSAGE = (
    "All required fields (title, author, pages, genres, rating) must be provided."
)


def is_valid_id(value: Any) -> bool:
    """Return True if value is a 24 character hex ObjectId string."""
    return isinstance(value, str) and _OBJECT_ID_HEX.fullmatch(value) is not None


def parse_object_id(value: Any) -> ObjectId:
    """
    Convert a path identifier into an ObjectId.

    Raises:
        BookValidationError: If the identifier is not a valid ObjectId string
    """
    if not is_valid_id(value):
        raise BookValidationError(INVALID_ID_MESSAGE)
    return ObjectId(value)


def missing_required_fields(book: Dict[str, Any]) -> List[str]:
    """
    List the required fields that are absent or falsy.

    Falsy values (0, "", [], None, False) count as missing.
    """
    return [field for field in REQUIRED_FIELDS if not book.get(field)]


def validate_new_book(book: Any) -> Dict[str, Any]:
    """Validate a candidate document for insertion."""
    if not isinstance(book, dict) or missing_required_fields(book):
        raise BookValidationError(MISSING_FIELDS_MESSAGE)
    return book


def validate_book_updates(updates: Any) -> Dict[str, Any]:
    """
    Validate a partial update against the mutable field allow-list.

    Returns:
        The updates to pass to ``$set``
    """
    if not isinstance(updates, dict) or not updates:
        raise BookValidationError("No updatable fields provided.")

    if ID_FIELD in updates:
        raise BookValidationError("The document identifier cannot be updated.")

    rejected = sorted(field for field in updates if field not in MUTABLE_FIELDS)
    if rejected:
        raise BookValidationError(
            f"Fields cannot be updated: {', '.join(rejected)}. "
            f"Updatable fields are: {', '.join(REQUIRED_FIELDS)}."
        )

    return updates
