"""
FastAPI RESTful API for the Bookstore books collection.

This package provides a small REST API for:
- Paginated book listing sorted by title
- Book lookup, creation, deletion and partial updates
- MongoDB access through the async motor driver
"""
