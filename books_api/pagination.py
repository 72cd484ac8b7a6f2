"""
Pagination policy for book listings.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_PAGE = 1

# Largest skip BSON can encode (signed int64)
MAX_SKIP = 2 ** 63 - 1

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_page(raw: Optional[str]) -> int:
    """
    Parse the ``page`` query parameter.

    Only the leading integer is read, so "2abc" and "2.9" both mean page 2.
    Missing, non-numeric, zero and negative values all fall back to page 1.
    There is no upper bound; a page past the end is simply empty.
    """
    if raw is None:
        return DEFAULT_PAGE

    match = _LEADING_INT.match(raw)
    if not match:
        return DEFAULT_PAGE

    page = int(match.group(1))
    return page if page >= DEFAULT_PAGE else DEFAULT_PAGE


class PageWindow(BaseModel):
    """Skip/limit window over a title-sorted result set."""
    page: int = Field(DEFAULT_PAGE, ge=1, description="Page number")
    page_size: int = Field(..., ge=1, description="Documents per page")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def is_past_store_range(self) -> bool:
        """True when skip does not fit the 8-byte integer MongoDB accepts."""
        return self.skip > MAX_SKIP

    @classmethod
    def from_query(cls, raw_page: Optional[str], page_size: int) -> "PageWindow":
        return cls(page=parse_page(raw_page), page_size=page_size)
