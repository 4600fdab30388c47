import math
from typing import Any, Tuple

from pydantic import BaseModel

from videotube.utils import parse_positive_int


class PageWindow(BaseModel):
    """Where a page starts in the result set and how it relates to the total."""

    skip: int
    limit: int
    current_page: int
    total_pages: int

    def pagination(self) -> dict:
        return {"currentPage": self.current_page, "totalPages": self.total_pages}


def parse_page_params(page: Any, limit: Any) -> Tuple[int, int]:
    page_number = parse_positive_int(page, "Page number")
    limit_number = parse_positive_int(limit, "Limit number")
    return page_number, limit_number


def paginate(page: Any, limit: Any, total_count: int) -> PageWindow:
    """Compute skip/limit and page counters for a listing.

    ``page`` and ``limit`` must be strictly positive integers (or their
    string forms); anything else raises InvalidArgument.
    """
    page_number, limit_number = parse_page_params(page, limit)
    return PageWindow(
        skip=(page_number - 1) * limit_number,
        limit=limit_number,
        current_page=page_number,
        total_pages=math.ceil(total_count / limit_number) if total_count else 0,
    )
