"""Pagination helpers shared by the list endpoints."""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Query as QueryParam
from sqlalchemy.orm import Query

# Keeps the OFFSET within a 64-bit integer for any page size
MAX_PAGE = 1_000_000


@dataclass(frozen=True)
class Pagination:
    """Normalized page request."""

    page: int
    page_size: int

    @classmethod
    def normalize(cls, page: int, page_size: int, max_page_size: int) -> "Pagination":
        """Clamp raw query values into range instead of rejecting them."""
        return cls(
            page=min(MAX_PAGE, max(1, page)),
            page_size=min(max_page_size, max(1, page_size)),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def paginated(default_page_size: int = 20, max_page_size: int = 100) -> Callable[..., Pagination]:
    """Build a dependency that reads page/pageSize from the query string."""

    def dependency(
        page: int = QueryParam(default=1),
        page_size: int = QueryParam(default=default_page_size, alias="pageSize"),
    ) -> Pagination:
        return Pagination.normalize(page, page_size, max_page_size)

    return dependency


def paginate(query: Query, pagination: Pagination) -> dict:
    """Run the count and the page query for the same filter.

    Returns the page envelope: {items, page, page_size, total}.
    """
    total = query.order_by(None).count()
    items = query.offset(pagination.offset).limit(pagination.page_size).all()
    return {
        "items": items,
        "page": pagination.page,
        "page_size": pagination.page_size,
        "total": total,
    }
