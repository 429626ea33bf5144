"""
Offset pagination for SQLAlchemy queries.
"""

from dataclasses import dataclass
from math import ceil
from typing import Any, List, Optional, Tuple

from sqlalchemy.orm import Query

from time_reporting.domain.repositories.time_entry_repository import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


@dataclass
class PaginationMetadata:
    """Pagination metadata for responses."""
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


class OffsetPagination:
    """
    Offset-based pagination with a total count.
    Page numbers are 1-based; the page size is capped at ``max_page_size``.
    """

    def __init__(self, default_page_size: int = DEFAULT_PAGE_SIZE, max_page_size: int = MAX_PAGE_SIZE):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def paginate(
        self,
        query: Query,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> Tuple[List[Any], PaginationMetadata]:
        """
        Paginate an ordered query.

        Returns:
            Tuple of (items, pagination_metadata)
        """
        if page_size is None:
            page_size = self.default_page_size
        page_size = max(1, min(page_size, self.max_page_size))
        page = max(1, page)

        # Ordering is irrelevant for the count
        total_items = query.order_by(None).count()
        total_pages = ceil(total_items / page_size)

        items = query.offset((page - 1) * page_size).limit(page_size).all()

        metadata = PaginationMetadata(
            page=page,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1
        )
        return items, metadata


offset_paginator = OffsetPagination()
