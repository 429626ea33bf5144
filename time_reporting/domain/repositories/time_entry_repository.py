"""Time Entry repository interface.
Defines the contract for time entry data persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from math import ceil
from typing import List, Optional
from uuid import UUID

from time_reporting.domain.models.time_entry import TimeEntry
from time_reporting.domain.models.workflow import TimeEntryStatus

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

SORTABLE_FIELDS = (
    "start_date",
    "completion_date",
    "created_at",
    "updated_at",
    "standard_hours",
    "status",
    "project_code",
)


@dataclass
class TimeEntryQuery:
    """
    Filter, sort and page parameters for listing entries.

    ``project_codes`` of None means no project restriction; an empty list
    matches nothing. The date range matches entries whose work period
    overlaps ``[date_from, date_to]``.
    """

    project_codes: Optional[List[str]] = None
    user_id: Optional[str] = None
    status: Optional[TimeEntryStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort_by: str = "start_date"
    descending: bool = True
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.sort_by not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort time entries by '{self.sort_by}'")
        self.page = max(1, self.page)
        self.page_size = max(1, min(self.page_size, MAX_PAGE_SIZE))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def matches(self, entry: TimeEntry) -> bool:
        """Filter predicate, for stores that cannot push filters down."""
        if self.project_codes is not None and entry.project_code not in self.project_codes:
            return False
        if self.user_id is not None and entry.user_id != self.user_id:
            return False
        if self.status is not None and entry.status != self.status:
            return False
        if self.date_from is not None and entry.completion_date < self.date_from:
            return False
        if self.date_to is not None and entry.start_date > self.date_to:
            return False
        return True


@dataclass
class TimeEntryPage:
    """One page of a time entry listing."""

    items: List[TimeEntry] = field(default_factory=list)
    total_items: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return ceil(self.total_items / self.page_size) if self.page_size > 0 else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry entity.

    Writes are atomic per entry. A write that loses a concurrent update or
    violates a store constraint raises ConflictError.
    """

    @abstractmethod
    def find_by_id(self, entry_id: UUID) -> Optional[TimeEntry]:
        """
        Find a time entry by its ID, with project, task and tags loaded.
        Returns None if not found.
        """
        pass

    @abstractmethod
    def find_project_code(self, entry_id: UUID) -> Optional[str]:
        """
        Look up only the project code of an entry, without loading it.
        Returns None if the entry does not exist.
        """
        pass

    @abstractmethod
    def find_page(self, query: TimeEntryQuery) -> TimeEntryPage:
        """
        Find one page of entries matching the query, in the requested order.
        Ties on the sort field are broken by entry id so pages are stable.
        """
        pass

    @abstractmethod
    def save(self, time_entry: TimeEntry) -> TimeEntry:
        """
        Insert or update a time entry in a single atomic write.
        Returns the saved entry with its version advanced.
        """
        pass

    @abstractmethod
    def delete(self, time_entry: TimeEntry) -> None:
        """
        Delete a time entry in a single atomic write.
        """
        pass
