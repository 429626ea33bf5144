"""
Time Entry DTOs for the application layer.
Data Transfer Objects for time logging and the approval workflow.

Range checks (hours, date order) are not done here; the domain validators
report them under the domain field names.
"""

from enum import Enum
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from pydantic import Field, field_validator

from time_reporting.domain.models.time_entry import TimeEntry
from time_reporting.domain.models.workflow import TimeEntryStatus
from time_reporting.domain.repositories.time_entry_repository import TimeEntryPage, TimeEntryQuery
from time_reporting.domain.services.validation_service import TagInput
from .base_dto import ListRequestDTO, ListResponseDTO, RequestDTO, ResponseDTO


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v.strip()) == 0:
        return None
    return v


# Request DTOs
class TagInputDTO(RequestDTO):
    """A requested tag as a name/value pair."""

    name: str = Field(min_length=1, max_length=100, description="Tag name")
    value: str = Field(min_length=1, max_length=100, description="Tag value")

    def to_tag_input(self) -> TagInput:
        return TagInput(self.name, self.value)


class LogTimeRequestDTO(RequestDTO):
    """DTO for logging a new time entry."""

    project_code: str = Field(min_length=1, max_length=10, description="Project code")
    task: str = Field(min_length=1, max_length=100, description="Task name")
    issue_id: Optional[str] = Field(default=None, max_length=30, description="Issue/ticket identifier")
    standard_hours: Decimal = Field(description="Standard hours")
    overtime_hours: Decimal = Field(default=Decimal("0"), description="Overtime hours")
    description: Optional[str] = Field(default=None, max_length=2000, description="Work description")
    start_date: date = Field(description="Start date of the work")
    completion_date: date = Field(description="Completion date of the work")
    tags: List[TagInputDTO] = Field(default_factory=list, max_length=20, description="Tags")

    @field_validator("description", "issue_id")
    @classmethod
    def validate_optional_text(cls, v):
        """Treat blank strings as missing."""
        return _blank_to_none(v)

    def tag_inputs(self) -> List[TagInput]:
        return [tag.to_tag_input() for tag in self.tags]


class UpdateTimeEntryRequestDTO(RequestDTO):
    """
    DTO for time entry update requests.
    All fields are optional; only supplied fields are changed. The project
    cannot be changed here (see MoveTimeEntryRequestDTO).
    """

    task: Optional[str] = Field(default=None, min_length=1, max_length=100, description="Task name")
    issue_id: Optional[str] = Field(default=None, max_length=30, description="Issue/ticket identifier")
    standard_hours: Optional[Decimal] = Field(default=None, description="Standard hours")
    overtime_hours: Optional[Decimal] = Field(default=None, description="Overtime hours")
    description: Optional[str] = Field(default=None, max_length=2000, description="Work description")
    start_date: Optional[date] = Field(default=None, description="Start date of the work")
    completion_date: Optional[date] = Field(default=None, description="Completion date of the work")
    tags: Optional[List[TagInputDTO]] = Field(default=None, max_length=20, description="Replacement tags")

    def tag_inputs(self) -> Optional[List[TagInput]]:
        if self.tags is None:
            return None
        return [tag.to_tag_input() for tag in self.tags]


class MoveTimeEntryRequestDTO(RequestDTO):
    """DTO for moving a time entry to another project and task."""

    project_code: str = Field(min_length=1, max_length=10, description="Destination project code")
    task: str = Field(min_length=1, max_length=100, description="Task name in the destination project")


class UpdateTagsRequestDTO(RequestDTO):
    """DTO for replacing the tags of a time entry."""

    tags: List[TagInputDTO] = Field(default_factory=list, max_length=20, description="Tags")

    def tag_inputs(self) -> List[TagInput]:
        return [tag.to_tag_input() for tag in self.tags]


class DeclineTimeEntryRequestDTO(RequestDTO):
    """DTO for declining a submitted time entry."""

    comment: Optional[str] = Field(default=None, max_length=1000, description="Reason for declining")


class TimeEntrySortField(str, Enum):
    """Sortable columns of a time entry listing, by wire name."""
    START_DATE = "startDate"
    COMPLETION_DATE = "completionDate"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    STANDARD_HOURS = "standardHours"
    STATUS = "status"
    PROJECT_CODE = "projectCode"

    @property
    def attribute(self) -> str:
        return self.name.lower()


class ListTimeEntriesRequestDTO(ListRequestDTO):
    """
    DTO for listing time entries.
    The date range matches entries whose work period overlaps it.
    """

    project_code: Optional[str] = Field(default=None, min_length=1, max_length=10, description="Project code")
    user_id: Optional[str] = Field(default=None, min_length=1, max_length=255, description="Entry owner")
    status: Optional[TimeEntryStatus] = Field(default=None, description="Workflow status")
    date_from: Optional[date] = Field(default=None, description="Earliest completion date")
    date_to: Optional[date] = Field(default=None, description="Latest start date")
    sort_by: TimeEntrySortField = Field(default=TimeEntrySortField.START_DATE, description="Sort field")

    def to_query(self, project_codes: Optional[List[str]]) -> TimeEntryQuery:
        """Build the repository query, restricted to the given projects."""
        return TimeEntryQuery(
            project_codes=project_codes,
            user_id=self.user_id,
            status=TimeEntryStatus(self.status) if self.status else None,
            date_from=self.date_from,
            date_to=self.date_to,
            sort_by=TimeEntrySortField(self.sort_by).attribute,
            descending=self.descending,
            page=self.page,
            page_size=self.page_size
        )


# Response DTOs
class TimeEntryTagResponseDTO(ResponseDTO):
    name: str
    value: str


class TimeEntryResponseDTO(ResponseDTO):
    """DTO for time entry responses."""

    id: str
    project_code: str
    task: str
    issue_id: Optional[str] = None
    standard_hours: float
    overtime_hours: float
    total_hours: float
    description: Optional[str] = None
    start_date: date
    completion_date: date
    status: TimeEntryStatus
    editable: bool
    decline_comment: Optional[str] = None
    tags: List[TimeEntryTagResponseDTO] = Field(default_factory=list)
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, entry: TimeEntry) -> "TimeEntryResponseDTO":
        return cls(
            id=str(entry.id),
            project_code=entry.project_code,
            task=entry.task.task_name,
            issue_id=entry.issue_id,
            standard_hours=float(entry.standard_hours),
            overtime_hours=float(entry.overtime_hours),
            total_hours=float(entry.total_hours),
            description=entry.description,
            start_date=entry.start_date,
            completion_date=entry.completion_date,
            status=entry.status,
            editable=entry.is_editable,
            decline_comment=entry.decline_comment,
            tags=[TimeEntryTagResponseDTO(name=tag.name, value=tag.value) for tag in entry.tags],
            user_id=entry.user_id,
            user_email=entry.user_email,
            user_name=entry.user_name,
            created_at=entry.created_at,
            updated_at=entry.updated_at
        )


class TimeEntryListResponseDTO(ListResponseDTO[TimeEntryResponseDTO]):
    """DTO for a page of time entries."""

    @classmethod
    def from_page(cls, page: TimeEntryPage) -> "TimeEntryListResponseDTO":
        return cls(
            items=[TimeEntryResponseDTO.from_domain(entry) for entry in page.items],
            total=page.total_items,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_previous
        )
