"""
Time entries router.
Handles time logging and the approval workflow.
"""

from datetime import date
from typing import Annotated, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Response, status

from time_reporting.infrastructure.auth import get_current_context
from time_reporting.infrastructure.web.dependencies import get_time_entry_service
from time_reporting.application.use_cases.base_use_case import UseCaseContext
from time_reporting.application.use_cases.time_entry_use_cases import TimeEntryService
from time_reporting.application.dto.time_entry_dto import (
    LogTimeRequestDTO,
    UpdateTimeEntryRequestDTO,
    MoveTimeEntryRequestDTO,
    UpdateTagsRequestDTO,
    DeclineTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    TimeEntrySortField,
    TimeEntryResponseDTO,
    TimeEntryListResponseDTO
)
from time_reporting.domain.models.workflow import TimeEntryStatus
from time_reporting.domain.repositories.time_entry_repository import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


router = APIRouter()

Context = Annotated[UseCaseContext, Depends(get_current_context)]
Service = Annotated[TimeEntryService, Depends(get_time_entry_service)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
def create_time_entry(request: LogTimeRequestDTO, context: Context, service: Service):
    """
    Log a new time entry in NOT_REPORTED status.

    - **projectCode**: Project code (Edit permission required)
    - **task**: Task name, must be an active task of the project
    - **standardHours** / **overtimeHours**: Non-negative hours
    - **startDate** / **completionDate**: startDate must be <= completionDate
    - **tags**: Name/value pairs from the project's tag configuration
    """
    entry = service.create_time_entry(context, request)
    return TimeEntryResponseDTO.from_domain(entry)


@router.get("", response_model=TimeEntryListResponseDTO)
def list_time_entries(
    context: Context,
    service: Service,
    project_code: Optional[str] = Query(None, alias="projectCode", min_length=1, max_length=10),
    user_id: Optional[str] = Query(None, alias="userId", min_length=1, max_length=255),
    status_filter: Optional[TimeEntryStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=MAX_PAGE_SIZE),
    sort_by: TimeEntrySortField = Query(TimeEntrySortField.START_DATE, alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$")
):
    """
    List time entries in projects the caller can view.

    - **projectCode**: Restrict to one project (View permission required)
    - **userId** / **status**: Filter by owner and workflow status
    - **dateFrom** / **dateTo**: Entries whose work period overlaps the range
    - **sortBy** / **sortOrder**: Defaults to startDate, newest first
    """
    request = ListTimeEntriesRequestDTO(
        project_code=project_code,
        user_id=user_id,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order
    )
    return TimeEntryListResponseDTO.from_page(service.list_time_entries(context, request))


@router.get("/{entry_id}", response_model=TimeEntryResponseDTO)
def get_time_entry(entry_id: UUID, context: Context, service: Service):
    """Get a time entry (View permission required)."""
    return TimeEntryResponseDTO.from_domain(service.get_time_entry(context, entry_id))


@router.patch("/{entry_id}", response_model=TimeEntryResponseDTO)
def update_time_entry(
    entry_id: UUID,
    request: UpdateTimeEntryRequestDTO,
    context: Context,
    service: Service
):
    """
    Update the supplied fields of an entry.
    Only the owner can edit, and only while NOT_REPORTED or DECLINED.
    """
    entry = service.update_time_entry(context, entry_id, request)
    return TimeEntryResponseDTO.from_domain(entry)


@router.post("/{entry_id}/move", response_model=TimeEntryResponseDTO)
def move_time_entry(
    entry_id: UUID,
    request: MoveTimeEntryRequestDTO,
    context: Context,
    service: Service
):
    """Move an entry to another project and task. Tags are cleared when the project changes."""
    entry = service.move_time_entry(context, entry_id, request)
    return TimeEntryResponseDTO.from_domain(entry)


@router.put("/{entry_id}/tags", response_model=TimeEntryResponseDTO)
def update_tags(entry_id: UUID, request: UpdateTagsRequestDTO, context: Context, service: Service):
    """Replace all tags of an entry."""
    entry = service.update_tags(context, entry_id, request.tag_inputs())
    return TimeEntryResponseDTO.from_domain(entry)


@router.post("/{entry_id}/submit", response_model=TimeEntryResponseDTO)
def submit_time_entry(entry_id: UUID, context: Context, service: Service):
    """Submit an entry for approval (NOT_REPORTED or DECLINED -> SUBMITTED)."""
    return TimeEntryResponseDTO.from_domain(service.submit_time_entry(context, entry_id))


@router.post("/{entry_id}/approve", response_model=TimeEntryResponseDTO)
def approve_time_entry(entry_id: UUID, context: Context, service: Service):
    """Approve a submitted entry (Approve permission required)."""
    return TimeEntryResponseDTO.from_domain(service.approve_time_entry(context, entry_id))


@router.post("/{entry_id}/decline", response_model=TimeEntryResponseDTO)
def decline_time_entry(
    entry_id: UUID,
    request: DeclineTimeEntryRequestDTO,
    context: Context,
    service: Service
):
    """Decline a submitted entry with a mandatory comment (Approve permission required)."""
    entry = service.decline_time_entry(context, entry_id, request.comment)
    return TimeEntryResponseDTO.from_domain(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_entry(entry_id: UUID, context: Context, service: Service):
    """Delete an entry while it is NOT_REPORTED or DECLINED."""
    service.delete_time_entry(context, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
