"""
Projects router.
Lists the projects, tasks and tag configuration the caller can see.
"""

from typing import Annotated, List
from fastapi import APIRouter, Depends, Query

from time_reporting.infrastructure.auth import get_current_context
from time_reporting.infrastructure.web.dependencies import get_time_entry_service
from time_reporting.application.use_cases.base_use_case import UseCaseContext
from time_reporting.application.use_cases.time_entry_use_cases import TimeEntryService
from time_reporting.application.dto.project_dto import ProjectResponseDTO


router = APIRouter()


@router.get("", response_model=List[ProjectResponseDTO])
def list_projects(
    context: Annotated[UseCaseContext, Depends(get_current_context)],
    service: Annotated[TimeEntryService, Depends(get_time_entry_service)],
    include_inactive: bool = Query(False, alias="includeInactive", description="Include inactive projects")
):
    """
    List projects the caller has View permission on, with their active
    tasks and tags.
    """
    projects = service.list_projects(context, include_inactive=include_inactive)
    return [ProjectResponseDTO.from_domain(project) for project in projects]
