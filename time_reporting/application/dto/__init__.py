"""
Data Transfer Objects for the application layer.
"""

from .base_dto import (
    BaseDTO,
    RequestDTO,
    ResponseDTO,
    ListRequestDTO,
    ListResponseDTO,
    HealthCheckResponseDTO,
    ErrorResponseDTO,
    FieldErrorDTO,
    ValidationErrorResponseDTO,
    to_dict
)
from .time_entry_dto import (
    TagInputDTO,
    LogTimeRequestDTO,
    UpdateTimeEntryRequestDTO,
    MoveTimeEntryRequestDTO,
    UpdateTagsRequestDTO,
    DeclineTimeEntryRequestDTO,
    TimeEntrySortField,
    ListTimeEntriesRequestDTO,
    TimeEntryTagResponseDTO,
    TimeEntryResponseDTO,
    TimeEntryListResponseDTO
)
from .project_dto import ProjectResponseDTO, ProjectTagResponseDTO

__all__ = [
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "ListRequestDTO",
    "ListResponseDTO",
    "HealthCheckResponseDTO",
    "ErrorResponseDTO",
    "FieldErrorDTO",
    "ValidationErrorResponseDTO",
    "to_dict",
    "TagInputDTO",
    "LogTimeRequestDTO",
    "UpdateTimeEntryRequestDTO",
    "MoveTimeEntryRequestDTO",
    "UpdateTagsRequestDTO",
    "DeclineTimeEntryRequestDTO",
    "TimeEntrySortField",
    "ListTimeEntriesRequestDTO",
    "TimeEntryTagResponseDTO",
    "TimeEntryResponseDTO",
    "TimeEntryListResponseDTO",
    "ProjectResponseDTO",
    "ProjectTagResponseDTO",
]
