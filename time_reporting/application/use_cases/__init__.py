"""
Use cases for the application layer.
"""

from .base_use_case import (
    UseCaseContext,
    BaseUseCase,
    QueryUseCase,
    CommandUseCase,
    AuthorizedUseCase
)
from .project_use_cases import ListProjectsUseCase
from .time_entry_use_cases import (
    TimeEntryUseCase,
    CreateTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    MoveTimeEntryUseCase,
    UpdateTagsUseCase,
    SubmitTimeEntryUseCase,
    ApproveTimeEntryUseCase,
    DeclineTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    GetTimeEntryUseCase,
    ListTimeEntriesUseCase,
    TimeEntryService
)

__all__ = [
    "UseCaseContext",
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "AuthorizedUseCase",
    "ListProjectsUseCase",
    "TimeEntryUseCase",
    "CreateTimeEntryUseCase",
    "UpdateTimeEntryUseCase",
    "MoveTimeEntryUseCase",
    "UpdateTagsUseCase",
    "SubmitTimeEntryUseCase",
    "ApproveTimeEntryUseCase",
    "DeclineTimeEntryUseCase",
    "DeleteTimeEntryUseCase",
    "GetTimeEntryUseCase",
    "ListTimeEntriesUseCase",
    "TimeEntryService",
]
