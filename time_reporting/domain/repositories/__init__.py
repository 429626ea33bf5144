"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .project_repository import ProjectRepository
from .time_entry_repository import TimeEntryPage, TimeEntryQuery, TimeEntryRepository

__all__ = [
    "ProjectRepository",
    "TimeEntryPage",
    "TimeEntryQuery",
    "TimeEntryRepository",
]
