"""
Domain models for the time reporting system.
This module exports all domain entities, workflow definitions and exceptions.
"""

# Base classes
from .base import (
    BaseEntity,
    DomainEvent,
    DomainException,
    ValidationError,
    ValidationErrors,
    ProjectInactiveError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidTransitionError,
    ConflictError,
    utcnow
)

# Workflow
from .workflow import (
    TimeEntryStatus,
    INITIAL_STATUS,
    ALLOWED_TRANSITIONS,
    MUTABLE_STATUSES,
    can_transition,
    check_transition,
    is_mutable,
    ensure_mutable
)

# Domain entities
from .project import Project, ProjectTask, ProjectTag, TagValue, project_resource_path
from .time_entry import (
    TimeEntry,
    TimeEntryTag,
    TimeEntryCreatedEvent,
    TimeEntryStatusChangedEvent,
    TimeEntryMovedEvent,
    TimeEntryDeletedEvent
)

__all__ = [
    # Base
    "BaseEntity",
    "DomainEvent",
    "DomainException",
    "ValidationError",
    "ValidationErrors",
    "ProjectInactiveError",
    "EntityNotFoundError",
    "ForbiddenError",
    "InvalidTransitionError",
    "ConflictError",
    "utcnow",

    # Workflow
    "TimeEntryStatus",
    "INITIAL_STATUS",
    "ALLOWED_TRANSITIONS",
    "MUTABLE_STATUSES",
    "can_transition",
    "check_transition",
    "is_mutable",
    "ensure_mutable",

    # Entities
    "Project",
    "ProjectTask",
    "ProjectTag",
    "TagValue",
    "project_resource_path",
    "TimeEntry",
    "TimeEntryTag",

    # Events
    "TimeEntryCreatedEvent",
    "TimeEntryStatusChangedEvent",
    "TimeEntryMovedEvent",
    "TimeEntryDeletedEvent"
]
