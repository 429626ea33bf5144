"""
Domain services for the time reporting system.
This module exports the validation and authorization services.
"""

from .validation_service import (
    TagInput,
    ValidationCollector,
    validate_project,
    validate_task,
    validate_tags,
    validate_date_range,
    validate_hours,
    validate_time_entry
)
from .authorization_service import (
    Permission,
    AclEntry,
    AccessControlList,
    parse_acl_entry,
    normalize_path
)

__all__ = [
    "TagInput",
    "ValidationCollector",
    "validate_project",
    "validate_task",
    "validate_tags",
    "validate_date_range",
    "validate_hours",
    "validate_time_entry",
    "Permission",
    "AclEntry",
    "AccessControlList",
    "parse_acl_entry",
    "normalize_path",
]
