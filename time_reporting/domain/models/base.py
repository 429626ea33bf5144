"""
Base entity, domain events and domain exceptions.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime, timezone
from typing import Optional, Any, Dict, List, Sequence
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import uuid


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class DomainEvent(ABC):
    """Base class for domain events."""

    def __init__(self):
        self.occurred_at = utcnow()
        self.event_id = str(uuid.uuid4())

    @property
    @abstractmethod
    def event_name(self) -> str:
        """Return the name of the event."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        data = {
            key: value for key, value in self.__dict__.items()
            if key not in ("occurred_at", "event_id")
        }
        return {
            "event_id": self.event_id,
            "event_name": self.event_name,
            "occurred_at": self.occurred_at.isoformat(),
            "data": data
        }


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides identity, timestamps and domain event collection.
    """

    id: Optional[Any] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Domain events
    _events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))

    def mark_as_updated(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = utcnow()

    def add_event(self, event: DomainEvent) -> None:
        """Add a domain event."""
        self._events.append(event)

    def pull_events(self) -> List[DomainEvent]:
        """Get and clear all domain events."""
        events = self._events.copy()
        self._events.clear()
        return events


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a serializable payload."""
        return {"code": self.code, "message": self.message}


class ValidationError(DomainException):
    """Exception raised when a field or business-rule validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        allowed_values: Optional[Sequence[str]] = None,
        code: str = "VALIDATION_ERROR"
    ):
        super().__init__(message, code)
        self.field = field
        self.allowed_values = list(allowed_values) if allowed_values is not None else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        if self.allowed_values is not None:
            data["allowed_values"] = self.allowed_values
        return data


class ProjectInactiveError(ValidationError):
    """Exception raised when a project exists but is not active."""

    def __init__(self, project_code: str):
        super().__init__(
            f"Project '{project_code}' is inactive",
            "projectCode",
            code="INACTIVE"
        )
        self.project_code = project_code


class ValidationErrors(DomainException):
    """Several validation failures reported together."""

    def __init__(self, errors: Sequence[ValidationError]):
        self.errors: List[ValidationError] = list(errors)
        fields = ", ".join(error.field or "?" for error in self.errors)
        super().__init__(f"Validation failed for: {fields}", "VALIDATION_ERROR")

    @property
    def fields(self) -> List[Optional[str]]:
        return [error.field for error in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [error.to_dict() for error in self.errors]
        return data


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} '{entity_id}' not found"
        super().__init__(message, "NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ForbiddenError(DomainException):
    """
    Exception raised when authorization is denied or the current
    workflow status does not allow the requested change.
    """

    def __init__(
        self,
        message: str,
        required_permission: Optional[str] = None,
        resource_path: Optional[str] = None,
        permission_name: Optional[str] = None
    ):
        super().__init__(message, "FORBIDDEN")
        self.required_permission = required_permission
        self.resource_path = resource_path
        self.permission_name = permission_name

    @classmethod
    def permission_denied(
        cls,
        required_permission: str,
        resource_path: str,
        permission_name: Optional[str] = None
    ) -> "ForbiddenError":
        """Denial carrying the permission code (e.g. "A") and its name (e.g. "Approve")."""
        name = permission_name or required_permission
        return cls(
            f"{name} permission ('{required_permission}') required on '{resource_path}'",
            required_permission=required_permission,
            resource_path=resource_path,
            permission_name=permission_name
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.required_permission is not None:
            data["required_permission"] = self.required_permission
            data["resource_path"] = self.resource_path
        if self.permission_name is not None:
            data["permission_name"] = self.permission_name
        return data


class InvalidTransitionError(DomainException):
    """Exception raised when a workflow edge does not exist."""

    def __init__(self, from_status: Any, to_status: Any):
        from_value = getattr(from_status, "value", from_status)
        to_value = getattr(to_status, "value", to_status)
        super().__init__(
            f"Cannot transition time entry from {from_value} to {to_value}",
            "INVALID_TRANSITION"
        )
        self.from_status = from_status
        self.to_status = to_status

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["from_status"] = getattr(self.from_status, "value", self.from_status)
        data["to_status"] = getattr(self.to_status, "value", self.to_status)
        return data


class ConflictError(DomainException):
    """Exception raised when the store detects a concurrent write or constraint violation."""

    def __init__(self, message: str):
        super().__init__(message, "CONFLICT")
