"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, TypeVar, Generic
from datetime import datetime

from time_reporting.domain.models.base import (
    BaseEntity,
    DomainEvent,
    ForbiddenError,
    utcnow
)
from time_reporting.domain.services.authorization_service import AccessControlList, Permission

logger = logging.getLogger(__name__)

R = TypeVar('R')


class UseCaseContext:
    """
    Context object for use case execution.

    Carries the caller's identity and ACL for a single request. It is built
    fresh for every call and never shared between requests.
    """

    def __init__(
        self,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
        user_name: Optional[str] = None,
        acl: Optional[AccessControlList] = None,
        request_id: Optional[str] = None
    ):
        self.user_id = user_id
        self.user_email = user_email
        self.user_name = user_name
        self.acl = acl if acl is not None else AccessControlList()
        self.request_id = request_id
        self.execution_start = utcnow()

    @classmethod
    def from_claims(
        cls,
        user_id: Optional[str],
        acl_claims: Optional[Iterable[str]],
        user_email: Optional[str] = None,
        user_name: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> "UseCaseContext":
        """Build a context from raw ACL strings, skipping malformed ones."""
        return cls(
            user_id=user_id,
            user_email=user_email,
            user_name=user_name,
            acl=AccessControlList.from_claims(acl_claims),
            request_id=request_id
        )

    def is_authenticated(self) -> bool:
        """Check if user is authenticated."""
        return self.user_id is not None

    def has_permission(self, resource_path: str, permission: Permission) -> bool:
        return self.acl.has_permission(resource_path, permission)


class BaseUseCase(ABC, Generic[R]):
    """
    Base class for all use cases.
    Failures are raised as domain exceptions; nothing is swallowed here.
    """

    def __init__(self, context: UseCaseContext):
        self.context = context
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    def execute(self, *args: Any, **kwargs: Any) -> R:
        """
        Execute the use case with timing and logging.
        """
        self.execution_start = utcnow()
        try:
            return self._execute_business_logic(*args, **kwargs)
        finally:
            self.execution_end = utcnow()
            logger.debug(
                "%s finished in %.3fs",
                type(self).__name__,
                (self.execution_end - self.execution_start).total_seconds()
            )

    @abstractmethod
    def _execute_business_logic(self, *args: Any, **kwargs: Any) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[R]):
    """
    Base class for query use cases (read operations).
    """

    def _execute_business_logic(self, *args: Any, **kwargs: Any) -> R:
        return self._execute_query_logic(*args, **kwargs)

    @abstractmethod
    def _execute_query_logic(self, *args: Any, **kwargs: Any) -> R:
        pass


class CommandUseCase(BaseUseCase[R]):
    """
    Base class for command use cases (write operations).
    Domain events raised by persisted entities are published after the write.
    """

    def __init__(self, context: UseCaseContext):
        super().__init__(context)
        self.events: List[DomainEvent] = []

    def _execute_business_logic(self, *args: Any, **kwargs: Any) -> R:
        result = self._execute_command_logic(*args, **kwargs)

        # Publish only once the write went through
        self._publish_events()

        return result

    @abstractmethod
    def _execute_command_logic(self, *args: Any, **kwargs: Any) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def _collect_events(self, entity: BaseEntity) -> None:
        self.events.extend(entity.pull_events())

    def _publish_events(self) -> None:
        """Publish collected domain events."""
        for event in self.events:
            logger.info(
                "Domain event %s by user %s: %s",
                event.event_name,
                self.context.user_id,
                event.to_dict()["data"]
            )

        self.events.clear()


class AuthorizedUseCase(BaseUseCase[R]):
    """
    Mixin for use cases that require authorization against the caller's ACL.
    """

    def _require_authenticated(self) -> None:
        if not self.context.is_authenticated():
            raise ForbiddenError("User authentication required")

    def _require_permission(self, resource_path: str, permission: Permission) -> None:
        """Raise ForbiddenError unless the ACL grants the permission on the path."""
        self._require_authenticated()

        if not self.context.has_permission(resource_path, permission):
            logger.info(
                "Denied %s: user %s lacks '%s' on '%s'",
                type(self).__name__,
                self.context.user_id,
                permission.value,
                resource_path
            )
            raise ForbiddenError.permission_denied(permission.value, resource_path, permission.label)

    def _require_owner(self, resource: Any) -> None:
        """Check that the caller owns the resource (anything with ``is_owned_by``)."""
        if not resource.is_owned_by(self.context.user_id):
            logger.info(
                "Denied %s: user %s is not the owner",
                type(self).__name__,
                self.context.user_id
            )
            raise ForbiddenError("Only the owner of the time entry can perform this action")
