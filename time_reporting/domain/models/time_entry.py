"""
TimeEntry domain model.
Represents hours reported against a project task and its approval workflow.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, List, Dict, Any
import uuid

from time_reporting.domain.models.base import BaseEntity, DomainEvent, ValidationError
from time_reporting.domain.models.project import Project, ProjectTask, ProjectTag, TagValue
from time_reporting.domain.models.workflow import (
    TimeEntryStatus,
    INITIAL_STATUS,
    check_transition,
    ensure_mutable,
    is_mutable
)


# Domain Events

class TimeEntryCreatedEvent(DomainEvent):
    """Event raised when a time entry is logged."""

    def __init__(self, entry_id: Any, user_id: Optional[str], project_code: str):
        super().__init__()
        self.entry_id = str(entry_id)
        self.user_id = user_id
        self.project_code = project_code

    @property
    def event_name(self) -> str:
        return "time_entry.created"


class TimeEntryStatusChangedEvent(DomainEvent):
    """Event raised when a time entry moves along the workflow."""

    def __init__(
        self,
        entry_id: Any,
        old_status: TimeEntryStatus,
        new_status: TimeEntryStatus,
        changed_by: Optional[str]
    ):
        super().__init__()
        self.entry_id = str(entry_id)
        self.old_status = old_status.value
        self.new_status = new_status.value
        self.changed_by = changed_by

    @property
    def event_name(self) -> str:
        return f"time_entry.{self.new_status.lower()}"


class TimeEntryMovedEvent(DomainEvent):
    """Event raised when a time entry is moved to another project or task."""

    def __init__(self, entry_id: Any, old_project_code: str, new_project_code: str, new_task: str):
        super().__init__()
        self.entry_id = str(entry_id)
        self.old_project_code = old_project_code
        self.new_project_code = new_project_code
        self.new_task = new_task

    @property
    def event_name(self) -> str:
        return "time_entry.moved"


class TimeEntryDeletedEvent(DomainEvent):
    """Event raised when a time entry is deleted."""

    def __init__(self, entry_id: Any, deleted_by: Optional[str]):
        super().__init__()
        self.entry_id = str(entry_id)
        self.deleted_by = deleted_by

    @property
    def event_name(self) -> str:
        return "time_entry.deleted"


@dataclass(frozen=True)
class TimeEntryTag:
    """A tag value attached to a time entry, together with its owning tag."""

    tag: ProjectTag
    tag_value: TagValue

    @property
    def name(self) -> str:
        return self.tag.tag_name

    @property
    def value(self) -> str:
        return self.tag_value.value

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value}


class TimeEntry(BaseEntity):
    """
    TimeEntry entity.

    References to the project, task and tag values are always the loaded
    objects; the project code is derived from the project reference.
    """

    def __init__(
        self,
        project: Project,
        task: ProjectTask,
        standard_hours: Decimal,
        start_date: date,
        completion_date: date,
        overtime_hours: Decimal = Decimal("0"),
        description: Optional[str] = None,
        issue_id: Optional[str] = None,
        status: TimeEntryStatus = INITIAL_STATUS,
        decline_comment: Optional[str] = None,
        tags: Optional[List[TimeEntryTag]] = None,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
        user_name: Optional[str] = None,
        version: int = 1,
        **kwargs
    ):
        super().__init__(**kwargs)

        self.project = project
        self.task = task

        self.standard_hours = Decimal(standard_hours)
        self.overtime_hours = Decimal(overtime_hours)
        self.description = description
        self.issue_id = issue_id
        self.start_date = start_date
        self.completion_date = completion_date

        # Workflow
        self.status = TimeEntryStatus(status)
        self.decline_comment = decline_comment

        self.tags: List[TimeEntryTag] = list(tags or [])

        # Owner identity
        self.user_id = user_id
        self.user_email = user_email
        self.user_name = user_name

        # Optimistic concurrency
        self.version = version

    @property
    def project_code(self) -> str:
        return self.project.code

    @property
    def resource_path(self) -> str:
        return self.project.resource_path

    @property
    def total_hours(self) -> Decimal:
        return self.standard_hours + self.overtime_hours

    @property
    def is_editable(self) -> bool:
        return is_mutable(self.status)

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return self.user_id is not None and self.user_id == user_id

    @classmethod
    def log(
        cls,
        project: Project,
        task: ProjectTask,
        standard_hours: Decimal,
        start_date: date,
        completion_date: date,
        overtime_hours: Decimal = Decimal("0"),
        description: Optional[str] = None,
        issue_id: Optional[str] = None,
        tags: Optional[List[TimeEntryTag]] = None,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
        user_name: Optional[str] = None
    ) -> "TimeEntry":
        """Create a new entry in the initial workflow status."""
        entry = cls(
            id=uuid.uuid4(),
            project=project,
            task=task,
            standard_hours=standard_hours,
            overtime_hours=overtime_hours,
            start_date=start_date,
            completion_date=completion_date,
            description=description,
            issue_id=issue_id,
            tags=tags,
            user_id=user_id,
            user_email=user_email,
            user_name=user_name
        )
        entry.add_event(TimeEntryCreatedEvent(entry.id, user_id, project.code))
        return entry

    # Field mutations, only while editable

    def update_details(
        self,
        task: Optional[ProjectTask] = None,
        issue_id: Optional[str] = None,
        standard_hours: Optional[Decimal] = None,
        overtime_hours: Optional[Decimal] = None,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        completion_date: Optional[date] = None
    ) -> None:
        """Update the supplied fields, leaving the others untouched."""
        ensure_mutable(self.status)

        if task is not None:
            self.task = task
        if issue_id is not None:
            self.issue_id = issue_id
        if standard_hours is not None:
            self.standard_hours = Decimal(standard_hours)
        if overtime_hours is not None:
            self.overtime_hours = Decimal(overtime_hours)
        if description is not None:
            self.description = description
        if start_date is not None:
            self.start_date = start_date
        if completion_date is not None:
            self.completion_date = completion_date

        self.mark_as_updated()

    def replace_tags(self, tags: List[TimeEntryTag]) -> None:
        """Replace all tags of the entry."""
        ensure_mutable(self.status)
        self.tags = list(tags)
        self.mark_as_updated()

    def move_to(self, project: Project, task: ProjectTask) -> None:
        """
        Move the entry to another project and/or task.
        Tags are project specific, so they are dropped when the project changes.
        """
        ensure_mutable(self.status)

        old_project_code = self.project_code
        if project.code != old_project_code:
            self.tags = []

        self.project = project
        self.task = task
        self.mark_as_updated()

        self.add_event(TimeEntryMovedEvent(self.id, old_project_code, project.code, task.task_name))

    def mark_for_deletion(self, deleted_by: Optional[str]) -> None:
        ensure_mutable(self.status)
        self.add_event(TimeEntryDeletedEvent(self.id, deleted_by))

    # Workflow transitions

    def submit(self, submitted_by: Optional[str], clear_decline_comment: bool = False) -> None:
        """Submit (or resubmit after a decline) for approval."""
        self._transition(TimeEntryStatus.SUBMITTED, submitted_by)
        if clear_decline_comment:
            self.decline_comment = None

    def approve(self, approved_by: Optional[str]) -> None:
        self._transition(TimeEntryStatus.APPROVED, approved_by)

    def decline(self, declined_by: Optional[str], comment: str) -> None:
        """Decline a submitted entry; a comment is mandatory."""
        if comment is None or not comment.strip():
            raise ValidationError("Decline comment is required", "comment")

        self._transition(TimeEntryStatus.DECLINED, declined_by)
        self.decline_comment = comment.strip()

    def _transition(self, target: TimeEntryStatus, changed_by: Optional[str]) -> None:
        check_transition(self.status, target)

        old_status = self.status
        self.status = target
        self.mark_as_updated()

        self.add_event(TimeEntryStatusChangedEvent(self.id, old_status, target, changed_by))
