"""
Validation service for time entries.
Pure checks over already-loaded reference data (project, tasks, tag
configuration). Nothing here touches the store.
"""

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterator, List, NamedTuple, Optional, Sequence

from time_reporting.domain.models.base import (
    EntityNotFoundError,
    ProjectInactiveError,
    ValidationError,
    ValidationErrors
)
from time_reporting.domain.models.project import Project, ProjectTask
from time_reporting.domain.models.time_entry import TimeEntry, TimeEntryTag


class TagInput(NamedTuple):
    """Requested tag as a (name, value) pair."""
    name: str
    value: str


def _raise_collected(errors: List[ValidationError]) -> None:
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise ValidationErrors(errors)


def validate_project(project: Optional[Project], project_code: str) -> Project:
    """
    Validate that a project exists and is active.

    Raises:
        EntityNotFoundError: If the project does not exist
        ProjectInactiveError: If the project is inactive
    """
    if project is None:
        raise EntityNotFoundError("Project", project_code)

    if not project.is_active:
        raise ProjectInactiveError(project.code)

    return project


def validate_task(project: Project, task_name: str) -> ProjectTask:
    """
    Validate that an active task with the given name exists for the project.

    Returns:
        The resolved task, owned by the loaded project
    """
    task = project.find_task(task_name)
    if task is None or not task.is_active:
        raise ValidationError(
            f"Task '{task_name}' is not available for project '{project.code}'",
            "task"
        )
    return task


def validate_tags(project: Project, tag_inputs: Optional[Sequence[Any]]) -> List[TimeEntryTag]:
    """
    Validate requested tags against the project's active tag configuration.

    Every offending tag is reported. Unknown or inactive tag names fail on
    their own; a value outside the tag's allowed list fails with the list of
    allowed values attached. The same name/value pair may appear only once.

    Returns:
        The resolved tags, built from the project's own tag objects
    """
    if not tag_inputs:
        return []

    resolved: List[TimeEntryTag] = []
    errors: List[ValidationError] = []
    seen = set()

    for tag_input in tag_inputs:
        project_tag = project.find_active_tag(tag_input.name)
        if project_tag is None:
            errors.append(ValidationError(
                f"Tag '{tag_input.name}' is not configured for project '{project.code}'",
                "tags"
            ))
            continue

        tag_value = project_tag.find_value(tag_input.value)
        if tag_value is None:
            allowed = project_tag.allowed_values
            errors.append(ValidationError(
                f"Value '{tag_input.value}' is not allowed for tag '{tag_input.name}'. "
                f"Allowed values: {', '.join(allowed)}",
                "tags",
                allowed_values=allowed
            ))
            continue

        key = (project_tag.tag_name, tag_value.value)
        if key in seen:
            errors.append(ValidationError(
                f"Tag '{tag_input.name}={tag_input.value}' is listed more than once",
                "tags"
            ))
            continue
        seen.add(key)

        resolved.append(TimeEntryTag(tag=project_tag, tag_value=tag_value))

    _raise_collected(errors)
    return resolved


def validate_date_range(start_date: date, completion_date: date) -> None:
    """Validate that the start date is on or before the completion date."""
    if start_date > completion_date:
        raise ValidationError("must be <= completionDate", "startDate")


def validate_hours(standard_hours: Decimal, overtime_hours: Decimal) -> None:
    """Validate that hours are non-negative; both fields are reported if both fail."""
    errors: List[ValidationError] = []

    if standard_hours < 0:
        errors.append(ValidationError("must be >= 0", "standardHours"))

    if overtime_hours < 0:
        errors.append(ValidationError("must be >= 0", "overtimeHours"))

    _raise_collected(errors)


def validate_time_entry(entry: TimeEntry) -> None:
    """
    Check the structural invariants of an entry before it is persisted:
    hours, date order, and that task and tags belong to the entry's project.
    Activity of tasks and tags is checked when they are supplied, not here.
    """
    collector = ValidationCollector()

    with collector.check():
        validate_hours(entry.standard_hours, entry.overtime_hours)
    with collector.check():
        validate_date_range(entry.start_date, entry.completion_date)

    if not entry.project.owns_task(entry.task):
        collector.add(ValidationError(
            f"Task '{entry.task.task_name}' does not belong to project '{entry.project_code}'",
            "task"
        ))

    for tag in entry.tags:
        if not entry.project.owns_tag(tag.tag) or not tag.tag.owns(tag.tag_value):
            collector.add(ValidationError(
                f"Tag '{tag.name}={tag.value}' does not belong to project '{entry.project_code}'",
                "tags"
            ))

    collector.raise_if_errors()


class ValidationCollector:
    """
    Runs several validations and reports all failures at once.

    With ``fail_fast`` the first failure is raised immediately instead.
    """

    def __init__(self, fail_fast: bool = False):
        self.fail_fast = fail_fast
        self.errors: List[ValidationError] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add(self, error: ValidationError) -> None:
        if self.fail_fast:
            raise error
        self.errors.append(error)

    @contextmanager
    def check(self) -> Iterator[None]:
        """Collect validation failures raised inside the block."""
        try:
            yield
        except ValidationErrors as exc:
            if self.fail_fast:
                raise exc.errors[0]
            self.errors.extend(exc.errors)
        except ValidationError as exc:
            if self.fail_fast:
                raise
            self.errors.append(exc)

    def run(self, validator: Callable[..., Any], *args: Any) -> Any:
        """Run a validator and return its result, or None when it failed."""
        with self.check():
            return validator(*args)
        return None

    def raise_if_errors(self) -> None:
        _raise_collected(self.errors)
