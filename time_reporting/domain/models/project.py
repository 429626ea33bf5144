"""
Project domain model.
A project owns the tasks time can be logged against and the tag
dimensions (with their allowed values) entries can be labelled with.
"""

from dataclasses import dataclass, field
from typing import Optional, List

from time_reporting.domain.models.base import BaseEntity


RESOURCE_ROOT = "Project"


def project_resource_path(project_code: str) -> str:
    """Resource path under which project-level permissions are granted."""
    return f"{RESOURCE_ROOT}/{project_code}"


@dataclass
class ProjectTask:
    """Task available for time logging within a project."""

    id: Optional[int]
    project_code: str
    task_name: str
    is_active: bool = True


@dataclass
class TagValue:
    """Allowed value of a project tag."""

    id: Optional[int]
    project_tag_id: Optional[int]
    value: str


@dataclass
class ProjectTag:
    """Named metadata dimension configured for a project."""

    id: Optional[int]
    project_code: str
    tag_name: str
    is_active: bool = True
    values: List[TagValue] = field(default_factory=list)

    @property
    def allowed_values(self) -> List[str]:
        return [tag_value.value for tag_value in self.values]

    def find_value(self, value: str) -> Optional[TagValue]:
        """Find an allowed value owned by this tag."""
        for tag_value in self.values:
            if tag_value.value == value:
                return tag_value
        return None

    def owns(self, tag_value: TagValue) -> bool:
        """Check whether a tag value belongs to this tag."""
        return tag_value.project_tag_id == self.id and any(
            existing.id == tag_value.id for existing in self.values
        )


class Project(BaseEntity):
    """
    Project entity, keyed by its short unique code.
    Tasks and tags are always loaded together with the project.
    """

    def __init__(
        self,
        code: str,
        name: str,
        is_active: bool = True,
        tasks: Optional[List[ProjectTask]] = None,
        tags: Optional[List[ProjectTag]] = None,
        **kwargs
    ):
        super().__init__(id=code, **kwargs)
        self.code = code
        self.name = name
        self.is_active = is_active
        self.tasks: List[ProjectTask] = list(tasks or [])
        self.tags: List[ProjectTag] = list(tags or [])

    @property
    def active_tasks(self) -> List[ProjectTask]:
        return [task for task in self.tasks if task.is_active]

    @property
    def active_tags(self) -> List[ProjectTag]:
        return [tag for tag in self.tags if tag.is_active]

    def find_task(self, task_name: str) -> Optional[ProjectTask]:
        """Find a task of this project by name, active or not."""
        for task in self.tasks:
            if task.task_name == task_name:
                return task
        return None

    def find_active_tag(self, tag_name: str) -> Optional[ProjectTag]:
        for tag in self.active_tags:
            if tag.tag_name == tag_name:
                return tag
        return None

    def owns_task(self, task: ProjectTask) -> bool:
        return task.project_code == self.code and any(
            existing.id == task.id for existing in self.tasks
        )

    def owns_tag(self, tag: ProjectTag) -> bool:
        return tag.project_code == self.code and any(
            existing.id == tag.id for existing in self.tags
        )

    @property
    def resource_path(self) -> str:
        """Authorization resource path of this project."""
        return project_resource_path(self.code)
