"""
Project DTOs for the application layer.
"""

from typing import List

from pydantic import Field

from time_reporting.domain.models.project import Project, ProjectTag
from .base_dto import ResponseDTO


class ProjectTagResponseDTO(ResponseDTO):
    """An active tag of a project with its allowed values."""

    name: str
    allowed_values: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, tag: ProjectTag) -> "ProjectTagResponseDTO":
        return cls(name=tag.tag_name, allowed_values=tag.allowed_values)


class ProjectResponseDTO(ResponseDTO):
    """DTO for project responses. Only active tasks and tags are listed."""

    code: str
    name: str
    is_active: bool
    tasks: List[str] = Field(default_factory=list)
    tags: List[ProjectTagResponseDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, project: Project) -> "ProjectResponseDTO":
        return cls(
            code=project.code,
            name=project.name,
            is_active=project.is_active,
            tasks=[task.task_name for task in project.active_tasks],
            tags=[ProjectTagResponseDTO.from_domain(tag) for tag in project.active_tags]
        )
