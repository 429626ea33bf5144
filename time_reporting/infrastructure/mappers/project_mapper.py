"""
Project mapper for converting between domain entities and database models.
"""

from time_reporting.domain.models.project import Project, ProjectTask, ProjectTag, TagValue
from time_reporting.infrastructure.db.models import (
    ProjectModel,
    ProjectTaskModel,
    ProjectTagModel,
    TagValueModel
)


class ProjectMapper:
    """Maps between the Project aggregate and its database models."""

    def domain_to_model(self, project: Project) -> ProjectModel:
        """Convert Project domain entity, with tasks and tags, to ProjectModel."""
        return ProjectModel(
            code=project.code,
            name=project.name,
            is_active=project.is_active,
            tasks=[
                ProjectTaskModel(id=task.id, task_name=task.task_name, is_active=task.is_active)
                for task in project.tasks
            ],
            tags=[
                ProjectTagModel(
                    id=tag.id,
                    tag_name=tag.tag_name,
                    is_active=tag.is_active,
                    values=[TagValueModel(id=value.id, value=value.value) for value in tag.values]
                )
                for tag in project.tags
            ],
            created_at=project.created_at,
            updated_at=project.updated_at
        )

    def model_to_domain(self, model: ProjectModel) -> Project:
        """Convert ProjectModel to Project domain entity."""
        project = Project(
            code=model.code,
            name=model.name,
            is_active=bool(model.is_active),
            tasks=[self.task_to_domain(task) for task in model.tasks],
            tags=[self.tag_to_domain(tag) for tag in model.tags]
        )

        # Set entity metadata
        if model.created_at:
            project.created_at = model.created_at
        if model.updated_at:
            project.updated_at = model.updated_at

        return project

    def task_to_domain(self, model: ProjectTaskModel) -> ProjectTask:
        return ProjectTask(
            id=model.id,
            project_code=model.project_code,
            task_name=model.task_name,
            is_active=bool(model.is_active)
        )

    def tag_to_domain(self, model: ProjectTagModel) -> ProjectTag:
        return ProjectTag(
            id=model.id,
            project_code=model.project_code,
            tag_name=model.tag_name,
            is_active=bool(model.is_active),
            values=[
                TagValue(id=value.id, project_tag_id=value.project_tag_id, value=value.value)
                for value in model.values
            ]
        )
