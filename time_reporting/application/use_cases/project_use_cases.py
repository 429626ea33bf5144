"""
Project use cases for the application layer.
"""

from typing import List

from time_reporting.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    QueryUseCase,
    UseCaseContext
)
from time_reporting.domain.models.project import Project
from time_reporting.domain.repositories.project_repository import ProjectRepository
from time_reporting.domain.services.authorization_service import Permission


class ListProjectsUseCase(AuthorizedUseCase, QueryUseCase):
    """List the projects the caller may view."""

    def __init__(self, context: UseCaseContext, project_repository: ProjectRepository):
        super().__init__(context)
        self.project_repository = project_repository

    def _execute_query_logic(self, include_inactive: bool = False) -> List[Project]:
        self._require_authenticated()

        projects = self.project_repository.list_all(active_only=not include_inactive)
        return [
            project for project in projects
            if self.context.has_permission(project.resource_path, Permission.VIEW)
        ]
