"""
Project repository implementation using SQLAlchemy.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from time_reporting.domain.models.project import Project
from time_reporting.domain.repositories.project_repository import ProjectRepository as ProjectRepositoryInterface
from time_reporting.infrastructure.db.models import ProjectModel
from time_reporting.infrastructure.mappers.project_mapper import ProjectMapper


class SQLAlchemyProjectRepository(ProjectRepositoryInterface):
    """SQLAlchemy implementation of project repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = ProjectMapper()

    def find_by_code(self, code: str) -> Optional[Project]:
        """Find a project by code, with tasks, tags and tag values."""
        model = self.session.get(ProjectModel, code)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def list_all(self, active_only: bool = True) -> List[Project]:
        """List projects ordered by code."""
        query = self.session.query(ProjectModel)
        if active_only:
            query = query.filter(ProjectModel.is_active.is_(True))

        models = query.order_by(ProjectModel.code).all()
        return [self.mapper.model_to_domain(model) for model in models]
