"""Project repository interface.
Defines the contract for loading projects with their task and tag configuration.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from time_reporting.domain.models.project import Project


class ProjectRepository(ABC):
    """
    Repository interface for the Project aggregate.
    Projects are always returned with their tasks, tags and tag values loaded.
    """

    @abstractmethod
    def find_by_code(self, code: str) -> Optional[Project]:
        """
        Find a project by its code.
        Returns None if not found.
        """
        pass

    @abstractmethod
    def list_all(self, active_only: bool = True) -> List[Project]:
        """
        List projects ordered by code.
        """
        pass
