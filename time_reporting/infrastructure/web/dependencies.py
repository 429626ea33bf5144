"""
Shared FastAPI dependencies for the web layer.
"""

from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session

from time_reporting.application.use_cases.time_entry_use_cases import TimeEntryService
from time_reporting.config import get_settings
from time_reporting.infrastructure.db.database import get_db
from time_reporting.infrastructure.repositories.project_repository import SQLAlchemyProjectRepository
from time_reporting.infrastructure.repositories.time_entry_repository import SQLAlchemyTimeEntryRepository


def get_time_entry_service(session: Annotated[Session, Depends(get_db)]) -> TimeEntryService:
    """Dependency to get the time entry service bound to the request session."""
    return TimeEntryService.from_settings(
        SQLAlchemyTimeEntryRepository(session),
        SQLAlchemyProjectRepository(session),
        get_settings()
    )
