"""
Shared fixtures: reference projects, repositories, caller contexts and a seeded SQLite database.
"""

import copy
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from time_reporting.application.dto.time_entry_dto import LogTimeRequestDTO
from time_reporting.application.use_cases.base_use_case import UseCaseContext
from time_reporting.application.use_cases.time_entry_use_cases import TimeEntryService
from time_reporting.domain.models.base import ConflictError, EntityNotFoundError
from time_reporting.domain.models.project import Project, ProjectTask, ProjectTag, TagValue
from time_reporting.domain.models.time_entry import TimeEntry
from time_reporting.domain.repositories.project_repository import ProjectRepository
from time_reporting.domain.repositories.time_entry_repository import TimeEntryPage, TimeEntryQuery, TimeEntryRepository
from time_reporting.infrastructure.db.models import create_all_tables
from time_reporting.infrastructure.mappers.project_mapper import ProjectMapper


OWNER_ID = "user-owner"
OTHER_USER_ID = "user-other"
APPROVER_ID = "user-approver"


def build_projects() -> List[Project]:
    """Reference data used across the suite."""
    internal = Project(
        code="INTERNAL",
        name="Internal work",
        tasks=[
            ProjectTask(id=1, project_code="INTERNAL", task_name="Development"),
            ProjectTask(id=2, project_code="INTERNAL", task_name="Code Review"),
            ProjectTask(id=3, project_code="INTERNAL", task_name="Legacy", is_active=False),
        ],
        tags=[
            ProjectTag(
                id=1,
                project_code="INTERNAL",
                tag_name="Type",
                values=[
                    TagValue(id=1, project_tag_id=1, value="Feature"),
                    TagValue(id=2, project_tag_id=1, value="Bug"),
                ]
            ),
            ProjectTag(
                id=2,
                project_code="INTERNAL",
                tag_name="Retired",
                is_active=False,
                values=[TagValue(id=3, project_tag_id=2, value="Yes")]
            ),
        ]
    )
    client_b = Project(
        code="CLIENT-B",
        name="Client B engagement",
        tasks=[ProjectTask(id=10, project_code="CLIENT-B", task_name="Support")],
        tags=[
            ProjectTag(
                id=10,
                project_code="CLIENT-B",
                tag_name="Priority",
                values=[
                    TagValue(id=10, project_tag_id=10, value="High"),
                    TagValue(id=11, project_tag_id=10, value="Low"),
                ]
            ),
        ]
    )
    archived = Project(
        code="ARCHIVED",
        name="Archived project",
        is_active=False,
        tasks=[ProjectTask(id=20, project_code="ARCHIVED", task_name="Maintenance")]
    )
    return [internal, client_b, archived]


class InMemoryProjectRepository(ProjectRepository):
    def __init__(self, projects: List[Project]):
        self.projects: Dict[str, Project] = {project.code: project for project in projects}

    def find_by_code(self, code: str) -> Optional[Project]:
        project = self.projects.get(code)
        return copy.deepcopy(project) if project else None

    def list_all(self, active_only: bool = True) -> List[Project]:
        return [
            copy.deepcopy(project)
            for code, project in sorted(self.projects.items())
            if project.is_active or not active_only
        ]


class InMemoryTimeEntryRepository(TimeEntryRepository):
    """Stores copies so that unsaved changes never leak into the store."""

    def __init__(self):
        self.entries: Dict[str, TimeEntry] = {}
        self.save_calls = 0
        self.delete_calls = 0
        self.lookups: List[str] = []

    def find_by_id(self, entry_id) -> Optional[TimeEntry]:
        self.lookups.append("find_by_id")
        entry = self.entries.get(str(entry_id))
        return copy.deepcopy(entry) if entry else None

    def find_project_code(self, entry_id) -> Optional[str]:
        self.lookups.append("find_project_code")
        entry = self.entries.get(str(entry_id))
        return entry.project_code if entry else None

    def find_page(self, query: TimeEntryQuery) -> TimeEntryPage:
        self.lookups.append("find_page")
        matching = sorted(
            (entry for entry in self.entries.values() if query.matches(entry)),
            key=lambda entry: (getattr(entry, query.sort_by), str(entry.id)),
            reverse=query.descending
        )
        return TimeEntryPage(
            items=[copy.deepcopy(entry) for entry in matching[query.offset:query.offset + query.page_size]],
            total_items=len(matching),
            page=query.page,
            page_size=query.page_size
        )

    def save(self, time_entry: TimeEntry) -> TimeEntry:
        self.save_calls += 1
        key = str(time_entry.id)
        existing = self.entries.get(key)
        if existing is not None:
            if existing.version != time_entry.version:
                raise ConflictError(f"Time entry '{key}' was modified concurrently")
            time_entry.version += 1

        stored = copy.deepcopy(time_entry)
        stored.pull_events()
        self.entries[key] = stored
        return time_entry

    def delete(self, time_entry: TimeEntry) -> None:
        self.delete_calls += 1
        key = str(time_entry.id)
        if key not in self.entries:
            raise EntityNotFoundError("TimeEntry", time_entry.id)
        del self.entries[key]


@pytest.fixture
def projects() -> List[Project]:
    return build_projects()


@pytest.fixture
def internal_project(projects) -> Project:
    return projects[0]


@pytest.fixture
def project_repository(projects) -> InMemoryProjectRepository:
    return InMemoryProjectRepository(projects)


@pytest.fixture
def time_entry_repository() -> InMemoryTimeEntryRepository:
    return InMemoryTimeEntryRepository()


@pytest.fixture
def service(time_entry_repository, project_repository) -> TimeEntryService:
    return TimeEntryService(time_entry_repository, project_repository)


@pytest.fixture
def owner_context() -> UseCaseContext:
    return UseCaseContext.from_claims(
        user_id=OWNER_ID,
        acl_claims=["Project/INTERNAL=V,E", "Project/CLIENT-B=V,E", "Project/ARCHIVED=V,E"],
        user_email="owner@example.com",
        user_name="Entry Owner"
    )


@pytest.fixture
def other_user_context() -> UseCaseContext:
    return UseCaseContext.from_claims(
        user_id=OTHER_USER_ID,
        acl_claims=["Project/INTERNAL=V,E"]
    )


@pytest.fixture
def approver_context() -> UseCaseContext:
    return UseCaseContext.from_claims(
        user_id=APPROVER_ID,
        acl_claims=["Project/INTERNAL=V,A"]
    )


@pytest.fixture
def viewer_context() -> UseCaseContext:
    return UseCaseContext.from_claims(
        user_id="user-viewer",
        acl_claims=["Project/CLIENT-B=V"]
    )


@pytest.fixture
def log_request():
    """Factory for valid log-time requests; keyword overrides apply on top."""
    def _make(**overrides) -> LogTimeRequestDTO:
        data = {
            "project_code": "INTERNAL",
            "task": "Development",
            "standard_hours": Decimal("7.5"),
            "overtime_hours": Decimal("0"),
            "description": "Implemented login",
            "start_date": date(2025, 10, 27),
            "completion_date": date(2025, 10, 28),
            "tags": [{"name": "Type", "value": "Feature"}],
        }
        data.update(overrides)
        return LogTimeRequestDTO(**data)

    return _make


@pytest.fixture
def created_entry(service, owner_context, log_request) -> TimeEntry:
    return service.create_time_entry(owner_context, log_request())


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite database seeded with the reference projects."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    create_all_tables(engine)

    session = sessionmaker(bind=engine)()
    mapper = ProjectMapper()
    for project in build_projects():
        session.add(mapper.domain_to_model(project))
    session.commit()
    session.close()

    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(autoflush=False, bind=sqlite_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()
