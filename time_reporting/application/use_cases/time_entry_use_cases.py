"""
Time Entry use cases for the application layer.

Every write follows the same order: authorize against the caller's ACL,
load the entry, run the workflow or mutability check, validate the supplied
fields, then persist in a single write. A failure at any step raises a typed
domain exception and nothing is written.
"""

import logging
from typing import List, Optional
from uuid import UUID

from time_reporting.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CommandUseCase,
    QueryUseCase,
    UseCaseContext
)
from time_reporting.application.use_cases.project_use_cases import ListProjectsUseCase
from time_reporting.application.dto.time_entry_dto import (
    TagInputDTO,
    LogTimeRequestDTO,
    UpdateTimeEntryRequestDTO,
    MoveTimeEntryRequestDTO,
    UpdateTagsRequestDTO,
    DeclineTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO
)
from time_reporting.domain.models.base import EntityNotFoundError, ValidationError
from time_reporting.domain.models.project import Project, project_resource_path
from time_reporting.domain.models.time_entry import TimeEntry
from time_reporting.domain.models.workflow import ensure_mutable
from time_reporting.domain.repositories.project_repository import ProjectRepository
from time_reporting.domain.repositories.time_entry_repository import TimeEntryPage, TimeEntryRepository
from time_reporting.domain.services.authorization_service import Permission
from time_reporting.domain.services.validation_service import (
    ValidationCollector,
    TagInput,
    validate_project,
    validate_task,
    validate_tags,
    validate_hours,
    validate_date_range,
    validate_time_entry
)

logger = logging.getLogger(__name__)


class TimeEntryUseCase(AuthorizedUseCase, CommandUseCase):
    """Shared plumbing for time entry commands."""

    def __init__(
        self,
        context: UseCaseContext,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        validation_fail_fast: bool = False
    ):
        super().__init__(context)
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository
        self.validation_fail_fast = validation_fail_fast

    def _collector(self) -> ValidationCollector:
        return ValidationCollector(fail_fast=self.validation_fail_fast)

    def _authorize_entry(self, entry_id: UUID, permission: Permission) -> str:
        """
        Authorize an operation on an existing entry.
        Only the entry's project code is looked up before the check.
        """
        project_code = self.time_entry_repository.find_project_code(entry_id)
        if project_code is None:
            raise EntityNotFoundError("TimeEntry", entry_id)

        self._require_permission(project_resource_path(project_code), permission)
        return project_code

    def _load_entry(self, entry_id: UUID) -> TimeEntry:
        entry = self.time_entry_repository.find_by_id(entry_id)
        if entry is None:
            raise EntityNotFoundError("TimeEntry", entry_id)
        return entry

    def _load_project(self, project_code: str) -> Project:
        project = self.project_repository.find_by_code(project_code)
        if project is None:
            raise EntityNotFoundError("Project", project_code)
        return project

    def _persist(self, entry: TimeEntry) -> TimeEntry:
        validate_time_entry(entry)
        saved = self.time_entry_repository.save(entry)
        self._collect_events(entry)
        logger.info(
            "%s: entry %s saved (project=%s, status=%s, version=%s)",
            type(self).__name__,
            saved.id,
            saved.project_code,
            saved.status.value,
            saved.version
        )
        return saved


class CreateTimeEntryUseCase(TimeEntryUseCase):
    """Use case for logging a new time entry."""

    def _execute_command_logic(self, request: LogTimeRequestDTO) -> TimeEntry:
        # Authorization comes before any read
        self._require_permission(project_resource_path(request.project_code), Permission.EDIT)

        project = self._load_project(request.project_code)

        collector = self._collector()
        collector.run(validate_project, project, request.project_code)

        task = None
        tags = []
        if project.is_active:
            task = collector.run(validate_task, project, request.task)
            tags = collector.run(validate_tags, project, request.tag_inputs())

        collector.run(validate_hours, request.standard_hours, request.overtime_hours)
        collector.run(validate_date_range, request.start_date, request.completion_date)
        collector.raise_if_errors()

        entry = TimeEntry.log(
            project=project,
            task=task,
            standard_hours=request.standard_hours,
            overtime_hours=request.overtime_hours,
            start_date=request.start_date,
            completion_date=request.completion_date,
            description=request.description,
            issue_id=request.issue_id,
            tags=tags,
            user_id=self.context.user_id,
            user_email=self.context.user_email,
            user_name=self.context.user_name
        )

        return self._persist(entry)


class UpdateTimeEntryUseCase(TimeEntryUseCase):
    """Use case for editing the fields of an entry."""

    def _execute_command_logic(self, entry_id: UUID, request: UpdateTimeEntryRequestDTO) -> TimeEntry:
        self._authorize_entry(entry_id, Permission.EDIT)

        entry = self._load_entry(entry_id)
        self._require_owner(entry)
        ensure_mutable(entry.status)

        # Supplied values are checked merged with the current ones
        standard_hours = request.standard_hours if request.standard_hours is not None else entry.standard_hours
        overtime_hours = request.overtime_hours if request.overtime_hours is not None else entry.overtime_hours
        start_date = request.start_date or entry.start_date
        completion_date = request.completion_date or entry.completion_date

        collector = self._collector()
        task = None
        if request.task is not None:
            task = collector.run(validate_task, entry.project, request.task)

        tag_inputs = request.tag_inputs()
        tags = None
        if tag_inputs is not None:
            tags = collector.run(validate_tags, entry.project, tag_inputs)

        collector.run(validate_hours, standard_hours, overtime_hours)
        collector.run(validate_date_range, start_date, completion_date)
        collector.raise_if_errors()

        entry.update_details(
            task=task,
            issue_id=request.issue_id,
            standard_hours=request.standard_hours,
            overtime_hours=request.overtime_hours,
            description=request.description,
            start_date=request.start_date,
            completion_date=request.completion_date
        )
        if tags is not None:
            entry.replace_tags(tags)

        return self._persist(entry)


class MoveTimeEntryUseCase(TimeEntryUseCase):
    """
    Use case for moving an entry to another project and task.
    Edit permission is required on both the source and the destination.
    """

    def _execute_command_logic(self, entry_id: UUID, request: MoveTimeEntryRequestDTO) -> TimeEntry:
        self._authorize_entry(entry_id, Permission.EDIT)
        self._require_permission(project_resource_path(request.project_code), Permission.EDIT)

        entry = self._load_entry(entry_id)
        self._require_owner(entry)
        ensure_mutable(entry.status)

        project = self._load_project(request.project_code)
        validate_project(project, request.project_code)
        task = validate_task(project, request.task)

        entry.move_to(project, task)

        return self._persist(entry)


class UpdateTagsUseCase(TimeEntryUseCase):
    """Use case for replacing all tags of an entry."""

    def _execute_command_logic(self, entry_id: UUID, request: UpdateTagsRequestDTO) -> TimeEntry:
        self._authorize_entry(entry_id, Permission.EDIT)

        entry = self._load_entry(entry_id)
        self._require_owner(entry)
        ensure_mutable(entry.status)

        tags = validate_tags(entry.project, request.tag_inputs())
        entry.replace_tags(tags)

        return self._persist(entry)


class SubmitTimeEntryUseCase(TimeEntryUseCase):
    """Use case for submitting (or resubmitting) an entry for approval."""

    def __init__(self, *args, clear_decline_comment_on_resubmit: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.clear_decline_comment_on_resubmit = clear_decline_comment_on_resubmit

    def _execute_command_logic(self, entry_id: UUID) -> TimeEntry:
        self._authorize_entry(entry_id, Permission.EDIT)

        entry = self._load_entry(entry_id)
        self._require_owner(entry)

        entry.submit(
            self.context.user_id,
            clear_decline_comment=self.clear_decline_comment_on_resubmit
        )

        return self._persist(entry)


class ApproveTimeEntryUseCase(TimeEntryUseCase):
    """Use case for approving a submitted entry."""

    def _execute_command_logic(self, entry_id: UUID) -> TimeEntry:
        self._authorize_entry(entry_id, Permission.APPROVE)

        entry = self._load_entry(entry_id)
        entry.approve(self.context.user_id)

        return self._persist(entry)


class DeclineTimeEntryUseCase(TimeEntryUseCase):
    """Use case for declining a submitted entry with a comment."""

    def _execute_command_logic(self, entry_id: UUID, request: DeclineTimeEntryRequestDTO) -> TimeEntry:
        self._authorize_entry(entry_id, Permission.APPROVE)

        if request.comment is None or not request.comment.strip():
            raise ValidationError("Decline comment is required", "comment")

        entry = self._load_entry(entry_id)
        entry.decline(self.context.user_id, request.comment)

        return self._persist(entry)


class DeleteTimeEntryUseCase(TimeEntryUseCase):
    """Use case for deleting an entry while it is still editable."""

    def _execute_command_logic(self, entry_id: UUID) -> bool:
        self._authorize_entry(entry_id, Permission.EDIT)

        entry = self._load_entry(entry_id)
        self._require_owner(entry)
        entry.mark_for_deletion(self.context.user_id)

        self.time_entry_repository.delete(entry)
        self._collect_events(entry)
        logger.info("Entry %s deleted by %s", entry.id, self.context.user_id)
        return True


class GetTimeEntryUseCase(AuthorizedUseCase, QueryUseCase):
    """Use case for reading a single entry; requires View on its project."""

    def __init__(self, context: UseCaseContext, time_entry_repository: TimeEntryRepository):
        super().__init__(context)
        self.time_entry_repository = time_entry_repository

    def _execute_query_logic(self, entry_id: UUID) -> TimeEntry:
        project_code = self.time_entry_repository.find_project_code(entry_id)
        if project_code is None:
            raise EntityNotFoundError("TimeEntry", entry_id)

        self._require_permission(project_resource_path(project_code), Permission.VIEW)

        entry = self.time_entry_repository.find_by_id(entry_id)
        if entry is None:
            raise EntityNotFoundError("TimeEntry", entry_id)
        return entry


class ListTimeEntriesUseCase(AuthorizedUseCase, QueryUseCase):
    """
    Use case for listing entries with filtering, sorting and paging.

    Results are limited to projects the caller may view. Asking for a single
    project without View on it is forbidden rather than empty.
    """

    def __init__(
        self,
        context: UseCaseContext,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository
    ):
        super().__init__(context)
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository

    def _execute_query_logic(self, request: ListTimeEntriesRequestDTO) -> TimeEntryPage:
        self._require_authenticated()

        if request.date_from and request.date_to and request.date_from > request.date_to:
            raise ValidationError("must be <= dateTo", "dateFrom")

        if request.project_code is not None:
            self._require_permission(project_resource_path(request.project_code), Permission.VIEW)
            project_codes = [request.project_code]
        else:
            project_codes = [
                project.code
                for project in self.project_repository.list_all(active_only=False)
                if self.context.has_permission(project.resource_path, Permission.VIEW)
            ]

        query = request.to_query(project_codes)
        if not project_codes:
            return TimeEntryPage(page=query.page, page_size=query.page_size)

        page = self.time_entry_repository.find_page(query)
        logger.debug(
            "Listed %d of %d entries for %s (page %d)",
            len(page.items),
            page.total_items,
            self.context.user_id,
            page.page
        )
        return page


class TimeEntryService:
    """
    Facade exposing one method per time entry operation.

    Each call builds a fresh use case around the caller's context, so no
    caller state outlives the call.
    """

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        validation_fail_fast: bool = False,
        clear_decline_comment_on_resubmit: bool = False
    ):
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository
        self.validation_fail_fast = validation_fail_fast
        self.clear_decline_comment_on_resubmit = clear_decline_comment_on_resubmit

    @classmethod
    def from_settings(
        cls,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        settings
    ) -> "TimeEntryService":
        return cls(
            time_entry_repository,
            project_repository,
            validation_fail_fast=settings.validation_fail_fast,
            clear_decline_comment_on_resubmit=settings.clear_decline_comment_on_resubmit
        )

    def _command(self, use_case_class, context: UseCaseContext, **kwargs) -> TimeEntryUseCase:
        return use_case_class(
            context,
            self.time_entry_repository,
            self.project_repository,
            validation_fail_fast=self.validation_fail_fast,
            **kwargs
        )

    def create_time_entry(self, context: UseCaseContext, request: LogTimeRequestDTO) -> TimeEntry:
        return self._command(CreateTimeEntryUseCase, context).execute(request)

    def update_time_entry(
        self,
        context: UseCaseContext,
        entry_id: UUID,
        request: UpdateTimeEntryRequestDTO
    ) -> TimeEntry:
        return self._command(UpdateTimeEntryUseCase, context).execute(entry_id, request)

    def move_time_entry(
        self,
        context: UseCaseContext,
        entry_id: UUID,
        request: MoveTimeEntryRequestDTO
    ) -> TimeEntry:
        return self._command(MoveTimeEntryUseCase, context).execute(entry_id, request)

    def update_tags(
        self,
        context: UseCaseContext,
        entry_id: UUID,
        tag_inputs: List[TagInput]
    ) -> TimeEntry:
        request = UpdateTagsRequestDTO(
            tags=[TagInputDTO(name=tag.name, value=tag.value) for tag in tag_inputs]
        )
        return self._command(UpdateTagsUseCase, context).execute(entry_id, request)

    def submit_time_entry(self, context: UseCaseContext, entry_id: UUID) -> TimeEntry:
        use_case = self._command(
            SubmitTimeEntryUseCase,
            context,
            clear_decline_comment_on_resubmit=self.clear_decline_comment_on_resubmit
        )
        return use_case.execute(entry_id)

    def approve_time_entry(self, context: UseCaseContext, entry_id: UUID) -> TimeEntry:
        return self._command(ApproveTimeEntryUseCase, context).execute(entry_id)

    def decline_time_entry(
        self,
        context: UseCaseContext,
        entry_id: UUID,
        comment: Optional[str]
    ) -> TimeEntry:
        request = DeclineTimeEntryRequestDTO(comment=comment)
        return self._command(DeclineTimeEntryUseCase, context).execute(entry_id, request)

    def delete_time_entry(self, context: UseCaseContext, entry_id: UUID) -> bool:
        return self._command(DeleteTimeEntryUseCase, context).execute(entry_id)

    def get_time_entry(self, context: UseCaseContext, entry_id: UUID) -> TimeEntry:
        return GetTimeEntryUseCase(context, self.time_entry_repository).execute(entry_id)

    def list_projects(self, context: UseCaseContext, include_inactive: bool = False) -> List[Project]:
        return ListProjectsUseCase(context, self.project_repository).execute(include_inactive)

    def list_time_entries(self, context: UseCaseContext, request: ListTimeEntriesRequestDTO) -> TimeEntryPage:
        use_case = ListTimeEntriesUseCase(context, self.time_entry_repository, self.project_repository)
        return use_case.execute(request)
