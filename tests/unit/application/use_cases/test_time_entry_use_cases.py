"""
Unit tests for the time entry use cases.
"""

import copy
import uuid
from datetime import date
from decimal import Decimal

import pytest

from time_reporting.application.dto.time_entry_dto import (
    ListTimeEntriesRequestDTO,
    MoveTimeEntryRequestDTO,
    UpdateTimeEntryRequestDTO
)
from time_reporting.application.use_cases.base_use_case import UseCaseContext
from time_reporting.application.use_cases.time_entry_use_cases import TimeEntryService
from time_reporting.domain.models.base import (
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidTransitionError,
    ProjectInactiveError,
    ValidationError,
    ValidationErrors
)
from time_reporting.domain.models.workflow import TimeEntryStatus
from time_reporting.domain.services.validation_service import TagInput


OWNER_ID = "user-owner"


class TestCreateTimeEntry:
    """Test cases for logging time."""

    def test_create_success(self, service, owner_context, log_request, time_entry_repository):
        entry = service.create_time_entry(owner_context, log_request())

        assert entry.status == TimeEntryStatus.NOT_REPORTED
        assert entry.user_id == OWNER_ID
        assert entry.user_email == "owner@example.com"
        assert entry.task.task_name == "Development"
        assert [tag.to_dict() for tag in entry.tags] == [{"name": "Type", "value": "Feature"}]
        assert time_entry_repository.save_calls == 1
        assert str(entry.id) in time_entry_repository.entries

    def test_negative_standard_hours(self, service, owner_context, log_request, time_entry_repository):
        with pytest.raises(ValidationError) as exc_info:
            service.create_time_entry(owner_context, log_request(standard_hours=Decimal("-1")))

        assert exc_info.value.field == "standardHours"
        assert exc_info.value.message == "must be >= 0"
        assert time_entry_repository.save_calls == 0

    def test_reversed_dates(self, service, owner_context, log_request, time_entry_repository):
        with pytest.raises(ValidationError) as exc_info:
            service.create_time_entry(
                owner_context,
                log_request(start_date=date(2025, 10, 28), completion_date=date(2025, 10, 27))
            )

        assert exc_info.value.field == "startDate"
        assert exc_info.value.message == "must be <= completionDate"
        assert time_entry_repository.save_calls == 0

    def test_errors_are_aggregated(self, service, owner_context, log_request, time_entry_repository):
        request = log_request(
            task="Unknown",
            standard_hours=Decimal("-1"),
            overtime_hours=Decimal("-2"),
            start_date=date(2025, 10, 28),
            completion_date=date(2025, 10, 27),
            tags=[{"name": "Type", "value": "Chore"}]
        )

        with pytest.raises(ValidationErrors) as exc_info:
            service.create_time_entry(owner_context, request)

        assert exc_info.value.fields == ["task", "tags", "standardHours", "overtimeHours", "startDate"]
        assert exc_info.value.errors[1].allowed_values == ["Feature", "Bug"]
        assert time_entry_repository.save_calls == 0

    def test_fail_fast_reports_first_error(self, time_entry_repository, project_repository, owner_context, log_request):
        service = TimeEntryService(time_entry_repository, project_repository, validation_fail_fast=True)
        request = log_request(task="Unknown", standard_hours=Decimal("-1"))

        with pytest.raises(ValidationError) as exc_info:
            service.create_time_entry(owner_context, request)

        assert exc_info.value.field == "task"

    def test_inactive_task_is_rejected(self, service, owner_context, log_request):
        with pytest.raises(ValidationError) as exc_info:
            service.create_time_entry(owner_context, log_request(task="Legacy"))

        assert exc_info.value.field == "task"

    def test_inactive_tag_is_rejected(self, service, owner_context, log_request):
        with pytest.raises(ValidationError) as exc_info:
            service.create_time_entry(owner_context, log_request(tags=[{"name": "Retired", "value": "Yes"}]))

        assert exc_info.value.field == "tags"

    def test_repeated_tag_is_rejected(self, service, owner_context, log_request, time_entry_repository):
        tags = [{"name": "Type", "value": "Bug"}, {"name": "Type", "value": "Bug"}]

        with pytest.raises(ValidationError) as exc_info:
            service.create_time_entry(owner_context, log_request(tags=tags))

        assert exc_info.value.field == "tags"
        assert time_entry_repository.save_calls == 0

    def test_inactive_project(self, service, owner_context, log_request, time_entry_repository):
        request = log_request(project_code="ARCHIVED", task="Maintenance", tags=[])

        with pytest.raises(ProjectInactiveError) as exc_info:
            service.create_time_entry(owner_context, request)

        assert exc_info.value.code == "INACTIVE"
        assert time_entry_repository.save_calls == 0

    def test_inactive_project_still_reports_hours(self, service, owner_context, log_request):
        request = log_request(project_code="ARCHIVED", task="Maintenance", tags=[], standard_hours=Decimal("-1"))

        with pytest.raises(ValidationErrors) as exc_info:
            service.create_time_entry(owner_context, request)

        assert exc_info.value.fields == ["projectCode", "standardHours"]

    def test_missing_project(self, time_entry_repository, project_repository, log_request):
        context = UseCaseContext.from_claims(OWNER_ID, ["Project=V,E"])
        service = TimeEntryService(time_entry_repository, project_repository)

        with pytest.raises(EntityNotFoundError):
            service.create_time_entry(context, log_request(project_code="NOPE"))

    def test_requires_edit_permission(self, service, approver_context, log_request, time_entry_repository):
        with pytest.raises(ForbiddenError) as exc_info:
            service.create_time_entry(approver_context, log_request())

        assert exc_info.value.required_permission == "E"
        assert exc_info.value.resource_path == "Project/INTERNAL"
        assert time_entry_repository.save_calls == 0

    def test_unauthenticated_caller_is_forbidden(self, service, log_request):
        with pytest.raises(ForbiddenError):
            service.create_time_entry(UseCaseContext(), log_request())


class TestUpdateTimeEntry:
    """Test cases for editing an entry."""

    def test_update_supplied_fields(self, service, owner_context, created_entry):
        request = UpdateTimeEntryRequestDTO(task="Code Review", standard_hours=Decimal("4"))

        entry = service.update_time_entry(owner_context, created_entry.id, request)

        assert entry.task.task_name == "Code Review"
        assert entry.standard_hours == Decimal("4")
        assert entry.description == "Implemented login"
        assert entry.version == 2

    def test_update_validates_merged_dates(self, service, owner_context, created_entry):
        request = UpdateTimeEntryRequestDTO(start_date=date(2025, 11, 1))

        with pytest.raises(ValidationError) as exc_info:
            service.update_time_entry(owner_context, created_entry.id, request)

        assert exc_info.value.field == "startDate"

    def test_update_can_replace_tags(self, service, owner_context, created_entry):
        request = UpdateTimeEntryRequestDTO(tags=[{"name": "Type", "value": "Bug"}])

        entry = service.update_time_entry(owner_context, created_entry.id, request)

        assert [tag.value for tag in entry.tags] == ["Bug"]

    def test_update_after_submit_is_forbidden(self, service, owner_context, log_request, time_entry_repository):
        entry = service.create_time_entry(owner_context, log_request())
        service.submit_time_entry(owner_context, entry.id)
        saves = time_entry_repository.save_calls

        with pytest.raises(ForbiddenError):
            service.update_time_entry(
                owner_context,
                entry.id,
                UpdateTimeEntryRequestDTO(standard_hours=Decimal("1"))
            )

        assert time_entry_repository.save_calls == saves

    def test_update_by_non_owner_is_forbidden(self, service, other_user_context, created_entry):
        with pytest.raises(ForbiddenError):
            service.update_time_entry(
                other_user_context,
                created_entry.id,
                UpdateTimeEntryRequestDTO(description="Not mine")
            )

    def test_update_unknown_entry(self, service, owner_context):
        with pytest.raises(EntityNotFoundError):
            service.update_time_entry(owner_context, uuid.uuid4(), UpdateTimeEntryRequestDTO(description="x"))

    def test_stale_version_conflicts(self, service, owner_context, created_entry, time_entry_repository):
        stale = time_entry_repository.find_by_id(created_entry.id)
        service.update_time_entry(owner_context, created_entry.id, UpdateTimeEntryRequestDTO(description="First"))

        time_entry_repository.find_by_id = lambda entry_id: copy.deepcopy(stale)

        with pytest.raises(ConflictError):
            service.update_time_entry(owner_context, created_entry.id, UpdateTimeEntryRequestDTO(description="Second"))

        assert time_entry_repository.entries[str(created_entry.id)].description == "First"


class TestMoveTimeEntry:
    """Test cases for moving an entry between projects."""

    def test_move_to_other_project_clears_tags(self, service, owner_context, created_entry):
        request = MoveTimeEntryRequestDTO(project_code="CLIENT-B", task="Support")

        entry = service.move_time_entry(owner_context, created_entry.id, request)

        assert entry.project_code == "CLIENT-B"
        assert entry.task.task_name == "Support"
        assert entry.tags == []

    def test_move_within_project_keeps_tags(self, service, owner_context, created_entry):
        request = MoveTimeEntryRequestDTO(project_code="INTERNAL", task="Code Review")

        entry = service.move_time_entry(owner_context, created_entry.id, request)

        assert [tag.value for tag in entry.tags] == ["Feature"]

    def test_move_requires_edit_on_destination(self, service, log_request):
        context = UseCaseContext.from_claims(OWNER_ID, ["Project/INTERNAL=V,E"])
        entry = service.create_time_entry(context, log_request())

        with pytest.raises(ForbiddenError) as exc_info:
            service.move_time_entry(context, entry.id, MoveTimeEntryRequestDTO(project_code="CLIENT-B", task="Support"))

        assert exc_info.value.resource_path == "Project/CLIENT-B"

    def test_move_to_inactive_project(self, service, owner_context, created_entry):
        request = MoveTimeEntryRequestDTO(project_code="ARCHIVED", task="Maintenance")

        with pytest.raises(ProjectInactiveError):
            service.move_time_entry(owner_context, created_entry.id, request)

    def test_move_to_unknown_task(self, service, owner_context, created_entry):
        request = MoveTimeEntryRequestDTO(project_code="CLIENT-B", task="Development")

        with pytest.raises(ValidationError) as exc_info:
            service.move_time_entry(owner_context, created_entry.id, request)

        assert exc_info.value.field == "task"


class TestUpdateTags:
    """Test cases for replacing tags."""

    def test_replace_tags(self, service, owner_context, created_entry):
        entry = service.update_tags(owner_context, created_entry.id, [TagInput("Type", "Bug")])

        assert [tag.to_dict() for tag in entry.tags] == [{"name": "Type", "value": "Bug"}]

    def test_clear_tags(self, service, owner_context, created_entry):
        entry = service.update_tags(owner_context, created_entry.id, [])

        assert entry.tags == []

    def test_disallowed_value_lists_allowed_values(self, service, owner_context, created_entry):
        with pytest.raises(ValidationError) as exc_info:
            service.update_tags(owner_context, created_entry.id, [TagInput("Type", "Chore")])

        assert exc_info.value.allowed_values == ["Feature", "Bug"]

    def test_repeated_tag_is_rejected(self, service, owner_context, created_entry, time_entry_repository):
        saves = time_entry_repository.save_calls

        with pytest.raises(ValidationError) as exc_info:
            service.update_tags(owner_context, created_entry.id, [TagInput("Type", "Bug"), TagInput("Type", "Bug")])

        assert exc_info.value.field == "tags"
        assert time_entry_repository.save_calls == saves


class TestWorkflow:
    """Test cases for submit, approve and decline."""

    def test_submit_and_approve(self, service, owner_context, approver_context, created_entry):
        submitted = service.submit_time_entry(owner_context, created_entry.id)
        approved = service.approve_time_entry(approver_context, created_entry.id)

        assert submitted.status == TimeEntryStatus.SUBMITTED
        assert approved.status == TimeEntryStatus.APPROVED

    def test_viewer_cannot_approve_other_project(self, service, owner_context, viewer_context, created_entry, time_entry_repository):
        service.submit_time_entry(owner_context, created_entry.id)
        time_entry_repository.lookups.clear()
        saves = time_entry_repository.save_calls

        with pytest.raises(ForbiddenError) as exc_info:
            service.approve_time_entry(viewer_context, created_entry.id)

        assert exc_info.value.required_permission == "A"
        assert exc_info.value.resource_path == "Project/INTERNAL"
        assert exc_info.value.permission_name == "Approve"
        assert exc_info.value.message == "Approve permission ('A') required on 'Project/INTERNAL'"
        assert "find_by_id" not in time_entry_repository.lookups
        assert time_entry_repository.save_calls == saves

    def test_owner_without_approve_permission_cannot_approve(self, service, owner_context, created_entry):
        service.submit_time_entry(owner_context, created_entry.id)

        with pytest.raises(ForbiddenError):
            service.approve_time_entry(owner_context, created_entry.id)

    def test_approve_before_submit_is_invalid(self, service, approver_context, created_entry):
        with pytest.raises(InvalidTransitionError):
            service.approve_time_entry(approver_context, created_entry.id)

    def test_submit_twice_is_invalid(self, service, owner_context, created_entry):
        service.submit_time_entry(owner_context, created_entry.id)

        with pytest.raises(InvalidTransitionError):
            service.submit_time_entry(owner_context, created_entry.id)

    def test_submit_by_non_owner_is_forbidden(self, service, other_user_context, created_entry):
        with pytest.raises(ForbiddenError):
            service.submit_time_entry(other_user_context, created_entry.id)

    @pytest.mark.parametrize("comment", [None, "", "   "])
    def test_decline_requires_comment(self, service, owner_context, approver_context, created_entry, comment):
        service.submit_time_entry(owner_context, created_entry.id)

        with pytest.raises(ValidationError) as exc_info:
            service.decline_time_entry(approver_context, created_entry.id, comment)

        assert exc_info.value.field == "comment"

    def test_decline_then_resubmit_keeps_comment(self, service, owner_context, approver_context, created_entry):
        service.submit_time_entry(owner_context, created_entry.id)
        declined = service.decline_time_entry(approver_context, created_entry.id, "Wrong task")

        assert declined.status == TimeEntryStatus.DECLINED
        assert declined.decline_comment == "Wrong task"

        edited = service.update_time_entry(
            owner_context,
            created_entry.id,
            UpdateTimeEntryRequestDTO(task="Code Review")
        )
        resubmitted = service.submit_time_entry(owner_context, created_entry.id)

        assert edited.task.task_name == "Code Review"
        assert resubmitted.status == TimeEntryStatus.SUBMITTED
        assert resubmitted.decline_comment == "Wrong task"

    def test_resubmit_can_clear_comment(self, time_entry_repository, project_repository, owner_context, approver_context, log_request):
        service = TimeEntryService(
            time_entry_repository,
            project_repository,
            clear_decline_comment_on_resubmit=True
        )
        entry = service.create_time_entry(owner_context, log_request())
        service.submit_time_entry(owner_context, entry.id)
        service.decline_time_entry(approver_context, entry.id, "Wrong task")

        resubmitted = service.submit_time_entry(owner_context, entry.id)

        assert resubmitted.decline_comment is None

    def test_approved_entry_is_read_only(self, service, owner_context, approver_context, created_entry):
        service.submit_time_entry(owner_context, created_entry.id)
        service.approve_time_entry(approver_context, created_entry.id)

        with pytest.raises(ForbiddenError):
            service.update_tags(owner_context, created_entry.id, [])
        with pytest.raises(ForbiddenError):
            service.move_time_entry(
                owner_context,
                created_entry.id,
                MoveTimeEntryRequestDTO(project_code="INTERNAL", task="Code Review")
            )
        with pytest.raises(InvalidTransitionError):
            service.submit_time_entry(owner_context, created_entry.id)


class TestDeleteTimeEntry:
    """Test cases for deleting an entry."""

    def test_delete_editable_entry(self, service, owner_context, created_entry, time_entry_repository):
        assert service.delete_time_entry(owner_context, created_entry.id) is True
        assert str(created_entry.id) not in time_entry_repository.entries

        with pytest.raises(EntityNotFoundError):
            service.get_time_entry(owner_context, created_entry.id)

    def test_delete_approved_entry_is_forbidden(self, service, owner_context, approver_context, created_entry, time_entry_repository):
        service.submit_time_entry(owner_context, created_entry.id)
        service.approve_time_entry(approver_context, created_entry.id)

        with pytest.raises(ForbiddenError):
            service.delete_time_entry(owner_context, created_entry.id)

        assert time_entry_repository.delete_calls == 0
        assert str(created_entry.id) in time_entry_repository.entries

    def test_delete_declined_entry(self, service, owner_context, approver_context, created_entry):
        service.submit_time_entry(owner_context, created_entry.id)
        service.decline_time_entry(approver_context, created_entry.id, "Duplicate")

        assert service.delete_time_entry(owner_context, created_entry.id) is True

    def test_delete_by_non_owner_is_forbidden(self, service, other_user_context, created_entry):
        with pytest.raises(ForbiddenError):
            service.delete_time_entry(other_user_context, created_entry.id)


class TestQueries:
    """Test cases for reads."""

    def test_get_requires_view(self, service, viewer_context, approver_context, created_entry):
        assert service.get_time_entry(approver_context, created_entry.id).id == created_entry.id

        with pytest.raises(ForbiddenError) as exc_info:
            service.get_time_entry(viewer_context, created_entry.id)

        assert exc_info.value.required_permission == "V"

    def test_list_projects_filters_by_view(self, service, viewer_context, owner_context):
        assert [p.code for p in service.list_projects(viewer_context)] == ["CLIENT-B"]
        assert [p.code for p in service.list_projects(owner_context)] == ["CLIENT-B", "INTERNAL"]
        assert [p.code for p in service.list_projects(owner_context, include_inactive=True)] == [
            "ARCHIVED", "CLIENT-B", "INTERNAL"
        ]

    def test_list_projects_requires_authentication(self, service):
        with pytest.raises(ForbiddenError):
            service.list_projects(UseCaseContext())


class TestListTimeEntries:
    """Test cases for the paged time entry listing."""

    @pytest.fixture
    def entries(self, service, owner_context, log_request):
        """Three INTERNAL entries and one CLIENT-B entry, keyed by label."""
        return {
            "early": service.create_time_entry(owner_context, log_request(
                standard_hours=Decimal("2"),
                start_date=date(2025, 10, 20),
                completion_date=date(2025, 10, 21)
            )),
            "mid": service.create_time_entry(owner_context, log_request()),
            "late": service.create_time_entry(owner_context, log_request(
                standard_hours=Decimal("4"),
                start_date=date(2025, 11, 3),
                completion_date=date(2025, 11, 3)
            )),
            "client": service.create_time_entry(owner_context, log_request(
                project_code="CLIENT-B",
                task="Support",
                standard_hours=Decimal("1"),
                start_date=date(2025, 10, 29),
                completion_date=date(2025, 10, 30),
                tags=[]
            )),
        }

    @staticmethod
    def ids(page):
        return [entry.id for entry in page.items]

    def test_default_order_is_newest_start_first(self, service, owner_context, entries):
        page = service.list_time_entries(owner_context, ListTimeEntriesRequestDTO())

        assert self.ids(page) == [entries[key].id for key in ("late", "client", "mid", "early")]
        assert page.total_items == 4
        assert page.page_size == 50
        assert not page.has_next

    def test_only_viewable_projects_are_listed(self, service, viewer_context, approver_context, entries):
        assert self.ids(service.list_time_entries(viewer_context, ListTimeEntriesRequestDTO())) == [entries["client"].id]

        page = service.list_time_entries(approver_context, ListTimeEntriesRequestDTO())
        assert {entry.project_code for entry in page.items} == {"INTERNAL"}
        assert page.total_items == 3

    def test_paging(self, service, owner_context, entries):
        first = service.list_time_entries(owner_context, ListTimeEntriesRequestDTO(page_size=3))
        second = service.list_time_entries(owner_context, ListTimeEntriesRequestDTO(page=2, page_size=3))

        assert len(first.items) == 3
        assert first.total_pages == 2
        assert first.has_next and not first.has_previous
        assert self.ids(second) == [entries["early"].id]
        assert second.has_previous and not second.has_next

    def test_sort_ascending_by_hours(self, service, owner_context, entries):
        request = ListTimeEntriesRequestDTO(sort_by="standardHours", sort_order="asc")

        page = service.list_time_entries(owner_context, request)

        assert self.ids(page) == [entries[key].id for key in ("client", "early", "late", "mid")]

    def test_date_range_matches_overlapping_entries(self, service, owner_context, entries):
        request = ListTimeEntriesRequestDTO(date_from=date(2025, 10, 28), date_to=date(2025, 10, 29))

        page = service.list_time_entries(owner_context, request)

        assert self.ids(page) == [entries["client"].id, entries["mid"].id]

    def test_filter_by_status(self, service, owner_context, entries):
        service.submit_time_entry(owner_context, entries["mid"].id)

        page = service.list_time_entries(owner_context, ListTimeEntriesRequestDTO(status="SUBMITTED"))

        assert self.ids(page) == [entries["mid"].id]
        assert page.items[0].status == TimeEntryStatus.SUBMITTED

    def test_filter_by_user_and_project(self, service, other_user_context, approver_context, log_request, entries):
        other = service.create_time_entry(other_user_context, log_request())

        by_user = service.list_time_entries(approver_context, ListTimeEntriesRequestDTO(user_id="user-other"))
        by_project = service.list_time_entries(approver_context, ListTimeEntriesRequestDTO(project_code="INTERNAL"))

        assert self.ids(by_user) == [other.id]
        assert by_project.total_items == 4

    def test_project_without_view_is_forbidden(self, service, viewer_context, entries, time_entry_repository):
        with pytest.raises(ForbiddenError) as exc_info:
            service.list_time_entries(viewer_context, ListTimeEntriesRequestDTO(project_code="INTERNAL"))

        assert exc_info.value.required_permission == "V"
        assert "find_page" not in time_entry_repository.lookups

    def test_caller_without_visible_projects_gets_empty_page(self, service, entries, time_entry_repository):
        context = UseCaseContext.from_claims(user_id="user-none", acl_claims=["Project/NOPE=E"])

        page = service.list_time_entries(context, ListTimeEntriesRequestDTO())

        assert page.items == []
        assert page.total_items == 0
        assert "find_page" not in time_entry_repository.lookups

    def test_reversed_date_range(self, service, owner_context):
        request = ListTimeEntriesRequestDTO(date_from=date(2025, 11, 1), date_to=date(2025, 10, 1))

        with pytest.raises(ValidationError) as exc_info:
            service.list_time_entries(owner_context, request)

        assert exc_info.value.field == "dateFrom"

    def test_requires_authentication(self, service):
        with pytest.raises(ForbiddenError):
            service.list_time_entries(UseCaseContext(), ListTimeEntriesRequestDTO())
