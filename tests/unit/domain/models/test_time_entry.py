"""
Unit tests for TimeEntry domain model.
"""

import pytest
from datetime import date
from decimal import Decimal

from time_reporting.domain.models import (
    ForbiddenError,
    InvalidTransitionError,
    TimeEntry,
    TimeEntryTag,
    TimeEntryStatus,
    TimeEntryCreatedEvent,
    TimeEntryStatusChangedEvent,
    TimeEntryMovedEvent,
    ValidationError
)


@pytest.fixture
def entry(projects):
    internal = projects[0]
    type_tag = internal.tags[0]
    return TimeEntry.log(
        project=internal,
        task=internal.tasks[0],
        standard_hours=Decimal("8"),
        overtime_hours=Decimal("1.5"),
        start_date=date(2025, 10, 27),
        completion_date=date(2025, 10, 27),
        tags=[TimeEntryTag(tag=type_tag, tag_value=type_tag.values[0])],
        user_id="user-owner"
    )


class TestTimeEntry:
    """Test cases for TimeEntry domain model."""

    def test_log_creates_not_reported_entry(self, entry):
        assert entry.id is not None
        assert entry.status == TimeEntryStatus.NOT_REPORTED
        assert entry.project_code == "INTERNAL"
        assert entry.resource_path == "Project/INTERNAL"
        assert entry.total_hours == Decimal("9.5")
        assert entry.is_editable
        assert entry.version == 1

    def test_log_raises_created_event(self, entry):
        events = entry.pull_events()

        assert len(events) == 1
        assert isinstance(events[0], TimeEntryCreatedEvent)
        assert events[0].event_name == "time_entry.created"
        assert entry.pull_events() == []

    def test_ownership(self, entry):
        assert entry.is_owned_by("user-owner")
        assert not entry.is_owned_by("someone-else")
        assert not entry.is_owned_by(None)

    def test_update_details_changes_only_supplied_fields(self, entry, projects):
        review = projects[0].tasks[1]

        entry.update_details(task=review, standard_hours=Decimal("4"))

        assert entry.task is review
        assert entry.standard_hours == Decimal("4")
        assert entry.overtime_hours == Decimal("1.5")
        assert entry.start_date == date(2025, 10, 27)

    def test_full_approval_cycle(self, entry):
        entry.pull_events()

        entry.submit("user-owner")
        entry.approve("user-approver")

        assert entry.status == TimeEntryStatus.APPROVED
        events = entry.pull_events()
        assert [event.event_name for event in events] == ["time_entry.submitted", "time_entry.approved"]
        assert all(isinstance(event, TimeEntryStatusChangedEvent) for event in events)

    def test_decline_requires_comment(self, entry):
        entry.submit("user-owner")

        for comment in (None, "", "   "):
            with pytest.raises(ValidationError) as exc_info:
                entry.decline("user-approver", comment)
            assert exc_info.value.field == "comment"

        assert entry.status == TimeEntryStatus.SUBMITTED

    def test_decline_stores_trimmed_comment(self, entry):
        entry.submit("user-owner")
        entry.decline("user-approver", "  Wrong task  ")

        assert entry.status == TimeEntryStatus.DECLINED
        assert entry.decline_comment == "Wrong task"
        assert entry.is_editable

    def test_resubmit_keeps_decline_comment_by_default(self, entry):
        entry.submit("user-owner")
        entry.decline("user-approver", "Split the hours")
        entry.submit("user-owner")

        assert entry.status == TimeEntryStatus.SUBMITTED
        assert entry.decline_comment == "Split the hours"

    def test_resubmit_can_clear_decline_comment(self, entry):
        entry.submit("user-owner")
        entry.decline("user-approver", "Split the hours")
        entry.submit("user-owner", clear_decline_comment=True)

        assert entry.decline_comment is None

    def test_approve_not_reported_is_invalid(self, entry):
        with pytest.raises(InvalidTransitionError):
            entry.approve("user-approver")
        assert entry.status == TimeEntryStatus.NOT_REPORTED

    def test_approved_entry_is_immutable(self, entry, projects):
        entry.submit("user-owner")
        entry.approve("user-approver")

        with pytest.raises(ForbiddenError):
            entry.update_details(standard_hours=Decimal("1"))
        with pytest.raises(ForbiddenError):
            entry.replace_tags([])
        with pytest.raises(ForbiddenError):
            entry.move_to(projects[1], projects[1].tasks[0])
        with pytest.raises(ForbiddenError):
            entry.mark_for_deletion("user-owner")
        with pytest.raises(InvalidTransitionError):
            entry.decline("user-approver", "too late")
        with pytest.raises(InvalidTransitionError):
            entry.submit("user-owner")

        assert entry.standard_hours == Decimal("8")
        assert len(entry.tags) == 1

    def test_move_to_other_project_clears_tags(self, entry, projects):
        client_b = projects[1]
        entry.pull_events()

        entry.move_to(client_b, client_b.tasks[0])

        assert entry.project_code == "CLIENT-B"
        assert entry.task.task_name == "Support"
        assert entry.tags == []
        events = entry.pull_events()
        assert isinstance(events[0], TimeEntryMovedEvent)
        assert events[0].old_project_code == "INTERNAL"

    def test_move_within_project_keeps_tags(self, entry, projects):
        internal = projects[0]

        entry.move_to(internal, internal.tasks[1])

        assert entry.task.task_name == "Code Review"
        assert [tag.value for tag in entry.tags] == ["Feature"]
