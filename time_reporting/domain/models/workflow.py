"""
Time entry approval workflow.
Defines the status set, the legal transitions between them and the
statuses in which an entry may still be edited or deleted.
"""

from enum import Enum
from typing import FrozenSet, Tuple

from time_reporting.domain.models.base import ForbiddenError, InvalidTransitionError


class TimeEntryStatus(str, Enum):
    """Time entry workflow status."""
    NOT_REPORTED = "NOT_REPORTED"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"


INITIAL_STATUS = TimeEntryStatus.NOT_REPORTED

ALLOWED_TRANSITIONS: FrozenSet[Tuple[TimeEntryStatus, TimeEntryStatus]] = frozenset({
    (TimeEntryStatus.NOT_REPORTED, TimeEntryStatus.SUBMITTED),
    (TimeEntryStatus.SUBMITTED, TimeEntryStatus.APPROVED),
    (TimeEntryStatus.SUBMITTED, TimeEntryStatus.DECLINED),
    (TimeEntryStatus.DECLINED, TimeEntryStatus.SUBMITTED),
})

MUTABLE_STATUSES: FrozenSet[TimeEntryStatus] = frozenset({
    TimeEntryStatus.NOT_REPORTED,
    TimeEntryStatus.DECLINED,
})


def can_transition(from_status: TimeEntryStatus, to_status: TimeEntryStatus) -> bool:
    """Check whether the workflow has an edge from one status to another."""
    return (TimeEntryStatus(from_status), TimeEntryStatus(to_status)) in ALLOWED_TRANSITIONS


def check_transition(from_status: TimeEntryStatus, to_status: TimeEntryStatus) -> None:
    """
    Ensure a transition is legal.

    Raises:
        InvalidTransitionError: If the edge is not part of the workflow
    """
    if not can_transition(from_status, to_status):
        raise InvalidTransitionError(TimeEntryStatus(from_status), TimeEntryStatus(to_status))


def is_mutable(status: TimeEntryStatus) -> bool:
    """Check whether field edits, tag edits and deletion are allowed."""
    return TimeEntryStatus(status) in MUTABLE_STATUSES


def ensure_mutable(status: TimeEntryStatus) -> None:
    """
    Ensure an entry in the given status may be changed or deleted.

    Raises:
        ForbiddenError: If the entry is read-only in its current status
    """
    if not is_mutable(status):
        raise ForbiddenError(f"entry is read-only in status {TimeEntryStatus(status).value}")
