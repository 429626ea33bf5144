"""
Unit tests for the time entry workflow.
"""

import itertools

import pytest

from time_reporting.domain.models import (
    ForbiddenError,
    InvalidTransitionError,
    TimeEntryStatus,
    INITIAL_STATUS,
    ALLOWED_TRANSITIONS,
    can_transition,
    check_transition,
    is_mutable,
    ensure_mutable
)


LEGAL_EDGES = {
    (TimeEntryStatus.NOT_REPORTED, TimeEntryStatus.SUBMITTED),
    (TimeEntryStatus.SUBMITTED, TimeEntryStatus.APPROVED),
    (TimeEntryStatus.SUBMITTED, TimeEntryStatus.DECLINED),
    (TimeEntryStatus.DECLINED, TimeEntryStatus.SUBMITTED),
}

ALL_PAIRS = list(itertools.product(TimeEntryStatus, repeat=2))


class TestTransitions:
    """Test cases for the transition graph."""

    def test_initial_status_is_not_reported(self):
        assert INITIAL_STATUS == TimeEntryStatus.NOT_REPORTED

    def test_graph_is_exactly_the_four_edges(self):
        assert set(ALLOWED_TRANSITIONS) == LEGAL_EDGES

    @pytest.mark.parametrize("from_status,to_status", sorted(LEGAL_EDGES))
    def test_legal_edges_pass(self, from_status, to_status):
        assert can_transition(from_status, to_status)
        check_transition(from_status, to_status)

    @pytest.mark.parametrize(
        "from_status,to_status",
        [pair for pair in ALL_PAIRS if pair not in LEGAL_EDGES]
    )
    def test_every_other_pair_is_rejected(self, from_status, to_status):
        assert not can_transition(from_status, to_status)

        with pytest.raises(InvalidTransitionError) as exc_info:
            check_transition(from_status, to_status)

        assert exc_info.value.from_status == from_status
        assert exc_info.value.to_status == to_status
        assert exc_info.value.code == "INVALID_TRANSITION"

    def test_twelve_pairs_are_rejected(self):
        rejected = [pair for pair in ALL_PAIRS if not can_transition(*pair)]
        assert len(rejected) == 12

    def test_approved_has_no_outgoing_edge(self):
        assert not any(can_transition(TimeEntryStatus.APPROVED, target) for target in TimeEntryStatus)

    def test_accepts_raw_status_values(self):
        assert can_transition("NOT_REPORTED", "SUBMITTED")
        assert not can_transition("APPROVED", "DECLINED")


class TestMutabilityGate:
    """Test cases for the mutability gate."""

    @pytest.mark.parametrize("status", [TimeEntryStatus.NOT_REPORTED, TimeEntryStatus.DECLINED])
    def test_editable_statuses(self, status):
        assert is_mutable(status)
        ensure_mutable(status)

    @pytest.mark.parametrize("status", [TimeEntryStatus.SUBMITTED, TimeEntryStatus.APPROVED])
    def test_read_only_statuses(self, status):
        assert not is_mutable(status)

        with pytest.raises(ForbiddenError, match=f"entry is read-only in status {status.value}"):
            ensure_mutable(status)
