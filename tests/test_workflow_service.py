"""Tests for workflow state store access and next-status computation."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from printshop.workflow.models import WorkflowStatus
from printshop.workflow.service import (
    WorkflowConfigurationError,
    compute_next_status,
    get_cancelled_status,
    get_final_status,
    get_initial_status,
    list_active_statuses,
    seed_default_statuses,
)


def _statuses(*pairs):
    return [WorkflowStatus(id=i, name=name, sequence=seq, is_active=True) for i, (name, seq) in enumerate(pairs, 1)]


class TestListActiveStatuses:
    def test_ordered_by_sequence(self, db_session, workflow):
        statuses = list_active_statuses(db_session)
        sequences = [s.sequence for s in statuses]
        assert sequences == sorted(sequences)
        assert statuses[0].name == "Cancelled"
        assert statuses[-1].name == "Completed"

    def test_excludes_inactive(self, db_session, workflow):
        workflow["Finishing"].is_active = False
        db_session.commit()
        names = [s.name for s in list_active_statuses(db_session)]
        assert "Finishing" not in names

    def test_unreachable_store_returns_empty(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        assert list_active_statuses(db) == []
        db.rollback.assert_called_once()


class TestSeedDefaultStatuses:
    def test_seeds_once(self, db_session):
        assert seed_default_statuses(db_session) == 9
        db_session.commit()
        assert seed_default_statuses(db_session) == 0

    def test_single_cancelled_sentinel(self, db_session, workflow):
        zero = [s for s in workflow.values() if s.sequence == 0]
        assert [s.name for s in zero] == ["Cancelled"]


class TestComputeNextStatus:
    def test_returns_following_stage(self):
        statuses = _statuses(("Cancelled", 0), ("Pending", 1), ("Received", 2), ("Processing", 3))
        nxt = compute_next_status(statuses, statuses[2].id)
        assert nxt.name == "Processing"

    def test_final_stage_returns_none(self):
        statuses = _statuses(("Pending", 1), ("Received", 2), ("Processing", 3))
        assert compute_next_status(statuses, statuses[2].id) is None

    def test_gap_in_sequence_returns_none(self):
        statuses = _statuses(("Pending", 1), ("Printing", 3))
        assert compute_next_status(statuses, statuses[0].id) is None

    def test_single_entry_returns_none(self):
        statuses = _statuses(("Pending", 1))
        assert compute_next_status(statuses, statuses[0].id) is None

    def test_unknown_current_returns_none(self):
        statuses = _statuses(("Pending", 1), ("Received", 2))
        assert compute_next_status(statuses, 999) is None
        assert compute_next_status(statuses, None) is None

    def test_never_returns_cancelled_sentinel(self):
        statuses = _statuses(("Cancelled", 0), ("Pending", 1), ("Received", 2), ("Completed", 3))
        for status in statuses:
            nxt = compute_next_status(statuses, status.id)
            assert nxt is None or nxt.sequence > 0

    def test_cancelled_has_no_successor(self):
        statuses = _statuses(("Cancelled", 0), ("Pending", 1))
        assert compute_next_status(statuses, statuses[0].id) is None

    def test_empty_store(self):
        assert compute_next_status([], 1) is None


class TestLookups:
    def test_cancelled_resolved_by_sentinel(self, db_session, workflow):
        assert get_cancelled_status(db_session).id == workflow["Cancelled"].id

    def test_missing_cancelled_is_hard_failure(self, db_session, workflow):
        db_session.delete(workflow["Cancelled"])
        db_session.commit()
        with pytest.raises(WorkflowConfigurationError):
            get_cancelled_status(db_session)

    def test_initial_status_is_lowest_positive_sequence(self, db_session, workflow):
        assert get_initial_status(db_session).name == "Pending"

    def test_initial_status_requires_workflow(self, db_session):
        with pytest.raises(WorkflowConfigurationError):
            get_initial_status(db_session)

    def test_final_status(self, db_session, workflow):
        assert get_final_status(list_active_statuses(db_session)).name == "Completed"
        assert get_final_status([]) is None
