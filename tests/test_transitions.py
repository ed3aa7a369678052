# tests/test_transitions.py
"""
Transition table tests: every (state, action) pair against the table.
"""

import pytest

from trl_engine.core.exceptions import IllegalTransitionError
from trl_engine.models.enumerations import WorkflowAction, WorkflowState
from trl_engine.workflow.transitions import (
    VALID_TRANSITIONS,
    can_perform_action,
    ensure_action_allowed,
    get_next_state,
)

S = WorkflowState
A = WorkflowAction

EXPECTED_LEGAL = {
    S.DRAFT: {A.ASSIGN_REVIEWERS},
    S.AWAITING_REVIEWERS: {A.START_REVIEW, A.ASSIGN_REVIEWERS},
    S.REVIEW_IN_PROGRESS: {A.SUBMIT_SCORE, A.REQUEST_REVISION},
    S.PENDING_CONSENSUS: {A.CALCULATE_CONSENSUS, A.REQUEST_REVISION},
    S.DISAGREEMENT_RESOLUTION: {A.RESOLVE_DISAGREEMENT, A.REQUEST_REVISION},
    S.FINALIZED: {A.ARCHIVE, A.REOPEN},
    S.ARCHIVED: {A.REOPEN},
}

ALL_PAIRS = [(state, action) for state in WorkflowState for action in WorkflowAction]


class TestTransitionTable:
    """Legal actions per state."""

    def test_table_covers_every_state(self):
        assert set(VALID_TRANSITIONS) == set(WorkflowState)

    @pytest.mark.parametrize("state,action", ALL_PAIRS)
    def test_every_pair(self, state, action):
        assert can_perform_action(state, action) is (action in EXPECTED_LEGAL[state])

    @pytest.mark.parametrize("state", list(WorkflowState))
    def test_unknown_action_never_legal(self, state):
        assert can_perform_action(state, "teleport") is False

    def test_unknown_state_never_legal(self):
        assert can_perform_action("limbo", A.ARCHIVE) is False

    def test_string_names_accepted(self):
        assert can_perform_action("finalized", "archive") is True
        assert can_perform_action("draft", "archive") is False

    def test_finalize_is_reserved(self):
        assert not any(can_perform_action(state, A.FINALIZE) for state in WorkflowState)


class TestNextState:
    """Default target per action."""

    @pytest.mark.parametrize("action,expected", [
        (A.ASSIGN_REVIEWERS, S.AWAITING_REVIEWERS),
        (A.START_REVIEW, S.REVIEW_IN_PROGRESS),
        (A.SUBMIT_SCORE, S.REVIEW_IN_PROGRESS),
        (A.REQUEST_REVISION, S.REVIEW_IN_PROGRESS),
        (A.RESOLVE_DISAGREEMENT, S.PENDING_CONSENSUS),
        (A.CALCULATE_CONSENSUS, S.FINALIZED),
        (A.ARCHIVE, S.ARCHIVED),
        (A.REOPEN, S.REVIEW_IN_PROGRESS),
    ])
    def test_default_targets(self, action, expected):
        assert get_next_state(action) == expected


class TestEnsureActionAllowed:

    def test_legal_action_passes(self):
        ensure_action_allowed(S.DRAFT, A.ASSIGN_REVIEWERS, "assessment-1")

    def test_illegal_action_raises_with_context(self):
        with pytest.raises(IllegalTransitionError) as exc_info:
            ensure_action_allowed(S.DRAFT, A.ARCHIVE, "assessment-1")

        error = exc_info.value
        assert error.action == "archive"
        assert error.state == "draft"
        assert error.assessment_id == "assessment-1"
        assert str(error) == "Cannot 'archive' assessment assessment-1 (state=draft)"
