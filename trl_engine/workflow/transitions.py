"""
Workflow Transition Table
trl_engine/workflow/transitions.py

Legal actions per state and the default target state per action.

    draft                    assign_reviewers
    awaiting_reviewers       start_review, assign_reviewers
    review_in_progress       submit_score, request_revision
    pending_consensus        calculate_consensus, request_revision
    disagreement_resolution  resolve_disagreement, request_revision
    finalized                archive, reopen
    archived                 reopen

``finalize`` is a reserved action with no legal source state; finalization
happens through ``calculate_consensus``.
"""

from typing import Dict, FrozenSet, Optional, Union

from trl_engine.core.exceptions import IllegalTransitionError
from trl_engine.models.enumerations import WorkflowAction, WorkflowState

VALID_TRANSITIONS: Dict[WorkflowState, FrozenSet[WorkflowAction]] = {
    WorkflowState.DRAFT: frozenset({WorkflowAction.ASSIGN_REVIEWERS}),
    WorkflowState.AWAITING_REVIEWERS: frozenset({
        WorkflowAction.START_REVIEW,
        WorkflowAction.ASSIGN_REVIEWERS,
    }),
    WorkflowState.REVIEW_IN_PROGRESS: frozenset({
        WorkflowAction.SUBMIT_SCORE,
        WorkflowAction.REQUEST_REVISION,
    }),
    WorkflowState.PENDING_CONSENSUS: frozenset({
        WorkflowAction.CALCULATE_CONSENSUS,
        WorkflowAction.REQUEST_REVISION,
    }),
    WorkflowState.DISAGREEMENT_RESOLUTION: frozenset({
        WorkflowAction.RESOLVE_DISAGREEMENT,
        WorkflowAction.REQUEST_REVISION,
    }),
    WorkflowState.FINALIZED: frozenset({
        WorkflowAction.ARCHIVE,
        WorkflowAction.REOPEN,
    }),
    WorkflowState.ARCHIVED: frozenset({WorkflowAction.REOPEN}),
}

# Default target per action. submit_score, calculate_consensus and
# resolve_disagreement may land elsewhere depending on session contents.
STATE_TRANSITIONS: Dict[WorkflowAction, WorkflowState] = {
    WorkflowAction.ASSIGN_REVIEWERS: WorkflowState.AWAITING_REVIEWERS,
    WorkflowAction.START_REVIEW: WorkflowState.REVIEW_IN_PROGRESS,
    WorkflowAction.SUBMIT_SCORE: WorkflowState.REVIEW_IN_PROGRESS,
    WorkflowAction.REQUEST_REVISION: WorkflowState.REVIEW_IN_PROGRESS,
    WorkflowAction.RESOLVE_DISAGREEMENT: WorkflowState.PENDING_CONSENSUS,
    WorkflowAction.CALCULATE_CONSENSUS: WorkflowState.FINALIZED,
    WorkflowAction.FINALIZE: WorkflowState.FINALIZED,
    WorkflowAction.ARCHIVE: WorkflowState.ARCHIVED,
    WorkflowAction.REOPEN: WorkflowState.REVIEW_IN_PROGRESS,
}


def can_perform_action(
    state: Union[WorkflowState, str],
    action: Union[WorkflowAction, str],
) -> bool:
    """True when ``action`` is legal from ``state``; unknown names are never legal."""
    try:
        state = WorkflowState(state)
        action = WorkflowAction(action)
    except ValueError:
        return False
    return action in VALID_TRANSITIONS[state]


def get_next_state(action: Union[WorkflowAction, str]) -> WorkflowState:
    return STATE_TRANSITIONS[WorkflowAction(action)]


def ensure_action_allowed(
    state: WorkflowState,
    action: WorkflowAction,
    assessment_id: Optional[str] = None,
) -> None:
    """
    Raises:
        IllegalTransitionError: ``action`` is not legal from ``state``.
    """
    if not can_perform_action(state, action):
        raise IllegalTransitionError(
            action=WorkflowAction(action).value,
            state=WorkflowState(state).value,
            assessment_id=assessment_id,
        )
