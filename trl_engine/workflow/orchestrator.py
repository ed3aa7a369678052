"""
Multi-Reviewer Workflow Orchestrator
trl_engine/workflow/orchestrator.py

Drives one assessment from reviewer assignment to an archived result.

Every action:
  1. checks the action is legal from the context's current state
     (IllegalTransitionError otherwise)
  2. checks its own preconditions (PreconditionViolationError subclasses)
  3. returns a NEW WorkflowContext with exactly one history entry appended

Contexts are never mutated. Persisting the returned snapshot (and guarding
against concurrent writers) is the caller's job; see
trl_engine.repositories.context_repository.

Usage:
    ctx = create_workflow_context("assessment-1")
    ctx = assign_reviewers(ctx, [alice, bob], performed_by="lead")
    ctx = start_review(ctx, performed_by="lead")
    ctx = submit_score(ctx, "alice", score_a)
    ctx = submit_score(ctx, "bob", score_b)
    ctx = calculate_consensus_and_finalize(ctx)
"""

import structlog
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Union

from trl_engine.config import settings
from trl_engine.core.exceptions import (
    DisagreementNotFoundError,
    InsufficientReviewersError,
    ReviewerNotFoundError,
)
from trl_engine.models.enumerations import (
    ConsensusMethod,
    SessionStatus,
    WorkflowAction,
    WorkflowState,
)
from trl_engine.models.score import MaturityScore, Reviewer
from trl_engine.models.session import ReviewSession
from trl_engine.models.workflow import HistoryEntry, ReviewerAssignment, WorkflowContext
from trl_engine.repositories.reviewer_directory import ReviewerDirectory
from trl_engine.scale.maturity_scale import format_trl_string
from trl_engine.scoring.consensus import calculate_consensus_result, resolve_consensus_method
from trl_engine.scoring.disagreement import filter_significant, identify_disagreements
from trl_engine.scoring.quality_calculator import calculate_assessment_quality
from trl_engine.scoring.utils import to_decimal
from trl_engine.workflow.transitions import ensure_action_allowed, get_next_state

logger = structlog.get_logger(__name__)

SYSTEM_ACTOR = "system"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _transition(
    context: WorkflowContext,
    action: WorkflowAction,
    to_state: WorkflowState,
    performed_by: str,
    notes: Optional[str] = None,
    **updates: Any,
) -> WorkflowContext:
    """New context in ``to_state`` with ``updates`` applied and one history entry added."""
    now = _now()
    entry = HistoryEntry(
        action=action,
        from_state=context.state,
        to_state=to_state,
        performed_by=performed_by,
        timestamp=now,
        notes=notes,
    )

    logger.info(
        "workflow_transition",
        assessment_id=context.assessment_id,
        action=action.value,
        from_state=context.state.value,
        to_state=to_state.value,
        performed_by=performed_by,
    )

    return context.model_copy(update={
        **updates,
        "state": to_state,
        "updated_at": now,
        "history": [*context.history, entry],
    })


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def create_workflow_context(
    assessment_id: str,
    consensus_method: Union[ConsensusMethod, str, None] = None,
    minimum_reviewers: Optional[int] = None,
    require_all_scores: Optional[bool] = None,
    deadline_date: Optional[datetime] = None,
    significant_disagreement_levels: Union[Decimal, float, None] = None,
) -> WorkflowContext:
    """
    New draft context with an empty, scheduled review session.

    Unset options take the configured defaults (weighted average, 2
    reviewers, all scores required, 2-level significance cutoff).
    """
    method = resolve_consensus_method(
        settings.DEFAULT_CONSENSUS_METHOD if consensus_method is None else consensus_method
    )
    significant = (
        settings.SIGNIFICANT_DISAGREEMENT_LEVELS
        if significant_disagreement_levels is None else significant_disagreement_levels
    )

    now = _now()
    context = WorkflowContext(
        assessment_id=assessment_id,
        state=WorkflowState.DRAFT,
        session=ReviewSession(
            assessment_id=assessment_id,
            status=SessionStatus.SCHEDULED,
            created_at=now,
        ),
        consensus_method=method,
        minimum_reviewers=(
            settings.DEFAULT_MINIMUM_REVIEWERS if minimum_reviewers is None else minimum_reviewers
        ),
        require_all_scores=(
            settings.DEFAULT_REQUIRE_ALL_SCORES if require_all_scores is None else require_all_scores
        ),
        deadline_date=deadline_date,
        significant_disagreement_levels=to_decimal(significant),
        created_at=now,
        updated_at=now,
    )
    logger.info(
        "workflow_created",
        assessment_id=assessment_id,
        consensus_method=method.value,
        minimum_reviewers=context.minimum_reviewers,
        require_all_scores=context.require_all_scores,
    )
    return context


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def assign_reviewers(
    context: WorkflowContext,
    reviewers: Sequence[Reviewer],
    performed_by: str = SYSTEM_ACTOR,
    deadlines: Optional[Mapping[str, datetime]] = None,
) -> WorkflowContext:
    """
    Append reviewers and their assignments.

    Duplicates are not filtered. Each assignment's deadline comes from
    ``deadlines[reviewer.id]`` when given, else the context deadline.
    """
    action = WorkflowAction.ASSIGN_REVIEWERS
    ensure_action_allowed(context.state, action, context.assessment_id)

    deadlines = deadlines or {}
    now = _now()
    new_assignments = [
        ReviewerAssignment(
            reviewer_id=reviewer.id,
            role=reviewer.role,
            assigned_at=now,
            deadline=deadlines.get(reviewer.id, context.deadline_date),
            notification_sent=False,
        )
        for reviewer in reviewers
    ]
    session = context.session.model_copy(update={
        "reviewers": [*context.session.reviewers, *reviewers],
    })

    return _transition(
        context,
        action,
        get_next_state(action),
        performed_by,
        notes=f"Assigned {len(reviewers)} reviewer(s)",
        assignments=[*context.assignments, *new_assignments],
        session=session,
    )


def start_review(context: WorkflowContext, performed_by: str = SYSTEM_ACTOR) -> WorkflowContext:
    """
    Open the session for scoring.

    Raises:
        IllegalTransitionError: not awaiting reviewers.
        InsufficientReviewersError: fewer reviewers than ``minimum_reviewers``.
    """
    action = WorkflowAction.START_REVIEW
    ensure_action_allowed(context.state, action, context.assessment_id)

    assigned = len(context.session.reviewers)
    if assigned < context.minimum_reviewers:
        raise InsufficientReviewersError(context.minimum_reviewers, assigned)

    session = context.session.model_copy(update={
        "status": SessionStatus.IN_PROGRESS,
        "started_at": _now(),
    })
    return _transition(context, action, get_next_state(action), performed_by, session=session)


def _scoring_complete(context: WorkflowContext, scores: Mapping[str, MaturityScore]) -> bool:
    if context.require_all_scores:
        return all(rid in scores for rid in context.session.distinct_reviewer_ids)
    return len(scores) >= context.minimum_reviewers


def submit_score(
    context: WorkflowContext,
    reviewer_id: str,
    score: MaturityScore,
    performed_by: Optional[str] = None,
) -> WorkflowContext:
    """
    Record (or replace) a reviewer's score.

    Moves to pending_consensus once every reviewer has scored
    (``require_all_scores``) or at least ``minimum_reviewers`` have.

    Raises:
        IllegalTransitionError: review is not in progress.
        ReviewerNotFoundError: ``reviewer_id`` is not on the session.
    """
    action = WorkflowAction.SUBMIT_SCORE
    ensure_action_allowed(context.state, action, context.assessment_id)

    reviewer = context.session.get_reviewer(reviewer_id)
    if reviewer is None:
        raise ReviewerNotFoundError(reviewer_id)

    scores = dict(context.session.individual_scores)
    scores[reviewer_id] = score

    to_state = (
        WorkflowState.PENDING_CONSENSUS
        if _scoring_complete(context, scores)
        else get_next_state(action)
    )
    session = context.session.model_copy(update={"individual_scores": scores})

    return _transition(
        context,
        action,
        to_state,
        performed_by or reviewer_id,
        notes=f"{reviewer.name} submitted {format_trl_string(score.level, score.sublevel)}",
        session=session,
    )


def request_revision(
    context: WorkflowContext,
    reviewer_id: str,
    reason: str,
    performed_by: str = SYSTEM_ACTOR,
) -> WorkflowContext:
    """
    Withdraw a reviewer's score and send the review back to in-progress.

    Raises:
        IllegalTransitionError: action not legal in the current state.
        ReviewerNotFoundError: ``reviewer_id`` is not on the session.
    """
    action = WorkflowAction.REQUEST_REVISION
    ensure_action_allowed(context.state, action, context.assessment_id)

    if not context.session.has_reviewer(reviewer_id):
        raise ReviewerNotFoundError(reviewer_id)

    scores = dict(context.session.individual_scores)
    scores.pop(reviewer_id, None)
    session = context.session.model_copy(update={"individual_scores": scores})

    return _transition(
        context,
        action,
        get_next_state(action),
        performed_by,
        notes=f"Requested revision from reviewer {reviewer_id}: {reason}",
        session=session,
    )


def calculate_consensus_and_finalize(
    context: WorkflowContext,
    performed_by: str = SYSTEM_ACTOR,
    directory: Optional[ReviewerDirectory] = None,
) -> WorkflowContext:
    """
    Aggregate the submitted scores and either finalize or route to
    disagreement resolution.

    Any disagreement at or above ``significant_disagreement_levels`` keeps
    the session in progress and moves to disagreement_resolution; otherwise
    the session completes and the context is finalized.

    Raises:
        IllegalTransitionError: not pending consensus.
        EmptyScoreSetError: no scores to aggregate.
    """
    action = WorkflowAction.CALCULATE_CONSENSUS
    ensure_action_allowed(context.state, action, context.assessment_id)

    result = calculate_consensus_result(context.session, context.consensus_method, directory)
    disagreements = identify_disagreements(context.session, directory)
    quality = calculate_assessment_quality(
        context.session, result.score, disagreements=disagreements, directory=directory
    )
    significant = filter_significant(disagreements, context.significant_disagreement_levels)

    if significant:
        to_state = WorkflowState.DISAGREEMENT_RESOLUTION
        session = context.session.model_copy(update={
            "consensus_score": result.score,
            "disagreements": disagreements,
            "status": SessionStatus.IN_PROGRESS,
            "completed_at": None,
        })
        notes = f"{len(significant)} significant disagreement(s) require resolution"
    else:
        to_state = get_next_state(action)
        session = context.session.model_copy(update={
            "consensus_score": result.score,
            "disagreements": disagreements,
            "status": SessionStatus.COMPLETED,
            "completed_at": _now(),
        })
        label = format_trl_string(result.score.level, result.score.sublevel)
        notes = f"Consensus reached: {label} (quality: {quality.score}%)"

    return _transition(context, action, to_state, performed_by, notes=notes, session=session)


def resolve_disagreement(
    context: WorkflowContext,
    disagreement_id: str,
    resolution: str,
    performed_by: str = SYSTEM_ACTOR,
) -> WorkflowContext:
    """
    Mark one disagreement resolved. Once all are resolved the context
    returns to pending_consensus so consensus can be recalculated.

    Raises:
        IllegalTransitionError: not in disagreement resolution.
        DisagreementNotFoundError: no disagreement with that id.
    """
    action = WorkflowAction.RESOLVE_DISAGREEMENT
    ensure_action_allowed(context.state, action, context.assessment_id)

    if not any(d.id == disagreement_id for d in context.session.disagreements):
        raise DisagreementNotFoundError(disagreement_id)

    disagreements = [
        d.resolve(resolution, performed_by) if d.id == disagreement_id else d
        for d in context.session.disagreements
    ]
    to_state = (
        get_next_state(action)
        if all(d.resolved for d in disagreements)
        else WorkflowState.DISAGREEMENT_RESOLUTION
    )
    session = context.session.model_copy(update={"disagreements": disagreements})

    return _transition(
        context,
        action,
        to_state,
        performed_by,
        notes=f"Resolved disagreement: {resolution}",
        session=session,
    )


def archive_assessment(context: WorkflowContext, performed_by: str = SYSTEM_ACTOR) -> WorkflowContext:
    action = WorkflowAction.ARCHIVE
    ensure_action_allowed(context.state, action, context.assessment_id)
    return _transition(context, action, get_next_state(action), performed_by)


def reopen_assessment(
    context: WorkflowContext,
    reason: str,
    performed_by: str = SYSTEM_ACTOR,
) -> WorkflowContext:
    """
    Send a finalized or archived assessment back to review. Clears the
    consensus score, disagreements and completion timestamp; submitted
    scores are kept.
    """
    action = WorkflowAction.REOPEN
    ensure_action_allowed(context.state, action, context.assessment_id)

    session = context.session.model_copy(update={
        "consensus_score": None,
        "disagreements": [],
        "status": SessionStatus.IN_PROGRESS,
        "completed_at": None,
    })
    return _transition(
        context,
        action,
        get_next_state(action),
        performed_by,
        notes=f"Assessment reopened: {reason}",
        session=session,
    )
