"""
Workflow Router - TRL Assessment Engine
trl_engine/routers/workflows.py

One endpoint per orchestrator action. Each action loads the stored
context, applies the pure transition and saves the result against the
loaded version, so two clients racing on one assessment get a 409 instead
of silently overwriting each other.
"""

from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, Header, status

from trl_engine.config import settings
from trl_engine.core.dependencies import get_reviewer_directory, get_workflow_repository
from trl_engine.models.api import (
    DisagreementResolution,
    ErrorResponse,
    ReopenRequest,
    ReviewerAssignmentRequest,
    ReviewProgressResponse,
    RevisionRequest,
    ScoreSubmission,
    SubmittedScoreResponse,
    WorkflowCreate,
)
from trl_engine.models.score import MaturityScore
from trl_engine.models.workflow import ReviewerAssignment, WorkflowContext
from trl_engine.repositories.context_repository import WorkflowContextRepository
from trl_engine.repositories.reviewer_directory import InMemoryReviewerDirectory
from trl_engine.routers.errors import engine_errors
from trl_engine.workflow import orchestrator
from trl_engine.workflow.progress import (
    get_overdue_assignments,
    get_review_progress,
    is_deadline_passed,
)

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/workflows", tags=["Workflows"])

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Workflow not found"},
    409: {"model": ErrorResponse, "description": "Illegal transition or concurrent modification"},
    422: {"model": ErrorResponse, "description": "Validation or precondition failure"},
}


def get_actor(x_actor: Optional[str] = Header(default=None)) -> Optional[str]:
    """Identity performing the action, from the X-Actor header."""
    return x_actor or None


def _apply(
    repo: WorkflowContextRepository,
    assessment_id: str,
    action: Callable[[WorkflowContext], WorkflowContext],
) -> WorkflowContext:
    with engine_errors():
        loaded = repo.get(assessment_id)
        updated = action(loaded)
        return repo.save(updated, expected_version=loaded.version)


#  Routes

@router.post(
    "",
    response_model=WorkflowContext,
    status_code=status.HTTP_201_CREATED,
    responses={409: _ERROR_RESPONSES[409], 422: _ERROR_RESPONSES[422]},
    summary="Create a workflow",
    description="Creates a draft workflow context with an empty review session.",
)
async def create_workflow(
    payload: WorkflowCreate,
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    with engine_errors():
        context = orchestrator.create_workflow_context(
            payload.assessment_id,
            consensus_method=payload.consensus_method,
            minimum_reviewers=payload.minimum_reviewers,
            require_all_scores=payload.require_all_scores,
            deadline_date=payload.deadline_date,
            significant_disagreement_levels=payload.significant_disagreement_levels,
        )
        return repo.create(context)


@router.get("", response_model=List[str], summary="List workflow assessment ids")
async def list_workflows(
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> List[str]:
    return repo.list_ids()


@router.get(
    "/{assessment_id}",
    response_model=WorkflowContext,
    responses={404: _ERROR_RESPONSES[404]},
    summary="Get a workflow",
)
async def get_workflow(
    assessment_id: str,
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    with engine_errors():
        return repo.get(assessment_id)


@router.post(
    "/{assessment_id}/reviewers",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Assign reviewers",
)
async def assign_reviewers(
    assessment_id: str,
    payload: ReviewerAssignmentRequest,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
    directory: InMemoryReviewerDirectory = Depends(get_reviewer_directory),
) -> WorkflowContext:
    context = _apply(repo, assessment_id, lambda ctx: orchestrator.assign_reviewers(
        ctx,
        payload.reviewers,
        performed_by=actor or orchestrator.SYSTEM_ACTOR,
        deadlines=payload.deadlines,
    ))
    for reviewer in payload.reviewers:
        directory.upsert(reviewer)
    return context


@router.post(
    "/{assessment_id}/start",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Start the review",
)
async def start_review(
    assessment_id: str,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    return _apply(repo, assessment_id, lambda ctx: orchestrator.start_review(
        ctx, performed_by=actor or orchestrator.SYSTEM_ACTOR,
    ))


@router.post(
    "/{assessment_id}/scores/{reviewer_id}",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Submit or replace a reviewer's score",
)
async def submit_score(
    assessment_id: str,
    reviewer_id: str,
    payload: ScoreSubmission,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    score = MaturityScore(
        level=payload.level,
        sublevel=payload.sublevel,
        confidence=payload.confidence,
        justification=payload.justification,
        assessed_by=reviewer_id,
    )
    return _apply(repo, assessment_id, lambda ctx: orchestrator.submit_score(
        ctx, reviewer_id, score, performed_by=actor,
    ))


@router.post(
    "/{assessment_id}/revisions",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Request a revision from a reviewer",
)
async def request_revision(
    assessment_id: str,
    payload: RevisionRequest,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    return _apply(repo, assessment_id, lambda ctx: orchestrator.request_revision(
        ctx,
        payload.reviewer_id,
        payload.reason,
        performed_by=actor or orchestrator.SYSTEM_ACTOR,
    ))


@router.post(
    "/{assessment_id}/consensus",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Calculate consensus",
    description="Finalizes the assessment, or moves it to disagreement resolution "
                "when reviewers are far apart.",
)
async def calculate_consensus(
    assessment_id: str,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
    directory: InMemoryReviewerDirectory = Depends(get_reviewer_directory),
) -> WorkflowContext:
    return _apply(repo, assessment_id, lambda ctx: orchestrator.calculate_consensus_and_finalize(
        ctx,
        performed_by=actor or orchestrator.SYSTEM_ACTOR,
        directory=directory,
    ))


@router.post(
    "/{assessment_id}/disagreements/{disagreement_id}/resolve",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Resolve a disagreement",
)
async def resolve_disagreement(
    assessment_id: str,
    disagreement_id: str,
    payload: DisagreementResolution,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    return _apply(repo, assessment_id, lambda ctx: orchestrator.resolve_disagreement(
        ctx,
        disagreement_id,
        payload.resolution,
        performed_by=actor or orchestrator.SYSTEM_ACTOR,
    ))


@router.post(
    "/{assessment_id}/archive",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Archive a finalized assessment",
)
async def archive_assessment(
    assessment_id: str,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    return _apply(repo, assessment_id, lambda ctx: orchestrator.archive_assessment(
        ctx, performed_by=actor or orchestrator.SYSTEM_ACTOR,
    ))


@router.post(
    "/{assessment_id}/reopen",
    response_model=WorkflowContext,
    responses=_ERROR_RESPONSES,
    summary="Reopen a finalized or archived assessment",
)
async def reopen_assessment(
    assessment_id: str,
    payload: ReopenRequest,
    actor: Optional[str] = Depends(get_actor),
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> WorkflowContext:
    return _apply(repo, assessment_id, lambda ctx: orchestrator.reopen_assessment(
        ctx, payload.reason, performed_by=actor or orchestrator.SYSTEM_ACTOR,
    ))


@router.get(
    "/{assessment_id}/progress",
    response_model=ReviewProgressResponse,
    responses={404: _ERROR_RESPONSES[404]},
    summary="Review progress",
)
async def review_progress(
    assessment_id: str,
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> ReviewProgressResponse:
    with engine_errors():
        context = repo.get(assessment_id)

    progress = get_review_progress(context)
    return ReviewProgressResponse(
        assessment_id=assessment_id,
        total_reviewers=progress.total_reviewers,
        scores_submitted=progress.scores_submitted,
        percent_complete=progress.percent_complete,
        pending=progress.pending,
        submitted=[
            SubmittedScoreResponse(reviewer_id=s.reviewer_id, name=s.name, score=s.score)
            for s in progress.submitted
        ],
        deadline_passed=is_deadline_passed(context),
    )


@router.get(
    "/{assessment_id}/overdue",
    response_model=List[ReviewerAssignment],
    responses={404: _ERROR_RESPONSES[404]},
    summary="Overdue reviewer assignments",
)
async def overdue_assignments(
    assessment_id: str,
    repo: WorkflowContextRepository = Depends(get_workflow_repository),
) -> List[ReviewerAssignment]:
    with engine_errors():
        context = repo.get(assessment_id)
    return get_overdue_assignments(context)
