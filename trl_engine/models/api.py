from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from trl_engine.models.definitions import TypicalDuration
from trl_engine.models.enumerations import (
    ConsensusMethod,
    DurationVariant,
    Sublevel,
    TechnologyDomain,
    TRLPhase,
)
from trl_engine.models.evidence import EvidenceRequirement, SubmittedEvidence
from trl_engine.models.score import MaturityScore, Reviewer


# =============================================================================
# WORKFLOW REQUESTS
# =============================================================================

class WorkflowCreate(BaseModel):
    """
    Model for creating a new workflow context.
    """

    assessment_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Assessment the review belongs to"
    )

    consensus_method: Optional[ConsensusMethod] = Field(
        default=None,
        description="Aggregation method (defaults to the configured method)"
    )

    minimum_reviewers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Reviewers required before the review can start"
    )

    require_all_scores: Optional[bool] = Field(
        default=None,
        description="Wait for every reviewer (true) or only minimum_reviewers (false)"
    )

    deadline_date: Optional[datetime] = Field(
        default=None,
        description="Default deadline applied to new assignments"
    )

    significant_disagreement_levels: Optional[float] = Field(
        default=None,
        gt=0,
        le=8,
        description="Score gap that routes to disagreement resolution"
    )


class ReviewerAssignmentRequest(BaseModel):
    reviewers: List[Reviewer] = Field(..., min_length=1)
    deadlines: Dict[str, datetime] = Field(
        default_factory=dict,
        description="Optional per-reviewer deadline overrides keyed by reviewer id"
    )


class ScoreSubmission(BaseModel):
    """
    A reviewer's rating. ``assessed_by`` is set to the reviewer id.
    """

    level: int = Field(..., ge=1, le=9)
    sublevel: Sublevel
    confidence: int = Field(..., ge=0, le=100)
    justification: str = Field(default="", max_length=5000)


class RevisionRequest(BaseModel):
    reviewer_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, max_length=2000)


class DisagreementResolution(BaseModel):
    resolution: str = Field(..., min_length=1, max_length=2000)


class ReopenRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)


# =============================================================================
# RESPONSES
# =============================================================================

class SubmittedScoreResponse(BaseModel):
    reviewer_id: str
    name: str
    score: MaturityScore


class ReviewProgressResponse(BaseModel):
    assessment_id: str
    total_reviewers: int
    scores_submitted: int
    percent_complete: int
    pending: List[str]
    submitted: List[SubmittedScoreResponse]
    deadline_passed: bool


class TRLPositionResponse(BaseModel):
    trl: str = Field(..., description="Compact form, e.g. '4b'")
    label: str = Field(..., description="Display form, e.g. 'TRL 4b'")
    level: int
    sublevel: Sublevel
    numeric: float
    level_name: str
    phase: TRLPhase
    name: str
    description: str


class TRLDefinitionResponse(TRLPositionResponse):
    evidence_requirements: List[EvidenceRequirement]
    exit_criteria: List[str]
    typical_duration: TypicalDuration
    next_trl: Optional[str] = None
    previous_trl: Optional[str] = None


class DurationResponse(BaseModel):
    trl: str
    variant: DurationVariant
    months: int


class EvidenceCheckRequest(BaseModel):
    """
    Evidence a team holds for one TRL position.
    """

    submitted: List[SubmittedEvidence] = Field(
        default_factory=list,
        description="Artifacts by type, with verification status"
    )

    completed: List[str] = Field(
        default_factory=list,
        description="Descriptions of requirements already satisfied"
    )

    domain: Optional[TechnologyDomain] = None


class EvidenceCheckResponse(BaseModel):
    trl: str
    confidence: int = Field(..., ge=0, le=100)
    progress: float = Field(..., ge=0, le=100)
    recommendations: List[str]


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error occurrence timestamp")
