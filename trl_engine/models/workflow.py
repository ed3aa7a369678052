from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from trl_engine.models.enumerations import (
    ConsensusMethod,
    ReviewerRole,
    WorkflowAction,
    WorkflowState,
)
from trl_engine.models.session import ReviewSession


class ReviewerAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    reviewer_id: str
    role: ReviewerRole
    assigned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deadline: Optional[datetime] = None
    notification_sent: bool = False


class HistoryEntry(BaseModel):
    """One audit record; appended on every transition, never edited."""

    model_config = ConfigDict(frozen=True)

    action: WorkflowAction
    from_state: WorkflowState
    to_state: WorkflowState
    performed_by: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    notes: Optional[str] = None


class WorkflowContext(BaseModel):
    """
    Aggregate root for one assessment's review lifecycle.

    Contexts are immutable snapshots. Every orchestrator action returns a
    new context; ``version`` is owned by the context repository and is only
    bumped when a snapshot is saved.
    """

    model_config = ConfigDict(frozen=True)

    assessment_id: str = Field(..., min_length=1, max_length=255)
    state: WorkflowState = WorkflowState.DRAFT
    assignments: List[ReviewerAssignment] = Field(default_factory=list)
    session: ReviewSession
    consensus_method: ConsensusMethod = ConsensusMethod.WEIGHTED_AVERAGE
    minimum_reviewers: int = Field(default=2, ge=1)
    require_all_scores: bool = True
    deadline_date: Optional[datetime] = None
    significant_disagreement_levels: Decimal = Field(
        default=Decimal("2"),
        gt=0,
        description="Score gap (in levels) that routes the workflow to disagreement resolution"
    )
    history: List[HistoryEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = Field(default=0, ge=0)

    @field_serializer("significant_disagreement_levels", when_used="json")
    def serialize_significant_levels(self, value: Decimal) -> float:
        return float(value)
