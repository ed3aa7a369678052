from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from trl_engine.models.enumerations import SessionStatus
from trl_engine.models.score import MaturityScore, Reviewer


def normalize_scores(value: Any) -> Dict[str, Any]:
    """
    Collapse the accepted score-collection shapes into one ordered mapping.

    Accepts:
      - a mapping of reviewer id -> score
      - a list of records ``{"reviewer_id" | "reviewerId": ..., "score": ...}``
      - a list of ``(reviewer_id, score)`` pairs

    Later entries for the same reviewer replace earlier ones, keeping the
    position of the first occurrence.
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)

    normalized: Dict[str, Any] = {}
    for item in value:
        if isinstance(item, Mapping):
            reviewer_id = item.get("reviewer_id", item.get("reviewerId"))
            score = item.get("score")
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            reviewer_id, score = item
        else:
            raise ValueError(f"Unrecognised score entry: {item!r}")

        if not reviewer_id:
            raise ValueError(f"Score entry has no reviewer id: {item!r}")
        normalized[str(reviewer_id)] = score
    return normalized


class Disagreement(BaseModel):
    """
    A pair of reviewers whose scores differ by at least the disagreement
    threshold. Only ``resolved``, ``resolution``, ``resolved_at`` and
    ``resolved_by`` change after creation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    reviewer_ids: Tuple[str, str]
    level_difference: Decimal = Field(..., ge=0)
    level_gap: int = Field(
        default=0,
        ge=0,
        description="Difference between the two integer levels (4b vs 6a -> 2)"
    )
    description: str
    resolved: bool = False
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None

    @field_serializer("level_difference", when_used="json")
    def serialize_level_difference(self, value: Decimal) -> float:
        return float(value)

    def resolve(self, resolution: str, resolved_by: str = "system") -> "Disagreement":
        return self.model_copy(update={
            "resolved": True,
            "resolution": resolution,
            "resolved_at": datetime.now(timezone.utc),
            "resolved_by": resolved_by,
        })


class ReviewSession(BaseModel):
    """Reviewers, their scores and the consensus outcome for one assessment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"session-{uuid4()}")
    assessment_id: str = Field(..., min_length=1)
    reviewers: List[Reviewer] = Field(default_factory=list)
    individual_scores: Dict[str, MaturityScore] = Field(
        default_factory=dict,
        description="Reviewer id -> active score, in submission order"
    )
    consensus_score: Optional[MaturityScore] = None
    disagreements: List[Disagreement] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.SCHEDULED
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("individual_scores", mode="before")
    @classmethod
    def normalize_individual_scores(cls, value: Any) -> Dict[str, Any]:
        return normalize_scores(value)

    def get_reviewer(self, reviewer_id: str) -> Optional[Reviewer]:
        """First reviewer record with this id, if any."""
        for reviewer in self.reviewers:
            if reviewer.id == reviewer_id:
                return reviewer
        return None

    def has_reviewer(self, reviewer_id: str) -> bool:
        return self.get_reviewer(reviewer_id) is not None

    @property
    def distinct_reviewer_ids(self) -> List[str]:
        seen: List[str] = []
        for reviewer in self.reviewers:
            if reviewer.id not in seen:
                seen.append(reviewer.id)
        return seen
