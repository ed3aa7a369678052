from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from trl_engine.models.enumerations import ReviewerRole, Sublevel, TechnologyDomain
from trl_engine.scale.maturity_scale import calculate_numeric_trl


class MaturityScore(BaseModel):
    """
    One rating on the 9x3 TRL scale.

    Reviewer-entered scores carry the reviewer's id in ``assessed_by``;
    scores computed by the consensus engine carry ``"system"``.
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(
        ...,
        ge=1,
        le=9,
        description="Integer TRL level (1-9)"
    )

    sublevel: Sublevel = Field(
        ...,
        description="Sub-level within the level (a, b, c)"
    )

    confidence: int = Field(
        ...,
        ge=0,
        le=100,
        description="Reviewer confidence in the rating (0-100)"
    )

    justification: str = Field(
        default="",
        description="Free-text rationale for the rating"
    )

    assessed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the rating was made (UTC)"
    )

    assessed_by: str = Field(
        default="system",
        min_length=1,
        max_length=255,
        description="Identity of the assessor, or 'system' for computed scores"
    )

    @property
    def numeric(self) -> Decimal:
        """Numeric encoding used for arithmetic (e.g. 4b -> 4.33)."""
        return calculate_numeric_trl(self.level, self.sublevel)

    @property
    def label(self) -> str:
        return f"{self.level}{self.sublevel.value}"


class Reviewer(BaseModel):
    """A person rating an assessment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    role: ReviewerRole = Field(
        default=ReviewerRole.GENERAL_REVIEWER,
        description="Role; determines the weighted-average aggregation weight"
    )
    email: str = Field(default="", max_length=255)
    organization: Optional[str] = Field(default=None, max_length=255)
    expertise: List[str] = Field(default_factory=list)
    domains: List[TechnologyDomain] = Field(default_factory=list)
