from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from trl_engine.models.enumerations import EvidenceType


class EvidenceRequirement(BaseModel):
    """An artifact expected before a level/sub-level can be claimed."""

    model_config = ConfigDict(frozen=True)

    type: EvidenceType = EvidenceType.DOCUMENT
    description: str = Field(..., min_length=1)
    required: bool = True


class SubmittedEvidence(BaseModel):
    """An artifact a team has actually provided."""

    model_config = ConfigDict(frozen=True)

    type: EvidenceType
    verified: bool = False
    description: Optional[str] = None
