from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trl_engine.models.enumerations import Sublevel, TRLPhase
from trl_engine.models.evidence import EvidenceRequirement


class TypicalDuration(BaseModel):
    """Typical time spent at one sub-level."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)
    unit: Literal["months", "years"] = "months"

    @model_validator(mode="after")
    def validate_bounds(self):
        """Ensure max >= min."""
        if self.max < self.min:
            raise ValueError("max must be >= min")
        return self


class SublevelDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    evidence_requirements: List[EvidenceRequirement] = Field(default_factory=list)
    exit_criteria: List[str] = Field(default_factory=list)
    typical_duration: TypicalDuration


class LevelDefinition(BaseModel):
    """One of the nine TRL levels with its three sub-levels."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, le=9)
    name: str
    description: str
    phase: TRLPhase
    sublevels: Dict[Sublevel, SublevelDefinition]

    @model_validator(mode="after")
    def validate_sublevels(self):
        """Every level defines exactly a, b and c."""
        if set(self.sublevels) != set(Sublevel):
            raise ValueError(f"TRL {self.level} must define sub-levels a, b and c")
        return self
