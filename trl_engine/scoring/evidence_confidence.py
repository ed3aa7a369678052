"""
scoring/evidence_confidence.py

Evidence-completeness confidence for one TRL position.

Formula:
    weight(req)  = type_weight × (1.5 if required else 1.0)
    credit(req)  = weight       if a verified item of that type was submitted
                 = 0.7 × weight if only an unverified one was
                 = 0            otherwise
    confidence   = round(Σ credit / Σ weight × 100)     (0 when no requirements)

Type weights:
    document 0.15 | data 0.25 | publication 0.20 | video 0.10 | prototype 0.30

Only the first submitted item of a given type is considered.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from trl_engine.models.enumerations import EvidenceType, Sublevel, TechnologyDomain
from trl_engine.models.evidence import SubmittedEvidence
from trl_engine.scale.domain_provider import DomainDataProvider
from trl_engine.scale.maturity_scale import get_evidence_requirements
from trl_engine.scoring.utils import round_half_up

logger = logging.getLogger(__name__)

EVIDENCE_TYPE_WEIGHTS = {
    EvidenceType.DOCUMENT: Decimal("0.15"),
    EvidenceType.DATA: Decimal("0.25"),
    EvidenceType.PUBLICATION: Decimal("0.20"),
    EvidenceType.VIDEO: Decimal("0.10"),
    EvidenceType.PROTOTYPE: Decimal("0.30"),
}


@dataclass
class EvidenceConfidenceResult:
    """Output of EvidenceConfidenceCalculator.calculate()."""
    confidence: int             # 0-100
    total_weight: Decimal
    completed_weight: Decimal
    requirement_count: int
    matched_count: int


def _as_pair(item: Union[SubmittedEvidence, Mapping[str, Any]]) -> Tuple[str, bool]:
    if isinstance(item, SubmittedEvidence):
        return item.type.value, item.verified
    etype = item.get("type", "")
    if isinstance(etype, EvidenceType):
        etype = etype.value
    return str(etype), bool(item.get("verified", False))


class EvidenceConfidenceCalculator:
    """Score how completely submitted evidence covers a position's requirements."""

    REQUIRED_MULTIPLIER: Decimal = Decimal("1.5")
    UNVERIFIED_CREDIT: Decimal = Decimal("0.7")

    def calculate(
        self,
        level: int,
        sublevel: Union[Sublevel, str],
        submitted_evidence: Iterable[Union[SubmittedEvidence, Mapping[str, Any]]],
        domain: Optional[Union[TechnologyDomain, str]] = None,
        provider: Optional[DomainDataProvider] = None,
    ) -> EvidenceConfidenceResult:
        """
        Args:
            level: TRL level (1-9).
            sublevel: a, b or c.
            submitted_evidence: SubmittedEvidence items or ``{"type", "verified"}`` mappings.
            domain: optional domain whose provider requirements are added.
            provider: domain data provider used with ``domain``.

        Examples:
            >>> calc = EvidenceConfidenceCalculator()
            >>> calc.calculate(1, "a", [{"type": "document", "verified": True}]).confidence
            100
        """
        requirements = get_evidence_requirements(level, sublevel, domain, provider)
        submitted: List[Tuple[str, bool]] = [_as_pair(item) for item in submitted_evidence]

        total_weight = Decimal("0")
        completed_weight = Decimal("0")
        matched = 0

        for requirement in requirements:
            weight = EVIDENCE_TYPE_WEIGHTS[requirement.type]
            if requirement.required:
                weight *= self.REQUIRED_MULTIPLIER
            total_weight += weight

            match = next((v for t, v in submitted if t == requirement.type.value), None)
            if match is None:
                continue
            matched += 1
            completed_weight += weight if match else weight * self.UNVERIFIED_CREDIT

        confidence = (
            round_half_up(completed_weight / total_weight * Decimal("100"))
            if total_weight > 0 else 0
        )

        logger.debug(
            "evidence_confidence_calculated",
            extra={
                "level": level,
                "sublevel": Sublevel(sublevel).value,
                "requirements": len(requirements),
                "matched": matched,
                "confidence": confidence,
            },
        )

        return EvidenceConfidenceResult(
            confidence=confidence,
            total_weight=total_weight,
            completed_weight=completed_weight,
            requirement_count=len(requirements),
            matched_count=matched,
        )


def calculate_evidence_confidence(
    level: int,
    sublevel: Union[Sublevel, str],
    submitted_evidence: Iterable[Union[SubmittedEvidence, Mapping[str, Any]]],
    domain: Optional[Union[TechnologyDomain, str]] = None,
    provider: Optional[DomainDataProvider] = None,
) -> int:
    """Evidence confidence (0-100) for a position."""
    return EvidenceConfidenceCalculator().calculate(
        level, sublevel, submitted_evidence, domain, provider
    ).confidence
