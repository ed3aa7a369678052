"""
scoring/quality_calculator.py

Composite assessment-quality score (0-100) for a review session.

Formula:
    Reviewer Coverage    min(reviewers / 5, 1) × 100         weight 0.2
    Expertise Diversity  distinct roles / 4 × 100             weight 0.2
    Reviewer Agreement   max(0, 100 − 25 × disagreements)     weight 0.3
    Confidence           consensus score confidence           weight 0.3

    quality = round(Σ factor × weight)
"""

import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence

from trl_engine.models.enumerations import ReviewerRole
from trl_engine.models.score import MaturityScore
from trl_engine.models.session import Disagreement, ReviewSession
from trl_engine.repositories.reviewer_directory import ReviewerDirectory
from trl_engine.scoring.disagreement import identify_disagreements
from trl_engine.scoring.utils import clamp, round_half_up

logger = structlog.get_logger(__name__)


@dataclass
class QualityFactor:
    name: str
    score: Decimal      # 0-100
    weight: Decimal


@dataclass
class QualityResult:
    """Output of AssessmentQualityCalculator.calculate()."""
    score: int
    factors: List[QualityFactor] = field(default_factory=list)


class AssessmentQualityCalculator:
    """Weight reviewer coverage, diversity, agreement and confidence into one score."""

    FULL_COVERAGE_REVIEWERS: int = 5
    DISAGREEMENT_PENALTY: Decimal = Decimal("25")

    COVERAGE_WEIGHT: Decimal = Decimal("0.2")
    DIVERSITY_WEIGHT: Decimal = Decimal("0.2")
    AGREEMENT_WEIGHT: Decimal = Decimal("0.3")
    CONFIDENCE_WEIGHT: Decimal = Decimal("0.3")

    def calculate(
        self,
        session: ReviewSession,
        consensus_score: MaturityScore,
        disagreements: Optional[Sequence[Disagreement]] = None,
        directory: Optional[ReviewerDirectory] = None,
    ) -> QualityResult:
        """
        Args:
            session: session whose reviewers and scores are rated.
            consensus_score: the aggregate score; its confidence is one factor.
            disagreements: precomputed disagreements; detected from the
                session when omitted.
            directory: reviewer lookup used when detecting disagreements.
        """
        hundred = Decimal("100")
        reviewer_count = len(session.reviewers)

        coverage = min(
            Decimal(reviewer_count) / Decimal(self.FULL_COVERAGE_REVIEWERS), Decimal("1")
        ) * hundred

        distinct_roles = {r.role for r in session.reviewers}
        diversity = Decimal(len(distinct_roles)) / Decimal(len(ReviewerRole)) * hundred

        if disagreements is None:
            disagreements = identify_disagreements(session, directory)
        agreement = max(Decimal("0"), hundred - self.DISAGREEMENT_PENALTY * len(disagreements))

        confidence = clamp(Decimal(consensus_score.confidence))

        factors = [
            QualityFactor("Reviewer Coverage", coverage, self.COVERAGE_WEIGHT),
            QualityFactor("Expertise Diversity", diversity, self.DIVERSITY_WEIGHT),
            QualityFactor("Reviewer Agreement", agreement, self.AGREEMENT_WEIGHT),
            QualityFactor("Confidence", confidence, self.CONFIDENCE_WEIGHT),
        ]
        total = sum((f.score * f.weight for f in factors), Decimal("0"))
        score = round_half_up(total)

        logger.info(
            "assessment_quality_calculated",
            assessment_id=session.assessment_id,
            quality=score,
            reviewers=reviewer_count,
            distinct_roles=len(distinct_roles),
            disagreements=len(disagreements),
        )
        return QualityResult(score=score, factors=factors)


def calculate_assessment_quality(
    session: ReviewSession,
    consensus_score: MaturityScore,
    disagreements: Optional[Sequence[Disagreement]] = None,
    directory: Optional[ReviewerDirectory] = None,
) -> QualityResult:
    return AssessmentQualityCalculator().calculate(
        session, consensus_score, disagreements, directory
    )
