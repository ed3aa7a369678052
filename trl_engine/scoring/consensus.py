"""
Consensus Engine
trl_engine/scoring/consensus.py

Aggregates independent reviewer ratings into one MaturityScore.

Methods:
    weighted_average  Σ(numeric × role_weight) / Σ role_weight, decoded back to a position;
                      confidence averaged with the same weights
    median            middle numeric value (mean of the middle two for even counts)
    conservative      the lowest entry verbatim; first encountered wins ties
    delphi            iterative outlier trimming, then weighted average of the survivors

Role weights:
    domain_expert 1.0 | technical_reviewer 0.8 | general_reviewer 0.6 | observer 0.4

All functions are pure: they read an immutable snapshot and return new values.
"""

import structlog
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from trl_engine.config import settings
from trl_engine.core.exceptions import EmptyScoreSetError
from trl_engine.models.enumerations import ConsensusMethod, ReviewerRole
from trl_engine.models.score import MaturityScore, Reviewer
from trl_engine.models.session import ReviewSession
from trl_engine.repositories.reviewer_directory import ReviewerDirectory
from trl_engine.scale.maturity_scale import numeric_to_trl
from trl_engine.scoring.utils import (
    mean,
    population_std_dev,
    round_half_up,
    to_decimal,
    weighted_mean,
)

logger = structlog.get_logger(__name__)

SYSTEM_ASSESSOR = "system"
MIN_DELPHI_REVIEWERS = 3
MIN_DELPHI_RETAINED = 2


@dataclass(frozen=True)
class ScoredReview:
    """One reviewer's active score, paired with the reviewer's profile."""
    reviewer: Reviewer
    score: MaturityScore

    @property
    def numeric(self) -> Decimal:
        return self.score.numeric

    @property
    def weight(self) -> Decimal:
        return self.reviewer.role.weight


@dataclass
class DelphiResult:
    """Output of calculate_delphi_consensus()."""
    consensus_score: MaturityScore
    rounds: int                       # rounds executed (1 when Delphi did not apply)
    retained: List[ScoredReview]      # entries the final weighted average used


@dataclass
class ConsensusResult:
    """Output of calculate_consensus_result()."""
    score: MaturityScore
    method: ConsensusMethod           # method actually applied (after fallback)
    reviewer_count: int
    rounds: Optional[int] = None      # Delphi only


# ---------------------------------------------------------------------------
# Score extraction
# ---------------------------------------------------------------------------

def create_placeholder_reviewer(reviewer_id: str) -> Reviewer:
    """Stand-in for a reviewer no source knows about."""
    return Reviewer(
        id=reviewer_id,
        name="Unknown",
        role=ReviewerRole.GENERAL_REVIEWER,
    )


def extract_score_pairs(
    session: ReviewSession,
    directory: Optional[ReviewerDirectory] = None,
) -> List[ScoredReview]:
    """
    Pair every submitted score with a reviewer profile, in submission order.

    Profiles come from the session's reviewers first, then the directory,
    then a placeholder "Unknown" general reviewer.
    """
    pairs: List[ScoredReview] = []
    for reviewer_id, score in session.individual_scores.items():
        reviewer = session.get_reviewer(reviewer_id)
        if reviewer is None and directory is not None:
            reviewer = directory.get_reviewer(reviewer_id)
        if reviewer is None:
            reviewer = create_placeholder_reviewer(reviewer_id)
        pairs.append(ScoredReview(reviewer=reviewer, score=score))
    return pairs


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------

def _system_score(numeric: Decimal, confidence: Decimal, justification: str) -> MaturityScore:
    position = numeric_to_trl(numeric)
    return MaturityScore(
        level=position.level,
        sublevel=position.sublevel,
        confidence=round_half_up(confidence),
        justification=justification,
        assessed_at=datetime.now(timezone.utc),
        assessed_by=SYSTEM_ASSESSOR,
    )


def calculate_weighted_average_trl(pairs: Sequence[ScoredReview]) -> MaturityScore:
    """
    Role-weighted mean of numeric scores and confidences.

    Raises:
        EmptyScoreSetError: no scores given.
    """
    if not pairs:
        raise EmptyScoreSetError()

    weights = [p.weight for p in pairs]
    average = weighted_mean([p.numeric for p in pairs], weights)
    confidence = weighted_mean([Decimal(p.score.confidence) for p in pairs], weights)

    return _system_score(
        average,
        confidence,
        f"Weighted average of {len(pairs)} reviewer scores",
    )


def calculate_median_trl(scores: Sequence[MaturityScore]) -> MaturityScore:
    """
    Median numeric score; even counts average the two middle entries
    (confidence too).

    Raises:
        EmptyScoreSetError: no scores given.
    """
    if not scores:
        raise EmptyScoreSetError()

    ordered = sorted(scores, key=lambda s: s.numeric)
    mid = len(ordered) // 2

    if len(ordered) % 2 == 0:
        low, high = ordered[mid - 1], ordered[mid]
        median = (low.numeric + high.numeric) / 2
        confidence = Decimal(low.confidence + high.confidence) / 2
    else:
        median = ordered[mid].numeric
        confidence = Decimal(ordered[mid].confidence)

    return _system_score(
        median,
        confidence,
        f"Median of {len(scores)} reviewer scores",
    )


def calculate_conservative_trl(scores: Sequence[MaturityScore]) -> MaturityScore:
    """
    Lowest entry verbatim (position, confidence, justification).

    Raises:
        EmptyScoreSetError: no scores given.
    """
    if not scores:
        raise EmptyScoreSetError()

    lowest = scores[0]
    for score in scores[1:]:
        if score.numeric < lowest.numeric:
            lowest = score

    return MaturityScore(
        level=lowest.level,
        sublevel=lowest.sublevel,
        confidence=lowest.confidence,
        justification=(
            f"Most conservative score from {len(scores)} reviewers: {lowest.justification}"
        ),
        assessed_at=datetime.now(timezone.utc),
        assessed_by=SYSTEM_ASSESSOR,
    )


def calculate_delphi_consensus(
    pairs: Sequence[ScoredReview],
    max_rounds: Optional[int] = None,
    outlier_std_devs: Union[Decimal, float, None] = None,
    convergence_delta: Union[Decimal, float, None] = None,
    min_std_dev: Union[Decimal, float, None] = None,
) -> DelphiResult:
    """
    Iterative outlier-trimming consensus.

    Fewer than 3 entries: plain weighted average, rounds = 1.

    Otherwise, each round:
      1. mean and population std dev of the retained numeric scores
      2. stop if |mean - previous mean| < convergence_delta or std < min_std_dev
      3. drop entries further than outlier_std_devs × std from the mean
      4. if fewer than 2 survive, keep the 2 entries of the full input
         closest to the mean (lower score, then reviewer id, breaks ties)

    The consensus is the weighted average of whatever remains.

    Raises:
        EmptyScoreSetError: no scores given.
    """
    if len(pairs) < MIN_DELPHI_REVIEWERS:
        return DelphiResult(
            consensus_score=calculate_weighted_average_trl(pairs),
            rounds=1,
            retained=list(pairs),
        )

    max_rounds = settings.DELPHI_MAX_ROUNDS if max_rounds is None else max_rounds
    outlier_std_devs = to_decimal(
        settings.DELPHI_OUTLIER_STD_DEVS if outlier_std_devs is None else outlier_std_devs
    )
    convergence_delta = to_decimal(
        settings.DELPHI_CONVERGENCE_DELTA if convergence_delta is None else convergence_delta
    )
    min_std_dev = to_decimal(
        settings.DELPHI_MIN_STD_DEV if min_std_dev is None else min_std_dev
    )

    retained = list(pairs)
    previous_mean = Decimal("-1")
    rounds = 0

    for _ in range(max_rounds):
        rounds += 1

        values = sorted(p.numeric for p in retained)
        current_mean = mean(values)
        std_dev = population_std_dev(values, current_mean)

        if abs(current_mean - previous_mean) < convergence_delta or std_dev < min_std_dev:
            break

        previous_mean = current_mean

        if std_dev > 0:
            limit = outlier_std_devs * std_dev
            retained = [p for p in retained if abs(p.numeric - current_mean) <= limit]

            if len(retained) < MIN_DELPHI_RETAINED:
                retained = sorted(
                    pairs,
                    key=lambda p: (abs(p.numeric - current_mean), p.numeric, p.reviewer.id),
                )[:MIN_DELPHI_RETAINED]

        logger.debug(
            "delphi_round",
            round=rounds,
            mean=str(current_mean),
            std_dev=str(std_dev),
            retained=len(retained),
        )

    consensus = calculate_weighted_average_trl(retained).model_copy(update={
        "justification": (
            f"Delphi consensus after {rounds} rounds with {len(retained)} reviewers"
        ),
    })
    return DelphiResult(consensus_score=consensus, rounds=rounds, retained=retained)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def resolve_consensus_method(method: Union[ConsensusMethod, str, None]) -> ConsensusMethod:
    """
    Map a selector to a ConsensusMethod. Accepts enum members and their
    string values (hyphens allowed, e.g. "weighted-average"). Unknown
    selectors log a warning and fall back to weighted average.
    """
    if isinstance(method, ConsensusMethod):
        return method
    if isinstance(method, str):
        normalized = method.strip().lower().replace("-", "_")
        try:
            return ConsensusMethod(normalized)
        except ValueError:
            pass

    logger.warning(
        "consensus_method_unknown",
        method=method,
        fallback=ConsensusMethod.WEIGHTED_AVERAGE.value,
    )
    return ConsensusMethod.WEIGHTED_AVERAGE


def calculate_consensus_result(
    session: ReviewSession,
    method: Union[ConsensusMethod, str, None],
    directory: Optional[ReviewerDirectory] = None,
) -> ConsensusResult:
    """Run the selected method over the session's submitted scores."""
    resolved = resolve_consensus_method(method)
    pairs = extract_score_pairs(session, directory)
    rounds: Optional[int] = None

    if resolved is ConsensusMethod.WEIGHTED_AVERAGE:
        score = calculate_weighted_average_trl(pairs)
    elif resolved is ConsensusMethod.MEDIAN:
        score = calculate_median_trl([p.score for p in pairs])
    elif resolved is ConsensusMethod.CONSERVATIVE:
        score = calculate_conservative_trl([p.score for p in pairs])
    elif resolved is ConsensusMethod.DELPHI:
        delphi = calculate_delphi_consensus(pairs)
        score, rounds = delphi.consensus_score, delphi.rounds
    else:
        raise AssertionError(f"Unhandled consensus method: {resolved}")

    logger.info(
        "consensus_calculated",
        assessment_id=session.assessment_id,
        method=resolved.value,
        reviewer_count=len(pairs),
        level=score.level,
        sublevel=score.sublevel.value,
        confidence=score.confidence,
        rounds=rounds,
    )
    return ConsensusResult(
        score=score,
        method=resolved,
        reviewer_count=len(pairs),
        rounds=rounds,
    )


def calculate_consensus(
    session: ReviewSession,
    method: Union[ConsensusMethod, str, None],
    directory: Optional[ReviewerDirectory] = None,
) -> MaturityScore:
    """Consensus score for the session using ``method``."""
    return calculate_consensus_result(session, method, directory).score
