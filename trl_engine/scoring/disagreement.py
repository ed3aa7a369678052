"""
Disagreement Detection
trl_engine/scoring/disagreement.py

Pairwise comparison of reviewer scores. Every unordered pair whose numeric
scores differ by at least the threshold (1 level by default) yields one
Disagreement; pairs differing by the significance cutoff (2 levels by
default) are the ones that block finalization.
"""

from decimal import Decimal
from typing import List, Optional, Sequence, Union

from trl_engine.config import settings
from trl_engine.models.session import Disagreement, ReviewSession
from trl_engine.repositories.reviewer_directory import ReviewerDirectory
from trl_engine.scale.maturity_scale import format_trl_string
from trl_engine.scoring.consensus import extract_score_pairs
from trl_engine.scoring.utils import to_decimal


def identify_disagreements(
    session: ReviewSession,
    directory: Optional[ReviewerDirectory] = None,
    threshold: Union[Decimal, float, None] = None,
) -> List[Disagreement]:
    """
    One Disagreement per reviewer pair (i < j, submission order) whose
    numeric scores differ by >= ``threshold`` levels.

    Descriptions name reviewers as recorded on the session, falling back to
    "Reviewer 1" / "Reviewer 2" for reviewers the session does not list.
    """
    threshold = to_decimal(
        settings.DISAGREEMENT_THRESHOLD_LEVELS if threshold is None else threshold
    )
    pairs = extract_score_pairs(session, directory)

    disagreements: List[Disagreement] = []
    for i in range(len(pairs)):
        for j in range(i + 1, len(pairs)):
            first, second = pairs[i], pairs[j]
            difference = abs(first.numeric - second.numeric)
            if difference < threshold:
                continue

            first_profile = session.get_reviewer(first.reviewer.id)
            second_profile = session.get_reviewer(second.reviewer.id)
            first_name = first_profile.name if first_profile else "Reviewer 1"
            second_name = second_profile.name if second_profile else "Reviewer 2"

            disagreements.append(Disagreement(
                id=f"{first.reviewer.id}-{second.reviewer.id}",
                reviewer_ids=(first.reviewer.id, second.reviewer.id),
                level_difference=difference,
                level_gap=abs(first.score.level - second.score.level),
                description=(
                    f"{first_name} rated {format_trl_string(first.score.level, first.score.sublevel)} "
                    f"while {second_name} rated {format_trl_string(second.score.level, second.score.sublevel)}"
                ),
            ))
    return disagreements


def filter_significant(
    disagreements: Sequence[Disagreement],
    threshold: Union[Decimal, float, None] = None,
) -> List[Disagreement]:
    """
    Disagreements at least ``threshold`` levels apart (2 by default), measured
    on the integer levels or on the encoded scores, whichever is larger.
    """
    threshold = to_decimal(
        settings.SIGNIFICANT_DISAGREEMENT_LEVELS if threshold is None else threshold
    )
    return [
        d for d in disagreements
        if max(d.level_difference, Decimal(d.level_gap)) >= threshold
    ]
