"""
Review progress and deadline queries.

Pure reads over a WorkflowContext; an external scheduler polls these to
decide on reminders. Nothing here changes state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from trl_engine.models.score import MaturityScore
from trl_engine.models.workflow import ReviewerAssignment, WorkflowContext
from trl_engine.scoring.utils import round_half_up


@dataclass
class SubmittedScore:
    reviewer_id: str
    name: str
    score: MaturityScore


@dataclass
class ReviewProgress:
    """Output of get_review_progress()."""
    total_reviewers: int
    scores_submitted: int
    percent_complete: int                                        # 0-100
    pending: List[str] = field(default_factory=list)             # reviewer names
    submitted: List[SubmittedScore] = field(default_factory=list)


def _aware(value: datetime) -> datetime:
    # naive timestamps are taken as UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def get_review_progress(context: WorkflowContext) -> ReviewProgress:
    """Scoring progress, counting each reviewer id once."""
    session = context.session
    reviewer_ids = session.distinct_reviewer_ids
    total = len(reviewer_ids)
    submitted_count = len(session.individual_scores)
    percent = (
        round_half_up(Decimal(submitted_count) / Decimal(total) * Decimal("100"))
        if total > 0 else 0
    )

    pending = [
        session.get_reviewer(reviewer_id).name for reviewer_id in reviewer_ids
        if reviewer_id not in session.individual_scores
    ]
    submitted = []
    for reviewer_id, score in session.individual_scores.items():
        reviewer = session.get_reviewer(reviewer_id)
        submitted.append(SubmittedScore(
            reviewer_id=reviewer_id,
            name=reviewer.name if reviewer else "Unknown",
            score=score,
        ))

    return ReviewProgress(
        total_reviewers=total,
        scores_submitted=submitted_count,
        percent_complete=percent,
        pending=pending,
        submitted=submitted,
    )


def is_deadline_passed(context: WorkflowContext, now: Optional[datetime] = None) -> bool:
    """True when the context has a deadline and ``now`` is after it."""
    if context.deadline_date is None:
        return False
    now = _aware(now or datetime.now(timezone.utc))
    return now > _aware(context.deadline_date)


def get_overdue_assignments(
    context: WorkflowContext,
    now: Optional[datetime] = None,
) -> List[ReviewerAssignment]:
    """Assignments with a past deadline whose reviewer has not scored yet."""
    now = _aware(now or datetime.now(timezone.utc))
    scored = context.session.individual_scores
    return [
        assignment for assignment in context.assignments
        if assignment.reviewer_id not in scored
        and assignment.deadline is not None
        and _aware(assignment.deadline) < now
    ]
