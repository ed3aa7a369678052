from decimal import Decimal
from enum import Enum


class Sublevel(str, Enum):
    A = "a"
    B = "b"
    C = "c"


class TRLPhase(str, Enum):
    RESEARCH = "research"
    DEVELOPMENT = "development"
    DEMONSTRATION = "demonstration"
    DEPLOYMENT = "deployment"


class DurationVariant(str, Enum):
    MIN = "min"
    MAX = "max"


class TechnologyDomain(str, Enum):
    ENERGY = "energy"
    AEROSPACE = "aerospace"
    BIOTECH = "biotech"
    MATERIALS = "materials"
    INDUSTRIAL = "industrial"
    SOFTWARE = "software"


class EvidenceType(str, Enum):
    DOCUMENT = "document"
    DATA = "data"
    PUBLICATION = "publication"
    VIDEO = "video"
    PROTOTYPE = "prototype"


class ReviewerRole(str, Enum):
    DOMAIN_EXPERT = "domain_expert"            # weight 1.0
    TECHNICAL_REVIEWER = "technical_reviewer"  # weight 0.8
    GENERAL_REVIEWER = "general_reviewer"      # weight 0.6
    OBSERVER = "observer"                      # weight 0.4

    @property
    def weight(self) -> Decimal:
        """Aggregation weight used by the weighted-average consensus."""
        return REVIEWER_ROLE_WEIGHTS[self]


REVIEWER_ROLE_WEIGHTS = {
    ReviewerRole.DOMAIN_EXPERT: Decimal("1.0"),
    ReviewerRole.TECHNICAL_REVIEWER: Decimal("0.8"),
    ReviewerRole.GENERAL_REVIEWER: Decimal("0.6"),
    ReviewerRole.OBSERVER: Decimal("0.4"),
}


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ConsensusMethod(str, Enum):
    WEIGHTED_AVERAGE = "weighted_average"
    MEDIAN = "median"
    CONSERVATIVE = "conservative"
    DELPHI = "delphi"


class WorkflowState(str, Enum):
    DRAFT = "draft"
    AWAITING_REVIEWERS = "awaiting_reviewers"
    REVIEW_IN_PROGRESS = "review_in_progress"
    PENDING_CONSENSUS = "pending_consensus"
    DISAGREEMENT_RESOLUTION = "disagreement_resolution"
    FINALIZED = "finalized"
    ARCHIVED = "archived"


class WorkflowAction(str, Enum):
    ASSIGN_REVIEWERS = "assign_reviewers"
    START_REVIEW = "start_review"
    SUBMIT_SCORE = "submit_score"
    REQUEST_REVISION = "request_revision"
    RESOLVE_DISAGREEMENT = "resolve_disagreement"
    CALCULATE_CONSENSUS = "calculate_consensus"
    FINALIZE = "finalize"                      # reserved; not legal from any state
    ARCHIVE = "archive"
    REOPEN = "reopen"
