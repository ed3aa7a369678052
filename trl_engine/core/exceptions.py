"""
Custom Exceptions - TRL Assessment Engine
trl_engine/core/exceptions.py

Custom exception classes for workflow transitions, consensus inputs
and context storage.
"""

from typing import Optional


class TRLEngineException(Exception):
    """Base exception for the TRL engine."""

    pass


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------

class IllegalTransitionError(TRLEngineException):
    """Action is not permitted from the workflow's current state."""

    def __init__(self, action: str, state: str, assessment_id: Optional[str] = None):
        self.action = action
        self.state = state
        self.assessment_id = assessment_id
        target = f"assessment {assessment_id}" if assessment_id else "assessment"
        super().__init__(f"Cannot '{action}' {target} (state={state})")


class PreconditionViolationError(TRLEngineException):
    """Action is legal in the current state but its inputs are not acceptable."""

    pass


class InsufficientReviewersError(PreconditionViolationError):
    """Too few reviewers assigned to start the review."""

    def __init__(self, required: int, assigned: int):
        self.required = required
        self.assigned = assigned
        super().__init__(
            f"Minimum {required} reviewers required, only {assigned} assigned"
        )


class ReviewerNotFoundError(PreconditionViolationError):
    """Reviewer is not a member of the review session."""

    def __init__(self, reviewer_id: str):
        self.reviewer_id = reviewer_id
        super().__init__(f"Reviewer {reviewer_id} not found in session")


class DisagreementNotFoundError(PreconditionViolationError):
    """Disagreement id is not recorded on the review session."""

    def __init__(self, disagreement_id: str):
        self.disagreement_id = disagreement_id
        super().__init__(f"Disagreement {disagreement_id} not found in session")


# ---------------------------------------------------------------------------
# Consensus inputs
# ---------------------------------------------------------------------------

class EmptyScoreSetError(TRLEngineException, ValueError):
    """Consensus requested over zero reviewer scores."""

    def __init__(self, message: str = "No scores provided"):
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class RepositoryException(TRLEngineException):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in the store."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists"):
        self.message = message
        super().__init__(message)


class ConcurrentModificationException(RepositoryException):
    """Stored entity changed since the caller loaded it."""

    def __init__(self, entity_id: str, expected_version: int, actual_version: int):
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Entity {entity_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
