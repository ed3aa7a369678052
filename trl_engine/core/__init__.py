"""
Core Package - TRL Assessment Engine
trl_engine/core/__init__.py

Core infrastructure: dependencies, exceptions, logging setup.
"""

from trl_engine.core.dependencies import (
    get_domain_provider,
    get_reviewer_directory,
    get_workflow_repository,
)
from trl_engine.core.exceptions import (
    ConcurrentModificationException,
    DisagreementNotFoundError,
    DuplicateEntityException,
    EmptyScoreSetError,
    EntityNotFoundException,
    IllegalTransitionError,
    InsufficientReviewersError,
    PreconditionViolationError,
    RepositoryException,
    ReviewerNotFoundError,
    TRLEngineException,
)
from trl_engine.core.logging_config import configure_logging

__all__ = [
    # Dependencies
    "get_domain_provider",
    "get_reviewer_directory",
    "get_workflow_repository",
    # Exceptions
    "ConcurrentModificationException",
    "DisagreementNotFoundError",
    "DuplicateEntityException",
    "EmptyScoreSetError",
    "EntityNotFoundException",
    "IllegalTransitionError",
    "InsufficientReviewersError",
    "PreconditionViolationError",
    "RepositoryException",
    "ReviewerNotFoundError",
    "TRLEngineException",
    # Logging
    "configure_logging",
]
