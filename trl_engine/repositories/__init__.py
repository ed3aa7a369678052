"""
Repositories Package - TRL Assessment Engine
trl_engine/repositories/__init__.py

In-memory implementations of the collaborators the engine consumes:
reviewer lookup and version-checked workflow-context storage.
"""

from trl_engine.repositories.reviewer_directory import (
    InMemoryReviewerDirectory,
    ReviewerDirectory,
)
from trl_engine.repositories.context_repository import WorkflowContextRepository

__all__ = [
    "InMemoryReviewerDirectory",
    "ReviewerDirectory",
    "WorkflowContextRepository",
]
