"""
Dependencies - TRL Assessment Engine
trl_engine/core/dependencies.py

FastAPI dependency injection for stores and reference-data providers.
"""

from functools import lru_cache

from trl_engine.repositories.context_repository import WorkflowContextRepository
from trl_engine.repositories.reviewer_directory import InMemoryReviewerDirectory
from trl_engine.scale.domain_provider import EmptyDomainDataProvider


@lru_cache()
def get_workflow_repository() -> WorkflowContextRepository:
    """Get cached WorkflowContextRepository instance."""
    return WorkflowContextRepository()


@lru_cache()
def get_reviewer_directory() -> InMemoryReviewerDirectory:
    """Get cached reviewer directory instance."""
    return InMemoryReviewerDirectory()


@lru_cache()
def get_domain_provider() -> EmptyDomainDataProvider:
    """Get cached domain data provider (no domain tables loaded by default)."""
    return EmptyDomainDataProvider()
