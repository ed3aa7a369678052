# tests/conftest.py

"""
Pytest Fixtures - Shared reviewers, scores and workflow contexts

REVIEWER REFERENCE:
- alice: domain_expert       (weight 1.0)
- bob:   technical_reviewer  (weight 0.8)
- carol: general_reviewer    (weight 0.6)
- dave:  observer            (weight 0.4)
"""

import pytest
from uuid import uuid4
from fastapi.testclient import TestClient

from trl_engine.core.dependencies import get_reviewer_directory, get_workflow_repository
from trl_engine.main import app
from trl_engine.models.enumerations import ReviewerRole
from trl_engine.models.score import MaturityScore, Reviewer
from trl_engine.models.session import ReviewSession
from trl_engine.scoring.consensus import ScoredReview
from trl_engine.workflow.orchestrator import create_workflow_context


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture(scope="module")
def client():
    """Create a TestClient for FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clean_stores():
    """Empty the in-memory stores around every test."""
    get_workflow_repository().clear()
    yield
    get_workflow_repository().clear()


# =============================================================================
# REVIEWER FIXTURES
# =============================================================================

@pytest.fixture
def alice():
    return Reviewer(id="alice", name="Alice Chen", role=ReviewerRole.DOMAIN_EXPERT)


@pytest.fixture
def bob():
    return Reviewer(id="bob", name="Bob Okafor", role=ReviewerRole.TECHNICAL_REVIEWER)


@pytest.fixture
def carol():
    return Reviewer(id="carol", name="Carol Diaz", role=ReviewerRole.GENERAL_REVIEWER)


@pytest.fixture
def dave():
    return Reviewer(id="dave", name="Dave Patel", role=ReviewerRole.OBSERVER)


@pytest.fixture
def expert_factory():
    """Build n domain-expert reviewers r1..rn."""
    def _make(n: int):
        return [
            Reviewer(id=f"r{i}", name=f"Reviewer {i}", role=ReviewerRole.DOMAIN_EXPERT)
            for i in range(1, n + 1)
        ]
    return _make


# =============================================================================
# SCORE FIXTURES
# =============================================================================

@pytest.fixture
def make_score():
    """Build a MaturityScore from compact arguments: make_score(4, "b", confidence=80)."""
    def _make(level: int, sublevel: str, confidence: int = 80,
              justification: str = "", assessed_by: str = "reviewer"):
        return MaturityScore(
            level=level,
            sublevel=sublevel,
            confidence=confidence,
            justification=justification,
            assessed_by=assessed_by,
        )
    return _make


@pytest.fixture
def make_pairs(make_score):
    """Pair reviewers with compact scores: make_pairs([(reviewer, "4b", 80), ...])."""
    def _make(entries):
        return [
            ScoredReview(
                reviewer=reviewer,
                score=make_score(int(trl[0]), trl[1], confidence, assessed_by=reviewer.id),
            )
            for reviewer, trl, confidence in entries
        ]
    return _make


@pytest.fixture
def make_session(make_score):
    """Session with reviewers and {reviewer_id: "4b"} scores (confidence 80)."""
    def _make(reviewers, scores):
        return ReviewSession(
            assessment_id="assessment-test",
            reviewers=list(reviewers),
            individual_scores={
                rid: make_score(int(trl[0]), trl[1], assessed_by=rid)
                for rid, trl in scores.items()
            },
        )
    return _make


# =============================================================================
# WORKFLOW FIXTURES
# =============================================================================

@pytest.fixture
def assessment_id():
    return f"assessment-{uuid4()}"


@pytest.fixture
def draft_context(assessment_id):
    """Draft context with default options."""
    return create_workflow_context(assessment_id)


@pytest.fixture
def reviewer_directory():
    return get_reviewer_directory()
