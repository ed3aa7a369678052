# tests/test_models.py

"""
Model Validation Tests - Tests for the Pydantic models and enumerations
"""

import pytest
from datetime import datetime
from decimal import Decimal
from pydantic import ValidationError

from trl_engine.models.api import ScoreSubmission, WorkflowCreate
from trl_engine.models.definitions import TypicalDuration
from trl_engine.models.enumerations import (
    ConsensusMethod,
    ReviewerRole,
    Sublevel,
    WorkflowAction,
    WorkflowState,
)
from trl_engine.models.evidence import EvidenceRequirement, SubmittedEvidence
from trl_engine.models.score import MaturityScore, Reviewer
from trl_engine.models.session import ReviewSession, normalize_scores



# ENUMERATION TESTS


class TestEnumerations:
    """Tests for the workflow and scale enumerations."""

    def test_sublevels(self):
        """Test that exactly a, b, c exist in order."""
        assert [s.value for s in Sublevel] == ["a", "b", "c"]

    def test_workflow_states(self):
        """Test that all 7 workflow states are defined."""
        assert [s.value for s in WorkflowState] == [
            "draft", "awaiting_reviewers", "review_in_progress", "pending_consensus",
            "disagreement_resolution", "finalized", "archived",
        ]

    def test_workflow_action_count(self):
        assert len(WorkflowAction) == 9

    def test_consensus_methods(self):
        assert {m.value for m in ConsensusMethod} == {
            "weighted_average", "median", "conservative", "delphi",
        }

    @pytest.mark.parametrize("role,weight", [
        (ReviewerRole.DOMAIN_EXPERT, "1.0"),
        (ReviewerRole.TECHNICAL_REVIEWER, "0.8"),
        (ReviewerRole.GENERAL_REVIEWER, "0.6"),
        (ReviewerRole.OBSERVER, "0.4"),
    ])
    def test_role_weights(self, role, weight):
        """Test that each role carries its aggregation weight."""
        assert role.weight == Decimal(weight)



# MATURITY SCORE TESTS


class TestMaturityScore:
    """Tests for MaturityScore validation."""

    def test_valid_score(self):
        score = MaturityScore(level=4, sublevel="b", confidence=75, assessed_by="alice")
        assert score.sublevel == Sublevel.B
        assert score.numeric == Decimal("4.33")
        assert score.label == "4b"
        assert score.justification == ""

    def test_defaults_to_system_assessor(self):
        assert MaturityScore(level=1, sublevel="a", confidence=0).assessed_by == "system"

    @pytest.mark.parametrize("level", [0, 10])
    def test_level_out_of_range(self, level):
        """Test that levels outside 1-9 are rejected."""
        with pytest.raises(ValidationError):
            MaturityScore(level=level, sublevel="a", confidence=50)

    def test_invalid_sublevel(self):
        with pytest.raises(ValidationError):
            MaturityScore(level=4, sublevel="d", confidence=50)

    @pytest.mark.parametrize("confidence", [-1, 101])
    def test_confidence_out_of_range(self, confidence):
        with pytest.raises(ValidationError):
            MaturityScore(level=4, sublevel="a", confidence=confidence)

    def test_frozen(self):
        score = MaturityScore(level=4, sublevel="a", confidence=50)
        with pytest.raises(ValidationError):
            score.level = 5



# REVIEWER TESTS


class TestReviewer:

    def test_default_role(self):
        reviewer = Reviewer(id="r1", name="Reviewer One")
        assert reviewer.role == ReviewerRole.GENERAL_REVIEWER
        assert reviewer.expertise == []

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Reviewer(id="r1", name="")

    def test_unknown_domain_rejected(self):
        with pytest.raises(ValidationError):
            Reviewer(id="r1", name="Reviewer One", domains=["astrology"])



# SESSION TESTS


class TestScoreNormalization:
    """Tests for the accepted individual-score shapes."""

    def test_mapping(self):
        assert normalize_scores({"a": 1}) == {"a": 1}

    def test_records_with_either_key(self):
        result = normalize_scores([
            {"reviewer_id": "alice", "score": 1},
            {"reviewerId": "bob", "score": 2},
        ])
        assert result == {"alice": 1, "bob": 2}

    def test_pairs(self):
        assert normalize_scores([("alice", 1), ("bob", 2)]) == {"alice": 1, "bob": 2}

    def test_later_entry_replaces_earlier_in_place(self):
        result = normalize_scores([("alice", 1), ("bob", 2), ("alice", 3)])
        assert list(result.items()) == [("alice", 3), ("bob", 2)]

    def test_none(self):
        assert normalize_scores(None) == {}

    def test_entry_without_reviewer_rejected(self):
        with pytest.raises(ValueError, match="no reviewer id"):
            normalize_scores([{"score": 1}])

    def test_unrecognised_entry_rejected(self):
        with pytest.raises(ValueError, match="Unrecognised score entry"):
            normalize_scores(["alice"])

    def test_session_accepts_record_list(self):
        """Test that a ReviewSession built from records has one score per reviewer."""
        session = ReviewSession(
            assessment_id="a-1",
            individual_scores=[
                {"reviewerId": "alice", "score": {"level": 3, "sublevel": "a", "confidence": 50}},
                {"reviewerId": "alice", "score": {"level": 4, "sublevel": "c", "confidence": 60}},
            ],
        )
        assert list(session.individual_scores) == ["alice"]
        assert session.individual_scores["alice"].level == 4


class TestReviewSession:

    def test_defaults(self):
        session = ReviewSession(assessment_id="a-1")
        assert session.id.startswith("session-")
        assert session.individual_scores == {}
        assert session.consensus_score is None

    def test_reviewer_lookup(self, alice, bob):
        session = ReviewSession(assessment_id="a-1", reviewers=[alice, bob, alice])
        assert session.get_reviewer("bob") == bob
        assert session.get_reviewer("eve") is None
        assert session.has_reviewer("alice")
        assert session.distinct_reviewer_ids == ["alice", "bob"]



# DEFINITION AND EVIDENCE TESTS


class TestDefinitions:

    def test_duration_max_below_min_rejected(self):
        with pytest.raises(ValidationError):
            TypicalDuration(min=6, max=3)

    def test_duration_unit(self):
        assert TypicalDuration(min=1, max=3).unit == "months"

    def test_requirement_defaults(self):
        requirement = EvidenceRequirement(description="Test report")
        assert requirement.required is True
        assert requirement.type.value == "document"

    def test_submitted_evidence_defaults_unverified(self):
        assert SubmittedEvidence(type="data").verified is False



# REQUEST MODEL TESTS


class TestRequestModels:

    def test_workflow_create_minimal(self):
        payload = WorkflowCreate(assessment_id="a-1")
        assert payload.consensus_method is None
        assert payload.minimum_reviewers is None

    def test_workflow_create_rejects_zero_reviewers(self):
        with pytest.raises(ValidationError):
            WorkflowCreate(assessment_id="a-1", minimum_reviewers=0)

    def test_workflow_create_deadline_parsed(self):
        payload = WorkflowCreate(assessment_id="a-1", deadline_date="2030-01-01T00:00:00Z")
        assert isinstance(payload.deadline_date, datetime)

    def test_score_submission_bounds(self):
        with pytest.raises(ValidationError):
            ScoreSubmission(level=4, sublevel="b", confidence=120)
