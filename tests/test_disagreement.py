# tests/test_disagreement.py
"""
Disagreement detection tests.
"""

import pytest
from decimal import Decimal

from trl_engine.models.session import Disagreement
from trl_engine.repositories.reviewer_directory import InMemoryReviewerDirectory
from trl_engine.scoring.disagreement import filter_significant, identify_disagreements


class TestIdentifyDisagreements:
    """Pairwise comparison at the default one-level threshold."""

    def test_two_level_gap(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "3a", "bob": "5a"})
        disagreements = identify_disagreements(session)

        assert len(disagreements) == 1
        d = disagreements[0]
        assert d.id == "alice-bob"
        assert d.reviewer_ids == ("alice", "bob")
        assert d.level_difference == Decimal("2")
        assert d.level_gap == 2
        assert d.description == "Alice Chen rated TRL 3a while Bob Okafor rated TRL 5a"
        assert d.resolved is False

    def test_sub_level_differences_ignored(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "4b", "bob": "4c"})
        assert identify_disagreements(session) == []

    def test_exactly_one_level_counts(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "4b", "bob": "5b"})
        disagreements = identify_disagreements(session)
        assert len(disagreements) == 1
        assert disagreements[0].level_difference == Decimal("1")

    def test_every_pair_checked_in_submission_order(self, alice, bob, carol, make_session):
        session = make_session([alice, bob, carol], {"alice": "2a", "bob": "4a", "carol": "6a"})
        ids = [d.id for d in identify_disagreements(session)]
        assert ids == ["alice-bob", "alice-carol", "bob-carol"]

    def test_custom_threshold(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "4b", "bob": "5b"})
        assert identify_disagreements(session, threshold=Decimal("1.5")) == []

    def test_names_fall_back_when_not_on_session(self, alice, bob, make_session):
        session = make_session([], {"alice": "3a", "bob": "6a"})
        directory = InMemoryReviewerDirectory([alice, bob])
        [d] = identify_disagreements(session, directory)
        assert d.description == "Reviewer 1 rated TRL 3a while Reviewer 2 rated TRL 6a"

    def test_single_score_has_no_pairs(self, alice, make_session):
        assert identify_disagreements(make_session([alice], {"alice": "9c"})) == []


class TestFilterSignificant:
    """Cutoff used to block finalization."""

    def _disagreement(self, difference: str, gap: int) -> Disagreement:
        return Disagreement(
            id="r1-r2",
            reviewer_ids=("r1", "r2"),
            level_difference=Decimal(difference),
            level_gap=gap,
            description="",
        )

    def test_one_level_not_significant(self):
        assert filter_significant([self._disagreement("1.00", 1)]) == []

    def test_two_levels_significant(self):
        assert len(filter_significant([self._disagreement("2.00", 2)])) == 1

    def test_integer_level_gap_counts(self):
        # 4b vs 6a: encoded difference 1.67, integer levels two apart
        assert len(filter_significant([self._disagreement("1.67", 2)])) == 1

    def test_encoded_difference_counts(self):
        # 4a vs 5c: integer levels one apart, encoded difference 1.67
        assert filter_significant([self._disagreement("1.67", 1)]) == []
        assert len(filter_significant([self._disagreement("1.67", 1)], threshold=1.5)) == 1

    def test_from_session(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "4b", "bob": "6a"})
        disagreements = identify_disagreements(session)
        assert disagreements[0].level_difference == Decimal("1.67")
        assert filter_significant(disagreements) == disagreements


class TestDisagreementModel:
    """Resolution and serialization."""

    def test_resolve_returns_new_record(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "3a", "bob": "5a"})
        [original] = identify_disagreements(session)
        resolved = original.resolve("Agreed on 4a after call", "lead")

        assert original.resolved is False
        assert resolved.resolved is True
        assert resolved.resolution == "Agreed on 4a after call"
        assert resolved.resolved_by == "lead"
        assert resolved.resolved_at is not None

    def test_json_difference_is_a_number(self, alice, bob, make_session):
        session = make_session([alice, bob], {"alice": "4b", "bob": "6a"})
        [d] = identify_disagreements(session)
        assert d.model_dump(mode="json")["level_difference"] == pytest.approx(1.67)

    def test_negative_difference_rejected(self):
        with pytest.raises(ValueError):
            Disagreement(
                id="a-b", reviewer_ids=("a", "b"), level_difference=Decimal("-1"), description=""
            )
