# tests/test_maturity_scale.py
"""
Maturity Scale Model tests: encoding, inverse, navigation, durations,
formatting and reference-data lookups.
"""

import pytest
from decimal import Decimal

from trl_engine.models.enumerations import DurationVariant, EvidenceType, Sublevel, TRLPhase
from trl_engine.scale.domain_provider import StaticDomainDataProvider
from trl_engine.scale.levels import TRL_LEVELS
from trl_engine.scale.maturity_scale import (
    TRLPosition,
    calculate_cumulative_duration,
    calculate_evidence_progress,
    calculate_numeric_trl,
    format_trl_string,
    get_evidence_requirements,
    get_exit_criteria,
    get_level_definition,
    get_next_trl,
    get_previous_trl,
    get_sublevel_definition,
    iter_trl_scale,
    numeric_to_trl,
    parse_trl_string,
    recommend_next_steps,
)


class TestNumericEncoding:
    """score(level, sublevel) and its inverse."""

    @pytest.mark.parametrize("sublevel,expected", [
        ("a", Decimal("4")),
        ("b", Decimal("4.33")),
        ("c", Decimal("4.67")),
    ])
    def test_sublevel_offsets(self, sublevel, expected):
        assert calculate_numeric_trl(4, sublevel) == expected

    def test_round_trip_all_27_positions(self):
        for position in iter_trl_scale():
            numeric = calculate_numeric_trl(*position)
            assert numeric_to_trl(numeric) == position

    @pytest.mark.parametrize("value,expected", [
        (Decimal("4.16"), (4, Sublevel.A)),
        (Decimal("4.17"), (4, Sublevel.B)),
        (Decimal("4.49"), (4, Sublevel.B)),
        (Decimal("4.5"), (4, Sublevel.C)),
        (Decimal("4.99"), (4, Sublevel.C)),
    ])
    def test_inverse_thresholds(self, value, expected):
        """Boundaries sit at 0.17 and 0.5, not at the encoding offsets."""
        assert numeric_to_trl(value) == expected

    def test_inverse_accepts_floats(self):
        assert numeric_to_trl(5.33) == (5, Sublevel.B)

    def test_inverse_clamps_level(self):
        assert numeric_to_trl(Decimal("0.5")) == (1, Sublevel.C)
        assert numeric_to_trl(Decimal("10.2")) == (9, Sublevel.B)

    @pytest.mark.parametrize("level", [0, 10, -1])
    def test_invalid_level_rejected(self, level):
        with pytest.raises(ValueError):
            calculate_numeric_trl(level, "a")

    def test_invalid_sublevel_rejected(self):
        with pytest.raises(ValueError, match="sublevel"):
            calculate_numeric_trl(3, "d")


class TestNavigation:
    """next / previous sub-level."""

    def test_next_within_level(self):
        assert get_next_trl(4, "a") == TRLPosition(4, Sublevel.B)
        assert get_next_trl(4, "b") == TRLPosition(4, Sublevel.C)

    def test_next_crosses_level_to_a(self):
        assert get_next_trl(4, "c") == TRLPosition(5, Sublevel.A)

    def test_previous_crosses_level_to_c(self):
        assert get_previous_trl(5, "a") == TRLPosition(4, Sublevel.C)

    def test_terminal_positions(self):
        assert get_next_trl(9, "c") is None
        assert get_previous_trl(1, "a") is None

    def test_every_other_position_has_neighbours(self):
        positions = list(iter_trl_scale())
        for index, position in enumerate(positions):
            if index < len(positions) - 1:
                assert get_next_trl(*position) == positions[index + 1]
            if index > 0:
                assert get_previous_trl(*position) == positions[index - 1]

    def test_scale_has_27_ordered_positions(self):
        positions = list(iter_trl_scale())
        assert len(positions) == 27
        assert positions == sorted(positions)
        assert positions[0] == (1, Sublevel.A)
        assert positions[-1] == (9, Sublevel.C)


class TestCumulativeDuration:
    """Months from 1a up to and including a target."""

    def test_first_position(self):
        assert calculate_cumulative_duration(1, "a") == 1
        assert calculate_cumulative_duration(1, "a", "max") == 3

    def test_end_of_level_one(self):
        assert calculate_cumulative_duration(1, "c") == 6
        assert calculate_cumulative_duration(1, "c", DurationVariant.MAX) == 18

    def test_mid_scale(self):
        # 6 + 8 + 12 (levels 1-3) + 3 + 6 (4a, 4b)
        assert calculate_cumulative_duration(4, "b") == 35

    def test_full_scale(self):
        assert calculate_cumulative_duration(9, "c", "min") == 122
        assert calculate_cumulative_duration(9, "c", "max") == 317

    def test_max_never_below_min(self):
        for position in iter_trl_scale():
            assert (
                calculate_cumulative_duration(*position, "max")
                >= calculate_cumulative_duration(*position, "min")
            )

    def test_unknown_variant_rejected(self):
        with pytest.raises(ValueError):
            calculate_cumulative_duration(3, "a", "median")


class TestFormatting:
    """'TRL {level}{sublevel}' formatting and '^[1-9][abc]$' parsing."""

    def test_format(self):
        assert format_trl_string(4, "b") == "TRL 4b"
        assert format_trl_string(7, Sublevel.C) == "TRL 7c"
        assert str(TRLPosition(2, Sublevel.A)) == "TRL 2a"

    def test_parse(self):
        assert parse_trl_string("4b") == TRLPosition(4, Sublevel.B)
        assert parse_trl_string("9c") == TRLPosition(9, Sublevel.C)

    @pytest.mark.parametrize("text", ["", "0a", "10a", "4d", "4B", "TRL 4b", " 4b", "4b ", "4b\n", "4"])
    def test_parse_rejects_non_matching(self, text):
        assert parse_trl_string(text) is None

    def test_parse_rejects_non_strings(self):
        assert parse_trl_string(None) is None


class TestReferenceData:
    """Base NASA table and domain merging."""

    def test_table_shape(self):
        assert sorted(TRL_LEVELS) == list(range(1, 10))
        for level in TRL_LEVELS.values():
            assert set(level.sublevels) == set(Sublevel)

    def test_level_definition(self):
        level = get_level_definition(3)
        assert level.name == "Proof of Concept"
        assert level.phase == TRLPhase.RESEARCH
        assert get_level_definition(9).phase == TRLPhase.DEPLOYMENT

    def test_sublevel_definition(self):
        definition = get_sublevel_definition(6, "b")
        assert definition.name == "Prototype demonstration in progress"
        assert definition.typical_duration.min == 6
        assert definition.typical_duration.max == 12
        assert any(r.type == EvidenceType.VIDEO and not r.required
                   for r in definition.evidence_requirements)

    def test_base_lists_without_domain(self):
        requirements = get_evidence_requirements(1, "a")
        assert [r.description for r in requirements] == [
            "Literature review summary",
            "Relevant prior art identification",
        ]
        assert get_exit_criteria(1, "a")[0] == "Literature review completed"

    def test_domain_lists_appended_after_base(self):
        provider = StaticDomainDataProvider(
            requirements={"energy": {1: {"a": [
                {"type": "data", "description": "Cell chemistry survey", "required": True},
            ]}}},
            exit_criteria={"energy": {1: {"a": ["Target chemistry shortlisted"]}}},
        )
        requirements = get_evidence_requirements(1, "a", domain="energy", provider=provider)
        assert len(requirements) == 3
        assert requirements[-1].description == "Cell chemistry survey"
        assert requirements[-1].type == EvidenceType.DATA

        criteria = get_exit_criteria(1, "a", domain="energy", provider=provider)
        assert criteria[-1] == "Target chemistry shortlisted"
        assert len(criteria) == 4

    def test_domain_without_provider_data_returns_base(self):
        provider = StaticDomainDataProvider()
        assert get_exit_criteria(2, "b", "software", provider) == get_exit_criteria(2, "b")

    def test_unknown_domain_rejected(self):
        provider = StaticDomainDataProvider()
        with pytest.raises(ValueError):
            provider.get_requirements("astrology", 1, "a")


class TestEvidenceProgressAndRecommendations:
    """Required-evidence progress and next-step checklists."""

    def test_progress_counts_required_only(self):
        assert calculate_evidence_progress(1, "a", []) == Decimal("0")
        assert calculate_evidence_progress(1, "a", ["Literature review summary"]) == Decimal("50.00")
        assert calculate_evidence_progress(
            1, "a", ["Literature review summary", "Relevant prior art identification"]
        ) == Decimal("100.00")

    def test_progress_ignores_optional_items(self):
        # 1c: two required, one optional publication
        assert calculate_evidence_progress(1, "c", ["Peer-reviewed publication"]) == Decimal("0")

    def test_progress_rounds_to_two_places(self):
        # 2c: three required
        assert calculate_evidence_progress(2, "c", ["Risk assessment"]) == Decimal("33.33")

    def test_recommendations_list_missing_evidence_then_exit_criteria(self):
        steps = recommend_next_steps(1, "a", ["Literature review summary"])
        assert steps == [
            "Complete 1 required evidence items for TRL 1a:",
            "  - Relevant prior art identification",
            "Ensure exit criteria are met:",
            "  - Literature review completed",
            "  - Basic scientific principles identified",
            "  - Initial hypothesis formulated",
        ]

    def test_recommendations_when_evidence_complete(self):
        steps = recommend_next_steps(
            1, "a", ["Literature review summary", "Relevant prior art identification"]
        )
        assert steps[0] == "Ensure exit criteria are met:"
        assert len(steps) == 4
