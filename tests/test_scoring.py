"""
Tests for the score calculator

Tests cover:
- Status credit (compliant, partial, not_applicable)
- Severity weighting
- Empty groups
- Half-up rounding
- Score dimensions, including list-valued license_types
"""
import pytest

from caelex.engine import (
    calculate_scores,
    group_by_dimension,
    group_score,
    points_to_score,
    round_half_up,
)
from caelex.models import BindingLevel, ComplianceStatus

from tests.conftest import make_pack, make_requirement, make_statuses


def weight_by_severity(requirement):
    return {"critical": 3, "major": 2, "minor": 1}[requirement.severity]


# =============================================================================
# Rounding
# =============================================================================

class TestRounding:
    """round_half_up and points_to_score."""

    @pytest.mark.parametrize("value,expected", [
        (62.5, 63),
        (62.49, 62),
        (0.5, 1),
        (99.5, 100),
        (100.0, 100),
        (0.0, 0),
    ])
    def test_round_half_up(self, value, expected):
        """Halves round up, unlike banker's rounding."""
        assert round_half_up(value) == expected

    def test_zero_total_is_full_score(self):
        """Nothing to score means 100."""
        assert points_to_score(0, 0) == 100

    def test_two_thirds(self):
        """2/3 rounds to 67."""
        assert points_to_score(2, 3) == 67


# =============================================================================
# Group Scores
# =============================================================================

class TestGroupScore:
    """Weighted group scores."""

    def test_all_compliant(self):
        """Every requirement compliant scores 100."""
        reqs = [make_requirement("A"), make_requirement("B", severity="minor")]
        statuses = make_statuses({"A": "compliant", "B": "compliant"})
        assert group_score(reqs, statuses, weight_by_severity) == 100

    def test_missing_status_scores_zero(self):
        """Unassessed requirements earn nothing."""
        reqs = [make_requirement("A")]
        assert group_score(reqs, {}, weight_by_severity) == 0

    def test_partial_earns_half(self):
        """A single partial requirement scores 50."""
        reqs = [make_requirement("A")]
        assert group_score(reqs, make_statuses({"A": "partial"}), weight_by_severity) == 50

    def test_severity_weighting(self):
        """Critical compliant (3) + minor non-compliant (1) = 75."""
        reqs = [make_requirement("A", severity="critical"), make_requirement("B", severity="minor")]
        statuses = make_statuses({"A": "compliant", "B": "non_compliant"})
        assert group_score(reqs, statuses, weight_by_severity) == 75

    def test_not_applicable_excluded(self):
        """not_applicable drops out of the denominator."""
        reqs = [make_requirement("A"), make_requirement("B")]
        statuses = make_statuses({"A": "compliant", "B": "not_applicable"})
        assert group_score(reqs, statuses, weight_by_severity) == 100

    def test_all_not_applicable(self):
        """A group with only not_applicable entries scores 100."""
        reqs = [make_requirement("A")]
        assert group_score(reqs, make_statuses({"A": "not_applicable"}), weight_by_severity) == 100

    def test_empty_group(self):
        """An empty group scores 100."""
        assert group_score([], {}, weight_by_severity) == 100

    def test_half_rounds_up(self):
        """Critical partial (1.5 of 3) plus minor compliant (1 of 1) is 62.5, shown as 63."""
        reqs = [
            make_requirement("A", severity="critical"),
            make_requirement("B", severity="minor"),
        ]
        statuses = make_statuses({"A": "partial", "B": "compliant"})
        assert group_score(reqs, statuses, weight_by_severity) == 63


# =============================================================================
# Dimensions
# =============================================================================

class TestDimensions:
    """Grouping by requirement attributes."""

    def test_group_by_category(self):
        """Groups are keyed by category in first-seen order."""
        reqs = [
            make_requirement("A", category="disposal"),
            make_requirement("B", category="registration"),
            make_requirement("C", category="disposal"),
        ]
        groups = group_by_dimension(reqs, "category")
        assert list(groups) == ["disposal", "registration"]
        assert [r.id for r in groups["disposal"]] == ["A", "C"]

    def test_list_dimension_counts_in_each_group(self):
        """A requirement with two licence types lands in both groups."""
        reqs = [
            make_requirement("A", license_types=["launch_operator_licence", "orbital_operator_licence"]),
            make_requirement("B", license_types=["orbital_operator_licence"]),
        ]
        groups = group_by_dimension(reqs, "license_types")
        assert [r.id for r in groups["orbital_operator_licence"]] == ["A", "B"]
        assert [r.id for r in groups["launch_operator_licence"]] == ["A"]

    def test_unset_dimension_skipped(self):
        """Requirements without a value for the dimension are in no group."""
        reqs = [make_requirement("A", module="debris"), make_requirement("B")]
        groups = group_by_dimension(reqs, "module")
        assert list(groups) == ["debris"]

    def test_enum_dimension(self):
        """Enum-valued attributes group by their value."""
        reqs = [
            make_requirement("A"),
            make_requirement("B", binding_level=BindingLevel.RECOMMENDED),
        ]
        groups = group_by_dimension(reqs, "binding_level")
        assert set(groups) == {"mandatory", "recommended"}


# =============================================================================
# Full Score
# =============================================================================

class TestCalculateScores:
    """calculate_scores over a pack."""

    def test_mandatory_and_recommended_split(self):
        """Mandatory and recommended scores cover their own requirements."""
        reqs = [
            make_requirement("A", binding_level=BindingLevel.MANDATORY),
            make_requirement("B", binding_level=BindingLevel.RECOMMENDED),
            make_requirement("C", binding_level=BindingLevel.BEST_PRACTICE),
        ]
        pack = make_pack(reqs)
        statuses = make_statuses({"A": "compliant", "B": "non_compliant", "C": "non_compliant"})
        score = calculate_scores(pack, reqs, statuses)
        assert score.mandatory == 100
        assert score.recommended == 0
        assert score.overall == 33

    def test_no_recommended_requirements(self):
        """No recommended requirements means a recommended score of 100."""
        reqs = [make_requirement("A")]
        score = calculate_scores(make_pack(reqs), reqs, {})
        assert score.recommended == 100
        assert score.mandatory == 0

    def test_guidance_not_counted_as_recommended(self):
        """Guidance only counts when the pack lists it as recommended."""
        reqs = [
            make_requirement("A"),
            make_requirement("B", binding_level=BindingLevel.GUIDANCE),
        ]
        statuses = make_statuses({"A": "compliant"})
        default = calculate_scores(make_pack(reqs), reqs, statuses)
        assert default.recommended == 100

        widened = make_pack(
            reqs,
            recommended_levels=[BindingLevel.RECOMMENDED, BindingLevel.GUIDANCE],
        )
        assert calculate_scores(widened, reqs, statuses).recommended == 0

    def test_dimension_scores(self):
        """Every configured dimension is broken down."""
        reqs = [
            make_requirement("A", category="disposal", source="IADC"),
            make_requirement("B", category="registration", source="COPUOS"),
        ]
        pack = make_pack(reqs, score_dimensions=["category", "source"])
        statuses = make_statuses({"A": "compliant", "B": "partial"})
        score = calculate_scores(pack, reqs, statuses)
        assert score.by_dimension["category"] == {"disposal": 100, "registration": 50}
        assert score.dimension("source") == {"IADC": 100, "COPUOS": 50}
        assert score.dimension("module") == {}

    def test_custom_weights(self):
        """Pack severity weights drive the score."""
        reqs = [
            make_requirement("A", severity="critical"),
            make_requirement("B", severity="minor"),
        ]
        pack = make_pack(reqs, severity_weights={"critical": 9, "minor": 1})
        score = calculate_scores(pack, reqs, make_statuses({"A": "compliant"}))
        assert score.overall == 90

    def test_unknown_severity_weighs_one(self):
        """Severities missing from the weights weigh 1."""
        req = make_requirement("A", severity="unusual")
        assert make_pack([req]).weight_for(req) == 1

    def test_statuses_parse_from_strings(self):
        """ComplianceStatus accepts its string values."""
        assert make_statuses({"A": "not_applicable"})["A"] == ComplianceStatus.NOT_APPLICABLE
