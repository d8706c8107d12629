"""
Tests for gap analysis and recommendations

Tests cover:
- Gap priority from binding level and severity
- Gap text per status
- Sorting (high, medium, low; ties keep pack order)
- Effort and dependency lookup
- Recommendation ordering, after_gaps, de-duplication and cap
"""
from caelex.engine import (
    analyze_gaps,
    build_recommendations,
    describe_gap,
    gap_priority,
    recommend_for,
    recommendation_cap,
)
from caelex.models import (
    CONTAINS,
    GTE,
    LT,
    BindingLevel,
    ComplianceStatus,
    EffortLevel,
    GapPriority,
)

from tests.conftest import (
    make_pack,
    make_recommendation,
    make_requirement,
    make_statuses,
)


# =============================================================================
# Priority and Text
# =============================================================================

class TestGapPriority:
    """Mandatory and critical is HIGH; either one is MEDIUM; else LOW."""

    def test_mandatory_critical(self):
        """Both gives HIGH."""
        assert gap_priority(make_requirement(severity="critical")) == GapPriority.HIGH

    def test_mandatory_only(self):
        """Mandatory major gives MEDIUM."""
        assert gap_priority(make_requirement(severity="major")) == GapPriority.MEDIUM

    def test_critical_only(self):
        """Recommended critical gives MEDIUM."""
        req = make_requirement(severity="critical", binding_level=BindingLevel.RECOMMENDED)
        assert gap_priority(req) == GapPriority.MEDIUM

    def test_neither(self):
        """Recommended minor gives LOW."""
        req = make_requirement(severity="minor", binding_level=BindingLevel.BEST_PRACTICE)
        assert gap_priority(req) == GapPriority.LOW


class TestGapText:
    """describe_gap / recommend_for."""

    def test_status_texts(self):
        """Each gap status has its own wording."""
        req = make_requirement("A", reference="IADC 5.3.2", title="25-year rule")
        assert describe_gap(req, ComplianceStatus.NON_COMPLIANT) == "Non-compliant with IADC 5.3.2: 25-year rule"
        assert describe_gap(req, ComplianceStatus.PARTIAL) == "Partially compliant with IADC 5.3.2: 25-year rule"
        assert describe_gap(req, ComplianceStatus.NOT_ASSESSED) == "Not yet assessed: IADC 5.3.2: 25-year rule"

    def test_recommendation_from_guidance(self):
        """The first guidance line is the recommendation."""
        req = make_requirement(implementation_guidance=["Write the plan", "File it"])
        assert recommend_for(req) == "Write the plan"

    def test_recommendation_fallback(self):
        """Without guidance the title is used."""
        req = make_requirement(title="Passivation")
        assert recommend_for(req) == "Review and implement Passivation"


# =============================================================================
# Gap Analysis
# =============================================================================

class TestAnalyzeGaps:
    """analyze_gaps over applicable requirements."""

    def test_compliant_and_not_applicable_are_not_gaps(self):
        """Only partial, non_compliant and not_assessed produce gaps."""
        reqs = [make_requirement(rid) for rid in ("A", "B", "C", "D", "E")]
        statuses = make_statuses({
            "A": "compliant",
            "B": "not_applicable",
            "C": "partial",
            "D": "non_compliant",
        })
        gaps = analyze_gaps(make_pack(reqs), reqs, statuses)
        assert [g.requirement_id for g in gaps] == ["C", "D", "E"]
        assert gaps[2].status == ComplianceStatus.NOT_ASSESSED

    def test_sorted_by_priority_stable(self):
        """High before medium before low; pack order within a priority."""
        reqs = [
            make_requirement("LOW-1", severity="minor", binding_level=BindingLevel.RECOMMENDED),
            make_requirement("MED-1", severity="major"),
            make_requirement("HIGH-1", severity="critical"),
            make_requirement("MED-2", severity="critical", binding_level=BindingLevel.RECOMMENDED),
            make_requirement("HIGH-2", severity="critical"),
        ]
        gaps = analyze_gaps(make_pack(reqs), reqs, {})
        assert [g.requirement_id for g in gaps] == ["HIGH-1", "HIGH-2", "MED-1", "MED-2", "LOW-1"]

    def test_effort_and_dependencies(self):
        """Effort and dependencies come from the category maps."""
        reqs = [
            make_requirement("A", category="disposal"),
            make_requirement("B", category="registration"),
        ]
        pack = make_pack(
            reqs,
            effort_by_category={"disposal": EffortLevel.HIGH},
            default_effort=EffortLevel.LOW,
            dependencies_by_category={"disposal": ["Orbit analysis"]},
        )
        gaps = {g.requirement_id: g for g in analyze_gaps(pack, reqs, {})}
        assert gaps["A"].estimated_effort == EffortLevel.HIGH
        assert gaps["A"].dependencies == ["Orbit analysis"]
        assert gaps["B"].estimated_effort == EffortLevel.LOW
        assert gaps["B"].dependencies == []

    def test_dependencies_are_copies(self):
        """Mutating a gap's dependencies leaves the pack untouched."""
        reqs = [make_requirement("A", category="disposal")]
        pack = make_pack(reqs, dependencies_by_category={"disposal": ["Orbit analysis"]})
        analyze_gaps(pack, reqs, {})[0].dependencies.append("extra")
        assert pack.dependencies_for("disposal") == ["Orbit analysis"]

    def test_gap_carries_requirement_fields(self):
        """Gap copies reference, title, category, severity and source."""
        req = make_requirement("A", category="disposal", severity="major", source="IADC")
        gap = analyze_gaps(make_pack([req]), [req], {})[0]
        assert (gap.reference, gap.title, gap.category, gap.severity, gap.source) == (
            "Ref A", "Requirement A", "disposal", "major", "IADC",
        )


# =============================================================================
# Recommendations
# =============================================================================

def high_gaps(count):
    reqs = [
        make_requirement(f"H{i}", implementation_guidance=[f"Fix H{i}"])
        for i in range(count)
    ]
    return make_pack(reqs), analyze_gaps(make_pack(reqs), reqs, {})


class TestRecommendations:
    """build_recommendations ordering and limits."""

    def test_rules_then_gaps_then_after_gaps(self):
        """Plain rules first, then Address items, then after_gaps rules."""
        _, gaps = high_gaps(1)
        pack = make_pack(recommendations=[
            make_recommendation("late", "Review EU overlap", after_gaps=True),
            make_recommendation("early", "Register with UNOOSA"),
        ])
        assert build_recommendations(pack, gaps, {}) == [
            "Register with UNOOSA",
            "Address: Fix H0",
            "Review EU overlap",
        ]

    def test_only_top_high_gaps(self):
        """Only the first gap_recommendations HIGH gaps are addressed."""
        _, gaps = high_gaps(5)
        pack = make_pack(gap_recommendations=3)
        assert build_recommendations(pack, gaps, {}) == [
            "Address: Fix H0", "Address: Fix H1", "Address: Fix H2",
        ]

    def test_medium_gaps_not_addressed(self):
        """MEDIUM gaps do not produce Address items."""
        req = make_requirement("M", severity="major")
        pack = make_pack([req])
        gaps = analyze_gaps(pack, [req], {})
        assert build_recommendations(pack, gaps, {}) == []

    def test_conditional_rules(self):
        """Rules fire only on a TRUE condition."""
        pack = make_pack(recommendations=[
            make_recommendation("low-score", "Raise the score", LT("scores.overall", 50)),
            make_recommendation("has-gap", "Train staff", CONTAINS("gaps.requirement_ids", "TRAINING-001")),
            make_recommendation("unknown", "Never", GTE("scores.by_category.absent", 0)),
        ])
        context = {"scores": {"overall": 40}, "gaps": {"requirement_ids": ["TRAINING-001"]}}
        assert build_recommendations(pack, [], context) == ["Raise the score", "Train staff"]

    def test_duplicates_removed(self):
        """A rule text equal to an Address item is kept once, first position."""
        _, gaps = high_gaps(1)
        pack = make_pack(recommendations=[
            make_recommendation("dup", "Address: Fix H0"),
            make_recommendation("other", "Something else"),
        ])
        assert build_recommendations(pack, gaps, {}) == ["Address: Fix H0", "Something else"]

    def test_cap(self):
        """The list is cut at max_recommendations."""
        pack = make_pack(
            max_recommendations=2,
            recommendations=[make_recommendation(f"r{i}") for i in range(5)],
        )
        assert build_recommendations(pack, [], {}) == ["Recommendation r0", "Recommendation r1"]

    def test_cap_cuts_after_gap_rules_first(self):
        """after_gaps rules are the first to go when capped."""
        _, gaps = high_gaps(2)
        pack = make_pack(
            max_recommendations=2,
            recommendations=[make_recommendation("late", "Late item", after_gaps=True)],
        )
        assert build_recommendations(pack, gaps, {}) == ["Address: Fix H0", "Address: Fix H1"]

    def test_default_cap_from_config(self, monkeypatch):
        """Packs without a cap use CX_MAX_RECOMMENDATIONS."""
        from caelex import config

        monkeypatch.setattr(config, "CX_MAX_RECOMMENDATIONS", 4)
        assert recommendation_cap(make_pack()) == 4
        assert recommendation_cap(make_pack(max_recommendations=8)) == 8
