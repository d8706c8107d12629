"""
Tests for the risk classifier

Tests cover:
- Threshold ladder boundaries
- Risk basis (mandatory vs overall)
- Critical non-compliance escalation
- Ordered risk rules, first TRUE wins
- UNKNOWN rule conditions do not fire
"""
import pytest

from caelex.engine import classify_risk, ladder_level, threshold_level
from caelex.models import (
    EQ,
    GTE,
    LT,
    BindingLevel,
    ComplianceScore,
    RiskLevel,
    RiskThreshold,
)

from tests.conftest import make_pack, make_requirement, make_risk_rule, make_statuses


def score_of(overall=100, mandatory=100, recommended=100, by_dimension=None):
    return ComplianceScore(
        overall=overall,
        mandatory=mandatory,
        recommended=recommended,
        by_dimension=by_dimension or {},
    )


def context_for(score, profile=None, gaps=None):
    scores = {"overall": score.overall, "mandatory": score.mandatory, "recommended": score.recommended}
    for dimension, groups in score.by_dimension.items():
        scores[f"by_{dimension}"] = groups
    return {"profile": profile or {}, "scores": scores, "gaps": gaps or {}}


# =============================================================================
# Ladder
# =============================================================================

class TestLadder:
    """Default ladder: <50 critical, <70 high, <85 medium, else low."""

    @pytest.mark.parametrize("value,expected", [
        (0, RiskLevel.CRITICAL),
        (49, RiskLevel.CRITICAL),
        (50, RiskLevel.HIGH),
        (69, RiskLevel.HIGH),
        (70, RiskLevel.MEDIUM),
        (84, RiskLevel.MEDIUM),
        (85, RiskLevel.LOW),
        (100, RiskLevel.LOW),
    ])
    def test_boundaries(self, value, expected):
        """Thresholds are strict less-than."""
        assert ladder_level(make_pack(), value) == expected

    def test_custom_ladder(self):
        """A pack can define its own rungs."""
        pack = make_pack(risk_thresholds=[
            RiskThreshold(below=40, level=RiskLevel.HIGH),
            RiskThreshold(below=80, level=RiskLevel.MEDIUM),
        ])
        assert ladder_level(pack, 39) == RiskLevel.HIGH
        assert ladder_level(pack, 40) == RiskLevel.MEDIUM
        assert ladder_level(pack, 80) == RiskLevel.LOW

    @pytest.mark.parametrize("value,non_compliant,expected", [
        (90, 0, RiskLevel.LOW),
        (90, 2, RiskLevel.MEDIUM),
        (90, 3, RiskLevel.HIGH),
        (90, 6, RiskLevel.CRITICAL),
        (60, 0, RiskLevel.HIGH),
        (49, 0, RiskLevel.CRITICAL),
    ])
    def test_non_compliant_count_rungs(self, value, non_compliant, expected):
        """A rung also fires when non-compliant items exceed its count."""
        thresholds = [
            RiskThreshold(below=50, level=RiskLevel.CRITICAL, non_compliant_above=5),
            RiskThreshold(below=70, level=RiskLevel.HIGH, non_compliant_above=2),
            RiskThreshold(below=85, level=RiskLevel.MEDIUM, non_compliant_above=1),
        ]
        assert threshold_level(thresholds, value, non_compliant) == expected

    def test_classify_counts_non_compliant(self):
        """The pack ladder sees the non-compliant count of the applicable items."""
        reqs = [make_requirement(f"R{i}", severity="minor") for i in range(10)]
        pack = make_pack(reqs, risk_thresholds=[
            RiskThreshold(below=50, level=RiskLevel.CRITICAL),
            RiskThreshold(below=70, level=RiskLevel.HIGH, non_compliant_above=0),
        ])
        statuses = make_statuses({f"R{i}": "compliant" for i in range(9)} | {"R9": "non_compliant"})
        score = score_of(overall=90, mandatory=90)
        risk = classify_risk(pack, reqs, statuses, score, context_for(score))
        assert risk.level == RiskLevel.HIGH


# =============================================================================
# Classification
# =============================================================================

class TestClassifyRisk:
    """classify_risk ordering."""

    def test_mandatory_basis(self):
        """By default the mandatory score feeds the ladder."""
        pack = make_pack()
        score = score_of(overall=90, mandatory=60)
        result = classify_risk(pack, pack.requirements, {}, score, context_for(score))
        assert result.level == RiskLevel.HIGH
        assert "Mandatory score 60" in result.reason

    def test_overall_basis(self):
        """risk_basis='overall' uses the overall score."""
        pack = make_pack(risk_basis="overall")
        score = score_of(overall=90, mandatory=10)
        result = classify_risk(pack, pack.requirements, {}, score, context_for(score))
        assert result.level == RiskLevel.LOW

    def test_critical_noncompliance_escalates(self):
        """A critical requirement assessed non_compliant forces CRITICAL."""
        req = make_requirement("A", severity="critical", binding_level=BindingLevel.RECOMMENDED)
        pack = make_pack([req])
        score = score_of()
        result = classify_risk(
            pack, [req], make_statuses({"A": "non_compliant"}), score, context_for(score)
        )
        assert result.level == RiskLevel.CRITICAL
        assert result.rule_id == "critical_noncompliance"

    def test_not_assessed_does_not_escalate(self):
        """Only an explicit non_compliant escalates."""
        req = make_requirement("A", severity="critical")
        pack = make_pack([req])
        score = score_of()
        result = classify_risk(pack, [req], {}, score, context_for(score))
        assert result.level == RiskLevel.LOW

    def test_escalation_can_be_disabled(self):
        """Packs may turn escalation off."""
        req = make_requirement("A", severity="critical")
        pack = make_pack([req], escalate_critical_noncompliance=False)
        score = score_of()
        result = classify_risk(
            pack, [req], make_statuses({"A": "non_compliant"}), score, context_for(score)
        )
        assert result.level == RiskLevel.LOW

    def test_escalation_precedes_rules(self):
        """Escalation is checked before any rule."""
        req = make_requirement("A", severity="critical")
        rule = make_risk_rule("always-low", GTE("scores.overall", 0), level=RiskLevel.LOW)
        pack = make_pack([req], risk_rules=[rule])
        score = score_of()
        result = classify_risk(
            pack, [req], make_statuses({"A": "non_compliant"}), score, context_for(score)
        )
        assert result.level == RiskLevel.CRITICAL

    def test_first_matching_rule_wins(self):
        """Rules are tried in order."""
        rules = [
            make_risk_rule("itar", EQ("profile.has_itar_items", True), RiskLevel.HIGH, "ITAR items held"),
            make_risk_rule("low-score", LT("scores.overall", 100), RiskLevel.CRITICAL),
        ]
        pack = make_pack(risk_rules=rules)
        score = score_of(overall=40)
        result = classify_risk(
            pack, pack.requirements, {}, score, context_for(score, {"has_itar_items": True})
        )
        assert result.level == RiskLevel.HIGH
        assert result.reason == "ITAR items held"
        assert result.rule_id == "itar"

    def test_rule_without_description(self):
        """A rule without a description gets a generated reason."""
        pack = make_pack(risk_rules=[make_risk_rule("r1", LT("scores.overall", 50))])
        score = score_of(overall=10)
        result = classify_risk(pack, pack.requirements, {}, score, context_for(score))
        assert result.reason == "Risk rule r1 matched"

    def test_unknown_rule_does_not_fire(self):
        """A rule on an absent category score falls through to the ladder."""
        rule = make_risk_rule(
            "licensing", LT("scores.by_category.licensing", 50), RiskLevel.CRITICAL
        )
        pack = make_pack(risk_rules=[rule])
        score = score_of(overall=90, mandatory=90, by_dimension={"category": {"general": 90}})
        result = classify_risk(pack, pack.requirements, {}, score, context_for(score))
        assert result.level == RiskLevel.LOW

    def test_category_rule_fires(self):
        """A rule on a present category score fires."""
        rule = make_risk_rule(
            "licensing", LT("scores.by_category.licensing", 50), RiskLevel.CRITICAL,
            "Operator licensing score below 50",
        )
        pack = make_pack(risk_rules=[rule])
        score = score_of(by_dimension={"category": {"licensing": 20}})
        result = classify_risk(pack, pack.requirements, {}, score, context_for(score))
        assert result.level == RiskLevel.CRITICAL
        assert result.reason == "Operator licensing score below 50"
