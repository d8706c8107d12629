"""
Caelex Rule Pack Models

A rule pack holds one regulatory domain's requirement table together
with the knobs that make the generic engine behave like that domain:
severity weights, score dimensions, risk rules, effort estimates and
recommendation triggers.

Key components:
- RulePack: Top-level container loaded from YAML/JSON
- RiskThreshold: One rung of the score-based risk ladder
- RiskRule: Conditional risk override evaluated before the ladder
- RecommendationRule: Conditional recommendation text
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .conditions import Condition
from .enums import BindingLevel, EffortLevel, RegulatoryDomain, RiskLevel
from .requirement import Requirement


DEFAULT_SEVERITY_WEIGHTS: dict[str, int] = {"critical": 3, "major": 2, "minor": 1}


@dataclass
class RiskThreshold:
    """
    Scores strictly below `below` map to `level`.

    When `non_compliant_above` is set, the rung also applies if more
    than that many requirements are non-compliant.
    """
    below: int
    level: RiskLevel
    non_compliant_above: Optional[int] = None

    def applies(self, score: int, non_compliant: int = 0) -> bool:
        if score < self.below:
            return True
        return self.non_compliant_above is not None and non_compliant > self.non_compliant_above


DEFAULT_RISK_THRESHOLDS: list[RiskThreshold] = [
    RiskThreshold(below=50, level=RiskLevel.CRITICAL),
    RiskThreshold(below=70, level=RiskLevel.HIGH),
    RiskThreshold(below=85, level=RiskLevel.MEDIUM),
]


@dataclass
class RiskRule:
    """
    A conditional risk level.

    The condition is evaluated against the assessment context
    (profile, scores, gap counts). First TRUE rule wins.
    """
    id: str
    level: RiskLevel
    condition: Condition
    description: Optional[str] = None


@dataclass
class RecommendationRule:
    """A recommendation emitted when its condition holds (or always)."""
    id: str
    text: str
    condition: Optional[Condition] = None
    after_gaps: bool = False


@dataclass
class RulePack:
    """
    A regulatory rule pack.

    Attributes:
        id: Unique identifier (e.g., "EU-COPUOS-IADC-2025")
        domain: Regulatory domain served by this pack
        name: Human-readable name
        version: Version string (e.g., "2025.1")
        jurisdiction: Jurisdiction code (e.g., "EU", "UK", "US", "INT")
        effective_date: When this version is effective
        requirements: Requirement table, in presentation order
        severity_weights: Severity key to score weight
        score_dimensions: Requirement attributes to break scores down by
        recommended_levels: Binding levels counted in the recommended score
        risk_basis: "mandatory" or "overall" score feeding the risk ladder
        risk_thresholds: Ascending score ladder; above the last rung is LOW
        risk_rules: Ordered conditional risk overrides
        escalate_critical_noncompliance: Critical item non-compliant => CRITICAL
        scope_condition: Profile condition; if not TRUE nothing applies
        effort_by_category: Category to remediation effort
        default_effort: Effort for unmapped categories
        dependencies_by_category: Category to prerequisite activities
        recommendations: Conditional recommendation rules
        gap_recommendations: Top high-priority gaps turned into "Address:" items
        max_recommendations: Cap on recommendations (None uses config default)
        report_dimension: Dimension broken out into per-group reports
        report_groups_from: Profile field listing the groups to report on;
            None reports on every group of report_dimension
        group_risk_thresholds: Per-group ladders for group reports, keyed
            by group name; groups without one get no risk level
    """
    id: str
    domain: RegulatoryDomain
    name: str
    version: str
    jurisdiction: str
    effective_date: date

    requirements: list[Requirement] = field(default_factory=list)

    severity_weights: dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_SEVERITY_WEIGHTS)
    )
    score_dimensions: list[str] = field(default_factory=lambda: ["category"])
    recommended_levels: list[BindingLevel] = field(
        default_factory=lambda: [BindingLevel.RECOMMENDED, BindingLevel.BEST_PRACTICE]
    )

    risk_basis: str = "mandatory"
    risk_thresholds: list[RiskThreshold] = field(
        default_factory=lambda: list(DEFAULT_RISK_THRESHOLDS)
    )
    risk_rules: list[RiskRule] = field(default_factory=list)
    escalate_critical_noncompliance: bool = True
    scope_condition: Optional[Condition] = None

    effort_by_category: dict[str, EffortLevel] = field(default_factory=dict)
    default_effort: EffortLevel = EffortLevel.MEDIUM
    dependencies_by_category: dict[str, list[str]] = field(default_factory=dict)

    recommendations: list[RecommendationRule] = field(default_factory=list)
    gap_recommendations: int = 3
    max_recommendations: Optional[int] = None

    report_dimension: Optional[str] = None
    report_groups_from: Optional[str] = None
    group_risk_thresholds: dict[str, list[RiskThreshold]] = field(default_factory=dict)

    description: Optional[str] = None
    authority: Optional[str] = None  # Regulator, e.g. "CAA", "DDTC/BIS"

    def weight_for(self, requirement: Requirement) -> int:
        """Score weight for a requirement; unknown severities weigh 1."""
        return self.severity_weights.get(requirement.severity, 1)

    def effort_for(self, category: str) -> EffortLevel:
        return self.effort_by_category.get(category, self.default_effort)

    def dependencies_for(self, category: str) -> list[str]:
        return list(self.dependencies_by_category.get(category, []))

    def get_requirement(self, requirement_id: str) -> Optional[Requirement]:
        """Get a requirement by ID."""
        for requirement in self.requirements:
            if requirement.id == requirement_id:
                return requirement
        return None

    @property
    def requirement_ids(self) -> list[str]:
        return [r.id for r in self.requirements]

    @property
    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for requirement in self.requirements:
            seen.setdefault(requirement.category, None)
        return list(seen)

    def is_effective_on(self, check_date: date) -> bool:
        return check_date >= self.effective_date
