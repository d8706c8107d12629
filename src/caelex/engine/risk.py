"""
Caelex Risk Classifier

Maps scores, gap counts and profile facts to a risk tier.

Order of evaluation:
1. A critical-severity requirement assessed non_compliant is CRITICAL
   (when the pack enables it).
2. The pack's risk rules, first TRUE condition wins.
3. The threshold ladder on the pack's risk basis score; thresholds are
   strict less-than, anything above the last rung is LOW. A rung with
   non_compliant_above also fires on too many non-compliant items.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ..models import (
    ComplianceScore,
    ComplianceStatus,
    Requirement,
    RiskLevel,
    RiskThreshold,
    RulePack,
    TriBool,
)
from .condition_evaluator import ConditionEvaluator
from .scoring import status_of


@dataclass
class RiskClassification:
    """Risk tier plus the reason it was chosen."""
    level: RiskLevel
    reason: str
    rule_id: Optional[str] = None


def threshold_level(
    thresholds: Iterable[RiskThreshold],
    score: int,
    non_compliant: int = 0,
) -> RiskLevel:
    """First rung that applies, LOW past the end of the ladder."""
    for threshold in thresholds:
        if threshold.applies(score, non_compliant):
            return threshold.level
    return RiskLevel.LOW


def ladder_level(pack: RulePack, score: int, non_compliant: int = 0) -> RiskLevel:
    return threshold_level(pack.risk_thresholds, score, non_compliant)


def risk_basis_score(pack: RulePack, score: ComplianceScore) -> int:
    return score.overall if pack.risk_basis == "overall" else score.mandatory


def classify_risk(
    pack: RulePack,
    requirements: list[Requirement],
    statuses: Mapping[str, ComplianceStatus],
    score: ComplianceScore,
    context: Mapping[str, Any],
    evaluator: Optional[ConditionEvaluator] = None,
) -> RiskClassification:
    """
    Classify the overall risk of an assessment.

    Args:
        pack: Rule pack supplying rules and thresholds
        requirements: Applicable requirements
        statuses: Requirement ID to assessed status
        score: Computed scores
        context: Rule context (profile, scores, gaps)
        evaluator: Condition evaluator to reuse
    """
    if pack.escalate_critical_noncompliance:
        for requirement in requirements:
            if (
                requirement.is_critical
                and status_of(requirement, statuses) == ComplianceStatus.NON_COMPLIANT
            ):
                return RiskClassification(
                    level=RiskLevel.CRITICAL,
                    reason=f"Critical requirement {requirement.reference} is non-compliant",
                    rule_id="critical_noncompliance",
                )

    evaluator = evaluator or ConditionEvaluator()
    for rule in pack.risk_rules:
        if evaluator.evaluate(rule.condition, context).value == TriBool.TRUE:
            return RiskClassification(
                level=rule.level,
                reason=rule.description or f"Risk rule {rule.id} matched",
                rule_id=rule.id,
            )

    basis = risk_basis_score(pack, score)
    non_compliant = sum(
        1 for r in requirements
        if status_of(r, statuses) == ComplianceStatus.NON_COMPLIANT
    )
    level = ladder_level(pack, basis, non_compliant)
    return RiskClassification(
        level=level,
        reason=f"{pack.risk_basis.capitalize()} score {basis} maps to {level.value} risk",
    )
