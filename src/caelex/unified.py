"""
Caelex Unified Compliance Score

Combines assessment results from any number of domains into one
weighted score across six modules (authorization, debris,
cybersecurity, insurance, environmental, reporting).

Every applicable requirement that carries a `module` becomes a scoring
factor worth 10 points per severity weight.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from . import config
from .canon import canonical_json
from .models import (
    AssessmentResult,
    ComplianceGrade,
    ComplianceStatus,
    EffortLevel,
    ModuleStatus,
    RecommendationPriority,
    RulePack,
    UnifiedStatus,
)
from .engine.scoring import STATUS_CREDIT, points_to_score, round_half_up

logger = logging.getLogger(__name__)

POINTS_PER_WEIGHT = 10


# =============================================================================
# Result Models
# =============================================================================

@dataclass
class ScoringFactor:
    """One requirement's contribution to a module."""
    id: str
    pack_id: str
    name: str
    reference: str
    max_points: float
    earned_points: float
    is_critical: bool
    status: ComplianceStatus


@dataclass
class ModuleScore:
    module: str
    score: int
    weight: float
    weighted_score: int
    status: ModuleStatus
    factors: list[ScoringFactor] = field(default_factory=list)


@dataclass
class UnifiedRecommendation:
    priority: RecommendationPriority
    module: str
    action: str
    impact: str
    reference: str
    estimated_effort: EffortLevel


@dataclass
class UnifiedScore:
    overall: int
    grade: ComplianceGrade
    status: UnifiedStatus
    breakdown: dict[str, ModuleScore]
    recommendations: list[UnifiedRecommendation]
    pack_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return json.loads(canonical_json(self))


# =============================================================================
# Classification
# =============================================================================

def module_status(score: int) -> ModuleStatus:
    if score >= 80:
        return ModuleStatus.COMPLIANT
    if score >= 50:
        return ModuleStatus.PARTIAL
    if score > 0:
        return ModuleStatus.NON_COMPLIANT
    return ModuleStatus.NOT_STARTED


def grade_for(score: int) -> ComplianceGrade:
    if score >= 90:
        return ComplianceGrade.A
    if score >= 80:
        return ComplianceGrade.B
    if score >= 70:
        return ComplianceGrade.C
    if score >= 60:
        return ComplianceGrade.D
    return ComplianceGrade.F


def unified_status(overall: int, breakdown: dict[str, ModuleScore]) -> UnifiedStatus:
    """Critical failure anywhere overrides the score-based status."""
    critical_failure = any(
        module.status == ModuleStatus.NON_COMPLIANT
        and any(f.is_critical and f.earned_points == 0 for f in module.factors)
        for module in breakdown.values()
    )
    if critical_failure:
        return UnifiedStatus.NON_COMPLIANT
    if overall >= 80:
        return UnifiedStatus.COMPLIANT
    if overall >= 60:
        return UnifiedStatus.MOSTLY_COMPLIANT
    if overall > 0:
        return UnifiedStatus.PARTIAL
    return UnifiedStatus.NOT_ASSESSED


def recommendation_priority(factor: ScoringFactor) -> RecommendationPriority:
    missing = factor.max_points - factor.earned_points
    percent_missing = missing / factor.max_points * 100 if factor.max_points else 0
    if factor.is_critical and factor.earned_points == 0:
        return RecommendationPriority.CRITICAL
    if factor.is_critical or percent_missing > 50:
        return RecommendationPriority.HIGH
    if percent_missing > 25:
        return RecommendationPriority.MEDIUM
    return RecommendationPriority.LOW


def effort_for_missing(missing_points: float) -> EffortLevel:
    if missing_points > 25:
        return EffortLevel.HIGH
    if missing_points > 10:
        return EffortLevel.MEDIUM
    return EffortLevel.LOW


# =============================================================================
# Calculation
# =============================================================================

def collect_factors(
    results: Iterable[AssessmentResult],
    get_pack: Callable[[str], RulePack],
) -> dict[str, list[ScoringFactor]]:
    """Module name to factors, pooled across results in input order."""
    factors: dict[str, list[ScoringFactor]] = {m: [] for m in config.UNIFIED_MODULE_WEIGHTS}
    for result in results:
        pack = get_pack(result.pack_id)
        for requirement_id in result.applicable_requirement_ids:
            requirement = pack.get_requirement(requirement_id)
            if requirement is None or requirement.module not in factors:
                continue
            status = result.requirement_statuses.get(
                requirement_id, ComplianceStatus.NOT_ASSESSED
            )
            if status == ComplianceStatus.NOT_APPLICABLE:
                continue
            max_points = pack.weight_for(requirement) * POINTS_PER_WEIGHT
            factors[requirement.module].append(ScoringFactor(
                id=requirement.id,
                pack_id=pack.id,
                name=requirement.title,
                reference=requirement.reference,
                max_points=max_points,
                earned_points=max_points * STATUS_CREDIT.get(status, 0.0),
                is_critical=requirement.is_critical,
                status=status,
            ))
    return factors


def score_module(module: str, factors: list[ScoringFactor]) -> ModuleScore:
    weight = config.UNIFIED_MODULE_WEIGHTS[module]
    if factors:
        score = points_to_score(
            sum(f.earned_points for f in factors),
            sum(f.max_points for f in factors),
        )
    else:
        score = 0
    return ModuleScore(
        module=module,
        score=score,
        weight=weight,
        weighted_score=round_half_up(score * weight),
        status=module_status(score),
        factors=factors,
    )


def build_unified_recommendations(
    breakdown: dict[str, ModuleScore],
    limit: Optional[int] = None,
) -> list[UnifiedRecommendation]:
    """One recommendation per unfinished factor, most urgent first."""
    recommendations = []
    for module_name, module in breakdown.items():
        for factor in module.factors:
            if factor.earned_points >= factor.max_points:
                continue
            missing = factor.max_points - factor.earned_points
            recommendations.append(UnifiedRecommendation(
                priority=recommendation_priority(factor),
                module=module_name,
                action=f"Complete {factor.name}",
                impact=f"+{missing:g} points on {module_name} module",
                reference=factor.reference,
                estimated_effort=effort_for_missing(missing),
            ))
    recommendations.sort(key=lambda r: r.priority.rank)
    cap = config.CX_UNIFIED_MAX_RECOMMENDATIONS if limit is None else limit
    return recommendations[:cap]


def calculate_unified_score(
    results: Iterable[AssessmentResult],
    get_pack: Callable[[str], RulePack],
) -> UnifiedScore:
    """
    Combine assessment results into a unified score.

    Args:
        results: Assessment results from one or more packs
        get_pack: Pack lookup, typically ComplianceEngine.get_pack_or_raise

    Returns:
        UnifiedScore with per-module breakdown and recommendations
    """
    results = list(results)
    factors = collect_factors(results, get_pack)
    breakdown = {module: score_module(module, factors[module]) for module in factors}

    overall = sum(module.weighted_score for module in breakdown.values())
    unified = UnifiedScore(
        overall=overall,
        grade=grade_for(overall),
        status=unified_status(overall, breakdown),
        breakdown=breakdown,
        recommendations=build_unified_recommendations(breakdown),
        pack_ids=[r.pack_id for r in results],
    )
    logger.info(
        "Unified score %d (%s) across %d assessments",
        overall, unified.grade.value, len(results),
        extra={"overall_score": overall},
    )
    return unified
