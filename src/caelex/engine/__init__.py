"""
Caelex Engine

The compliance scoring and gap-analysis pipeline.

Components:
- ConditionEvaluator: Three-valued evaluation of condition trees
- ApplicabilityFilter: Selects requirements matching a profile
- Score Calculator: Severity-weighted scores per dimension
- Risk Classifier: Risk tier from scores, gaps and profile
- Gap Analyzer: Prioritised remediation items
- ComplianceEngine: Pack management and the full assessment
"""
from __future__ import annotations

from .applicability import ApplicabilityFilter
from .assessment import ComplianceEngine, build_rule_context, get_default_engine
from .condition_evaluator import (
    ConditionEvaluator,
    check_condition,
    compare_values,
    evaluate_condition,
    resolve_field_path,
)
from .gaps import analyze_gaps, build_gap, describe_gap, gap_priority, recommend_for
from .recommendations import build_recommendations, recommendation_cap
from .reporting import (
    build_checklist,
    build_group_reports,
    build_summary,
    cross_reference_summary,
    document_status,
    eu_space_act_overlaps,
    requirements_for_article,
)
from .risk import RiskClassification, classify_risk, ladder_level, threshold_level
from .scoring import (
    calculate_scores,
    group_by_dimension,
    group_points,
    group_score,
    points_to_score,
    round_half_up,
    status_of,
)

__all__ = [
    # Engine
    "ComplianceEngine",
    "get_default_engine",
    "build_rule_context",
    # Conditions
    "ConditionEvaluator",
    "evaluate_condition",
    "check_condition",
    "compare_values",
    "resolve_field_path",
    # Applicability
    "ApplicabilityFilter",
    # Scoring
    "calculate_scores",
    "group_score",
    "group_points",
    "group_by_dimension",
    "points_to_score",
    "round_half_up",
    "status_of",
    # Risk
    "RiskClassification",
    "classify_risk",
    "ladder_level",
    "threshold_level",
    # Gaps
    "analyze_gaps",
    "build_gap",
    "describe_gap",
    "gap_priority",
    "recommend_for",
    # Recommendations
    "build_recommendations",
    "recommendation_cap",
    # Reporting
    "build_summary",
    "build_checklist",
    "document_status",
    "eu_space_act_overlaps",
    "cross_reference_summary",
    "requirements_for_article",
    "build_group_reports",
]
