"""
Caelex Domain Models

Dataclasses and enums shared by the rule-pack loader, the engine and
the API layer.
"""
from __future__ import annotations

from .assessment import (
    AssessmentResult,
    ChecklistItem,
    ComplianceScore,
    ComplianceSummary,
    GapItem,
    GroupReport,
    RequirementAssessment,
)
from .conditions import (
    AND,
    BETWEEN,
    CONTAINS,
    EQ,
    GT,
    GTE,
    IN,
    INTERSECTS,
    IS_NOT_NULL,
    IS_NULL,
    LT,
    LTE,
    NE,
    NOT,
    NOT_IN,
    OR,
    PRED,
    Condition,
    EvaluationResult,
    Predicate,
    TriBool,
)
from .enums import (
    LOGICAL_OPERATORS,
    BindingLevel,
    ComplianceGrade,
    ComplianceStatus,
    ConditionOperator,
    DocumentStatus,
    EffortLevel,
    GapPriority,
    ModuleStatus,
    RecommendationPriority,
    RegulatoryDomain,
    RiskLevel,
    UnifiedStatus,
)
from .requirement import Requirement
from .rulepack import (
    DEFAULT_RISK_THRESHOLDS,
    DEFAULT_SEVERITY_WEIGHTS,
    RecommendationRule,
    RiskRule,
    RiskThreshold,
    RulePack,
)

__all__ = [
    # Enums
    "BindingLevel",
    "ComplianceGrade",
    "ComplianceStatus",
    "ConditionOperator",
    "DocumentStatus",
    "EffortLevel",
    "GapPriority",
    "LOGICAL_OPERATORS",
    "ModuleStatus",
    "RecommendationPriority",
    "RegulatoryDomain",
    "RiskLevel",
    "UnifiedStatus",
    # Conditions
    "TriBool",
    "EvaluationResult",
    "Predicate",
    "Condition",
    "AND",
    "OR",
    "NOT",
    "PRED",
    "EQ",
    "NE",
    "GT",
    "GTE",
    "LT",
    "LTE",
    "IN",
    "NOT_IN",
    "CONTAINS",
    "INTERSECTS",
    "IS_NULL",
    "IS_NOT_NULL",
    "BETWEEN",
    # Rule packs
    "Requirement",
    "RulePack",
    "RiskRule",
    "RiskThreshold",
    "RecommendationRule",
    "DEFAULT_SEVERITY_WEIGHTS",
    "DEFAULT_RISK_THRESHOLDS",
    # Assessment
    "RequirementAssessment",
    "ComplianceScore",
    "GapItem",
    "ComplianceSummary",
    "ChecklistItem",
    "GroupReport",
    "AssessmentResult",
]
