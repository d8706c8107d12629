"""
Caelex - Space Compliance Scoring and Gap Analysis

Caelex scores a space operator's self-assessment against the regulatory
regimes that apply to it and tells the operator what to fix first.

Regimes are data, not code: each one is a rule pack (YAML) holding the
requirement table and the settings that make the single generic engine
behave like that regime.

Key Features:
- Rule packs for COPUOS/IADC, UK Space Industry Act, NIS2, ITAR/EAR and
  the EU Space Act
- Three-valued applicability conditions over the operator profile
- Severity-weighted scores per category, source, licence or module
- Risk classification, prioritised gaps and recommendations
- Documentation checklist and EU Space Act cross-references
- Unified cross-domain score with letter grade

Quick Start:
    from caelex import ComplianceEngine, config

    engine = ComplianceEngine()
    engine.load_packs_from_directory(config.CX_PACKS_DIR)

    result = engine.perform_assessment(
        "INT-COPUOS-IADC-2025",
        profile={"orbit_regime": "LEO", "mission_type": "commercial",
                 "satellite_mass_kg": 4},
        assessments=[{"requirement_id": "iadc-5.3.2-leo", "status": "compliant"}],
    )
    print(result.score.overall, result.risk_level.value)

    unified = calculate_unified_score([result], engine.get_pack_or_raise)
    print(unified.grade.value)

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Caelex Team"

# =============================================================================
# Core Models (Re-exported for convenience)
# =============================================================================
from .models import (
    # Enums
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
    # Conditions
    TriBool,
    EvaluationResult,
    Predicate,
    Condition,
    AND,
    OR,
    NOT,
    PRED,
    EQ,
    NE,
    GT,
    GTE,
    LT,
    LTE,
    IN,
    NOT_IN,
    CONTAINS,
    INTERSECTS,
    IS_NULL,
    IS_NOT_NULL,
    BETWEEN,
    # Rule packs
    Requirement,
    RulePack,
    RiskRule,
    RiskThreshold,
    RecommendationRule,
    # Assessment
    RequirementAssessment,
    ComplianceScore,
    GapItem,
    ComplianceSummary,
    ChecklistItem,
    GroupReport,
    AssessmentResult,
)

# =============================================================================
# Engine
# =============================================================================
from .engine import (
    ComplianceEngine,
    ConditionEvaluator,
    build_rule_context,
    evaluate_condition,
    get_default_engine,
)
from .packs import RulePackLoader, load_rule_pack, load_rule_pack_from_string
from .profiles import validate_profile
from .unified import UnifiedScore, calculate_unified_score

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    AssessmentError,
    CaelexError,
    ConditionEvaluationError,
    InvalidConditionError,
    ProfileValidationError,
    RulePackLoadError,
    RulePackNotFoundError,
    RulePackValidationError,
    RulePackVersionMismatch,
    UnknownDomainError,
    UnknownRequirementError,
)

__all__ = [
    "__version__",
    # Enums
    "BindingLevel",
    "ComplianceGrade",
    "ComplianceStatus",
    "ConditionOperator",
    "DocumentStatus",
    "EffortLevel",
    "GapPriority",
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
    # Models
    "Requirement",
    "RulePack",
    "RiskRule",
    "RiskThreshold",
    "RecommendationRule",
    "RequirementAssessment",
    "ComplianceScore",
    "GapItem",
    "ComplianceSummary",
    "ChecklistItem",
    "GroupReport",
    "AssessmentResult",
    # Engine
    "ComplianceEngine",
    "ConditionEvaluator",
    "build_rule_context",
    "evaluate_condition",
    "get_default_engine",
    "RulePackLoader",
    "load_rule_pack",
    "load_rule_pack_from_string",
    "validate_profile",
    "UnifiedScore",
    "calculate_unified_score",
    # Exceptions
    "CaelexError",
    "RulePackLoadError",
    "RulePackValidationError",
    "RulePackVersionMismatch",
    "RulePackNotFoundError",
    "UnknownDomainError",
    "ProfileValidationError",
    "AssessmentError",
    "UnknownRequirementError",
    "ConditionEvaluationError",
    "InvalidConditionError",
]
