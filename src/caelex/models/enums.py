"""
Caelex Enumerations

All enumeration types used throughout the Caelex compliance engine.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Regulatory Domains
# =============================================================================

class RegulatoryDomain(str, Enum):
    """Regulatory regimes with a rule pack and profile validator."""
    EU_SPACE_ACT = "eu_space_act"
    NIS2 = "nis2"
    COPUOS = "copuos"              # COPUOS LTS + IADC debris guidelines
    UK_SPACE = "uk_space"          # UK Space Industry Act 2018
    EXPORT_CONTROL = "export_control"  # ITAR / EAR


# =============================================================================
# Assessment Status
# =============================================================================

class ComplianceStatus(str, Enum):
    """Self-assessed status of a single requirement."""
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_ASSESSED = "not_assessed"
    NOT_APPLICABLE = "not_applicable"  # Excluded from score denominators


class BindingLevel(str, Enum):
    """How strongly a requirement binds the operator."""
    MANDATORY = "mandatory"
    RECOMMENDED = "recommended"
    BEST_PRACTICE = "best_practice"
    GUIDANCE = "guidance"            # UK CAA guidance material


# =============================================================================
# Risk, Priority and Effort
# =============================================================================

class RiskLevel(str, Enum):
    """Overall risk tier of an assessment."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class GapPriority(str, Enum):
    """Remediation priority of a gap."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank (high first)."""
        return {"high": 0, "medium": 1, "low": 2}[self.value]


class EffortLevel(str, Enum):
    """Estimated effort to close a gap."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DocumentStatus(str, Enum):
    """Status of an evidence document in the checklist."""
    COMPLETE = "complete"
    PARTIAL = "partial"
    MISSING = "missing"

    @property
    def rank(self) -> int:
        """Sort rank (missing first)."""
        return {"missing": 0, "partial": 1, "complete": 2}[self.value]


# =============================================================================
# Unified Score
# =============================================================================

class ComplianceGrade(str, Enum):
    """Letter grade of the unified score."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class UnifiedStatus(str, Enum):
    """Overall status of the unified score."""
    COMPLIANT = "compliant"
    MOSTLY_COMPLIANT = "mostly_compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_ASSESSED = "not_assessed"


class ModuleStatus(str, Enum):
    """Status of one module within the unified score."""
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_STARTED = "not_started"


class RecommendationPriority(str, Enum):
    """Priority of a unified-score recommendation."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"critical": 0, "high": 1, "medium": 2, "low": 3}[self.value]


# =============================================================================
# Condition Operators
# =============================================================================

class ConditionOperator(str, Enum):
    """Operators for condition evaluation."""
    # Logical operators (for composing conditions)
    AND = "and"
    OR = "or"
    NOT = "not"

    # Comparison operators (for predicates)
    EQ = "eq"                # Equal
    NE = "ne"                # Not equal
    GT = "gt"                # Greater than
    LT = "lt"                # Less than
    GTE = "gte"              # Greater than or equal
    LTE = "lte"              # Less than or equal
    IN = "in"                # In list
    NOT_IN = "not_in"        # Not in list
    CONTAINS = "contains"    # String/list contains
    INTERSECTS = "intersects"  # List shares at least one element with list
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    BETWEEN = "between"      # Value between two bounds (inclusive)


LOGICAL_OPERATORS = frozenset({
    ConditionOperator.AND,
    ConditionOperator.OR,
    ConditionOperator.NOT,
})
