"""
Caelex Exception Hierarchy

Domain-specific exceptions for compliance scoring and gap analysis.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: CX_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CaelexError(Exception):
    """
    Base exception for all Caelex errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (CX_*)
        details: Additional context about the error
        pack_id: Associated rule pack ID if applicable
    """
    message: str
    code: str = "CX_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    pack_id: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.pack_id:
            parts.append(f"(pack: {self.pack_id})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.pack_id:
            result["pack_id"] = self.pack_id
        return result


# =============================================================================
# Rule Pack Errors
# =============================================================================

@dataclass
class RulePackLoadError(CaelexError):
    """Failed to load a rule pack from file."""
    code: str = "CX_PACK_LOAD_ERROR"


@dataclass
class RulePackValidationError(CaelexError):
    """Rule pack schema or reference validation failed."""
    code: str = "CX_PACK_VALIDATION_ERROR"


@dataclass
class RulePackVersionMismatch(CaelexError):
    """Rule pack schema version is incompatible."""
    code: str = "CX_PACK_VERSION_MISMATCH"


@dataclass
class RulePackNotFoundError(CaelexError):
    """Requested rule pack is not loaded."""
    code: str = "CX_PACK_NOT_FOUND"


@dataclass
class UnknownDomainError(CaelexError):
    """No profile validator or pack exists for the regulatory domain."""
    code: str = "CX_UNKNOWN_DOMAIN"


# =============================================================================
# Input Errors
# =============================================================================

@dataclass
class ProfileValidationError(CaelexError):
    """Operator profile is invalid or incomplete."""
    code: str = "CX_PROFILE_INVALID"


@dataclass
class AssessmentError(CaelexError):
    """Requirement assessments are malformed."""
    code: str = "CX_ASSESSMENT_INVALID"


@dataclass
class UnknownRequirementError(CaelexError):
    """Referenced requirement does not exist in the pack."""
    code: str = "CX_UNKNOWN_REQUIREMENT"


# =============================================================================
# Condition Evaluation Errors
# =============================================================================

@dataclass
class ConditionEvaluationError(CaelexError):
    """Condition evaluation failed."""
    code: str = "CX_CONDITION_EVAL_ERROR"


@dataclass
class InvalidConditionError(CaelexError):
    """Condition structure is invalid."""
    code: str = "CX_INVALID_CONDITION"
