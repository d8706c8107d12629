"""
Caelex Rule Pack Schemas

Pydantic models for validating rule pack YAML/JSON files.

These schemas define the structure of rule packs that can be loaded at
runtime. They map to the domain models in caelex.models.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check major-version compatibility
"""
from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

DomainValue = Literal["eu_space_act", "nis2", "copuos", "uk_space", "export_control"]

BindingLevelValue = Literal["mandatory", "recommended", "best_practice", "guidance"]

RiskLevelValue = Literal["critical", "high", "medium", "low"]

EffortValue = Literal["low", "medium", "high"]

ModuleValue = Literal[
    "authorization", "debris", "cybersecurity",
    "insurance", "environmental", "reporting",
]

DimensionValue = Literal["category", "source", "license_types", "module", "binding_level"]

ConditionOperatorValue = Literal[
    "and", "or", "not",
    "eq", "ne", "gt", "lt", "gte", "lte",
    "in", "not_in", "contains", "intersects",
    "is_null", "is_not_null", "is_empty", "is_not_empty", "between",
]


# =============================================================================
# Conditions
# =============================================================================

class ConditionSchema(BaseModel):
    """
    Schema for a composable condition.

    For logical operators (and, or, not), use children.
    For comparison operators, use field/value directly.
    """
    op: ConditionOperatorValue = Field(..., description="Operator")
    children: Optional[list["ConditionSchema"]] = Field(
        None, description="Child conditions for AND/OR/NOT"
    )
    field: Optional[str] = Field(None, description="Field path, e.g. 'profile.orbit_regime'")
    value: Optional[Any] = Field(None, description="Value for comparison")
    id: Optional[str] = Field(None, description="Condition ID for explanations")
    description: Optional[str] = Field(None, description="Human-readable description")

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_structure(self) -> "ConditionSchema":
        """Validate condition structure based on operator type."""
        if self.op in {"and", "or", "not"}:
            if not self.children:
                raise ValueError(f"Logical operator '{self.op}' requires 'children'")
            if self.op == "not" and len(self.children) != 1:
                raise ValueError("NOT operator must have exactly one child")
        else:
            if self.field is None:
                raise ValueError(f"Comparison operator '{self.op}' requires 'field'")
            if self.op == "between" and not (
                isinstance(self.value, list) and len(self.value) == 2
            ):
                raise ValueError("BETWEEN operator requires a two-element list value")
        return self


# =============================================================================
# Requirements
# =============================================================================

class RequirementSchema(BaseModel):
    """Schema for a single requirement row."""
    id: str = Field(..., description="Unique identifier within the pack")
    reference: str = Field(..., description="Article/section/guideline number")
    title: str
    description: str
    category: str = Field(..., description="Domain category")
    severity: str = Field(..., description="Key into the pack's severity_weights")
    binding_level: BindingLevelValue
    source: Optional[str] = Field(None, description="Originating instrument (IADC, ITAR...)")
    applies_when: Optional[ConditionSchema] = Field(
        None, description="Applicability predicate; omitted means always applicable"
    )
    license_types: list[str] = Field(default_factory=list)
    module: Optional[ModuleValue] = Field(None, description="Unified-score module")
    eu_space_act_refs: list[str] = Field(default_factory=list)
    evidence_required: list[str] = Field(default_factory=list)
    implementation_guidance: list[str] = Field(default_factory=list)
    compliance_question: Optional[str] = None
    penalty: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


# =============================================================================
# Scoring, Risk and Recommendation Configuration
# =============================================================================

class RiskThresholdSchema(BaseModel):
    """Scores strictly below `below` (or too many non-compliant items) map to `level`."""
    below: int = Field(..., ge=0, le=101)
    level: RiskLevelValue
    non_compliant_above: Optional[int] = Field(
        None, ge=0, description="Also applies when more items than this are non-compliant"
    )

    model_config = {"extra": "forbid"}


class RiskRuleSchema(BaseModel):
    """Conditional risk override evaluated before the threshold ladder."""
    id: str
    level: RiskLevelValue
    condition: ConditionSchema
    description: Optional[str] = None

    model_config = {"extra": "forbid"}


class RecommendationRuleSchema(BaseModel):
    """Recommendation text emitted when its condition holds."""
    id: str
    text: str
    condition: Optional[ConditionSchema] = None
    after_gaps: bool = Field(False, description="Emit after the 'Address: ...' gap items")

    model_config = {"extra": "forbid"}


# =============================================================================
# Top-Level Rule Pack
# =============================================================================

class RulePackSchema(BaseModel):
    """
    Top-level schema for a rule pack YAML/JSON file.

    A rule pack defines the requirement table and scoring behaviour
    for one regulatory domain.
    """
    # Metadata
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    id: str = Field(..., description="Unique identifier (e.g., 'INT-COPUOS-IADC-2025')")
    domain: DomainValue
    name: str
    version: str = Field(..., description="Version string (e.g., '2025.1')")
    jurisdiction: str = Field(..., description="Jurisdiction code (e.g., 'EU', 'UK')")
    effective_date: date
    description: Optional[str] = None
    authority: Optional[str] = Field(None, description="Competent authority")

    # Scoring
    severity_weights: dict[str, int] = Field(
        default_factory=lambda: {"critical": 3, "major": 2, "minor": 1}
    )
    score_dimensions: list[DimensionValue] = Field(default_factory=lambda: ["category"])
    recommended_levels: list[BindingLevelValue] = Field(
        default_factory=lambda: ["recommended", "best_practice"]
    )

    # Risk
    risk_basis: Literal["mandatory", "overall"] = "mandatory"
    risk_thresholds: list[RiskThresholdSchema] = Field(
        default_factory=lambda: [
            RiskThresholdSchema(below=50, level="critical"),
            RiskThresholdSchema(below=70, level="high"),
            RiskThresholdSchema(below=85, level="medium"),
        ]
    )
    risk_rules: list[RiskRuleSchema] = Field(default_factory=list)
    escalate_critical_noncompliance: bool = True
    scope_condition: Optional[ConditionSchema] = None

    # Gap analysis
    effort_by_category: dict[str, EffortValue] = Field(default_factory=dict)
    default_effort: EffortValue = "medium"
    dependencies_by_category: dict[str, list[str]] = Field(default_factory=dict)

    # Recommendations
    recommendations: list[RecommendationRuleSchema] = Field(default_factory=list)
    gap_recommendations: int = Field(3, ge=0)
    max_recommendations: Optional[int] = Field(None, ge=1)

    # Group reports
    report_dimension: Optional[DimensionValue] = None
    report_groups_from: Optional[str] = Field(
        None, description="Profile field naming the groups, e.g. 'required_licences'"
    )
    group_risk_thresholds: dict[str, list[RiskThresholdSchema]] = Field(
        default_factory=dict, description="Per-group ladders for group reports"
    )

    requirements: list[RequirementSchema] = Field(..., min_length=1)

    @field_validator("jurisdiction")
    @classmethod
    def validate_jurisdiction(cls, v: str) -> str:
        return v.upper()

    @field_validator("severity_weights")
    @classmethod
    def validate_weights(cls, v: dict[str, int]) -> dict[str, int]:
        for key, weight in v.items():
            if weight < 0:
                raise ValueError(f"Severity weight for '{key}' must be non-negative")
        return v

    @field_validator("risk_thresholds")
    @classmethod
    def validate_thresholds(cls, v: list[RiskThresholdSchema]) -> list[RiskThresholdSchema]:
        bounds = [t.below for t in v]
        if bounds != sorted(bounds):
            raise ValueError("risk_thresholds must be in ascending order of 'below'")
        return v

    @field_validator("group_risk_thresholds")
    @classmethod
    def validate_group_thresholds(
        cls, v: dict[str, list[RiskThresholdSchema]]
    ) -> dict[str, list[RiskThresholdSchema]]:
        for group, thresholds in v.items():
            bounds = [t.below for t in thresholds]
            if bounds != sorted(bounds):
                raise ValueError(
                    f"group_risk_thresholds['{group}'] must be in ascending order of 'below'"
                )
        return v

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_rule_pack(data: dict[str, Any]) -> RulePackSchema:
    """
    Validate a rule pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return RulePackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True if the pack's schema major version matches SCHEMA_VERSION."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
