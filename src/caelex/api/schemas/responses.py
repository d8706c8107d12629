"""Response schemas for the API."""

from pydantic import BaseModel
from typing import Any, Optional


class PackSummary(BaseModel):
    """Summary of a rule pack."""
    id: str
    name: str
    domain: str
    jurisdiction: str
    version: str
    effective_date: str
    authority: Optional[str] = None
    requirement_count: int
    categories: list[str]


class PackDetail(PackSummary):
    """Full details of a rule pack."""
    description: Optional[str] = None
    rule_pack_hash: str
    severity_weights: dict[str, int]
    score_dimensions: list[str]
    risk_basis: str
    recommendation_rules: list[str]
    max_recommendations: int


class RequirementSummary(BaseModel):
    """One requirement of a pack."""
    id: str
    reference: str
    title: str
    category: str
    severity: str
    binding_level: str
    source: Optional[str] = None
    module: Optional[str] = None


class RequirementDetail(RequirementSummary):
    """A requirement with its guidance and evidence."""
    description: str
    license_types: list[str]
    eu_space_act_refs: list[str]
    evidence_required: list[str]
    implementation_guidance: list[str]
    compliance_question: Optional[str] = None
    penalty: dict[str, Any]
    conditional: bool


class ScoreOut(BaseModel):
    overall: int
    mandatory: int
    recommended: int
    by_dimension: dict[str, dict[str, int]]


class GapOut(BaseModel):
    """A prioritised remediation item."""
    requirement_id: str
    reference: str
    title: str
    category: str
    severity: str
    status: str  # partial|non_compliant|not_assessed
    gap: str
    priority: str  # high|medium|low
    recommendation: str
    estimated_effort: str
    dependencies: list[str]
    source: Optional[str] = None


class SummaryOut(BaseModel):
    total_requirements: int
    applicable_requirements: int
    compliant: int
    partial: int
    non_compliant: int
    not_assessed: int
    not_applicable: int
    gaps_by_severity: dict[str, int]
    critical_gaps: int
    major_gaps: int


class ChecklistItemOut(BaseModel):
    document: str
    required: bool
    status: str  # missing|partial|complete
    requirement_ids: list[str]


class GroupReportOut(BaseModel):
    dimension: str
    group: str
    requirement_ids: list[str]
    score: int
    gaps: list[GapOut]
    assessed: int
    compliant: int
    partial: int
    non_compliant: int
    risk_level: Optional[str] = None  # critical|high|medium|low


class AssessResponse(BaseModel):
    """Response from a compliance assessment."""
    # Identifiers
    pack_id: str
    pack_version: str
    pack_hash: str
    domain: str

    # Inputs as validated
    profile: dict[str, Any]
    applicable_requirement_ids: list[str]
    ignored_assessment_ids: list[str]

    # Scoring
    score: ScoreOut
    risk_level: str  # critical|high|medium|low
    risk_reason: str

    # Remediation
    gaps: list[GapOut]
    recommendations: list[str]

    # Reporting
    summary: SummaryOut
    checklist: list[ChecklistItemOut]
    eu_space_act_overlaps: list[str]
    group_reports: list[GroupReportOut]
    extras: dict[str, Any]
    requirement_statuses: dict[str, str]


class ApplicableResponse(BaseModel):
    """Applicable requirements for a profile."""
    pack_id: str
    profile: dict[str, Any]
    applicable_requirement_ids: list[str]
    eu_space_act_overlaps: list[str]
    cross_reference: dict[str, Any]


class UnifiedFactorOut(BaseModel):
    id: str
    pack_id: str
    name: str
    reference: str
    max_points: float
    earned_points: float
    is_critical: bool
    status: str


class ModuleScoreOut(BaseModel):
    module: str
    score: int
    weight: float
    weighted_score: int
    status: str  # compliant|partial|non_compliant|not_started
    factors: list[UnifiedFactorOut]


class UnifiedRecommendationOut(BaseModel):
    priority: str  # critical|high|medium|low
    module: str
    action: str
    impact: str
    reference: str
    estimated_effort: str


class UnifiedResponse(BaseModel):
    """Unified cross-domain score."""
    overall: int
    grade: str  # A-F
    status: str
    breakdown: dict[str, ModuleScoreOut]
    recommendations: list[UnifiedRecommendationOut]
    pack_ids: list[str]


class CrossReferenceResponse(BaseModel):
    """Requirements across packs that reference one EU Space Act article."""
    article: str
    total: int
    by_source: dict[str, list[RequirementSummary]]
