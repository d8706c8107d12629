"""
Caelex Assessment Models

Inputs and outputs of a compliance assessment.

Key components:
- RequirementAssessment: operator's self-assessed status for one requirement
- ComplianceScore: overall, mandatory, recommended and per-dimension scores
- GapItem: one prioritised remediation item
- ComplianceSummary: status and gap counts
- ChecklistItem: one evidence document with its collection status
- GroupReport: score and gaps for one group of a score dimension
- AssessmentResult: everything produced by ComplianceEngine.perform_assessment
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..canon import canonical_json
from .enums import (
    ComplianceStatus,
    DocumentStatus,
    EffortLevel,
    GapPriority,
    RegulatoryDomain,
    RiskLevel,
)


# =============================================================================
# Inputs
# =============================================================================

@dataclass
class RequirementAssessment:
    """
    Self-assessed status of a single requirement.

    A requirement with no assessment is treated as NOT_ASSESSED.
    """
    requirement_id: str
    status: ComplianceStatus = ComplianceStatus.NOT_ASSESSED
    notes: Optional[str] = None
    evidence_notes: Optional[str] = None
    responsible_party: Optional[str] = None
    target_date: Optional[date] = None


# =============================================================================
# Scores
# =============================================================================

@dataclass
class ComplianceScore:
    """
    Weighted compliance scores, all integers in [0, 100].

    by_dimension maps a dimension name (e.g. "category", "source") to
    {group value: score}. Only non-empty groups are present.
    """
    overall: int
    mandatory: int
    recommended: int
    by_dimension: dict[str, dict[str, int]] = field(default_factory=dict)

    def dimension(self, name: str) -> dict[str, int]:
        return self.by_dimension.get(name, {})


# =============================================================================
# Gap Analysis
# =============================================================================

@dataclass
class GapItem:
    """A non-compliant, partial or unassessed requirement with remediation."""
    requirement_id: str
    reference: str
    title: str
    category: str
    severity: str
    status: ComplianceStatus
    gap: str
    priority: GapPriority
    recommendation: str
    estimated_effort: EffortLevel
    dependencies: list[str] = field(default_factory=list)
    source: Optional[str] = None


# =============================================================================
# Summary and Checklist
# =============================================================================

@dataclass
class ComplianceSummary:
    """Status counts over applicable requirements."""
    total_requirements: int
    applicable_requirements: int
    compliant: int = 0
    partial: int = 0
    non_compliant: int = 0
    not_assessed: int = 0
    not_applicable: int = 0
    gaps_by_severity: dict[str, int] = field(default_factory=dict)

    @property
    def critical_gaps(self) -> int:
        return self.gaps_by_severity.get("critical", 0)

    @property
    def major_gaps(self) -> int:
        return self.gaps_by_severity.get("major", 0)


@dataclass
class ChecklistItem:
    """One evidence document needed by the applicable requirements."""
    document: str
    required: bool
    status: DocumentStatus
    requirement_ids: list[str] = field(default_factory=list)


@dataclass
class GroupReport:
    """
    Score and gaps for one group of a dimension (e.g. one UK licence).

    `risk_level` is set only for groups the pack gives their own ladder.
    """
    dimension: str
    group: str
    requirement_ids: list[str]
    score: int
    gaps: list[GapItem] = field(default_factory=list)
    assessed: int = 0
    compliant: int = 0
    partial: int = 0
    non_compliant: int = 0
    risk_level: Optional[RiskLevel] = None


# =============================================================================
# Assessment Result
# =============================================================================

@dataclass
class AssessmentResult:
    """
    Complete output of a compliance assessment.

    `profile` is the validated profile including derived fields.
    `extras` carries domain-specific derived information such as the
    NIS2 incident timeline or the UK required licences.
    `requirement_statuses` maps every applicable requirement to its
    effective status (missing assessments as not_assessed).
    """
    pack_id: str
    pack_version: str
    pack_hash: str
    domain: RegulatoryDomain
    profile: dict[str, Any]
    applicable_requirement_ids: list[str]
    score: ComplianceScore
    risk_level: RiskLevel
    risk_reason: str
    gaps: list[GapItem]
    recommendations: list[str]
    summary: ComplianceSummary
    checklist: list[ChecklistItem] = field(default_factory=list)
    eu_space_act_overlaps: list[str] = field(default_factory=list)
    group_reports: list[GroupReport] = field(default_factory=list)
    extras: dict[str, Any] = field(default_factory=dict)
    requirement_statuses: dict[str, ComplianceStatus] = field(default_factory=dict)
    ignored_assessment_ids: list[str] = field(default_factory=list)

    @property
    def overall_score(self) -> int:
        return self.score.overall

    @property
    def high_priority_gaps(self) -> list[GapItem]:
        return [g for g in self.gaps if g.priority == GapPriority.HIGH]

    def to_dict(self) -> dict[str, Any]:
        """JSON-native dict (enums as values, dates as ISO strings)."""
        data = json.loads(canonical_json(self))
        data["summary"]["critical_gaps"] = self.summary.critical_gaps
        data["summary"]["major_gaps"] = self.summary.major_gaps
        return data
