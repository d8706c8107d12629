"""
Caelex Reporting

Derived views over an assessment: status summary, documentation
checklist, EU Space Act cross-references and per-group reports.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..models import (
    ChecklistItem,
    ComplianceStatus,
    ComplianceSummary,
    DocumentStatus,
    GapItem,
    GroupReport,
    Requirement,
    RulePack,
)
from .risk import threshold_level
from .scoring import group_by_dimension, group_score, status_of


# =============================================================================
# Summary
# =============================================================================

_SUMMARY_FIELDS = {
    ComplianceStatus.COMPLIANT: "compliant",
    ComplianceStatus.PARTIAL: "partial",
    ComplianceStatus.NON_COMPLIANT: "non_compliant",
    ComplianceStatus.NOT_ASSESSED: "not_assessed",
    ComplianceStatus.NOT_APPLICABLE: "not_applicable",
}

_COUNTED_STATUSES = frozenset({
    ComplianceStatus.COMPLIANT,
    ComplianceStatus.PARTIAL,
    ComplianceStatus.NON_COMPLIANT,
})

_GAP_STATUSES = frozenset({
    ComplianceStatus.PARTIAL,
    ComplianceStatus.NON_COMPLIANT,
    ComplianceStatus.NOT_ASSESSED,
})


def build_summary(
    pack: RulePack,
    requirements: list[Requirement],
    statuses: Mapping[str, ComplianceStatus],
) -> ComplianceSummary:
    """Status counts over the applicable requirements."""
    summary = ComplianceSummary(
        total_requirements=len(pack.requirements),
        applicable_requirements=len(requirements),
    )
    for requirement in requirements:
        status = status_of(requirement, statuses)
        name = _SUMMARY_FIELDS[status]
        setattr(summary, name, getattr(summary, name) + 1)
        if status in _GAP_STATUSES:
            severity = requirement.severity
            summary.gaps_by_severity[severity] = summary.gaps_by_severity.get(severity, 0) + 1
    return summary


# =============================================================================
# Documentation Checklist
# =============================================================================

def document_status(status: ComplianceStatus) -> DocumentStatus:
    if status == ComplianceStatus.COMPLIANT:
        return DocumentStatus.COMPLETE
    if status == ComplianceStatus.PARTIAL:
        return DocumentStatus.PARTIAL
    return DocumentStatus.MISSING


def build_checklist(
    requirements: list[Requirement],
    statuses: Mapping[str, ComplianceStatus],
) -> list[ChecklistItem]:
    """
    One entry per evidence document of the applicable requirements.

    A document needed by several requirements appears once, with the
    best status seen, and is required if any of them is mandatory.
    Sorted required first, then missing, partial, complete.
    """
    items: dict[str, ChecklistItem] = {}
    for requirement in requirements:
        status = document_status(status_of(requirement, statuses))
        for document in requirement.evidence_required:
            existing = items.get(document)
            if existing is None:
                items[document] = ChecklistItem(
                    document=document,
                    required=requirement.is_mandatory,
                    status=status,
                    requirement_ids=[requirement.id],
                )
                continue
            existing.required = existing.required or requirement.is_mandatory
            if status.rank > existing.status.rank:
                existing.status = status
            existing.requirement_ids.append(requirement.id)

    return sorted(
        items.values(),
        key=lambda item: (not item.required, item.status.rank),
    )


# =============================================================================
# EU Space Act Cross-References
# =============================================================================

def eu_space_act_overlaps(requirements: Iterable[Requirement]) -> list[str]:
    """Sorted union of EU Space Act article references."""
    articles: set[str] = set()
    for requirement in requirements:
        articles.update(requirement.eu_space_act_refs)
    return sorted(articles)


def cross_reference_summary(requirements: list[Requirement]) -> dict[str, object]:
    overlapping = [r for r in requirements if r.has_eu_overlap]
    return {
        "total": len(requirements),
        "overlapping": len(overlapping),
        "unique": len(requirements) - len(overlapping),
        "articles": eu_space_act_overlaps(overlapping),
    }


def requirements_for_article(
    packs: Iterable[RulePack],
    article: str,
) -> dict[str, list[Requirement]]:
    """
    Requirements referencing an EU Space Act article, grouped by source.

    Matching is by substring, so "Art. 58" also finds "Art. 58(2)".
    Requirements without a source are grouped under their pack's domain.
    """
    grouped: dict[str, list[Requirement]] = {}
    for pack in packs:
        for requirement in pack.requirements:
            if any(article in ref for ref in requirement.eu_space_act_refs):
                key = requirement.source or pack.domain.value
                grouped.setdefault(key, []).append(requirement)
    return grouped


# =============================================================================
# Group Reports
# =============================================================================

def build_group_reports(
    pack: RulePack,
    requirements: list[Requirement],
    statuses: Mapping[str, ComplianceStatus],
    gaps: list[GapItem],
    groups: Optional[list[str]] = None,
) -> list[GroupReport]:
    """
    Per-group score, status counts and gaps for the pack's report dimension.

    Groups with an entry in the pack's group_risk_thresholds also get a
    risk level from their own ladder, fed the group score and its
    non-compliant count.

    Args:
        groups: Groups to report on, in order; None reports every group
            present among the applicable requirements
    """
    if not pack.report_dimension:
        return []

    members = group_by_dimension(requirements, pack.report_dimension)
    selected = groups if groups is not None else list(members)

    reports = []
    for group in selected:
        group_requirements = members.get(group, [])
        ids = {r.id for r in group_requirements}
        report = GroupReport(
            dimension=pack.report_dimension,
            group=group,
            requirement_ids=[r.id for r in group_requirements],
            score=group_score(group_requirements, statuses, pack.weight_for),
            gaps=[g for g in gaps if g.requirement_id in ids],
        )
        for requirement in group_requirements:
            status = status_of(requirement, statuses)
            if status != ComplianceStatus.NOT_ASSESSED:
                report.assessed += 1
            if status in _COUNTED_STATUSES:
                name = _SUMMARY_FIELDS[status]
                setattr(report, name, getattr(report, name) + 1)
        thresholds = pack.group_risk_thresholds.get(group)
        if thresholds is not None:
            report.risk_level = threshold_level(thresholds, report.score, report.non_compliant)
        reports.append(report)
    return reports
