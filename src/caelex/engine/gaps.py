"""
Caelex Gap Analyzer

Turns every applicable requirement that is not compliant (and not
marked not applicable) into a prioritised remediation item.
"""
from __future__ import annotations

from typing import Mapping

from ..models import (
    ComplianceStatus,
    GapItem,
    GapPriority,
    Requirement,
    RulePack,
)
from .scoring import status_of

_NOT_A_GAP = frozenset({ComplianceStatus.COMPLIANT, ComplianceStatus.NOT_APPLICABLE})


def gap_priority(requirement: Requirement) -> GapPriority:
    """Mandatory and critical is HIGH; either one is MEDIUM; else LOW."""
    if requirement.is_mandatory and requirement.is_critical:
        return GapPriority.HIGH
    if requirement.is_mandatory or requirement.is_critical:
        return GapPriority.MEDIUM
    return GapPriority.LOW


def describe_gap(requirement: Requirement, status: ComplianceStatus) -> str:
    label = f"{requirement.reference}: {requirement.title}"
    if status == ComplianceStatus.NON_COMPLIANT:
        return f"Non-compliant with {label}"
    if status == ComplianceStatus.PARTIAL:
        return f"Partially compliant with {label}"
    return f"Not yet assessed: {label}"


def recommend_for(requirement: Requirement) -> str:
    if requirement.implementation_guidance:
        return requirement.implementation_guidance[0]
    return f"Review and implement {requirement.title}"


def build_gap(
    pack: RulePack,
    requirement: Requirement,
    status: ComplianceStatus,
) -> GapItem:
    return GapItem(
        requirement_id=requirement.id,
        reference=requirement.reference,
        title=requirement.title,
        category=requirement.category,
        severity=requirement.severity,
        status=status,
        gap=describe_gap(requirement, status),
        priority=gap_priority(requirement),
        recommendation=recommend_for(requirement),
        estimated_effort=pack.effort_for(requirement.category),
        dependencies=pack.dependencies_for(requirement.category),
        source=requirement.source,
    )


def analyze_gaps(
    pack: RulePack,
    requirements: list[Requirement],
    statuses: Mapping[str, ComplianceStatus],
) -> list[GapItem]:
    """
    Gap list for the applicable requirements.

    Sorted high, medium, low; ties keep pack order.
    """
    gaps = []
    for requirement in requirements:
        status = status_of(requirement, statuses)
        if status in _NOT_A_GAP:
            continue
        gaps.append(build_gap(pack, requirement, status))
    gaps.sort(key=lambda g: g.priority.rank)
    return gaps
