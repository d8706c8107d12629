"""
Caelex Score Calculator

Weighted compliance scoring over assessed statuses.

Each requirement contributes its severity weight to a group's total
and, depending on status, all or half of it to the achieved points:

    compliant       -> weight     achieved, weight total
    partial         -> weight/2   achieved, weight total
    not_applicable  -> excluded
    anything else   -> 0          achieved, weight total

A group's score is round_half_up(achieved / total * 100); an empty or
zero-weight group scores 100.
"""
from __future__ import annotations

import math
from typing import Callable, Iterable, Mapping

from ..models import (
    BindingLevel,
    ComplianceScore,
    ComplianceStatus,
    Requirement,
    RulePack,
)

# Share of the weight earned by each status
STATUS_CREDIT: dict[ComplianceStatus, float] = {
    ComplianceStatus.COMPLIANT: 1.0,
    ComplianceStatus.PARTIAL: 0.5,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def status_of(
    requirement: Requirement,
    statuses: Mapping[str, ComplianceStatus],
) -> ComplianceStatus:
    """Assessed status of a requirement; missing means NOT_ASSESSED."""
    return statuses.get(requirement.id, ComplianceStatus.NOT_ASSESSED)


def group_points(
    requirements: Iterable[Requirement],
    statuses: Mapping[str, ComplianceStatus],
    weight_for: Callable[[Requirement], int],
) -> tuple[float, float]:
    """(achieved, total) weighted points for a group of requirements."""
    achieved = 0.0
    total = 0.0
    for requirement in requirements:
        status = status_of(requirement, statuses)
        if status == ComplianceStatus.NOT_APPLICABLE:
            continue
        weight = weight_for(requirement)
        total += weight
        achieved += weight * STATUS_CREDIT.get(status, 0.0)
    return achieved, total


def points_to_score(achieved: float, total: float) -> int:
    if total <= 0:
        return 100
    return round_half_up(achieved / total * 100)


def group_score(
    requirements: Iterable[Requirement],
    statuses: Mapping[str, ComplianceStatus],
    weight_for: Callable[[Requirement], int],
) -> int:
    """Integer score in [0, 100] for a group of requirements."""
    return points_to_score(*group_points(requirements, statuses, weight_for))


def group_by_dimension(
    requirements: Iterable[Requirement],
    dimension: str,
) -> dict[str, list[Requirement]]:
    """
    Group requirements by a dimension, in first-seen order.

    A requirement with a list-valued dimension lands in every group it
    names; one with no value for the dimension lands in none.
    """
    groups: dict[str, list[Requirement]] = {}
    for requirement in requirements:
        for value in requirement.dimension_values(dimension):
            groups.setdefault(value, []).append(requirement)
    return groups


def calculate_scores(
    pack: RulePack,
    requirements: list[Requirement],
    statuses: Mapping[str, ComplianceStatus],
) -> ComplianceScore:
    """
    Score the applicable requirements of a pack.

    Args:
        pack: Rule pack supplying weights, dimensions and recommended levels
        requirements: Applicable requirements
        statuses: Requirement ID to assessed status

    Returns:
        ComplianceScore with overall, mandatory, recommended and per-dimension scores
    """
    weight_for = pack.weight_for
    recommended_levels = set(pack.recommended_levels)

    mandatory = [r for r in requirements if r.binding_level == BindingLevel.MANDATORY]
    recommended = [r for r in requirements if r.binding_level in recommended_levels]

    by_dimension: dict[str, dict[str, int]] = {}
    for dimension in pack.score_dimensions:
        by_dimension[dimension] = {
            group: group_score(members, statuses, weight_for)
            for group, members in group_by_dimension(requirements, dimension).items()
        }

    return ComplianceScore(
        overall=group_score(requirements, statuses, weight_for),
        mandatory=group_score(mandatory, statuses, weight_for),
        recommended=group_score(recommended, statuses, weight_for),
        by_dimension=by_dimension,
    )
