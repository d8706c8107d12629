"""
Caelex Applicability Filter

Selects the requirements of a rule pack that apply to an operator
profile.

A requirement applies only when its `applies_when` condition evaluates
TRUE. UNKNOWN (a profile field the condition needs is absent) is
treated as not applicable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..models import Requirement, RulePack, TriBool
from .condition_evaluator import ConditionEvaluator

logger = logging.getLogger(__name__)


@dataclass
class ApplicabilityFilter:
    """
    Filters a pack's requirement table against a profile.

    Usage:
        applicable = ApplicabilityFilter().filter(pack, profile)
    """

    evaluator: ConditionEvaluator = field(default_factory=ConditionEvaluator)

    def in_scope(self, pack: RulePack, profile: Mapping[str, Any]) -> bool:
        """False when the pack's scope condition is not TRUE for the profile."""
        if pack.scope_condition is None:
            return True
        result = self.evaluator.evaluate(pack.scope_condition, {"profile": profile})
        if result.value != TriBool.TRUE:
            logger.info(
                "Profile out of scope for pack %s: %s",
                pack.id, result.explanation,
                extra={"pack_id": pack.id, "domain": pack.domain.value},
            )
            return False
        return True

    def applies(self, requirement: Requirement, profile: Mapping[str, Any]) -> bool:
        if requirement.applies_when is None:
            return True
        result = self.evaluator.evaluate(requirement.applies_when, {"profile": profile})
        if result.value == TriBool.UNKNOWN:
            logger.debug(
                "Applicability of %s unknown; missing %s",
                requirement.id, ", ".join(result.missing_fields) or "nothing",
                extra={"requirement_id": requirement.id},
            )
        return result.value == TriBool.TRUE

    def filter(self, pack: RulePack, profile: Mapping[str, Any]) -> list[Requirement]:
        """Applicable requirements, in pack order."""
        if not self.in_scope(pack, profile):
            return []
        return [r for r in pack.requirements if self.applies(r, profile)]
