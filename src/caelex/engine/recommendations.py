"""
Caelex Recommendation Builder

Recommendations come from two places: the pack's conditional rules
(in pack order) and the top high-priority gaps. Rules flagged
`after_gaps` follow the gap items. Duplicates are dropped and the list
is capped.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .. import config
from ..models import GapItem, GapPriority, RecommendationRule, RulePack, TriBool
from .condition_evaluator import ConditionEvaluator


def recommendation_cap(pack: RulePack) -> int:
    if pack.max_recommendations is not None:
        return pack.max_recommendations
    return config.CX_MAX_RECOMMENDATIONS


def _fired(
    rules: list[RecommendationRule],
    context: Mapping[str, Any],
    evaluator: ConditionEvaluator,
) -> list[str]:
    texts = []
    for rule in rules:
        if rule.condition is None:
            texts.append(rule.text)
        elif evaluator.evaluate(rule.condition, context).value == TriBool.TRUE:
            texts.append(rule.text)
    return texts


def build_recommendations(
    pack: RulePack,
    gaps: list[GapItem],
    context: Mapping[str, Any],
    evaluator: Optional[ConditionEvaluator] = None,
) -> list[str]:
    """
    Ordered, de-duplicated recommendation texts.

    Args:
        pack: Rule pack supplying recommendation rules and caps
        gaps: Sorted gap list
        context: Rule context (profile, scores, gaps)
        evaluator: Condition evaluator to reuse
    """
    evaluator = evaluator or ConditionEvaluator()

    candidates = _fired([r for r in pack.recommendations if not r.after_gaps], context, evaluator)

    high_priority = [g for g in gaps if g.priority == GapPriority.HIGH]
    for gap in high_priority[:pack.gap_recommendations]:
        candidates.append(f"Address: {gap.recommendation}")

    candidates.extend(
        _fired([r for r in pack.recommendations if r.after_gaps], context, evaluator)
    )

    # dict preserves first occurrence
    unique = list(dict.fromkeys(candidates))
    return unique[:recommendation_cap(pack)]
