"""
Caelex Condition Evaluator

Evaluates composable conditions against an evaluation context using
three-valued logic.

The context is a nested mapping. For applicability it is
{"profile": {...}}; for risk and recommendation rules it also carries
"scores" and "gaps" (see engine.assessment.build_rule_context).

Key features:
- TriBool evaluation (TRUE, FALSE, UNKNOWN)
- Field path resolution (e.g., "profile.orbit_regime")
- Stable evaluation order for determinism
- Tracks missing fields for UNKNOWN results
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Union

from ..exceptions import ConditionEvaluationError
from ..models import (
    Condition,
    ConditionOperator,
    EvaluationResult,
    TriBool,
)

_NUMERIC_OPERATORS = frozenset({
    ConditionOperator.GT,
    ConditionOperator.GTE,
    ConditionOperator.LT,
    ConditionOperator.LTE,
    ConditionOperator.BETWEEN,
})


# =============================================================================
# Field Path Resolution
# =============================================================================

def resolve_field_path(obj: Any, path: str) -> tuple[Any, bool]:
    """
    Resolve a dot-notation field path to a value.

    Dictionary keys are tried before attributes so that a profile dict
    with a key named like a dict method ("items", "keys") still resolves.

    Args:
        obj: Root mapping or object
        path: Dot-notation path (e.g., "scores.by_category.licensing")

    Returns:
        Tuple of (resolved_value, found). If not found, returns (None, False).
    """
    current = obj
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return (None, False)
            current = current[part]
        elif hasattr(current, part):
            current = getattr(current, part)
        else:
            return (None, False)
    return (current, True)


# =============================================================================
# Comparison Operators
# =============================================================================

def compare_values(
    actual: Any,
    operator: ConditionOperator,
    expected: Any,
) -> TriBool:
    """
    Compare two values using the specified operator.

    Returns UNKNOWN when `actual` is None (except for null checks) or
    when the types cannot be compared.
    """
    if operator == ConditionOperator.IS_NULL:
        return TriBool.from_bool(actual is None)
    if operator == ConditionOperator.IS_NOT_NULL:
        return TriBool.from_bool(actual is not None)

    if actual is None:
        return TriBool.UNKNOWN

    if operator == ConditionOperator.IS_EMPTY:
        if isinstance(actual, (str, list, tuple, dict, set)):
            return TriBool.from_bool(len(actual) == 0)
        return TriBool.FALSE
    if operator == ConditionOperator.IS_NOT_EMPTY:
        if isinstance(actual, (str, list, tuple, dict, set)):
            return TriBool.from_bool(len(actual) > 0)
        return TriBool.TRUE

    if operator in _NUMERIC_OPERATORS:
        actual = _coerce_numeric(actual)
        if isinstance(expected, (list, tuple)):
            expected = tuple(_coerce_numeric(v) for v in expected)
        else:
            expected = _coerce_numeric(expected)

    try:
        if operator == ConditionOperator.EQ:
            return TriBool.from_bool(actual == expected)

        elif operator == ConditionOperator.NE:
            return TriBool.from_bool(actual != expected)

        elif operator == ConditionOperator.GT:
            return TriBool.from_bool(actual > expected)

        elif operator == ConditionOperator.GTE:
            return TriBool.from_bool(actual >= expected)

        elif operator == ConditionOperator.LT:
            return TriBool.from_bool(actual < expected)

        elif operator == ConditionOperator.LTE:
            return TriBool.from_bool(actual <= expected)

        elif operator == ConditionOperator.IN:
            if isinstance(expected, (list, tuple, set, frozenset)):
                return TriBool.from_bool(actual in expected)
            return TriBool.FALSE

        elif operator == ConditionOperator.NOT_IN:
            if isinstance(expected, (list, tuple, set, frozenset)):
                return TriBool.from_bool(actual not in expected)
            return TriBool.TRUE

        elif operator == ConditionOperator.CONTAINS:
            if isinstance(actual, str) and isinstance(expected, str):
                return TriBool.from_bool(expected in actual)
            if isinstance(actual, (list, tuple, set, frozenset)):
                return TriBool.from_bool(expected in actual)
            return TriBool.FALSE

        elif operator == ConditionOperator.INTERSECTS:
            actual_items = actual if isinstance(actual, (list, tuple, set, frozenset)) else [actual]
            expected_items = expected if isinstance(expected, (list, tuple, set, frozenset)) else [expected]
            return TriBool.from_bool(any(item in expected_items for item in actual_items))

        elif operator == ConditionOperator.BETWEEN:
            if isinstance(expected, (list, tuple)) and len(expected) == 2:
                low, high = expected
                return TriBool.from_bool(low <= actual <= high)
            return TriBool.FALSE

        else:
            return TriBool.UNKNOWN

    except (TypeError, ValueError):
        return TriBool.UNKNOWN


def _coerce_numeric(value: Any) -> Union[int, float, Decimal, Any]:
    """Coerce numeric strings for ordered comparisons; bools are left alone."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        try:
            if "." in value:
                return Decimal(value)
            return int(value)
        except (ValueError, ArithmeticError):
            return value
    return value


# =============================================================================
# Condition Evaluator
# =============================================================================

@dataclass
class ConditionEvaluator:
    """
    Evaluates composable conditions against a context mapping.

    Usage:
        evaluator = ConditionEvaluator()
        result = evaluator.evaluate(condition, {"profile": profile})

        if result.is_satisfied:
            ...
        elif result.is_uncertain:
            print(f"Missing fields: {result.missing_fields}")
    """

    debug: bool = False
    _evaluation_log: list[str] = field(default_factory=list)

    def evaluate(
        self,
        condition: Condition,
        context: Mapping[str, Any],
    ) -> EvaluationResult:
        """Evaluate a condition against a context."""
        self._evaluation_log.clear()
        return self._evaluate_condition(condition, context)

    @property
    def evaluation_log(self) -> list[str]:
        return list(self._evaluation_log)

    def _evaluate_condition(
        self,
        condition: Condition,
        context: Mapping[str, Any],
    ) -> EvaluationResult:
        if condition.is_logical:
            return self._evaluate_logical(condition, context)
        return self._evaluate_predicate(condition, context)

    def _evaluate_logical(
        self,
        condition: Condition,
        context: Mapping[str, Any],
    ) -> EvaluationResult:
        op = condition.op

        if op == ConditionOperator.AND:
            return self._evaluate_junction(condition.children, context, TriBool.TRUE)
        elif op == ConditionOperator.OR:
            return self._evaluate_junction(condition.children, context, TriBool.FALSE)
        elif op == ConditionOperator.NOT:
            return ~self._evaluate_condition(condition.children[0], context)
        raise ConditionEvaluationError(
            message=f"Unknown logical operator: {op}",
            details={"operator": op.value},
        )

    def _evaluate_junction(
        self,
        children: list[Condition],
        context: Mapping[str, Any],
        identity: TriBool,
    ) -> EvaluationResult:
        """
        Evaluate AND (identity TRUE) or OR (identity FALSE).

        Children are visited in a stable order and evaluation stops as
        soon as the dominating value (FALSE for AND, TRUE for OR) is hit.
        """
        is_and = identity == TriBool.TRUE
        dominating = TriBool.FALSE if is_and else TriBool.TRUE

        ordered = sorted(children, key=lambda c: c.id or c.description or "")

        result = EvaluationResult(value=identity, explanation="AND" if is_and else "OR")
        for child in ordered:
            child_result = self._evaluate_condition(child, context)
            result = (result & child_result) if is_and else (result | child_result)
            if result.value == dominating:
                break
        return result

    def _evaluate_predicate(
        self,
        condition: Condition,
        context: Mapping[str, Any],
    ) -> EvaluationResult:
        predicate = condition.predicate
        if predicate is None:
            raise ConditionEvaluationError(
                message="Predicate condition missing predicate",
                details={"condition_id": condition.id},
            )

        actual, found = resolve_field_path(context, predicate.field)
        missing = [] if found else [predicate.field]

        value = compare_values(actual, predicate.operator, predicate.value)
        if not found and predicate.operator not in {
            ConditionOperator.IS_NULL,
            ConditionOperator.IS_NOT_NULL,
        }:
            value = TriBool.UNKNOWN

        label = f"{predicate.field} {predicate.operator.value} {predicate.value}"
        if value == TriBool.TRUE:
            explanation = f"{label}: PASSED"
        elif value == TriBool.FALSE:
            explanation = f"{label}: FAILED (actual: {actual})"
        else:
            explanation = f"{label}: UNKNOWN"

        if self.debug:
            self._evaluation_log.append(explanation)

        return EvaluationResult(
            value=value,
            explanation=explanation,
            missing_fields=missing,
            evaluated_fields=[predicate.field],
        )

    def get_required_fields(self, condition: Condition) -> set[str]:
        """All field paths referenced by a condition."""
        fields: set[str] = set()
        self._collect_fields(condition, fields)
        return fields

    def _collect_fields(self, condition: Condition, fields: set[str]) -> None:
        if condition.is_logical:
            for child in condition.children:
                self._collect_fields(child, fields)
        elif condition.predicate:
            fields.add(condition.predicate.field)


# =============================================================================
# Convenience Functions
# =============================================================================

def evaluate_condition(
    condition: Condition,
    context: Mapping[str, Any],
) -> EvaluationResult:
    """Evaluate a condition with a temporary evaluator."""
    return ConditionEvaluator().evaluate(condition, context)


def check_condition(
    condition: Condition,
    context: Mapping[str, Any],
) -> bool:
    """
    True only if the condition is satisfied.

    Returns False for both FALSE and UNKNOWN results.
    """
    return evaluate_condition(condition, context).value == TriBool.TRUE
