"""
Caelex Composable Conditions

Three-valued logic (TriBool) and composable condition trees used for
requirement applicability, pack risk rules and recommendation triggers.

Key components:
- TriBool: TRUE / FALSE / UNKNOWN with Kleene algebra
- Predicate: leaf comparison against a profile or assessment field
- Condition: AND/OR/NOT tree of predicates
- Builders: AND(), OR(), NOT(), PRED() and shorthand comparisons

Kleene rules:
    AND: False dominates, Unknown propagates
    OR: True dominates, Unknown propagates
    NOT: Unknown stays Unknown
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .enums import LOGICAL_OPERATORS, ConditionOperator


# =============================================================================
# Three-Valued Logic (TriBool)
# =============================================================================

class TriBool(Enum):
    """
    Three-valued Boolean (Kleene logic).

    UNKNOWN is produced when a field the condition needs is absent or
    cannot be compared, e.g. an optional altitude that was never supplied.

        AND    | TRUE    FALSE   UNKNOWN
        -------|------------------------
        TRUE   | TRUE    FALSE   UNKNOWN
        FALSE  | FALSE   FALSE   FALSE
        UNKNOWN| UNKNOWN FALSE   UNKNOWN

        OR     | TRUE    FALSE   UNKNOWN
        -------|------------------------
        TRUE   | TRUE    TRUE    TRUE
        FALSE  | TRUE    FALSE   UNKNOWN
        UNKNOWN| TRUE    UNKNOWN UNKNOWN
    """
    TRUE = True
    FALSE = False
    UNKNOWN = None

    def __and__(self, other: TriBool) -> TriBool:
        if not isinstance(other, TriBool):
            return NotImplemented
        if TriBool.FALSE in (self, other):
            return TriBool.FALSE
        if TriBool.UNKNOWN in (self, other):
            return TriBool.UNKNOWN
        return TriBool.TRUE

    def __or__(self, other: TriBool) -> TriBool:
        if not isinstance(other, TriBool):
            return NotImplemented
        if TriBool.TRUE in (self, other):
            return TriBool.TRUE
        if TriBool.UNKNOWN in (self, other):
            return TriBool.UNKNOWN
        return TriBool.FALSE

    def __invert__(self) -> TriBool:
        if self == TriBool.UNKNOWN:
            return TriBool.UNKNOWN
        return TriBool.FALSE if self == TriBool.TRUE else TriBool.TRUE

    def __bool__(self) -> bool:
        """
        Convert to bool for Python if statements.

        Raises ValueError for UNKNOWN so callers must decide how an
        undetermined result is treated.
        """
        if self == TriBool.UNKNOWN:
            raise ValueError(
                "Cannot convert TriBool.UNKNOWN to bool. "
                "Handle UNKNOWN explicitly in your logic."
            )
        return self == TriBool.TRUE

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> TriBool:
        """Convert Python bool/None to TriBool."""
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def is_known(self) -> bool:
        return self != TriBool.UNKNOWN


# =============================================================================
# Evaluation Result
# =============================================================================

@dataclass
class EvaluationResult:
    """
    Outcome of evaluating a condition.

    Carries the TriBool value, a readable explanation and the field
    paths that were missing when the result is UNKNOWN.
    """
    value: TriBool
    explanation: str
    missing_fields: list[str] = field(default_factory=list)
    evaluated_fields: list[str] = field(default_factory=list)

    @property
    def is_satisfied(self) -> bool:
        return self.value == TriBool.TRUE

    @property
    def is_not_satisfied(self) -> bool:
        return self.value == TriBool.FALSE

    @property
    def is_uncertain(self) -> bool:
        return self.value == TriBool.UNKNOWN

    def __and__(self, other: EvaluationResult) -> EvaluationResult:
        return EvaluationResult(
            value=self.value & other.value,
            explanation=f"({self.explanation}) AND ({other.explanation})",
            missing_fields=sorted(set(self.missing_fields + other.missing_fields)),
            evaluated_fields=self.evaluated_fields + other.evaluated_fields,
        )

    def __or__(self, other: EvaluationResult) -> EvaluationResult:
        return EvaluationResult(
            value=self.value | other.value,
            explanation=f"({self.explanation}) OR ({other.explanation})",
            missing_fields=sorted(set(self.missing_fields + other.missing_fields)),
            evaluated_fields=self.evaluated_fields + other.evaluated_fields,
        )

    def __invert__(self) -> EvaluationResult:
        return EvaluationResult(
            value=~self.value,
            explanation=f"NOT ({self.explanation})",
            missing_fields=self.missing_fields.copy(),
            evaluated_fields=self.evaluated_fields.copy(),
        )


# =============================================================================
# Predicate (Leaf Condition)
# =============================================================================

@dataclass
class Predicate:
    """
    A leaf-level comparison in a condition tree.

    Attributes:
        field: Dot-notation path into the evaluation context
            (e.g., "profile.orbit_regime", "scores.by_category.licensing")
        operator: Comparison operator
        value: Value to compare against
        description: Optional human-readable description
    """
    field: str
    operator: ConditionOperator
    value: Any
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.operator in LOGICAL_OPERATORS:
            raise ValueError(
                f"Predicate cannot use logical operator '{self.operator.value}'. "
                f"Use Condition for AND/OR/NOT."
            )

    @property
    def field_path(self) -> list[str]:
        return self.field.split(".")


# =============================================================================
# Condition (Composable Tree)
# =============================================================================

@dataclass
class Condition:
    """
    A composable condition (AND/OR/NOT over predicates).

    Logical operators take `children`; comparison operators take a
    `predicate`.

    Example:
        Condition(
            op=ConditionOperator.AND,
            children=[
                IN("profile.orbit_regime", ["LEO", "MEO"]),
                EQ("profile.has_propulsion", True),
            ],
        )
    """
    op: ConditionOperator
    children: list[Condition] = field(default_factory=list)
    predicate: Optional[Predicate] = None
    id: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.op in LOGICAL_OPERATORS:
            if not self.children:
                raise ValueError(f"Logical operator '{self.op.value}' requires children")
            if self.predicate is not None:
                raise ValueError(f"Logical operator '{self.op.value}' cannot have predicate")
            if self.op == ConditionOperator.NOT and len(self.children) != 1:
                raise ValueError("NOT operator must have exactly one child")
        else:
            if self.predicate is None:
                raise ValueError(f"Comparison operator '{self.op.value}' requires predicate")
            if self.children:
                raise ValueError(f"Comparison operator '{self.op.value}' cannot have children")

    @property
    def is_logical(self) -> bool:
        return self.op in LOGICAL_OPERATORS

    @property
    def is_leaf(self) -> bool:
        return not self.is_logical


# =============================================================================
# Helper Functions for Building Conditions
# =============================================================================

def AND(*conditions: Condition) -> Condition:
    """
    Combine conditions with AND.

    Example:
        AND(
            IN("profile.orbit_regime", ["LEO"]),
            GTE("profile.satellite_mass_kg", 100),
        )
    """
    return Condition(
        op=ConditionOperator.AND,
        children=list(conditions),
        description=f"AND of {len(conditions)} conditions",
    )


def OR(*conditions: Condition) -> Condition:
    """Combine conditions with OR."""
    return Condition(
        op=ConditionOperator.OR,
        children=list(conditions),
        description=f"OR of {len(conditions)} conditions",
    )


def NOT(condition: Condition) -> Condition:
    """Negate a condition."""
    return Condition(
        op=ConditionOperator.NOT,
        children=[condition],
        description=f"NOT ({condition.description or 'condition'})",
    )


def PRED(
    field: str,
    operator: ConditionOperator,
    value: Any,
    description: Optional[str] = None,
) -> Condition:
    """
    Create a leaf predicate condition.

    Example:
        PRED("profile.satellite_mass_kg", ConditionOperator.GTE, 100)
    """
    predicate = Predicate(
        field=field,
        operator=operator,
        value=value,
        description=description,
    )
    return Condition(
        op=operator,
        predicate=predicate,
        description=description or f"{field} {operator.value} {value}",
    )


def EQ(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """field == value"""
    return PRED(field, ConditionOperator.EQ, value, description)


def NE(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """field != value"""
    return PRED(field, ConditionOperator.NE, value, description)


def GT(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """field > value"""
    return PRED(field, ConditionOperator.GT, value, description)


def GTE(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """field >= value"""
    return PRED(field, ConditionOperator.GTE, value, description)


def LT(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """field < value"""
    return PRED(field, ConditionOperator.LT, value, description)


def LTE(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """field <= value"""
    return PRED(field, ConditionOperator.LTE, value, description)


def IN(field: str, values: list[Any], description: Optional[str] = None) -> Condition:
    """field in [values]"""
    return PRED(field, ConditionOperator.IN, values, description)


def NOT_IN(field: str, values: list[Any], description: Optional[str] = None) -> Condition:
    """field not in [values]"""
    return PRED(field, ConditionOperator.NOT_IN, values, description)


def CONTAINS(field: str, value: Any, description: Optional[str] = None) -> Condition:
    """value in field (strings/lists)"""
    return PRED(field, ConditionOperator.CONTAINS, value, description)


def INTERSECTS(field: str, values: list[Any], description: Optional[str] = None) -> Condition:
    """field (a list) shares at least one element with values"""
    return PRED(field, ConditionOperator.INTERSECTS, values, description)


def IS_NULL(field: str, description: Optional[str] = None) -> Condition:
    """field is None"""
    return PRED(field, ConditionOperator.IS_NULL, None, description)


def IS_NOT_NULL(field: str, description: Optional[str] = None) -> Condition:
    """field is not None"""
    return PRED(field, ConditionOperator.IS_NOT_NULL, None, description)


def BETWEEN(
    field: str,
    low: Any,
    high: Any,
    description: Optional[str] = None,
) -> Condition:
    """low <= field <= high"""
    return PRED(field, ConditionOperator.BETWEEN, (low, high), description)
