"""
Canonical JSON Serialization

Deterministic JSON serialization for hashing and comparison:
- Sorted keys (lexicographic)
- No whitespace
- UTF-8 encoding

The same rule pack always produces the same hash, so an assessment
can record exactly which rule table it was scored against.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


def _default_serializer(obj: Any) -> Any:
    """
    JSON serializer for non-standard types.

    Handles datetime/date (ISO 8601), Decimal (string), Enum (value),
    dataclasses (dict) and sets (sorted list).
    """
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonical_json(obj: Any) -> str:
    """
    Serialize object to canonical JSON string.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_serializer,
        ensure_ascii=False,
    )


def content_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical JSON representation."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def content_hash_short(obj: Any, length: int = 12) -> str:
    """Truncated content hash for display and log lines."""
    return content_hash(obj)[:length]


# =============================================================================
# Rule Pack Hashing
# =============================================================================

def _serialize_condition(condition: Any) -> Optional[dict]:
    """Serialize a Condition tree; ids and descriptions are not hashed."""
    if condition is None:
        return None
    if condition.is_logical:
        return {
            "op": condition.op.value,
            "children": [_serialize_condition(c) for c in condition.children],
        }
    predicate = condition.predicate
    value = predicate.value
    if isinstance(value, tuple):
        value = list(value)
    return {
        "op": condition.op.value,
        "field": predicate.field,
        "value": value,
    }


def _serialize_requirement(requirement: Any) -> dict:
    """Serialize the scoring-relevant fields of a Requirement."""
    return {
        "id": requirement.id,
        "reference": requirement.reference,
        "title": requirement.title,
        "category": requirement.category,
        "severity": requirement.severity,
        "binding_level": requirement.binding_level.value,
        "source": requirement.source,
        "module": requirement.module,
        "license_types": sorted(requirement.license_types),
        "eu_space_act_refs": sorted(requirement.eu_space_act_refs),
        "applies_when": _serialize_condition(requirement.applies_when),
    }


def _serialize_thresholds(thresholds: Any) -> list[dict]:
    serialized = []
    for t in thresholds:
        entry = {"below": t.below, "level": t.level.value}
        if t.non_compliant_above is not None:
            entry["non_compliant_above"] = t.non_compliant_above
        serialized.append(entry)
    return serialized


def compute_rule_pack_hash(pack: Any) -> str:
    """
    SHA-256 hash of a rule pack in canonical JSON form.

    Covers the pack metadata, the scoring configuration and every
    requirement (sorted by id). Descriptions and guidance text are
    excluded so editorial changes do not alter the hash.

    Args:
        pack: A RulePack instance

    Returns:
        Hex-encoded SHA-256 hash string (64 characters)
    """
    pack_dict = {
        "id": pack.id,
        "domain": pack.domain.value,
        "jurisdiction": pack.jurisdiction,
        "version": pack.version,
        "effective_date": pack.effective_date.isoformat(),
        "severity_weights": pack.severity_weights,
        "score_dimensions": list(pack.score_dimensions),
        "recommended_levels": [level.value for level in pack.recommended_levels],
        "risk_basis": pack.risk_basis,
        "risk_thresholds": _serialize_thresholds(pack.risk_thresholds),
        "risk_rules": [
            {
                "id": r.id,
                "level": r.level.value,
                "condition": _serialize_condition(r.condition),
            }
            for r in pack.risk_rules
        ],
        "escalate_critical_noncompliance": pack.escalate_critical_noncompliance,
        "scope_condition": _serialize_condition(pack.scope_condition),
        "report_dimension": pack.report_dimension,
        "group_risk_thresholds": {
            group: _serialize_thresholds(thresholds)
            for group, thresholds in pack.group_risk_thresholds.items()
        },
        "requirements": sorted(
            (_serialize_requirement(r) for r in pack.requirements),
            key=lambda x: x["id"],
        ),
    }
    return content_hash(pack_dict)
