"""
Caelex Rule Pack Loader

Loads and validates rule packs from YAML or JSON files and converts
the Pydantic schema models into caelex.models dataclasses.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import (
    RulePackLoadError,
    RulePackValidationError,
    RulePackVersionMismatch,
)
from ..models import (
    LOGICAL_OPERATORS,
    BindingLevel,
    Condition,
    ConditionOperator,
    EffortLevel,
    Predicate,
    RecommendationRule,
    RegulatoryDomain,
    Requirement,
    RiskLevel,
    RiskRule,
    RiskThreshold,
    RulePack,
)
from .schema import (
    SCHEMA_VERSION,
    ConditionSchema,
    RequirementSchema,
    RiskThresholdSchema,
    RulePackSchema,
    check_schema_version,
    validate_rule_pack,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Reference Integrity Validation
# =============================================================================

def validate_reference_integrity(pack: RulePack, path: str = "") -> None:
    """
    Validate internal references are consistent.

    Catches:
    - Duplicate requirement IDs
    - Requirement severities missing from severity_weights
    - Effort/dependency mappings for categories no requirement uses

    Raises:
        ValueError: If reference integrity errors are found
    """
    errors = []

    seen_ids: set[str] = set()
    for requirement in pack.requirements:
        if requirement.id in seen_ids:
            errors.append(f"Duplicate requirement ID: '{requirement.id}'")
        seen_ids.add(requirement.id)

        if requirement.severity not in pack.severity_weights:
            errors.append(
                f"Requirement '{requirement.id}' has severity '{requirement.severity}' "
                f"with no entry in severity_weights"
            )

    categories = set(pack.categories)
    for category in pack.effort_by_category:
        if category not in categories:
            errors.append(f"effort_by_category references unused category '{category}'")
    for category in pack.dependencies_by_category:
        if category not in categories:
            errors.append(f"dependencies_by_category references unused category '{category}'")

    if errors:
        path_str = f" in {path}" if path else ""
        raise ValueError(
            f"Reference integrity errors{path_str}:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_condition(schema: ConditionSchema) -> Condition:
    """Convert ConditionSchema to Condition model."""
    op = ConditionOperator(schema.op)

    if op in LOGICAL_OPERATORS:
        return Condition(
            op=op,
            children=[_convert_condition(c) for c in (schema.children or [])],
            id=schema.id,
            description=schema.description,
        )

    value = schema.value
    if op == ConditionOperator.BETWEEN and isinstance(value, list):
        value = tuple(value)
    predicate = Predicate(
        field=schema.field or "",
        operator=op,
        value=value,
        description=schema.description,
    )
    return Condition(
        op=op,
        predicate=predicate,
        id=schema.id,
        description=schema.description,
    )


def _convert_optional_condition(schema: Optional[ConditionSchema]) -> Optional[Condition]:
    return _convert_condition(schema) if schema is not None else None


def _convert_thresholds(schemas: list[RiskThresholdSchema]) -> list[RiskThreshold]:
    return [
        RiskThreshold(
            below=t.below,
            level=RiskLevel(t.level),
            non_compliant_above=t.non_compliant_above,
        )
        for t in schemas
    ]


def _convert_requirement(schema: RequirementSchema) -> Requirement:
    """Convert RequirementSchema to Requirement model."""
    return Requirement(
        id=schema.id,
        reference=schema.reference,
        title=schema.title,
        description=schema.description,
        category=schema.category,
        severity=schema.severity,
        binding_level=BindingLevel(schema.binding_level),
        source=schema.source,
        applies_when=_convert_optional_condition(schema.applies_when),
        license_types=list(schema.license_types),
        module=schema.module,
        eu_space_act_refs=list(schema.eu_space_act_refs),
        evidence_required=list(schema.evidence_required),
        implementation_guidance=list(schema.implementation_guidance),
        compliance_question=schema.compliance_question,
        penalty=dict(schema.penalty),
    )


def _convert_rule_pack(schema: RulePackSchema) -> RulePack:
    """Convert RulePackSchema to RulePack model."""
    return RulePack(
        id=schema.id,
        domain=RegulatoryDomain(schema.domain),
        name=schema.name,
        version=schema.version,
        jurisdiction=schema.jurisdiction,
        effective_date=schema.effective_date,
        description=schema.description,
        authority=schema.authority,
        requirements=[_convert_requirement(r) for r in schema.requirements],
        severity_weights=dict(schema.severity_weights),
        score_dimensions=list(schema.score_dimensions),
        recommended_levels=[BindingLevel(level) for level in schema.recommended_levels],
        risk_basis=schema.risk_basis,
        risk_thresholds=_convert_thresholds(schema.risk_thresholds),
        risk_rules=[
            RiskRule(
                id=r.id,
                level=RiskLevel(r.level),
                condition=_convert_condition(r.condition),
                description=r.description,
            )
            for r in schema.risk_rules
        ],
        escalate_critical_noncompliance=schema.escalate_critical_noncompliance,
        scope_condition=_convert_optional_condition(schema.scope_condition),
        effort_by_category={
            category: EffortLevel(effort)
            for category, effort in schema.effort_by_category.items()
        },
        default_effort=EffortLevel(schema.default_effort),
        dependencies_by_category={
            category: list(deps)
            for category, deps in schema.dependencies_by_category.items()
        },
        recommendations=[
            RecommendationRule(
                id=r.id,
                text=r.text,
                condition=_convert_optional_condition(r.condition),
                after_gaps=r.after_gaps,
            )
            for r in schema.recommendations
        ],
        gap_recommendations=schema.gap_recommendations,
        max_recommendations=schema.max_recommendations,
        report_dimension=schema.report_dimension,
        report_groups_from=schema.report_groups_from,
        group_risk_thresholds={
            group: _convert_thresholds(thresholds)
            for group, thresholds in schema.group_risk_thresholds.items()
        },
    )


# =============================================================================
# Rule Pack Loader
# =============================================================================

class RulePackLoader:
    """
    Loads rule packs from YAML or JSON files.

    Usage:
        loader = RulePackLoader()
        pack = loader.load("rulepacks/copuos_iadc.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version
        self._packs: dict[str, RulePack] = {}

    def load(self, path: Union[str, Path]) -> RulePack:
        """
        Load a rule pack from a file.

        Raises:
            RulePackLoadError: If the file cannot be read or parsed
            RulePackVersionMismatch: If the schema version is incompatible
            RulePackValidationError: If schema or reference validation fails
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise RulePackLoadError(
                message=f"Failed to load rule pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        pack = self.load_data(data, source=str(path))
        logger.info(
            "Loaded rule pack %s (%d requirements) from %s",
            pack.id, len(pack.requirements), path.name,
            extra={"pack_id": pack.id, "domain": pack.domain.value},
        )
        return pack

    def load_data(self, data: Any, source: str = "") -> RulePack:
        """
        Validate and convert an already-parsed rule pack mapping.

        Args:
            data: Mapping parsed from YAML/JSON
            source: Origin used in error details (path or "<string>")
        """
        if not isinstance(data, dict):
            raise RulePackLoadError(
                message="Rule pack must be a mapping at the top level",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise RulePackVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                    "path": source,
                },
                pack_id=data.get("id"),
            )

        try:
            schema = validate_rule_pack(data)
        except ValidationError as e:
            raise RulePackValidationError(
                message=f"Rule pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False, include_context=False), "path": source},
                pack_id=data.get("id"),
            ) from e

        pack = _convert_rule_pack(schema)

        try:
            validate_reference_integrity(pack, source)
        except ValueError as e:
            raise RulePackValidationError(
                message="Reference integrity validation failed",
                details={"errors": str(e), "path": source},
                pack_id=pack.id,
            ) from e

        self._packs[pack.id] = pack
        return pack

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)

    def get_pack(self, pack_id: str) -> Optional[RulePack]:
        """Get a previously loaded pack by ID."""
        return self._packs.get(pack_id)

    def list_packs(self) -> list[str]:
        """IDs of all packs loaded by this loader."""
        return list(self._packs.keys())


# =============================================================================
# Convenience Functions
# =============================================================================

def load_rule_pack(path: Union[str, Path]) -> RulePack:
    """Load a rule pack with a temporary loader."""
    return RulePackLoader().load(path)


def load_rule_pack_from_string(content: str, format: str = "yaml") -> RulePack:
    """
    Load a rule pack from a YAML or JSON string.

    Args:
        content: Pack document
        format: "yaml" or "json"
    """
    try:
        if format.lower() == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise RulePackLoadError(
            message=f"Failed to parse rule pack: {e}",
            details={"path": "<string>", "error": str(e)},
        ) from e
    return RulePackLoader().load_data(data, source="<string>")
