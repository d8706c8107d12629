"""
Caelex Rule Packs

Schema validation and loading for rule packs.

Rule packs are YAML or JSON files holding one regulatory domain's
requirement table plus its scoring, risk and recommendation settings.

Usage:
    from caelex.packs import load_rule_pack, RulePackLoader

    pack = load_rule_pack("rulepacks/nis2.yaml")

    loader = RulePackLoader()
    copuos = loader.load("rulepacks/copuos_iadc.yaml")
    uk = loader.load("rulepacks/uk_space.yaml")
"""
from __future__ import annotations

from .loader import (
    RulePackLoader,
    load_rule_pack,
    load_rule_pack_from_string,
    validate_reference_integrity,
)
from .schema import (
    SCHEMA_VERSION,
    ConditionSchema,
    RecommendationRuleSchema,
    RequirementSchema,
    RiskRuleSchema,
    RiskThresholdSchema,
    RulePackSchema,
    check_schema_version,
    validate_rule_pack,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "RulePackLoader",
    "load_rule_pack",
    "load_rule_pack_from_string",
    "validate_reference_integrity",
    # Validation
    "validate_rule_pack",
    "check_schema_version",
    # Schemas
    "RulePackSchema",
    "RequirementSchema",
    "ConditionSchema",
    "RiskRuleSchema",
    "RiskThresholdSchema",
    "RecommendationRuleSchema",
]
