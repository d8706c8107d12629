"""
Caelex Requirement Model

A requirement is one row of a regulatory rule table: an article,
licence condition, guideline or control that an operator may have to
satisfy. Requirements are loaded from rule packs, never hardcoded.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .conditions import Condition
from .enums import BindingLevel


@dataclass
class Requirement:
    """
    A single regulatory requirement.

    Attributes:
        id: Unique identifier within its pack (e.g., "iadc-5.3.2")
        reference: Article/section/guideline number (e.g., "IADC 5.3.2")
        title: Short title
        description: What the requirement asks of the operator
        category: Domain category (e.g., "disposal", "incident_handling")
        severity: Severity key; must exist in the pack's severity weights
        binding_level: mandatory / recommended / best_practice / guidance
        source: Originating instrument (e.g., "IADC", "ITAR", "NIS2")
        applies_when: Applicability predicate; None means always applicable
        license_types: Licences the requirement belongs to (UK)
        module: Unified-score module fed by this requirement
        eu_space_act_refs: EU Space Act article cross-references
        evidence_required: Documents that evidence compliance
        implementation_guidance: Ordered remediation hints
        compliance_question: Question shown to the operator
        penalty: Free-form penalty information
    """
    id: str
    reference: str
    title: str
    description: str
    category: str
    severity: str
    binding_level: BindingLevel

    source: Optional[str] = None
    applies_when: Optional[Condition] = None
    license_types: list[str] = field(default_factory=list)
    module: Optional[str] = None
    eu_space_act_refs: list[str] = field(default_factory=list)
    evidence_required: list[str] = field(default_factory=list)
    implementation_guidance: list[str] = field(default_factory=list)
    compliance_question: Optional[str] = None
    penalty: dict[str, Any] = field(default_factory=dict)

    @property
    def is_mandatory(self) -> bool:
        return self.binding_level == BindingLevel.MANDATORY

    @property
    def is_critical(self) -> bool:
        return self.severity == "critical"

    @property
    def has_eu_overlap(self) -> bool:
        return bool(self.eu_space_act_refs)

    def dimension_values(self, dimension: str) -> list[str]:
        """
        Values this requirement contributes to a score dimension.

        List-valued attributes (e.g. license_types) yield every entry;
        scalar attributes yield a single value; unset attributes yield
        nothing.
        """
        value = getattr(self, dimension, None)
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return [str(v) for v in value]
        if hasattr(value, "value"):
            return [str(value.value)]
        return [str(value)]
