"""
NIS2 Directive entity profile.

Space is an Annex I sector. Whether an operator is an essential or
important entity (or out of scope) depends on establishment, size and
which critical services it provides.
"""
from __future__ import annotations

import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

EntitySize = Literal["micro", "small", "medium", "large"]

Classification = Literal["essential", "important", "out_of_scope"]

ESSENTIAL_PENALTY = (
    "Up to EUR 10,000,000 or 2% of total annual worldwide turnover (whichever is higher)"
)
IMPORTANT_PENALTY = (
    "Up to EUR 7,000,000 or 1.4% of total annual worldwide turnover (whichever is higher)"
)

INCIDENT_TIMELINE: dict[str, dict[str, str]] = {
    "early_warning": {
        "deadline": "24 hours",
        "description": (
            "Early warning to the CSIRT or competent authority within 24 hours of "
            "becoming aware of a significant incident."
        ),
    },
    "notification": {
        "deadline": "72 hours",
        "description": (
            "Incident notification with an initial assessment of severity and impact, "
            "and indicators of compromise where available."
        ),
    },
    "intermediate_report": {
        "deadline": "Upon request",
        "description": "Status update when requested by the CSIRT or competent authority.",
    },
    "final_report": {
        "deadline": "1 month",
        "description": (
            "Final report with root cause, mitigation measures and cross-border impact, "
            "no later than one month after the notification."
        ),
    },
}


# (NIS2 article, EU Space Act article, relationship)
SPACE_ACT_CROSS_REFERENCES: list[tuple[str, str, str]] = [
    ("Art. 21(2)(a)", "Art. 76", "overlaps"),
    ("Art. 21(2)(a)", "Art. 77-78", "extends"),
    ("Art. 21(2)(b)", "Art. 83-85", "overlaps"),
    ("Art. 21(2)(b)", "Art. 89-92", "supersedes"),
    ("Art. 21(2)(c)", "Art. 85", "overlaps"),
    ("Art. 21(2)(d)", "Art. 73", "overlaps"),
    ("Art. 21(2)(d)", "Art. 99", "references"),
    ("Art. 21(2)(e)", "Art. 79-82", "overlaps"),
    ("Art. 21(2)(f)", "Art. 88", "extends"),
    ("Art. 21(2)(g)", "Art. 74-75", "references"),
    ("Art. 21(2)(h)", "Art. 81-82", "overlaps"),
    ("Art. 21(2)(i)", "Art. 79-80", "overlaps"),
    ("Art. 21(2)(j)", "Art. 80", "overlaps"),
    ("Art. 23", "Art. 89-92", "supersedes"),
    ("Art. 23(4)(a)", "Art. 89", "supersedes"),
    ("Art. 23(4)(b)", "Art. 90", "overlaps"),
    ("Art. 23(4)(d)", "Art. 92", "overlaps"),
    ("Art. 20", "Art. 74", "overlaps"),
    ("Art. 21(1)", "Art. 86-88", "overlaps"),
    ("Art. 29", "Art. 93-95", "extends"),
    ("Art. 27", "Art. 24", "references"),
]

SAVINGS_WEEKS = {"single_implementation": 3.0, "partial_overlap": 1.5}

def classify_entity(
    entity_size: str,
    is_eu_established: bool,
    operates_ground_infra: bool = False,
    operates_sat_comms: bool = False,
    provides_launch_services: bool = False,
) -> tuple[Classification, str, str]:
    """
    Classify an entity under NIS2.

    Returns:
        Tuple of (classification, reason, article reference)
    """
    if not is_eu_established:
        return (
            "out_of_scope",
            "NIS2 applies to entities established in EU member states; non-EU entities "
            "serving the EU may need to designate an EU representative.",
            "NIS2 Art. 2, Art. 26",
        )

    if entity_size == "micro":
        if operates_sat_comms:
            return (
                "important",
                "Micro enterprises are generally excluded, but satellite communications "
                "providers may be designated as important entities.",
                "NIS2 Art. 2(2)(b)",
            )
        return (
            "out_of_scope",
            "Micro enterprises are generally excluded from NIS2 scope.",
            "NIS2 Art. 2(1)",
        )

    if entity_size == "large":
        return (
            "essential",
            "Large entities in the space sector (Annex I) are essential entities.",
            "NIS2 Art. 3(1)(a)",
        )

    if entity_size == "medium":
        if operates_ground_infra or operates_sat_comms:
            return (
                "essential",
                "Medium entities operating critical ground infrastructure or SATCOM may "
                "be classified as essential entities.",
                "NIS2 Art. 3(1)(e)",
            )
        return (
            "important",
            "Medium entities in the space sector (Annex I) are important entities.",
            "NIS2 Art. 3(2)",
        )

    if operates_ground_infra or operates_sat_comms or provides_launch_services:
        return (
            "important",
            "Small entities providing critical space services may be designated as "
            "important entities.",
            "NIS2 Art. 2(2)(b)",
        )
    return (
        "out_of_scope",
        "Small enterprises are generally excluded unless designated by a member state.",
        "NIS2 Art. 2(1), Art. 2(2)",
    )


class Nis2Profile(BaseModel):
    entity_size: EntitySize
    sector: str = "space"
    space_sub_sector: Optional[str] = None
    is_eu_established: bool = True
    member_state_count: int = Field(1, ge=1)
    operates_ground_infra: bool = False
    operates_sat_comms: bool = False
    manufactures_spacecraft: bool = False
    provides_launch_services: bool = False
    provides_eo_data: bool = False
    has_iso27001: bool = False
    has_existing_csirt: bool = False
    has_risk_management: bool = False

    # Derived
    entity_classification: Optional[Classification] = None
    classification_reason: Optional[str] = None
    classification_article: Optional[str] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def derive_classification(self) -> "Nis2Profile":
        classification, reason, article = classify_entity(
            self.entity_size,
            self.is_eu_established,
            self.operates_ground_infra,
            self.operates_sat_comms,
            self.provides_launch_services,
        )
        self.entity_classification = classification
        self.classification_reason = reason
        self.classification_article = article
        return self


def penalties(classification: str) -> dict[str, str]:
    if classification == "essential":
        applicable = ESSENTIAL_PENALTY
    elif classification == "important":
        applicable = IMPORTANT_PENALTY
    else:
        applicable = "N/A (out of scope)"
    return {
        "essential": ESSENTIAL_PENALTY,
        "important": IMPORTANT_PENALTY,
        "applicable": applicable,
    }


def supervisory_authority(member_state_count: int) -> str:
    if member_state_count > 1:
        return (
            "Competent authority of the member state of main establishment, "
            "coordinating with the other member states of operation."
        )
    return "National competent authority of the member state of establishment."


def key_dates(classification: str) -> list[dict[str, str]]:
    dates = [
        {
            "date": "17 October 2024",
            "description": "NIS2 transposition deadline; member states must have national laws in place",
        },
        {
            "date": "17 April 2025",
            "description": "Member states establish the list of essential and important entities (Art. 3(3))",
        },
    ]
    if classification != "out_of_scope":
        dates.extend([
            {
                "date": "17 October 2024 onwards",
                "description": "NIS2 obligations apply under the national transposition laws",
            },
            {
                "date": "1 January 2030",
                "description": (
                    "EU Space Act enters into force as lex specialis for the space sector, "
                    "partially superseding NIS2"
                ),
            },
        ])
    return dates


def eu_space_act_overlap(classification: str) -> dict[str, Any]:
    """
    NIS2 obligations that the EU Space Act overlaps or supersedes.

    Savings are an estimate: 3 weeks for each superseded obligation
    (one implementation covers both) and 1.5 weeks for each partial
    overlap, rounded half up.
    """
    if classification == "out_of_scope":
        return {"count": 0, "total_potential_savings_weeks": 0, "overlapping_requirements": []}

    overlapping = [
        {
            "nis2_article": nis2_article,
            "eu_space_act_article": space_act_article,
            "effort_type": (
                "single_implementation" if relationship == "supersedes" else "partial_overlap"
            ),
        }
        for nis2_article, space_act_article, relationship in SPACE_ACT_CROSS_REFERENCES
        if relationship in ("overlaps", "supersedes")
    ]
    weeks = sum(SAVINGS_WEEKS[item["effort_type"]] for item in overlapping)
    return {
        "count": len(overlapping),
        "total_potential_savings_weeks": math.floor(weeks + 0.5),
        "overlapping_requirements": overlapping,
    }


def extras(profile: dict[str, Any], requirements: list) -> dict[str, Any]:
    classification = profile["entity_classification"]
    return {
        "entity_classification": classification,
        "classification_reason": profile["classification_reason"],
        "classification_article": profile["classification_article"],
        "incident_reporting_timeline": {k: dict(v) for k, v in INCIDENT_TIMELINE.items()},
        "penalties": penalties(classification),
        "supervisory_authority": supervisory_authority(profile["member_state_count"]),
        "key_dates": key_dates(classification),
        "eu_space_act_overlap": eu_space_act_overlap(classification),
    }
