"""
UK Space Industry Act 2018 operator profile.

The operator type and planned activities determine which CAA licences
are needed; requirements are then filtered and reported per licence.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

OperatorType = Literal[
    "launch_operator",
    "return_operator",
    "satellite_operator",
    "spaceport_operator",
    "range_control",
]

ActivityType = Literal[
    "launch",
    "return",
    "orbital_operations",
    "suborbital",
    "spaceport_operations",
    "range_services",
]

OPERATOR_LICENCES: dict[str, str] = {
    "launch_operator": "launch_licence",
    "return_operator": "return_licence",
    "satellite_operator": "orbital_operator_licence",
    "spaceport_operator": "spaceport_licence",
    "range_control": "range_control_licence",
}

ACTIVITY_LICENCES: dict[str, str] = {
    "launch": "launch_licence",
    "return": "return_licence",
    "orbital_operations": "orbital_operator_licence",
    "spaceport_operations": "spaceport_licence",
    "range_services": "range_control_licence",
}


def required_licences(operator_type: str, activity_types: list[str]) -> list[str]:
    """Primary licence for the operator type, then one per activity, de-duplicated."""
    licences = [OPERATOR_LICENCES[operator_type]]
    for activity in activity_types:
        licence = ACTIVITY_LICENCES.get(activity)
        if licence and licence not in licences:
            licences.append(licence)
    return licences


class UkSpaceProfile(BaseModel):
    operator_type: OperatorType
    activity_types: list[ActivityType] = Field(..., min_length=1)
    launch_from_uk: bool = False
    launch_to_orbit: bool = False
    is_suborbital: bool = False
    has_uk_nexus: bool = True
    involves_people: bool = False
    is_commercial: bool = True
    spacecraft_mass_kg: Optional[float] = Field(None, gt=0)
    planned_launch_site: Optional[str] = None
    target_orbit: Optional[str] = None
    mission_duration_years: Optional[float] = None

    # Derived
    required_licences: list[str] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def derive_licences(self) -> "UkSpaceProfile":
        self.required_licences = required_licences(self.operator_type, list(self.activity_types))
        return self


def extras(profile: dict[str, Any], requirements: list) -> dict[str, Any]:
    return {"required_licences": list(profile["required_licences"])}
