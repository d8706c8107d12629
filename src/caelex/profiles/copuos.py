"""
COPUOS / IADC mission profile.

Space debris mitigation and long-term sustainability guidelines apply
by orbit regime, mission type and spacecraft size.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

OrbitRegime = Literal["LEO", "MEO", "GEO", "HEO", "GTO", "cislunar", "deep_space"]

MissionType = Literal["commercial", "scientific", "governmental", "educational", "military"]

SatelliteCategory = Literal["cubesat", "smallsat", "medium", "large", "mega"]

# Upper mass bounds (kg, exclusive) per category; heavier is "mega"
_MASS_CATEGORIES: list[tuple[float, SatelliteCategory]] = [
    (10, "cubesat"),
    (100, "smallsat"),
    (1000, "medium"),
    (5000, "large"),
]


def satellite_category(mass_kg: float) -> SatelliteCategory:
    for bound, category in _MASS_CATEGORIES:
        if mass_kg < bound:
            return category
    return "mega"


class CopuosProfile(BaseModel):
    """Mission profile for COPUOS LTS and IADC debris guideline assessment."""
    orbit_regime: OrbitRegime
    mission_type: MissionType
    satellite_mass_kg: float = Field(..., gt=0)
    altitude_km: Optional[float] = Field(None, ge=0)
    inclination_deg: Optional[float] = None
    has_propulsion: bool = False
    has_maneuverability: bool = False
    planned_lifetime_years: float = 5
    is_constellation: bool = False
    constellation_size: Optional[int] = Field(None, ge=1)
    launch_date: Optional[str] = None
    country_of_registry: Optional[str] = None

    # Derived
    satellite_category: Optional[SatelliteCategory] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def derive_category(self) -> "CopuosProfile":
        self.satellite_category = satellite_category(self.satellite_mass_kg)
        return self


def extras(profile: dict[str, Any], requirements: list) -> dict[str, Any]:
    return {"satellite_category": profile["satellite_category"]}
