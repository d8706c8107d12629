"""
EU Space Act operator profile.

Maps the operator's activity to one of the five operator types, decides
between the light and standard regimes and classifies constellations.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

ActivityType = Literal["spacecraft", "launch_vehicle", "launch_site", "isos", "data_provider"]

Establishment = Literal["eu", "third_country_eu_services", "third_country_no_eu"]

EntitySize = Literal["small", "research", "medium", "large"]

Orbit = Literal["LEO", "MEO", "GEO", "beyond"]

# activity -> (operator type, abbreviation, label)
OPERATOR_TYPES: dict[str, tuple[str, str, str]] = {
    "spacecraft": ("spacecraft_operator", "SCO", "Spacecraft Operator"),
    "launch_vehicle": ("launch_operator", "LO", "Launch Operator"),
    "launch_site": ("launch_site_operator", "LSO", "Launch Site Operator"),
    "isos": ("isos_provider", "ISOS", "In-Space Services Provider"),
    "data_provider": ("primary_data_provider", "PDP", "Primary Data Provider"),
}

# Minimum constellation size per tier, largest first
_CONSTELLATION_TIERS: list[tuple[int, str]] = [
    (1000, "mega_constellation"),
    (100, "large_constellation"),
    (10, "medium_constellation"),
    (2, "small_constellation"),
]


def constellation_tier(operates_constellation: bool, size: Optional[int]) -> Optional[str]:
    """Tier name; None when a constellation is declared without a size."""
    if not operates_constellation:
        return "single_satellite"
    if size is None:
        return None
    for minimum, tier in _CONSTELLATION_TIERS:
        if size >= minimum:
            return tier
    return "single_satellite"


class EuSpaceActProfile(BaseModel):
    activity_type: ActivityType = "spacecraft"
    establishment: Establishment
    entity_size: EntitySize
    primary_orbit: Optional[Orbit] = None
    operates_constellation: bool = False
    constellation_size: Optional[int] = Field(None, ge=1)
    offers_eu_services: bool = False

    # Derived
    operator_type: Optional[str] = None
    operator_abbreviation: Optional[str] = None
    is_eu: Optional[bool] = None
    is_third_country: Optional[bool] = None
    regime: Optional[Literal["light", "standard"]] = None
    constellation_tier: Optional[str] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def derive_operator(self) -> "EuSpaceActProfile":
        operator_type, abbreviation, _ = OPERATOR_TYPES[self.activity_type]
        self.operator_type = operator_type
        self.operator_abbreviation = abbreviation
        self.is_eu = self.establishment == "eu"
        self.is_third_country = self.establishment == "third_country_eu_services"
        self.regime = "light" if self.entity_size in ("small", "research") else "standard"
        self.constellation_tier = constellation_tier(
            self.operates_constellation, self.constellation_size
        )
        return self


def key_dates(light_regime: bool) -> list[dict[str, str]]:
    dates = [
        {"date": "2030-01-01", "description": "EU Space Act enters into application"},
        {"date": "2031-12-31", "description": "End of transitional period for existing operators"},
    ]
    if light_regime:
        dates.append({
            "date": "2031-12-31",
            "description": "EFD deadline for small enterprises and research institutions",
        })
    dates.append({"date": "2035-01-01", "description": "Five-year regulatory review"})
    return dates


def authorization_path(is_third_country: bool, is_eu: bool) -> str:
    if is_third_country:
        return "EUSPA Registration -> Commission Decision"
    if is_eu:
        return "National Authority (NCA) -> URSO Registration"
    return "Determine establishment status"


def authorization_cost(operator_type: str, is_third_country: bool) -> str:
    if is_third_country:
        return "Registration fee (TBD by EUSPA)"
    if operator_type == "spacecraft_operator":
        return "~EUR 100,000 per satellite platform"
    if operator_type in ("launch_operator", "launch_site_operator"):
        return "~EUR 150,000-300,000 per launch system"
    return "EUR 50,000-100,000 estimated"


def extras(profile: dict[str, Any], requirements: list) -> dict[str, Any]:
    label = OPERATOR_TYPES[profile["activity_type"]][2]
    suffix = "Third Country" if profile["is_third_country"] else "EU"
    return {
        "operator_type": profile["operator_type"],
        "operator_type_label": f"{label} ({suffix})",
        "operator_abbreviation": profile["operator_abbreviation"],
        "regime": profile["regime"],
        "constellation_tier": profile["constellation_tier"],
        "key_dates": key_dates(profile["regime"] == "light"),
        "authorization_path": authorization_path(
            profile["is_third_country"], profile["is_eu"]
        ),
        "estimated_authorization_cost": authorization_cost(
            profile["operator_type"], profile["is_third_country"]
        ),
    }
