"""
Caelex Operator Profiles

One Pydantic model per regulatory domain. Validation fills defaults and
adds derived fields (satellite category, required licences, NIS2
classification...). Each domain also contributes "extras": derived
information reported alongside the assessment.

Usage:
    from caelex.profiles import validate_profile

    profile = validate_profile(RegulatoryDomain.COPUOS, {
        "orbit_regime": "LEO",
        "mission_type": "commercial",
        "satellite_mass_kg": 4,
    })
    profile["satellite_category"]  # "cubesat"
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union

from pydantic import BaseModel, ValidationError

from ..exceptions import ProfileValidationError, UnknownDomainError
from ..models import RegulatoryDomain, Requirement
from . import copuos, eu_space_act, export_control, nis2, uk_space
from .copuos import CopuosProfile
from .eu_space_act import EuSpaceActProfile
from .export_control import ExportControlProfile
from .nis2 import Nis2Profile
from .uk_space import UkSpaceProfile


@dataclass(frozen=True)
class ProfileHandler:
    """Profile model and extras builder for one domain."""
    model: type[BaseModel]
    extras: Callable[[dict[str, Any], list[Requirement]], dict[str, Any]]


PROFILE_HANDLERS: dict[RegulatoryDomain, ProfileHandler] = {
    RegulatoryDomain.COPUOS: ProfileHandler(CopuosProfile, copuos.extras),
    RegulatoryDomain.UK_SPACE: ProfileHandler(UkSpaceProfile, uk_space.extras),
    RegulatoryDomain.NIS2: ProfileHandler(Nis2Profile, nis2.extras),
    RegulatoryDomain.EXPORT_CONTROL: ProfileHandler(ExportControlProfile, export_control.extras),
    RegulatoryDomain.EU_SPACE_ACT: ProfileHandler(EuSpaceActProfile, eu_space_act.extras),
}


def get_handler(domain: Union[RegulatoryDomain, str]) -> ProfileHandler:
    try:
        return PROFILE_HANDLERS[RegulatoryDomain(domain)]
    except ValueError as e:
        raise UnknownDomainError(
            message=f"Unknown regulatory domain: {domain}",
            details={"domain": str(domain), "available": [d.value for d in RegulatoryDomain]},
        ) from e


def validate_profile(
    domain: Union[RegulatoryDomain, str],
    data: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Validate a profile and return it as a plain dict with derived fields.

    Raises:
        UnknownDomainError: If the domain is not recognised
        ProfileValidationError: If the profile is malformed
    """
    handler = get_handler(domain)
    if not isinstance(data, Mapping):
        raise ProfileValidationError(
            message="Profile must be an object",
            details={"domain": str(domain), "type": type(data).__name__},
        )
    try:
        profile = handler.model.model_validate(dict(data))
    except ValidationError as e:
        raise ProfileValidationError(
            message=f"Invalid {RegulatoryDomain(domain).value} profile: {e.error_count()} errors",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e
    return profile.model_dump(mode="json")


def profile_extras(
    domain: Union[RegulatoryDomain, str],
    profile: dict[str, Any],
    requirements: list[Requirement],
) -> dict[str, Any]:
    """Domain-specific derived information for an assessment."""
    return get_handler(domain).extras(profile, requirements)


__all__ = [
    "CopuosProfile",
    "EuSpaceActProfile",
    "ExportControlProfile",
    "Nis2Profile",
    "UkSpaceProfile",
    "PROFILE_HANDLERS",
    "ProfileHandler",
    "get_handler",
    "validate_profile",
    "profile_extras",
]
