"""Request schemas for the API."""

from pydantic import BaseModel, Field
from typing import Any, Optional


class AssessmentInput(BaseModel):
    """Self-assessed status of one requirement."""
    requirement_id: str = Field(..., description="Requirement ID, e.g., 'iadc-5.3.2-leo'")
    status: str = Field(
        default="not_assessed",
        description="compliant|partial|non_compliant|not_assessed|not_applicable",
    )
    notes: Optional[str] = Field(default=None, description="Free-form notes")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"requirement_id": "iadc-5.3.2-leo", "status": "compliant"},
                {"requirement_id": "iadc-5.2.1", "status": "partial"},
            ]
        }
    }


class AssessRequest(BaseModel):
    """Request to assess an operator profile against one rule pack."""
    profile: dict[str, Any] = Field(..., description="Operator profile for the pack's domain")
    assessments: list[AssessmentInput] = Field(default=[], description="Self-assessed statuses")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "profile": {
                        "orbit_regime": "LEO",
                        "mission_type": "commercial",
                        "satellite_mass_kg": 4,
                        "altitude_km": 550,
                        "has_propulsion": False,
                    },
                    "assessments": [
                        {"requirement_id": "iadc-5.3.2-leo", "status": "compliant"},
                        {"requirement_id": "iadc-5.2.1", "status": "partial"},
                        {"requirement_id": "copuos-lts-a5", "status": "non_compliant"},
                    ],
                }
            ]
        }
    }


class ProfileRequest(BaseModel):
    """Request carrying only an operator profile."""
    profile: dict[str, Any] = Field(..., description="Operator profile for the pack's domain")


class DomainAssessment(AssessRequest):
    """One pack's assessment within a unified score request."""
    pack_id: str = Field(..., description="Rule pack ID, e.g., 'EU-NIS2-2022'")


class UnifiedRequest(BaseModel):
    """Request to combine assessments from several packs."""
    assessments: list[DomainAssessment] = Field(..., description="One entry per pack")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "assessments": [
                        {
                            "pack_id": "INT-COPUOS-IADC-2025",
                            "profile": {
                                "orbit_regime": "LEO",
                                "mission_type": "commercial",
                                "satellite_mass_kg": 4,
                            },
                            "assessments": [
                                {"requirement_id": "iadc-5.3.2-leo", "status": "compliant"},
                            ],
                        }
                    ]
                }
            ]
        }
    }
