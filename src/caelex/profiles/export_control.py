"""
ITAR / EAR export control company profile.

Derives the registrations and licences a company needs and a
profile-level risk indication from its controlled items and activities,
plus the deemed export, screening, Technology Control Plan and licence
exception determinations reported alongside an assessment.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

CompanyType = Literal[
    "spacecraft_manufacturer",
    "satellite_operator",
    "launch_provider",
    "component_supplier",
    "software_developer",
    "technology_provider",
    "defense_contractor",
    "research_institution",
    "university",
    "foreign_subsidiary",
]

ProfileRisk = Literal["critical", "high", "medium", "low"]

DDTC_REGISTRATION = "DDTC Registration (22 CFR 122.1)"

ITAR_LICENCES = ("DSP_5", "DSP_73", "DSP_61", "DSP_85", "TAA", "MLA", "WDA")
EAR_LICENCES = ("BIS_LICENSE", "LICENSE_EXCEPTION")

# Country Groups D (national security) and E (embargoed), simplified
RESTRICTED_COUNTRIES = frozenset({"CN", "RU", "IR", "KP", "SY", "CU", "BY", "VE"})


# =============================================================================
# Reference Tables
# =============================================================================

DEEMED_EXPORT_RULES: list[dict[str, Any]] = [
    {
        "id": "DEEMED-ITAR-001",
        "regulation": "ITAR",
        "title": "ITAR Deemed Export - Visual Access",
        "reference": "22 CFR 120.54",
        "risk_level": "critical",
        "required_actions": [
            "Obtain DSP-5 or TAA authorization",
            "Implement physical access controls",
            "Badge foreign nationals distinctly",
            "Escort visitors in controlled areas",
        ],
    },
    {
        "id": "DEEMED-ITAR-002",
        "regulation": "ITAR",
        "title": "ITAR Deemed Export - Technical Data Disclosure",
        "reference": "22 CFR 120.54",
        "risk_level": "critical",
        "required_actions": [
            "Obtain TAA covering disclosure scope",
            "Mark all technical data with classification",
            "Control distribution of technical documents",
            "Implement email screening",
        ],
    },
    {
        "id": "DEEMED-EAR-001",
        "regulation": "EAR",
        "title": "EAR Deemed Export - Technology Release",
        "reference": "15 CFR 734.13",
        "risk_level": "high",
        "required_actions": [
            "Determine ECCN of technology",
            "Check license requirements for country",
            "Apply for deemed export license if required",
            "Document FRE applicability if claimed",
        ],
    },
    {
        "id": "DEEMED-EAR-002",
        "regulation": "EAR",
        "title": "EAR Deemed Export - Foreign National Categories",
        "reference": "15 CFR 734.13",
        "risk_level": "high",
        "required_actions": [
            "Verify citizenship/residency status",
            "For multiple nationalities, assess most restrictive",
            "Determine license requirements for each country",
            "Maintain documentation of status",
        ],
    },
]

# scope: "all_transactions" lists apply to every company with financial
# transactions; "export_only" lists apply once ITAR or EAR items are held.
SCREENING_LISTS: list[dict[str, str]] = [
    {"id": "SCREEN-SDN", "code": "SDN", "agency": "OFAC (Treasury Department)",
     "name": "Specially Designated Nationals and Blocked Persons List", "scope": "all_transactions"},
    {"id": "SCREEN-ENTITY", "code": "ENTITY_LIST", "agency": "BIS (Commerce Department)",
     "name": "Entity List", "scope": "export_only"},
    {"id": "SCREEN-DPL", "code": "DPL", "agency": "BIS (Commerce Department)",
     "name": "Denied Persons List", "scope": "export_only"},
    {"id": "SCREEN-UVL", "code": "UNVERIFIED", "agency": "BIS (Commerce Department)",
     "name": "Unverified List", "scope": "export_only"},
    {"id": "SCREEN-DEBARRED", "code": "DEBARRED", "agency": "DDTC (State Department)",
     "name": "ITAR Debarred Parties", "scope": "export_only"},
    {"id": "SCREEN-ISN", "code": "ISN", "agency": "State Department",
     "name": "Nonproliferation Sanctions", "scope": "all_transactions"},
]

TCP_ELEMENTS = [
    "Physical security measures (locked storage, access badges)",
    "IT security controls (access restrictions, encryption)",
    "Personnel security procedures (background checks, clearances)",
    "Visitor control procedures",
    "Foreign national identification and tracking",
    "Training and awareness program",
    "Audit and monitoring procedures",
    "Incident response procedures",
    "Documentation and record keeping",
]

# (code, name, description); eligibility is decided in license_exceptions()
LICENSE_EXCEPTIONS: list[tuple[str, str, str]] = [
    ("TMP", "Temporary Exports",
     "Temporary exports for exhibitions, demonstrations or testing"),
    ("RPL", "Servicing and Replacement Parts",
     "Replacement parts and components for previously exported equipment"),
    ("GOV", "Government and International Organizations",
     "Exports to U.S. government agencies and certain international organizations"),
    ("TSR", "Technology and Software Unrestricted",
     "Technology and software not controlled for MT, SI or CB reasons"),
    ("STA", "Strategic Trade Authorization",
     "Specified items to STA-eligible destinations"),
]


class ExportControlProfile(BaseModel):
    company_types: list[CompanyType] = Field(..., min_length=1)
    has_itar_items: bool = False
    has_ear_items: bool = False
    has_foreign_nationals: bool = False
    foreign_national_countries: list[str] = Field(default_factory=list)
    exports_to_countries: list[str] = Field(default_factory=list)
    has_technology_transfer: bool = False
    has_defense_contracts: bool = False
    has_manufacturing_abroad: bool = False
    has_joint_ventures: bool = False
    annual_export_value: Optional[float] = Field(None, ge=0)
    registered_with_ddtc: bool = False
    has_tcp: bool = False
    has_ecl: bool = False

    # Derived
    required_registrations: list[str] = Field(default_factory=list)
    required_licences: list[str] = Field(default_factory=list)
    profile_risk: Optional[ProfileRisk] = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def derive_obligations(self) -> "ExportControlProfile":
        self.required_registrations = [DDTC_REGISTRATION] if self.has_itar_items else []

        licences = []
        if self.has_itar_items:
            licences.append("DSP_5")
            if self.has_technology_transfer:
                licences.append("TAA")
            if self.has_manufacturing_abroad:
                licences.append("MLA")
        if self.has_ear_items:
            licences.append("BIS_LICENSE")
        self.required_licences = licences

        self.profile_risk = _profile_risk(self)
        return self


def _profile_risk(profile: ExportControlProfile) -> ProfileRisk:
    itar = profile.has_itar_items
    if itar and profile.has_foreign_nationals and not profile.has_tcp:
        return "critical"
    if itar and not profile.registered_with_ddtc:
        return "critical"
    if itar and profile.has_manufacturing_abroad:
        return "high"
    if itar and profile.has_foreign_nationals:
        return "high"
    if profile.has_ear_items and profile.has_joint_ventures:
        return "high"
    if itar or profile.has_ear_items:
        return "medium"
    return "low"


def jurisdiction_determination(profile: dict[str, Any]) -> str:
    itar, ear = profile["has_itar_items"], profile["has_ear_items"]
    if itar and ear:
        return "itar_with_ear_parts"
    if itar:
        return "itar_only"
    if ear:
        return "ear_only"
    return "ear99"


def penalty_exposure(requirements: list) -> dict[str, float]:
    """Maximum penalties across the applicable requirements."""
    exposure = {
        "max_civil_penalty": 0,
        "max_criminal_penalty": 0,
        "max_imprisonment_years": 0,
    }
    for requirement in requirements:
        for key in exposure:
            value = requirement.penalty.get(key)
            if isinstance(value, (int, float)) and value > exposure[key]:
                exposure[key] = value
    return exposure


# =============================================================================
# Determinations
# =============================================================================

def regulation_obligations(profile: dict[str, Any]) -> dict[str, dict[str, list[str]]]:
    """Required licences and registrations split by regulation."""
    licences = profile["required_licences"]
    return {
        "ITAR": {
            "required_licences": [lic for lic in licences if lic in ITAR_LICENCES],
            "required_registrations": list(profile["required_registrations"]),
        },
        "EAR": {
            "required_licences": [lic for lic in licences if lic in EAR_LICENCES],
            "required_registrations": [],
        },
    }


def deemed_export(profile: dict[str, Any]) -> dict[str, Any]:
    """
    Deemed export exposure from foreign national access.

    Release of controlled technology to a foreign person inside the US
    counts as an export to that person's country. ITAR rules apply to
    ITAR item holders and EAR rules to EAR item holders; a TCP is
    required when foreign nationals can reach ITAR data without one.
    """
    itar, ear = profile["has_itar_items"], profile["has_ear_items"]
    foreign_nationals = profile["has_foreign_nationals"]
    countries = list(profile["foreign_national_countries"])

    licences_required = []
    if foreign_nationals:
        for country in countries:
            if itar:
                licences_required.append(
                    f"TAA/DSP-5 required for {country} nationals accessing ITAR data"
                )
            if ear and country.upper() in RESTRICTED_COUNTRIES:
                licences_required.append(f"EAR license may be required for {country} nationals")

    tcp_required = foreign_nationals and itar and not profile["has_tcp"]
    recommendations = []
    if tcp_required:
        recommendations.append("Implement Technology Control Plan to protect ITAR technical data")
    if foreign_nationals:
        recommendations.extend([
            "Screen all foreign national employees for denied party list matches",
            "Maintain documentation of citizenship/residency for all employees",
            "Implement physical and IT access controls for controlled areas",
        ])

    return {
        "has_foreign_nationals": foreign_nationals,
        "foreign_national_countries": countries,
        "itar_rules": [dict(r) for r in DEEMED_EXPORT_RULES if itar and r["regulation"] == "ITAR"],
        "ear_rules": [dict(r) for r in DEEMED_EXPORT_RULES if ear and r["regulation"] == "EAR"],
        "tcp_required": tcp_required,
        "licences_required": licences_required,
        "recommendations": recommendations,
    }


def screening(profile: dict[str, Any]) -> dict[str, Any]:
    """Denied party lists to screen against, and how often."""
    controlled = profile["has_itar_items"] or profile["has_ear_items"]
    # Every company has financial transactions, so all_transactions lists always apply
    lists = [
        s["code"] for s in SCREENING_LISTS
        if s["scope"] == "all_transactions" or controlled
    ]

    value = profile["annual_export_value"] or 0
    if value > 10_000_000:
        frequency = "daily"
    elif value > 1_000_000:
        frequency = "weekly"
    else:
        frequency = "transaction"

    return {
        "required_lists": lists,
        "frequency": frequency,
        "automated_screening_required": profile["has_itar_items"] or value > 500_000,
        "red_flag_procedures_required": controlled,
    }


def tcp_assessment(profile: dict[str, Any]) -> dict[str, Any]:
    itar = profile["has_itar_items"]
    reasons = []
    if itar and profile["has_foreign_nationals"]:
        reasons.append("Foreign national employees have potential access to ITAR technical data")
    if itar and profile["has_joint_ventures"]:
        reasons.append("Joint ventures may involve foreign party access to ITAR data")
    if itar and profile["has_manufacturing_abroad"]:
        reasons.append("Foreign manufacturing requires protection of ITAR technical data")
    required = bool(reasons)

    if itar and profile["has_foreign_nationals"] and not profile["has_tcp"]:
        priority = "immediate"
    elif itar and not profile["has_tcp"]:
        priority = "high"
    else:
        priority = "medium"

    return {
        "required": required,
        "reasons": reasons,
        "required_elements": list(TCP_ELEMENTS) if required else [],
        "implementation_priority": priority,
    }


def license_exceptions(profile: dict[str, Any]) -> list[dict[str, str]]:
    """EAR licence exceptions the profile may be able to use."""
    ear = profile["has_ear_items"]
    eligible = {
        "TMP": ear,
        "RPL": ear,
        "GOV": ear or profile["has_defense_contracts"],
        "TSR": ear and profile["has_technology_transfer"],
        "STA": ear,
    }
    return [
        {"exception": code, "name": name, "description": description}
        for code, name, description in LICENSE_EXCEPTIONS
        if eligible[code]
    ]


def extras(profile: dict[str, Any], requirements: list) -> dict[str, Any]:
    return {
        "required_registrations": list(profile["required_registrations"]),
        "required_licences": list(profile["required_licences"]),
        "profile_risk": profile["profile_risk"],
        "jurisdiction_determination": jurisdiction_determination(profile),
        "penalty_exposure": penalty_exposure(requirements),
        "regulation_obligations": regulation_obligations(profile),
        "deemed_export": deemed_export(profile),
        "screening": screening(profile),
        "tcp_assessment": tcp_assessment(profile),
        "license_exceptions": license_exceptions(profile),
    }
