"""
Pytest configuration and fixtures for Caelex tests.

Provides helper factories and common fixtures matching actual model definitions.
"""
from pathlib import Path
from datetime import date
from typing import Any

import pytest

from caelex.engine import ComplianceEngine
from caelex.models import (
    BindingLevel,
    ComplianceStatus,
    Condition,
    RecommendationRule,
    RegulatoryDomain,
    Requirement,
    RiskRule,
    RiskLevel,
    RulePack,
)

# Path to the bundled rule packs
PACKS_DIR = Path(__file__).parent.parent / "src" / "caelex" / "rulepacks"


# =============================================================================
# Factory Helpers
# =============================================================================

def make_requirement(
    id: str = "REQ-001",
    severity: str = "critical",
    binding_level: BindingLevel = BindingLevel.MANDATORY,
    category: str = "general",
    reference: str = None,
    title: str = None,
    applies_when: Condition = None,
    **kwargs,
) -> Requirement:
    """Create a Requirement with required fields."""
    return Requirement(
        id=id,
        reference=reference or f"Ref {id}",
        title=title or f"Requirement {id}",
        description=f"Description of {id}",
        category=category,
        severity=severity,
        binding_level=binding_level,
        applies_when=applies_when,
        **kwargs,
    )


def make_pack(
    requirements: list[Requirement] = None,
    id: str = "TEST-PACK-2025",
    domain: RegulatoryDomain = RegulatoryDomain.COPUOS,
    **kwargs,
) -> RulePack:
    """Create a RulePack with sensible defaults."""
    return RulePack(
        id=id,
        domain=domain,
        name="Test Pack",
        version="1.0",
        jurisdiction="INT",
        effective_date=date(2025, 1, 1),
        requirements=requirements if requirements is not None else [make_requirement()],
        **kwargs,
    )


def make_risk_rule(
    id: str,
    condition: Condition,
    level: RiskLevel = RiskLevel.CRITICAL,
    description: str = None,
) -> RiskRule:
    """Create a RiskRule."""
    return RiskRule(id=id, level=level, condition=condition, description=description)


def make_recommendation(
    id: str,
    text: str = None,
    condition: Condition = None,
    after_gaps: bool = False,
) -> RecommendationRule:
    """Create a RecommendationRule."""
    return RecommendationRule(
        id=id,
        text=text or f"Recommendation {id}",
        condition=condition,
        after_gaps=after_gaps,
    )


def make_statuses(entries: dict[str, str]) -> dict[str, ComplianceStatus]:
    """Requirement ID to ComplianceStatus from plain strings."""
    return {rid: ComplianceStatus(status) for rid, status in entries.items()}


def make_assessments(entries: dict[str, str]) -> list[dict[str, Any]]:
    """Assessment dicts as accepted by ComplianceEngine.perform_assessment."""
    return [{"requirement_id": rid, "status": status} for rid, status in entries.items()]


def make_pack_data(**overrides) -> dict[str, Any]:
    """Minimal valid rule pack mapping, as parsed from YAML."""
    data = {
        "schema_version": "1.0.0",
        "id": "TEST-PACK-2025",
        "domain": "copuos",
        "name": "Test Pack",
        "version": "1.0",
        "jurisdiction": "int",
        "effective_date": "2025-01-01",
        "requirements": [
            {
                "id": "REQ-001",
                "reference": "Art. 1",
                "title": "First requirement",
                "description": "Always applies",
                "category": "general",
                "severity": "critical",
                "binding_level": "mandatory",
            },
            {
                "id": "REQ-002",
                "reference": "Art. 2",
                "title": "LEO only",
                "description": "Applies in LEO",
                "category": "disposal",
                "severity": "major",
                "binding_level": "recommended",
                "applies_when": {"op": "eq", "field": "profile.orbit_regime", "value": "LEO"},
            },
        ],
    }
    data.update(overrides)
    return data


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def engine() -> ComplianceEngine:
    """Engine with every bundled rule pack loaded."""
    e = ComplianceEngine()
    e.load_packs_from_directory(PACKS_DIR)
    return e


@pytest.fixture
def leo_cubesat_profile() -> dict[str, Any]:
    """Commercial 4 kg LEO cubesat without propulsion."""
    return {
        "orbit_regime": "LEO",
        "mission_type": "commercial",
        "satellite_mass_kg": 4,
        "altitude_km": 550,
    }


@pytest.fixture
def uk_satellite_profile() -> dict[str, Any]:
    """UK satellite operator going to orbit."""
    return {
        "operator_type": "satellite_operator",
        "activity_types": ["orbital_operations"],
        "launch_to_orbit": True,
    }


@pytest.fixture
def nis2_large_profile() -> dict[str, Any]:
    """Large EU-established space entity."""
    return {
        "entity_size": "large",
        "is_eu_established": True,
    }


@pytest.fixture
def itar_unregistered_profile() -> dict[str, Any]:
    """Spacecraft manufacturer holding ITAR items without DDTC registration."""
    return {
        "company_types": ["spacecraft_manufacturer"],
        "has_itar_items": True,
        "registered_with_ddtc": False,
    }


@pytest.fixture
def eu_spacecraft_profile() -> dict[str, Any]:
    """Large EU spacecraft operator in LEO."""
    return {
        "activity_type": "spacecraft",
        "establishment": "eu",
        "entity_size": "large",
        "primary_orbit": "LEO",
    }
