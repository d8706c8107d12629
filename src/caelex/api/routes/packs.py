"""Rule pack endpoints."""

from fastapi import APIRouter
from typing import Optional

from caelex.api.schemas.responses import (
    PackDetail,
    PackSummary,
    RequirementDetail,
    RequirementSummary,
)
from caelex.engine import ComplianceEngine, recommendation_cap
from caelex.models import Requirement, RulePack

router = APIRouter(prefix="/packs", tags=["Rule Packs"])

# Shared engine instance (set by main.py)
engine: ComplianceEngine = None


def set_engine(e: ComplianceEngine):
    global engine
    engine = e


def pack_summary(pack: RulePack) -> PackSummary:
    return PackSummary(
        id=pack.id,
        name=pack.name,
        domain=pack.domain.value,
        jurisdiction=pack.jurisdiction,
        version=pack.version,
        effective_date=pack.effective_date.isoformat(),
        authority=pack.authority,
        requirement_count=len(pack.requirements),
        categories=pack.categories,
    )


def requirement_summary(r: Requirement) -> RequirementSummary:
    return RequirementSummary(
        id=r.id,
        reference=r.reference,
        title=r.title,
        category=r.category,
        severity=r.severity,
        binding_level=r.binding_level.value,
        source=r.source,
        module=r.module,
    )


@router.get("", response_model=list[PackSummary])
async def list_packs(domain: Optional[str] = None, jurisdiction: Optional[str] = None):
    """
    List all loaded rule packs.

    Optionally filter by domain: eu_space_act, nis2, copuos, uk_space,
    export_control
    """
    return [pack_summary(p) for p in engine.list_packs(domain=domain, jurisdiction=jurisdiction)]


@router.get("/{pack_id}", response_model=PackDetail)
async def get_pack(pack_id: str):
    """Get a rule pack's scoring configuration and content hash."""
    pack = engine.get_pack_or_raise(pack_id)
    summary = pack_summary(pack)

    return PackDetail(
        **summary.model_dump(),
        description=pack.description,
        rule_pack_hash=engine.pack_hash(pack.id),
        severity_weights=pack.severity_weights,
        score_dimensions=pack.score_dimensions,
        risk_basis=pack.risk_basis,
        recommendation_rules=[r.id for r in pack.recommendations],
        max_recommendations=recommendation_cap(pack),
    )


@router.get("/{pack_id}/requirements", response_model=list[RequirementSummary])
async def list_requirements(pack_id: str, category: Optional[str] = None):
    """List the requirements of a pack, optionally for one category."""
    if category:
        requirements = engine.requirements_by_category(pack_id, category)
    else:
        requirements = engine.get_pack_or_raise(pack_id).requirements
    return [requirement_summary(r) for r in requirements]


@router.get("/{pack_id}/requirements/{requirement_id}", response_model=RequirementDetail)
async def get_requirement(pack_id: str, requirement_id: str):
    """Get one requirement with its evidence and implementation guidance."""
    r = engine.requirement_by_id(pack_id, requirement_id)

    return RequirementDetail(
        **requirement_summary(r).model_dump(),
        description=r.description,
        license_types=r.license_types,
        eu_space_act_refs=r.eu_space_act_refs,
        evidence_required=r.evidence_required,
        implementation_guidance=r.implementation_guidance,
        compliance_question=r.compliance_question,
        penalty=r.penalty,
        conditional=r.applies_when is not None,
    )
