"""Assessment endpoints."""

from fastapi import APIRouter

from caelex.api.schemas.requests import AssessRequest, ProfileRequest
from caelex.api.schemas.responses import ApplicableResponse, AssessResponse
from caelex.engine import ComplianceEngine, cross_reference_summary, eu_space_act_overlaps

router = APIRouter(prefix="/assess", tags=["Assessment"])

# Shared engine instance (set by main.py)
engine: ComplianceEngine = None


def set_engine(e: ComplianceEngine):
    global engine
    engine = e


@router.post("/{pack_id}", response_model=AssessResponse)
async def assess(pack_id: str, request: AssessRequest):
    """
    Assess an operator profile against a rule pack.

    Returns scores, risk level, prioritised gaps, recommendations, the
    documentation checklist and domain-specific extras. Requirements
    without an assessment count as not_assessed.
    """
    result = engine.perform_assessment(
        pack_id,
        profile=request.profile,
        assessments=[a.model_dump(exclude_none=True) for a in request.assessments],
    )
    return result.to_dict()


@router.post("/{pack_id}/applicable", response_model=ApplicableResponse)
async def applicable(pack_id: str, request: ProfileRequest):
    """Which requirements of a pack apply to a profile (no scoring)."""
    pack = engine.get_pack_or_raise(pack_id)
    profile = engine.validate_profile(pack.domain, request.profile)
    requirements = engine.applicable_requirements(pack, profile)

    return ApplicableResponse(
        pack_id=pack.id,
        profile=profile,
        applicable_requirement_ids=[r.id for r in requirements],
        eu_space_act_overlaps=eu_space_act_overlaps(requirements),
        cross_reference=cross_reference_summary(requirements),
    )
