"""Unified compliance score endpoint."""

from fastapi import APIRouter

from caelex.api.schemas.requests import UnifiedRequest
from caelex.api.schemas.responses import UnifiedResponse
from caelex.engine import ComplianceEngine
from caelex.unified import calculate_unified_score

router = APIRouter(prefix="/unified", tags=["Unified Score"])

# Shared engine instance (set by main.py)
engine: ComplianceEngine = None


def set_engine(e: ComplianceEngine):
    global engine
    engine = e


@router.post("", response_model=UnifiedResponse)
async def unified(request: UnifiedRequest):
    """
    Combine assessments from several packs into one weighted score.

    Each entry is assessed exactly as POST /assess/{pack_id} would,
    then the applicable requirements are pooled into the six modules.
    """
    results = [
        engine.perform_assessment(
            entry.pack_id,
            profile=entry.profile,
            assessments=[a.model_dump(exclude_none=True) for a in entry.assessments],
        )
        for entry in request.assessments
    ]
    return calculate_unified_score(results, engine.get_pack_or_raise).to_dict()
