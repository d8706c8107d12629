"""EU Space Act cross-reference endpoints."""

from fastapi import APIRouter

from caelex.api.routes.packs import requirement_summary
from caelex.api.schemas.responses import CrossReferenceResponse
from caelex.engine import ComplianceEngine

router = APIRouter(prefix="/cross-references", tags=["Cross References"])

# Shared engine instance (set by main.py)
engine: ComplianceEngine = None


def set_engine(e: ComplianceEngine):
    global engine
    engine = e


@router.get("/{article}", response_model=CrossReferenceResponse)
async def requirements_for_article(article: str):
    """
    Requirements in all loaded packs that reference an EU Space Act
    article (e.g. "Art. 74"), grouped by source instrument.
    """
    grouped = engine.requirements_for_article(article)
    return CrossReferenceResponse(
        article=article,
        total=sum(len(reqs) for reqs in grouped.values()),
        by_source={
            source: [requirement_summary(r) for r in reqs]
            for source, reqs in grouped.items()
        },
    )
