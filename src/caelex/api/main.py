"""
Caelex API

Space compliance scoring and gap analysis over HTTP.

Run locally:
    uvicorn caelex.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from caelex import __version__, config
from caelex.api.routes import assess, crossref, packs, unified
from caelex.engine import ComplianceEngine, get_default_engine
from caelex.exceptions import (
    AssessmentError,
    CaelexError,
    InvalidConditionError,
    ProfileValidationError,
    RulePackNotFoundError,
    UnknownDomainError,
    UnknownRequirementError,
)
from caelex.logging_config import configure_logging

logger = logging.getLogger("caelex.api")

# Engine shared by every router (set in lifespan)
engine: ComplianceEngine = None

ERROR_STATUS: dict[type, int] = {
    RulePackNotFoundError: 404,
    UnknownRequirementError: 404,
    ProfileValidationError: 400,
    AssessmentError: 400,
    UnknownDomainError: 400,
    InvalidConditionError: 400,
}


def status_for(exc: CaelexError) -> int:
    """HTTP status for a Caelex error; unmapped errors are server errors."""
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500


def set_engine(e: ComplianceEngine):
    global engine
    engine = e
    packs.set_engine(e)
    assess.set_engine(e)
    unified.set_engine(e)
    crossref.set_engine(e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load rule packs on startup."""
    configure_logging()

    if engine is None:
        logger.info("Loading rule packs from %s", config.CX_PACKS_DIR)
        set_engine(get_default_engine())

    logger.info("Loaded %d rule packs", len(engine.pack_ids))
    for path, error in engine.load_errors:
        logger.error("Rule pack %s not loaded: %s", path.name, error)

    yield

    logger.info("Shutting down")


# Create app
app = FastAPI(
    title="Caelex API",
    description="""
**Space compliance scoring and gap analysis.**

Caelex scores an operator's self-assessment against the regulatory
regimes that apply to it and returns prioritised gaps and
recommendations.

## Regimes

- **COPUOS / IADC**: Space debris mitigation guidelines
- **UK Space Industry Act 2018**: Licensing, safety, insurance
- **NIS2**: Cybersecurity for space-sector entities
- **ITAR / EAR**: US export control
- **EU Space Act**: Authorization, registration, safety, environment

## Quick Start

1. `GET /packs` - See available rule packs
2. `POST /assess/{pack_id}/applicable` - See what applies to you
3. `POST /assess/{pack_id}` - Score your self-assessment
4. `POST /unified` - Combine regimes into one graded score
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if config.CX_DOCS_ENABLED else None,
    redoc_url="/redoc" if config.CX_DOCS_ENABLED else None,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CX_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(packs.router)
app.include_router(assess.router)
app.include_router(unified.router)
app.include_router(crossref.router)


@app.exception_handler(CaelexError)
async def caelex_error_handler(request: Request, exc: CaelexError):
    status = status_for(exc)
    if status >= 500:
        logger.error("Request failed: %s", exc, extra={"pack_id": exc.pack_id})
    return JSONResponse(status_code=status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "code": "CX_REQUEST_INVALID",
            "message": "Request body failed validation",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


@app.get("/health", tags=["Health"])
async def health():
    """Health check endpoint."""
    return {
        "healthy": True,
        "version": __version__,
        "packs_loaded": len(engine.pack_ids) if engine else 0,
        "pack_load_errors": len(engine.load_errors) if engine else 0,
    }


def main():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
