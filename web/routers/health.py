"""Health check endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from construction_dna import __version__
from web.schemas.qa import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Return service health status."""
    return HealthResponse(
        status="ok",
        service="ConstructionDNA Engineering Q&A Service",
        version=__version__,
    )
