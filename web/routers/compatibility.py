"""Material compatibility endpoint."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from web.dependencies import get_engine_service
from web.schemas.qa import CompatibilityRequest, CompatibilityResponse
from web.services.engine_service import EngineService

router = APIRouter(tags=["compatibility"])


@router.post("/compatibility", response_model=CompatibilityResponse)
async def check_compatibility(
    request: CompatibilityRequest,
    svc: EngineService = Depends(get_engine_service),
) -> CompatibilityResponse:
    """Check whether two catalog materials can be installed together."""
    result = await asyncio.to_thread(
        svc.check_compatibility, request.material_id_1, request.material_id_2,
    )
    return CompatibilityResponse.model_validate(result.to_dict())
