"""Material query endpoints."""
from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from construction_dna.core.models import EnvironmentConditions
from web.dependencies import get_engine_service
from web.schemas.qa import FailurePredictionResponse, MaterialDetailResponse, MaterialListResponse
from web.services.engine_service import EngineService

router = APIRouter(tags=["materials"])


@router.get("/materials", response_model=MaterialListResponse)
async def list_materials(
    chemistry: Optional[str] = None,
    manufacturer: Optional[str] = None,
    category: Optional[str] = None,
    fire_class: Optional[str] = None,
    q: Optional[str] = Query(default=None, description="Keyword search"),
    svc: EngineService = Depends(get_engine_service),
) -> MaterialListResponse:
    """Return catalog material summaries, optionally filtered."""
    materials = await asyncio.to_thread(
        svc.list_materials, chemistry, manufacturer, category, fire_class, q,
    )
    return MaterialListResponse(materials=materials, count=len(materials))


@router.get("/materials/{material_id}", response_model=MaterialDetailResponse)
async def get_material(
    material_id: str,
    svc: EngineService = Depends(get_engine_service),
) -> MaterialDetailResponse:
    """Return the full record for a single material."""
    result = await asyncio.to_thread(svc.get_material, material_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Material '{material_id}' not found")
    return MaterialDetailResponse.model_validate(result)


@router.get("/materials/{material_id}/failures", response_model=FailurePredictionResponse)
async def predict_failures(
    material_id: str,
    temperature: Optional[float] = None,
    moisture: Optional[str] = None,
    exposure: Optional[str] = None,
    svc: EngineService = Depends(get_engine_service),
) -> FailurePredictionResponse:
    """Rank the material's failure modes under the given conditions."""
    conditions = EnvironmentConditions(temperature=temperature, moisture=moisture, exposure=exposure)
    predictions = await asyncio.to_thread(svc.predict_failures, material_id, conditions)
    if predictions is None:
        raise HTTPException(status_code=404, detail=f"Material '{material_id}' not found")
    return FailurePredictionResponse(material_id=material_id, predictions=predictions)
