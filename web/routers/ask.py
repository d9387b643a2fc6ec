"""Question answering endpoints."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from web.dependencies import get_engine_service
from web.schemas.qa import AskRequest, AskResponse, ParseRequest, ParseResponse
from web.services.engine_service import EngineService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["qa"])


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    svc: EngineService = Depends(get_engine_service),
) -> AskResponse:
    """Answer an engineering question about the catalog."""
    if not request.question.strip():
        raise HTTPException(status_code=400, detail="Question must not be empty")
    answer = await asyncio.to_thread(svc.ask, request.question, request.to_context())
    logger.info("Answered question intent=%s", answer.intent.value)
    return AskResponse.model_validate(answer.to_dict())


@router.post("/parse", response_model=ParseResponse)
async def parse(
    request: ParseRequest,
    svc: EngineService = Depends(get_engine_service),
) -> ParseResponse:
    """Return the intent, keywords and entities found in a question."""
    parsed = await asyncio.to_thread(svc.parse, request.question)
    return ParseResponse.model_validate(parsed.to_dict())
