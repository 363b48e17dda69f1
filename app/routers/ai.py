from fastapi import APIRouter, Depends, HTTPException
import logging

from app.ai.flows import AIFlowError, DailyWisdom, generate_daily_wisdom
from app.ai.provider import BaseProvider, get_ai_provider
from app.core.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/daily-wisdom", response_model=DailyWisdom)
async def daily_wisdom(
    current_user = Depends(get_current_user),
    provider: BaseProvider = Depends(get_ai_provider)
):
    try:
        return await generate_daily_wisdom(provider)
    except AIFlowError as e:
        logger.error("Daily wisdom generation failed: %s", e)
        raise HTTPException(502, "Failed to generate daily wisdom.")
