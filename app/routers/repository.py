from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
import logging

from app.ai.flows import AIFlowError, suggest_api_integrations
from app.ai.provider import BaseProvider, get_ai_provider
from app.database import get_db
from app.core.auth import get_current_user
from app.models.api_key import ApiKey
from app.schemas.api_key import ApiKeyCreate, ApiKeyResponse, ApiIntegrationSuggestion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api-keys", tags=["repository"])


async def _get_owned_key(db: AsyncSession, key_id: int, current_user) -> ApiKey:
    result = await db.execute(select(ApiKey).where(ApiKey.id == key_id))
    api_key = result.scalar_one_or_none()
    if not api_key:
        raise HTTPException(404, "API key not found.")
    if api_key.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(403, "Unauthorized to access this key.")
    return api_key


@router.get("", response_model=List[ApiKeyResponse])
async def list_api_keys(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(ApiKey)
    if not current_user.is_admin:
        query = query.where(ApiKey.user_id == current_user.id)
    result = await db.execute(query.order_by(ApiKey.created_at.desc(), ApiKey.id.desc()))
    return result.scalars().all()


@router.post("", response_model=ApiKeyResponse, status_code=status.HTTP_201_CREATED)
async def create_api_key(
    key_in: ApiKeyCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    api_key = ApiKey(
        user_id=current_user.id,
        key_name=key_in.key_name,
        key_value=key_in.key_value,
        tag=key_in.tag,
        notes=key_in.notes,
        expires_at=key_in.expires_at,
    )
    db.add(api_key)
    await db.commit()
    await db.refresh(api_key)
    return api_key


@router.delete("/{key_id}")
async def delete_api_key(
    key_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    api_key = await _get_owned_key(db, key_id, current_user)
    await db.delete(api_key)
    await db.commit()
    return {"message": "API Key deleted."}


@router.post("/{key_id}/suggest-integration", response_model=ApiIntegrationSuggestion)
async def suggest_integration(
    key_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
    provider: BaseProvider = Depends(get_ai_provider)
):
    api_key = await _get_owned_key(db, key_id, current_user)

    try:
        suggestion = await suggest_api_integrations(provider, api_key.key_name, api_key.key_value)
    except AIFlowError as e:
        logger.error("AI suggestion for API integration failed: %s", e)
        raise HTTPException(502, "Failed to get API integration suggestion.")

    # Save suggestion back onto the key
    api_key.api_type = suggestion.api_type
    api_key.integration_guide = suggestion.integration_guide
    db.add(api_key)
    await db.commit()

    return ApiIntegrationSuggestion(
        api_type=suggestion.api_type,
        integration_guide=suggestion.integration_guide,
    )
