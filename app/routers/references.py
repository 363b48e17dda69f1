from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import HttpUrl, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
import logging

from app.ai.flows import AIFlowError, autocomplete_link_title
from app.ai.provider import BaseProvider, get_ai_provider
from app.database import get_db
from app.core.auth import get_current_user
from app.models.reference import Reference
from app.schemas.reference import ReferenceCreate, ReferenceResponse, TitleSuggestion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/references", tags=["references"])

VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com")
UNTITLED = "Untitled Reference"

_url_adapter = TypeAdapter(HttpUrl)


def categorize_link(link: str) -> str:
    return "Video" if any(host in link for host in VIDEO_HOSTS) else "Article"


@router.get("", response_model=List[ReferenceResponse])
async def list_references(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(Reference)
    if not current_user.is_admin:
        query = query.where(Reference.user_id == current_user.id)
    result = await db.execute(query.order_by(Reference.created_at.desc(), Reference.id.desc()))
    return result.scalars().all()


@router.get("/autocomplete-title", response_model=TitleSuggestion)
async def get_autocomplete_title(
    link: str,
    current_user = Depends(get_current_user),
    provider: BaseProvider = Depends(get_ai_provider)
):
    try:
        _url_adapter.validate_python(link)
    except ValidationError:
        raise HTTPException(400, "Invalid URL provided.")

    try:
        result = await autocomplete_link_title(provider, link)
    except AIFlowError as e:
        logger.error("Error autocompleting title: %s", e)
        raise HTTPException(502, "Failed to autocomplete title.")
    return TitleSuggestion(title=result.title)


@router.post("", response_model=ReferenceResponse, status_code=status.HTTP_201_CREATED)
async def create_reference(
    reference_in: ReferenceCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user),
    provider: BaseProvider = Depends(get_ai_provider)
):
    link = str(reference_in.link)
    title = reference_in.title
    ai_suggested = False

    if not title:
        try:
            title = (await autocomplete_link_title(provider, link)).title
            ai_suggested = True
        except AIFlowError as e:
            # keep going without a title
            logger.warning("AI title autocomplete failed for %s: %s", link, e)

    reference = Reference(
        user_id=current_user.id,
        link=link,
        title=title or UNTITLED,
        notes=reference_in.notes,
        tags=reference_in.tags,
        category=categorize_link(link),
        ai_suggested=ai_suggested,
    )
    db.add(reference)
    await db.commit()
    await db.refresh(reference)
    return reference


@router.delete("/{reference_id}")
async def delete_reference(
    reference_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(Reference).where(Reference.id == reference_id))
    reference = result.scalar_one_or_none()
    if not reference:
        raise HTTPException(404, "Reference not found.")
    if reference.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(403, "Unauthorized to delete this reference.")

    await db.delete(reference)
    await db.commit()
    return {"message": "Reference deleted."}
