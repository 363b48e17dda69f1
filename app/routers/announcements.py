from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from app.database import get_db
from app.core.auth import get_current_user
from app.models.message import Announcement, AnnouncementRead
from app.schemas.message import AnnouncementResponse
from typing import List

router = APIRouter(prefix="/announcements", tags=["announcements"])


def is_addressed_to(announcement: Announcement, user_id: int) -> bool:
    return announcement.recipient_user_id in ("all", str(user_id))


@router.get("", response_model=List[AnnouncementResponse])
async def get_my_announcements(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    """
    Announcements sent to everyone or to the current user, newest first.
    """
    result = await db.execute(
        select(Announcement)
        .where(or_(
            Announcement.recipient_user_id == "all",
            Announcement.recipient_user_id == str(current_user.id),
        ))
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    )
    announcements = result.scalars().all()

    reads = await db.execute(
        select(AnnouncementRead.announcement_id)
        .where(AnnouncementRead.user_id == current_user.id)
    )
    read_ids = {row[0] for row in reads.fetchall()}

    response = []
    for anno in announcements:
        item = AnnouncementResponse.model_validate(anno)
        item.is_read = anno.id in read_ids
        response.append(item)
    return response


@router.post("/{announcement_id}/read")
async def mark_announcement_read(
    announcement_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(Announcement).where(Announcement.id == announcement_id))
    announcement = result.scalar_one_or_none()
    if not announcement:
        raise HTTPException(404, "Announcement not found.")
    if not is_addressed_to(announcement, current_user.id):
        raise HTTPException(403, "This announcement was not intended for you.")

    existing = await db.execute(
        select(AnnouncementRead)
        .where(AnnouncementRead.announcement_id == announcement_id)
        .where(AnnouncementRead.user_id == current_user.id)
    )
    if not existing.scalar_one_or_none():
        db.add(AnnouncementRead(announcement_id=announcement_id, user_id=current_user.id))
        try:
            await db.commit()
        except IntegrityError:
            # marked by a parallel request
            await db.rollback()

    return {"success": True, "message": "Announcement marked as read."}
