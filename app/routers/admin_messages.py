from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Dict, List
import logging

from app.database import get_db
from app.core.auth import get_current_admin
from app.models.message import Announcement, AnnouncementRead, DirectMessage
from app.models.user import User
from app.schemas.message import (
    AnnouncementCreate, AdminAnnouncementResponse, DirectMessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-messages"])


# 1. Create Announcement
@router.post("/announcements", response_model=AdminAnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    announcement_in: AnnouncementCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    if announcement_in.recipient_user_id != "all":
        recipient = await db.execute(
            select(User).where(User.id == int(announcement_in.recipient_user_id))
        )
        if not recipient.scalar_one_or_none():
            raise HTTPException(400, f"Invalid recipient: {announcement_in.recipient_user_id}")

    announcement = Announcement(
        message=announcement_in.message,
        recipient_user_id=announcement_in.recipient_user_id,
        sent_by_admin_id=admin.id,
        sent_by_admin_name=admin.name,
    )
    db.add(announcement)
    await db.commit()
    await db.refresh(announcement)
    logger.info("Admin %s sent announcement %s to %s", admin.id, announcement.id, announcement.recipient_user_id)
    return announcement


# 2. All announcements with who read them
@router.get("/announcements", response_model=List[AdminAnnouncementResponse])
async def get_all_announcements(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(
        select(Announcement).order_by(Announcement.created_at.desc(), Announcement.id.desc())
    )
    announcements = result.scalars().all()

    reads = await db.execute(select(AnnouncementRead.announcement_id, AnnouncementRead.user_id))
    read_by: Dict[int, List[int]] = {}
    for announcement_id, user_id in reads.fetchall():
        read_by.setdefault(announcement_id, []).append(user_id)

    response = []
    for anno in announcements:
        item = AdminAnnouncementResponse.model_validate(anno)
        item.read_by = sorted(read_by.get(anno.id, []))
        response.append(item)
    return response


@router.delete("/announcements/{announcement_id}")
async def delete_announcement(
    announcement_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(Announcement).where(Announcement.id == announcement_id))
    announcement = result.scalar_one_or_none()
    if not announcement:
        raise HTTPException(404, "Announcement not found.")

    reads = await db.execute(
        select(AnnouncementRead).where(AnnouncementRead.announcement_id == announcement_id)
    )
    for read in reads.scalars():
        await db.delete(read)
    await db.delete(announcement)
    await db.commit()
    return {"message": "Announcement deleted."}


# 3. Every user's conversation with the admin
@router.get("/messages/conversations", response_model=Dict[int, List[DirectMessageResponse]])
async def get_all_user_conversations(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    users = await db.execute(select(User.id).where(User.is_admin.is_(False)))
    user_ids = {row[0] for row in users.fetchall()}

    result = await db.execute(
        select(DirectMessage)
        .where(or_(DirectMessage.sender_id == admin.id, DirectMessage.recipient_id == admin.id))
        .order_by(DirectMessage.timestamp, DirectMessage.id)
    )

    conversations: Dict[int, List[DirectMessageResponse]] = {}
    for dm in result.scalars():
        contact_id = dm.recipient_id if dm.sender_id == admin.id else dm.sender_id
        if contact_id in user_ids:
            conversations.setdefault(contact_id, []).append(DirectMessageResponse.model_validate(dm))
    return conversations
