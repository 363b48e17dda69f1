from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func
from typing import List
from app.database import get_db
from app.core.auth import get_current_user
from app.models.message import DirectMessage
from app.models.user import User
from app.schemas.message import DirectMessageCreate, DirectMessageResponse, UnreadCountResponse

router = APIRouter(prefix="/messages", tags=["messages"])


async def get_primary_admin(db: AsyncSession) -> User | None:
    # Replies from staff always go to the first admin account
    result = await db.execute(
        select(User).where(User.is_admin.is_(True)).order_by(User.id).limit(1)
    )
    return result.scalar_one_or_none()


# 1. Send a message (admin -> user, or user reply -> admin)
@router.post("", response_model=DirectMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_direct_message(
    message_in: DirectMessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if not message_in.message.strip():
        raise HTTPException(400, "Message cannot be empty.")

    is_reply = not current_user.is_admin
    if is_reply:
        admin = await get_primary_admin(db)
        if not admin:
            raise HTTPException(400, "No admin available to receive the message.")
        recipient_id = admin.id
    else:
        if message_in.recipient_user_id is None:
            raise HTTPException(400, "Recipient must be selected.")
        recipient = await db.execute(select(User).where(User.id == message_in.recipient_user_id))
        if not recipient.scalar_one_or_none():
            raise HTTPException(400, "Recipient not found.")
        recipient_id = message_in.recipient_user_id

    dm = DirectMessage(
        sender_id=current_user.id,
        recipient_id=recipient_id,
        message=message_in.message,
        read=False,
        is_reply=is_reply,
    )
    db.add(dm)
    await db.commit()
    await db.refresh(dm)
    return dm


# 2. Unread count for the current user
@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_messages_count(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(func.count(DirectMessage.id))
        .where(DirectMessage.recipient_id == current_user.id)
        .where(DirectMessage.read.is_(False))
    )
    return UnreadCountResponse(unread=result.scalar_one())


# 3. Conversation with one contact, oldest first
@router.get("/{contact_id}", response_model=List[DirectMessageResponse])
async def get_conversation(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(DirectMessage)
        .where(or_(
            and_(DirectMessage.sender_id == current_user.id, DirectMessage.recipient_id == contact_id),
            and_(DirectMessage.sender_id == contact_id, DirectMessage.recipient_id == current_user.id),
        ))
        .order_by(DirectMessage.timestamp, DirectMessage.id)
    )
    return result.scalars().all()


# 4. Mark everything from a contact as read
@router.post("/{contact_id}/read")
async def mark_messages_as_read(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(DirectMessage)
        .where(DirectMessage.recipient_id == current_user.id)
        .where(DirectMessage.sender_id == contact_id)
        .where(DirectMessage.read.is_(False))
    )
    unread = result.scalars().all()
    for dm in unread:
        dm.read = True
    if unread:
        await db.commit()

    return {
        "success": bool(unread),
        "message": "Messages marked as read." if unread else "No new messages to mark.",
    }
