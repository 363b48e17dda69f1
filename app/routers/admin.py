from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
import logging

from app.database import get_db
from app.core.auth import get_current_admin
from app.models.user import User
from app.schemas.user import AdminUserResponse, GeneratedPinResponse, PinChange, UserCreate
from app.utils.pin import find_user_by_pin, generate_pin, pin_taken_by_other

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get("", response_model=List[AdminUserResponse])
async def admin_list_users(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(User).order_by(User.name))
    return result.scalars().all()


@router.post("/generate-pin", response_model=GeneratedPinResponse)
async def admin_generate_pin(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(User.pin))
    try:
        pin = generate_pin(row[0] for row in result.fetchall())
    except ValueError as e:
        raise HTTPException(409, str(e))
    return GeneratedPinResponse(pin=pin)


@router.post("", response_model=AdminUserResponse, status_code=status.HTTP_201_CREATED)
async def admin_add_user(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    if await find_user_by_pin(db, user_in.pin):
        raise HTTPException(409, "PIN conflicts with an existing user. Please regenerate.")

    email = user_in.email.lower() if user_in.email else None
    if email:
        existing = await db.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none():
            raise HTTPException(409, "Email conflicts with an existing user.")

    user = User(
        name=user_in.name,
        email=email,
        pin=user_in.pin,
        pin_first_two=user_in.pin[:2],
        is_admin=False,
        avatar_url=user_in.avatar_url,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Admin %s added user %s", admin.id, user.id)
    return user


@router.put("/{user_id}/pin")
async def admin_update_user_pin(
    user_id: int,
    pin_in: PinChange,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(404, "User not found.")

    if await pin_taken_by_other(db, pin_in.new_pin, user_id):
        raise HTTPException(409, "This PIN is already in use by another user.")

    user.pin = pin_in.new_pin
    user.pin_first_two = pin_in.new_pin[:2]
    db.add(user)
    await db.commit()
    return {"message": f"PIN for user {user.name} updated successfully."}


@router.delete("/{user_id}")
async def admin_delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    if user_id == admin.id:
        raise HTTPException(400, "Admin cannot delete self.")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(404, "User not found.")

    await db.delete(user)
    await db.commit()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return {"message": "User deleted."}
