# app/routers/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.schemas.user import PinLogin, PinChange, PinVerifyResponse, UserProfileUpdate, UserResponse, Token
from app.database import get_db
from app.utils.pin import find_user_by_pin, pin_taken_by_other, verify_pin
from app.core.security import create_access_token
from app.core.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
async def login(login_in: PinLogin, db: AsyncSession = Depends(get_db)):
    user = await find_user_by_pin(db, login_in.pin)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid PIN",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token({"sub": str(user.id)})
    logger.info("User %s logged in", user.id)
    return Token(access_token=access_token, token_type="bearer", user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    profile_in: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if profile_in.name is not None:
        current_user.name = profile_in.name
    if profile_in.avatar_url is not None:
        current_user.avatar_url = profile_in.avatar_url
    db.add(current_user)
    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.post("/verify-pin", response_model=PinVerifyResponse)
async def verify_my_pin(
    pin_in: PinLogin,
    current_user: User = Depends(get_current_user)
):
    # Gate for revealing secrets (e.g. API key values) in the UI
    return PinVerifyResponse(verified=verify_pin(pin_in.pin, current_user.pin))


@router.post("/change-pin")
async def change_pin(
    request: PinChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if await pin_taken_by_other(db, request.new_pin, current_user.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This PIN is already in use by another user."
        )

    current_user.pin = request.new_pin
    current_user.pin_first_two = request.new_pin[:2]
    db.add(current_user)
    await db.commit()

    return {"message": "PIN updated successfully."}
