# app/utils/pin.py
import secrets
from typing import Iterable, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.user import User

def verify_pin(plain_pin: str, stored_pin: str) -> bool:
    """Compare PINs as plain text (constant time)"""
    return secrets.compare_digest(plain_pin.encode(), stored_pin.encode())

def generate_pin(taken: Iterable[str]) -> str:
    """Random PIN in 1000-9999 that is not in ``taken``."""
    taken = set(taken)
    if len(taken) >= 9000:
        raise ValueError("No free PINs left")
    while True:
        pin = str(secrets.randbelow(9000) + 1000)
        if pin not in taken:
            return pin

async def find_user_by_pin(db: AsyncSession, pin: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.pin == pin))
    return result.scalar_one_or_none()

async def pin_taken_by_other(db: AsyncSession, pin: str, user_id: int) -> bool:
    owner = await find_user_by_pin(db, pin)
    return owner is not None and owner.id != user_id
