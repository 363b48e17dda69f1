from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date
from typing import List, Optional
from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.user import User
from app.schemas.performance import (
    ActionResult, MonthlyUserPerformance, UserPerformanceScore, WeeklyScoreRecord, WeeklyScoreUpdate
)
from app.services.performance import (
    CONCURRENT_EDIT_MESSAGE, calculate_monthly_leaderboard, get_performance_for_month, initialize_month, update_weekly_score
)

router = APIRouter(prefix="/performance", tags=["performance"])


def resolve_month(month: Optional[int], year: Optional[int]):
    today = date.today()
    if month is None:
        month = today.month
    if year is None:
        year = today.year

    if not (1 <= month <= 12):
        raise HTTPException(400, "Invalid month")
    if year < 1900 or year > 2100:
        raise HTTPException(400, "Invalid year")
    return year, month


@router.get("", response_model=List[MonthlyUserPerformance])
async def get_monthly_performance(
    month: int = None,
    year: int = None,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    year, month = resolve_month(month, year)
    return await get_performance_for_month(db, year, month)


@router.get("/leaderboard", response_model=List[UserPerformanceScore])
async def get_leaderboard(
    month: int = None,
    year: int = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    year, month = resolve_month(month, year)
    return await calculate_monthly_leaderboard(db, year, month)


@router.get("/me", response_model=MonthlyUserPerformance)
async def get_my_performance(
    month: int = None,
    year: int = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    year, month = resolve_month(month, year)
    record = await initialize_month(db, current_user.id, year, month)
    return MonthlyUserPerformance(
        user_id=current_user.id,
        year=year,
        month=month,
        weekly_scores=[WeeklyScoreRecord(**ws) for ws in record.weekly_scores],
        user_name=current_user.name,
        avatar_url=current_user.avatar_url,
    )


@router.put("/{user_id}/weekly-score", response_model=ActionResult)
async def set_weekly_score(
    user_id: int,
    score_in: WeeklyScoreUpdate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    user = await db.execute(select(User).where(User.id == user_id, User.is_admin.is_(False)))
    if not user.scalar_one_or_none():
        raise HTTPException(404, "User not found")

    result = await update_weekly_score(
        db,
        user_id=user_id,
        year=score_in.year,
        month=score_in.month,
        week_start_date=score_in.week_start_date,
        score=score_in.score,
    )
    if not result.success:
        status_code = 409 if result.message == CONCURRENT_EDIT_MESSAGE else 400
        raise HTTPException(status_code, result.message)
    return result
