import logging
from datetime import date, timedelta
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.models.performance import MonthlyPerformance
from app.models.user import User
from app.schemas.performance import (
    ActionResult, MonthlyUserPerformance, UserPerformanceScore, WeeklyScoreRecord
)

logger = logging.getLogger(__name__)

FRIDAY = 4  # date.weekday()
MIN_SCORE, MAX_SCORE = 1, 5
CONCURRENT_EDIT_MESSAGE = "Score was changed by someone else. Reload and try again."
NOT_A_FRIDAY_MESSAGE = "Week must be a Friday of the selected month."


def get_fridays_of_month(year: int, month: int) -> List[date]:
    """Every Friday in the month, ascending."""
    current = date(year, month, 1)
    while current.weekday() != FRIDAY:
        current += timedelta(days=1)

    fridays = []
    while current.month == month:
        fridays.append(current)
        current += timedelta(days=7)
    return fridays


def is_valid_score(score) -> bool:
    if score is None:
        return True
    # bool is an int subclass; True is not a score
    if isinstance(score, bool) or not isinstance(score, int):
        return False
    return MIN_SCORE <= score <= MAX_SCORE


def average_score(weekly_scores: List[dict]) -> float:
    """Mean of the entered scores rounded to 2 places, 0 when nothing was entered."""
    entered = [ws["score"] for ws in weekly_scores if ws.get("score") is not None]
    if not entered:
        return 0.0
    return round(sum(entered) / len(entered), 2)


def _merge_fridays(weekly_scores: List[dict], fridays: List[date]) -> List[dict]:
    merged = [dict(ws) for ws in weekly_scores or []]
    known = {ws["week_start_date"] for ws in merged}
    for friday in fridays:
        key = friday.isoformat()
        if key not in known:
            merged.append({"week_start_date": key, "score": None})
    merged.sort(key=lambda ws: ws["week_start_date"])
    return merged


async def _get_record(
    db: AsyncSession, user_id: int, year: int, month: int
) -> Optional[MonthlyPerformance]:
    result = await db.execute(
        select(MonthlyPerformance)
        .where(MonthlyPerformance.user_id == user_id)
        .where(MonthlyPerformance.year == year)
        .where(MonthlyPerformance.month == month)
    )
    return result.scalar_one_or_none()


async def initialize_month(
    db: AsyncSession, user_id: int, year: int, month: int
) -> MonthlyPerformance:
    """
    Fetch the (user, month) record, creating it with an empty week for every
    Friday when it does not exist. An existing record gets any missing Fridays
    appended and its weeks re-sorted; it is only written back when that changed
    something.
    """
    fridays = get_fridays_of_month(year, month)
    record = await _get_record(db, user_id, year, month)

    if record is None:
        record = MonthlyPerformance(
            user_id=user_id,
            year=year,
            month=month,
            weekly_scores=_merge_fridays([], fridays),
        )
        db.add(record)
        try:
            await db.commit()
        except IntegrityError:
            # another request created it first
            await db.rollback()
            record = await _get_record(db, user_id, year, month)
            if record is None:
                raise
        else:
            logger.info("Initialized performance for user %s %s-%02d", user_id, year, month)
            return record

    merged = _merge_fridays(record.weekly_scores, fridays)
    if merged != record.weekly_scores:
        record.weekly_scores = merged
        try:
            await db.commit()
        except StaleDataError:
            # another request backfilled it first; rollback expires our copy
            await db.rollback()
            logger.info("Backfill for user %s %s-%02d lost the race; re-reading", user_id, year, month)
            record = await _get_record(db, user_id, year, month)
            if record is None:
                raise
        else:
            logger.info("Backfilled missing weeks for user %s %s-%02d", user_id, year, month)
    return record


async def update_weekly_score(
    db: AsyncSession,
    user_id: int,
    year: int,
    month: int,
    week_start_date: Union[date, str],
    score: Optional[int],
) -> ActionResult:
    if not is_valid_score(score):
        return ActionResult(success=False, message="Score must be between 1 and 5, or null.")

    try:
        week = week_start_date if isinstance(week_start_date, date) else date.fromisoformat(str(week_start_date))
        fridays = get_fridays_of_month(year, month)
    except ValueError:
        return ActionResult(success=False, message="Invalid year, month or week date.")
    if week not in fridays:
        return ActionResult(success=False, message=NOT_A_FRIDAY_MESSAGE)
    week_key = week.isoformat()

    try:
        record = await _get_record(db, user_id, year, month)
        if record is None:
            # initialize then retry once
            await initialize_month(db, user_id, year, month)
            record = await _get_record(db, user_id, year, month)
            if record is None:
                return ActionResult(
                    success=False,
                    message="Performance record for this user and month not found even after init.",
                )

        weekly_scores = [dict(ws) for ws in record.weekly_scores]
        for ws in weekly_scores:
            if ws["week_start_date"] == week_key:
                ws["score"] = score
                break
        else:
            weekly_scores.append({"week_start_date": week_key, "score": score})
            weekly_scores.sort(key=lambda ws: ws["week_start_date"])

        record.weekly_scores = weekly_scores
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning(
            "Concurrent score edit for user %s week %s; write rejected", user_id, week_key
        )
        return ActionResult(success=False, message=CONCURRENT_EDIT_MESSAGE)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error updating weekly score for user %s week %s", user_id, week_key)
        return ActionResult(success=False, message="Failed to update score in database.")

    return ActionResult(success=True, message="Score updated.")


async def _non_admin_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).where(User.is_admin.is_(False)))
    return list(result.scalars().all())


def _name_key(name: Optional[str]):
    name = name or ""
    return (name.casefold(), name)


async def get_performance_for_month(
    db: AsyncSession, year: int, month: int
) -> List[MonthlyUserPerformance]:
    """Score grid for every non-admin user, sorted by name."""
    performance = []
    # a lost backfill race rolls back and expires the loaded users
    users = [(user.id, user.name, user.avatar_url) for user in await _non_admin_users(db)]
    for user_id, user_name, avatar_url in users:
        record = await initialize_month(db, user_id, year, month)
        performance.append(
            MonthlyUserPerformance(
                user_id=user_id,
                year=year,
                month=month,
                weekly_scores=[WeeklyScoreRecord(**ws) for ws in record.weekly_scores],
                user_name=user_name,
                avatar_url=avatar_url,
            )
        )
    performance.sort(key=lambda p: _name_key(p.user_name))
    return performance


async def calculate_monthly_leaderboard(
    db: AsyncSession, year: int, month: int
) -> List[UserPerformanceScore]:
    entries = []
    users = [(user.id, user.name, user.avatar_url) for user in await _non_admin_users(db)]
    for user_id, user_name, avatar_url in users:
        record = await _get_record(db, user_id, year, month)
        if record is None:
            # no scores if just initialized
            await initialize_month(db, user_id, year, month)
            score = 0.0
        else:
            score = average_score(record.weekly_scores)
        entries.append((user_id, user_name, avatar_url, score))

    entries.sort(key=lambda entry: (-entry[3], _name_key(entry[1])))

    return [
        UserPerformanceScore(
            user_id=user_id,
            user_name=user_name,
            avatar_url=avatar_url,
            score=score,
            rank=index + 1,
        )
        for index, (user_id, user_name, avatar_url, score) in enumerate(entries)
    ]
