from pydantic import BaseModel, Field, StrictInt
from datetime import date
from typing import List, Optional

class ActionResult(BaseModel):
    success: bool
    message: Optional[str] = None

class WeeklyScoreRecord(BaseModel):
    week_start_date: date  # a Friday
    score: Optional[int] = None

class MonthlyUserPerformance(BaseModel):
    user_id: int
    year: int
    month: int
    weekly_scores: List[WeeklyScoreRecord]

    # display fields
    user_name: Optional[str] = None
    avatar_url: Optional[str] = None

class WeeklyScoreUpdate(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    week_start_date: date
    # range is checked by the service so the caller gets its message
    score: Optional[StrictInt] = None

class UserPerformanceScore(BaseModel):
    user_id: int
    user_name: str
    avatar_url: Optional[str] = None
    score: float
    rank: int
