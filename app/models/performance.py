# app/models/performance.py
from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, JSON
from app.database import Base

class MonthlyPerformance(Base):
    __tablename__ = "monthly_performance"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)  # 1-12

    # [{"week_start_date": "2024-05-03", "score": 4 | None}, ...], one entry per Friday, ascending
    weekly_scores = Column(JSON, nullable=False, default=list)

    # bumped on every UPDATE; a stale write raises StaleDataError instead of overwriting
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", name="uq_user_year_month"),
    )
    __mapper_args__ = {"version_id_col": version}
