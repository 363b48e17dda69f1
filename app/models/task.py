from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, func
from app.database import Base

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    reference_url = Column(String, nullable=True)
    assigned_to_user_ids = Column(JSON, nullable=False, default=list)        # list of user ids
    assigned_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)  # Who created it
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    status = Column(String, default="To Do")  # To Do, In Progress, Completed, Blocked
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
