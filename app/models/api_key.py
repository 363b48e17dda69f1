from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from app.database import Base

class ApiKey(Base):
    __tablename__ = "api_keys"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    key_name = Column(String, nullable=False)
    key_value = Column(Text, nullable=False)
    tag = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    api_type = Column(String, nullable=True)            # filled in by the integration suggestion
    integration_guide = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
