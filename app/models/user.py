from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from app.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True)        # stored lower-case
    pin = Column(String(4), unique=True, nullable=False)      # 4 digits, plain text (admins can reveal it)
    pin_first_two = Column(String(2), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
