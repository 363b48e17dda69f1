from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional, Union

class AnnouncementCreate(BaseModel):
    message: str = Field(..., min_length=1)
    recipient_user_id: Union[int, str] = "all"

    @field_validator("recipient_user_id")
    @classmethod
    def check_recipient(cls, value):
        if isinstance(value, str) and value != "all":
            if not (value.isascii() and value.isdecimal()):
                raise ValueError("recipient_user_id must be a user id or 'all'")
        return str(value)

class AnnouncementResponse(BaseModel):
    id: int
    message: str
    recipient_user_id: str
    sent_by_admin_name: str
    created_at: Optional[datetime]
    is_read: bool = False

    model_config = {"from_attributes": True}

class AdminAnnouncementResponse(AnnouncementResponse):
    read_by: List[int] = []


class DirectMessageCreate(BaseModel):
    recipient_user_id: Optional[int] = None  # ignored for non-admin senders
    message: str

class DirectMessageResponse(BaseModel):
    id: int
    sender_id: int
    recipient_id: int
    message: str
    timestamp: Optional[datetime]
    read: bool
    is_reply: bool

    model_config = {"from_attributes": True}

class UnreadCountResponse(BaseModel):
    unread: int
