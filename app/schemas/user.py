from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

PIN_PATTERN = r"^\d{4}$"

class PinLogin(BaseModel):
    pin: str = Field(..., pattern=PIN_PATTERN)

class PinChange(BaseModel):
    new_pin: str = Field(..., pattern=PIN_PATTERN)

class PinVerifyResponse(BaseModel):
    verified: bool

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    pin: str = Field(..., pattern=PIN_PATTERN)
    avatar_url: Optional[str] = None

class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = None

class UserResponse(BaseModel):
    id: int
    name: str
    email: Optional[str]
    pin_first_two: str
    is_admin: bool
    avatar_url: Optional[str]
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}

class AdminUserResponse(UserResponse):
    pin: str

class GeneratedPinResponse(BaseModel):
    pin: str

class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse
