from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

class ApiKeyCreate(BaseModel):
    key_name: str = Field(..., min_length=1)
    key_value: str = Field(..., min_length=1)
    tag: Optional[str] = None
    notes: Optional[str] = None
    expires_at: Optional[datetime] = None

    @field_validator("expires_at", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

class ApiKeyResponse(BaseModel):
    id: int
    user_id: int
    key_name: str
    key_value: str
    tag: Optional[str]
    notes: Optional[str]
    expires_at: Optional[datetime]
    api_type: Optional[str]
    integration_guide: Optional[str]
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}

class ApiIntegrationSuggestion(BaseModel):
    api_type: str
    integration_guide: str
