from pydantic import BaseModel, Field, HttpUrl, field_validator
from datetime import datetime
from typing import List, Optional, Union

class ReferenceCreate(BaseModel):
    link: HttpUrl
    title: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    tags: List[str] = []

    @field_validator("title", mode="before")
    @classmethod
    def blank_title_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value: Union[str, List[str], None]):
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [tag.strip().lower() for tag in value if tag and tag.strip()]

class ReferenceResponse(BaseModel):
    id: int
    user_id: int
    link: str
    title: str
    notes: Optional[str]
    tags: List[str]
    category: Optional[str]
    ai_suggested: bool
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}

class TitleSuggestion(BaseModel):
    title: str
