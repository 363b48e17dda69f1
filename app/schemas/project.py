from pydantic import BaseModel, Field, HttpUrl, field_validator
from datetime import datetime
from typing import List, Literal, Optional

ProjectStatus = Literal["Draft", "To Do", "In Progress", "Testing", "Completed"]

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    status: ProjectStatus
    link: Optional[HttpUrl] = None
    test_link: Optional[HttpUrl] = None
    document_url: Optional[HttpUrl] = None
    description: Optional[str] = None
    project_starter_id: Optional[int] = None

    @field_validator("link", "test_link", "document_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, value):
        # forms send "" for an untouched URL field
        if isinstance(value, str) and not value.strip():
            return None
        return value

class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus

class ProjectResponse(BaseModel):
    id: int
    user_id: int
    name: str
    type: str
    status: str
    link: Optional[str]
    test_link: Optional[str]
    document_url: Optional[str]
    description: Optional[str]
    project_starter_id: Optional[int]
    created_at: Optional[datetime]
    completed_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ProjectStarterCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)

class ProjectStarterResponse(BaseModel):
    id: int
    title: str
    description: str
    created_by_admin_id: Optional[int]
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}


class SuggestedResourceItem(BaseModel):
    name: str
    description: Optional[str] = None
    url: Optional[str] = None

class ProjectResourceRecommendations(BaseModel):
    suggested_tools: List[SuggestedResourceItem]
    case_studies: List[SuggestedResourceItem]
    reference_links: List[SuggestedResourceItem]
    prompt_examples: List[str]
