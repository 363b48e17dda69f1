from pydantic import BaseModel, Field, HttpUrl, field_validator
from datetime import datetime
from typing import List, Literal, Optional

TaskStatus = Literal["To Do", "In Progress", "Completed", "Blocked"]

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    reference_url: Optional[HttpUrl] = None
    assigned_to_user_ids: List[int] = Field(..., min_length=1)
    due_date: Optional[datetime] = None
    status: TaskStatus = "To Do"
    project_id: Optional[int] = None

    @field_validator("reference_url", "due_date", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    reference_url: Optional[str]
    assigned_to_user_ids: List[int]
    assigned_by_user_id: Optional[int]
    project_id: Optional[int]
    status: str
    due_date: Optional[datetime]
    created_at: Optional[datetime]

    # display fields, filled from users/projects
    assigned_to_user_names: List[str] = []
    assigned_by_user_name: Optional[str] = None
    project_name: Optional[str] = None

    model_config = {"from_attributes": True}
