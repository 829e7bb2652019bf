from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.task import TaskStatus
from app.schemas.user import UserOut

# -- Request --

class TaskCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="태스크명")
    description: str = Field(..., min_length=1, description="태스크 설명")

class TaskUpdateIn(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[TaskStatus] = None

class AssignTaskIn(BaseModel):
    email: EmailStr

class ChangeStatusIn(BaseModel):
    status: TaskStatus


# -- Response --

class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    description: str
    status: TaskStatus
    project_id: str
    assigned_user: Optional[UserOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class TaskCountOut(BaseModel):
    task_count: int
