from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.user import UserOut

# -- Request --

class ProjectCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="프로젝트명")
    description: str = Field(..., min_length=1, description="설명 (전체 프로젝트에서 유일)")

# 부분 수정: 안 보낸 필드는 기존 값 유지
class ProjectUpdateIn(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)

class InviteIn(BaseModel):
    email: EmailStr


# -- Response --

class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    description: str
    owner_id: str
    invite: Optional[UserOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
