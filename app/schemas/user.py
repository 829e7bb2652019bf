from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import Role

# -- Request --

# 프로필 수정 (이름만, 역할/이메일은 변경 불가)
class ProfileUpdateIn(BaseModel):
    first_name: Optional[str] = Field(None, min_length=3, max_length=30, description="이름")
    last_name: Optional[str] = Field(None, min_length=3, max_length=30, description="성")


# -- Response --

# 비밀번호 해시는 절대 내보내지 않음
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    role: Role
    is_verified: bool
    is_blocked: bool
    created_at: Optional[datetime] = None


class UserCountOut(BaseModel):
    project_count: int


class ProjectMembersOut(BaseModel):
    project_id: str
    project_name: str
    invite: Optional[UserOut] = None


class ManagerMembersOut(BaseModel):
    projects: List[ProjectMembersOut]
