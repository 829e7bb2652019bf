# app/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.deps import get_db, require_roles
from app.models.user import Role
from app.schemas.common import MessageResponse
from app.schemas.user import (
    ManagerMembersOut,
    ProfileUpdateIn,
    ProjectMembersOut,
    UserCountOut,
    UserOut,
)
from app.services.security import Principal
from app.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])

any_role = require_roles(Role.USER, Role.MANAGER)
manager_only = require_roles(Role.MANAGER)


# 매니저: 내가 만든 프로젝트 수
# /{user_id} 보다 먼저 등록해야 함
@router.get("/count", response_model=MessageResponse)
def get_user_count(current: Principal = Depends(manager_only), db: Session = Depends(get_db)):
    count = UserService.project_count(db, current.id)
    return MessageResponse(message="Project count retrieved successfully", data=UserCountOut(project_count=count))

# 매니저별 프로젝트 + 초대 멤버
@router.get("/manager/{manager_id}", response_model=MessageResponse)
def get_users_by_manager(
    manager_id: str,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    projects = UserService.members_by_manager(db, manager_id)
    data = ManagerMembersOut(
        projects=[
            ProjectMembersOut(
                project_id=p.id,
                project_name=p.name,
                invite=UserOut.model_validate(p.invite) if p.invite else None,
            )
            for p in projects
        ]
    )
    return MessageResponse(message="Members retrieved successfully", data=data)

@router.get("/{user_id}", response_model=MessageResponse)
def get_user_by_id(user_id: str, current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    user = UserService.get_by_id(db, user_id, current.id)
    return MessageResponse(message="User retrieved successfully", data=UserOut.model_validate(user))

@router.patch("", response_model=MessageResponse)
def update_profile(
    body: ProfileUpdateIn,
    current: Principal = Depends(any_role),
    db: Session = Depends(get_db),
):
    result = UserService.update_profile(db, current.id, body.model_dump(exclude_unset=True))
    return MessageResponse(message=result["message"], data=UserOut.model_validate(result["user"]))

@router.put("/blocked/{user_id}", response_model=MessageResponse)
def block_user(user_id: str, current: Principal = Depends(manager_only), db: Session = Depends(get_db)):
    result = UserService.block(db, user_id)
    return MessageResponse(message=result["message"], data=UserOut.model_validate(result["user"]))
