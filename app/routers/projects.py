# app/routers/projects.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.deps import get_db, require_roles
from app.models.user import Role
from app.schemas.common import MessageResponse
from app.schemas.project import InviteIn, ProjectCreateIn, ProjectOut, ProjectUpdateIn
from app.services.project_service import ProjectService
from app.services.security import Principal

router = APIRouter(prefix="/api/projects", tags=["projects"])

any_role = require_roles(Role.USER, Role.MANAGER)
manager_only = require_roles(Role.MANAGER)


def _out(result: dict) -> MessageResponse:
    return MessageResponse(message=result["message"], data=ProjectOut.model_validate(result["project"]))

def _out_list(message: str, projects: List) -> MessageResponse:
    return MessageResponse(message=message, data=[ProjectOut.model_validate(p) for p in projects])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    body: ProjectCreateIn,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    return _out(ProjectService.create(db, current.id, body.name, body.description))

# 내가 만든 프로젝트
@router.get("/owned", response_model=MessageResponse)
def list_owned(current: Principal = Depends(manager_only), db: Session = Depends(get_db)):
    return _out_list("Owned projects retrieved successfully", ProjectService.list_owned(db, current.id))

# 내가 초대받아 수락한 프로젝트
@router.get("/assigned", response_model=MessageResponse)
def list_assigned(current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    return _out_list("Assigned projects retrieved successfully", ProjectService.list_assigned(db, current.id))

@router.get("/{project_id}", response_model=MessageResponse)
def get_project(project_id: str, current: Principal = Depends(manager_only), db: Session = Depends(get_db)):
    return _out(ProjectService.get_by_id(db, project_id, current.id))

@router.put("/{project_id}", response_model=MessageResponse)
def update_project(
    project_id: str,
    body: ProjectUpdateIn,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    return _out(ProjectService.update(db, project_id, current.id, body.model_dump(exclude_unset=True)))

@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(project_id: str, current: Principal = Depends(manager_only), db: Session = Depends(get_db)):
    result = ProjectService.delete(db, project_id, current.id)
    return MessageResponse(message=result["message"], data=result["project"])

@router.post("/{project_id}/invite", response_model=MessageResponse)
def invite_user(
    project_id: str,
    body: InviteIn,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    return _out(ProjectService.invite(db, project_id, current.id, body.email))

@router.post("/{project_id}/accept-invite", response_model=MessageResponse)
def accept_invite(project_id: str, current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    return _out(ProjectService.accept_invite(db, project_id, current.id))
