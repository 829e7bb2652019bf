# app/routers/tasks.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.deps import get_db, require_roles
from app.models.user import Role
from app.schemas.common import MessageResponse
from app.schemas.task import (
    AssignTaskIn,
    ChangeStatusIn,
    TaskCountOut,
    TaskCreateIn,
    TaskOut,
    TaskUpdateIn,
)
from app.services.security import Principal
from app.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

any_role = require_roles(Role.USER, Role.MANAGER)
manager_only = require_roles(Role.MANAGER)
user_only = require_roles(Role.USER)


def _out(result: dict) -> MessageResponse:
    return MessageResponse(message=result["message"], data=TaskOut.model_validate(result["task"]))


# ---------- 프로젝트 단위 ----------

@router.post("/projects/{project_id}", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    project_id: str,
    body: TaskCreateIn,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    return _out(TaskService.create(db, body.model_dump(), current.id, project_id))

@router.get("/projects/{project_id}", response_model=MessageResponse)
def get_all_tasks(project_id: str, current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    tasks = TaskService.get_all(db, project_id, current.id)
    return MessageResponse(message="All tasks", data=[TaskOut.model_validate(t) for t in tasks])

@router.get("/projects/{project_id}/assigned", response_model=MessageResponse)
def get_assigned_tasks(project_id: str, current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    tasks = TaskService.get_assigned(db, project_id, current.id)
    return MessageResponse(
        message="Assigned tasks retrieved successfully",
        data=[TaskOut.model_validate(t) for t in tasks],
    )

@router.get("/projects/{project_id}/count", response_model=MessageResponse)
def get_task_count(project_id: str, current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    count = TaskService.get_count(db, project_id, current.id)
    return MessageResponse(message="Task count retrieved successfully", data=TaskCountOut(task_count=count))

@router.post("/projects/{project_id}/{task_id}/assign", response_model=MessageResponse)
def assign_task(
    project_id: str,
    task_id: str,
    body: AssignTaskIn,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    return _out(TaskService.assign(db, task_id, current.id, body.email, project_id))

# ---------- 태스크 단위 ----------

@router.get("/{task_id}", response_model=MessageResponse)
def get_task(task_id: str, current: Principal = Depends(any_role), db: Session = Depends(get_db)):
    task = TaskService.get_by_id(db, task_id, current.id)
    return MessageResponse(message="Task retrieved successfully", data=TaskOut.model_validate(task))

@router.patch("/{task_id}", response_model=MessageResponse)
def update_task(
    task_id: str,
    body: TaskUpdateIn,
    current: Principal = Depends(manager_only),
    db: Session = Depends(get_db),
):
    return _out(TaskService.update(db, task_id, current.id, body.model_dump(exclude_unset=True)))

@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(task_id: str, current: Principal = Depends(manager_only), db: Session = Depends(get_db)):
    return TaskService.delete(db, task_id, current.id)

# 담당자만 상태 변경
@router.patch("/{task_id}/status", response_model=MessageResponse)
def change_status(
    task_id: str,
    body: ChangeStatusIn,
    current: Principal = Depends(user_only),
    db: Session = Depends(get_db),
):
    return _out(TaskService.change_status(db, task_id, current.id, body.status))
