"""
태스크 관련 비즈니스 로직
- 프로젝트 단위 태스크 생성 / 수정 / 삭제 (프로젝트 소유자만)
- 초대된 멤버에게 태스크 배정 + 알림 메일
- 배정된 태스크 조회 / 개수, 상태 변경 (담당자만)
"""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session, joinedload

from app.errors import Forbidden, InternalError, NotFound
from app.models.project import Project
from app.models.task import Task, TaskStatus
from app.models.user import User
from app.services import mail_service
from app.services.project_service import ProjectService

logger = logging.getLogger(__name__)


def _load_task(db: Session, task_id: str, for_update: bool = False) -> Task:
    q = (
        db.query(Task)
        .options(joinedload(Task.project), joinedload(Task.assigned_user))
        .filter(Task.id == task_id)
    )
    if for_update:
        q = q.with_for_update(of=Task)
    task = q.first()
    if not task:
        raise NotFound("Task not found", code="task_not_found")
    return task


def _load_owned_task(db: Session, task_id: str, user_id: str, action: str, for_update: bool = True) -> Task:
    # 태스크의 프로젝트 소유자만 통과
    task = _load_task(db, task_id, for_update=for_update)
    if task.project.owner_id != user_id:
        raise Forbidden(f"You are not authorized to {action} this task")
    return task


class TaskService:
    """태스크 관련 비즈니스 로직"""

    @staticmethod
    def create(db: Session, fields: Dict, user_id: str, project_id: str) -> Dict:
        project = ProjectService.get_owned_project(db, project_id, user_id)

        task = Task(
            name=fields["name"],
            description=fields["description"],
            status=TaskStatus.TO_DO,
            project_id=project.id,
        )
        db.add(task)
        db.flush()

        logger.info("[TASK] created task_id=%s project_id=%s", task.id, project.id)
        return {"message": "Task created successfully", "task": task}

    @staticmethod
    def update(db: Session, task_id: str, user_id: str, fields: Dict) -> Dict:
        task = _load_owned_task(db, task_id, user_id, "update")

        # 보낸 필드만 병합
        for key in ("name", "description", "status"):
            if fields.get(key) is not None:
                setattr(task, key, fields[key])
        db.flush()

        return {"message": "Task updated successfully", "task": task}

    @staticmethod
    def delete(db: Session, task_id: str, user_id: str) -> Dict:
        task = _load_owned_task(db, task_id, user_id, "delete")
        db.delete(task)
        db.flush()

        logger.info("[TASK] deleted task_id=%s", task_id)
        return {"message": "Task deleted successfully"}

    @staticmethod
    def assign(db: Session, task_id: str, user_id: str, assignee_email: str, project_id: str) -> Dict:
        """
        태스크 배정

        담당자는 해당 프로젝트의 초대 슬롯에 있는 사용자여야 한다.
        메일 발송이 실패하면 배정도 롤백된다 (부분 성공 없음).

        Raises:
            NotFound: 태스크/사용자 없음, 또는 그 사용자가 프로젝트 초대 멤버가 아님
            Forbidden: 프로젝트 소유자가 아님
            InternalError: 알림 메일 실패
        """
        task = _load_owned_task(db, task_id, user_id, "assign")

        assignee = db.query(User).filter(User.email == assignee_email).first()
        if not assignee:
            raise NotFound("User not found", code="user_not_found")

        project = (
            db.query(Project)
            .filter(Project.id == project_id, Project.invite_id == assignee.id)
            .first()
        )
        if not project or task.project_id != project.id:
            raise NotFound("Project not found or no invite for this email", code="invite_not_found")

        task.assigned_user_id = assignee.id
        try:
            db.flush()
            mail_service.send_task_assigned(assignee.email, assignee.first_name, task.name, project.name)
        except Exception:
            logger.exception("[TASK] assign failed task_id=%s assignee_id=%s", task.id, assignee.id)
            raise InternalError("Failed to assign task", code="assign_failed")

        db.refresh(task)
        logger.info("[TASK] assigned task_id=%s assignee_id=%s", task.id, assignee.id)
        return {"message": "Task assigned successfully and email sent", "task": task}

    @staticmethod
    def get_assigned(db: Session, project_id: str, user_id: str) -> List[Task]:
        tasks = (
            db.query(Task)
            .options(joinedload(Task.assigned_user))
            .filter(Task.project_id == project_id, Task.assigned_user_id == user_id)
            .all()
        )
        if not tasks:
            raise NotFound("No tasks assigned to the current user.", code="tasks_not_found")
        return tasks

    @staticmethod
    def get_all(db: Session, project_id: str, user_id: str) -> List[Task]:
        ProjectService.get_owned_project(db, project_id, user_id)
        return (
            db.query(Task)
            .options(joinedload(Task.assigned_user))
            .filter(Task.project_id == project_id)
            .all()
        )

    @staticmethod
    def get_by_id(db: Session, task_id: str, user_id: str) -> Task:
        task = _load_task(db, task_id)

        # 프로젝트 소유자 또는 담당자만 조회 가능
        if task.project.owner_id != user_id and task.assigned_user_id != user_id:
            raise Forbidden("You are not authorized to view this task.")

        return task

    @staticmethod
    def get_count(db: Session, project_id: str, user_id: str) -> int:
        count = (
            db.query(Task)
            .filter(Task.project_id == project_id, Task.assigned_user_id == user_id)
            .count()
        )
        if count == 0:
            raise NotFound("No tasks assigned to the current user.", code="tasks_not_found")
        return count

    @staticmethod
    def change_status(db: Session, task_id: str, user_id: str, status: TaskStatus) -> Dict:
        task = _load_task(db, task_id, for_update=True)

        # 담당자만 변경 가능 (프로젝트 소유자도 불가). 상태 전이 순서는 제한 없음
        if task.assigned_user_id is None or task.assigned_user_id != user_id:
            raise Forbidden("You are not authorized to change the status of this task")

        task.status = status
        db.flush()

        logger.info("[TASK] status task_id=%s status=%s", task.id, status.value)
        return {"message": "Task status updated successfully", "task": task}
