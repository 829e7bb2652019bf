"""
프로젝트 관련 비즈니스 로직
- 프로젝트 생성 / 조회 / 수정 / 삭제 (소유자 검증 포함)
- 초대 메일 발송, 초대 수락
- 내가 만든 프로젝트 / 초대받은 프로젝트 목록
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.errors import Conflict, Forbidden, InternalError, NotFound
from app.models.project import Project
from app.models.user import User
from app.schemas.project import ProjectOut
from app.services import mail_service

logger = logging.getLogger(__name__)


def _ensure_description_free(db: Session, description: str, exclude_id: Optional[str] = None) -> None:
    q = db.query(Project.id).filter(Project.description == description)
    if exclude_id:
        q = q.filter(Project.id != exclude_id)
    if q.first():
        raise Conflict("A project with this description already exists", code="project_description_taken")


def _flush(db: Session) -> None:
    # 사전 검사를 통과해도 동시 요청이면 unique 제약에 걸릴 수 있음
    try:
        db.flush()
    except IntegrityError as e:
        raise Conflict("A project with this description already exists", code="project_description_taken") from e


class ProjectService:
    """프로젝트 관련 비즈니스 로직"""

    @staticmethod
    def get_owned_project(db: Session, project_id: str, user_id: str, for_update: bool = False) -> Project:
        """
        프로젝트 조회 (소유권 검증 포함)

        Raises:
            NotFound (없음), Forbidden (소유자 아님)
        """
        q = db.query(Project).filter(Project.id == project_id)
        if for_update:
            q = q.with_for_update()
        project = q.first()

        if not project:
            raise NotFound("Project not found", code="project_not_found")

        if project.owner_id != user_id:
            raise Forbidden("You are not authorized to access this project")

        return project

    @staticmethod
    def create(db: Session, owner_id: str, name: str, description: str) -> Dict:
        owner = db.get(User, owner_id)
        if not owner:
            raise NotFound("User not found", code="user_not_found")

        _ensure_description_free(db, description)

        project = Project(name=name, description=description, owner_id=owner.id)
        db.add(project)
        _flush(db)

        logger.info("[PROJECT] created project_id=%s owner_id=%s", project.id, owner.id)
        return {"message": "Project created successfully", "project": project}

    @staticmethod
    def get_by_id(db: Session, project_id: str, user_id: str) -> Dict:
        project = ProjectService.get_owned_project(db, project_id, user_id)
        return {"message": "Project retrieved successfully", "project": project}

    @staticmethod
    def update(db: Session, project_id: str, user_id: str, fields: Dict) -> Dict:
        project = ProjectService.get_owned_project(db, project_id, user_id, for_update=True)

        # 보낸 필드만 덮어쓰기 (안 보낸 필드는 유지)
        if fields.get("description") is not None:
            _ensure_description_free(db, fields["description"], exclude_id=project.id)
            project.description = fields["description"]
        if fields.get("name") is not None:
            project.name = fields["name"]

        _flush(db)
        return {"message": "Project updated successfully", "project": project}

    @staticmethod
    def delete(db: Session, project_id: str, user_id: str) -> Dict:
        project = ProjectService.get_owned_project(db, project_id, user_id, for_update=True)

        # 삭제 전 스냅샷
        snapshot = ProjectOut.model_validate(project)
        db.delete(project)
        db.flush()

        logger.info("[PROJECT] deleted project_id=%s", project_id)
        return {"message": "Project deleted successfully", "project": snapshot}

    @staticmethod
    def invite(db: Session, project_id: str, user_id: str, invitee_email: str) -> Dict:
        project = ProjectService.get_owned_project(db, project_id, user_id, for_update=True)

        invitee = db.query(User).filter(User.email == invitee_email).first()
        if not invitee:
            raise NotFound("User not found", code="user_not_found")

        # 초대 기록만 남기고 슬롯은 수락 시점에 채운다
        project.invited_user_id = invitee.id
        accept_url = f"{settings.public_base_url.rstrip('/')}/api/projects/{project.id}/accept-invite"

        try:
            db.flush()
            mail_service.send_project_invite(invitee.email, project.name, accept_url)
        except Exception:
            logger.exception("[PROJECT] invite mail failed project_id=%s", project.id)
            raise InternalError("Failed to send invitation", code="invite_failed")

        logger.info("[PROJECT] invited project_id=%s invitee_id=%s", project.id, invitee.id)
        return {"message": "Invitation sent successfully", "project": project}

    @staticmethod
    def accept_invite(db: Session, project_id: str, user_id: str) -> Dict:
        project = db.query(Project).filter(Project.id == project_id).with_for_update().first()
        if not project:
            raise NotFound("Project not found", code="project_not_found")

        user = db.get(User, user_id)
        if not user:
            raise NotFound("User not found", code="user_not_found")

        # 초대받은 사용자 본인만 수락 가능
        if project.invited_user_id != user.id:
            raise Forbidden("No invitation for this user", code="invite_not_found")

        project.invite_id = user.id
        db.flush()

        logger.info("[PROJECT] invite accepted project_id=%s user_id=%s", project.id, user.id)
        return {"message": "Invitation accepted successfully", "project": project}

    @staticmethod
    def list_owned(db: Session, owner_id: str) -> List[Project]:
        projects = (
            db.query(Project)
            .options(joinedload(Project.invite))
            .filter(Project.owner_id == owner_id)
            .order_by(Project.created_at.desc())
            .all()
        )
        if not projects:
            raise NotFound("No projects found for this user", code="projects_not_found")
        return projects

    @staticmethod
    def list_assigned(db: Session, invitee_id: str) -> List[Project]:
        projects = (
            db.query(Project)
            .filter(Project.invite_id == invitee_id)
            .order_by(Project.created_at.desc())
            .all()
        )
        if not projects:
            raise NotFound("No assigned projects found for this user", code="projects_not_found")
        return projects
