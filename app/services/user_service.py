"""
사용자 관련 비즈니스 로직
- 내 정보 조회 / 프로필 수정
- 사용자 차단 (매니저)
- 매니저별 프로젝트 수, 초대 멤버 목록
"""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session, joinedload

from app.errors import Forbidden, NotFound
from app.models.project import Project
from app.models.user import User

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def get_by_id(db: Session, target_id: str, user_id: str) -> User:
        user = db.get(User, target_id)
        if not user:
            raise NotFound(f"User with ID {target_id} not found", code="user_not_found")

        if user.id != user_id:
            raise Forbidden("You are not authorized to access this user")

        return user

    @staticmethod
    def update_profile(db: Session, user_id: str, fields: Dict) -> Dict:
        user = db.get(User, user_id)
        if not user:
            raise NotFound(f"User with ID {user_id} not found", code="user_not_found")

        if fields.get("first_name"):
            user.first_name = fields["first_name"]
        if fields.get("last_name"):
            user.last_name = fields["last_name"]
        db.flush()

        return {"message": "Profile updated successfully", "user": user}

    @staticmethod
    def block(db: Session, target_id: str) -> Dict:
        user = db.get(User, target_id)
        if not user:
            raise NotFound(f"User with ID {target_id} not found", code="user_not_found")

        user.is_blocked = True
        db.flush()

        logger.info("[USER] blocked user_id=%s", user.id)
        return {"message": "User blocked successfully", "user": user}

    @staticmethod
    def _owned_projects(db: Session, manager_id: str) -> List[Project]:
        projects = (
            db.query(Project)
            .options(joinedload(Project.invite))
            .filter(Project.owner_id == manager_id)
            .all()
        )
        if not projects:
            raise NotFound(f"No projects found for user with ID {manager_id}", code="projects_not_found")
        return projects

    @staticmethod
    def project_count(db: Session, manager_id: str) -> int:
        return len(UserService._owned_projects(db, manager_id))

    @staticmethod
    def members_by_manager(db: Session, manager_id: str) -> List[Project]:
        return UserService._owned_projects(db, manager_id)
