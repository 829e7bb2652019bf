# app/deps.py
import logging

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.db.base import SessionLocal
from app.errors import Conflict, Forbidden, Unauthenticated
from app.models.user import Role, User
from app.schemas.auth import RegisterIn
from app.services.security import Principal, verify_bearer

logger = logging.getLogger(__name__)

# ----------------------------
# DB 세션
# 요청 하나 = 트랜잭션 하나. 읽기-검사-쓰기가 한 번에 커밋/롤백된다
# ----------------------------
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()  # commit 포함
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

# ----------------------------
# 현재 사용자 가져오기
# ----------------------------
def get_current_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> Principal:
    try:
        principal = verify_bearer(authorization)
    except ValueError as e:
        logger.debug("[AUTH] verify_bearer failed: %s", e)
        raise Unauthenticated("Valid access token required")

    user = db.get(User, principal.id)
    if user is None:
        raise Unauthenticated("User no longer exists")
    if user.is_blocked:
        raise Forbidden("Account is blocked", code="account_blocked")

    return principal

# ----------------------------
# 역할 검사
# 라우트마다 허용 역할을 고정으로 선언: Depends(require_roles(Role.MANAGER))
# ----------------------------
def require_roles(*roles: Role):
    allowed = frozenset(roles)

    def _check(principal: Principal = Depends(get_current_user)) -> Principal:
        if principal.role not in allowed:
            raise Forbidden("Access denied")
        return principal

    return _check

# ----------------------------
# 회원가입 전 이메일 중복 검사
# ----------------------------
def ensure_email_available(body: RegisterIn, db: Session = Depends(get_db)) -> RegisterIn:
    exists = db.query(User.id).filter(User.email == body.email).first()
    if exists:
        raise Conflict("User already exists", code="user_exists")
    return body
