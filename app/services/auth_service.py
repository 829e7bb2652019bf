"""
인증 관련 비즈니스 로직
- 회원가입 (일반 / 매니저) + 이메일 인증코드 발송
- 이메일 인증, 로그인
- 비밀번호 찾기 / 재설정 / 변경
- OAuth(google, github) 콜백 처리
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import Conflict, InternalError, Unauthorized
from app.models.user import Role, User
from app.models.verification_code import CodePurpose, VerificationCode
from app.schemas.auth import RegisterIn
from app.services import mail_service
from app.services.security import (
    create_access_token,
    generate_code,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


# 용도별 인증코드 발급. 같은 용도의 이전 코드는 덮어쓴다
def _issue_code(db: Session, user: User, purpose: CodePurpose) -> int:
    code = generate_code()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.verification_code_ttl_minutes)

    row = (
        db.query(VerificationCode)
        .filter(VerificationCode.user_id == user.id, VerificationCode.purpose == purpose)
        .first()
    )
    if row is None:
        row = VerificationCode(user_id=user.id, purpose=purpose, code=code, expires_at=expires_at)
        db.add(row)
    else:
        row.code = code
        row.expires_at = expires_at
    db.flush()
    return code


# 이메일 + 코드 + 용도가 모두 맞고 만료되지 않은 코드만 소비 (1회용)
def _consume_code(db: Session, email: str, code: int, purpose: CodePurpose) -> Optional[User]:
    row = (
        db.query(VerificationCode)
        .join(User, User.id == VerificationCode.user_id)
        .filter(
            User.email == email,
            VerificationCode.purpose == purpose,
            VerificationCode.code == code,
            VerificationCode.expires_at > datetime.now(timezone.utc),
        )
        .with_for_update()
        .first()
    )
    if row is None:
        return None

    user = db.get(User, row.user_id)
    db.delete(row)
    return user


class AuthService:
    """인증 관련 비즈니스 로직"""

    @staticmethod
    def _register(db: Session, body: RegisterIn, role: Role) -> User:
        try:
            user = User(
                first_name=body.first_name,
                last_name=body.last_name,
                email=body.email,
                password_hash=hash_password(body.password),
                role=role,
                is_verified=False,
            )
            db.add(user)
            db.flush()

            code = _issue_code(db, user, CodePurpose.VERIFY_EMAIL)
            mail_service.send_verification_code(user.email, code)
        except IntegrityError as e:
            # 중복 검사 이후 같은 이메일이 먼저 저장된 경우
            logger.warning("[AUTH] duplicate email on register email=%s", body.email)
            raise Conflict("User already exists", code="user_exists") from e
        except Exception:
            logger.exception("[AUTH] register failed email=%s role=%s", body.email, role.value)
            raise InternalError(f"Failed to register {role.value.lower()}", code="registration_failed")

        logger.info("[AUTH] registered user_id=%s role=%s", user.id, role.value)
        return user

    @staticmethod
    def register(db: Session, body: RegisterIn) -> Dict:
        AuthService._register(db, body, Role.USER)
        return {"message": "User registered successfully, please check your email for verification"}

    @staticmethod
    def register_manager(db: Session, body: RegisterIn) -> Dict:
        AuthService._register(db, body, Role.MANAGER)
        return {"message": "Manager registered successfully, please check your email for verification"}

    @staticmethod
    def verify_email(db: Session, email: str, code: int) -> Dict:
        user = _consume_code(db, email, code, CodePurpose.VERIFY_EMAIL)
        if user is None:
            raise Unauthorized("Invalid email or verification code")

        user.is_verified = True
        return {"message": "Your email has been verified! You may now log in to your account."}

    @staticmethod
    def login(db: Session, email: str, password: str) -> Dict:
        user = db.query(User).filter(User.email == email).first()

        if not user or not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid email or password")

        if not user.is_verified:
            raise Unauthorized("Please verify your email before logging in.", code="email_not_verified")

        token = create_access_token(user.id, user.email, user.role)
        logger.info("[AUTH] login user_id=%s", user.id)
        return {"message": "Login successful", "access_token": token, "user": user}

    @staticmethod
    def forgot_password(db: Session, email: str) -> Dict:
        user = db.query(User).filter(User.email == email).first()
        if not user:
            raise Unauthorized("Invalid email")

        try:
            code = _issue_code(db, user, CodePurpose.RESET_PASSWORD)
            mail_service.send_reset_code(user.email, code)
        except Exception:
            logger.exception("[AUTH] forgot_password failed user_id=%s", user.id)
            raise InternalError("Failed to process password reset request", code="reset_request_failed")

        return {
            "message": "A verification code has been sent to your email address. "
                       "Please check your email to proceed with password reset."
        }

    @staticmethod
    def reset_password(db: Session, email: str, code: int, new_password: str) -> Dict:
        user = _consume_code(db, email, code, CodePurpose.RESET_PASSWORD)
        if user is None:
            raise Unauthorized("Invalid email or code")

        user.password_hash = hash_password(new_password)
        return {"message": "Password reset successfully"}

    @staticmethod
    def change_password(db: Session, user_id: str, current_password: str, new_password: str) -> Dict:
        user = db.get(User, user_id)
        if not user:
            raise Unauthorized("User not found")

        if not verify_password(current_password, user.password_hash):
            raise Unauthorized("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        return {"message": "Password changed successfully"}

    @staticmethod
    def oauth_callback(db: Session, provider: str, profile: Dict) -> Dict:
        """
        OAuth 로그인 콜백

        Args:
            provider: "google" | "github"
            profile: {"email", "first_name", "last_name"}

        Returns:
            {"profile": User, "access_token": str}
        """
        email = profile.get("email")
        if not email:
            raise Unauthorized(f"{provider} account has no email", code="oauth_no_email")

        user = db.query(User).filter(User.email == email).first()
        if user is None:
            try:
                user = User(
                    email=email,
                    first_name=profile.get("first_name"),
                    last_name=profile.get("last_name"),
                    role=Role.USER,
                    is_verified=True,  # OAuth 가입은 인증 완료 상태
                )
                db.add(user)
                db.flush()
            except Exception:
                logger.exception("[AUTH] oauth user creation failed provider=%s", provider)
                raise InternalError("Failed to create user", code="oauth_failed")
            logger.info("[AUTH] oauth user created provider=%s user_id=%s", provider, user.id)

        token = create_access_token(user.id, user.email, user.role)
        return {"message": f"{provider} login successful", "profile": user, "access_token": token}
