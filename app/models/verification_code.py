# app/models/verification_code.py
# 이메일 인증 / 비밀번호 재설정 코드. 용도(purpose)별로 따로 발급되고 1회용 + 만료시간 있음
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, UniqueConstraint, func

from app.db.base import Base


class CodePurpose(str, enum.Enum):
    VERIFY_EMAIL = "verify_email"
    RESET_PASSWORD = "reset_password"


class VerificationCode(Base):
    __tablename__ = "verification_codes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    purpose = Column(
        Enum(CodePurpose, name="code_purpose", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    code = Column(Integer, nullable=False)  # 100000 ~ 999999
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "purpose", name="uq_verification_codes_user_purpose"),
    )
