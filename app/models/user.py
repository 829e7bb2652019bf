# app/models/user.py
# User 테이블(SQLAlchemy) 스키마 정의
# 역할(Role), 이메일 인증 여부, 차단 여부 등 모델 선언
import enum
import uuid

from sqlalchemy import Boolean, Column, String, DateTime, Enum, func
from sqlalchemy.orm import relationship

from app.db.base import Base


class Role(str, enum.Enum):
    USER = "User"
    MANAGER = "Manager"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(30), nullable=True)
    last_name = Column(String(30), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)  # OAuth 전용 계정은 None
    role = Column(
        Enum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )
    is_verified = Column(Boolean, nullable=False, default=False)
    is_blocked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    # 관계: 내가 만든 프로젝트 (count/목록 조회용)
    projects = relationship(
        "Project",
        back_populates="owner",
        foreign_keys="Project.owner_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User {self.email}>"
