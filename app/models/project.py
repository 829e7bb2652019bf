# app/models/project.py
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
import uuid

from app.db.base import Base


class Project(Base):

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, unique=True)  # 전체 프로젝트에서 유일

    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # 초대: 메일 발송 시 invited_user_id 기록, 수락 시 invite_id 채움 (슬롯 1개)
    invited_user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    invite_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    # 관계
    owner = relationship("User", back_populates="projects", foreign_keys=[owner_id])
    invite = relationship("User", foreign_keys=[invite_id])
    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Project {self.name}>"
