"""
공용 DB 베이스/세션 팩토리.
SessionLocal, engine, Base 정의는 app.db.session 한 곳에서 관리한다.
"""
from app.db.session import engine, SessionLocal, Base

__all__ = ["engine", "SessionLocal", "Base", "init_db"]


def init_db() -> None:
    # 모델 모듈을 모두 import 해야 create_all 이 테이블을 인식한다
    from app.models import user, project, task, verification_code  # noqa: F401

    Base.metadata.create_all(bind=engine)
