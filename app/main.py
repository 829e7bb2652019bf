# app/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db.base import init_db

# ------------------------
# 라우터 import
# ------------------------
from app.routers import auth as auth_router
from app.routers import users as users_router
from app.routers import projects as projects_router
from app.routers import tasks as tasks_router

# ------------------------
# 로깅 설정
# ------------------------
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (env=%s)", settings.app_name, settings.app_env)
    if settings.auto_create_tables:
        init_db()
        logger.info("Database tables ensured")
    yield
    logger.info("Shutting down...")


# ------------------------
# 1) FastAPI 앱 생성
# ------------------------
app = FastAPI(title=settings.app_name, lifespan=lifespan)

# ------------------------
# 2) CORS 미들웨어 추가
#    - 개발용 전체 허용
#    - 실제 운영 시 도메인 제한 필요
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],      # 개발용 전체 허용
    allow_credentials=False,  # 쿠키 안 쓰면 False
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------
# 3) 라우터 등록
# ------------------------
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(projects_router.router)
app.include_router(tasks_router.router)

# ------------------------
# 4) Root 엔드포인트
#    - health check 용
# ------------------------
@app.get("/")
def root():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
