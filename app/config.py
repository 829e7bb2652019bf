# app/config.py


from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 파일 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"
    app_name: str = "Task Board API"
    log_level: str = "INFO"
    port: int = 3000

    # DB
    database_url: str = "sqlite:///./taskboard.db"   # DATABASE_URL
    auto_create_tables: bool = True                 # 기동 시 create_all 실행 여부

    # JWT
    jwt_secret: str = "change-me"                    # JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # 비밀번호 / 인증코드
    bcrypt_rounds: int = 10
    verification_code_ttl_minutes: int = 30

    # 메일 (console | smtp)
    mail_backend: str = "console"
    mail_host: str | None = None
    mail_port: int = 587
    mail_user: str | None = None
    mail_password: str | None = None
    mail_from: str | None = None

    # OAuth
    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_callback_url: str | None = None
    github_client_id: str | None = None
    github_client_secret: str | None = None
    github_callback_url: str | None = None

    # 초대 링크 생성용 공개 URL
    public_base_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("DATABASE_URL:", settings.database_url)
    print("MAIL_BACKEND:", settings.mail_backend)
