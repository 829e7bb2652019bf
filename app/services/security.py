# 인증 관련 로직
# - 비밀번호 해시/검증, JWT 생성/검증, 인증코드 생성
# 실제 라우팅은 app/routers/auth.py, 인증 의존성은 app/deps.py 에서 이루어지고, 이 파일은 로직만 담당함.
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from app.config import settings
from app.models.user import Role

CODE_MIN = 100000
CODE_MAX = 999999


class Principal(BaseModel):
    # 토큰에서 복원한 요청자 정보
    id: str
    email: str
    role: Role


# ---------- Password ----------
def hash_password(raw: str) -> str:
    # 평문 비밀번호를 bcrypt 로 해시 (cost 는 설정값, 기본 10)
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(raw.encode("utf-8"), salt).decode("utf-8")

def verify_password(raw: str, hashed: Optional[str]) -> bool:
    # OAuth 전용 계정은 해시가 없으므로 항상 불일치
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(raw.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False

# ---------- JWT ----------
def create_access_token(user_id: str, email: str, role: Role, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {
        "sub": user_id,  # 사용자 식별자
        "email": email,
        "role": Role(role).value,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

def decode_token(token: str) -> Principal:
    """
    서명/만료 검증 후 Principal 반환.
    실패하면 ValueError (get_current_user 쪽에서 401로 바꿔서 응답)
    """
    try:
        claims: Dict = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise ValueError("invalid token") from e

    user_id = claims.get("sub")
    email = claims.get("email")
    role = claims.get("role")
    if not user_id or not email or role not in {r.value for r in Role}:
        raise ValueError("invalid token: missing claims")

    return Principal(id=user_id, email=email, role=Role(role))

def verify_bearer(authorization: Optional[str]) -> Principal:
    # Authorization: Bearer <access_token> 헤더에서 토큰 추출 후 검증
    if not authorization:
        raise ValueError("missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise ValueError("invalid Authorization header")

    token = parts[1].strip()
    if not token:
        raise ValueError("invalid Authorization header")

    return decode_token(token)

# ---------- 인증코드 ----------
def generate_code() -> int:
    # [100000, 999999] 균등 분포
    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)
