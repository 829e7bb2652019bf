# app/errors.py
# 서비스 계층에서 던지는 실패 타입.
# 전부 HTTPException 이라 라우터에서 따로 변환할 필요 없이 그대로 응답된다.
# detail 모양은 {"message": <코드>, "detail": <설명>} 로 통일.
from typing import Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "error"

    def __init__(self, detail: Optional[str] = None, code: Optional[str] = None, headers=None):
        body = {"message": code or self.code}
        if detail:
            body["detail"] = detail
        super().__init__(status_code=self.status_code, detail=body, headers=headers)


class Unauthenticated(AppError):
    """토큰 없음 / 위조 / 만료"""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"

    def __init__(self, detail: Optional[str] = None, code: Optional[str] = None):
        super().__init__(detail, code, headers={"WWW-Authenticate": "Bearer"})


class Unauthorized(AppError):
    """이메일/비밀번호/인증코드 불일치"""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
