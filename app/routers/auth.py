# app/routers/auth.py
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.deps import ensure_email_available, get_current_user, get_db
from app.models.user import User
from app.schemas.auth import (
    ChangePasswordIn,
    ForgotPasswordIn,
    LoginIn,
    LoginOut,
    OAuthLoginOut,
    RegisterIn,
    ResetPasswordIn,
    VerifyEmailIn,
)
from app.schemas.common import MessageResponse
from app.schemas.user import UserOut
from app.services import oauth_service
from app.services.auth_service import AuthService
from app.services.security import Principal

router = APIRouter(prefix="/api/auth", tags=["auth"])


# ---------- 회원가입 / 인증 ----------

@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterIn = Depends(ensure_email_available), db: Session = Depends(get_db)):
    return AuthService.register(db, body)

@router.post("/register-manager", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register_manager(body: RegisterIn = Depends(ensure_email_available), db: Session = Depends(get_db)):
    return AuthService.register_manager(db, body)

@router.post("/verify", response_model=MessageResponse)
def verify(body: VerifyEmailIn, db: Session = Depends(get_db)):
    return AuthService.verify_email(db, body.email, body.verification_code)

@router.post("/login", response_model=MessageResponse)
def login(body: LoginIn, db: Session = Depends(get_db)):
    result = AuthService.login(db, body.email, body.password)
    return MessageResponse(
        message=result["message"],
        data=LoginOut(access_token=result["access_token"], user=UserOut.model_validate(result["user"])),
    )

# ---------- 비밀번호 ----------

@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(body: ForgotPasswordIn, db: Session = Depends(get_db)):
    return AuthService.forgot_password(db, body.email)

@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordIn, db: Session = Depends(get_db)):
    return AuthService.reset_password(db, body.email, body.verification_code, body.new_password)

@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordIn,
    current: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AuthService.change_password(db, current.id, body.current_password, body.new_password)

@router.get("/me", response_model=MessageResponse)
def me(current: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    현재 로그인한 사용자 정보 조회.
    - 인증: Authorization: Bearer <token>
    """
    user = db.get(User, current.id)
    return MessageResponse(message="Current user", data=UserOut.model_validate(user))

# ---------- OAuth (google / github) ----------

@router.get("/{provider}/login", include_in_schema=True)
def oauth_login(provider: str):
    return RedirectResponse(oauth_service.authorization_url(provider))

@router.get("/{provider}/callback", response_model=MessageResponse)
def oauth_callback(provider: str, code: str = Query(...), db: Session = Depends(get_db)):
    profile = oauth_service.fetch_profile(provider, code)
    result = AuthService.oauth_callback(db, provider, profile)
    return MessageResponse(
        message=result["message"],
        data=OAuthLoginOut(profile=UserOut.model_validate(result["profile"]), access_token=result["access_token"]),
    )
