from pydantic import BaseModel, EmailStr, Field, constr

from app.schemas.user import UserOut

# -- Request --

# 회원가입 (일반 / 매니저 공용)
class RegisterIn(BaseModel):
    first_name: constr(strip_whitespace=True, min_length=3, max_length=30)
    last_name: constr(strip_whitespace=True, min_length=3, max_length=30)
    email: EmailStr
    password: constr(min_length=6, max_length=20)

class VerifyEmailIn(BaseModel):
    email: EmailStr
    verification_code: int = Field(..., ge=100000, le=999999, description="메일로 받은 6자리 코드")

class LoginIn(BaseModel):
    email: EmailStr
    password: constr(min_length=6, max_length=20)

class ForgotPasswordIn(BaseModel):
    email: EmailStr

class ResetPasswordIn(BaseModel):
    email: EmailStr
    verification_code: int = Field(..., ge=100000, le=999999)
    new_password: constr(min_length=6, max_length=20)

class ChangePasswordIn(BaseModel):
    current_password: constr(min_length=6, max_length=20)
    new_password: constr(min_length=6, max_length=20)


# -- Response --

class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut

class OAuthLoginOut(BaseModel):
    profile: UserOut
    access_token: str
    token_type: str = "bearer"
