"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers local signup, login and token issuance.
"""

from pydantic import BaseModel, EmailStr, Field

from servicehub.schemas.user import UserResponse


class SignupRequest(BaseModel):
    """회원가입 요청 스키마.

    Local signup request schema. The role is chosen later during onboarding.

    Attributes:
        email: 이메일 (Login email, unique)
        password: 비밀번호 (Plain text, at least 6 chars, bcrypt-hashed on server)
        first_name: 이름 (First name, optional)
        last_name: 성 (Last name, optional)
    """

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6)
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Attributes:
        email: 이메일 (Login email)
        password: 비밀번호 (Plain text, verified against bcrypt hash)
    """

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful signup or login.

    Attributes:
        access_token: JWT 액세스 토큰 (Bearer access token)
        token_type: 토큰 유형 (Always "bearer")
        user: 로그인한 사용자 (Authenticated user)
    """

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
