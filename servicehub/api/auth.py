"""인증 라우터 — 회원가입, 로그인, 현재 사용자 조회.

Auth Router — Local signup, login and current-user endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.api.deps import get_current_user
from servicehub.database import get_db
from servicehub.models.user import User
from servicehub.schemas.auth import LoginRequest, SignupRequest, TokenResponse
from servicehub.schemas.user import UserResponse
from servicehub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(
    data: SignupRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """회원가입 — 역할 없는 로컬 계정 생성.

    Create a local account. The role is chosen afterwards via PATCH /user/profile.
    """
    result: TokenResponse = await auth_service.signup(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """이메일/비밀번호 로그인."""
    return await auth_service.login(db, data)


@router.get("/user", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """현재 로그인한 사용자 정보를 조회합니다.

    Get the current authenticated user's information.
    """
    return auth_service.build_user_response(current_user)
