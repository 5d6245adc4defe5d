"""프로필 라우터 — 온보딩 및 내 프로필 수정 API.

Profile Router — Onboarding (role selection) and profile updates.
Follows 3-layer architecture: Router → Service → Repository.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.api.deps import get_current_user
from servicehub.database import get_db
from servicehub.models.user import User
from servicehub.schemas.user import ProfileUpdate, UserResponse
from servicehub.services.profile_service import profile_service

router: APIRouter = APIRouter()


@router.patch("/profile", response_model=UserResponse)
async def update_my_profile(
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """내 프로필을 업데이트합니다.

    Update the current user's profile. Unknown fields are rejected with 400.

    Args:
        data: 업데이트 데이터 (Update data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        UserResponse: 업데이트된 사용자 (Updated user)
    """
    result: UserResponse = await profile_service.update_profile(db, current_user, data)
    await db.commit()
    return result
