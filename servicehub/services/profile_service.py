"""프로필 서비스 — 온보딩 및 프로필 수정 비즈니스 로직.

Profile Service — Business logic for onboarding (choosing a role) and
self-service profile updates.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.service_request import (
    STATUS_ACCEPTED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)
from servicehub.models.user import ROLE_CLIENT, ROLE_TECHNICIAN, User
from servicehub.repositories.service_request_repository import service_request_repository
from servicehub.schemas.user import ProfileUpdate, UserResponse
from servicehub.services.auth_service import auth_service
from servicehub.utils.exceptions import InvalidStateError

# 역할 변경을 막는 활성 상태 — Statuses that pin the current role
_ACTIVE_CLIENT_STATUSES: tuple[str, ...] = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_IN_PROGRESS)
_ACTIVE_TECHNICIAN_STATUSES: tuple[str, ...] = (STATUS_ACCEPTED, STATUS_IN_PROGRESS)


def normalize_skills(skills: list[str]) -> list[str]:
    """기술 라벨을 정규화합니다.

    Trim whitespace, drop empty labels and duplicates, preserve order.
    Case is kept as-is because matching is exact.
    """
    normalized: list[str] = []
    for skill in skills:
        label: str = skill.strip()
        if label and label not in normalized:
            normalized.append(label)
    return normalized


class ProfileService:
    """프로필 관련 비즈니스 로직을 처리하는 서비스."""

    async def _ensure_role_change_allowed(
        self,
        db: AsyncSession,
        current_user: User,
        new_role: str,
    ) -> None:
        """진행 중인 요청이 있으면 역할 변경을 거부합니다.

        Raises:
            InvalidStateError: 현재 역할로 진행 중인 요청이 있을 때
                               (User still has active requests under the current role)
        """
        if current_user.role is None or current_user.role == new_role:
            return

        active: int = 0
        if current_user.role == ROLE_TECHNICIAN:
            active = await service_request_repository.count_by_statuses(
                db, _ACTIVE_TECHNICIAN_STATUSES, technician_id=current_user.id
            )
        elif current_user.role == ROLE_CLIENT:
            active = await service_request_repository.count_by_statuses(
                db, _ACTIVE_CLIENT_STATUSES, client_id=current_user.id
            )
        if active > 0:
            raise InvalidStateError("Cannot change role while you have active service requests")

    async def update_profile(
        self,
        db: AsyncSession,
        current_user: User,
        data: ProfileUpdate,
    ) -> UserResponse:
        """현재 사용자의 프로필을 업데이트합니다.

        Update the current user's profile with the provided fields only.
        Setting ``role`` completes onboarding.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 인증된 사용자 모델 (Authenticated user model)
            data: 업데이트 데이터 (Profile update data)

        Returns:
            UserResponse: 업데이트된 사용자 (Updated user)

        Raises:
            InvalidStateError: 역할 변경이 허용되지 않을 때 (Role change not allowed)
        """
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if update_data.get("role") is not None:
            await self._ensure_role_change_allowed(db, current_user, update_data["role"])
        if "skills" in update_data:
            update_data["skills"] = normalize_skills(update_data["skills"] or [])

        for field, value in update_data.items():
            # 역할과 가용 여부는 null로 지우지 않음 — role and is_available are never cleared
            if value is None and field in ("role", "is_available"):
                continue
            setattr(current_user, field, value)
        current_user.updated_at = datetime.now(timezone.utc)

        await db.flush()
        await db.refresh(current_user)
        return auth_service.build_user_response(current_user)


# 싱글턴 인스턴스 — Singleton instance
profile_service: ProfileService = ProfileService()
