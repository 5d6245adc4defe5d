"""매칭 서비스 — 기술자에게 수락 가능한 요청을 계산합니다.

Matching Service — Computes the requests a technician may accept.

Algorithm:
    status = "pending" AND technician_id IS NULL, newest first; when the
    technician declared skills, keep only rows whose service_type equals
    one of them (exact, case-sensitive). A technician without skills sees
    every available request. No ranking, no pagination; distance ordering
    is left to the client.
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.service_request import ServiceRequest
from servicehub.models.user import User
from servicehub.repositories.service_request_repository import service_request_repository
from servicehub.repositories.user_repository import user_repository
from servicehub.utils.caller import CallerContext
from servicehub.utils.exceptions import ForbiddenError


class MatchingService:
    """수락 가능 요청 매칭 서비스."""

    async def list_available(
        self,
        db: AsyncSession,
        caller: CallerContext,
    ) -> Sequence[ServiceRequest]:
        """호출 기술자의 기술에 맞는 수락 가능 요청을 조회합니다.

        List pending, unassigned requests matching the caller's skills.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)

        Returns:
            Sequence[ServiceRequest]: 최신순 요청 목록 (Requests, newest first)

        Raises:
            ForbiddenError: 기술자가 아닐 때 (Caller is not a technician)
        """
        if not caller.is_technician:
            raise ForbiddenError("Access denied. Technician role required.")

        user: User | None = await user_repository.get_by_id(db, caller.caller_id)
        skills: list[str] = list(user.skills or []) if user is not None else []
        return await self.match(db, skills)

    async def match(
        self,
        db: AsyncSession,
        skills: list[str],
    ) -> Sequence[ServiceRequest]:
        """기술 목록으로 수락 가능 요청을 필터링합니다.

        Pure filter/sort over available requests; an empty skill list
        matches everything.
        """
        return await service_request_repository.list_available(db, skills)


# 싱글턴 인스턴스 — Singleton instance
matching_service: MatchingService = MatchingService()
