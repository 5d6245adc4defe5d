"""사용자 레포지토리 — 사용자 관련 DB 쿼리 담당.

User Repository — Handles user-related database queries.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.user import User
from servicehub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다 (대소문자 구분 없음).

        Retrieve a user by email. Emails are stored lower-cased.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 이메일 주소 (Email address)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(User.email == email.strip().lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
