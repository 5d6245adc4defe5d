"""인증 서비스 — 회원가입, 로그인 비즈니스 로직.

Auth Service — Business logic for local signup and login.
Issues a single access token per session; the user's role is chosen
later through the profile endpoint.
"""

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.user import User
from servicehub.repositories.user_repository import user_repository
from servicehub.schemas.auth import LoginRequest, SignupRequest, TokenResponse
from servicehub.schemas.user import UserResponse
from servicehub.utils.exceptions import DuplicateError, UnauthorizedError
from servicehub.utils.jwt import create_access_token
from servicehub.utils.password import hash_password, verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def build_user_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다.

        Convert a User model instance to a UserResponse schema.
        """
        return UserResponse(
            id=str(user.id),
            email=user.email,
            role=user.role,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            bio=user.bio,
            profile_image_url=user.profile_image_url,
            skills=list(user.skills or []),
            is_available=user.is_available,
            created_at=user.created_at,
        )

    def _issue_token(self, user: User) -> TokenResponse:
        """사용자에게 액세스 토큰을 발급합니다."""
        access_token: str = create_access_token({"sub": str(user.id), "role": user.role})
        return TokenResponse(access_token=access_token, user=self.build_user_response(user))

    async def signup(
        self,
        db: AsyncSession,
        data: SignupRequest,
    ) -> TokenResponse:
        """로컬 계정을 생성하고 토큰을 발급합니다.

        Create a local account (role unset) and issue an access token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Signup request data)

        Returns:
            TokenResponse: 토큰 응답 (Token response)

        Raises:
            DuplicateError: 이메일이 이미 등록됨 (Email already registered)
        """
        email: str = data.email.strip().lower()
        if await user_repository.get_by_email(db, email) is not None:
            raise DuplicateError("Email already registered")

        now: datetime = datetime.now(timezone.utc)
        try:
            user: User = await user_repository.create(
                db,
                {
                    "email": email,
                    "password_hash": hash_password(data.password),
                    "role": None,
                    "first_name": data.first_name,
                    "last_name": data.last_name,
                    "skills": [],
                    "is_available": True,
                    "created_at": now,
                    "updated_at": now,
                },
            )
        except IntegrityError as exc:
            # 동시 가입 — Concurrent signup with the same email
            raise DuplicateError("Email already registered") from exc

        return self._issue_token(user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """이메일/비밀번호로 로그인합니다.

        Raises:
            UnauthorizedError: 잘못된 자격 증명 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not user.password_hash:
            raise UnauthorizedError("Invalid email or password")
        if not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return self._issue_token(user)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
