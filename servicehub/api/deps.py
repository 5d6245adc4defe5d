"""FastAPI 의존성 주입 모듈 — 인증 및 호출자 컨텍스트.

FastAPI dependency injection module — Authentication and caller context.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
    5. get_caller가 CallerContext를 만들어 서비스에 명시적으로 전달
       (get_caller builds the CallerContext handed to every service call)

역할은 토큰이 아닌 DB의 현재 값으로 판단합니다.
The role is always taken from the stored user, never from the token claim.
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.database import get_db
from servicehub.models.user import User
from servicehub.repositories.user_repository import user_repository
from servicehub.utils.caller import CallerContext
from servicehub.utils.exceptions import UnauthorizedError
from servicehub.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — 헤더 누락 시 403 대신 401을 반환하도록 auto_error=False
# (Extracts the bearer token; auto_error=False so a missing header becomes 401)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료 또는 사용자 없음
                           (Missing, invalid or expired token, or unknown user)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")

    try:
        payload: dict = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid token type")
        user_id: UUID = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


async def get_caller(
    current_user: Annotated[User, Depends(get_current_user)],
) -> CallerContext:
    """인증된 사용자로부터 호출자 컨텍스트를 만듭니다.

    Build the explicit caller identity passed into core services.
    """
    return CallerContext(caller_id=current_user.id, role=current_user.role)
