"""호출자 컨텍스트 — 서비스 계층에 명시적으로 전달되는 인증 정보.

Caller context — the authenticated identity passed explicitly into every
core service call. Built by the API layer from the bearer token; services
never read request or session state themselves.
"""

from dataclasses import dataclass
from uuid import UUID

from servicehub.models.user import ROLE_CLIENT, ROLE_TECHNICIAN


@dataclass(frozen=True)
class CallerContext:
    """인증된 호출자.

    Attributes:
        caller_id: 사용자 UUID (Authenticated user id)
        role: 역할, 온보딩 전에는 None (client | technician | None)
    """

    caller_id: UUID
    role: str | None

    @property
    def is_technician(self) -> bool:
        return self.role == ROLE_TECHNICIAN

    @property
    def is_client(self) -> bool:
        return self.role == ROLE_CLIENT
