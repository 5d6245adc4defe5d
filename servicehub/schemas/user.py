"""사용자 및 프로필 관련 Pydantic 요청/응답 스키마 정의.

User and profile Pydantic request/response schema definitions.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """사용자 응답 스키마."""

    id: str
    email: str
    role: str | None
    first_name: str | None
    last_name: str | None
    phone: str | None
    bio: str | None
    profile_image_url: str | None
    skills: list[str]
    is_available: bool
    created_at: datetime


class ProfileUpdate(BaseModel):
    """프로필 수정 요청 스키마 (부분 업데이트).

    Profile update request schema (partial update, also used for onboarding).
    Unknown keys are rejected.

    Attributes:
        role: 역할 (client | technician)
        skills: 보유 기술 라벨 (Service-type labels, technicians)
        bio: 자기소개 (Short bio)
        is_available: 작업 가능 여부 (Availability flag)
        phone: 전화번호 (Phone number)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        profile_image_url: 프로필 이미지 참조 (Opaque image reference)
    """

    model_config = ConfigDict(extra="forbid")

    role: str | None = Field(default=None, pattern=r"^(client|technician)$")
    skills: list[str] | None = None
    bio: str | None = None
    is_available: bool | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
