"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
A user is either a client (posts service requests) or a technician
(accepts and fulfils them). The role stays empty until onboarding.

Tables:
    - users: 사용자 계정 (User accounts with role, skills and profile fields)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import JSON, String, Boolean, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base

# 역할 값 — Role values
ROLE_CLIENT: str = "client"
ROLE_TECHNICIAN: str = "technician"


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is globally unique. Skills and availability only carry meaning
    for technicians.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 이메일 (Login email, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 (Role: "client" | "technician", None until onboarding)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        phone: 전화번호 (Phone number)
        bio: 자기소개 (Short bio)
        profile_image_url: 프로필 이미지 참조 (Opaque profile image reference)
        skills: 서비스 유형 라벨 목록 (Declared service-type labels)
        is_available: 작업 가능 여부 (Technician availability flag)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 이메일 — Login email (전역 고유, globally unique)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 역할 — "client" | "technician" (온보딩 전에는 None)
    role: Mapped[str | None] = mapped_column(String(20), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 보유 기술 — Service-type labels matched exactly against ServiceRequest.service_type
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # 작업 가능 여부 — Technician availability flag
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
