"""서비스 요청 관련 SQLAlchemy ORM 모델 정의.

Service request SQLAlchemy ORM model definition.
A service request is posted by a client and moves through the lifecycle
pending → accepted → in_progress → completed, or pending → cancelled.

Tables:
    - service_requests: 서비스 요청 (Service requests owned by a client)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import JSON, String, DateTime, Integer, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base

# 라이프사이클 상태 — Lifecycle status values
STATUS_PENDING: str = "pending"
STATUS_ACCEPTED: str = "accepted"
STATUS_IN_PROGRESS: str = "in_progress"
STATUS_COMPLETED: str = "completed"
STATUS_CANCELLED: str = "cancelled"

# 종료 상태 — No transition leaves these
TERMINAL_STATUSES: frozenset[str] = frozenset({STATUS_COMPLETED, STATUS_CANCELLED})


class ServiceRequest(Base):
    """서비스 요청 모델.

    Service request model — a unit of work posted by a client.

    Invariants:
        technician_id는 status가 pending/cancelled일 때만 None
        (technician_id is None iff status is pending or cancelled)
        quoted_price는 completed 전이 시에만 설정 (quoted_price is set on completion only)
        client_id는 생성 후 변경 불가 (client_id never changes)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        client_id: 요청자 FK (Owning client)
        technician_id: 담당 기술자 FK (Bound technician, set on acceptance)
        service_type: 서비스 유형 라벨 (Free-text label matched against skills)
        description: 상세 설명 (Job description)
        location: 위치 문자열 (Free-text location, optionally "lat, lon")
        status: 라이프사이클 상태 (Lifecycle status)
        quoted_price: 견적 금액, 달러 단위 정수 (Quoted price in whole dollars)
        technician_notes: 완료 요약 (Technician notes / completion summary)
        images: 이미지 참조 목록 (Ordered opaque image references)
        created_at: 생성 일시 UTC (Creation timestamp, immutable)
        updated_at: 수정 일시 UTC (Bumped on every mutation)
    """

    __tablename__ = "service_requests"

    # 요청 고유 식별자 — Request unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 요청자 FK — Owning client
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    # 담당 기술자 FK — Bound technician (수락 전에는 None)
    technician_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    service_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    # 상태 — pending|accepted|in_progress|completed|cancelled
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=STATUS_PENDING)
    # 견적 금액 — Whole dollars; converted to cents only at the processor boundary
    quoted_price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    technician_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_service_requests_client_id", "client_id"),
        Index("ix_service_requests_technician_id", "technician_id"),
        Index("ix_service_requests_status_created", "status", "created_at"),
    )
