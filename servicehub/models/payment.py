"""결제 관련 SQLAlchemy ORM 모델 정의.

Payment SQLAlchemy ORM model definition.
A payment row mirrors one payment intent created at the payment processor
for a completed service request.

Tables:
    - payments: 결제 (Payments per service request)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from servicehub.database import Base

# 결제 상태 — Payment status values
PAYMENT_PENDING: str = "pending"
PAYMENT_SUCCEEDED: str = "succeeded"
PAYMENT_FAILED: str = "failed"


class Payment(Base):
    """결제 모델.

    Payment model — one row per payment intent.
    At most one payment per service request may ever reach "succeeded";
    the partial unique index enforces it in the store as well.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        service_request_id: 서비스 요청 FK (Paid service request)
        amount: 결제 금액, 달러 단위 (Amount in whole dollars, equals quoted_price at creation)
        external_ref: 결제 처리기 인텐트 ID (Payment processor intent id)
        status: 결제 상태 (pending | succeeded | failed)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "payments"

    # 결제 고유 식별자 — Payment unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 서비스 요청 FK — Paid service request
    service_request_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("service_requests.id"), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    # 외부 인텐트 참조 — Opaque payment intent id from the processor
    external_ref: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PAYMENT_PENDING)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_payments_service_request_id", "service_request_id"),
        # 요청당 성공 결제 1건 — One succeeded payment per request
        Index(
            "uq_payments_one_succeeded",
            "service_request_id",
            unique=True,
            postgresql_where=text("status = 'succeeded'"),
            sqlite_where=text("status = 'succeeded'"),
        ),
    )
