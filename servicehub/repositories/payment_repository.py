"""결제 레포지토리 — 결제 관련 DB 쿼리 담당.

Payment Repository — Handles payment database queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.payment import PAYMENT_SUCCEEDED, Payment
from servicehub.repositories.base import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    """결제 레포지토리.

    Extends:
        BaseRepository[Payment]
    """

    def __init__(self) -> None:
        super().__init__(Payment)

    async def list_by_request(
        self,
        db: AsyncSession,
        service_request_id: UUID,
    ) -> Sequence[Payment]:
        """요청의 결제 내역을 최신순으로 조회합니다.

        List payments of a service request, newest first.
        """
        query: Select = (
            select(Payment)
            .where(Payment.service_request_id == service_request_id)
            .order_by(Payment.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_succeeded(
        self,
        db: AsyncSession,
        service_request_id: UUID,
    ) -> Payment | None:
        """요청의 성공한 결제를 조회합니다 (최대 1건).

        Retrieve the succeeded payment of a request, if any.
        """
        query: Select = select(Payment).where(
            Payment.service_request_id == service_request_id,
            Payment.status == PAYMENT_SUCCEEDED,
        )
        result = await db.execute(query)
        return result.scalars().first()


# 싱글턴 인스턴스 — Singleton instance
payment_repository: PaymentRepository = PaymentRepository()
