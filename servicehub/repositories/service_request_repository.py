"""서비스 요청 레포지토리 — 서비스 요청 관련 DB 쿼리 담당.

Service Request Repository — Handles all service-request database queries.
Extends BaseRepository with owner/technician listings, the availability
query, and the status-guarded transition write.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.service_request import STATUS_PENDING, ServiceRequest
from servicehub.repositories.base import BaseRepository


class ServiceRequestRepository(BaseRepository[ServiceRequest]):
    """서비스 요청 레포지토리.

    Extends:
        BaseRepository[ServiceRequest]
    """

    def __init__(self) -> None:
        super().__init__(ServiceRequest)

    async def list_by_client(
        self,
        db: AsyncSession,
        client_id: UUID,
    ) -> Sequence[ServiceRequest]:
        """고객이 등록한 요청을 최신순으로 조회합니다.

        List requests owned by a client, newest first.
        """
        query: Select = (
            select(ServiceRequest)
            .where(ServiceRequest.client_id == client_id)
            .order_by(ServiceRequest.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def list_by_technician(
        self,
        db: AsyncSession,
        technician_id: UUID,
    ) -> Sequence[ServiceRequest]:
        """기술자에게 배정된 요청을 최신순으로 조회합니다.

        List requests bound to a technician, newest first.
        """
        query: Select = (
            select(ServiceRequest)
            .where(ServiceRequest.technician_id == technician_id)
            .order_by(ServiceRequest.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def list_by_participant(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Sequence[ServiceRequest]:
        """고객 또는 기술자로 참여한 요청을 최신순으로 조회합니다.

        List requests where the user is either the client or the technician,
        each request once, newest first.
        """
        query: Select = (
            select(ServiceRequest)
            .where(
                or_(
                    ServiceRequest.client_id == user_id,
                    ServiceRequest.technician_id == user_id,
                )
            )
            .order_by(ServiceRequest.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def list_all(self, db: AsyncSession) -> Sequence[ServiceRequest]:
        """모든 요청을 최신순으로 조회합니다 (공개 목록)."""
        query: Select = select(ServiceRequest).order_by(ServiceRequest.created_at.desc())
        result = await db.execute(query)
        return result.scalars().all()

    async def list_available(
        self,
        db: AsyncSession,
        service_types: list[str] | None = None,
    ) -> Sequence[ServiceRequest]:
        """수락 가능한 요청을 최신순으로 조회합니다.

        Select requests with status "pending" and no technician, newest first.
        When ``service_types`` is non-empty only rows whose service_type
        equals one of them (exact, case-sensitive) are kept.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            service_types: 허용 서비스 유형 목록, 비어 있으면 전체
                           (Allowed service types; empty or None means all)

        Returns:
            Sequence[ServiceRequest]: 수락 가능한 요청 목록 (Available requests)
        """
        query: Select = select(ServiceRequest).where(
            ServiceRequest.status == STATUS_PENDING,
            ServiceRequest.technician_id.is_(None),
        )
        if service_types:
            query = query.where(ServiceRequest.service_type.in_(service_types))

        query = query.order_by(ServiceRequest.created_at.desc())
        result = await db.execute(query)
        return result.scalars().all()

    async def count_by_statuses(
        self,
        db: AsyncSession,
        statuses: tuple[str, ...],
        client_id: UUID | None = None,
        technician_id: UUID | None = None,
    ) -> int:
        """특정 상태의 요청 수를 셉니다.

        Count requests in the given statuses, scoped to a client or technician.
        """
        query: Select = select(func.count()).select_from(ServiceRequest).where(
            ServiceRequest.status.in_(statuses)
        )
        if client_id is not None:
            query = query.where(ServiceRequest.client_id == client_id)
        if technician_id is not None:
            query = query.where(ServiceRequest.technician_id == technician_id)
        return (await db.execute(query)).scalar() or 0

    async def transition(
        self,
        db: AsyncSession,
        request_id: UUID,
        from_status: str,
        values: dict[str, Any],
        expected_technician_id: UUID | None = None,
    ) -> ServiceRequest | None:
        """상태가 여전히 from_status일 때만 요청을 갱신합니다.

        Apply a lifecycle transition as one conditional UPDATE guarded by the
        current status (and, when given, the bound technician). Returns the
        fresh row on success, or None when no row matched because another
        writer moved the request first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            request_id: 요청 UUID (Service request UUID)
            from_status: 기대하는 현재 상태 (Expected current status)
            values: 설정할 값, updated_at 포함 (Values to write, including updated_at)
            expected_technician_id: 기대하는 담당 기술자, pending은 None
                                    (Expected bound technician; None for pending)

        Returns:
            ServiceRequest | None: 갱신된 요청 또는 None (Updated request, or None on lost race)
        """
        expected: dict[str, Any] = {"status": from_status}
        if from_status == STATUS_PENDING or expected_technician_id is not None:
            expected["technician_id"] = expected_technician_id

        updated: bool = await self.update_if(db, request_id, expected, values)
        if not updated:
            return None
        return await self.get_by_id(db, request_id)


# 싱글턴 인스턴스 — Singleton instance
service_request_repository: ServiceRequestRepository = ServiceRequestRepository()
