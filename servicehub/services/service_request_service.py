"""서비스 요청 서비스 — 요청 라이프사이클 비즈니스 로직.

Service Request Service — Owns the request lifecycle state machine.

State machine:
    pending ──accept──▶ accepted ──start──▶ in_progress ──complete──▶ completed
       │
       └──cancel──▶ cancelled

Every transition is written as one conditional UPDATE guarded by the
status the decision was made on (see ServiceRequestRepository.transition).
When that UPDATE matches no row the caller lost a race and receives
ConflictError; nothing is written.
"""

from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.models.service_request import (
    STATUS_ACCEPTED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TERMINAL_STATUSES,
    ServiceRequest,
)
from servicehub.repositories.service_request_repository import service_request_repository
from servicehub.schemas.service_request import (
    ServiceRequestCreate,
    ServiceRequestResponse,
    ServiceRequestUpdate,
)
from servicehub.utils.caller import CallerContext
from servicehub.utils.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ServiceRequestService:
    """서비스 요청 라이프사이클 서비스.

    Service request lifecycle service: creation, role-scoped listings,
    guarded transitions and the generic partial update.
    """

    def build_response(self, request: ServiceRequest) -> ServiceRequestResponse:
        """서비스 요청 ORM 객체를 응답 스키마로 변환합니다.

        Convert a ServiceRequest ORM object into its response schema.
        """
        return ServiceRequestResponse(
            id=str(request.id),
            client_id=str(request.client_id),
            technician_id=str(request.technician_id) if request.technician_id else None,
            service_type=request.service_type,
            description=request.description,
            location=request.location,
            status=request.status,
            quoted_price=request.quoted_price,
            technician_notes=request.technician_notes,
            images=list(request.images or []),
            created_at=request.created_at,
            updated_at=request.updated_at,
        )

    async def get_request(
        self,
        db: AsyncSession,
        request_id: UUID,
    ) -> ServiceRequest:
        """서비스 요청을 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            request_id: 요청 UUID (Service request UUID)

        Returns:
            ServiceRequest: 조회된 요청 (Found request)

        Raises:
            NotFoundError: 요청이 없을 때 (When the request does not exist)
        """
        request: ServiceRequest | None = await service_request_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("Service request not found")
        return request

    # --- 생성 및 조회 (Creation and listings) ---

    async def create_request(
        self,
        db: AsyncSession,
        caller: CallerContext,
        data: ServiceRequestCreate,
    ) -> ServiceRequest:
        """새 서비스 요청을 pending 상태로 생성합니다.

        Create a new service request owned by the caller. Status always
        starts as "pending" with no technician and no price.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)
            data: 요청 생성 데이터 (Creation payload)

        Returns:
            ServiceRequest: 생성된 요청 (Created request)
        """
        now: datetime = _now()
        return await service_request_repository.create(
            db,
            {
                "client_id": caller.caller_id,
                "technician_id": None,
                "service_type": data.service_type,
                "description": data.description,
                "location": data.location,
                "status": STATUS_PENDING,
                "quoted_price": None,
                "technician_notes": None,
                "images": list(data.images),
                "created_at": now,
                "updated_at": now,
            },
        )

    async def list_mine(
        self,
        db: AsyncSession,
        caller: CallerContext,
    ) -> Sequence[ServiceRequest]:
        """역할에 따라 내 요청 목록을 조회합니다.

        Clients see the requests they posted, technicians the requests bound
        to them. A user without a role yet sees nothing.
        """
        if caller.is_client:
            return await service_request_repository.list_by_client(db, caller.caller_id)
        if caller.is_technician:
            return await service_request_repository.list_by_technician(db, caller.caller_id)
        return []

    async def list_my_jobs(
        self,
        db: AsyncSession,
        caller: CallerContext,
    ) -> Sequence[ServiceRequest]:
        """클라이언트 또는 기술자로 참여한 모든 요청을 조회합니다.

        Every request the caller takes part in, regardless of current role.
        """
        return await service_request_repository.list_by_participant(db, caller.caller_id)

    async def list_public(self, db: AsyncSession) -> Sequence[ServiceRequest]:
        """공개 요청 목록 — 전체 요청 최신순."""
        return await service_request_repository.list_all(db)

    # --- 상태 전이 (Transitions) ---

    def _require_bound_technician(self, request: ServiceRequest, caller: CallerContext) -> None:
        """호출자가 요청에 배정된 기술자인지 확인합니다."""
        if request.technician_id is None or request.technician_id != caller.caller_id:
            raise ForbiddenError("Only the assigned technician can perform this action")

    async def accept(
        self,
        db: AsyncSession,
        caller: CallerContext,
        request_id: UUID,
        extra_values: dict[str, Any] | None = None,
    ) -> ServiceRequest:
        """기술자가 pending 요청을 수락합니다.

        pending → accepted. Binds technician_id to the caller.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)
            request_id: 요청 UUID (Service request UUID)
            extra_values: 같은 UPDATE에 함께 기록할 필드 (Fields written in the same UPDATE)

        Returns:
            ServiceRequest: 수락된 요청 (Accepted request)

        Raises:
            ForbiddenError: 기술자가 아니거나 이미 본인 요청일 때
                            (Caller is not a technician, or already owns the request)
            NotFoundError: 요청이 없을 때 (Request does not exist)
            ConflictError: 더 이상 pending이 아닐 때 (Request is no longer pending)
        """
        if not caller.is_technician:
            raise ForbiddenError("Access denied. Technician role required.")

        request: ServiceRequest = await self.get_request(db, request_id)
        if request.technician_id == caller.caller_id:
            raise ForbiddenError("You have already accepted this service request")
        if request.client_id == caller.caller_id:
            raise ForbiddenError("You cannot accept your own service request")
        if request.status != STATUS_PENDING:
            raise ConflictError("Service request is no longer available")

        values: dict[str, Any] = dict(extra_values or {})
        values.update({
            "status": STATUS_ACCEPTED,
            "technician_id": caller.caller_id,
            "updated_at": _now(),
        })
        updated = await service_request_repository.transition(db, request_id, STATUS_PENDING, values)
        if updated is None:
            raise ConflictError("Service request was accepted by another technician")
        return updated

    async def start(
        self,
        db: AsyncSession,
        caller: CallerContext,
        request_id: UUID,
        extra_values: dict[str, Any] | None = None,
    ) -> ServiceRequest:
        """배정된 기술자가 작업을 시작합니다 (accepted → in_progress).

        Raises:
            NotFoundError: 요청이 없을 때 (Request does not exist)
            ForbiddenError: 배정된 기술자가 아닐 때 (Caller is not the bound technician)
            InvalidStateError: accepted 상태가 아닐 때 (Request is not accepted)
            ConflictError: 동시 수정으로 상태가 바뀌었을 때 (Lost a concurrent update)
        """
        request: ServiceRequest = await self.get_request(db, request_id)
        self._require_bound_technician(request, caller)
        if request.status != STATUS_ACCEPTED:
            raise InvalidStateError(f"Cannot start a service request in status '{request.status}'")

        values: dict[str, Any] = dict(extra_values or {})
        values.update({"status": STATUS_IN_PROGRESS, "updated_at": _now()})
        updated = await service_request_repository.transition(
            db, request_id, STATUS_ACCEPTED, values, expected_technician_id=caller.caller_id
        )
        if updated is None:
            raise ConflictError()
        return updated

    async def complete(
        self,
        db: AsyncSession,
        caller: CallerContext,
        request_id: UUID,
        quoted_price: int | None,
        technician_notes: str | None,
    ) -> ServiceRequest:
        """배정된 기술자가 작업을 완료합니다 (in_progress → completed).

        Price and completion summary are written atomically with the status.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)
            request_id: 요청 UUID (Service request UUID)
            quoted_price: 견적 금액, 양수 달러 (Positive price in whole dollars)
            technician_notes: 완료 요약, 비어 있으면 안 됨 (Non-empty completion summary)

        Returns:
            ServiceRequest: 완료된 요청 (Completed request)

        Raises:
            NotFoundError: 요청이 없을 때 (Request does not exist)
            ForbiddenError: 배정된 기술자가 아닐 때 (Caller is not the bound technician)
            InvalidStateError: in_progress 상태가 아닐 때 (Request is not in progress)
            BadRequestError: 가격 또는 요약이 유효하지 않을 때 (Missing/invalid price or summary)
            ConflictError: 동시 수정으로 상태가 바뀌었을 때 (Lost a concurrent update)
        """
        request: ServiceRequest = await self.get_request(db, request_id)
        self._require_bound_technician(request, caller)
        if request.status != STATUS_IN_PROGRESS:
            raise InvalidStateError(f"Cannot complete a service request in status '{request.status}'")

        if quoted_price is None or quoted_price <= 0:
            raise BadRequestError("A positive quoted price is required to complete the job")
        summary: str = (technician_notes or "").strip()
        if not summary:
            raise BadRequestError("A completion summary is required to complete the job")

        updated = await service_request_repository.transition(
            db,
            request_id,
            STATUS_IN_PROGRESS,
            {
                "status": STATUS_COMPLETED,
                "quoted_price": quoted_price,
                "technician_notes": summary,
                "updated_at": _now(),
            },
            expected_technician_id=caller.caller_id,
        )
        if updated is None:
            raise ConflictError()
        return updated

    async def cancel(
        self,
        db: AsyncSession,
        caller: CallerContext,
        request_id: UUID,
        extra_values: dict[str, Any] | None = None,
    ) -> ServiceRequest:
        """고객이 pending 요청을 취소합니다 (pending → cancelled).

        Raises:
            NotFoundError: 요청이 없을 때 (Request does not exist)
            ForbiddenError: 요청 소유 고객이 아닐 때 (Caller does not own the request)
            InvalidStateError: pending 상태가 아닐 때 (Request is not pending)
            ConflictError: 동시에 수락되었을 때 (Accepted concurrently)
        """
        request: ServiceRequest = await self.get_request(db, request_id)
        if request.client_id != caller.caller_id:
            raise ForbiddenError("Only the client who created the request can cancel it")
        if request.status != STATUS_PENDING:
            raise InvalidStateError(f"Cannot cancel a service request in status '{request.status}'")

        values: dict[str, Any] = dict(extra_values or {})
        values.update({"status": STATUS_CANCELLED, "updated_at": _now()})
        updated = await service_request_repository.transition(db, request_id, STATUS_PENDING, values)
        if updated is None:
            raise ConflictError("Service request was accepted before it could be cancelled")
        return updated

    # --- 일반 부분 수정 (Generic PATCH) ---

    async def update_request(
        self,
        db: AsyncSession,
        caller: CallerContext,
        request_id: UUID,
        data: ServiceRequestUpdate,
    ) -> ServiceRequest:
        """서비스 요청을 부분 수정합니다 (PATCH).

        Generic partial update over status/notes/price.

        Rules:
            - 종료 상태 요청은 수정 불가 (terminal requests reject every mutation first)
            - pending 요청의 status "accepted" → accept 전이 (routed to accept, own authorization)
            - 그 외 상태 변경 → 해당 전이 (other status changes → matching transition)
            - pending/accepted로 되돌리기 → InvalidStateError (no backwards moves)
            - quoted_price는 완료 전이와 함께만 허용 (price only with completion)
            - 호출자는 요청 고객 또는 배정 기술자여야 함 (caller must be client or bound technician)

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)
            request_id: 요청 UUID (Service request UUID)
            data: 부분 수정 데이터 (Partial update payload)

        Returns:
            ServiceRequest: 병합된 요청 (Merged request)
        """
        fields: dict[str, Any] = data.model_dump(exclude_unset=True)
        target: str | None = fields.get("status")
        notes_values: dict[str, Any] = {}
        if "technician_notes" in fields:
            notes_values["technician_notes"] = fields["technician_notes"]

        request: ServiceRequest = await self.get_request(db, request_id)
        if request.status in TERMINAL_STATUSES:
            raise InvalidStateError(
                f"Service request is {request.status} and can no longer be modified"
            )

        if target == STATUS_ACCEPTED and request.status == STATUS_PENDING:
            if "quoted_price" in fields:
                raise InvalidStateError("quoted_price can only be set when completing the job")
            return await self.accept(db, caller, request_id, notes_values)

        is_participant: bool = caller.caller_id in (request.client_id, request.technician_id)
        if target == STATUS_ACCEPTED and not is_participant:
            raise ConflictError("Service request is no longer available")
        if not is_participant:
            raise ForbiddenError("Access denied")
        if "quoted_price" in fields and target != STATUS_COMPLETED:
            raise InvalidStateError("quoted_price can only be set when completing the job")

        if target is not None and target != request.status:
            if target in (STATUS_PENDING, STATUS_ACCEPTED):
                raise InvalidStateError(f"A service request cannot move back to {target}")
            if target == STATUS_IN_PROGRESS:
                return await self.start(db, caller, request_id, notes_values)
            if target == STATUS_COMPLETED:
                return await self.complete(
                    db,
                    caller,
                    request_id,
                    fields.get("quoted_price"),
                    fields.get("technician_notes"),
                )
            return await self.cancel(db, caller, request_id, notes_values)

        if not notes_values:
            return request

        # 메모만 수정 — Notes-only merge, still guarded by the observed status
        notes_values["updated_at"] = _now()
        updated = await service_request_repository.transition(
            db,
            request_id,
            request.status,
            notes_values,
            expected_technician_id=request.technician_id,
        )
        if updated is None:
            raise ConflictError()
        return updated


# 싱글턴 인스턴스 — Singleton instance
service_request_service: ServiceRequestService = ServiceRequestService()
