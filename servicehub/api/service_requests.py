"""서비스 요청 라우터 — 요청 생성, 조회, 상태 전이 API.

Service Request Router — Creation, role-scoped listings, availability
matching and lifecycle transitions. Follows 3-layer architecture:
Router → Service → Repository. Every write commits only after the
service call has succeeded.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.api.deps import get_caller
from servicehub.database import get_db
from servicehub.models.service_request import ServiceRequest
from servicehub.schemas.service_request import (
    ServiceRequestComplete,
    ServiceRequestCreate,
    ServiceRequestResponse,
    ServiceRequestUpdate,
)
from servicehub.services.matching_service import matching_service
from servicehub.services.service_request_service import service_request_service
from servicehub.utils.caller import CallerContext

router: APIRouter = APIRouter()


@router.post("", response_model=ServiceRequestResponse, status_code=201)
async def create_service_request(
    data: ServiceRequestCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """서비스 요청을 생성합니다 (status=pending).

    Create a service request owned by the caller.
    """
    request: ServiceRequest = await service_request_service.create_request(db, caller, data)
    await db.commit()
    return service_request_service.build_response(request)


@router.get("", response_model=list[ServiceRequestResponse])
async def list_my_service_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> list[ServiceRequestResponse]:
    """역할별 내 요청 목록 — client는 작성한 요청, technician은 배정된 요청."""
    requests = await service_request_service.list_mine(db, caller)
    return [service_request_service.build_response(r) for r in requests]


# /available은 /{request_id}보다 먼저 등록 — Must be registered before /{request_id}
@router.get("/available", response_model=list[ServiceRequestResponse])
async def list_available_service_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> list[ServiceRequestResponse]:
    """기술자의 기술에 맞는 수락 가능 요청 목록 (기술자 전용).

    Pending, unassigned requests matching the caller's skills, newest first.
    """
    requests = await matching_service.list_available(db, caller)
    return [service_request_service.build_response(r) for r in requests]


@router.get("/{request_id}", response_model=ServiceRequestResponse)
async def get_service_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """서비스 요청 단건 조회."""
    request: ServiceRequest = await service_request_service.get_request(db, request_id)
    return service_request_service.build_response(request)


@router.patch("/{request_id}", response_model=ServiceRequestResponse)
async def update_service_request(
    request_id: UUID,
    data: ServiceRequestUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """서비스 요청 부분 수정 — 상태 변경은 해당 전이로 라우팅됩니다.

    Generic partial update. Status changes are routed to the matching
    lifecycle transition and carry its authorization rules.
    """
    request: ServiceRequest = await service_request_service.update_request(db, caller, request_id, data)
    await db.commit()
    return service_request_service.build_response(request)


# --- 상태 전이 엔드포인트 (Transition endpoints) ---


@router.post("/{request_id}/accept", response_model=ServiceRequestResponse)
async def accept_service_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """기술자가 요청을 수락합니다 (pending → accepted)."""
    request: ServiceRequest = await service_request_service.accept(db, caller, request_id)
    await db.commit()
    return service_request_service.build_response(request)


@router.post("/{request_id}/start", response_model=ServiceRequestResponse)
async def start_service_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """배정된 기술자가 작업을 시작합니다 (accepted → in_progress)."""
    request: ServiceRequest = await service_request_service.start(db, caller, request_id)
    await db.commit()
    return service_request_service.build_response(request)


@router.post("/{request_id}/complete", response_model=ServiceRequestResponse)
async def complete_service_request(
    request_id: UUID,
    data: ServiceRequestComplete,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """배정된 기술자가 작업을 완료합니다 (in_progress → completed).

    Requires a positive quoted_price and a non-empty completion summary.
    """
    request: ServiceRequest = await service_request_service.complete(
        db, caller, request_id, data.quoted_price, data.technician_notes
    )
    await db.commit()
    return service_request_service.build_response(request)


@router.post("/{request_id}/cancel", response_model=ServiceRequestResponse)
async def cancel_service_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> ServiceRequestResponse:
    """고객이 pending 요청을 취소합니다 (pending → cancelled)."""
    request: ServiceRequest = await service_request_service.cancel(db, caller, request_id)
    await db.commit()
    return service_request_service.build_response(request)
