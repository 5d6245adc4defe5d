"""작업 목록 라우터 — 내 작업 및 공개 작업 목록.

Jobs Router — Participant-scoped and public request listings.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.api.deps import get_caller
from servicehub.database import get_db
from servicehub.schemas.service_request import ServiceRequestResponse
from servicehub.services.service_request_service import service_request_service
from servicehub.utils.caller import CallerContext

router: APIRouter = APIRouter()


@router.get("/my/jobs", response_model=list[ServiceRequestResponse])
async def list_my_jobs(
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> list[ServiceRequestResponse]:
    """고객 또는 기술자로 참여한 모든 요청 (최신순)."""
    requests = await service_request_service.list_my_jobs(db, caller)
    return [service_request_service.build_response(r) for r in requests]


@router.get("/public/jobs", response_model=list[ServiceRequestResponse])
async def list_public_jobs(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ServiceRequestResponse]:
    """공개 요청 목록 — 인증 불필요 (No authentication required)."""
    requests = await service_request_service.list_public(db)
    return [service_request_service.build_response(r) for r in requests]
