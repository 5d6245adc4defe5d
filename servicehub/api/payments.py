"""결제 라우터 — 결제 인텐트 생성, 확인, 조회 API.

Payments Router — Create intent, confirm against the processor, fetch.
The payment processor is injected with Depends(get_payment_processor).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.api.deps import get_caller
from servicehub.database import get_db
from servicehub.models.payment import Payment
from servicehub.schemas.payment import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    CreateIntentRequest,
    CreateIntentResponse,
    PaymentResponse,
)
from servicehub.services.payment_processor import PaymentProcessor, get_payment_processor
from servicehub.services.payment_service import payment_service
from servicehub.utils.caller import CallerContext

router: APIRouter = APIRouter()


@router.post("/create-intent", response_model=CreateIntentResponse)
async def create_payment_intent(
    data: CreateIntentRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
    processor: Annotated[PaymentProcessor, Depends(get_payment_processor)],
) -> CreateIntentResponse:
    """완료된 요청에 대한 결제 인텐트를 생성합니다.

    Create a processor intent for a completed request and record a
    pending payment.
    """
    payment, client_secret = await payment_service.create_intent(
        db, caller, data.service_request_id, processor
    )
    await db.commit()
    return CreateIntentResponse(
        client_secret=client_secret,
        payment_id=str(payment.id),
        payment=payment_service.build_response(payment),
    )


@router.post("/confirm", response_model=ConfirmPaymentResponse)
async def confirm_payment(
    data: ConfirmPaymentRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
    processor: Annotated[PaymentProcessor, Depends(get_payment_processor)],
) -> ConfirmPaymentResponse:
    """결제 처리기 상태로 결제를 확인합니다.

    Reconcile the payment with the processor. A non-success outcome is
    reported with success=false, not as an error.
    """
    success, message, payment = await payment_service.confirm(
        db, caller, data.payment_id, data.payment_intent_id, processor
    )
    await db.commit()
    return ConfirmPaymentResponse(
        success=success,
        message=message,
        payment=payment_service.build_response(payment),
    )


@router.get("/{service_request_id}", response_model=PaymentResponse | None)
async def get_payment_for_request(
    service_request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    caller: Annotated[CallerContext, Depends(get_caller)],
) -> PaymentResponse | None:
    """요청의 결제를 조회합니다 — 없으면 null."""
    payment: Payment | None = await payment_service.get_for_request(db, caller, service_request_id)
    if payment is None:
        return None
    return payment_service.build_response(payment)
