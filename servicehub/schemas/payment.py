"""결제 관련 Pydantic 요청/응답 스키마 정의.

Payment Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field


class PaymentResponse(BaseModel):
    """결제 응답 스키마."""

    id: str
    service_request_id: str
    amount: int  # 달러 단위 (Whole dollars)
    external_ref: str  # 결제 처리기 인텐트 ID (Processor intent id)
    status: str  # pending | succeeded | failed
    created_at: datetime


class CreateIntentRequest(BaseModel):
    """결제 인텐트 생성 요청 스키마."""

    service_request_id: UUID


class CreateIntentResponse(BaseModel):
    """결제 인텐트 생성 응답 스키마.

    Attributes:
        client_secret: 클라이언트 측 결제 확인 토큰 (Client-side confirmation token)
        payment_id: 생성된 결제 UUID (Created payment id)
        payment: 생성된 결제 (Created payment, status "pending")
    """

    client_secret: str
    payment_id: str
    payment: PaymentResponse


class ConfirmPaymentRequest(BaseModel):
    """결제 확인 요청 스키마.

    Attributes:
        payment_id: 결제 UUID (Local payment id)
        payment_intent_id: 결제 처리기 인텐트 ID (Processor intent id)
    """

    payment_id: UUID
    payment_intent_id: str = Field(..., min_length=1)


class ConfirmPaymentResponse(BaseModel):
    """결제 확인 응답 스키마.

    Non-success is reported with success=False, not as an error.
    """

    success: bool
    message: str
    payment: PaymentResponse
