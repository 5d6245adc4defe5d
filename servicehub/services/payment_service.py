"""결제 서비스 — 결제 인텐트 생성 및 처리기 기준 상태 조정.

Payment Service — Creates payment intents for completed requests and
reconciles local payment rows against the payment processor.

The confirm path never trusts a client-reported outcome: it always asks
the processor for the intent's status and only then moves the local row.
At most one payment per service request may reach "succeeded"; the check
here is backed by a partial unique index in the store.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from servicehub.config import settings
from servicehub.models.payment import (
    PAYMENT_FAILED,
    PAYMENT_PENDING,
    PAYMENT_SUCCEEDED,
    Payment,
)
from servicehub.models.service_request import STATUS_COMPLETED, ServiceRequest
from servicehub.repositories.payment_repository import payment_repository
from servicehub.schemas.payment import PaymentResponse
from servicehub.services.payment_processor import (
    PaymentIntentHandle,
    PaymentProcessor,
    ProcessorStatus,
)
from servicehub.services.service_request_service import service_request_service
from servicehub.utils.caller import CallerContext
from servicehub.utils.exceptions import (
    AlreadyPaidError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)

# 달러 → 센트 — Whole dollars to minor units at the processor boundary
MINOR_UNITS_PER_DOLLAR: int = 100


class PaymentService:
    """결제 오케스트레이션 서비스."""

    def build_response(self, payment: Payment) -> PaymentResponse:
        """결제 ORM 객체를 응답 스키마로 변환합니다."""
        return PaymentResponse(
            id=str(payment.id),
            service_request_id=str(payment.service_request_id),
            amount=payment.amount,
            external_ref=payment.external_ref,
            status=payment.status,
            created_at=payment.created_at,
        )

    def _require_participant(self, request: ServiceRequest, caller: CallerContext) -> None:
        """호출자가 요청의 고객 또는 배정 기술자인지 확인합니다."""
        if caller.caller_id not in (request.client_id, request.technician_id):
            raise ForbiddenError("Access denied")

    async def create_intent(
        self,
        db: AsyncSession,
        caller: CallerContext,
        service_request_id: UUID,
        processor: PaymentProcessor,
    ) -> tuple[Payment, str]:
        """완료된 요청에 대한 결제 인텐트를 생성합니다.

        Create an external payment intent for a completed request and record
        a pending payment row with amount = quoted_price.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)
            service_request_id: 요청 UUID (Service request UUID)
            processor: 결제 처리기 (Payment processor)

        Returns:
            tuple[Payment, str]: (생성된 결제, client secret)
                                 (Created pending payment, processor client secret)

        Raises:
            NotFoundError: 요청이 없을 때 (Request does not exist)
            ForbiddenError: 요청 고객이 아닐 때 (Caller is not the request's client)
            InvalidStateError: 완료되지 않았거나 가격이 없을 때 (Not completed or no price)
            AlreadyPaidError: 이미 성공한 결제가 있을 때 (A payment already succeeded)
            UpstreamError: 처리기 호출 실패 (Processor call failed)
        """
        request: ServiceRequest = await service_request_service.get_request(db, service_request_id)
        if request.client_id != caller.caller_id:
            raise ForbiddenError("Only the client who created the request can pay for it")
        if request.status != STATUS_COMPLETED:
            raise InvalidStateError("Service request must be completed before payment")
        if request.quoted_price is None or request.quoted_price <= 0:
            raise InvalidStateError("No quoted price available")
        if await payment_repository.get_succeeded(db, request.id) is not None:
            raise AlreadyPaidError()

        handle: PaymentIntentHandle = await processor.create_intent(
            request.quoted_price * MINOR_UNITS_PER_DOLLAR,
            settings.STRIPE_CURRENCY,
            {
                "service_request_id": str(request.id),
                "client_id": str(request.client_id),
                "technician_id": str(request.technician_id) if request.technician_id else "",
            },
        )

        payment: Payment = await payment_repository.create(
            db,
            {
                "service_request_id": request.id,
                "amount": request.quoted_price,
                "external_ref": handle.external_ref,
                "status": PAYMENT_PENDING,
            },
        )
        return payment, handle.client_secret

    async def confirm(
        self,
        db: AsyncSession,
        caller: CallerContext,
        payment_id: UUID,
        payment_intent_id: str,
        processor: PaymentProcessor,
    ) -> tuple[bool, str, Payment]:
        """처리기 기준 상태로 결제를 확인합니다.

        Reconcile a payment against the processor's authoritative status.
        succeeded → row moves pending → succeeded; canceled → pending → failed;
        anything else leaves the row unchanged. Non-success is reported, not raised.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caller: 인증된 호출자 (Authenticated caller)
            payment_id: 결제 UUID (Payment UUID)
            payment_intent_id: 처리기 인텐트 ID (Processor intent id)
            processor: 결제 처리기 (Payment processor)

        Returns:
            tuple[bool, str, Payment]: (성공 여부, 메시지, 결제) (Success flag, message, payment)

        Raises:
            NotFoundError: 결제가 없을 때 (Payment does not exist)
            ForbiddenError: 요청 참여자가 아닐 때 (Caller is not a party of the request)
            BadRequestError: 인텐트 ID 불일치 (Intent id does not belong to the payment)
            AlreadyPaidError: 같은 요청의 다른 결제가 이미 성공 (Another payment already succeeded)
            UpstreamError: 처리기 호출 실패 (Processor call failed)
        """
        payment: Payment | None = await payment_repository.get_by_id(db, payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")

        request: ServiceRequest = await service_request_service.get_request(db, payment.service_request_id)
        self._require_participant(request, caller)
        if payment.external_ref != payment_intent_id:
            raise BadRequestError("Payment intent does not belong to this payment")

        processor_status: ProcessorStatus = await processor.retrieve_status(payment.external_ref)

        if processor_status == ProcessorStatus.SUCCEEDED:
            if payment.status == PAYMENT_SUCCEEDED:
                return True, "Payment confirmed", payment

            succeeded: Payment | None = await payment_repository.get_succeeded(db, request.id)
            if succeeded is not None and succeeded.id != payment.id:
                raise AlreadyPaidError()

            try:
                moved: bool = await payment_repository.update_if(
                    db, payment.id, {"status": PAYMENT_PENDING}, {"status": PAYMENT_SUCCEEDED}
                )
            except IntegrityError as exc:
                raise AlreadyPaidError() from exc

            payment = await payment_repository.get_by_id(db, payment.id)
            if not moved and payment.status != PAYMENT_SUCCEEDED:
                raise ConflictError("Payment was modified concurrently")
            return True, "Payment confirmed", payment

        if processor_status == ProcessorStatus.CANCELED:
            await payment_repository.update_if(
                db, payment.id, {"status": PAYMENT_PENDING}, {"status": PAYMENT_FAILED}
            )
            payment = await payment_repository.get_by_id(db, payment.id)
            return False, "Payment was canceled", payment

        return False, "Payment not yet completed", payment

    async def get_for_request(
        self,
        db: AsyncSession,
        caller: CallerContext,
        service_request_id: UUID,
    ) -> Payment | None:
        """요청의 결제를 조회합니다.

        Return the succeeded payment of a request if any, otherwise the
        newest payment, otherwise None.
        """
        request: ServiceRequest = await service_request_service.get_request(db, service_request_id)
        self._require_participant(request, caller)

        succeeded: Payment | None = await payment_repository.get_succeeded(db, request.id)
        if succeeded is not None:
            return succeeded
        payments = await payment_repository.list_by_request(db, request.id)
        return payments[0] if payments else None


# 싱글턴 인스턴스 — Singleton instance
payment_service: PaymentService = PaymentService()
