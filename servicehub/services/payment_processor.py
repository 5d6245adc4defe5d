"""결제 처리기 연동 — 외부 결제 인텐트 생성 및 상태 조회.

Payment processor integration — creates external payment intents and
reads their authoritative status. The core only depends on the
PaymentProcessor protocol; StripePaymentProcessor is the production
implementation and is injected as a FastAPI dependency so tests can swap
in a fake.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import stripe
from starlette.concurrency import run_in_threadpool

from servicehub.config import settings
from servicehub.utils.exceptions import UpstreamError


class ProcessorStatus(str, Enum):
    """결제 처리기가 보고하는 인텐트 상태."""

    SUCCEEDED = "succeeded"
    PROCESSING = "processing"
    REQUIRES_ACTION = "requires_action"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PaymentIntentHandle:
    """생성된 인텐트 핸들.

    Attributes:
        external_ref: 처리기 인텐트 ID (Processor-side intent id)
        client_secret: 클라이언트 측 결제 확인 토큰 (Client-side confirmation token)
    """

    external_ref: str
    client_secret: str


class PaymentProcessor(Protocol):
    """결제 처리기 인터페이스."""

    async def create_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntentHandle: ...

    async def retrieve_status(self, external_ref: str) -> ProcessorStatus: ...


# Stripe PaymentIntent.status → ProcessorStatus
_STRIPE_STATUS_MAP: dict[str, ProcessorStatus] = {
    "succeeded": ProcessorStatus.SUCCEEDED,
    "processing": ProcessorStatus.PROCESSING,
    "requires_payment_method": ProcessorStatus.REQUIRES_ACTION,
    "requires_confirmation": ProcessorStatus.REQUIRES_ACTION,
    "requires_action": ProcessorStatus.REQUIRES_ACTION,
    "requires_capture": ProcessorStatus.REQUIRES_ACTION,
    "canceled": ProcessorStatus.CANCELED,
}


class StripePaymentProcessor:
    """Stripe 기반 결제 처리기.

    Stripe-backed payment processor. The stripe SDK is synchronous, so
    calls run in the threadpool. Any Stripe error becomes UpstreamError.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key: str = api_key

    def _require_key(self) -> None:
        if not self._api_key:
            raise UpstreamError("Payment processor is not configured")

    async def create_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntentHandle:
        """Stripe PaymentIntent를 생성합니다.

        Args:
            amount_minor: 최소 단위 금액 (Amount in minor units, e.g. cents)
            currency: 통화 코드 (ISO currency code)
            metadata: 인텐트 메타데이터 (Intent metadata)

        Returns:
            PaymentIntentHandle: 인텐트 ID와 client secret (Intent id and client secret)

        Raises:
            UpstreamError: Stripe 호출 실패 (Stripe call failed)
        """
        self._require_key()
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount_minor,
                currency=currency,
                metadata=metadata,
                api_key=self._api_key,
            )
        except stripe.StripeError as exc:
            raise UpstreamError(f"Failed to create payment intent: {exc.user_message or exc}") from exc
        return PaymentIntentHandle(external_ref=intent.id, client_secret=intent.client_secret)

    async def retrieve_status(self, external_ref: str) -> ProcessorStatus:
        """Stripe에서 인텐트의 현재 상태를 조회합니다.

        Raises:
            UpstreamError: Stripe 호출 실패 (Stripe call failed)
        """
        self._require_key()
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.retrieve,
                external_ref,
                api_key=self._api_key,
            )
        except stripe.StripeError as exc:
            raise UpstreamError(f"Failed to retrieve payment intent: {exc.user_message or exc}") from exc
        return _STRIPE_STATUS_MAP.get(intent.status, ProcessorStatus.UNKNOWN)


def get_payment_processor() -> PaymentProcessor:
    """FastAPI 의존성 — 설정된 결제 처리기를 반환합니다."""
    return StripePaymentProcessor(settings.STRIPE_SECRET_KEY)
