"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the SQLAlchemy
metadata, which Alembic and relationship resolution rely on.

Modules:
    user: 사용자 (Users with client/technician role, skills, availability)
    service_request: 서비스 요청 (Service requests and their lifecycle status)
    payment: 결제 (Payments reconciled against the payment processor)
"""

from servicehub.models.user import User
from servicehub.models.service_request import ServiceRequest
from servicehub.models.payment import Payment

__all__ = [
    "User",
    "ServiceRequest",
    "Payment",
]
