"""서비스 요청 관련 Pydantic 요청/응답 스키마 정의.

Service request Pydantic request/response schema definitions.
Covers creation, the generic partial update, the completion payload,
and the response shape shared by every listing endpoint.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class ServiceRequestCreate(BaseModel):
    """서비스 요청 생성 스키마.

    Service request creation schema. The caller becomes the owning client;
    status always starts as "pending".

    Attributes:
        service_type: 서비스 유형 (Service-type label, e.g. "Plumber")
        description: 상세 설명 (Job description)
        location: 위치 (Free-text location, optionally "lat, lon")
        images: 이미지 참조 목록 (Opaque image references)
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    service_type: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    images: list[str] = Field(default_factory=list)


class ServiceRequestUpdate(BaseModel):
    """서비스 요청 부분 수정 스키마 (PATCH).

    Generic partial update. A status change is routed to the matching
    lifecycle transition; the status must be one of the closed enum values.

    Attributes:
        status: 목표 상태 (Target status)
        technician_notes: 기술자 메모 (Technician notes / completion summary)
        quoted_price: 견적 금액 (Quoted price, only together with completion)
    """

    model_config = ConfigDict(extra="forbid")

    status: str | None = Field(default=None, pattern=r"^(pending|accepted|in_progress|completed|cancelled)$")
    technician_notes: str | None = None
    quoted_price: int | None = None


class ServiceRequestComplete(BaseModel):
    """작업 완료 요청 스키마.

    Completion payload. Positivity of the price and non-emptiness of the
    summary are checked by the lifecycle service so that the PATCH path
    and the dedicated endpoint reject the same inputs.
    """

    model_config = ConfigDict(extra="forbid")

    quoted_price: int | None = None
    technician_notes: str | None = None


class ServiceRequestResponse(BaseModel):
    """서비스 요청 응답 스키마."""

    id: str
    client_id: str
    technician_id: str | None
    service_type: str
    description: str
    location: str
    status: str
    quoted_price: int | None
    technician_notes: str | None
    images: list[str]
    created_at: datetime
    updated_at: datetime
