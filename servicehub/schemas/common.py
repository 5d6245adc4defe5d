"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schemas shared across API domains.
"""

from typing import Any
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """검증 오류 응답 스키마.

    Validation error body returned with HTTP 400.

    Attributes:
        detail: 오류 요약 (Error summary)
        errors: 필드별 오류 목록 (Field-level errors from Pydantic)
    """

    detail: str
    errors: list[dict[str, Any]] = []
