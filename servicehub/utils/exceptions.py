"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the marketplace error
taxonomy. Services raise these directly; FastAPI turns them into JSON
responses with the matching status code.

Usage:
    from servicehub.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("Service request not found")
    raise ConflictError("Service request was already accepted")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a referenced user, service request, or payment does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when attempting to create a resource that violates a uniqueness
    constraint (e.g. signing up with an email that is already registered).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 상태 전이 경합에서 패배했을 때 사용.

    409 Conflict exception for a lost race on a state transition.
    Raised when the conditional UPDATE guarding a transition matched no row
    because another caller moved the request first (e.g. two technicians
    accepting the same pending request).

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Service request was modified by another user") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the caller is authenticated but lacks the required role or
    ownership (e.g. a client trying to accept a request).

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised for user-correctable input problems that Pydantic cannot catch
    on its own (e.g. completing a job without a positive price).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidStateError(HTTPException):
    """400 예외 — 현재 라이프사이클 상태에서 허용되지 않는 작업.

    400 exception for an operation that is not valid in the current
    lifecycle state (e.g. starting a pending request, paying an
    uncompleted one, mutating a completed request).

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Operation not allowed in the current state") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AlreadyPaidError(HTTPException):
    """400 예외 — 이미 결제가 완료된 요청.

    400 exception raised when a service request already has a succeeded payment.

    Args:
        detail: 오류 메시지 (Error message, default: "Payment already completed")
    """

    def __init__(self, detail: str = "Payment already completed") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UpstreamError(HTTPException):
    """502 Bad Gateway 예외 — 외부 결제 처리기 호출 실패.

    502 exception raised when the payment processor is unreachable or
    rejects the call.

    Args:
        detail: 오류 메시지 (Error message, default: "Payment processor error")
    """

    def __init__(self, detail: str = "Payment processor error") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
