"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API call to Axiom: endpoint, method, caller,
masked request data, status code, duration and, for failures, the error
detail. Secrets (passwords, tokens, payment client secrets) are masked.
Without AXIOM_API_TOKEN/AXIOM_DATASET the middleware is a pass-through.
"""

import json
import re
import time
from typing import Any

import jwt
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from servicehub.config import settings
from servicehub.utils.jwt import decode_token

# 마스킹 대상 필드 패턴 — Keys masked in request bodies and query params
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_DEPTH: int = 5
_MAX_LIST_ITEMS: int = 20
_MAX_ERROR_LEN: int = 500
_MAX_VALUE_LEN: int = 2000


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive keys in dicts/lists."""
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(data, dict):
        return {
            key: "***" if _SENSITIVE_KEYS.search(key) else _mask_dict(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:_MAX_LIST_ITEMS]]
    if isinstance(data, str) and len(data) > _MAX_VALUE_LEN:
        return data[:_MAX_VALUE_LEN] + "...(truncated)"
    return data


def _caller_id(request: Request) -> str | None:
    """Bearer 토큰의 sub 클레임 — Caller id from the bearer token, if valid."""
    header: str = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    try:
        return decode_token(token).get("sub")
    except jwt.InvalidTokenError:
        return None


async def _read_json_body(request: Request) -> Any:
    """요청 body를 읽어 마스킹합니다 — Read and mask a JSON request body."""
    body_bytes: bytes = await request.body()
    if not body_bytes:
        return None
    try:
        return _mask_dict(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


def _error_detail(body: bytes) -> str:
    """에러 응답 body에서 사유 추출 — Extract the detail from an error body."""
    try:
        data = json.loads(body)
        detail = data.get("detail", data) if isinstance(data, dict) else data
        text: str = detail if isinstance(detail, str) else json.dumps(detail)
    except (json.JSONDecodeError, UnicodeDecodeError):
        text = body.decode("utf-8", errors="replace")
    if len(text) > _MAX_ERROR_LEN:
        return text[:_MAX_ERROR_LEN] + "..."
    return text


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs every API call to Axiom.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Axiom 미설정 또는 제외 경로 — Pass through when unconfigured or skipped
        if not self._client or request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time: float = time.perf_counter()
        log_event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        caller_id: str | None = _caller_id(request)
        if caller_id:
            log_event["caller_id"] = caller_id
        if request.query_params:
            log_event["query_params"] = _mask_dict(dict(request.query_params))
        if request.method in ("POST", "PUT", "PATCH"):
            request_body: Any = await _read_json_body(request)
            if request_body is not None:
                log_event["request_body"] = request_body

        try:
            response: Response = await call_next(request)
            log_event["status_code"] = response.status_code

            if response.status_code >= 400:
                # body를 소비하므로 새 응답으로 다시 감쌈 — Body is consumed, so re-wrap it
                resp_body: bytes = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                log_event["error"] = _error_detail(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            log_event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            # 라우팅 후에야 채워짐 — Populated on the shared scope once routed
            if request.path_params:
                log_event["path_params"] = _mask_dict(dict(request.path_params))
            log_event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            try:
                self._client.ingest_events(self._dataset, [log_event])
            except Exception:
                pass  # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure

        return response
