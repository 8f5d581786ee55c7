"""요청 로깅 미들웨어 — 요청 ID 부여, 표준 로깅, Axiom 전송.

Request logging middleware.
Assigns (or propagates) X-Request-ID, logs every request's method, path,
status and duration through the standard logger, and ships a structured
event to Axiom when AXIOM_API_TOKEN and AXIOM_DATASET are configured.
Sensitive fields (password, token, secret) are masked before shipping.
"""

import json
import logging
import re
import time
import uuid
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.utils.logging import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER: str = "X-Request-ID"

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and query strings
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _error_reason(body: bytes) -> str:
    """오류 응답 본문에서 사유를 추출합니다 (Extract a short reason from an error body)."""
    try:
        data: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]
    if isinstance(data, dict):
        reason: Any = data.get("detail", data.get("message", data))
    else:
        reason = data
    text: str = reason if isinstance(reason, str) else json.dumps(reason, ensure_ascii=False)
    return text[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하고 선택적으로 Axiom에 전송하는 미들웨어.

    Middleware that logs every request and, when configured, ships the
    event to Axiom. The request id is stored in a ContextVar so every log
    record emitted while handling the request carries it.
    """

    def __init__(
        self,
        app: Any,
        api_token: str | None = None,
        dataset: str | None = None,
    ) -> None:
        super().__init__(app)
        token: str = settings.AXIOM_API_TOKEN if api_token is None else api_token
        self._dataset: str = settings.AXIOM_DATASET if dataset is None else dataset
        self._client: AxiomClient | None = None

        if token and self._dataset:
            self._client = AxiomClient(token=token)

    async def _read_body(self, request: Request) -> Any:
        """요청 본문을 읽고 마스킹합니다 (Read and mask a JSON request body)."""
        body_bytes: bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _mask_dict(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    def _ship(self, event: dict[str, Any]) -> None:
        """Axiom으로 이벤트를 전송합니다 — 실패는 경고로만 남깁니다.

        Send one event to Axiom; a failure is logged and never breaks the request.
        """
        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:
            logger.warning("Failed to ship request log to Axiom: %s", exc)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id: str = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        try:
            # 제외 경로 스킵 — Skip excluded paths
            if request.url.path in _SKIP_PATHS:
                response = await call_next(request)
                response.headers[REQUEST_ID_HEADER] = request_id
                return response

            return await self._dispatch_logged(request, call_next, request_id)
        finally:
            request_id_var.reset(token)

    async def _dispatch_logged(
        self, request: Request, call_next: RequestResponseEndpoint, request_id: str
    ) -> Response:
        start_time: float = time.perf_counter()
        method: str = request.method
        path: str = request.url.path

        request_body: Any = None
        if self._client is not None and method in ("POST", "PUT", "PATCH"):
            request_body = await self._read_body(request)

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 오류 응답이면 본문에서 사유 추출 후 다시 감싸기 — Capture reason and re-wrap consumed body
            if status_code >= 400 and self._client is not None:
                resp_body: bytes = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = _error_reason(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms: float = round((time.perf_counter() - start_time) * 1000, 2)
            logger.info("%s %s -> %s (%.2f ms)", method, path, status_code, duration_ms)

            if self._client is not None:
                event: dict[str, Any] = {
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                }
                if request.query_params:
                    event["query_params"] = _mask_dict(dict(request.query_params))
                if request_body is not None:
                    event["request_body"] = request_body
                if error_detail:
                    event["error"] = error_detail
                self._ship(event)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
