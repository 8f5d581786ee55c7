"""요청 속도 제한 미들웨어 — 클라이언트 IP별 고정 윈도우.

Rate limiting middleware.
Counts requests per client IP in fixed windows of RATE_LIMIT_PERIOD_SECONDS;
once RATE_LIMIT_REQUESTS is exceeded the client receives 429 until the
window resets. Every counted response carries X-Rate-Limit-* headers.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings

logger = logging.getLogger(__name__)

# 속도 제한 제외 경로 — Paths never counted
_EXEMPT_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


@dataclass
class _Window:
    """클라이언트별 현재 윈도우 상태 (Current window for one client)."""

    started_at: float
    count: int = 0


def _format_period(seconds: int) -> str:
    """기간을 사람이 읽기 쉬운 문자열로 (300 → "5m", 45 → "45s")."""
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """클라이언트 IP별 고정 윈도우 속도 제한.

    Fixed-window, in-memory rate limiter keyed by client IP.

    Args:
        app: ASGI 앱 (Wrapped ASGI app)
        limit: 윈도우당 허용 요청 수 (Requests allowed per window)
        period: 윈도우 길이 초 (Window length in seconds)
        enabled: 비활성화 시 통과 (Pass-through when False)
        clock: 시간 함수 (Time source, injectable for tests)
    """

    def __init__(
        self,
        app: Any,
        limit: int | None = None,
        period: int | None = None,
        enabled: bool | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.limit: int = settings.RATE_LIMIT_REQUESTS if limit is None else limit
        self.period: int = settings.RATE_LIMIT_PERIOD_SECONDS if period is None else period
        self.enabled: bool = settings.RATE_LIMIT_ENABLED if enabled is None else enabled
        self._clock: Callable[[], float] = clock
        self._windows: dict[str, _Window] = {}
        self._last_sweep: float = clock()

    def _client_key(self, request: Request) -> str:
        """클라이언트 식별 키 — uvicorn --proxy-headers가 client를 실제 IP로 설정."""
        if request.client and request.client.host:
            return request.client.host
        return "unknown"

    def _sweep(self, now: float) -> None:
        """만료된 윈도우 제거 — Drop windows whose period has elapsed."""
        expired: list[str] = [
            key for key, window in self._windows.items() if now - window.started_at >= self.period
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def _hit(self, key: str, now: float) -> _Window:
        # 기간마다 한 번 전체 정리 (at most one full sweep per period)
        if now - self._last_sweep >= self.period:
            self._sweep(now)
        window: _Window | None = self._windows.get(key)
        if window is None or now - window.started_at >= self.period:
            window = _Window(started_at=now)
            self._windows[key] = window
        window.count += 1
        return window

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.enabled or request.url.path.startswith(_EXEMPT_PATHS):
            return await call_next(request)

        now: float = self._clock()
        key: str = self._client_key(request)
        window: _Window = self._hit(key, now)
        reset_in: int = max(0, math.ceil(window.started_at + self.period - now))
        headers: dict[str, str] = {
            "X-Rate-Limit-Limit": str(self.limit),
            "X-Rate-Limit-Remaining": str(max(0, self.limit - window.count)),
            "X-Rate-Limit-Reset": str(reset_in),
        }

        if window.count > self.limit:
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            return JSONResponse(
                status_code=429,
                content={
                    "detail": f"API calls quota exceeded! maximum admitted {self.limit} "
                    f"per {_format_period(self.period)}."
                },
                headers={**headers, "Retry-After": str(reset_in)},
            )

        response: Response = await call_next(request)
        response.headers.update(headers)
        return response
