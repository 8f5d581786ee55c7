"""캐시 헤더 미들웨어 — ETag, Last-Modified, Cache-Control, 304 처리.

Cache headers middleware.
Successful GET/HEAD responses get a strong ETag computed from the body,
a Last-Modified timestamp and, unless the route already set one, the
default Cache-Control policy. A request whose If-None-Match matches the
ETag receives 304 Not Modified with no body. Nothing is stored server-side.
"""

import hashlib
from email.utils import formatdate
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

# 304 응답에 유지할 헤더 — Headers carried over onto a 304
_NOT_MODIFIED_HEADERS = ("cache-control", "etag", "last-modified", "vary", "x-request-id")


def compute_etag(body: bytes) -> str:
    """응답 본문으로 강한 ETag를 계산합니다 (Strong ETag from the body digest)."""
    return f'"{hashlib.sha256(body).hexdigest()}"'


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    """If-None-Match 헤더가 ETag와 일치하는지 확인합니다 ("*" 포함)."""
    if not if_none_match:
        return False
    candidates: set[str] = {tag.strip() for tag in if_none_match.split(",")}
    if "*" in candidates:
        return True
    # W/ 접두사 비교 무시 — Weak comparison for If-None-Match
    return etag in {tag[2:] if tag.startswith("W/") else tag for tag in candidates}


class CacheHeadersMiddleware(BaseHTTPMiddleware):
    """GET/HEAD 200 응답에 검증 헤더를 추가하는 미들웨어.

    Middleware adding validation and expiration headers to successful
    GET/HEAD responses.

    Args:
        app: ASGI 앱 (Wrapped ASGI app)
        max_age: 기본 Cache-Control max-age 초 (Default max-age in seconds)
    """

    def __init__(self, app: Any, max_age: int | None = None) -> None:
        super().__init__(app)
        self.default_cache_control: str = (
            f"private, max-age={settings.CACHE_MAX_AGE if max_age is None else max_age}, must-revalidate"
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response: Response = await call_next(request)
        if request.method not in ("GET", "HEAD") or response.status_code != 200:
            return response

        body: bytes = b""
        async for chunk in response.body_iterator:
            body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

        headers: dict[str, str] = dict(response.headers)
        etag: str = compute_etag(body)
        headers["etag"] = etag
        headers.setdefault("last-modified", formatdate(usegmt=True))
        headers.setdefault("cache-control", self.default_cache_control)

        if etag_matches(request.headers.get("if-none-match"), etag):
            return Response(
                status_code=304,
                headers={k: v for k, v in headers.items() if k in _NOT_MODIFIED_HEADERS},
            )

        return Response(
            content=body,
            status_code=response.status_code,
            headers=headers,
            media_type=response.media_type,
        )
