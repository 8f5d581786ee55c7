"""미들웨어 테스트 — 속도 제한, 캐시 헤더, 요청 ID, 예외 처리기.

Middleware tests — Rate limiting, cache validation headers, request ids
and the catch-all exception handler.
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from app.main import unhandled_exception_handler
from app.middleware.axiom_logging import AxiomLoggingMiddleware, _mask_dict
from app.middleware.cache_headers import etag_matches
from app.middleware.rate_limit import RateLimitMiddleware
from tests.conftest import auth_header


class _FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _ping_app() -> FastAPI:
    mini = FastAPI()

    @mini.get("/ping")
    async def ping() -> PlainTextResponse:
        return PlainTextResponse("pong")

    @mini.get("/health")
    async def health() -> PlainTextResponse:
        return PlainTextResponse("ok")

    return mini


# ===== 속도 제한 (Rate limiting) =====

class TestRateLimit:
    """고정 윈도우 속도 제한 테스트."""

    async def test_limit_exceeded_returns_429(self):
        """한도를 넘으면 429와 Retry-After."""
        mini = _ping_app()
        clock = _FakeClock()
        mini.add_middleware(RateLimitMiddleware, limit=2, period=300, enabled=True, clock=clock)

        async with AsyncClient(transport=ASGITransport(app=mini), base_url="http://test") as ac:
            first = await ac.get("/ping")
            second = await ac.get("/ping")
            third = await ac.get("/ping")

        assert first.status_code == 200
        assert first.headers["x-rate-limit-limit"] == "2"
        assert first.headers["x-rate-limit-remaining"] == "1"
        assert second.headers["x-rate-limit-remaining"] == "0"
        assert third.status_code == 429
        assert third.headers["retry-after"] == "300"
        assert third.json()["detail"] == "API calls quota exceeded! maximum admitted 2 per 5m."

    async def test_window_resets(self):
        """윈도우가 지나면 다시 허용됩니다."""
        mini = _ping_app()
        clock = _FakeClock()
        mini.add_middleware(RateLimitMiddleware, limit=1, period=60, enabled=True, clock=clock)

        async with AsyncClient(transport=ASGITransport(app=mini), base_url="http://test") as ac:
            assert (await ac.get("/ping")).status_code == 200
            assert (await ac.get("/ping")).status_code == 429
            clock.now += 60
            assert (await ac.get("/ping")).status_code == 200

    async def test_disabled_and_exempt_paths(self):
        """비활성화 상태와 제외 경로는 제한하지 않습니다."""
        mini = _ping_app()
        mini.add_middleware(RateLimitMiddleware, limit=1, period=60, enabled=False)

        async with AsyncClient(transport=ASGITransport(app=mini), base_url="http://test") as ac:
            responses = [await ac.get("/ping") for _ in range(3)]
        assert all(r.status_code == 200 for r in responses)
        assert "x-rate-limit-limit" not in responses[0].headers

        exempt = _ping_app()
        exempt.add_middleware(RateLimitMiddleware, limit=1, period=60, enabled=True)
        async with AsyncClient(transport=ASGITransport(app=exempt), base_url="http://test") as ac:
            health = [await ac.get("/health") for _ in range(3)]
        assert all(r.status_code == 200 for r in health)

    def test_expired_windows_are_evicted(self):
        """기간이 지난 클라이언트 윈도우는 메모리에서 제거됩니다."""
        clock = _FakeClock()
        limiter = RateLimitMiddleware(_ping_app(), limit=5, period=60, enabled=True, clock=clock)
        for i in range(200):
            limiter._hit(f"10.0.{i // 256}.{i % 256}", clock())
        assert len(limiter._windows) == 200

        clock.now += 10_000
        limiter._hit("10.1.0.1", clock())
        assert list(limiter._windows) == ["10.1.0.1"]

    def test_live_windows_survive_sweep(self):
        """아직 유효한 윈도우는 정리 후에도 카운트를 유지합니다."""
        clock = _FakeClock()
        limiter = RateLimitMiddleware(_ping_app(), limit=5, period=60, enabled=True, clock=clock)
        limiter._hit("old", clock())
        clock.now += 30
        limiter._hit("recent", clock())
        clock.now += 30
        window = limiter._hit("recent", clock())

        assert "old" not in limiter._windows
        assert window.count == 2


# ===== 캐시 헤더 (Cache headers) =====

class TestCacheHeaders:
    """ETag / Last-Modified / Cache-Control 테스트."""

    async def test_default_cache_headers(self, client: AsyncClient, user_token, company):
        """라우트가 지정하지 않으면 기본 Cache-Control."""
        res = await client.get(f"/api/companies/{company.id}/employees", headers=auth_header(user_token))
        assert res.headers["cache-control"] == "private, max-age=65, must-revalidate"
        assert res.headers["etag"].startswith('"')
        assert "last-modified" in res.headers

    async def test_if_none_match_returns_304(self, client: AsyncClient, user_token, company):
        """ETag가 일치하면 304와 빈 본문."""
        url = f"/api/companies/{company.id}"
        first = await client.get(url, headers=auth_header(user_token))
        etag = first.headers["etag"]

        second = await client.get(url, headers={**auth_header(user_token), "If-None-Match": etag})
        assert second.status_code == 304
        assert second.content == b""
        assert second.headers["etag"] == etag
        assert second.headers["cache-control"] == "public, max-age=60"

    async def test_changed_resource_gets_new_etag(self, client: AsyncClient, user_token, company):
        """리소스가 바뀌면 ETag도 바뀌고 200을 반환합니다."""
        url = f"/api/companies/{company.id}"
        etag = (await client.get(url, headers=auth_header(user_token))).headers["etag"]
        await client.put(url, json={"name": "Changed", "address": "Somewhere"}, headers=auth_header(user_token))

        res = await client.get(url, headers={**auth_header(user_token), "If-None-Match": etag})
        assert res.status_code == 200
        assert res.headers["etag"] != etag

    async def test_non_get_has_no_etag(self, client: AsyncClient, user_token):
        """POST 응답에는 ETag가 없습니다."""
        res = await client.post(
            "/api/companies", json={"name": "Post Ltd", "address": "Street"}, headers=auth_header(user_token)
        )
        assert res.status_code == 201
        assert "etag" not in res.headers

    @pytest.mark.parametrize(
        "header, expected",
        [
            (None, False),
            ('"abc"', True),
            ('W/"abc"', True),
            ('"x", "abc"', True),
            ("*", True),
            ('"other"', False),
        ],
    )
    def test_etag_matches(self, header, expected):
        assert etag_matches(header, '"abc"') is expected


# ===== 요청 로깅 (Request logging) =====

class TestRequestLogging:
    """요청 ID 및 로깅 테스트."""

    async def test_request_id_is_echoed(self, client: AsyncClient):
        """전달된 X-Request-ID를 그대로 반환합니다."""
        res = await client.get("/api/companies", headers={"X-Request-ID": "abc-123"})
        assert res.headers["x-request-id"] == "abc-123"

    async def test_request_id_is_generated(self, client: AsyncClient):
        """X-Request-ID가 없으면 생성합니다."""
        res = await client.get("/api/companies")
        assert len(res.headers["x-request-id"]) == 32

    async def test_request_is_logged(self, caplog):
        """요청마다 메서드, 경로, 상태가 로그에 남습니다."""
        mini = _ping_app()
        mini.add_middleware(AxiomLoggingMiddleware, api_token="", dataset="")

        with caplog.at_level(logging.INFO, logger="app.middleware.axiom_logging"):
            async with AsyncClient(transport=ASGITransport(app=mini), base_url="http://test") as ac:
                await ac.get("/ping")
        assert any("GET /ping -> 200" in r.getMessage() for r in caplog.records)

    def test_mask_sensitive_fields(self):
        masked = _mask_dict({"username": "jdoe", "password": "secret1234", "nested": {"token": "t"}})
        assert masked == {"username": "jdoe", "password": "***", "nested": {"token": "***"}}


# ===== 예외 처리 (Exception handling) =====

class TestExceptionHandling:
    """처리되지 않은 예외 테스트."""

    async def test_unhandled_exception_returns_500(self, caplog):
        """예외는 로그 후 표준 500 본문으로 변환됩니다."""
        mini = FastAPI()
        mini.add_exception_handler(Exception, unhandled_exception_handler)

        @mini.get("/boom")
        async def boom() -> None:
            raise RuntimeError("kaboom")

        transport = ASGITransport(app=mini, raise_app_exceptions=False)
        with caplog.at_level(logging.ERROR, logger="app.main"):
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                res = await ac.get("/boom")

        assert res.status_code == 500
        assert res.json() == {"status_code": 500, "message": "Internal Server Error."}
        assert any("Something went wrong: kaboom" in r.getMessage() for r in caplog.records)

    async def test_supported_versions_on_errors(self, client: AsyncClient):
        """오류 응답에도 api-supported-versions 헤더가 있습니다."""
        res = await client.get("/api/companies")
        assert res.status_code == 401
        assert res.headers["api-supported-versions"] == "1.0, 2.0"
