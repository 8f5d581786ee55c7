"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point.
Configures logging, CORS, rate limiting, cache headers, request logging,
API version advertisement, exception handlers, health check and the /api
router.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.middleware.cache_headers import CacheHeadersMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.schemas.common import ErrorDetails
from app.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Multi-tenant REST API for companies and their employees.",
    docs_url="/docs",
    redoc_url="/redoc",
)

# 미들웨어는 나중에 추가된 것이 바깥쪽 — Later additions wrap earlier ones
app.add_middleware(CacheHeadersMiddleware)
app.add_middleware(AxiomLoggingMiddleware)
app.add_middleware(RateLimitMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware (wrapped only by add_supported_versions)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Pagination", "api-supported-versions", "ETag", "Location"],
)


@app.middleware("http")
async def add_supported_versions(request: Request, call_next):
    """모든 응답에 지원 API 버전을 알립니다 (Advertise supported API versions)."""
    response = await call_next(request)
    response.headers["api-supported-versions"] = ", ".join(settings.API_SUPPORTED_VERSIONS)
    return response


def _is_null_body_error(error: dict) -> bool:
    """본문 누락/null/JSON 파싱 오류 여부 (Missing, null or malformed body)."""
    loc: tuple = tuple(error.get("loc", ()))
    if error.get("type") == "json_invalid":
        return True
    return loc == ("body",) and error.get("type") in ("missing", "model_type", "model_attributes_type")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 오류 처리 — 본문 누락/파싱 실패와 잘못된 파라미터는 400, 필드 오류는 422.

    A missing, null or unparsable body and malformed path/query/header
    values yield 400; field-level body validation failures yield 422.
    """
    errors: list = list(exc.errors())
    if any(_is_null_body_error(e) for e in errors):
        logger.error("Object sent from client is null or malformed.")
        return JSONResponse(status_code=400, content={"detail": "Object sent from client is null."})

    detail = jsonable_encoder(errors)
    if any(e.get("loc", ("body",))[0] != "body" for e in errors):
        return JSONResponse(status_code=400, content={"detail": detail})

    logger.error("Invalid model state for the %s request to %s", request.method, request.url.path)
    return JSONResponse(status_code=422, content={"detail": detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 — 로그 후 500 (Log and answer 500)."""
    logger.error("Something went wrong: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=ErrorDetails(status_code=500, message="Internal Server Error.").model_dump(),
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api import api_router  # noqa: E402

app.include_router(api_router, prefix="/api")
