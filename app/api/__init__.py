"""API 라우터 패키지 — 모든 /api 엔드포인트를 통합합니다.

API router package — Aggregates every /api endpoint.
The version dependency runs on every route so unsupported api-version
values are rejected before authentication.
"""

from fastapi import APIRouter, Depends

from app.api.authentication import router as authentication_router
from app.api.companies import router as companies_router
from app.api.deps import get_api_version
from app.api.employees import router as employees_router

api_router: APIRouter = APIRouter(dependencies=[Depends(get_api_version)])

api_router.include_router(authentication_router, prefix="/authentication", tags=["Authentication"])
api_router.include_router(companies_router, prefix="/companies", tags=["Companies"])
api_router.include_router(
    employees_router, prefix="/companies/{company_id}/employees", tags=["Employees"]
)
