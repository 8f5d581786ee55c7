"""FastAPI 의존성 주입 모듈 — 인증, 권한, 버전, 리소스 존재 확인.

FastAPI dependency injection module.
Provides reusable dependencies for extracting the current user from JWT,
enforcing role-based access control, resolving the requested API version,
and loading the company/employee a route operates on (404 when absent).

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 서명, 만료, 발급자, 대상자를 검증
       (decode_token verifies signature, lifetime, issuer and audience)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)

Dependency Order:
    인증 → 존재 확인 → 본문 검증 순서로 실행됩니다.
    (Authentication runs first, then existence checks, then FastAPI's body
    validation, so an unknown company yields 404 even with an invalid body.)
"""

import logging
from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.models.company import Company, Employee
from app.models.user import User
from app.repositories.manager import RepositoryManager, get_repository
from app.schemas.employee import MAX_AGE_DEFAULT, EmployeeParameters
from app.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from app.utils.jwt import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 None (Missing header yields None; we raise 401 ourselves)
security: HTTPBearer = HTTPBearer(auto_error=False)

API_VERSION_HEADER: str = "api-version"


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials, may be None)
        repository: 레포지토리 매니저 (Repository manager)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user, roles loaded)

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료 또는 사용자 없음
                           (Missing, invalid or expired token, or unknown user)
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    try:
        payload: dict = decode_token(credentials.credentials)
        user_id: UUID = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await repository.user.get_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def require_roles(*roles: str) -> Callable[..., Awaitable[User]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory enforcing that the current user holds at least one
    of the given roles (compared case-insensitively).

    Args:
        roles: 허용되는 역할 이름 (Accepted role names)

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
        (FastAPI dependency returning the User or raising 403)
    """
    accepted: set[str] = {role.upper() for role in roles}

    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        held: set[str] = {role.normalized_name for role in current_user.roles}
        if not held & accepted:
            raise ForbiddenError()
        return current_user
    return _check


# 편의 의존성 — Pre-configured role dependency
require_manager = require_roles("Manager")


def get_api_version(request: Request) -> str:
    """요청된 API 버전을 헤더 또는 쿼리 문자열에서 결정합니다.

    Resolve the requested API version from the api-version header or query
    parameter, defaulting to API_DEFAULT_VERSION.

    Raises:
        BadRequestError: 지원하지 않는 버전 (Unsupported version)
    """
    version: str | None = request.headers.get(API_VERSION_HEADER) or request.query_params.get(
        API_VERSION_HEADER
    )
    if not version:
        return settings.API_DEFAULT_VERSION
    if version not in settings.API_SUPPORTED_VERSIONS:
        raise BadRequestError(
            f"The HTTP resource does not support the API version '{version}'."
        )
    return version


async def valid_company(
    company_id: UUID,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> Company:
    """경로의 회사를 로드합니다 — 없으면 404.

    Load the company named by the path; 404 when it does not exist.
    """
    company: Company | None = await repository.company.get_company(company_id)
    if company is None:
        logger.info("Company with id: %s doesn't exist in the database.", company_id)
        raise NotFoundError(f"Company with id: {company_id} doesn't exist in the database.")
    return company


async def existing_company_id(
    company_id: UUID,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> UUID:
    """경로의 회사 ID가 존재하는지만 확인합니다 — 없으면 404.

    Check that the company named by the path exists without loading it.
    """
    if not await repository.company.exists(company_id):
        logger.info("Company with id: %s doesn't exist in the database.", company_id)
        raise NotFoundError(f"Company with id: {company_id} doesn't exist in the database.")
    return company_id


async def valid_employee_for_company(
    employee_id: UUID,
    valid_company_id: Annotated[UUID, Depends(existing_company_id)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> Employee:
    """회사에 속한 직원을 로드합니다 — 없으면 404.

    Load the employee scoped to the (already validated) company.
    """
    employee: Employee | None = await repository.employee.get_employee(valid_company_id, employee_id)
    if employee is None:
        logger.info("Employee with id: %s doesn't exist in the database.", employee_id)
        raise NotFoundError(f"Employee with id: {employee_id} doesn't exist in the database.")
    return employee


def get_employee_parameters(
    page_number: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1)] = 10,
    min_age: Annotated[int, Query(ge=0)] = 0,
    max_age: Annotated[int, Query(ge=0)] = MAX_AGE_DEFAULT,
    search_term: str | None = None,
    order_by: str | None = "name",
    fields: str | None = None,
) -> EmployeeParameters:
    """직원 목록 쿼리 문자열을 EmployeeParameters로 묶습니다.

    Bundle the employee list query string.

    Raises:
        BadRequestError: max_age < min_age
    """
    parameters = EmployeeParameters(
        page_number=page_number,
        page_size=page_size,
        min_age=min_age,
        max_age=max_age,
        search_term=search_term,
        order_by=order_by,
        fields=fields,
    )
    if not parameters.valid_age_range:
        raise BadRequestError("Max age can't be less than min age.")
    return parameters
