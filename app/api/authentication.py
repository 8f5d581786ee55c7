"""인증 라우터 — 회원가입 및 로그인.

Authentication Router — User registration and login (JWT issuance).
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.repositories.manager import RepositoryManager, get_repository
from app.schemas.auth import (
    RegisteredUserResponse,
    TokenResponse,
    UserForAuthentication,
    UserForRegistration,
)
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("", status_code=201, response_model=RegisteredUserResponse)
async def register_user(
    data: UserForRegistration,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> RegisteredUserResponse:
    """회원가입 — 비밀번호 정책, 중복, 역할 존재 여부를 검사합니다.

    Register a user. Responds 400 with the list of problems when the
    password policy, uniqueness or role checks fail.
    """
    return await auth_service.register_user(repository, data)


@router.post("/login", response_model=TokenResponse)
async def authenticate(
    data: UserForAuthentication,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> TokenResponse:
    """로그인 — 액세스 토큰 발급 (Login and receive a bearer token)."""
    return await auth_service.login(repository, data)
