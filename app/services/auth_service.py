"""인증 서비스 — 회원가입, 로그인, 토큰 발급 비즈니스 로직.

Auth Service — Business logic for user registration, credential
validation and JWT issuance.
"""

import logging
from typing import Any, Sequence

from app.models.user import Role, User
from app.repositories.manager import RepositoryManager
from app.schemas.auth import (
    RegisteredUserResponse,
    TokenResponse,
    UserForAuthentication,
    UserForRegistration,
)
from app.utils.exceptions import BadRequestError, UnauthorizedError
from app.utils.jwt import create_access_token
from app.utils.password import hash_password, password_policy_errors, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, Any]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT claims from a user and its roles.
        """
        return {
            "sub": str(user.id),
            "name": user.username,
            "roles": user.role_names,
        }

    async def register_user(
        self,
        repository: RepositoryManager,
        data: UserForRegistration,
    ) -> RegisteredUserResponse:
        """새 사용자를 등록하고 역할을 부여합니다.

        Register a user and assign the requested roles. All problems are
        collected and reported together.

        Args:
            repository: 레포지토리 매니저 (Repository manager)
            data: 회원가입 데이터 (Registration data)

        Returns:
            RegisteredUserResponse: 등록된 사용자 요약 (Registered user summary)

        Raises:
            BadRequestError: 비밀번호 정책 위반, 중복 사용자명/이메일, 존재하지 않는 역할
                             (Password policy, duplicate username/email, unknown role)
        """
        errors: list[str] = password_policy_errors(data.password)

        if await repository.user.get_by_username(data.username) is not None:
            errors.append(f"Username '{data.username}' is already taken.")
        if data.email and await repository.user.get_by_email(data.email) is not None:
            errors.append(f"Email '{data.email}' is already taken.")

        roles: Sequence[Role] = []
        if data.roles:
            roles = await repository.user.get_roles_by_names(data.roles)
            found: set[str] = {role.normalized_name for role in roles}
            for name in data.roles:
                if name.upper() not in found:
                    errors.append(f"Role {name.upper()} does not exist.")

        if errors:
            logger.info("User registration failed for %s: %s", data.username, errors)
            raise BadRequestError(errors)

        user: User = User(
            first_name=data.first_name,
            last_name=data.last_name,
            username=data.username,
            email=data.email,
            phone_number=data.phone_number,
            password_hash=hash_password(data.password),
            roles=list(roles),
        )
        await repository.user.create(user)
        await repository.save()

        return RegisteredUserResponse(id=str(user.id), username=user.username, roles=user.role_names)

    async def validate_user(
        self,
        repository: RepositoryManager,
        data: UserForAuthentication,
    ) -> User | None:
        """사용자명/비밀번호를 검증합니다 (Return the user when credentials match)."""
        user: User | None = await repository.user.get_by_username(data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            return None
        return user

    async def login(
        self,
        repository: RepositoryManager,
        data: UserForAuthentication,
    ) -> TokenResponse:
        """로그인을 처리하고 액세스 토큰을 발급합니다.

        Authenticate and issue an access token.

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
        """
        user: User | None = await self.validate_user(repository, data)
        if user is None:
            logger.warning("Authentication failed. Wrong user name or password.")
            raise UnauthorizedError("Wrong user name or password")

        return TokenResponse(token=create_access_token(self._build_jwt_payload(user)))


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
