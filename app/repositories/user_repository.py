"""사용자 레포지토리 — 인증용 사용자/역할 조회.

User Repository — User and role lookups used by authentication.
"""

from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role, User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_username(self, username: str) -> User | None:
        """사용자명으로 조회합니다 — 대소문자 무시.

        Retrieve a user by username, case-insensitively.
        """
        query: Select = select(User).where(func.lower(User.username) == username.lower())
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """이메일로 조회합니다 — 대소문자 무시 (User by email, case-insensitive)."""
        query: Select = select(User).where(func.lower(User.email) == email.lower())
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_roles_by_names(self, names: Sequence[str]) -> Sequence[Role]:
        """정규화된 이름으로 역할을 조회합니다.

        Retrieve roles whose normalized name matches any of names.
        """
        normalized: list[str] = [name.upper() for name in names]
        query: Select = select(Role).where(Role.normalized_name.in_(normalized))
        result = await self.db.execute(query)
        return result.scalars().all()
