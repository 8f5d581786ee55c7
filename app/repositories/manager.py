"""레포지토리 매니저 — 요청 단위 레포지토리 집합과 저장.

Repository Manager — Aggregation point exposing the per-entity
repositories for one request's session, plus a single save().
Repositories are created lazily on first access.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.repositories.company_repository import CompanyRepository
from app.repositories.employee_repository import EmployeeRepository
from app.repositories.user_repository import UserRepository


class RepositoryManager:
    """회사/직원/사용자 레포지토리를 묶는 작업 단위.

    Unit of work over a single AsyncSession.

    Attributes:
        db: 요청 단위 비동기 세션 (Request-scoped async session)
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db: AsyncSession = db
        self._company: CompanyRepository | None = None
        self._employee: EmployeeRepository | None = None
        self._user: UserRepository | None = None

    @property
    def company(self) -> CompanyRepository:
        if self._company is None:
            self._company = CompanyRepository(self.db)
        return self._company

    @property
    def employee(self) -> EmployeeRepository:
        if self._employee is None:
            self._employee = EmployeeRepository(self.db)
        return self._employee

    @property
    def user(self) -> UserRepository:
        if self._user is None:
            self._user = UserRepository(self.db)
        return self._user

    async def save(self) -> None:
        """변경사항을 커밋합니다 (Commit the unit of work)."""
        await self.db.commit()


async def get_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RepositoryManager:
    """요청 세션에 바인딩된 RepositoryManager 의존성.

    FastAPI dependency returning a RepositoryManager bound to the request session.
    """
    return RepositoryManager(db)
