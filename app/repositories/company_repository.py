"""회사 레포지토리 — 회사 CRUD 및 관련 쿼리.

Company Repository — CRUD and related queries for companies.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.company import Company
from app.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """회사 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the companies table.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Company)

    async def get_all_companies(self) -> Sequence[Company]:
        """모든 회사를 이름순으로 조회합니다 (All companies ordered by name)."""
        return await self.get_all(order_by=Company.name)

    async def get_company(self, company_id: UUID) -> Company | None:
        """회사를 ID로 조회합니다 (Company by id, or None)."""
        return await self.get_by_id(company_id)

    async def get_by_ids(self, ids: Sequence[UUID]) -> Sequence[Company]:
        """주어진 ID 목록에 해당하는 회사들을 조회합니다.

        Retrieve the companies whose ids are in ids. Missing ids are
        silently absent from the result; callers compare counts.
        """
        query: Select = select(Company).where(Company.id.in_(list(ids))).order_by(Company.name)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def create_company(self, company: Company) -> Company:
        """회사를 생성합니다. 함께 전달된 직원도 저장됩니다.

        Add a company; employees attached to it are persisted with it.
        """
        return await self.create(company)

    async def delete_company(self, company: Company) -> None:
        """회사와 소속 직원을 삭제합니다.

        Delete a company. Employees are loaded first so the ORM cascade
        removes them even on databases without enforced foreign keys.
        """
        query: Select = (
            select(Company)
            .options(selectinload(Company.employees))
            .where(Company.id == company.id)
            .execution_options(populate_existing=True)
        )
        loaded: Company = (await self.db.execute(query)).scalar_one()
        await self.delete(loaded)
