"""레포지토리 테스트 — 존재 여부 확인.

Repository tests — Existence checks issued without loading rows.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.manager import RepositoryManager


class TestExists:
    """BaseRepository.exists 테스트."""

    async def test_existing_company(self, db: AsyncSession, company):
        repository = RepositoryManager(db)
        assert await repository.company.exists(company.id) is True

    async def test_missing_company(self, db: AsyncSession, company):
        repository = RepositoryManager(db)
        assert await repository.company.exists(uuid.uuid4()) is False

    async def test_existing_employee(self, db: AsyncSession, company):
        repository = RepositoryManager(db)
        employee_id = company.employees[0].id
        assert await repository.employee.exists(employee_id) is True

    async def test_deleted_company_no_longer_exists(self, db: AsyncSession, company):
        repository = RepositoryManager(db)
        await repository.company.delete_company(company)
        await repository.save()
        assert await repository.company.exists(company.id) is False
