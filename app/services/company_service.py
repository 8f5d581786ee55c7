"""회사 서비스 — 회사 CRUD 비즈니스 로직 및 DTO 매핑.

Company Service — Business logic and DTO mapping for companies.
Existence checks for single companies happen in the router dependencies;
this layer maps entities to DTOs and sequences repository calls.
"""

import logging
from typing import Sequence
from uuid import UUID

from app.models.company import Company, Employee
from app.repositories.manager import RepositoryManager
from app.schemas.company import (
    CompanyForCreation,
    CompanyForUpdate,
    CompanyResponse,
    CompanyV2Response,
)
from app.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class CompanyService:
    """회사 관련 비즈니스 로직을 처리하는 서비스.

    Service handling company business logic.
    """

    def to_response(self, company: Company) -> CompanyResponse:
        """회사 모델을 응답 스키마로 변환합니다.

        Convert a Company to its v1 DTO; full_address joins address and country.
        """
        return CompanyResponse(
            id=str(company.id),
            name=company.name,
            full_address=" ".join(part for part in (company.address, company.country) if part),
        )

    def _to_v2_response(self, company: Company) -> CompanyV2Response:
        return CompanyV2Response(id=str(company.id), name=company.name)

    def _to_entity(self, data: CompanyForCreation) -> Company:
        """생성 DTO를 회사 엔티티로 변환합니다 — 직원 포함.

        Map a creation DTO (with nested employees) to a new Company entity.
        """
        return Company(
            name=data.name,
            address=data.address,
            country=data.country,
            employees=[
                Employee(name=e.name, age=e.age, position=e.position) for e in data.employees
            ],
        )

    async def list_companies(self, repository: RepositoryManager) -> list[CompanyResponse]:
        """모든 회사 목록을 조회합니다 (v1 shape)."""
        companies: Sequence[Company] = await repository.company.get_all_companies()
        return [self.to_response(c) for c in companies]

    async def list_companies_v2(self, repository: RepositoryManager) -> list[CompanyV2Response]:
        """모든 회사 목록을 조회합니다 (v2 shape)."""
        companies: Sequence[Company] = await repository.company.get_all_companies()
        return [self._to_v2_response(c) for c in companies]

    async def get_company_collection(
        self,
        repository: RepositoryManager,
        ids: list[UUID],
    ) -> list[CompanyResponse]:
        """ID 목록에 해당하는 회사들을 조회합니다.

        Retrieve companies by ids; all of them must exist.

        Args:
            repository: 레포지토리 매니저 (Repository manager)
            ids: 회사 ID 목록 (Company UUIDs, duplicates collapsed)

        Returns:
            list[CompanyResponse]: 회사 응답 목록 (Company DTOs)

        Raises:
            NotFoundError: 일부 ID가 존재하지 않을 때 (Some ids do not exist)
        """
        unique_ids: list[UUID] = list(dict.fromkeys(ids))
        companies: Sequence[Company] = await repository.company.get_by_ids(unique_ids)
        if len(companies) != len(unique_ids):
            logger.error("Some ids are not valid in a collection")
            raise NotFoundError("Some ids are not valid in a collection")
        return [self.to_response(c) for c in companies]

    async def create_company(
        self,
        repository: RepositoryManager,
        data: CompanyForCreation,
    ) -> CompanyResponse:
        """새 회사를 생성합니다 — 함께 전달된 직원도 생성.

        Create a company (and any nested employees) and commit.
        """
        company: Company = await repository.company.create_company(self._to_entity(data))
        await repository.save()
        return self.to_response(company)

    async def create_company_collection(
        self,
        repository: RepositoryManager,
        items: list[CompanyForCreation],
    ) -> list[CompanyResponse]:
        """여러 회사를 한 번의 커밋으로 생성합니다.

        Create several companies in a single commit.
        """
        created: list[Company] = []
        for data in items:
            created.append(await repository.company.create_company(self._to_entity(data)))
        await repository.save()
        return [self.to_response(c) for c in created]

    async def update_company(
        self,
        repository: RepositoryManager,
        company: Company,
        data: CompanyForUpdate,
    ) -> None:
        """회사 정보를 갱신하고 전달된 직원을 추가합니다.

        Overwrite name/address/country and append the given employees.
        """
        company.name = data.name
        company.address = data.address
        company.country = data.country
        for e in data.employees:
            await repository.employee.create_employee_for_company(
                company.id, Employee(name=e.name, age=e.age, position=e.position)
            )
        await repository.save()

    async def delete_company(self, repository: RepositoryManager, company: Company) -> None:
        """회사를 삭제합니다 — 소속 직원도 함께 삭제 (Cascade-delete a company)."""
        await repository.company.delete_company(company)
        await repository.save()


# 싱글턴 인스턴스 — Singleton instance
company_service: CompanyService = CompanyService()
