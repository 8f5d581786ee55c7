"""직원 서비스 — 직원 CRUD, JSON Patch 적용, DTO 매핑.

Employee Service — Business logic for company-scoped employees.
Handles listing with pagination metadata, creation, full update and
JSON Patch (RFC 6902) partial update with re-validation.
"""

import logging
from typing import Any
from uuid import UUID

import jsonpatch
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from app.models.company import Employee
from app.repositories.manager import RepositoryManager
from app.schemas.employee import (
    EmployeeForCreation,
    EmployeeForUpdate,
    EmployeeParameters,
    EmployeeResponse,
)
from app.utils.exceptions import UnprocessableEntityError
from app.utils.pagination import PagedList, PaginationMetadata

logger = logging.getLogger(__name__)


class EmployeeService:
    """직원 관련 비즈니스 로직을 처리하는 서비스.

    Service handling employee business logic. Callers pass entities that
    have already been checked for existence.
    """

    def to_response(self, employee: Employee) -> EmployeeResponse:
        """직원 모델을 응답 스키마로 변환합니다 (Employee → EmployeeResponse)."""
        return EmployeeResponse(
            id=str(employee.id),
            name=employee.name,
            age=employee.age,
            position=employee.position,
        )

    def _to_update_dto(self, employee: Employee) -> EmployeeForUpdate:
        return EmployeeForUpdate(name=employee.name, age=employee.age, position=employee.position)

    def _apply(self, data: EmployeeForUpdate, employee: Employee) -> None:
        """수정 DTO 값을 엔티티에 반영합니다 (Copy DTO values onto the entity)."""
        employee.name = data.name
        employee.age = data.age
        employee.position = data.position

    async def list_employees(
        self,
        repository: RepositoryManager,
        company_id: UUID,
        parameters: EmployeeParameters,
    ) -> tuple[list[EmployeeResponse], PaginationMetadata]:
        """회사의 직원 페이지와 페이지네이션 메타데이터를 반환합니다.

        Return one page of employee DTOs together with its metadata.

        Args:
            repository: 레포지토리 매니저 (Repository manager)
            company_id: 회사 ID (Company UUID, already validated)
            parameters: 조회 파라미터 (List parameters)

        Returns:
            tuple: (직원 응답 목록, 메타데이터) (Employee DTOs and pagination metadata)
        """
        page: PagedList[Employee] = await repository.employee.get_employees(company_id, parameters)
        return [self.to_response(e) for e in page], page.metadata

    async def create_employee(
        self,
        repository: RepositoryManager,
        company_id: UUID,
        data: EmployeeForCreation,
    ) -> EmployeeResponse:
        """회사에 새 직원을 생성합니다 (Create an employee under a company)."""
        employee: Employee = Employee(name=data.name, age=data.age, position=data.position)
        await repository.employee.create_employee_for_company(company_id, employee)
        await repository.save()
        return self.to_response(employee)

    async def update_employee(
        self,
        repository: RepositoryManager,
        employee: Employee,
        data: EmployeeForUpdate,
    ) -> None:
        """직원 정보를 전체 수정합니다 (Full update of an employee)."""
        self._apply(data, employee)
        await repository.save()

    async def patch_employee(
        self,
        repository: RepositoryManager,
        employee: Employee,
        patch_doc: list[dict[str, Any]],
    ) -> None:
        """JSON Patch 문서를 직원에 적용합니다.

        Apply a JSON Patch document to the employee's update DTO, re-validate
        the result, then copy it back onto the entity and commit.

        Args:
            repository: 레포지토리 매니저 (Repository manager)
            employee: 대상 직원 (Existing employee entity)
            patch_doc: RFC 6902 연산 목록 (List of patch operations)

        Raises:
            UnprocessableEntityError: 패치 적용 실패 또는 검증 실패
                                      (Patch could not be applied or result is invalid)
        """
        document: dict[str, Any] = self._to_update_dto(employee).model_dump()
        try:
            patched: Any = jsonpatch.apply_patch(document, patch_doc)
        except (jsonpatch.JsonPatchException, jsonpatch.JsonPointerException) as exc:
            logger.error("Invalid model state for the patch document: %s", exc)
            raise UnprocessableEntityError(str(exc)) from exc

        if not isinstance(patched, dict):
            logger.error("Invalid model state for the patch document")
            raise UnprocessableEntityError("The patch document must produce an object")

        unknown: set[str] = set(patched) - set(EmployeeForUpdate.model_fields)
        if unknown:
            logger.error("Invalid model state for the patch document")
            raise UnprocessableEntityError(
                [f"The target location specified by path segment '{name}' was not found." for name in sorted(unknown)]
            )

        try:
            employee_to_patch: EmployeeForUpdate = EmployeeForUpdate.model_validate(patched)
        except ValidationError as exc:
            logger.error("Invalid model state for the patch document")
            raise UnprocessableEntityError(jsonable_encoder(exc.errors(include_url=False))) from exc

        self._apply(employee_to_patch, employee)
        await repository.save()

    async def delete_employee(self, repository: RepositoryManager, employee: Employee) -> None:
        """직원을 삭제합니다 (Delete an employee)."""
        await repository.employee.delete_employee(employee)
        await repository.save()


# 싱글턴 인스턴스 — Singleton instance
employee_service: EmployeeService = EmployeeService()
