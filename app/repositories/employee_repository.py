"""직원 레포지토리 — 회사 범위 직원 CRUD, 필터, 검색, 정렬.

Employee Repository — Company-scoped employee queries.
List queries apply the age filter, name search and multi-key ordering
before paging.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Employee
from app.repositories.base import BaseRepository
from app.schemas.employee import EmployeeParameters
from app.utils.pagination import PagedList, PaginationMetadata

# 정렬 가능한 컬럼 — Columns accepted by the order_by expression
SORTABLE_COLUMNS = {
    "name": Employee.name,
    "age": Employee.age,
    "position": Employee.position,
}


def parse_order_by(order_by: str | None, allowed: set[str]) -> list[tuple[str, bool]]:
    """정렬 식을 (필드, 내림차순 여부) 목록으로 변환합니다.

    Parse an expression like "name desc, age" into [("name", True), ("age", False)].
    Field names are case-insensitive; unknown fields are skipped.
    """
    if not order_by or not order_by.strip():
        return []

    clauses: list[tuple[str, bool]] = []
    for raw in order_by.split(","):
        parts = raw.strip().split()
        if not parts:
            continue
        field_name = parts[0].lower()
        if field_name not in allowed:
            continue
        descending = len(parts) > 1 and parts[1].lower() == "desc"
        clauses.append((field_name, descending))
    return clauses


def filter_by_age(query: Select, min_age: int, max_age: int) -> Select:
    """나이 범위 필터 (Inclusive age range filter)."""
    return query.where(Employee.age >= min_age, Employee.age <= max_age)


def search_by_name(query: Select, search_term: str | None) -> Select:
    """이름 부분 일치 검색 — 대소문자 무시 (Case-insensitive substring search on name)."""
    if not search_term or not search_term.strip():
        return query
    term: str = search_term.strip().lower()
    return query.where(func.lower(Employee.name).contains(term, autoescape=True))


def sort_employees(query: Select, order_by: str | None) -> Select:
    """정렬 식을 적용합니다. 유효한 필드가 없으면 이름순.

    Apply the order_by expression; falls back to ordering by name.
    """
    clauses = parse_order_by(order_by, set(SORTABLE_COLUMNS))
    if not clauses:
        return query.order_by(Employee.name)
    return query.order_by(
        *[
            SORTABLE_COLUMNS[name].desc() if descending else SORTABLE_COLUMNS[name].asc()
            for name, descending in clauses
        ]
    )


class EmployeeRepository(BaseRepository[Employee]):
    """직원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the employees table.
    Every lookup is scoped to the owning company.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Employee)

    async def get_employees(
        self,
        company_id: UUID,
        parameters: EmployeeParameters,
    ) -> PagedList[Employee]:
        """회사의 직원 목록을 필터/검색/정렬/페이징하여 조회합니다.

        Retrieve one page of a company's employees.

        Args:
            company_id: 회사 ID (Company UUID)
            parameters: 조회 파라미터 (Paging, filter, search and sort parameters)

        Returns:
            PagedList[Employee]: 직원 페이지와 메타데이터 (Page of employees with metadata)
        """
        query: Select = select(Employee).where(Employee.company_id == company_id)
        query = filter_by_age(query, parameters.min_age, parameters.max_age)
        query = search_by_name(query, parameters.search_term)
        query = sort_employees(query, parameters.order_by)

        items, total = await self.get_paginated(
            query, parameters.page_number, parameters.page_size
        )
        metadata = PaginationMetadata.build(total, parameters.page_number, parameters.page_size)
        return PagedList(items=list(items), metadata=metadata)

    async def get_employee(self, company_id: UUID, employee_id: UUID) -> Employee | None:
        """회사 범위 내에서 직원을 조회합니다 (Employee by id within a company)."""
        query: Select = select(Employee).where(
            Employee.company_id == company_id, Employee.id == employee_id
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create_employee_for_company(self, company_id: UUID, employee: Employee) -> Employee:
        """직원을 회사에 소속시켜 생성합니다 (Attach an employee to a company and add it)."""
        employee.company_id = company_id
        return await self.create(employee)

    async def delete_employee(self, employee: Employee) -> None:
        """직원을 삭제합니다 (Delete an employee)."""
        await self.delete(employee)
