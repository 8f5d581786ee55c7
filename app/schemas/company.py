"""회사 관련 Pydantic 요청/응답 스키마 정의.

Company Pydantic request/response schema definitions.
Covers v1 and v2 response shapes and creation/update bodies that may
carry nested employees.
"""

from pydantic import BaseModel, Field

from app.schemas.employee import EmployeeForCreation


class CompanyForManipulation(BaseModel):
    """회사 생성/수정 공통 스키마.

    Shared request body for company creation and update.

    Attributes:
        name: 회사 이름 (Required, max 60 chars)
        address: 회사 주소 (Required, max 60 chars)
        country: 국가 (Optional)
        employees: 함께 생성할 직원 목록 (Employees created alongside, optional)
    """

    name: str = Field(..., min_length=1, max_length=60)
    address: str = Field(..., min_length=1, max_length=60)
    country: str | None = Field(default=None, max_length=60)
    employees: list[EmployeeForCreation] = Field(default_factory=list)


class CompanyForCreation(CompanyForManipulation):
    """회사 생성 요청 스키마 (Company creation request)."""


class CompanyForUpdate(CompanyForManipulation):
    """회사 수정 요청 스키마 — 전달된 직원은 추가됩니다.

    Company update request; listed employees are appended to the company.
    """


class CompanyResponse(BaseModel):
    """회사 응답 스키마 (v1).

    Attributes:
        id: 회사 UUID (Company identifier)
        name: 회사 이름 (Company name)
        full_address: 주소 + 국가 (Address and country joined by a space)
    """

    id: str
    name: str
    full_address: str


class CompanyV2Response(BaseModel):
    """회사 응답 스키마 (v2) — 식별자와 이름만 포함."""

    id: str
    name: str
