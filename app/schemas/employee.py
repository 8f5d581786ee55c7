"""직원 관련 Pydantic 요청/응답 스키마 정의.

Employee Pydantic request/response schema definitions.
Creation and update share the same validated field set; the list query
string is bundled into EmployeeParameters.
"""

from pydantic import BaseModel, Field, field_validator

# 페이지 크기 상한 — Page size is clamped to this value
MAX_PAGE_SIZE: int = 50
# 최대 나이 기본값 — Upper bound used when max_age is not supplied
MAX_AGE_DEFAULT: int = 2**31 - 1


class EmployeeForManipulation(BaseModel):
    """직원 생성/수정 공통 스키마.

    Shared request body for employee creation and full update.

    Attributes:
        name: 직원 이름 (Required, max 30 chars)
        age: 나이 (Required, at least 18)
        position: 직책 (Required, max 20 chars)
    """

    name: str = Field(..., min_length=1, max_length=30)
    age: int = Field(..., ge=18, description="Age is required and it can't be lower than 18")
    position: str = Field(..., min_length=1, max_length=20)


class EmployeeForCreation(EmployeeForManipulation):
    """직원 생성 요청 스키마 (Employee creation request)."""


class EmployeeForUpdate(EmployeeForManipulation):
    """직원 전체 수정 요청 스키마 — PATCH 대상 DTO로도 사용.

    Employee full-update request; also the document JSON Patch operations
    are applied to.
    """


class EmployeeResponse(BaseModel):
    """직원 응답 스키마.

    Attributes:
        id: 직원 UUID (Employee identifier)
        name: 직원 이름 (Name)
        age: 나이 (Age)
        position: 직책 (Position)
    """

    id: str  # 직원 UUID 문자열 (Employee UUID as string)
    name: str
    age: int
    position: str


class EmployeeParameters(BaseModel):
    """직원 목록 조회 파라미터 — 페이징, 필터, 검색, 정렬, 셰이핑.

    Query parameters for the employee list.

    Attributes:
        page_number: 페이지 번호, 1부터 시작 (Page number, 1-based)
        page_size: 페이지 크기, 최대 50 (Page size, clamped to 50)
        min_age: 최소 나이 (Minimum age filter, inclusive)
        max_age: 최대 나이 (Maximum age filter, inclusive)
        search_term: 이름 검색어 (Case-insensitive name search)
        order_by: 정렬 식 (e.g. "name desc, age")
        fields: 반환 필드 목록 (Comma-separated fields to return)
    """

    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    min_age: int = Field(default=0, ge=0)
    max_age: int = MAX_AGE_DEFAULT
    search_term: str | None = None
    order_by: str | None = "name"
    fields: str | None = None

    @field_validator("page_size")
    @classmethod
    def _clamp_page_size(cls, value: int) -> int:
        return min(value, MAX_PAGE_SIZE)

    @property
    def valid_age_range(self) -> bool:
        """나이 범위 유효성 (True when max_age >= min_age)."""
        return self.max_age >= self.min_age
