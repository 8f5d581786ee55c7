"""직원 라우터 — 회사 범위 직원 CRUD, 페이징 목록, JSON Patch.

Employees Router — Company-scoped employee endpoints.
The list supports paging (X-Pagination header), age filter, name search,
multi-key ordering and field selection; PATCH accepts an RFC 6902 document.
"""

import json
import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, Response

from app.api.deps import (
    existing_company_id,
    get_current_user,
    get_employee_parameters,
    valid_employee_for_company,
)
from app.models.company import Employee
from app.repositories.manager import RepositoryManager, get_repository
from app.schemas.employee import (
    EmployeeForCreation,
    EmployeeForUpdate,
    EmployeeParameters,
    EmployeeResponse,
)
from app.services.employee_service import employee_service
from app.utils.data_shaping import shape_data, shape_entity
from app.utils.exceptions import BadRequestError
from app.utils.formatters import negotiate
from app.utils.pagination import PaginationMetadata

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter(dependencies=[Depends(get_current_user)])


@router.api_route("", methods=["GET", "HEAD"], response_model=list[EmployeeResponse])
async def get_employees_for_company(
    request: Request,
    parameters: Annotated[EmployeeParameters, Depends(get_employee_parameters)],
    valid_company_id: Annotated[UUID, Depends(existing_company_id)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> Response:
    """회사의 직원 목록 조회 — 페이지네이션 메타데이터는 X-Pagination 헤더로 전달.

    List a company's employees. Pagination metadata is returned as JSON in
    the X-Pagination header; fields limits the returned properties.
    """
    metadata: PaginationMetadata
    employees, metadata = await employee_service.list_employees(repository, valid_company_id, parameters)
    return negotiate(
        request,
        shape_data(employees, parameters.fields),
        headers={"X-Pagination": json.dumps(metadata.model_dump())},
        root_tag="employees",
        item_tag="employee",
    )


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee_for_company(
    request: Request,
    employee: Annotated[Employee, Depends(valid_employee_for_company)],
    fields: str | None = None,
) -> Response:
    """단일 직원 조회 (Get one employee of a company; fields limits the properties)."""
    return negotiate(
        request, shape_entity(employee_service.to_response(employee), fields), item_tag="employee"
    )


@router.post("", status_code=201, response_model=EmployeeResponse)
async def create_employee_for_company(
    request: Request,
    valid_company_id: Annotated[UUID, Depends(existing_company_id)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    data: Annotated[EmployeeForCreation | None, Body()] = None,
) -> Response:
    """직원 생성 — Location 헤더로 새 리소스 위치를 반환합니다.

    Create an employee under the company; responds 201 with Location.
    """
    if data is None:
        logger.error("EmployeeForCreation object sent from client is null.")
        raise BadRequestError("EmployeeForCreation object is null")

    created: EmployeeResponse = await employee_service.create_employee(repository, valid_company_id, data)
    location: str = str(
        request.url_for("get_employee_for_company", company_id=str(valid_company_id), employee_id=created.id)
    )
    return negotiate(
        request, created.model_dump(), status_code=201, headers={"Location": location}, item_tag="employee"
    )


@router.put("/{employee_id}", status_code=204)
async def update_employee_for_company(
    employee: Annotated[Employee, Depends(valid_employee_for_company)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    data: Annotated[EmployeeForUpdate | None, Body()] = None,
) -> Response:
    """직원 정보 전체 수정 (Full update of an employee)."""
    if data is None:
        logger.error("EmployeeForUpdate object sent from client is null.")
        raise BadRequestError("EmployeeForUpdate object is null")

    await employee_service.update_employee(repository, employee, data)
    return Response(status_code=204)


@router.patch("/{employee_id}", status_code=204)
async def partially_update_employee_for_company(
    employee: Annotated[Employee, Depends(valid_employee_for_company)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    patch_doc: Annotated[list[dict[str, Any]] | None, Body()] = None,
) -> Response:
    """JSON Patch 문서로 직원 정보를 부분 수정합니다.

    Partially update an employee with a JSON Patch document, e.g.
    [{"op": "replace", "path": "/age", "value": 31}].
    """
    if patch_doc is None:
        logger.error("patchDoc object sent from client is null.")
        raise BadRequestError("patchDoc object is null")

    await employee_service.patch_employee(repository, employee, patch_doc)
    return Response(status_code=204)


@router.delete("/{employee_id}", status_code=204)
async def delete_employee_for_company(
    employee: Annotated[Employee, Depends(valid_employee_for_company)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> Response:
    """직원 삭제 (Delete an employee)."""
    await employee_service.delete_employee(repository, employee)
    return Response(status_code=204)
