"""회사 라우터 — 회사 CRUD, 컬렉션 생성/조회, 버전별 목록.

Companies Router — CRUD endpoints for companies, collection endpoints
and the version-dependent list. Every endpoint requires a bearer token;
listing companies additionally requires the Manager role.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request, Response

from app.api.deps import get_api_version, get_current_user, require_manager, valid_company
from app.models.company import Company
from app.repositories.manager import RepositoryManager, get_repository
from app.schemas.company import (
    CompanyForCreation,
    CompanyForUpdate,
    CompanyResponse,
    CompanyV2Response,
)
from app.services.company_service import company_service
from app.utils.exceptions import BadRequestError
from app.utils.formatters import negotiate

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter(dependencies=[Depends(get_current_user)])


def _parse_ids(ids: str) -> list[UUID]:
    """쉼표로 구분된 ID 문자열을 UUID 목록으로 변환합니다.

    Raises:
        BadRequestError: 비어 있거나 잘못된 UUID (Empty list or malformed id)
    """
    parts: list[str] = [part.strip() for part in ids.split(",") if part.strip()]
    if not parts:
        logger.error("Parameter ids is null")
        raise BadRequestError("Parameter ids is null")
    try:
        return [UUID(part) for part in parts]
    except ValueError:
        logger.error("Parameter ids contains an invalid id")
        raise BadRequestError("Parameter ids contains an invalid id")


@router.get(
    "",
    response_model=list[CompanyResponse] | list[CompanyV2Response],
    dependencies=[Depends(require_manager)],
)
async def get_companies(
    request: Request,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    version: Annotated[str, Depends(get_api_version)],
) -> Response:
    """회사 목록 조회 — api-version 2.0이면 v2 형태로 반환.

    List companies. Version 2.0 returns only id and name.
    """
    if version == "2.0":
        companies_v2: list[CompanyV2Response] = await company_service.list_companies_v2(repository)
        return negotiate(request, [c.model_dump() for c in companies_v2], root_tag="companies", item_tag="company")

    companies: list[CompanyResponse] = await company_service.list_companies(repository)
    return negotiate(request, [c.model_dump() for c in companies], root_tag="companies", item_tag="company")


@router.options("")
async def get_companies_options() -> Response:
    """지원하는 HTTP 메서드를 Allow 헤더로 반환합니다 (Advertise allowed methods)."""
    return Response(status_code=200, headers={"Allow": "GET, OPTIONS, POST"})


@router.get("/collection/({ids})", response_model=list[CompanyResponse])
async def get_company_collection(
    ids: str,
    request: Request,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> Response:
    """ID 목록으로 회사 컬렉션을 조회합니다 — 하나라도 없으면 404.

    Retrieve the companies named by a comma-separated id list.
    """
    companies: list[CompanyResponse] = await company_service.get_company_collection(
        repository, _parse_ids(ids)
    )
    return negotiate(request, [c.model_dump() for c in companies], root_tag="companies", item_tag="company")


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    request: Request,
    company: Annotated[Company, Depends(valid_company)],
) -> Response:
    """단일 회사 조회 (Get one company; cacheable for 60 seconds)."""
    return negotiate(
        request,
        company_service.to_response(company).model_dump(),
        headers={"Cache-Control": "public, max-age=60"},
        item_tag="company",
    )


@router.post("", status_code=201, response_model=CompanyResponse)
async def create_company(
    request: Request,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    data: Annotated[CompanyForCreation | None, Body()] = None,
) -> Response:
    """회사 생성 — 함께 전달된 직원도 생성되며 Location 헤더를 반환합니다.

    Create a company (optionally with employees); responds 201 with Location.
    """
    if data is None:
        logger.error("CompanyForCreation object sent from client is null.")
        raise BadRequestError("CompanyForCreation object is null")

    created: CompanyResponse = await company_service.create_company(repository, data)
    location: str = str(request.url_for("get_company", company_id=created.id))
    return negotiate(
        request, created.model_dump(), status_code=201, headers={"Location": location}, item_tag="company"
    )


@router.post("/collection", status_code=201, response_model=list[CompanyResponse])
async def create_company_collection(
    request: Request,
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    data: Annotated[list[CompanyForCreation] | None, Body()] = None,
) -> Response:
    """여러 회사를 한 번에 생성합니다 (Create several companies at once)."""
    if data is None:
        logger.error("Company collection sent from client is null.")
        raise BadRequestError("Company collection is null")

    created: list[CompanyResponse] = await company_service.create_company_collection(repository, data)
    ids: str = ",".join(c.id for c in created)
    location: str = str(request.url_for("get_company_collection", ids=ids))
    return negotiate(
        request,
        [c.model_dump() for c in created],
        status_code=201,
        headers={"Location": location},
        root_tag="companies",
        item_tag="company",
    )


@router.put("/{company_id}", status_code=204)
async def update_company(
    company: Annotated[Company, Depends(valid_company)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
    data: Annotated[CompanyForUpdate | None, Body()] = None,
) -> Response:
    """회사 정보 수정 — 전달된 직원은 추가됩니다 (Update a company, appending employees)."""
    if data is None:
        logger.error("CompanyForUpdate object sent from client is null.")
        raise BadRequestError("CompanyForUpdate object is null")

    await company_service.update_company(repository, company, data)
    return Response(status_code=204)


@router.delete("/{company_id}", status_code=204)
async def delete_company(
    company: Annotated[Company, Depends(valid_company)],
    repository: Annotated[RepositoryManager, Depends(get_repository)],
) -> Response:
    """회사 삭제 — 소속 직원도 함께 삭제됩니다 (Cascade-delete a company)."""
    await company_service.delete_company(repository, company)
    return Response(status_code=204)
