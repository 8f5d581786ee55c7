"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides the PagedList container returned by list repositories and the
metadata model serialized into the X-Pagination response header.
"""

import math
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class PaginationMetadata(BaseModel):
    """페이지네이션 메타데이터 모델.

    Pagination metadata emitted as JSON in the X-Pagination header.

    Attributes:
        current_page: 현재 페이지 번호 (Current page number, 1-based)
        total_pages: 전체 페이지 수 (Total number of pages)
        page_size: 페이지당 항목 수 (Items per page)
        total_count: 전체 항목 수 (Total count across all pages)
        has_previous: 이전 페이지 존재 여부 (Whether a previous page exists)
        has_next: 다음 페이지 존재 여부 (Whether a next page exists)
    """

    current_page: int
    total_pages: int
    page_size: int
    total_count: int
    has_previous: bool
    has_next: bool

    @classmethod
    def build(cls, total_count: int, page_number: int, page_size: int) -> "PaginationMetadata":
        """전체 개수와 페이지 정보로 메타데이터를 계산합니다.

        Compute metadata from the total count and the requested page.
        """
        total_pages: int = math.ceil(total_count / page_size) if page_size > 0 else 0
        return cls(
            current_page=page_number,
            total_pages=total_pages,
            page_size=page_size,
            total_count=total_count,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )


@dataclass
class PagedList(Generic[T]):
    """페이지 항목과 메타데이터를 함께 담는 컨테이너.

    A page of items together with its pagination metadata.
    """

    items: list[T]
    metadata: PaginationMetadata

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 10,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
    """
    # 전체 개수 조회 — 정렬 제거 후 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().all()

    return items, total
