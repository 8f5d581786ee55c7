"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Each repository is bound to the request's AsyncSession; changes are
flushed here and committed once per request by RepositoryManager.save().

Usage:
    class CompanyRepository(BaseRepository[Company]):
        def __init__(self, db: AsyncSession) -> None:
            super().__init__(db, Company)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.utils.pagination import paginate

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.

    Attributes:
        db: 요청 단위 비동기 세션 (Request-scoped async session)
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db: AsyncSession = db
        self.model: type[ModelType] = model

    async def get_by_id(self, record_id: UUID) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID.

        Args:
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def exists(self, record_id: UUID) -> bool:
        """ID에 해당하는 레코드가 있는지 확인합니다.

        Check whether a record with the given UUID exists, without loading it.
        """
        query: Select = select(select(self.model.id).where(self.model.id == record_id).exists())
        result = await self.db.execute(query)
        return bool(result.scalar())

    async def get_all(self, order_by: Any | None = None) -> Sequence[ModelType]:
        """모든 레코드를 조회합니다 (Retrieve all records, optionally ordered)."""
        query: Select = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def get_paginated(
        self,
        query: Select,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[ModelType], int]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve a page of records plus the total count for query.

        Args:
            query: 기본 SELECT 쿼리 (Base SELECT query)
            page: 현재 페이지 번호, 1부터 시작 (Current page number, 1-based)
            per_page: 페이지당 레코드 수 (Number of records per page)

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
        """
        return await paginate(self.db, query, page, per_page)

    async def create(self, obj: ModelType) -> ModelType:
        """새 레코드를 세션에 추가하고 flush 합니다.

        Add a new record to the session and flush so defaults (ids) are populated.

        Args:
            obj: 추가할 모델 인스턴스 (Model instance to add)

        Returns:
            ModelType: 추가된 레코드 (The added record)
        """
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def delete(self, obj: ModelType) -> None:
        """레코드를 삭제합니다 (Delete a record and flush)."""
        await self.db.delete(obj)
        await self.db.flush()
