"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration.
One AsyncSession per request is the unit of work for the repositories:
RepositoryManager.save() commits it, and any exception escaping the
request rolls it back.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def engine_options(url: str) -> dict[str, Any]:
    """URL의 백엔드에 맞는 엔진 옵션을 만듭니다.

    Engine keyword arguments for the backend named by url. SQLite (used by
    the test-suite) has no connection pool to size.
    """
    options: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if make_url(url).get_backend_name() != "sqlite":
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW
    return options


engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (DTO mapping after save())
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스 (Declarative base for companies, employees, users and roles)."""

    pass


async def create_schema(bind: AsyncEngine = engine) -> None:
    """ORM 메타데이터로 테이블을 생성합니다 (Create missing tables; used by the dev seed)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 — 예외 발생 시 롤백.

    Yield the request's session. Uncommitted work is rolled back when the
    request fails, and the session is closed either way.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
