"""테스트 인프라 — 임시 DB, 세션, httpx 클라이언트, 사용자/토큰 픽스처.

Test infrastructure — Throwaway database, session, httpx client fixtures.
Defaults to a SQLite file through aiosqlite; set TEST_DATABASE_URL to run
against PostgreSQL. Schema is created once, rows are deleted after each test.
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

_SQLITE_PATH = Path(tempfile.gettempdir()) / "company_employees_test.db"
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{_SQLITE_PATH}")

# 앱 임포트 전에 설정 — Settings are read when app.config is first imported
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["AXIOM_DATASET"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import delete  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Company, Employee, Role, User  # noqa: E402
from app.seed import build_roles  # noqa: E402
from app.utils.jwt import create_access_token  # noqa: E402
from app.utils.password import hash_password  # noqa: E402

_schema_created = False


@pytest.fixture(scope="session", autouse=True)
def fresh_sqlite_file():
    """세션 시작/종료 시 SQLite 파일을 삭제합니다 (Remove the SQLite file around the session)."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        _SQLITE_PATH.unlink(missing_ok=True)
    yield
    if TEST_DATABASE_URL.startswith("sqlite"):
        _SQLITE_PATH.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 첫 호출 시 스키마를 생성합니다."""
    global _schema_created
    eng = create_async_engine(TEST_DATABASE_URL, echo=False)

    if not _schema_created:
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        _schema_created = True

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session
        await session.rollback()

    # 테스트 후 모든 데이터 정리 — Delete every row, children first
    async with factory() as cleanup:
        for table in reversed(Base.metadata.sorted_tables):
            await cleanup.execute(delete(table))
        await cleanup.commit()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def roles(db: AsyncSession) -> dict[str, Role]:
    """고정 ID의 Manager/Administrator 역할을 생성합니다."""
    result: dict[str, Role] = {}
    for role in build_roles():
        db.add(role)
        result[role.name] = role
    await db.commit()
    return result


async def _make_user(db: AsyncSession, username: str, password: str, roles: list[Role]) -> User:
    user = User(
        first_name="Test",
        last_name=username.title(),
        username=username,
        email=f"{username}@test.com",
        password_hash=hash_password(password),
        roles=roles,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def manager_user(db: AsyncSession, roles) -> User:
    """Manager 역할 사용자를 생성합니다."""
    return await _make_user(db, "manager", "manager12345", [roles["Manager"]])


@pytest_asyncio.fixture
async def plain_user(db: AsyncSession, roles) -> User:
    """역할이 없는 사용자를 생성합니다 (User without any role)."""
    return await _make_user(db, "plain", "plainuser123", [])


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "name": user.username,
        "roles": user.role_names,
    })


@pytest.fixture
def manager_token(manager_user) -> str:
    return make_token(manager_user)


@pytest.fixture
def user_token(plain_user) -> str:
    return make_token(plain_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def company(db: AsyncSession) -> Company:
    """직원 3명이 있는 테스트 회사를 생성합니다."""
    c = Company(
        name="IT_Solutions Ltd",
        address="583 Wall Dr. Gwynn Oak, MD 21207",
        country="USA",
        employees=[
            Employee(name="Sam Raiden", age=26, position="Software developer"),
            Employee(name="Jana McLeaf", age=30, position="Software developer"),
            Employee(name="Kane Miller", age=35, position="Administrator"),
        ],
    )
    db.add(c)
    await db.commit()
    return c


@pytest_asyncio.fixture
async def other_company(db: AsyncSession) -> Company:
    """직원이 없는 두 번째 회사를 생성합니다."""
    c = Company(name="Admin_Solutions Ltd", address="312 Forest Avenue, BF 923", country="USA")
    db.add(c)
    await db.commit()
    return c
