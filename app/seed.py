"""초기 데이터 시드 스크립트 — 역할, 샘플 회사/직원, 관리자 계정 생성.

Seed script — Creates roles, sample companies with employees and a
manager account for local development.

Usage:
    python -m app.seed

Creates:
    - 2개 역할: Manager, Administrator (마이그레이션과 동일한 고정 ID, same fixed ids as the migration)
    - 2개 회사와 3명의 직원 (2 sample companies, 3 employees)
    - 1개 관리자 계정: manager / manager12345 (1 Manager user)
"""

import asyncio
import logging
import uuid

from sqlalchemy import select

from app.config import settings
from app.database import async_session, create_schema
from app.models import Company, Employee, Role, User
from app.utils.logging import configure_logging
from app.utils.password import hash_password

logger = logging.getLogger(__name__)

# 고정 역할 행 — (id, name, normalized_name, concurrency_stamp)
ROLE_SEED: list[tuple[uuid.UUID, str, str, str]] = [
    (
        uuid.UUID("c21a1686-ffa4-4f77-93d0-d8c00094121d"),
        "Manager",
        "MANAGER",
        "691a89b8-1fca-46be-b3e1-34da88bb16a0",
    ),
    (
        uuid.UUID("69f77606-5930-4d0f-b9af-abb3acc8f141"),
        "Administrator",
        "ADMINISTRATOR",
        "ba595c2f-c3ce-4712-acc8-48918164586d",
    ),
]


def build_roles() -> list[Role]:
    """고정 ID를 가진 역할 엔티티를 생성합니다 (Role entities with the fixed ids)."""
    return [
        Role(id=role_id, name=name, normalized_name=normalized, concurrency_stamp=stamp)
        for role_id, name, normalized, stamp in ROLE_SEED
    ]


def build_sample_companies() -> list[Company]:
    """샘플 회사와 직원을 생성합니다 (Sample companies with their employees)."""
    return [
        Company(
            id=uuid.UUID("c9d4c053-49b6-410c-bc78-2d54a9991870"),
            name="IT_Solutions Ltd",
            address="583 Wall Dr. Gwynn Oak, MD 21207",
            country="USA",
            employees=[
                Employee(
                    id=uuid.UUID("80abbca8-664d-4b20-b5de-024705497d4a"),
                    name="Sam Raiden",
                    age=26,
                    position="Software developer",
                ),
                Employee(
                    id=uuid.UUID("86dba8c0-d178-41e7-938c-ed49778fb52a"),
                    name="Jana McLeaf",
                    age=30,
                    position="Software developer",
                ),
            ],
        ),
        Company(
            id=uuid.UUID("3d490a70-94ce-4d15-9494-5248280c2ce3"),
            name="Admin_Solutions Ltd",
            address="312 Forest Avenue, BF 923",
            country="USA",
            employees=[
                Employee(
                    id=uuid.UUID("021ca3c1-0deb-4afd-ae94-2159a8479811"),
                    name="Kane Miller",
                    age=35,
                    position="Administrator",
                ),
            ],
        ),
    ]


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data. Creates tables if they don't
    exist, then inserts whatever is missing.

    Idempotent: 이미 존재하는 행은 건너뜁니다 (Existing rows are skipped).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    await create_schema()

    async with async_session() as db:
        existing_roles = {r.id: r for r in (await db.execute(select(Role))).scalars().all()}
        roles: list[Role] = []
        for role in build_roles():
            if role.id in existing_roles:
                roles.append(existing_roles[role.id])
            else:
                db.add(role)
                roles.append(role)

        if (await db.execute(select(Company).limit(1))).scalar_one_or_none() is None:
            db.add_all(build_sample_companies())
            logger.info("Seeded sample companies")
        else:
            logger.info("Companies already present. Skipping sample data.")

        manager = (
            await db.execute(select(User).where(User.username == "manager"))
        ).scalar_one_or_none()
        if manager is None:
            db.add(
                User(
                    first_name="Default",
                    last_name="Manager",
                    username="manager",
                    email="manager@companyemployees.local",
                    password_hash=hash_password("manager12345"),
                    roles=[r for r in roles if r.normalized_name == "MANAGER"],
                )
            )
            logger.info("Seeded manager account: manager / manager12345")

        await db.commit()


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(seed())
