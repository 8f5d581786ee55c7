"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and Role SQLAlchemy ORM model definitions.
Users authenticate with username/password and carry any number of roles
("Manager", "Administrator") through the user_roles association table.

Tables:
    - roles: 역할 (Named roles, seeded by migration)
    - users: 사용자 계정 (User accounts)
    - user_roles: 사용자-역할 매핑 (User-role association)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

# 사용자-역할 다대다 매핑 테이블 — Many-to-many association between users and roles
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """역할 모델 — 권한 부여 단위.

    Role model — Named authorization group.
    Names are unique; normalized_name is the upper-cased name used for lookups.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 역할 이름 (Role name, e.g. "Manager")
        normalized_name: 대문자 역할 이름 (Upper-cased name for lookups)
        concurrency_stamp: 동시성 스탬프 (Opaque stamp changed on every update)
    """

    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    concurrency_stamp: Mapped[str | None] = mapped_column(
        String(36), nullable=True, default=lambda: str(uuid.uuid4())
    )

    users = relationship("User", secondary=user_roles, back_populates="roles")


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Username and email are globally unique.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        username: 로그인 아이디 (Login username, unique)
        email: 이메일 (Email address, unique)
        phone_number: 전화번호 (Phone number, optional)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        created_at: 생성 일시 UTC (Creation timestamp)

    Relationships:
        roles: 사용자 역할 목록 (Assigned roles)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 로그인 아이디 — Login username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(256), unique=True, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # lazy="selectin": 비동기 세션에서 지연 로딩 방지 (Avoid implicit lazy loads under AsyncSession)
    roles = relationship("Role", secondary=user_roles, back_populates="users", lazy="selectin")

    @property
    def role_names(self) -> list[str]:
        """역할 이름 목록 (Names of the assigned roles)."""
        return [role.name for role in self.roles]
