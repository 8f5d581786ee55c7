"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    company: 회사 및 직원 (Company and Employee)
    user: 사용자, 역할, 사용자-역할 매핑 (User, Role, user_roles)
"""

from app.models.company import Company, Employee
from app.models.user import Role, User, user_roles

__all__ = [
    "Company", "Employee",
    "Role", "User", "user_roles",
]
