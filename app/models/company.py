"""회사 및 직원 SQLAlchemy ORM 모델 정의.

Company and Employee SQLAlchemy ORM model definitions.
A company is the tenant; employees always belong to exactly one company
and are removed together with it.

Tables:
    - companies: 회사 (Top-level tenant)
    - employees: 회사 소속 직원 (Employees scoped to a company)
"""

import uuid
from sqlalchemy import String, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Company(Base):
    """회사 모델 — 시스템의 최상위 엔티티.

    Company model — Top-level entity. All employees are scoped
    under a company.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 회사 이름 (Company name, max 60)
        address: 회사 주소 (Company address, max 60)
        country: 국가 (Country, optional)

    Relationships:
        employees: 소속 직원 목록 (Employees, cascade delete)
    """

    __tablename__ = "companies"

    # 회사 고유 식별자 — Company unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 회사 이름 — Company display name (max 60 chars, required)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    # 회사 주소 — Street address (max 60 chars, required)
    address: Mapped[str] = mapped_column(String(60), nullable=False)
    country: Mapped[str | None] = mapped_column(String(60), nullable=True)

    # 관계 — cascade: 회사 삭제 시 직원 일괄 삭제 (Employees removed with the company)
    employees = relationship(
        "Employee",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="Employee.name",
    )


class Employee(Base):
    """직원 모델 — 회사 하위 엔티티.

    Employee model — Always owned by a Company.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        company_id: 소속 회사 FK (Parent company foreign key)
        name: 직원 이름 (Employee name, max 30)
        age: 나이 (Age)
        position: 직책 (Position, max 20)
    """

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 회사 FK — Parent company (CASCADE: 회사 삭제 시 직원도 삭제)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(30), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[str] = mapped_column(String(20), nullable=False)

    company = relationship("Company", back_populates="employees")
