from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Date, DateTime, Numeric, ForeignKey, JSON
from core.database import Base

class EmploymentState(str, Enum):
    active = "active"
    pending = "pending"
    suspended = "suspended"
    terminated = "terminated"

class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), index=True)
    employee_code: Mapped[str | None] = mapped_column(String(32), unique=True, nullable=True)

    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    national_insurance_number: Mapped[str | None] = mapped_column(String(16), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    emergency_contact: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # {name, phone, relationship}

    # visa / immigration
    passport_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    passport_issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    passport_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    visa_issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    visa_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    visa_category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    dbs_certificate_number: Mapped[str | None] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # relationships
    company = relationship("Company", back_populates="employees")
    employment = relationship("Employment", back_populates="employee", uselist=False, cascade="all, delete-orphan")
    contracts = relationship("Contract", back_populates="employee", cascade="all, delete-orphan")


class Employment(Base):
    __tablename__ = "employments"

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), unique=True, index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), index=True)

    job_title: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False)
    manager: Mapped[str | None] = mapped_column(String(255), nullable=True)
    employment_status: Mapped[str] = mapped_column(String(32), nullable=False)  # Full-Time, Part-Time, Contractor
    base_salary: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    pay_frequency: Mapped[str | None] = mapped_column(String(32), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    weekly_hours: Mapped[str | None] = mapped_column(String(16), nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tax_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    benefits: Mapped[list | None] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(String(16), default=EmploymentState.active.value, nullable=False)
    status_change_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status_change_manager: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status_change_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status_change_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    employee = relationship("Employee", back_populates="employment")
