from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Boolean, Integer, Numeric, DateTime, ForeignKey, JSON, text
from core.database import Base

class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    size: Mapped[str | None] = mapped_column(String(64), nullable=True)
    company_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    setup_completed: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # relationships
    settings = relationship("CompanySettings", back_populates="company", uselist=False, cascade="all, delete-orphan")
    users = relationship("User", back_populates="company", cascade="all, delete")
    departments = relationship("Department", back_populates="company", cascade="all, delete-orphan")
    employees = relationship("Employee", back_populates="company", cascade="all, delete-orphan")
    contract_templates = relationship("ContractTemplate", back_populates="company", cascade="all, delete-orphan")
    contracts = relationship("Contract", back_populates="company", cascade="all, delete-orphan")


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), unique=True, index=True)

    default_notice_period_weeks: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    working_hours_per_week: Mapped[Decimal] = mapped_column(Numeric(4, 2), default=Decimal("37.5"), nullable=False)
    working_days_per_week: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    leave_entitlement_days: Mapped[int] = mapped_column(Integer, default=25, nullable=False)
    probation_period_months: Mapped[int] = mapped_column(Integer, default=6, nullable=False)
    public_holidays: Mapped[list | None] = mapped_column(JSON, nullable=True)
    currency: Mapped[str] = mapped_column(String(8), default="GBP", nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), default="Europe/London", nullable=False)

    company = relationship("Company", back_populates="settings")
