from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship, deferred
from sqlalchemy import Integer, String, Text, Boolean, Date, DateTime, LargeBinary, ForeignKey, text
from core.database import Base

class ContractStatus(str, Enum):
    active = "active"
    archived = "archived"
    expired = "expired"

class ContractTemplate(Base):
    __tablename__ = "contract_templates"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_content: Mapped[bytes] = deferred(mapped_column(LargeBinary, nullable=False))
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, server_default=text("false"), default=False, nullable=False)
    uploaded_by: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    company = relationship("Company", back_populates="contract_templates")
    contracts = relationship("Contract", back_populates="template")


class Contract(Base):
    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(primary_key=True)
    employee_id: Mapped[int] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"), index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), index=True)
    template_id: Mapped[int | None] = mapped_column(ForeignKey("contract_templates.id", ondelete="SET NULL"), nullable=True)
    template_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_content: Mapped[bytes] = deferred(mapped_column(LargeBinary, nullable=False))
    notice_weeks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contract_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    probation_period: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default=ContractStatus.active.value, nullable=False)

    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    employee = relationship("Employee", back_populates="contracts")
    company = relationship("Company", back_populates="contracts")
    template = relationship("ContractTemplate", back_populates="contracts")
