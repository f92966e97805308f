from __future__ import annotations
from datetime import datetime
from enum import Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, DateTime, ForeignKey, Enum as SAEnum
from core.database import Base

class JobRoleStatus(str, Enum):
    vacant = "vacant"
    filled = "filled"

class JobRole(Base):
    __tablename__ = "job_roles"

    id: Mapped[int] = mapped_column(primary_key=True)
    department_id: Mapped[int] = mapped_column(ForeignKey("departments.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    job_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[JobRoleStatus] = mapped_column(
        SAEnum(JobRoleStatus, name="job_role_status"),
        default=JobRoleStatus.vacant,
        nullable=False,
        index=True,
    )
    assigned_employee_id: Mapped[int | None] = mapped_column(ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    #relationship
    department = relationship("Department", back_populates="job_roles")
    assigned_employee = relationship("Employee")
