from datetime import date, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from department.models import Department
from employee.models import Employee, Employment, EmploymentState
from user.models import User
from .models import Company, CompanySettings
from .schema import (
    CompanyCreatePayload,
    CompanyUpdate,
    CompanySettingsUpdate,
    CompanySetupPayload,
    CompanyDetailsSchema,
    CompanySchema,
    CompanySettingsSchema,
    CompanyStatsSchema,
)

RENEWAL_WINDOW_DAYS = 30

def get_company(db: Session, company_id: int) -> Optional[Company]:
    return db.get(Company, company_id)

def create_company(db: Session, dto: CompanyCreatePayload) -> Company:
    data = dto.model_dump()
    if data.get("email") is not None:
        data["email"] = str(data["email"])
    company = Company(**data)
    company.settings = CompanySettings()
    db.add(company)
    db.commit()
    db.refresh(company)
    return company

def update_company(db: Session, company_id: int, patch: CompanyUpdate) -> Company:
    company = db.get(Company, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="company not found")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k, v in data.items():
        setattr(company, k, str(v) if k == "email" else v)
    db.commit()
    db.refresh(company)
    return company

def delete_company(db: Session, company_id: int) -> None:
    company = db.get(Company, company_id)
    if company:
        db.delete(company)
        db.commit()
    return

def get_settings(db: Session, company_id: int) -> CompanySettings:
    """Settings row for a company, created with UK defaults on first access."""
    row = db.scalars(select(CompanySettings).where(CompanySettings.company_id == company_id)).first()
    if row is None:
        if db.get(Company, company_id) is None:
            raise HTTPException(status_code=404, detail="company not found")
        row = CompanySettings(company_id=company_id)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row

def update_settings(db: Session, company_id: int, patch: CompanySettingsUpdate) -> CompanySettings:
    row = get_settings(db, company_id)
    for k, v in patch.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row

def complete_setup(db: Session, company_id: int, payload: CompanySetupPayload) -> Company:
    company = db.get(Company, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="company not found")

    for k, v in payload.company.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(company, k, str(v) if k == "email" else v)

    row = get_settings(db, company_id)
    for k, v in payload.settings.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(row, k, v)

    existing = {d.name.lower() for d in company.departments}
    for dept in payload.departments:
        if dept.name.lower() in existing:
            continue
        existing.add(dept.name.lower())
        db.add(Department(company_id=company_id, name=dept.name, description=dept.description))

    company.setup_completed = True
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="department name already exists in this company")
    db.refresh(company)
    return company

def get_company_details(db: Session, company_id: int) -> CompanyDetailsSchema:
    company = db.get(Company, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="company not found")

    def _count(model, column) -> int:
        return db.scalar(select(func.count()).select_from(model).where(column == company_id)) or 0

    return CompanyDetailsSchema(
        company=CompanySchema.model_validate(company),
        settings=CompanySettingsSchema.model_validate(get_settings(db, company_id)),
        department_count=_count(Department, Department.company_id),
        employee_count=_count(Employee, Employee.company_id),
        user_count=_count(User, User.company_id),
    )

def get_company_stats(db: Session, company_id: int, *, today: Optional[date] = None) -> CompanyStatsSchema:
    today = today or date.today()
    total = db.scalar(select(func.count()).select_from(Employee).where(Employee.company_id == company_id)) or 0

    def _by_status(state: EmploymentState) -> int:
        stmt = select(func.count()).select_from(Employment).where(
            Employment.company_id == company_id, Employment.status == state.value
        )
        return db.scalar(stmt) or 0

    renewals = db.scalar(
        select(func.count()).select_from(Employment).where(
            Employment.company_id == company_id,
            Employment.status == EmploymentState.active.value,
            Employment.end_date.is_not(None),
            Employment.end_date >= today,
            Employment.end_date <= today + timedelta(days=RENEWAL_WINDOW_DAYS),
        )
    ) or 0

    return CompanyStatsSchema(
        total_employees=total,
        active_contracts=_by_status(EmploymentState.active),
        pending_onboarding=_by_status(EmploymentState.pending),
        contract_renewals=renewals,
    )
