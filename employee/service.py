import logging
from typing import Optional, List
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from jobrole.service import release_employee
from .models import Employee, Employment
from .schema import EmployeeCreatePayload, EmployeeUpdate, EmploymentStatusChange

logger = logging.getLogger("staffdesk.employee")

EMPLOYEE_CODE_PREFIX = "EMP-"

# a PATCH sending null for these leaves the stored value alone
REQUIRED_EMPLOYEE_FIELDS = ("first_name", "last_name", "email")
REQUIRED_EMPLOYMENT_FIELDS = ("job_title", "department", "employment_status", "start_date")

def get_employees(db: Session, *, company_id: int, search: Optional[str] = None) -> List[Employee]:
    statement = (
        select(Employee)
        .options(selectinload(Employee.employment))
        .where(Employee.company_id == company_id)
    )
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        full_name = func.lower(Employee.first_name + " " + Employee.last_name)
        statement = statement.where(or_(
            func.lower(Employee.first_name).like(term),
            func.lower(Employee.last_name).like(term),
            full_name.like(term),
            func.lower(Employee.email).like(term),
            func.lower(Employee.employee_code).like(term),
        ))
    statement = statement.order_by(Employee.last_name.asc(), Employee.first_name.asc())
    return list(db.scalars(statement))

def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.get(Employee, employee_id)

def get_employee_for_company(db: Session, employee_id: int, company_id: int) -> Optional[Employee]:
    statement = select(Employee).where(Employee.id == employee_id, Employee.company_id == company_id)
    return db.scalars(statement).first()

def create_employee(db: Session, payload: EmployeeCreatePayload) -> Employee:
    """Employee and employment rows go in together or not at all."""
    data = payload.model_dump(exclude={"employment"})
    data["email"] = str(data["email"]).lower()
    db_employee = Employee(**data)
    db_employee.employment = Employment(company_id=payload.company_id, **payload.employment.model_dump())
    db.add(db_employee)
    try:
        db.flush()
        if not db_employee.employee_code:
            db_employee.employee_code = f"{EMPLOYEE_CODE_PREFIX}{db_employee.id:04d}"
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="employee code already exists")
    db.refresh(db_employee)
    logger.info("onboarded employee %s (%s) in company %s", db_employee.id, db_employee.employee_code, db_employee.company_id)
    return db_employee

def update_employee(db: Session, employee_id: int, patch: EmployeeUpdate) -> Optional[Employee]:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return None
    data = patch.model_dump(exclude_unset=True, exclude={"employment"})
    for k, v in data.items():
        if v is None and k in REQUIRED_EMPLOYEE_FIELDS:
            continue
        setattr(db_employee, k, str(v).lower() if k == "email" and v else v)

    if patch.employment is not None:
        if db_employee.employment is None:
            raise HTTPException(status_code=404, detail="employment record not found")
        for k, v in patch.employment.model_dump(exclude_unset=True).items():
            if v is None and k in REQUIRED_EMPLOYMENT_FIELDS:
                continue
            setattr(db_employee.employment, k, v)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="employee update conflicts with existing data")
    db.refresh(db_employee)
    return db_employee

def delete_employee(db: Session, employee_id: int) -> None:
    db_employee = db.get(Employee, employee_id)
    if db_employee:
        release_employee(db, employee_id)
        db.delete(db_employee)
        db.commit()
    return

def change_status(db: Session, employee_id: int, change: EmploymentStatusChange) -> Employment:
    employment = db.scalars(select(Employment).where(Employment.employee_id == employee_id)).first()
    if not employment:
        raise HTTPException(status_code=404, detail="employment record not found")
    employment.status = change.status.value
    employment.status_change_date = change.status_date
    employment.status_change_manager = change.status_manager
    employment.status_change_reason = change.status_reason
    employment.status_change_notes = change.status_notes
    db.commit()
    db.refresh(employment)
    logger.info("employee %s status changed to %s", employee_id, employment.status)
    return employment

