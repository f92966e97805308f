from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from department.models import Department
from employee.models import Employee
from .models import JobRole, JobRoleStatus
from .schemas import JobRoleCreate, JobRoleUpdate

def get_jobroles(db: Session, *, department_id: int) -> List[JobRole]:
    stmt = select(JobRole).where(JobRole.department_id == department_id).order_by(JobRole.title.asc())
    return list(db.scalars(stmt))

def get_jobrole(db: Session, jobrole_id: int) -> Optional[JobRole]:
    return db.get(JobRole, jobrole_id)

def get_jobrole_for_company(db: Session, jobrole_id: int, company_id: int) -> Optional[JobRole]:
    stmt = (
        select(JobRole)
        .join(Department, JobRole.department_id == Department.id)
        .where(JobRole.id == jobrole_id, Department.company_id == company_id)
    )
    return db.scalars(stmt).first()

def _check_employee(db: Session, company_id: int, employee_id: Optional[int]) -> None:
    if employee_id is None:
        return
    emp = db.get(Employee, employee_id)
    if emp is None or emp.company_id != company_id:
        raise HTTPException(status_code=422, detail="assigned employee must belong to the same company")

def create_jobrole(db: Session, dto: JobRoleCreate) -> JobRole:
    dept = db.get(Department, dto.department_id)
    if not dept:
        raise HTTPException(status_code=404, detail="department not found")
    _check_employee(db, dept.company_id, dto.assigned_employee_id)

    db_role = JobRole(**dto.model_dump())
    db_role.status = JobRoleStatus.filled if dto.assigned_employee_id else JobRoleStatus.vacant
    db.add(db_role)
    db.commit()
    db.refresh(db_role)
    return db_role

def update_jobrole(db: Session, jobrole_id: int, patch: JobRoleUpdate) -> JobRole:
    db_role = db.get(JobRole, jobrole_id)
    if not db_role:
        raise HTTPException(status_code=404, detail="job role not found")
    data = patch.model_dump(exclude_unset=True)
    if "assigned_employee_id" in data:
        _check_employee(db, db_role.department.company_id, data["assigned_employee_id"])
        data["status"] = JobRoleStatus.filled if data["assigned_employee_id"] else JobRoleStatus.vacant
    for k, v in data.items():
        if v is None and k not in ("assigned_employee_id", "description"):
            continue
        setattr(db_role, k, v)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="job id already exists")
    db.refresh(db_role)
    return db_role

def delete_jobrole(db: Session, jobrole_id: int) -> None:
    db_role = db.get(JobRole, jobrole_id)
    if db_role:
        db.delete(db_role)
        db.commit()
    return

def release_employee(db: Session, employee_id: int) -> int:
    """Mark every role held by the employee vacant again. Caller commits."""
    roles = list(db.scalars(select(JobRole).where(JobRole.assigned_employee_id == employee_id)))
    for r in roles:
        r.assigned_employee_id = None
        r.status = JobRoleStatus.vacant
    return len(roles)
