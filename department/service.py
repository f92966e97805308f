from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from jobrole.models import JobRole, JobRoleStatus
from user.models import User
from .models import Department
from jobrole.schemas import JobRoleSchema
from .schemas import DepartmentCreate, DepartmentUpdate, DepartmentDetailsSchema, DepartmentSchema

def get_departments(db: Session, *, company_id: int, include_inactive: bool = True) -> List[Department]:
    stmt = select(Department).where(Department.company_id == company_id)
    if not include_inactive:
        stmt = stmt.where(Department.is_active.is_(True))
    return list(db.scalars(stmt.order_by(Department.name.asc())))

def get_department(db: Session, department_id: int) -> Optional[Department]:
    return db.get(Department, department_id)

def get_department_for_company(db: Session, department_id: int, company_id: int) -> Optional[Department]:
    stmt = select(Department).where(Department.id == department_id, Department.company_id == company_id)
    return db.scalars(stmt).first()

def _check_manager(db: Session, company_id: int, manager_id: Optional[int]) -> None:
    if manager_id is None:
        return
    manager = db.get(User, manager_id)
    if manager is None or manager.company_id != company_id:
        raise HTTPException(status_code=422, detail="manager must be a user in this company")

def create_department(db: Session, dto: DepartmentCreate) -> Department:
    _check_manager(db, dto.company_id, dto.manager_id)
    row = Department(**dto.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row

def update_department(db: Session, department_id: int, patch: DepartmentUpdate) -> Department:
    row = db.get(Department, department_id)
    if not row:
        raise HTTPException(status_code=404, detail="department not found")
    data = patch.model_dump(exclude_unset=True)
    if "manager_id" in data:
        _check_manager(db, row.company_id, data["manager_id"])
    for k, v in data.items():
        setattr(row, k, v)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="department already exists in this company")
    db.refresh(row)
    return row

def delete_department(db: Session, department_id: int) -> None:
    row = db.get(Department, department_id)
    if not row:
        return
    roles = db.scalar(select(func.count()).select_from(JobRole).where(JobRole.department_id == department_id))
    if roles:
        raise HTTPException(status_code=409, detail="department still has job roles")
    db.delete(row)
    db.commit()

def get_department_details(db: Session, department: Department) -> DepartmentDetailsSchema:
    base = DepartmentSchema.model_validate(department).model_dump()
    roles = list(department.job_roles)
    return DepartmentDetailsSchema(
        **base,
        job_roles=[JobRoleSchema.model_validate(r) for r in roles],
        vacant_count=sum(1 for r in roles if r.status == JobRoleStatus.vacant),
        filled_count=sum(1 for r in roles if r.status == JobRoleStatus.filled),
    )
