from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company_access, require_permission, ensure_same_company
from authz.permissions import Permission
from .schema import (
    EmployeeListItem,
    EmployeeDetailSchema,
    EmployeeCreatePayload,
    EmployeeUpdate,
    EmploymentSchema,
    EmploymentStatusChange,
)
from . import service

employee_router = APIRouter(tags=["Employees"])

# List employees of a company, optionally filtered
@employee_router.get("/companies/{company_id}/employees", response_model=list[EmployeeListItem])
def list_employees(
    company_id: int,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _user=Depends(require_company_access),
    _perm=Depends(require_permission(Permission.view_employees)),
    ):
    return service.get_employees(db, company_id=company_id, search=search)

# Get employee by id
@employee_router.get("/employees/{employee_id}", response_model=EmployeeDetailSchema)
def employee_detail(
    employee_id: int,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.view_employees)),
    ):
    obj = service.get_employee_for_company(db, employee_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return obj

# Onboard employee
@employee_router.post("/employees", response_model=EmployeeDetailSchema, status_code=status.HTTP_201_CREATED)
def employee_post(
    payload: EmployeeCreatePayload,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.create_employees)),
    ):
    ensure_same_company(user, payload.company_id)
    return service.create_employee(db, payload)

# Update employee
@employee_router.patch("/employees/{employee_id}", response_model=EmployeeDetailSchema)
def employee_patch(
    employee_id: int,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_employees)),
    ):
    obj = service.get_employee_for_company(db, employee_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return service.update_employee(db, employee_id, payload)

# Delete employee
@employee_router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def employee_delete(
    employee_id: int,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.delete_employees)),
    ):
    obj = service.get_employee_for_company(db, employee_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    service.delete_employee(db, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# Change employment status
@employee_router.put("/employees/{employee_id}/status", response_model=EmploymentSchema)
def employee_status(
    employee_id: int,
    payload: EmploymentStatusChange,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.change_employment_status)),
    ):
    obj = service.get_employee_for_company(db, employee_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return service.change_status(db, employee_id, payload)
