from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_company_access, require_permission
from authz.permissions import Permission
from .schemas import DepartmentSchema, DepartmentCreatePayload, DepartmentCreate, DepartmentUpdate, DepartmentDetailsSchema
from . import service

department_router = APIRouter(tags=["Departments"])

# List departments of a company
@department_router.get("/companies/{company_id}/departments", response_model=list[DepartmentSchema])
def list_departments(company_id: int, db: Session = Depends(get_db), _user=Depends(require_company_access)):
    return service.get_departments(db, company_id=company_id)

# Create department
@department_router.post("/companies/{company_id}/departments", response_model=DepartmentSchema, status_code=status.HTTP_201_CREATED)
def department_post(
    company_id: int,
    payload: DepartmentCreatePayload,
    db: Session = Depends(get_db),
    _user=Depends(require_company_access),
    _perm=Depends(require_permission(Permission.manage_departments)),
    ):
    internal = DepartmentCreate(company_id=company_id, **payload.model_dump())
    try:
        return service.create_department(db, internal)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="department already exists in this company")

# Get department by id
@department_router.get("/departments/{department_id}", response_model=DepartmentSchema)
def department_detail(department_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_department_for_company(db, department_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="department not found")
    return obj

# Department with its job roles
@department_router.get("/departments/{department_id}/details", response_model=DepartmentDetailsSchema)
def department_details(department_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_department_for_company(db, department_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="department not found")
    return service.get_department_details(db, obj)

# Update department
@department_router.patch("/departments/{department_id}", response_model=DepartmentSchema)
def department_patch(
    department_id: int,
    payload: DepartmentUpdate,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_departments)),
    ):
    obj = service.get_department_for_company(db, department_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="department not found")
    return service.update_department(db, department_id, payload)

# Delete department
@department_router.delete("/departments/{department_id}")
def department_delete(
    department_id: int,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_departments)),
    ):
    obj = service.get_department_for_company(db, department_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="department not found")
    service.delete_department(db, department_id)
    return {"message": "department deleted"}
