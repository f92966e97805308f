from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_permission
from authz.permissions import Permission
from department.service import get_department_for_company
from .schemas import JobRoleSchema, JobRoleCreatePayload, JobRoleCreate, JobRoleUpdate
from . import service

jobrole_router = APIRouter(tags=["Job roles"])

# List job roles of a department
@jobrole_router.get("/departments/{department_id}/job-roles", response_model=list[JobRoleSchema])
def list_jobroles(department_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    if not get_department_for_company(db, department_id, user.company_id):
        raise HTTPException(status_code=404, detail="department not found")
    return service.get_jobroles(db, department_id=department_id)

# Create job role
@jobrole_router.post("/departments/{department_id}/job-roles", response_model=JobRoleSchema, status_code=status.HTTP_201_CREATED)
def jobrole_post(
    department_id: int,
    payload: JobRoleCreatePayload,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_departments)),
    ):
    if not get_department_for_company(db, department_id, user.company_id):
        raise HTTPException(status_code=404, detail="department not found")
    internal = JobRoleCreate(department_id=department_id, **payload.model_dump())
    try:
        return service.create_jobrole(db, internal)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="job id already exists")

# Get job role by id
@jobrole_router.get("/job-roles/{jobrole_id}", response_model=JobRoleSchema)
def jobrole_detail(jobrole_id: int, db: Session = Depends(get_db), user=Depends(get_current_active_user)):
    obj = service.get_jobrole_for_company(db, jobrole_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="job role not found")
    return obj

# Update job role
@jobrole_router.patch("/job-roles/{jobrole_id}", response_model=JobRoleSchema)
def jobrole_patch(
    jobrole_id: int,
    payload: JobRoleUpdate,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_departments)),
    ):
    obj = service.get_jobrole_for_company(db, jobrole_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="job role not found")
    return service.update_jobrole(db, jobrole_id, payload)

# Delete job role
@jobrole_router.delete("/job-roles/{jobrole_id}")
def jobrole_delete(
    jobrole_id: int,
    db: Session = Depends(get_db),
    user=Depends(require_permission(Permission.manage_departments)),
    ):
    obj = service.get_jobrole_for_company(db, jobrole_id, user.company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="job role not found")
    service.delete_jobrole(db, jobrole_id)
    return {"message": "job role deleted"}
