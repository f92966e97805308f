from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_any_permission, require_company_access, require_permission, require_role
from authz.permissions import Permission, RoleLevel

from .schema import (
    CompanySchema,
    CompanyCreatePayload,
    CompanyUpdate,
    CompanySettingsSchema,
    CompanySettingsUpdate,
    CompanySetupPayload,
    CompanyDetailsSchema,
    CompanyStatsSchema,
)
from . import service

company_router = APIRouter(prefix="/companies", tags=["Companies"])

# Tenants only ever see their own company
@company_router.get("", response_model=list[CompanySchema])
def list_companies(
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    ):
    obj = service.get_company(db, user.company_id)
    return [obj] if obj else []

@company_router.get("/{company_id}", response_model=CompanySchema)
def company_detail(
    company_id: int,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    ):
    obj = service.get_company(db, company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="company not found")
    return obj

@company_router.get("/{company_id}/details", response_model=CompanyDetailsSchema)
def company_details(
    company_id: int,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    ):
    return service.get_company_details(db, company_id)

# Create company
@company_router.post("", response_model=CompanySchema, status_code=status.HTTP_201_CREATED)
def company_post(
    payload: CompanyCreatePayload,
    db: Session = Depends(get_db),
    _su = Depends(require_role(RoleLevel.SUPERUSER)),
    ):
    return service.create_company(db, payload)

# Update company
@company_router.patch("/{company_id}", response_model=CompanySchema)
def company_patch(
    company_id: int,
    payload: CompanyUpdate,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.manage_company)),
    ):
    return service.update_company(db, company_id, payload)

# Delete company
@company_router.delete("/{company_id}")
def company_delete(
    company_id: int,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.manage_company)),
    ):
    obj = service.get_company(db, company_id)
    if not obj:
        raise HTTPException(status_code=404, detail="company not found")
    service.delete_company(db, company_id)
    return {"message": "company deleted"}

# Setup wizard
@company_router.post("/{company_id}/setup", response_model=CompanySchema)
def company_setup(
    company_id: int,
    payload: CompanySetupPayload,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.manage_company)),
    ):
    return service.complete_setup(db, company_id, payload)

@company_router.get("/{company_id}/settings", response_model=CompanySettingsSchema)
def company_settings(
    company_id: int,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.view_settings)),
    ):
    return service.get_settings(db, company_id)

@company_router.patch("/{company_id}/settings", response_model=CompanySettingsSchema)
def company_settings_patch(
    company_id: int,
    payload: CompanySettingsUpdate,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.manage_settings)),
    ):
    return service.update_settings(db, company_id, payload)

# Dashboard numbers
@company_router.get("/{company_id}/stats", response_model=CompanyStatsSchema)
def company_stats(
    company_id: int,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_any_permission(Permission.view_analytics, Permission.view_reports)),
    ):
    return service.get_company_stats(db, company_id)
