from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company_access
from .schemas import RoleSchema
from . import service

role_router = APIRouter(tags=["Roles"])

# Roles available in a company, optionally only the ones the caller may hand out
@role_router.get("/companies/{company_id}/roles", response_model=list[RoleSchema])
def list_roles(
    company_id: int,
    assignable: bool = Query(False, description="Only roles at or below the caller's level"),
    db: Session = Depends(get_db),
    user = Depends(require_company_access),
    ):
    min_level = user.role.level if assignable else None
    return service.get_roles(db, min_level=min_level)
