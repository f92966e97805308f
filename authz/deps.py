from fastapi import Depends, HTTPException

from auth.services.auth_service import get_current_active_user
from user.models import User
from .permissions import RoleLevel, Permission, has_permission, has_role_level


def require_role(required_level: int):
    def _check(user: User = Depends(get_current_active_user)) -> User:
        if not has_role_level(user.role.level, required_level):
            raise HTTPException(
                status_code=403,
                detail=f"insufficient permissions: role level {required_level} or higher required",
            )
        return user
    return _check


def require_permission(permission: Permission):
    def _check(user: User = Depends(get_current_active_user)) -> User:
        if not has_permission(user.role.name, permission):
            raise HTTPException(status_code=403, detail=f"insufficient permissions: {permission.value} required")
        return user
    return _check


def require_any_permission(*permissions: Permission):
    def _check(user: User = Depends(get_current_active_user)) -> User:
        if not any(has_permission(user.role.name, p) for p in permissions):
            wanted = ", ".join(p.value for p in permissions)
            raise HTTPException(status_code=403, detail=f"insufficient permissions: one of {wanted} required")
        return user
    return _check


def require_company_access(company_id: int, user: User = Depends(get_current_active_user)) -> User:
    if user.company_id != company_id:
        raise HTTPException(status_code=403, detail="access denied to this company")
    return user


def ensure_same_company(user: User, company_id: int) -> None:
    """For resources whose company is only known after loading them."""
    if user.company_id != company_id:
        raise HTTPException(status_code=403, detail="access denied to this company")


def can_manage_other_user(actor: User, target_user_id: int) -> bool:
    """Own profile is always fine, anyone else needs admin level."""
    return actor.id == target_user_id or has_role_level(actor.role.level, RoleLevel.ADMIN)

