from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status

from sqlalchemy.orm import Session

from auth.services.auth_service import get_current_active_user
from core.database import get_db
from user.models import User
from authz.deps import require_company_access, require_permission, can_manage_other_user
from authz.permissions import Permission
from user.schemas import UserSchema, UserCreatePayload, UserUpdate, UserStatusUpdate
from user import service

user_router = APIRouter(tags=['Users'])


def _visible_user(db: Session, user_id: int, actor: User) -> User:
    db_user = service.get_user_for_company(db, user_id, actor.company_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="user not found")
    return db_user

# Users of a company
@user_router.get('/companies/{company_id}/users', response_model=list[UserSchema])
def user_list(
    company_id: int,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.view_users)),
    ):
    return service.get_users(db, company_id=company_id, search=search)

# Create a user
@user_router.post('/companies/{company_id}/users', response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def user_post(
    company_id: int,
    payload: UserCreatePayload,
    db: Session = Depends(get_db),
    user = Depends(require_company_access),
    _perm = Depends(require_permission(Permission.create_users)),
    ):
    return service.create_user(db, user, company_id, payload)

# Get user details
@user_router.get('/users/{user_id}', response_model=UserSchema)
def user_detail(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_active_user)):
    if not can_manage_other_user(current_user, user_id):
        raise HTTPException(status_code=403, detail="insufficient permissions")
    return _visible_user(db, user_id, current_user)

# Update profile
@user_router.patch('/users/{user_id}', response_model=UserSchema)
def user_patch(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    ):
    if not can_manage_other_user(current_user, user_id):
        raise HTTPException(status_code=403, detail="insufficient permissions")
    db_user = _visible_user(db, user_id, current_user)
    return service.update_user(db, current_user, db_user, payload)

# Activate / deactivate
@user_router.put('/users/{user_id}/status', response_model=UserSchema)
def user_status(
    user_id: int,
    payload: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.manage_users)),
    ):
    db_user = _visible_user(db, user_id, current_user)
    return service.set_user_status(db, current_user, db_user, payload.is_active)

# Delete a user
@user_router.delete('/users/{user_id}')
def user_delete(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.delete_users)),
    ):
    if current_user.id == user_id:
        raise HTTPException(status_code=400, detail="cannot delete your own account")
    db_user = _visible_user(db, user_id, current_user)
    service.delete_user(db, db_user.id)
    return {"message": "user deleted"}
