import logging
from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from auth.utils.auth_utils import get_password_hash, verify_password
from authz.permissions import RoleLevel, has_role_level
from department.models import Department
from employee.models import Employee
from role.models import Role
from user.models import User
from user.schemas import UserCreatePayload, UserUpdate

logger = logging.getLogger("staffdesk.user")


def get_users(db: Session, *, company_id: int, search: Optional[str] = None) -> List[User]:
    stmt = select(User).where(User.company_id == company_id)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        stmt = stmt.where(or_(
            func.lower(User.first_name).like(term),
            func.lower(User.last_name).like(term),
            func.lower(User.first_name + " " + User.last_name).like(term),
            func.lower(User.email).like(term),
        ))
    return list(db.scalars(stmt.order_by(User.last_name.asc(), User.first_name.asc())))


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_for_company(db: Session, user_id: int, company_id: int) -> Optional[User]:
    return db.scalars(select(User).where(User.id == user_id, User.company_id == company_id)).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email.lower())).first()


def _assignable_role(db: Session, actor: User, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise HTTPException(status_code=404, detail="role not found")
    if not has_role_level(actor.role.level, role.level):
        raise HTTPException(status_code=403, detail="cannot assign a role more privileged than your own")
    return role


def _check_links(db: Session, company_id: int, department_id: Optional[int], employee_id: Optional[int]) -> None:
    if department_id is not None:
        dept = db.get(Department, department_id)
        if dept is None or dept.company_id != company_id:
            raise HTTPException(status_code=422, detail="department must belong to this company")
    if employee_id is not None:
        emp = db.get(Employee, employee_id)
        if emp is None or emp.company_id != company_id:
            raise HTTPException(status_code=422, detail="employee must belong to this company")


def create_user(db: Session, actor: User, company_id: int, payload: UserCreatePayload) -> User:
    role = _assignable_role(db, actor, payload.role_id)
    email = str(payload.email).lower()
    if get_user_by_email(db, email):
        raise HTTPException(status_code=409, detail="email already registered")
    _check_links(db, company_id, payload.department_id, payload.employee_id)

    db_user = User(
        email=email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        company_id=company_id,
        role_id=role.id,
        department_id=payload.department_id,
        employee_id=payload.employee_id,
        is_active=True,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="email already registered")
    db.refresh(db_user)
    logger.info("user %s created user %s with role %s", actor.id, db_user.id, role.name)
    return db_user


def update_user(db: Session, actor: User, db_user: User, patch: UserUpdate) -> User:
    data = patch.model_dump(exclude_unset=True, exclude={"current_password", "new_password"})

    if "role_id" in data and data["role_id"] != db_user.role_id:
        if not has_role_level(actor.role.level, RoleLevel.ADMIN):
            raise HTTPException(status_code=403, detail="insufficient permissions: role changes require admin")
        if actor.id == db_user.id:
            raise HTTPException(status_code=400, detail="cannot change your own role")
        _assignable_role(db, actor, data["role_id"])
    _check_links(db, db_user.company_id, data.get("department_id"), data.get("employee_id"))

    if patch.new_password:
        if actor.id == db_user.id:
            if not patch.current_password or not verify_password(patch.current_password, db_user.password_hash):
                raise HTTPException(status_code=400, detail="current password is incorrect")
        db_user.password_hash = get_password_hash(patch.new_password)

    for k, v in data.items():
        if v is None and k in ("email", "first_name", "last_name", "role_id"):
            continue
        setattr(db_user, k, str(v).lower() if k == "email" else v)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="email already registered")
    db.refresh(db_user)
    return db_user


def set_user_status(db: Session, actor: User, db_user: User, is_active: bool) -> User:
    if actor.id == db_user.id and not is_active:
        raise HTTPException(status_code=400, detail="cannot deactivate your own account")
    db_user.is_active = is_active
    db.commit()
    db.refresh(db_user)
    logger.info("user %s set user %s active=%s", actor.id, db_user.id, is_active)
    return db_user


def delete_user(db: Session, user_id: int) -> None:
    db_user = db.get(User, user_id)
    if db_user:
        db.delete(db_user)
        db.commit()
    return
