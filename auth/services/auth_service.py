import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from auth.models import RefreshToken
from auth.schemas import SignupRequest
from auth.utils.auth_utils import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_password_hash,
    get_refresh_token_expire_time,
    hash_refresh_token,
    verify_password,
)
from company.models import Company, CompanySettings
from department.models import Department
from role.service import ensure_default_roles
from user.models import User

logger = logging.getLogger("staffdesk.auth")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise _unauthorized("access token required")
    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("access token expired")
    except JWTError:
        raise _unauthorized("invalid access token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("invalid access token")

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise _unauthorized("user account not found or inactive")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="inactive user")
    return current_user


def build_access_token(user: User) -> str:
    return create_access_token({
        "sub": str(user.id),
        "company_id": user.company_id,
        "role_id": user.role_id,
        "role_name": user.role.name,
        "role_level": user.role.level,
        "email": user.email,
    })


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    stmt = select(User).where(User.email == email.lower(), User.is_active.is_(True))
    user = db.scalars(stmt).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("failed login for %s", email.lower())
        return None

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user


def issue_refresh_token(db: Session, user_id: int) -> str:
    """One live refresh token per user: older ones are dropped."""
    db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
    raw_token, token_hash = create_refresh_token()
    db.add(RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=get_refresh_token_expire_time()))
    db.commit()
    return raw_token


def rotate_refresh_token(db: Session, raw_token: Optional[str]) -> Tuple[User, str]:
    if not raw_token:
        raise _unauthorized("refresh token required")

    record = db.scalars(
        select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(raw_token))
    ).first()
    if record is None or record.revoked_at is not None:
        raise _unauthorized("invalid refresh token")
    if _as_utc(record.expires_at) <= datetime.now(timezone.utc):
        raise _unauthorized("refresh token expired")

    user = db.get(User, record.user_id)
    if user is None or not user.is_active:
        raise _unauthorized("user account not found or inactive")

    return user, issue_refresh_token(db, user.id)


def revoke_refresh_token(db: Session, raw_token: Optional[str]) -> bool:
    if not raw_token:
        return False
    record = db.scalars(
        select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(raw_token))
    ).first()
    if record is None:
        return False
    record.revoked_at = datetime.now(timezone.utc)
    db.commit()
    return True


def signup_with_company(db: Session, p: SignupRequest) -> User:
    """Creates the company, its settings and departments, and the first (superuser) account."""
    email = str(p.email).lower()
    if db.scalars(select(User).where(User.email == email)).first():
        raise HTTPException(status_code=409, detail="email already registered")

    roles = ensure_default_roles(db)

    company_data = p.company.model_dump(exclude={"departments"})
    if company_data.get("email") is not None:
        company_data["email"] = str(company_data["email"])
    company = Company(**company_data)
    company.settings = CompanySettings()
    db.add(company)
    db.flush()

    seen = set()
    for dept in p.company.departments:
        if dept.name.lower() in seen:
            continue
        seen.add(dept.name.lower())
        db.add(Department(company_id=company.id, name=dept.name, description=dept.description))

    user = User(
        email=email,
        password_hash=get_password_hash(p.password),
        first_name=p.first_name,
        last_name=p.last_name,
        company_id=company.id,
        role_id=roles["superuser"].id,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="email already registered")
    db.refresh(user)
    logger.info("signed up company %s (%s) with owner user %s", company.id, company.name, user.id)
    return user
