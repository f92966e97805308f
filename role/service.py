from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select

from authz.permissions import DEFAULT_ROLES, ROLE_PERMISSIONS
from .models import Role


def ensure_default_roles(db: Session) -> dict[str, Role]:
    """Create the four built-in roles if missing. Safe to call repeatedly."""
    existing = {r.name: r for r in db.scalars(select(Role))}
    for name, description, level in DEFAULT_ROLES:
        if name not in existing:
            role = Role(
                name=name,
                description=description,
                level=level,
                permissions=[p.value for p in ROLE_PERMISSIONS[name]],
            )
            db.add(role)
            existing[name] = role
    db.flush()
    return existing


def get_roles(db: Session, *, min_level: Optional[int] = None) -> List[Role]:
    stmt = select(Role).order_by(Role.level.asc())
    if min_level is not None:
        stmt = stmt.where(Role.level >= min_level)
    return list(db.scalars(stmt))
