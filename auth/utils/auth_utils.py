import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Tuple

import bcrypt
from jose import jwt

from core.config_loader import settings

BCRYPT_ROUNDS = 12


def _prepare_password(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(_prepare_password(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_prepare_password(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed hash in the database
        return False


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Sign a short lived access token.

    `claims` must carry `sub` (the user id as a string); the issuer and
    expiry are added here.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {**claims, "exp": expire, "iss": settings.TOKEN_ISSUER}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Raises jose.ExpiredSignatureError / jose.JWTError on bad tokens."""
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        issuer=settings.TOKEN_ISSUER,
    )


def create_refresh_token() -> Tuple[str, str]:
    """Returns (raw_token, token_hash). Only the hash is stored."""
    raw_token = secrets.token_urlsafe(32)
    return raw_token, hash_refresh_token(raw_token)


def hash_refresh_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode()).hexdigest()


def get_refresh_token_expire_time() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
