from typing import Optional

from fastapi import APIRouter, Body, Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from core.config_loader import settings
from core.database import get_db
from auth.schemas import LoginRequest, SignupRequest, RefreshRequest, TokenResponse, MeSchema
from auth.services import auth_service
from auth.services.auth_service import get_current_active_user
from user.models import User

REFRESH_COOKIE = "refresh_token"

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
me_router = APIRouter(tags=["Auth"])


def _token_response(response: Response, user: User, raw_refresh: str) -> TokenResponse:
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=raw_refresh,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        path="/auth",
    )
    return TokenResponse(
        access_token=auth_service.build_access_token(user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=MeSchema.model_validate(user),
    )


@auth_router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, response: Response, db: Session = Depends(get_db)):
    user = auth_service.signup_with_company(db, payload)
    return _token_response(response, user, auth_service.issue_refresh_token(db, user.id))


@auth_router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = auth_service.authenticate_user(db, str(payload.email), payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="invalid email or password")
    return _token_response(response, user, auth_service.issue_refresh_token(db, user.id))


# Rotate the refresh token and hand out a fresh access token
@auth_router.post("/refresh", response_model=TokenResponse)
def refresh(
    response: Response,
    payload: Optional[RefreshRequest] = Body(None),
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    db: Session = Depends(get_db),
    ):
    raw = (payload.refresh_token if payload else None) or refresh_cookie
    user, new_raw = auth_service.rotate_refresh_token(db, raw)
    return _token_response(response, user, new_raw)


@auth_router.post("/logout")
def logout(
    response: Response,
    payload: Optional[RefreshRequest] = Body(None),
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    db: Session = Depends(get_db),
    ):
    raw = (payload.refresh_token if payload else None) or refresh_cookie
    auth_service.revoke_refresh_token(db, raw)
    response.delete_cookie(REFRESH_COOKIE, path="/auth")
    return {"message": "logged out"}


@me_router.get("/me", response_model=MeSchema)
def me(current_user: User = Depends(get_current_active_user)):
    return current_user
