"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from larder.api.dependencies import get_app_settings, get_current_user
from larder.config import Settings
from larder.database import get_db
from larder.models.user import User
from larder.schemas.auth import (
    AuthResponse,
    LogoutResponse,
    RefreshRequest,
    RefreshResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from larder.schemas.common import Envelope
from larder.services.auth import (
    authenticate_user,
    create_user,
    decode_refresh_token,
    get_user_by_email,
    get_user_by_id,
    is_refresh_token_revoked,
    issue_tokens,
    revoke_refresh_token,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid refresh token"  # noqa: S105


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post(
    "/register", response_model=Envelope[AuthResponse], status_code=status.HTTP_201_CREATED
)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Register a new user."""
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    try:
        user = create_user(db, settings, user_data.email, user_data.password, user_data.full_name)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from None

    return {"data": {"user": user, "tokens": issue_tokens(settings, user)}}


@router.post("/login", response_model=Envelope[AuthResponse])
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password, settings.bcrypt_rounds)

    # Same answer for unknown email and wrong password
    if not user:
        logger.warning("Failed login attempt")
        raise _unauthorized(INVALID_CREDENTIALS)

    logger.info(f"User {user.id} logged in")
    return {"data": {"user": user, "tokens": issue_tokens(settings, user)}}


@router.post("/refresh", response_model=Envelope[RefreshResponse])
def refresh(
    request: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Exchange a refresh token for a new token pair."""
    payload = decode_refresh_token(settings, request.refresh_token)
    if payload is None or is_refresh_token_revoked(db, request.refresh_token):
        raise _unauthorized(INVALID_REFRESH_TOKEN)

    try:
        user = get_user_by_id(db, int(payload["sub"]))
    except ValueError:
        user = None
    if user is None:
        raise _unauthorized("User not found")

    return {"data": {"tokens": issue_tokens(settings, user)}}


@router.post("/logout", response_model=Envelope[LogoutResponse])
def logout(
    request: RefreshRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Revoke a refresh token. The client should also discard its access token."""
    payload = decode_refresh_token(settings, request.refresh_token)
    if payload is None or payload["sub"] != str(current_user.id):
        raise _unauthorized(INVALID_REFRESH_TOKEN)

    revoke_refresh_token(db, current_user.id, request.refresh_token, payload)
    return {"data": {"revoked": True}}


@router.get("/me", response_model=Envelope[UserResponse])
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return {"data": current_user}
