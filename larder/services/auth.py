"""Authentication service for JWT and password handling."""

import logging
import uuid
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from larder.config import Settings
from larder.models.refresh_token import RefreshToken
from larder.models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"  # noqa: S105
REFRESH_TOKEN_TYPE = "refresh"  # noqa: S105


@lru_cache
def get_password_context(rounds: int) -> CryptContext:
    """Password hashing context for the given bcrypt cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    # The cost factor is read from the hash itself
    return get_password_context(12).verify(plain_password, hashed_password)


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a password."""
    return get_password_context(rounds).hash(password)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _encode(claims: dict, secret: str, ttl: timedelta, settings: Settings) -> str:
    to_encode = {**claims, "exp": datetime.now(UTC) + ttl}
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def create_access_token(settings: Settings, user_id: int, email: str) -> str:
    """Create a short-lived JWT access token."""
    return _encode(
        {"sub": str(user_id), "email": email, "type": ACCESS_TOKEN_TYPE},
        settings.jwt_access_secret,
        timedelta(minutes=settings.jwt_access_ttl_minutes),
        settings,
    )


def create_refresh_token(settings: Settings, user_id: int) -> str:
    """Create a long-lived JWT refresh token."""
    return _encode(
        {"sub": str(user_id), "type": REFRESH_TOKEN_TYPE, "jti": uuid.uuid4().hex},
        settings.jwt_refresh_secret,
        timedelta(days=settings.jwt_refresh_ttl_days),
        settings,
    )


def issue_tokens(settings: Settings, user: User) -> dict:
    """Create an access/refresh token pair for the user."""
    return {
        "access_token": create_access_token(settings, user.id, user.email),
        "refresh_token": create_refresh_token(settings, user.id),
    }


def _decode(token: str, secret: str, token_type: str, settings: Settings) -> dict | None:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if payload.get("type") != token_type or payload.get("sub") is None:
        return None
    return payload


def decode_access_token(settings: Settings, token: str) -> dict | None:
    """Decode and validate an access token."""
    return _decode(token, settings.jwt_access_secret, ACCESS_TOKEN_TYPE, settings)


def decode_refresh_token(settings: Settings, token: str) -> dict | None:
    """Decode and validate a refresh token."""
    return _decode(token, settings.jwt_refresh_secret, REFRESH_TOKEN_TYPE, settings)


@lru_cache
def _dummy_password_hash(rounds: int) -> str:
    return get_password_hash("not-a-real-password", rounds)


def authenticate_user(db: Session, email: str, password: str, rounds: int = 12) -> User | None:
    """Authenticate a user by email and password.

    An unknown email still costs one bcrypt check at the configured cost.
    """
    user = get_user_by_email(db, email)
    if not user:
        verify_password(password, _dummy_password_hash(rounds))
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(
    db: Session, settings: Settings, email: str, password: str, full_name: str | None = None
) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password, settings.bcrypt_rounds)
    user = User(email=normalize_email(email), password_hash=hashed_password, full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def is_refresh_token_revoked(db: Session, token: str) -> bool:
    revoked = (
        db.query(RefreshToken.id)
        .filter(RefreshToken.token == token, RefreshToken.revoked_at.is_not(None))
        .first()
    )
    return revoked is not None


def revoke_refresh_token(db: Session, user_id: int, token: str, payload: dict) -> None:
    """Record a refresh token as revoked. Revoking twice is a no-op."""
    if is_refresh_token_revoked(db, token):
        return
    now = datetime.now(UTC)
    db.add(
        RefreshToken(
            user_id=user_id,
            token=token,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            revoked_at=now,
        )
    )
    db.commit()
    logger.info(f"Revoked refresh token for user {user_id}")
