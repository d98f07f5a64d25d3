"""Authentication schemas."""

from pydantic import EmailStr, Field

from larder.schemas.common import CamelModel


class UserRegister(CamelModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=255)


class UserLogin(CamelModel):
    """User login request."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(CamelModel):
    """Refresh (or revoke) a token pair."""

    refresh_token: str = Field(..., min_length=1)


class TokenPair(CamelModel):
    """Access and refresh tokens."""

    access_token: str
    refresh_token: str


class UserResponse(CamelModel):
    """User information response."""

    id: int
    email: str
    full_name: str | None


class AuthResponse(CamelModel):
    """Authentication response with tokens and user info."""

    user: UserResponse
    tokens: TokenPair


class RefreshResponse(CamelModel):
    """Re-issued tokens."""

    tokens: TokenPair


class LogoutResponse(CamelModel):
    revoked: bool
