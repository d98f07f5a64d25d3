"""FastAPI dependencies for authentication, configuration and ownership checks."""

from typing import Annotated, TypeVar

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from larder.config import Settings
from larder.database import Base, get_db
from larder.models.user import User
from larder.services.auth import decode_access_token, get_user_by_id
from larder.services.catalog import CatalogService
from larder.services.inventory_service import InventoryService
from larder.services.shopping_service import ShoppingListService

# auto_error=False so a missing header is reported as 401 like any other bad token
security = HTTPBearer(auto_error=False)

ModelT = TypeVar("ModelT", bound=Base)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User:
    """Get the current authenticated user from the bearer access token."""
    if credentials is None:
        raise _unauthorized("Missing Bearer token")

    payload = decode_access_token(settings, credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Invalid or expired token") from None

    user = get_user_by_id(db, user_id)
    if user is None:
        raise _unauthorized("Invalid or expired token")

    return user


def get_owned_or_404(
    db: Session, model: type[ModelT], row_id: int, user: User, detail: str
) -> ModelT:
    """Load a row by id scoped to its owner.

    A missing row and someone else's row are reported the same way.
    """
    row = db.query(model).filter(model.id == row_id, model.user_id == user.id).first()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return row


def get_catalog_service(
    db: Annotated[Session, Depends(get_db)],
) -> CatalogService:
    """Get catalog service with dependencies."""
    return CatalogService(db)


def get_inventory_service(
    db: Annotated[Session, Depends(get_db)],
) -> InventoryService:
    """Get inventory service with dependencies."""
    return InventoryService(db)


def get_shopping_service(
    db: Annotated[Session, Depends(get_db)],
) -> ShoppingListService:
    """Get shopping list service with dependencies."""
    return ShoppingListService(db, CatalogService(db))
