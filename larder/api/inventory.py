"""Inventory API endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from larder.api.dependencies import (
    get_catalog_service,
    get_current_user,
    get_inventory_service,
    get_owned_or_404,
)
from larder.api.pagination import Pagination, paginate, paginated
from larder.database import get_db
from larder.models.inventory import InventoryItem
from larder.models.user import User
from larder.schemas.common import Envelope, ItemList, Page
from larder.schemas.inventory import (
    ExpiringItemsResponse,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
)
from larder.services.catalog import CatalogService
from larder.services.inventory_service import (
    DEFAULT_EXPIRY_DAYS,
    InventoryService,
    clamp_expiry_days,
)

router = APIRouter(prefix="/inventory", tags=["inventory"])


def get_user_inventory_item(db: Session, item_id: int, user: User) -> InventoryItem:
    """Get an inventory item that belongs to the user."""
    return get_owned_or_404(db, InventoryItem, item_id, user, "Inventory item not found")


# --- Static routes first (before /items/{item_id}) ---


@router.get("/low-stock", response_model=Envelope[ItemList[InventoryItemResponse]])
def list_low_stock(
    current_user: Annotated[User, Depends(get_current_user)],
    inventory: Annotated[InventoryService, Depends(get_inventory_service)],
):
    """Items whose quantity has dropped to their minimum or below."""
    return {"data": {"items": inventory.low_stock(current_user.id)}}


@router.get("/expiring", response_model=Envelope[ExpiringItemsResponse])
def list_expiring(
    current_user: Annotated[User, Depends(get_current_user)],
    inventory: Annotated[InventoryService, Depends(get_inventory_service)],
    days: int = Query(default=DEFAULT_EXPIRY_DAYS),
):
    """Items expiring within the next `days` days (clamped to 1..365)."""
    days = clamp_expiry_days(days)
    items, until = inventory.expiring(current_user.id, days)
    return {"data": {"items": items, "days": days, "until": until}}


@router.get("/items", response_model=Envelope[Page[InventoryItemResponse]])
def list_inventory_items(
    current_user: Annotated[User, Depends(get_current_user)],
    inventory: Annotated[InventoryService, Depends(get_inventory_service)],
    pagination: Annotated[Pagination, Depends(paginated(50, 200))],
    search: str | None = Query(default=None, max_length=255),
    location: str | None = Query(default=None, max_length=50),
    low_stock_only: bool = Query(default=False, alias="lowStockOnly"),
    expires_before: date | None = Query(default=None, alias="expiresBefore"),
):
    """List inventory items, soonest expiry first."""
    query = inventory.search(
        current_user.id,
        search=search.strip() if search else None,
        location=location,
        low_stock_only=low_stock_only,
        expires_before=expires_before,
    )
    return {"data": paginate(query, pagination)}


@router.post(
    "/items", response_model=Envelope[InventoryItemResponse], status_code=status.HTTP_201_CREATED
)
def create_inventory_item(
    item_data: InventoryItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Stock an item."""
    ingredient_id = None
    unit = item_data.unit
    if item_data.ingredient_id is not None or item_data.ingredient_name:
        ingredient, unit = catalog.resolve(item_data.ingredient_id, item_data.ingredient_name, unit)
        ingredient_id = ingredient.id

    item = InventoryItem(
        user_id=current_user.id,
        ingredient_id=ingredient_id,
        custom_name=item_data.custom_name,
        quantity=item_data.quantity,
        unit=unit,
        location=item_data.location,
        expires_at=item_data.expires_at,
        min_quantity=item_data.min_quantity,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return {"data": item}


@router.get("/items/{item_id}", response_model=Envelope[InventoryItemResponse])
def get_inventory_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific inventory item."""
    return {"data": get_user_inventory_item(db, item_id, current_user)}


@router.patch("/items/{item_id}", response_model=Envelope[InventoryItemResponse])
def update_inventory_item(
    item_id: int,
    item_data: InventoryItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Update an inventory item."""
    item = get_user_inventory_item(db, item_id, current_user)

    changes = item_data.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    if changes.get("ingredient_id") is not None:
        catalog.require(changes["ingredient_id"])

    for field, value in changes.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return {"data": item}


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove an item from the inventory."""
    item = get_user_inventory_item(db, item_id, current_user)
    db.delete(item)
    db.commit()
