"""Shopping list API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from larder.api.dependencies import (
    get_catalog_service,
    get_current_user,
    get_owned_or_404,
    get_shopping_service,
)
from larder.api.pagination import Pagination, paginate, paginated
from larder.api.recipes import get_user_recipe
from larder.database import get_db
from larder.models.shopping_list import ShoppingList, ShoppingListItem
from larder.models.user import User
from larder.schemas.common import Envelope, Page
from larder.schemas.shopping_list import (
    AddRecipeRequest,
    AddRecipeResponse,
    BulkUpdateRequest,
    BulkUpdateResponse,
    ClearCheckedResponse,
    ShoppingListCreate,
    ShoppingListDetailResponse,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListItemUpdate,
    ShoppingListResponse,
    ShoppingListUpdate,
)
from larder.services.catalog import CatalogService
from larder.services.shopping_service import ShoppingListService

router = APIRouter(prefix="/shopping-lists", tags=["shopping-lists"])

NO_FIELDS = "No fields to update"


def get_user_list(db: Session, list_id: int, user: User) -> ShoppingList:
    """Get a shopping list that belongs to the user."""
    return get_owned_or_404(db, ShoppingList, list_id, user, "Shopping list not found")


def get_list_item(db: Session, shopping_list: ShoppingList, item_id: int) -> ShoppingListItem:
    """Get an item of an already-authorized list."""
    item = (
        db.query(ShoppingListItem)
        .filter(
            ShoppingListItem.id == item_id,
            ShoppingListItem.shopping_list_id == shopping_list.id,
        )
        .first()
    )
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Shopping list item not found"
        )
    return item


@router.get("", response_model=Envelope[Page[ShoppingListResponse]])
def list_shopping_lists(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends(paginated(20, 100))],
    search: str | None = Query(default=None, max_length=255),
    list_status: str | None = Query(default=None, alias="status", max_length=20),
):
    """List the current user's shopping lists."""
    query = db.query(ShoppingList).filter(ShoppingList.user_id == current_user.id)
    if search and search.strip():
        query = query.filter(ShoppingList.name.ilike(f"%{search.strip()}%"))
    if list_status:
        query = query.filter(ShoppingList.status == list_status)
    query = query.order_by(ShoppingList.updated_at.desc(), ShoppingList.id.desc())
    return {"data": paginate(query, pagination)}


@router.post(
    "", response_model=Envelope[ShoppingListResponse], status_code=status.HTTP_201_CREATED
)
def create_shopping_list(
    list_data: ShoppingListCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new shopping list."""
    shopping_list = ShoppingList(
        user_id=current_user.id, name=list_data.name, status=list_data.status
    )
    db.add(shopping_list)
    db.commit()
    db.refresh(shopping_list)
    return {"data": shopping_list}


@router.get("/{list_id}", response_model=Envelope[ShoppingListDetailResponse])
def get_shopping_list(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a shopping list with its items, unchecked first."""
    shopping_list = get_user_list(db, list_id, current_user)
    response = ShoppingListDetailResponse.model_validate(shopping_list)
    response.items.sort(key=lambda item: (item.is_checked, item.id))
    return {"data": response}


@router.patch("/{list_id}", response_model=Envelope[ShoppingListResponse])
def update_shopping_list(
    list_id: int,
    list_data: ShoppingListUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Rename a list or change its status."""
    shopping_list = get_user_list(db, list_id, current_user)

    changes = list_data.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_FIELDS)

    for field, value in changes.items():
        setattr(shopping_list, field, value)

    db.commit()
    db.refresh(shopping_list)
    return {"data": shopping_list}


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shopping_list(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a shopping list and its items."""
    shopping_list = get_user_list(db, list_id, current_user)
    db.delete(shopping_list)
    db.commit()


# --- Bulk operations (custom methods before /items/{item_id}) ---


@router.patch("/{list_id}/items:bulk", response_model=Envelope[BulkUpdateResponse])
def bulk_update_items(
    list_id: int,
    request: BulkUpdateRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    shopping: Annotated[ShoppingListService, Depends(get_shopping_service)],
):
    """Check/uncheck or re-quantify several items at once."""
    shopping_list = get_user_list(db, list_id, current_user)
    updated = shopping.bulk_update(shopping_list, request.items)
    return {"data": {"updated_count": updated}}


@router.post("/{list_id}/items:clearChecked", response_model=Envelope[ClearCheckedResponse])
def clear_checked_items(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    shopping: Annotated[ShoppingListService, Depends(get_shopping_service)],
):
    """Delete every checked item on the list."""
    shopping_list = get_user_list(db, list_id, current_user)
    deleted = shopping.clear_checked(shopping_list)
    return {"data": {"deleted_count": deleted}}


@router.post(
    "/{list_id}/items:fromRecipe",
    response_model=Envelope[AddRecipeResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_recipe_to_list(
    list_id: int,
    request: AddRecipeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    shopping: Annotated[ShoppingListService, Depends(get_shopping_service)],
):
    """Copy a recipe's ingredients onto the list."""
    shopping_list = get_user_list(db, list_id, current_user)
    recipe = get_user_recipe(db, request.recipe_id, current_user)
    items = shopping.add_recipe(shopping_list, recipe)
    return {"data": {"added_count": len(items), "items": items}}


# --- Items ---


@router.get("/{list_id}/items", response_model=Envelope[Page[ShoppingListItemResponse]])
def list_items(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    shopping: Annotated[ShoppingListService, Depends(get_shopping_service)],
    pagination: Annotated[Pagination, Depends(paginated(50, 200))],
    search: str | None = Query(default=None, max_length=255),
    is_checked: bool | None = Query(default=None, alias="isChecked"),
):
    """List the items of a shopping list."""
    shopping_list = get_user_list(db, list_id, current_user)
    query = shopping.search_items(
        shopping_list, search=search.strip() if search else None, is_checked=is_checked
    )
    return {"data": paginate(query, pagination)}


@router.post(
    "/{list_id}/items",
    response_model=Envelope[ShoppingListItemResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_item(
    list_id: int,
    item_data: ShoppingListItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    shopping: Annotated[ShoppingListService, Depends(get_shopping_service)],
):
    """Add an item to a shopping list."""
    shopping_list = get_user_list(db, list_id, current_user)
    return {"data": shopping.create_item(shopping_list, item_data)}


@router.patch(
    "/{list_id}/items/{item_id}", response_model=Envelope[ShoppingListItemResponse]
)
def update_item(
    list_id: int,
    item_id: int,
    item_data: ShoppingListItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Update a shopping list item."""
    shopping_list = get_user_list(db, list_id, current_user)
    item = get_list_item(db, shopping_list, item_id)

    changes = item_data.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_FIELDS)

    if changes.get("ingredient_id") is not None:
        catalog.require(changes["ingredient_id"])

    for field, value in changes.items():
        setattr(item, field, value)

    db.commit()
    db.refresh(item)
    return {"data": item}


@router.delete("/{list_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    list_id: int,
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove an item from a shopping list."""
    shopping_list = get_user_list(db, list_id, current_user)
    item = get_list_item(db, shopping_list, item_id)
    db.delete(item)
    db.commit()
