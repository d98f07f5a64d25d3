"""Shopping list schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, model_validator

from larder.models.shopping_list import DEFAULT_LIST_STATUS
from larder.schemas.common import CamelModel, Label, Name, PatchModel, Quantity, Unit

Status = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]

# --- Items ---


class ShoppingListItemCreate(CamelModel):
    """Add an item, by catalog id, by catalog name, or under a custom name."""

    ingredient_id: int | None = None
    ingredient_name: Name | None = None
    custom_name: Label | None = None
    quantity: Quantity | None = None
    unit: Unit | None = None
    is_checked: bool = False
    from_recipe_id: int | None = None

    @model_validator(mode="after")
    def require_reference(self):
        if self.ingredient_id is None and not self.ingredient_name and not self.custom_name:
            raise ValueError("ingredientId, ingredientName or customName is required")
        return self


class ShoppingListItemUpdate(PatchModel):
    """Update a shopping list item."""

    not_nullable = ("is_checked",)

    ingredient_id: int | None = None
    custom_name: Label | None = None
    quantity: Quantity | None = None
    unit: Unit | None = None
    is_checked: bool | None = None


class ShoppingListItemResponse(CamelModel):
    """Shopping list item response."""

    id: int
    shopping_list_id: int
    ingredient_id: int | None
    ingredient_name: str | None
    custom_name: str | None
    display_name: str | None
    quantity: float | None
    unit: str | None
    is_checked: bool
    from_recipe_id: int | None
    created_at: datetime
    updated_at: datetime


class BulkItemPatch(CamelModel):
    """One entry of a bulk update."""

    id: int
    is_checked: bool | None = None
    quantity: Quantity | None = None


class BulkUpdateRequest(CamelModel):
    items: list[BulkItemPatch] = Field(..., max_length=500)


class BulkUpdateResponse(CamelModel):
    updated_count: int


class ClearCheckedResponse(CamelModel):
    deleted_count: int


class AddRecipeRequest(CamelModel):
    """Copy a recipe's ingredients onto the list."""

    recipe_id: int


class AddRecipeResponse(CamelModel):
    added_count: int
    items: list[ShoppingListItemResponse]


# --- Lists ---


class ShoppingListCreate(CamelModel):
    """Create a shopping list."""

    name: Label
    status: Status = DEFAULT_LIST_STATUS


class ShoppingListUpdate(PatchModel):
    """Update a shopping list."""

    not_nullable = ("name", "status")

    name: Label | None = None
    status: Status | None = None


class ShoppingListResponse(CamelModel):
    """Shopping list response."""

    id: int
    user_id: int
    name: str
    status: str
    created_at: datetime
    updated_at: datetime


class ShoppingListDetailResponse(ShoppingListResponse):
    """Shopping list with its items."""

    items: list[ShoppingListItemResponse]
