"""Inventory schemas."""

from datetime import date, datetime
from typing import Annotated

from pydantic import Field, StringConstraints, model_validator

from larder.schemas.common import CamelModel, Label, Name, PatchModel, Quantity, Unit

Location = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


class InventoryItemCreate(CamelModel):
    """Stock an item, by catalog id, by catalog name, or under a custom name."""

    ingredient_id: int | None = None
    ingredient_name: Name | None = None
    custom_name: Label | None = None
    quantity: Quantity = 0
    unit: Unit | None = None
    location: Location | None = None
    expires_at: date | None = None
    min_quantity: Quantity | None = None

    @model_validator(mode="after")
    def require_reference(self):
        if self.ingredient_id is None and not self.ingredient_name and not self.custom_name:
            raise ValueError("ingredientId, ingredientName or customName is required")
        return self


class InventoryItemUpdate(PatchModel):
    """Update an inventory item. Null clears optional fields."""

    not_nullable = ("quantity",)

    ingredient_id: int | None = None
    custom_name: Label | None = None
    quantity: Quantity | None = None
    unit: Unit | None = None
    location: Location | None = None
    expires_at: date | None = None
    min_quantity: Quantity | None = None


class InventoryItemResponse(CamelModel):
    """Inventory item response."""

    id: int
    user_id: int
    ingredient_id: int | None
    ingredient_name: str | None
    custom_name: str | None
    display_name: str | None
    quantity: float | None
    unit: str | None
    location: str | None
    expires_at: date | None
    min_quantity: float | None
    created_at: datetime
    updated_at: datetime


class ExpiringItemsResponse(CamelModel):
    """Items expiring within the window."""

    items: list[InventoryItemResponse]
    days: int = Field(..., ge=1)
    until: date
