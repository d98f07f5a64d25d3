"""Ingredient catalog schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import StringConstraints

from larder.schemas.common import CamelModel, Name, Unit

Category = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class IngredientCreate(CamelModel):
    """Add an entry to the shared catalog."""

    name: Name
    category: Category | None = None
    default_unit: Unit | None = None


class IngredientResponse(CamelModel):
    """Catalog entry."""

    id: int
    name: str
    category: str | None
    default_unit: str | None
    created_at: datetime
    updated_at: datetime
