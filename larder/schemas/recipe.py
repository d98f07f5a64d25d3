"""Recipe schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, model_validator

from larder.schemas.common import CamelModel, Name, PatchModel, PositiveQuantity, Unit

Note = Annotated[str, StringConstraints(max_length=255)]
Text = Annotated[str, StringConstraints(max_length=50000)]
Minutes = Annotated[int, Field(ge=0, le=100000)]
Servings = Annotated[int, Field(ge=1, le=10000)]

# --- Recipe Ingredient ---


class RecipeIngredientCreate(CamelModel):
    """Add an ingredient to a recipe, by catalog id or by name."""

    ingredient_id: int | None = None
    ingredient_name: str | None = Field(None, max_length=255)
    quantity: PositiveQuantity
    unit: Unit | None = None
    note: Note | None = None

    @model_validator(mode="after")
    def require_reference(self):
        if self.ingredient_name is not None:
            self.ingredient_name = self.ingredient_name.strip()
        if self.ingredient_id is None and len(self.ingredient_name or "") < 2:
            raise ValueError("ingredientId or ingredientName is required")
        return self


class RecipeIngredientUpdate(PatchModel):
    """Update a recipe ingredient."""

    not_nullable = ("quantity",)

    quantity: PositiveQuantity | None = None
    unit: Unit | None = None
    note: Note | None = None


class RecipeIngredientResponse(CamelModel):
    """Recipe ingredient response."""

    id: int
    recipe_id: int
    ingredient_id: int
    ingredient_name: str
    ingredient_category: str | None
    quantity: float | None
    unit: str | None
    note: str | None
    created_at: datetime
    updated_at: datetime


# --- Recipe ---


class RecipeCreate(CamelModel):
    """Create a new recipe."""

    title: Name
    description: Text | None = None
    instructions: Text | None = None
    prep_time_minutes: Minutes | None = None
    cook_time_minutes: Minutes | None = None
    servings: Servings | None = None
    is_public: bool = False


class RecipeUpdate(PatchModel):
    """Update a recipe."""

    not_nullable = ("title", "is_public")

    title: Name | None = None
    description: Text | None = None
    instructions: Text | None = None
    prep_time_minutes: Minutes | None = None
    cook_time_minutes: Minutes | None = None
    servings: Servings | None = None
    is_public: bool | None = None


class RecipeSummary(CamelModel):
    """Recipe list item (without ingredients)."""

    id: int
    title: str
    description: str | None
    servings: int | None
    is_public: bool
    created_at: datetime
    updated_at: datetime


class RecipeResponse(CamelModel):
    """Recipe response with ingredients."""

    id: int
    user_id: int
    title: str
    description: str | None
    instructions: str | None
    prep_time_minutes: int | None
    cook_time_minutes: int | None
    servings: int | None
    is_public: bool
    ingredients: list[RecipeIngredientResponse]
    created_at: datetime
    updated_at: datetime
