"""SQLAlchemy models."""

from larder.models.ingredient import Ingredient
from larder.models.inventory import InventoryItem
from larder.models.recipe import Recipe, RecipeIngredient
from larder.models.refresh_token import RefreshToken
from larder.models.shopping_list import ShoppingList, ShoppingListItem
from larder.models.user import User

__all__ = [
    "User",
    "RefreshToken",
    "Ingredient",
    "Recipe",
    "RecipeIngredient",
    "InventoryItem",
    "ShoppingList",
    "ShoppingListItem",
]
