"""Pydantic schemas for API requests and responses."""

from larder.schemas.auth import AuthResponse, TokenPair, UserLogin, UserRegister, UserResponse
from larder.schemas.common import Envelope, ErrorResponse, ItemList, Page
from larder.schemas.ingredient import IngredientCreate, IngredientResponse
from larder.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
)
from larder.schemas.recipe import RecipeCreate, RecipeResponse, RecipeUpdate
from larder.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListResponse,
)

__all__ = [
    "Envelope",
    "ErrorResponse",
    "ItemList",
    "Page",
    "UserRegister",
    "UserLogin",
    "TokenPair",
    "UserResponse",
    "AuthResponse",
    "IngredientCreate",
    "IngredientResponse",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeResponse",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventoryItemResponse",
    "ShoppingListCreate",
    "ShoppingListResponse",
    "ShoppingListItemCreate",
    "ShoppingListItemResponse",
]
