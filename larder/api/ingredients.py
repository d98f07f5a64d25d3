"""Ingredient catalog API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from larder.api.dependencies import get_catalog_service, get_current_user
from larder.api.pagination import Pagination, paginate, paginated
from larder.models.user import User
from larder.schemas.common import Envelope, Page
from larder.schemas.ingredient import IngredientCreate, IngredientResponse
from larder.services.catalog import CatalogService

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("", response_model=Envelope[Page[IngredientResponse]])
def list_ingredients(
    current_user: Annotated[User, Depends(get_current_user)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    pagination: Annotated[Pagination, Depends(paginated(20, 100))],
    search: str | None = Query(default=None, max_length=255),
):
    """Search the shared catalog by name or category."""
    query = catalog.search(search.strip() if search else None)
    return {"data": paginate(query, pagination)}


@router.post("", response_model=Envelope[IngredientResponse], status_code=status.HTTP_201_CREATED)
def create_ingredient(
    ingredient_data: IngredientCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Add an ingredient to the shared catalog."""
    ingredient = catalog.create(
        ingredient_data.name, ingredient_data.category, ingredient_data.default_unit
    )
    return {"data": ingredient}


@router.get("/{ingredient_id}", response_model=Envelope[IngredientResponse])
def get_ingredient(
    ingredient_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Get a catalog entry."""
    ingredient = catalog.get(ingredient_id)
    if not ingredient:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")
    return {"data": ingredient}
