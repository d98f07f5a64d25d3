"""Recipe API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from larder.api.dependencies import get_catalog_service, get_current_user, get_owned_or_404
from larder.api.pagination import Pagination, paginate, paginated
from larder.database import get_db
from larder.models.recipe import Recipe, RecipeIngredient
from larder.models.user import User
from larder.schemas.common import Envelope, ItemList, Page
from larder.schemas.recipe import (
    RecipeCreate,
    RecipeIngredientCreate,
    RecipeIngredientResponse,
    RecipeIngredientUpdate,
    RecipeResponse,
    RecipeSummary,
    RecipeUpdate,
)
from larder.services.catalog import CatalogService

router = APIRouter(prefix="/recipes", tags=["recipes"])

NO_FIELDS = "No fields to update"


def get_user_recipe(db: Session, recipe_id: int, user: User) -> Recipe:
    """Get a recipe that belongs to the user."""
    return get_owned_or_404(db, Recipe, recipe_id, user, "Recipe not found")


def get_recipe_ingredient(db: Session, recipe: Recipe, ri_id: int) -> RecipeIngredient:
    """Get an ingredient line of an already-authorized recipe."""
    ingredient = (
        db.query(RecipeIngredient)
        .filter(RecipeIngredient.id == ri_id, RecipeIngredient.recipe_id == recipe.id)
        .first()
    )
    if not ingredient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Recipe ingredient not found"
        )
    return ingredient


@router.get("", response_model=Envelope[Page[RecipeSummary]])
def list_recipes(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends(paginated(20, 100))],
    search: str | None = Query(default=None, max_length=255),
):
    """List the current user's recipes, newest changes first."""
    query = db.query(Recipe).filter(Recipe.user_id == current_user.id)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Recipe.title.ilike(pattern), Recipe.description.ilike(pattern)))
    query = query.order_by(Recipe.updated_at.desc(), Recipe.id.desc())
    return {"data": paginate(query, pagination)}


@router.post("", response_model=Envelope[RecipeResponse], status_code=status.HTTP_201_CREATED)
def create_recipe(
    recipe_data: RecipeCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new recipe."""
    recipe = Recipe(user_id=current_user.id, **recipe_data.model_dump())
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return {"data": recipe}


@router.get("/{recipe_id}", response_model=Envelope[RecipeResponse])
def get_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a recipe with its ingredients."""
    return {"data": get_user_recipe(db, recipe_id, current_user)}


@router.patch("/{recipe_id}", response_model=Envelope[RecipeResponse])
def update_recipe(
    recipe_id: int,
    recipe_data: RecipeUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update recipe metadata."""
    recipe = get_user_recipe(db, recipe_id, current_user)

    changes = recipe_data.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_FIELDS)

    for field, value in changes.items():
        setattr(recipe, field, value)

    db.commit()
    db.refresh(recipe)
    return {"data": recipe}


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a recipe and its ingredient lines."""
    recipe = get_user_recipe(db, recipe_id, current_user)
    db.delete(recipe)
    db.commit()


# --- Ingredient lines ---


@router.get(
    "/{recipe_id}/ingredients", response_model=Envelope[ItemList[RecipeIngredientResponse]]
)
def list_recipe_ingredients(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List a recipe's ingredients."""
    recipe = get_user_recipe(db, recipe_id, current_user)
    return {"data": {"items": recipe.ingredients}}


@router.post(
    "/{recipe_id}/ingredients",
    response_model=Envelope[RecipeIngredientResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_recipe_ingredient(
    recipe_id: int,
    ingredient_data: RecipeIngredientCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Add an ingredient to a recipe.

    The ingredient is given by catalog id or by name. An unknown name adds a
    new catalog entry in the same transaction as the recipe line.
    """
    recipe = get_user_recipe(db, recipe_id, current_user)

    ingredient, unit = catalog.resolve(
        ingredient_data.ingredient_id, ingredient_data.ingredient_name, ingredient_data.unit
    )

    recipe_ingredient = RecipeIngredient(
        recipe_id=recipe.id,
        ingredient_id=ingredient.id,
        quantity=ingredient_data.quantity,
        unit=unit,
        note=ingredient_data.note,
    )
    db.add(recipe_ingredient)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ingredient is already part of this recipe",
        ) from None
    db.refresh(recipe_ingredient)
    return {"data": recipe_ingredient}


@router.patch(
    "/{recipe_id}/ingredients/{ri_id}", response_model=Envelope[RecipeIngredientResponse]
)
def update_recipe_ingredient(
    recipe_id: int,
    ri_id: int,
    ingredient_data: RecipeIngredientUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update quantity, unit or note of a recipe ingredient."""
    recipe = get_user_recipe(db, recipe_id, current_user)
    recipe_ingredient = get_recipe_ingredient(db, recipe, ri_id)

    changes = ingredient_data.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_FIELDS)

    for field, value in changes.items():
        setattr(recipe_ingredient, field, value)

    db.commit()
    db.refresh(recipe_ingredient)
    return {"data": recipe_ingredient}


@router.delete("/{recipe_id}/ingredients/{ri_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe_ingredient(
    recipe_id: int,
    ri_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove an ingredient from a recipe."""
    recipe = get_user_recipe(db, recipe_id, current_user)
    recipe_ingredient = get_recipe_ingredient(db, recipe, ri_id)
    db.delete(recipe_ingredient)
    db.commit()
