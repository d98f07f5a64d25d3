"""Catalog service: lookups and resolve-or-create for the shared ingredient table."""

import logging

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from larder.models.ingredient import Ingredient

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for the global ingredient catalog."""

    def __init__(self, db: Session):
        self.db = db

    def search(self, search: str | None = None) -> Query:
        """Catalog query filtered by a substring of name or category."""
        query = self.db.query(Ingredient)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Ingredient.name.ilike(pattern), Ingredient.category.ilike(pattern))
            )
        return query.order_by(Ingredient.name.asc())

    def get(self, ingredient_id: int) -> Ingredient | None:
        return self.db.query(Ingredient).filter(Ingredient.id == ingredient_id).first()

    def get_by_name(self, name: str) -> Ingredient | None:
        return self.db.query(Ingredient).filter(Ingredient.name == name).first()

    def require(self, ingredient_id: int) -> Ingredient:
        """Return the ingredient or fail with a validation error."""
        ingredient = self.get(ingredient_id)
        if ingredient is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"ingredientId: ingredient {ingredient_id} does not exist",
            )
        return ingredient

    def create(
        self, name: str, category: str | None = None, default_unit: str | None = None
    ) -> Ingredient:
        """Add an entry to the catalog, rejecting duplicate names."""
        if self.get_by_name(name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ingredient already exists",
            )
        ingredient = Ingredient(name=name, category=category, default_unit=default_unit)
        self.db.add(ingredient)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ingredient already exists",
            ) from None
        self.db.refresh(ingredient)
        return ingredient

    def resolve(
        self,
        ingredient_id: int | None = None,
        ingredient_name: str | None = None,
        unit: str | None = None,
    ) -> tuple[Ingredient, str | None]:
        """Map an ingredient reference to a catalog row.

        An id must point at an existing row. A name is matched exactly; when it
        matches, the catalog's default unit fills in a missing unit, and when
        it does not, a new catalog entry is created with the given unit.

        New rows are only flushed. The caller's commit persists the catalog
        entry together with whatever row references it.

        Returns:
            (ingredient, unit to store on the referencing row)
        """
        if ingredient_id is not None:
            return self.require(ingredient_id), unit

        name = (ingredient_name or "").strip()
        if len(name) < 2:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="ingredientId or ingredientName is required",
            )

        ingredient = self.get_by_name(name)
        if ingredient is not None:
            return ingredient, unit or ingredient.default_unit

        ingredient = Ingredient(name=name, default_unit=unit)
        self.db.add(ingredient)
        self.db.flush()
        logger.info(f"Added '{name}' to the ingredient catalog")
        return ingredient, unit
