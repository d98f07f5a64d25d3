"""Shopping list service for item creation and bulk operations."""

import logging

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from larder.models.ingredient import Ingredient
from larder.models.recipe import Recipe
from larder.models.shopping_list import ShoppingList, ShoppingListItem
from larder.schemas.shopping_list import BulkItemPatch, ShoppingListItemCreate
from larder.services.catalog import CatalogService

logger = logging.getLogger(__name__)


class ShoppingListService:
    """Service for operations on the items of one shopping list."""

    def __init__(self, db: Session, catalog: CatalogService):
        self.db = db
        self.catalog = catalog

    def search_items(
        self, shopping_list: ShoppingList, search: str | None = None, is_checked: bool | None = None
    ) -> Query:
        """Items of the list, unchecked first."""
        query = (
            self.db.query(ShoppingListItem)
            .outerjoin(Ingredient, ShoppingListItem.ingredient_id == Ingredient.id)
            .filter(ShoppingListItem.shopping_list_id == shopping_list.id)
        )
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(ShoppingListItem.custom_name.ilike(pattern), Ingredient.name.ilike(pattern))
            )
        if is_checked is not None:
            query = query.filter(ShoppingListItem.is_checked.is_(is_checked))
        return query.order_by(ShoppingListItem.is_checked.asc(), ShoppingListItem.id.asc())

    def get_user_recipe_id(self, recipe_id: int, user_id: int) -> int:
        """Check that a referenced recipe belongs to the user."""
        found = (
            self.db.query(Recipe.id).filter(Recipe.id == recipe_id, Recipe.user_id == user_id).first()
        )
        if found is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"fromRecipeId: recipe {recipe_id} does not exist",
            )
        return recipe_id

    def create_item(
        self, shopping_list: ShoppingList, item_data: ShoppingListItemCreate
    ) -> ShoppingListItem:
        """Add an item, resolving a catalog reference when one is given."""
        ingredient_id = None
        unit = item_data.unit
        if item_data.ingredient_id is not None or item_data.ingredient_name:
            ingredient, unit = self.catalog.resolve(
                item_data.ingredient_id, item_data.ingredient_name, unit
            )
            ingredient_id = ingredient.id

        if item_data.from_recipe_id is not None:
            self.get_user_recipe_id(item_data.from_recipe_id, shopping_list.user_id)

        item = ShoppingListItem(
            shopping_list_id=shopping_list.id,
            ingredient_id=ingredient_id,
            custom_name=item_data.custom_name,
            quantity=item_data.quantity,
            unit=unit,
            is_checked=item_data.is_checked,
            from_recipe_id=item_data.from_recipe_id,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def bulk_update(self, shopping_list: ShoppingList, patches: list[BulkItemPatch]) -> int:
        """Apply each patch on its own, one UPDATE per entry.

        Unknown ids, items on other lists and patches that change nothing are
        skipped.

        Returns:
            Number of items actually changed.
        """
        updated = 0
        for patch in patches:
            changes = patch.model_dump(exclude_unset=True, exclude={"id"})
            changes = {field: value for field, value in changes.items() if value is not None}
            if not changes:
                continue

            item = (
                self.db.query(ShoppingListItem)
                .filter(
                    ShoppingListItem.id == patch.id,
                    ShoppingListItem.shopping_list_id == shopping_list.id,
                )
                .first()
            )
            if item is None:
                continue

            effective = {
                field: value for field, value in changes.items() if getattr(item, field) != value
            }
            if not effective:
                continue

            for field, value in effective.items():
                setattr(item, field, value)
            self.db.flush()
            updated += 1

        self.db.commit()
        logger.info(f"Bulk update on list {shopping_list.id}: {updated}/{len(patches)} changed")
        return updated

    def clear_checked(self, shopping_list: ShoppingList) -> int:
        """Delete every checked item on the list."""
        deleted = (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.shopping_list_id == shopping_list.id,
                ShoppingListItem.is_checked.is_(True),
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        # Items already loaded in this session may have been removed
        self.db.expire_all()
        logger.info(f"Cleared {deleted} checked items from list {shopping_list.id}")
        return deleted

    def add_recipe(self, shopping_list: ShoppingList, recipe: Recipe) -> list[ShoppingListItem]:
        """Copy every ingredient of the recipe onto the list."""
        items = [
            ShoppingListItem(
                shopping_list_id=shopping_list.id,
                ingredient_id=recipe_ingredient.ingredient_id,
                quantity=recipe_ingredient.quantity,
                unit=recipe_ingredient.unit,
                from_recipe_id=recipe.id,
            )
            for recipe_ingredient in recipe.ingredients
        ]
        self.db.add_all(items)
        self.db.commit()
        for item in items:
            self.db.refresh(item)
        logger.info(f"Added {len(items)} items from recipe {recipe.id} to list {shopping_list.id}")
        return items
