"""Shopping list models."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, false
from sqlalchemy.orm import relationship

from larder.database import Base, TimestampMixin

DEFAULT_LIST_STATUS = "active"


class ShoppingList(Base, TimestampMixin):
    """Named shopping list owned by one user."""

    __tablename__ = "shopping_lists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    status = Column(
        String(20), nullable=False, default=DEFAULT_LIST_STATUS, server_default=DEFAULT_LIST_STATUS
    )

    # Relationships
    user = relationship("User", back_populates="shopping_lists")
    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ShoppingListItem.id",
    )


class ShoppingListItem(Base, TimestampMixin):
    """Line on a shopping list."""

    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True, index=True)
    shopping_list_id = Column(
        Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    custom_name = Column(String(255), nullable=True)
    quantity = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    unit = Column(String(50), nullable=True)
    is_checked = Column(
        Boolean, nullable=False, default=False, server_default=false(), index=True
    )
    from_recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    shopping_list = relationship("ShoppingList", back_populates="items")
    ingredient = relationship("Ingredient", lazy="joined")

    @property
    def ingredient_name(self) -> str | None:
        return self.ingredient.name if self.ingredient else None

    @property
    def display_name(self) -> str | None:
        return self.ingredient_name or self.custom_name
