"""Inventory item model for tracking what the user has at home."""

from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from larder.database import Base, TimestampMixin


class InventoryItem(Base, TimestampMixin):
    """Stocked ingredient, linked to the catalog or named freely."""

    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    custom_name = Column(String(255), nullable=True)
    quantity = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    unit = Column(String(50), nullable=True)
    location = Column(String(50), nullable=True)  # "fridge", "freezer", "pantry", ...
    expires_at = Column(Date, nullable=True, index=True)
    min_quantity = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Relationships
    user = relationship("User", back_populates="inventory_items")
    ingredient = relationship("Ingredient", lazy="joined")

    @property
    def ingredient_name(self) -> str | None:
        return self.ingredient.name if self.ingredient else None

    @property
    def display_name(self) -> str | None:
        return self.ingredient_name or self.custom_name
