"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from larder.database import Base, TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)  # Lower-cased
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)

    # Relationships
    recipes = relationship("Recipe", back_populates="user", passive_deletes=True)
    inventory_items = relationship("InventoryItem", back_populates="user", passive_deletes=True)
    shopping_lists = relationship("ShoppingList", back_populates="user", passive_deletes=True)
    refresh_tokens = relationship("RefreshToken", back_populates="user", passive_deletes=True)
