"""Global ingredient catalog model."""

from sqlalchemy import Column, Integer, String

from larder.database import Base, TimestampMixin


class Ingredient(Base, TimestampMixin):
    """Catalog entry shared by every user."""

    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    category = Column(String(100), nullable=True)
    default_unit = Column(String(50), nullable=True)
