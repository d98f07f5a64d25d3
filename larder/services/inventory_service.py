"""Inventory service: filtered listing and the low-stock / expiring views."""

from datetime import date, timedelta

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from larder.models.ingredient import Ingredient
from larder.models.inventory import InventoryItem

DEFAULT_EXPIRY_DAYS = 7
MAX_EXPIRY_DAYS = 365


def clamp_expiry_days(days: int) -> int:
    return min(MAX_EXPIRY_DAYS, max(1, days))


class InventoryService:
    """Service for a user's inventory queries."""

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, user_id: int) -> Query:
        # Outer join so ordering and search can use the catalog name
        return (
            self.db.query(InventoryItem)
            .outerjoin(Ingredient, InventoryItem.ingredient_id == Ingredient.id)
            .filter(InventoryItem.user_id == user_id)
        )

    @staticmethod
    def _display_name():
        return func.lower(func.coalesce(Ingredient.name, InventoryItem.custom_name))

    @staticmethod
    def _low_stock_filter():
        return (
            InventoryItem.min_quantity.is_not(None),
            InventoryItem.quantity <= InventoryItem.min_quantity,
        )

    def search(
        self,
        user_id: int,
        search: str | None = None,
        location: str | None = None,
        low_stock_only: bool = False,
        expires_before: date | None = None,
    ) -> Query:
        """Inventory query with the list filters applied.

        Items without an expiry date sort last; the rest sort by expiry date,
        then by display name ignoring case.
        """
        query = self._base_query(user_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(InventoryItem.custom_name.ilike(pattern), Ingredient.name.ilike(pattern))
            )
        if location:
            query = query.filter(InventoryItem.location == location)
        if low_stock_only:
            query = query.filter(*self._low_stock_filter())
        if expires_before is not None:
            query = query.filter(InventoryItem.expires_at <= expires_before)

        return query.order_by(
            InventoryItem.expires_at.is_(None),
            InventoryItem.expires_at.asc(),
            self._display_name(),
            InventoryItem.id,
        )

    def low_stock(self, user_id: int) -> list[InventoryItem]:
        """Items at or below their minimum quantity."""
        return (
            self._base_query(user_id)
            .filter(*self._low_stock_filter())
            .order_by(self._display_name(), InventoryItem.id)
            .all()
        )

    def expiring(self, user_id: int, days: int, today: date | None = None) -> tuple[list, date]:
        """Items expiring on or before today + days.

        Returns:
            (items, last date included in the window)
        """
        until = (today or date.today()) + timedelta(days=clamp_expiry_days(days))
        items = (
            self._base_query(user_id)
            .filter(InventoryItem.expires_at.is_not(None), InventoryItem.expires_at <= until)
            .order_by(InventoryItem.expires_at.asc(), self._display_name(), InventoryItem.id)
            .all()
        )
        return items, until
