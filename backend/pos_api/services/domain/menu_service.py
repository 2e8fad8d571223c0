"""
Menu Service.

Menu catalogue: list, add, partial update and the grouped view used by
order entry. Orders copy name and price when placed, so edits here never
change an existing order.
"""

from typing import Any, Sequence

from shared.config.constants import Defaults, Limits
from shared.config.logging import get_logger
from shared.utils.validators import require_text, sanitize_text, to_money
from pos_api.models import MenuItem
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import NotFound, ValidationFailure

logger = get_logger(__name__)

EDITABLE_FIELDS = frozenset({
    "item_name",
    "category",
    "price",
    "description",
    "kitchen_station",
    "prep_time",
    "available",
})


def _prep_time(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError("Prep time must be a non-negative whole number of minutes")
    return value


class MenuService:
    """Service for menu management."""

    def __init__(self, store: DataStore):
        self._store = store

    def list_menu(self) -> Sequence[MenuItem]:
        return self._store.list_menu_items()

    def menu_by_category(self) -> dict[str, list[MenuItem]]:
        """Available items grouped by category, categories in display order."""
        grouped: dict[str, list[MenuItem]] = {}
        for item in self._store.list_menu_items():
            if item.available:
                grouped.setdefault(item.category, []).append(item)
        return grouped

    def _clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        try:
            if "item_name" in fields:
                cleaned["item_name"] = require_text(fields["item_name"], "Item name")
            if "category" in fields:
                cleaned["category"] = require_text(fields["category"], "Category")
            if "price" in fields:
                cleaned["price"] = to_money(fields["price"], "Price")
            if "description" in fields:
                cleaned["description"] = (
                    sanitize_text(fields["description"], Limits.MAX_DESCRIPTION_LENGTH) or None
                )
            if "kitchen_station" in fields:
                cleaned["kitchen_station"] = (
                    sanitize_text(fields["kitchen_station"]) or Defaults.KITCHEN_STATION
                )
            if "prep_time" in fields:
                cleaned["prep_time"] = _prep_time(fields["prep_time"])
            if "available" in fields:
                cleaned["available"] = bool(fields["available"])
        except ValueError as exc:
            raise ValidationFailure(str(exc)) from exc
        return cleaned

    def add_menu_item(
        self,
        item_name: str,
        category: str,
        price: Any,
        description: str | None = None,
        kitchen_station: str | None = None,
        prep_time: int | None = None,
        available: bool = True,
    ) -> MenuItem:
        data = self._clean({
            "item_name": item_name,
            "category": category,
            "price": price,
            "description": description,
            "kitchen_station": kitchen_station,
            "prep_time": Defaults.PREP_TIME_MINUTES if prep_time is None else prep_time,
            "available": available,
        })
        item = self._store.insert_menu_item(data)
        logger.info("Menu item added", item_id=item.item_id, item_name=item.item_name, price=str(item.price))
        return item

    def update_menu_item(self, item_id: str, fields: dict[str, Any]) -> MenuItem:
        """
        Partial update. Fields set to None are ignored; unknown fields are rejected.
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationFailure(f"Unknown menu fields: {', '.join(sorted(unknown))}", item_id=item_id)

        if self._store.get_menu_item(item_id) is None:
            raise NotFound("Menu item", item_id)

        changes = self._clean({k: v for k, v in fields.items() if v is not None})
        if not changes:
            return self._store.get_menu_item(item_id)

        item = self._store.update_menu_item(item_id, changes)
        logger.info("Menu item updated", item_id=item_id, fields=sorted(changes))
        return item
