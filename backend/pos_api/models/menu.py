"""
Menu Model: MenuItem.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, json_value


class MenuItem(TimestampMixin, Base):
    """
    A dish or drink that can be ordered.
    Orders copy name and price when they are placed, so editing an item
    never changes an existing order.
    """

    __tablename__ = "menu_items"
    __record_key__ = "item_id"

    item_id: Mapped[str] = mapped_column(Text, primary_key=True)
    item_name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    kitchen_station: Mapped[str] = mapped_column(Text, default="Main Kitchen", nullable=False)
    prep_time: Mapped[int] = mapped_column(Integer, default=15, nullable=False)  # minutes
    available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_menu_item_price_non_negative"),
    )

    def to_record(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "category": self.category,
            "price": json_value(self.price),
            "description": self.description or "",
            "kitchen_station": self.kitchen_station,
            "prep_time": self.prep_time,
            "available": self.available,
            "created_at": json_value(self.created_at),
            "updated_at": json_value(self.updated_at),
        }
