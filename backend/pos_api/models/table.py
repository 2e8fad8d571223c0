"""
Table Model: RestaurantTable.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import CheckConstraint, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, json_value


class RestaurantTable(TimestampMixin, Base):
    """
    Physical table tracked for occupancy.

    A table is occupied exactly while it holds a back-reference to a live,
    unpaid order. Status and back-reference are always written together.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_tables"
    __record_key__ = "table_no"

    table_no: Mapped[str] = mapped_column(Text, primary_key=True)  # "5", "T-2", "Patio-1"
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    status: Mapped[str] = mapped_column(Text, default="vacant", nullable=False)  # vacant, occupied
    current_order_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True, index=True)

    __table_args__ = (
        CheckConstraint("capacity > 0", name="chk_table_capacity_positive"),
        CheckConstraint(
            "(status = 'occupied' AND current_order_id IS NOT NULL)"
            " OR (status = 'vacant' AND current_order_id IS NULL)",
            name="chk_table_occupancy_matches_order",
        ),
        Index("ix_table_status", "status"),
    )

    @property
    def is_occupied(self) -> bool:
        return self.status == "occupied"

    def to_record(self) -> dict[str, Any]:
        return {
            "table_no": self.table_no,
            "capacity": self.capacity,
            "status": self.status,
            "current_order_id": self.current_order_id,
            "created_at": json_value(self.created_at),
            "updated_at": json_value(self.updated_at),
        }
