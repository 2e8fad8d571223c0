"""
Order Model: Order with embedded line items.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, json_value, utcnow


class Order(TimestampMixin, Base):
    """
    A customer's order for one table.

    Line items are embedded as a JSON list of
    {"item_id", "name", "price", "quantity"} with price kept as a decimal
    string. total_amount is computed once when the order is placed.
    """

    __tablename__ = "orders"
    __record_key__ = "order_id"

    order_id: Mapped[str] = mapped_column(Text, primary_key=True)
    table_no: Mapped[str] = mapped_column(
        Text, ForeignKey("restaurant_tables.table_no"), nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(Text, default="Customer", nullable=False)
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(Text, default="pending", nullable=False)
    payment_status: Mapped[str] = mapped_column(Text, default="pending", nullable=False)
    # Creation time, the sort key for order lists
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="chk_order_total_non_negative"),
        Index("ix_order_status", "status"),
        Index("ix_order_timestamp", "timestamp"),
    )

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"

    @property
    def is_live(self) -> bool:
        """Live orders keep their table occupied."""
        return self.status != "completed" and not self.is_paid

    def to_record(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "table_no": self.table_no,
            "customer_name": self.customer_name,
            "items": [
                {**item, "price": float(Decimal(str(item["price"])))} for item in self.items
            ],
            "total_amount": json_value(self.total_amount),
            "status": self.status,
            "payment_status": self.payment_status,
            "timestamp": json_value(self.timestamp),
            "completed_at": json_value(self.completed_at),
            "created_at": json_value(self.created_at),
            "updated_at": json_value(self.updated_at),
        }
