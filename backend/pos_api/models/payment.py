"""
Payment Model: settlement record for an order.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, json_value, utcnow


class Payment(TimestampMixin, Base):
    """
    Immutable settlement of one order.

    order_id is unique: the database refuses a second payment for the same
    order even when two terminals settle it at the same moment.
    """

    __tablename__ = "payments"
    __record_key__ = "payment_id"

    payment_id: Mapped[str] = mapped_column(Text, primary_key=True)
    order_id: Mapped[str] = mapped_column(
        Text, ForeignKey("orders.order_id"), nullable=False, unique=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    method: Mapped[str] = mapped_column(Text, nullable=False)  # cash, card, qr, upi
    cashier: Mapped[str] = mapped_column(Text, default="System", nullable=False)
    payment_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="chk_payment_amount_non_negative"),
    )

    def to_record(self) -> dict[str, Any]:
        return {
            "payment_id": self.payment_id,
            "order_id": self.order_id,
            "amount": json_value(self.amount),
            "method": self.method,
            "cashier": self.cashier,
            "payment_time": json_value(self.payment_time),
            "created_at": json_value(self.created_at),
        }
