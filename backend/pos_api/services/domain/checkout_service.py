"""
Checkout Service.

Read side of the cashier screen: day summary, receipt data for a settled
order and the plain-text daily report. Settlement itself is a lifecycle
operation.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Sequence

from shared.config.constants import Limits, PaymentStatus
from shared.config.logging import checkout_logger as logger
from shared.config.settings import Settings, settings as default_settings
from shared.utils.validators import CENTS, short_id
from pos_api.models import Order
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import InvalidTransition, NotFound

RECEIPT_FOOTER = "Thank you for visiting!"
REPORT_RULE = "=" * 40


@dataclass
class CheckoutSummary:
    day: date
    total_orders: int
    paid_orders: int
    pending_orders: int
    total_revenue: Decimal
    recent_orders: list[Order]
    unpaid_orders: list[Order]


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def _money(value: Any) -> str:
    return f"{Decimal(str(value)).quantize(CENTS)}"


class CheckoutService:
    """Service for checkout summaries, receipts and reports."""

    def __init__(self, store: DataStore, app_settings: Settings | None = None):
        self._store = store
        self._settings = app_settings or default_settings

    def orders_for_day(self, day: date) -> list[Order]:
        """Orders created on the given (UTC) day, newest first."""
        return [o for o in self._store.list_orders() if o.timestamp.date() == day]

    def checkout_summary(self, day: date | None = None) -> CheckoutSummary:
        day = day or today_utc()
        orders = self.orders_for_day(day)
        paid = [o for o in orders if o.payment_status == PaymentStatus.PAID]
        unpaid = [o for o in orders if o.payment_status != PaymentStatus.PAID]
        revenue = sum((Decimal(o.total_amount) for o in orders), Decimal("0")).quantize(CENTS)

        return CheckoutSummary(
            day=day,
            total_orders=len(orders),
            paid_orders=len(paid),
            pending_orders=len(unpaid),
            total_revenue=revenue,
            recent_orders=orders[:Limits.RECENT_ORDERS],
            unpaid_orders=unpaid,
        )

    def receipt(self, order_id: str) -> dict[str, Any]:
        """
        Receipt data for a settled order.

        Raises:
            NotFound: unknown order
            InvalidTransition: order not yet settled
        """
        order = self._store.get_order(order_id)
        if order is None:
            raise NotFound("Order", order_id)
        if order.payment_status != PaymentStatus.PAID:
            raise InvalidTransition(f"Order {order_id} has not been settled yet", order_id=order_id)

        payment = self._store.get_payment_for_order(order_id)
        if payment is None:
            raise NotFound("Payment for order", order_id)

        lines = []
        for item in order.items:
            price = Decimal(str(item["price"]))
            lines.append({
                "label": f"{item['quantity']}x {item['name']}",
                "quantity": item["quantity"],
                "name": item["name"],
                "line_total": (price * item["quantity"]).quantize(CENTS),
            })

        logger.info("Receipt generated", order_id=order_id, payment_id=payment.payment_id)
        return {
            "restaurant_name": self._settings.restaurant_name,
            "order_ref": short_id(order.order_id),
            "order_id": order.order_id,
            "table_no": order.table_no,
            "lines": lines,
            "total": Decimal(order.total_amount).quantize(CENTS),
            "payment_method": payment.method.upper(),
            "payment_time": payment.payment_time,
            "currency_symbol": self._settings.currency_symbol,
            "footer": RECEIPT_FOOTER,
        }

    def daily_report(self, day: date | None = None) -> str:
        """Plain-text report of the day's orders, oldest first."""
        day = day or today_utc()
        orders: Sequence[Order] = list(reversed(self.orders_for_day(day)))
        currency = self._settings.currency_symbol

        out = [f"Daily Report - {day.isoformat()}", REPORT_RULE, ""]
        for index, order in enumerate(orders, start=1):
            out.append(f"{index}. Order {short_id(order.order_id)} - Table {order.table_no}")
            out.append(f"   Status: {order.status} | Payment: {order.payment_status}")
            out.append(f"   Amount: {currency}{_money(order.total_amount)}")
            out.append("")

        total = sum((Decimal(o.total_amount) for o in orders), Decimal("0"))
        out.append("")
        out.append(f"Total Orders: {len(orders)}")
        out.append(f"Total Revenue: {currency}{_money(total)}")

        logger.info("Daily report generated", day=day.isoformat(), orders=len(orders))
        return "\n".join(out) + "\n"
