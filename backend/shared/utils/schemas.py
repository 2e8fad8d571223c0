"""
Shared Pydantic schemas used by the REST API.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


# =============================================================================
# Common Types
# =============================================================================

TableStatus = Literal["vacant", "occupied"]
OrderStatus = Literal["pending", "ready", "served", "completed"]
PaymentStatus = Literal["pending", "paid"]


# =============================================================================
# Table Schemas
# =============================================================================


class CreateTableRequest(BaseModel):
    """Register a physical table."""

    table_no: str = Field(min_length=1, max_length=20)
    capacity: int = Field(default=4, ge=1, le=50)


class TableOutput(BaseModel):
    table_no: str
    capacity: int
    status: TableStatus
    current_order_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class TransferTableRequest(BaseModel):
    """Move a live order from the table in the path to another table."""

    order_id: str
    to_table: str = Field(min_length=1, max_length=20)


# =============================================================================
# Menu Schemas
# =============================================================================


class CreateMenuItemRequest(BaseModel):
    item_name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    description: str | None = Field(default=None, max_length=2000)
    kitchen_station: str | None = Field(default=None, max_length=200)
    prep_time: int | None = Field(default=None, ge=0, le=600)
    available: bool = True


class UpdateMenuItemRequest(BaseModel):
    """Partial update. Omitted fields are left unchanged."""

    item_name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=200)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    description: str | None = Field(default=None, max_length=2000)
    kitchen_station: str | None = Field(default=None, max_length=200)
    prep_time: int | None = Field(default=None, ge=0, le=600)
    available: bool | None = None


class MenuItemOutput(BaseModel):
    item_id: str
    item_name: str
    category: str
    price: Decimal
    description: str | None = None
    kitchen_station: str
    prep_time: int
    available: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Order Schemas
# =============================================================================


class OrderLineInput(BaseModel):
    """One line of a new order. Name and price come from the menu."""

    item_id: str
    quantity: int = Field(ge=1, le=99)


class PlaceOrderRequest(BaseModel):
    table_no: str = Field(min_length=1, max_length=20)
    customer_name: str | None = Field(default=None, max_length=200)
    items: list[OrderLineInput]


class OrderLineOutput(BaseModel):
    item_id: str
    name: str
    price: Decimal
    quantity: int


class OrderOutput(BaseModel):
    order_id: str
    table_no: str
    customer_name: str
    items: list[OrderLineOutput]
    total_amount: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    timestamp: datetime
    completed_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class AdvanceOrderStatusRequest(BaseModel):
    # Plain str: unknown statuses are rejected by the transition table, not by parsing
    status: str


# =============================================================================
# Checkout Schemas
# =============================================================================


class SettlePaymentRequest(BaseModel):
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    method: str = Field(min_length=1, max_length=50)
    cashier: str | None = Field(default=None, max_length=200)


class PaymentOutput(BaseModel):
    payment_id: str
    order_id: str
    amount: Decimal
    method: str
    cashier: str
    payment_time: datetime
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class CheckoutSummaryOutput(BaseModel):
    day: str
    total_orders: int
    paid_orders: int
    pending_orders: int
    total_revenue: Decimal
    recent_orders: list[OrderOutput]
    unpaid_orders: list[OrderOutput]


class ReceiptLineOutput(BaseModel):
    label: str
    quantity: int
    name: str
    line_total: Decimal


class ReceiptOutput(BaseModel):
    restaurant_name: str
    order_ref: str
    order_id: str
    table_no: str
    lines: list[ReceiptLineOutput]
    total: Decimal
    payment_method: str
    payment_time: datetime
    currency_symbol: str
    footer: str


# =============================================================================
# Reconcile / Snapshot / Sync Schemas
# =============================================================================


class ReconcileRequest(BaseModel):
    order_id: str | None = None


class DriftOutput(BaseModel):
    kind: str
    table_no: str | None = None
    order_id: str | None = None
    message: str


class ReconcileOutput(BaseModel):
    repairs: list[DriftOutput]
    anomalies: list[DriftOutput]
    clean: bool


class SnapshotOutput(BaseModel):
    version: str
    taken_at: datetime
    poll_seconds: int
    tables: list[dict]
    menu: list[dict]
    orders: list[dict]
    payments: list[dict]


class SyncResultOutput(BaseModel):
    success: bool
    message: str
    snapshot_version: str | None = None
