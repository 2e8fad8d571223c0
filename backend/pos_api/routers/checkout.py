"""
Checkout router.
Settlement, day summary, receipts and the daily report.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.responses import PlainTextResponse

from shared.utils.schemas import (
    CheckoutSummaryOutput,
    OrderOutput,
    PaymentOutput,
    ReceiptOutput,
    SettlePaymentRequest,
)
from shared.config.logging import checkout_logger as logger
from pos_api.repositories import DataStore
from pos_api.routers._common import domain_errors, get_store, schedule_mirror_push
from pos_api.services.domain import CheckoutService, LifecycleService
from pos_api.services.domain.checkout_service import today_utc


router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.post("/{order_id}/pay", response_model=PaymentOutput, status_code=status.HTTP_201_CREATED)
def settle_payment(
    order_id: str,
    body: SettlePaymentRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    """
    Settle an order in full: records the payment, completes the order and
    frees its table.

    - 400 if the amount differs from the order total
    - 409 if the order is already paid
    - 500 `partial_commit` if the payment was recorded but a later step
      failed; run reconcile, do not charge again
    """
    with domain_errors():
        payment = LifecycleService(store).settle_payment(
            order_id,
            body.amount,
            body.method,
            cashier=body.cashier,
        )
    schedule_mirror_push(background_tasks)
    return payment


@router.get("/summary", response_model=CheckoutSummaryOutput)
def checkout_summary(
    day: Optional[date] = Query(None, description="UTC day, defaults to today"),
    store: DataStore = Depends(get_store),
):
    with domain_errors():
        summary = CheckoutService(store).checkout_summary(day)

    return CheckoutSummaryOutput(
        day=summary.day.isoformat(),
        total_orders=summary.total_orders,
        paid_orders=summary.paid_orders,
        pending_orders=summary.pending_orders,
        total_revenue=summary.total_revenue,
        recent_orders=[OrderOutput.model_validate(o) for o in summary.recent_orders],
        unpaid_orders=[OrderOutput.model_validate(o) for o in summary.unpaid_orders],
    )


@router.get("/report", response_class=PlainTextResponse)
def daily_report(
    day: Optional[date] = Query(None, description="UTC day, defaults to today"),
    store: DataStore = Depends(get_store),
):
    """Plain-text daily report, ready to download."""
    with domain_errors():
        report = CheckoutService(store).daily_report(day)
    filename = f"report-{(day or today_utc()).isoformat()}.txt"
    logger.debug("Serving daily report", filename=filename)
    return PlainTextResponse(
        report,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{order_id}/receipt", response_model=ReceiptOutput)
def receipt(order_id: str, store: DataStore = Depends(get_store)):
    """Receipt data for a settled order. Formatting for print is up to the UI."""
    with domain_errors():
        return CheckoutService(store).receipt(order_id)
