"""
Sync router.
Reconcile, polling snapshot and the on-demand spreadsheet push.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from shared.config.settings import settings
from shared.utils.schemas import (
    DriftOutput,
    ReconcileOutput,
    ReconcileRequest,
    SnapshotOutput,
    SyncResultOutput,
)
from pos_api.repositories import DataStore
from pos_api.routers._common import domain_errors, get_store
from pos_api.services.domain import Drift, reconcile
from pos_api.services.mirror import get_mirror
from pos_api.services.snapshot import take_snapshot


router = APIRouter(prefix="/api", tags=["sync"])


def _drift_output(item: Drift) -> DriftOutput:
    return DriftOutput(
        kind=item.kind,
        table_no=item.table_no,
        order_id=item.order_id,
        message=item.message,
    )


@router.post("/reconcile", response_model=ReconcileOutput)
def run_reconcile(
    body: Optional[ReconcileRequest] = None,
    store: DataStore = Depends(get_store),
):
    """
    Repair drift between tables, orders and payments left by an
    interrupted operation. Anomalies that need a person are listed, not fixed.
    """
    order_id = body.order_id if body else None
    with domain_errors():
        report = reconcile(store, order_id=order_id)

    return ReconcileOutput(
        repairs=[_drift_output(d) for d in report.repairs],
        anomalies=[_drift_output(d) for d in report.anomalies],
        clean=report.clean,
    )


@router.get("/snapshot", response_model=SnapshotOutput)
def snapshot(store: DataStore = Depends(get_store)):
    """
    Whole-store snapshot for polling UIs. `version` changes only when the
    data does, so an unchanged version means nothing to re-render.
    """
    with domain_errors():
        snap = take_snapshot(store)

    return SnapshotOutput(
        version=snap.version,
        taken_at=snap.taken_at,
        poll_seconds=settings.snapshot_poll_seconds,
        tables=snap.tables,
        menu=snap.menu,
        orders=snap.orders,
        payments=snap.payments,
    )


@router.post("/sync", response_model=SyncResultOutput)
async def sync_to_spreadsheet(store: DataStore = Depends(get_store)):
    """Push the current snapshot to the spreadsheet webhook now."""
    with domain_errors():
        snap = take_snapshot(store)

    result = await get_mirror().push(snap)
    return SyncResultOutput(
        success=result.success,
        message=result.message,
        snapshot_version=snap.version,
    )
