"""
Tables router.
Table registry and order transfer between tables.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status

from shared.utils.schemas import (
    CreateTableRequest,
    OrderOutput,
    TableOutput,
    TransferTableRequest,
)
from pos_api.repositories import DataStore
from pos_api.routers._common import domain_errors, get_store, schedule_mirror_push
from pos_api.services.domain import LifecycleService, TableService


router = APIRouter(prefix="/api/tables", tags=["tables"])


@router.get("", response_model=list[TableOutput])
def list_tables(store: DataStore = Depends(get_store)):
    """All tables ordered by table number."""
    with domain_errors():
        return TableService(store).list_tables()


@router.post("", response_model=TableOutput, status_code=status.HTTP_201_CREATED)
def add_table(
    body: CreateTableRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    """Register a new vacant table. 409 if the number is taken."""
    with domain_errors():
        table = TableService(store).add_table(body.table_no, body.capacity)
    schedule_mirror_push(background_tasks)
    return table


@router.post("/{table_no}/transfer", response_model=OrderOutput)
def transfer_table(
    table_no: str,
    body: TransferTableRequest,
    background_tasks: BackgroundTasks,
    store: DataStore = Depends(get_store),
):
    """
    Move a live order from this table to a vacant one.

    A 500 with `partial_commit` means the move stopped half way;
    run reconcile before retrying.
    """
    with domain_errors():
        order = LifecycleService(store).transfer_table(body.order_id, table_no, body.to_table)
    schedule_mirror_push(background_tasks)
    return order
