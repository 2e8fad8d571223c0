"""
Table Service.

Registry of physical tables. Occupancy is owned by the lifecycle service;
this service only lists tables and registers new ones.
"""

from typing import Sequence

from shared.config.constants import Defaults, Limits, TableStatus
from shared.config.logging import get_logger
from shared.utils.validators import require_text
from pos_api.models import RestaurantTable
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import Conflict, ValidationFailure

logger = get_logger(__name__)


class TableService:
    """Service for table management."""

    def __init__(self, store: DataStore):
        self._store = store

    def list_tables(self) -> Sequence[RestaurantTable]:
        """All tables ordered by table_no."""
        return self._store.list_tables()

    def add_table(self, table_no: str, capacity: int = Defaults.TABLE_CAPACITY) -> RestaurantTable:
        """Register a new, vacant table. Duplicate numbers raise Conflict."""
        try:
            table_no = require_text(table_no, "Table number", max_length=Limits.MAX_TABLE_NO_LENGTH)
        except ValueError as exc:
            raise ValidationFailure(str(exc)) from exc

        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValidationFailure("Capacity must be a whole number", table_no=table_no)
        if not Limits.MIN_CAPACITY <= capacity <= Limits.MAX_CAPACITY:
            raise ValidationFailure(
                f"Capacity must be between {Limits.MIN_CAPACITY} and {Limits.MAX_CAPACITY}",
                table_no=table_no,
            )

        if self._store.get_table(table_no) is not None:
            raise Conflict(f"Table {table_no} already exists", table_no=table_no)

        table = self._store.insert_table({
            "table_no": table_no,
            "capacity": capacity,
            "status": TableStatus.VACANT,
            "current_order_id": None,
        })
        logger.info("Table added", table_no=table_no, capacity=capacity)
        return table
