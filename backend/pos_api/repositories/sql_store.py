"""
SQLAlchemy implementation of the Data Store.

Every write commits on its own, mirroring a hosted store where each call
is a separate request. Conditional updates are a single
UPDATE ... WHERE key = :key AND <expected columns>, so two sessions racing
on the same row cannot both succeed.
"""

from typing import Any, Callable, Sequence, TypeVar

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import IdPrefix
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.identifiers import new_id
from pos_api.models import MenuItem, Order, Payment, RestaurantTable, utcnow
from pos_api.repositories.base import DataStore
from pos_api.services.domain.errors import Conflict, NotFound, UpstreamFailure

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


class SqlDataStore(DataStore):
    """Data store backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self._db = db

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _read(self, operation: str, fn: Callable[[], ModelT]) -> ModelT:
        try:
            return fn()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Data store read failed", operation=operation, error=str(exc))
            raise UpstreamFailure(operation, exc) from exc

    def _insert(self, operation: str, entity: ModelT) -> ModelT:
        try:
            self._db.add(entity)
            safe_commit(self._db)
        except IntegrityError as exc:
            logger.warning("Data store insert rejected", operation=operation, error=str(exc.orig))
            raise Conflict(
                f"{operation} rejected: record already exists or violates a constraint",
                operation=operation,
            ) from exc
        except SQLAlchemyError as exc:
            logger.error("Data store insert failed", operation=operation, error=str(exc))
            raise UpstreamFailure(operation, exc) from exc
        return entity

    def _conditional_update(
        self,
        operation: str,
        model: type[ModelT],
        key_column: Any,
        key: str,
        fields: dict[str, Any],
        expect: dict[str, Any] | None,
    ) -> ModelT:
        conditions = [key_column == key]
        for column_name, expected in (expect or {}).items():
            column = getattr(model, column_name)
            conditions.append(column.is_(None) if expected is None else column == expected)

        stmt = (
            update(model)
            .where(*conditions)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self._db.execute(stmt)
            affected = result.rowcount
            safe_commit(self._db)
        except IntegrityError as exc:
            self._db.rollback()
            logger.warning("Data store update rejected", operation=operation, key=key, error=str(exc.orig))
            raise Conflict(f"{operation} rejected by a data constraint", operation=operation, key=key) from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Data store update failed", operation=operation, key=key, error=str(exc))
            raise UpstreamFailure(operation, exc) from exc

        current = self._read(operation, lambda: self._db.get(model, key, populate_existing=True))
        if current is None:
            raise NotFound(model.__name__, key)
        if affected == 0:
            raise Conflict(
                f"{operation} for '{key}' skipped: record changed since it was read",
                operation=operation,
                key=key,
                expected=expect,
            )
        return current

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def list_tables(self) -> Sequence[RestaurantTable]:
        return self._read(
            "list_tables",
            lambda: self._db.execute(
                select(RestaurantTable).order_by(RestaurantTable.table_no.asc())
            ).scalars().all(),
        )

    def get_table(self, table_no: str) -> RestaurantTable | None:
        return self._read(
            "get_table",
            lambda: self._db.get(RestaurantTable, table_no, populate_existing=True),
        )

    def list_tables_for_order(self, order_id: str) -> Sequence[RestaurantTable]:
        return self._read(
            "list_tables_for_order",
            lambda: self._db.execute(
                select(RestaurantTable)
                .where(RestaurantTable.current_order_id == order_id)
                .order_by(RestaurantTable.table_no.asc())
                .execution_options(populate_existing=True)
            ).scalars().all(),
        )

    def insert_table(self, data: dict[str, Any]) -> RestaurantTable:
        table = RestaurantTable(
            table_no=data["table_no"],
            capacity=data.get("capacity", 4),
            status=data.get("status", "vacant"),
            current_order_id=data.get("current_order_id"),
        )
        return self._insert("insert_table", table)

    def update_table(
        self,
        table_no: str,
        fields: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> RestaurantTable:
        return self._conditional_update(
            "update_table", RestaurantTable, RestaurantTable.table_no, table_no, fields, expect
        )

    # -------------------------------------------------------------------------
    # Menu
    # -------------------------------------------------------------------------

    def list_menu_items(self) -> Sequence[MenuItem]:
        return self._read(
            "list_menu_items",
            lambda: self._db.execute(
                select(MenuItem).order_by(MenuItem.category.asc(), MenuItem.item_name.asc())
            ).scalars().all(),
        )

    def get_menu_item(self, item_id: str) -> MenuItem | None:
        return self._read(
            "get_menu_item",
            lambda: self._db.get(MenuItem, item_id, populate_existing=True),
        )

    def insert_menu_item(self, data: dict[str, Any]) -> MenuItem:
        item = MenuItem(item_id=new_id(IdPrefix.MENU_ITEM), **data)
        return self._insert("insert_menu_item", item)

    def update_menu_item(self, item_id: str, fields: dict[str, Any]) -> MenuItem:
        return self._conditional_update(
            "update_menu_item", MenuItem, MenuItem.item_id, item_id, fields, None
        )

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def list_orders(self, status: str = "all") -> Sequence[Order]:
        query = select(Order).order_by(Order.timestamp.desc(), Order.order_id.desc())
        if status != "all":
            query = query.where(Order.status == status)
        return self._read(
            "list_orders",
            lambda: self._db.execute(query.execution_options(populate_existing=True)).scalars().all(),
        )

    def get_order(self, order_id: str) -> Order | None:
        return self._read(
            "get_order",
            lambda: self._db.get(Order, order_id, populate_existing=True),
        )

    def insert_order(self, data: dict[str, Any]) -> Order:
        order = Order(order_id=new_id(IdPrefix.ORDER), timestamp=utcnow(), **data)
        return self._insert("insert_order", order)

    def update_order(
        self,
        order_id: str,
        fields: dict[str, Any],
        expect: dict[str, Any] | None = None,
    ) -> Order:
        return self._conditional_update(
            "update_order", Order, Order.order_id, order_id, fields, expect
        )

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def list_payments(self) -> Sequence[Payment]:
        return self._read(
            "list_payments",
            lambda: self._db.execute(
                select(Payment).order_by(Payment.payment_time.desc(), Payment.payment_id.desc())
            ).scalars().all(),
        )

    def get_payment_for_order(self, order_id: str) -> Payment | None:
        return self._read(
            "get_payment_for_order",
            lambda: self._db.scalar(select(Payment).where(Payment.order_id == order_id)),
        )

    def insert_payment(self, data: dict[str, Any]) -> Payment:
        payment = Payment(payment_id=new_id(IdPrefix.PAYMENT), payment_time=utcnow(), **data)
        return self._insert("insert_payment", payment)
