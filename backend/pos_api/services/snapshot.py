"""
Versioned point-in-time snapshot of the whole store.

Used by polling UIs (GET /api/snapshot), the spreadsheet mirror and the
drift checker. The version is a digest of the data only, so an unchanged
store yields the same version no matter when it is read.
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pos_api.models import utcnow
from pos_api.repositories.base import DataStore

Record = dict[str, Any]


def compute_version(tables: list[Record], menu: list[Record], orders: list[Record], payments: list[Record]) -> str:
    canonical = json.dumps(
        {"tables": tables, "menu": menu, "orders": orders, "payments": payments},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Snapshot:
    tables: list[Record]
    menu: list[Record]
    orders: list[Record]
    payments: list[Record]
    taken_at: datetime = field(default_factory=utcnow)
    version: str = ""

    def __post_init__(self) -> None:
        if not self.version:
            object.__setattr__(
                self,
                "version",
                compute_version(self.tables, self.menu, self.orders, self.payments),
            )

    def as_payload(self) -> dict[str, Any]:
        """Body for the spreadsheet webhook. Each list replaces one sheet."""
        return {
            "action": "sync",
            "tables": self.tables,
            "menu": self.menu,
            "orders": self.orders,
            "payments": self.payments,
        }


def take_snapshot(store: DataStore) -> Snapshot:
    return Snapshot(
        tables=[t.to_record() for t in store.list_tables()],
        menu=[m.to_record() for m in store.list_menu_items()],
        orders=[o.to_record() for o in store.list_orders()],
        payments=[p.to_record() for p in store.list_payments()],
    )
