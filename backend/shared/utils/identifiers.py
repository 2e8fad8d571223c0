"""
Identifier generation for menu items, orders and payments.

Format: <PREFIX>-<13-digit epoch milliseconds>-<8 random hex chars>
    ORD-1718020512345-9f3c01ab

The millisecond part keeps ids sortable by creation time; the random part
keeps two terminals creating records in the same millisecond apart.
"""

import re
import secrets
import time

_ID_PATTERN = re.compile(r"^[A-Z]+-\d{13}-[0-9a-f]{8}$")


def new_id(prefix: str) -> str:
    """Generate a new unique identifier with the given prefix."""
    millis = time.time_ns() // 1_000_000
    return f"{prefix}-{millis:013d}-{secrets.token_hex(4)}"


def is_generated_id(value: str, prefix: str | None = None) -> bool:
    """True when value has the shape produced by new_id (optionally with prefix)."""
    if not _ID_PATTERN.match(value):
        return False
    return prefix is None or value.startswith(f"{prefix}-")
