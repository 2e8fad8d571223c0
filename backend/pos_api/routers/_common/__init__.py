"""
Common utilities shared across routers.
"""

from .deps import get_store, schedule_mirror_push, push_mirror_snapshot
from .errors import domain_errors, to_http_error

__all__ = [
    "get_store",
    "schedule_mirror_push",
    "push_mirror_snapshot",
    "domain_errors",
    "to_http_error",
]
