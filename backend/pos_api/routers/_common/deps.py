"""
Router dependencies and the background mirror push.
"""

from fastapi import BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.config.logging import mirror_logger as logger
from shared.infrastructure.db import get_db, get_db_context
from pos_api.repositories import DataStore, SqlDataStore
from pos_api.services.domain.errors import LifecycleError
from pos_api.services.mirror import MirrorResult, get_mirror
from pos_api.services.snapshot import take_snapshot


def get_store(db: Session = Depends(get_db)) -> DataStore:
    """FastAPI dependency: data store bound to the request's session."""
    return SqlDataStore(db)


async def push_mirror_snapshot() -> MirrorResult:
    """
    Snapshot the store in a fresh session and push it to the spreadsheet.

    Runs after the response is sent; never raises.
    """
    try:
        with get_db_context() as db:
            snapshot = take_snapshot(SqlDataStore(db))
    except LifecycleError as exc:
        logger.warning("Mirror snapshot failed", error=exc.message)
        return MirrorResult(False, exc.message)
    return await get_mirror().push(snapshot)


def schedule_mirror_push(background_tasks: BackgroundTasks) -> None:
    """Queue a mirror push when the mirror and auto sync are on."""
    if settings.mirror_enabled and settings.mirror_auto_sync:
        background_tasks.add_task(push_mirror_snapshot)
