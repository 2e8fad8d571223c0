"""
Translation of domain errors into HTTP errors.

Usage:
    with domain_errors():
        order = LifecycleService(store).place_order(...)
"""

from contextlib import contextmanager
from typing import Any, Iterator

from shared.utils.exceptions import (
    AppException,
    ConflictError,
    ExternalServiceError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    PartialCommitError,
    ValidationError,
)
from pos_api.services.domain.errors import (
    Conflict,
    InvalidTransition,
    LifecycleError,
    NotFound,
    PartialCommit,
    UpstreamFailure,
    ValidationFailure,
)

# Keyword names the HTTP exceptions take themselves
_RESERVED = frozenset({
    "status_code",
    "detail",
    "log_level",
    "headers",
    "entity",
    "entity_id",
    "operation",
    "committed_steps",
    "failed_step",
    "service",
    "is_unavailable",
    "retry_after",
    "error",
})

DATA_STORE_RETRY_AFTER = 5


def _context(exc: LifecycleError) -> dict[str, Any]:
    return {k: v for k, v in exc.context.items() if k not in _RESERVED}


def to_http_error(exc: LifecycleError) -> AppException:
    """Map a domain error to the HTTP error a client sees."""
    if isinstance(exc, NotFound):
        return NotFoundError(exc.entity, exc.entity_id, **_context(exc))
    if isinstance(exc, InvalidTransition):
        return InvalidTransitionError(exc.message, **_context(exc))
    if isinstance(exc, ValidationFailure):
        return ValidationError(exc.message, **_context(exc))
    if isinstance(exc, Conflict):
        return ConflictError(exc.message, **_context(exc))
    if isinstance(exc, PartialCommit):
        return PartialCommitError(
            exc.operation,
            exc.message,
            committed_steps=exc.committed_steps,
            failed_step=exc.failed_step,
            **_context(exc),
        )
    if isinstance(exc, UpstreamFailure):
        return ExternalServiceError(
            "Data store",
            is_unavailable=True,
            retry_after=DATA_STORE_RETRY_AFTER,
            operation=exc.operation,
            cause=str(exc.cause) if exc.cause else None,
        )
    return InternalError(exc.message, **_context(exc))


@contextmanager
def domain_errors() -> Iterator[None]:
    try:
        yield
    except LifecycleError as exc:
        raise to_http_error(exc) from exc
