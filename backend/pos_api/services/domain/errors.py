"""
Domain errors raised by the POS services.

Routers map each kind to an HTTP error; the CLI prints the message.
Every error carries a message a cashier can read.
"""

from typing import Any


class LifecycleError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(message)


class NotFound(LifecycleError):
    """Referenced table, order or menu item does not exist."""

    def __init__(self, entity: str, entity_id: str | None, **context: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found", entity=entity, entity_id=entity_id, **context)


class InvalidTransition(LifecycleError):
    """Status change not permitted from the current state."""


class ValidationFailure(LifecycleError):
    """Input rejected before any write (amount mismatch, empty order, bad quantity)."""


class Conflict(LifecycleError):
    """State changed under us, or the record already exists."""


class UpstreamFailure(LifecycleError):
    """The data store could not complete a call (network, server, database)."""

    def __init__(self, operation: str, cause: BaseException | None = None, **context: Any):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Data store call '{operation}' failed{detail}", operation=operation, **context)


class PartialCommit(LifecycleError):
    """
    A multi-step operation stopped after at least one step was committed.

    Nothing is rolled back. The message says what is now true so the
    operator can reconcile instead of retrying blindly.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        committed_steps: list[str],
        failed_step: str,
        cause: LifecycleError,
        **context: Any,
    ):
        self.operation = operation
        self.committed_steps = committed_steps
        self.failed_step = failed_step
        self.cause = cause
        super().__init__(
            message,
            operation=operation,
            committed_steps=committed_steps,
            failed_step=failed_step,
            **context,
        )
