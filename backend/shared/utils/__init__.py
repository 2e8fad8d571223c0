"""
Utilities module: Exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    InvalidTransitionError,
    ConflictError,
    PartialCommitError,
    ExternalServiceError,
)
from shared.utils.validators import (
    sanitize_text,
    validate_quantity,
    to_money,
)

__all__ = [
    # exceptions
    "NotFoundError",
    "ValidationError",
    "InvalidTransitionError",
    "ConflictError",
    "PartialCommitError",
    "ExternalServiceError",
    # validators
    "sanitize_text",
    "validate_quantity",
    "to_money",
]
