"""
Shared module for common utilities used by the REST API and the CLI.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Statuses, order transition table, limits

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy engine, sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and logging filter

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input normalization, money handling
  - schemas.py: Pydantic request/response schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, ORDER_TRANSITIONS
    from shared.utils.exceptions import NotFoundError, ConflictError
"""
