"""HTTP middleware: error handling and rate limiting."""

from tutor.middleware.error_handling import (
    AttemptConflictError,
    LLMError,
    NoInteractionsFoundError,
    NotFoundError,
    ServiceError,
    setup_error_handling,
)
from tutor.middleware.rate_limit import limiter, setup_rate_limiting

__all__ = [
    "AttemptConflictError",
    "LLMError",
    "NoInteractionsFoundError",
    "NotFoundError",
    "ServiceError",
    "limiter",
    "setup_error_handling",
    "setup_rate_limiting",
]
