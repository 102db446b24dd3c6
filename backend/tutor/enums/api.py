"""
API-related enums.

Defines enums for rate limiting and LLM operation attribution.
"""

from enum import Enum


class RateLimitType(str, Enum):
    """
    Rate limit categories for different endpoint types.

    Each category has a corresponding rate limit configured in settings.
    Usage:
        from tutor.enums import RateLimitType
        from tutor.config import settings

        limit = settings.get_rate_limit(RateLimitType.LLM_HEAVY)
    """

    # General API endpoints
    DEFAULT = "default"

    # Endpoints that call LLMs (expensive)
    LLM_HEAVY = "llm_heavy"


class LLMOperation(str, Enum):
    """
    Operation types for LLM calls.

    Used by LLMClient to pick the configured model for each task and
    to label usage records in logs.
    """

    CODE_EVALUATION = "CODE_EVALUATION"
    EXERCISE_FEEDBACK = "EXERCISE_FEEDBACK"
