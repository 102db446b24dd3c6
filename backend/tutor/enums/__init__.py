"""
Centralized enum definitions for the application.

All enums are organized by domain:
- learning.py: Exercise types, skill levels, progress status, rejection reasons
- api.py: Rate limit categories, LLM operations

Usage:
    from tutor.enums import ExerciseType, ProgressStatus

    # Or import from specific module
    from tutor.enums.api import RateLimitType
"""

from tutor.enums.api import LLMOperation, RateLimitType
from tutor.enums.learning import (
    ExerciseType,
    ProgressStatus,
    RejectionReason,
    SkillLevel,
)

__all__ = [
    # API
    "LLMOperation",
    "RateLimitType",
    # Learning
    "ExerciseType",
    "ProgressStatus",
    "RejectionReason",
    "SkillLevel",
]
