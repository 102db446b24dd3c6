"""
Learning services for the exercise tracker.

- AttemptStore: persistence over an AsyncSession
- CodeEvaluator: AI judge for coding exercises
- FeedbackGenerator: AI hints for wrong closed-form answers
- ExerciseInteractionService: attempt orchestration
- TopicProgressService: topic aggregation
"""

from tutor.services.learning.attempt_store import AttemptStore
from tutor.services.learning.code_evaluator import CodeEvaluator
from tutor.services.learning.feedback_generator import FeedbackGenerator
from tutor.services.learning.interaction_service import ExerciseInteractionService
from tutor.services.learning.topic_progress_service import (
    TopicProgressService,
    derive_status,
)

__all__ = [
    "AttemptStore",
    "CodeEvaluator",
    "ExerciseInteractionService",
    "FeedbackGenerator",
    "TopicProgressService",
    "derive_status",
]
