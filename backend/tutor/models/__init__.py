"""Pydantic models for records, AI outputs and API bodies."""

from tutor.models.base import (
    CamelRequest,
    CamelResponse,
    ServiceModel,
    StrictRequest,
    StrictResponse,
)
from tutor.models.learning import (
    AttemptDraft,
    AttemptRecord,
    CodeEvaluation,
    ExerciseFeedback,
    ExerciseRecord,
    ExerciseStats,
    ExerciseStatsResponse,
    LearningPathProgressResponse,
    ProgressMetrics,
    SavedAnswerResponse,
    SavedAnswerStatus,
    SubmitAnswerCommand,
    SubmitAnswerRequest,
    SubmitAnswerResult,
    TopicProgressCreateResponse,
    TopicProgressRecord,
    TopicProgressRequest,
    TopicProgressResponse,
)

__all__ = [
    # Base
    "CamelRequest",
    "CamelResponse",
    "ServiceModel",
    "StrictRequest",
    "StrictResponse",
    # Records
    "AttemptDraft",
    "AttemptRecord",
    "ExerciseRecord",
    "ProgressMetrics",
    "TopicProgressRecord",
    # AI outputs
    "CodeEvaluation",
    "ExerciseFeedback",
    # Service
    "ExerciseStats",
    "SavedAnswerStatus",
    "SubmitAnswerCommand",
    "SubmitAnswerResult",
    # API
    "ExerciseStatsResponse",
    "LearningPathProgressResponse",
    "SavedAnswerResponse",
    "SubmitAnswerRequest",
    "TopicProgressCreateResponse",
    "TopicProgressRequest",
    "TopicProgressResponse",
]
