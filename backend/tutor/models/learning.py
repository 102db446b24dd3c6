"""
Pydantic Models for the Exercise Tracker

Three groups of models live here:
- Persistence records: validated once at the AttemptStore boundary so the
  service layer works with typed, immutable-by-convention data.
- AI collaborator outputs: CodeEvaluation and ExerciseFeedback, validated
  from the LLM's JSON before anything is persisted.
- API schemas: camelCase request/response bodies for the HTTP routers.

ARCHITECTURE NOTE:
    There is a corresponding SQLAlchemy file: tutor/db/models.py
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field, StringConstraints, field_validator, model_validator

from tutor.enums.learning import (
    ExerciseType,
    ProgressStatus,
    RejectionReason,
    SkillLevel,
)
from tutor.models.base import (
    CamelRequest,
    CamelResponse,
    ServiceModel,
    StrictResponse,
)

# Code answers keep their indentation
RawAnswer = Annotated[str, StringConstraints(strip_whitespace=False, min_length=1)]


# ===========================================
# Persistence Records
# ===========================================


class ExerciseRecord(ServiceModel):
    """Exercise as seen by the tracker."""

    id: str
    topic_id: str
    learning_path_id: Optional[str] = None
    exercise_type: ExerciseType
    question: str = ""
    correct_answer: str = ""
    evaluation_criteria: Optional[str] = None
    order_index: int = 0
    is_active: bool = True


class AttemptDraft(ServiceModel):
    """Attempt about to be appended; the store assigns id and created_at."""

    user_id: str
    content_id: str
    attempt_number: int = Field(..., ge=1)
    user_answer: str
    correct_answer: str = ""
    is_correct: bool
    score: Optional[float] = Field(None, ge=0, le=100)
    ai_feedback: Optional[str] = None
    ai_suggestions: list[str] = Field(default_factory=list)
    related_concepts: list[str] = Field(default_factory=list)
    response_time: Optional[float] = Field(None, ge=0)


class AttemptRecord(AttemptDraft):
    """Persisted attempt."""

    id: str
    created_at: datetime

    @field_validator("ai_suggestions", "related_concepts", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


class ProgressMetrics(ServiceModel):
    """Topic metrics recomputed from the attempt log."""

    score: float
    attempts: int
    time_spent: float
    started_at: datetime
    recent_scores: list[float] = Field(default_factory=list)


class TopicProgressRecord(CamelResponse):
    """Persisted topic progress; also the API representation."""

    id: str
    user_id: str
    learning_path_id: str
    topic_id: str
    status: ProgressStatus
    score: float
    attempts: int
    time_spent: float
    recent_scores: list[float] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("recent_scores", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []


# ===========================================
# AI Collaborator Outputs
# ===========================================


class CodeEvaluation(StrictResponse):
    """
    Verdict of the AI judge on a coding answer.

    Attributes:
        is_passing: Whether the code solves the exercise.
        score: 0-100 quality score.
        feedback: Encouraging explanation of the verdict.
        suggestions: Concrete next steps for the learner.
        correctness_analysis: What works and what does not.
        code_quality: Style and practice observations.
    """

    is_passing: bool
    score: float = Field(..., ge=0, le=100)
    feedback: str
    suggestions: list[str] = Field(default_factory=list)
    correctness_analysis: Optional[str] = None
    code_quality: Optional[str] = None

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, v):
        # Models occasionally answer 105 or -5
        if isinstance(v, (int, float)):
            return max(0.0, min(100.0, float(v)))
        return v


class ExerciseFeedback(StrictResponse):
    """Hints for a wrong closed-form answer. Never contains the solution."""

    feedback: str
    hints: list[str] = Field(default_factory=list)
    related_concepts: list[str] = Field(default_factory=list)


# ===========================================
# Service Inputs / Outputs
# ===========================================


class SubmitAnswerCommand(ServiceModel):
    """Validated submission handed from the router to the orchestrator."""

    user_id: str
    content_id: str
    user_answer: str = Field(..., min_length=1)
    correct_answer: str = ""
    is_correct: bool = False  # Advisory; ignored for coding exercises
    exercise_type: ExerciseType
    exercise_question: str = ""
    skill_level: SkillLevel = SkillLevel.BEGINNER
    evaluation_criteria: Optional[str] = None
    response_time: Optional[float] = Field(None, ge=0)


class SubmitAnswerResult(CamelResponse):
    """
    Outcome of a submission.

    On rejection only success, attempt_number, max_attempts_reached and
    reason are set; nothing was recorded.
    """

    success: bool
    attempt_number: int
    max_attempts_reached: bool
    is_correct: Optional[bool] = None
    score: Optional[float] = None
    ai_feedback: Optional[str] = None
    ai_suggestions: list[str] = Field(default_factory=list)
    related_concepts: list[str] = Field(default_factory=list)
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None


class SavedAnswerStatus(CamelResponse):
    """Latest answer plus aggregate status, used to restore the exercise UI."""

    user_answer: str
    is_correct: bool
    timestamp: datetime
    attempt_number: int
    max_attempts_reached: bool
    is_completed: bool
    ai_feedback: Optional[str] = None
    ai_suggestions: list[str] = Field(default_factory=list)


class ExerciseStats(CamelResponse):
    """Per-learner attempt statistics."""

    total_attempts: int = 0
    correct_answers: int = 0
    average_score: float = 0.0
    success_rate: float = 0.0


# ===========================================
# API Requests
# ===========================================


class SubmitAnswerRequest(CamelRequest):
    """
    Body of POST /api/exercises/interactions.

    correctAnswer and isCorrect come from the client's own grading and are
    required for every type except "coding", which the AI judge grades.
    """

    content_id: str = Field(..., min_length=1)
    exercise_id: str = Field(..., min_length=1)
    user_answer: RawAnswer
    correct_answer: Optional[str] = None
    is_correct: Optional[bool] = None
    exercise_type: ExerciseType
    exercise_question: Optional[str] = None
    evaluation_criteria: Optional[str] = None
    response_time: Optional[float] = Field(None, ge=0)

    @field_validator("user_answer")
    @classmethod
    def _reject_blank_answer(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("userAnswer must not be blank")
        return v

    @model_validator(mode="after")
    def _require_client_grading(self):
        if not self.exercise_type.is_ai_graded:
            if self.correct_answer is None or self.is_correct is None:
                raise ValueError(
                    "correctAnswer and isCorrect are required for "
                    f"{self.exercise_type.value} exercises"
                )
        return self

    def to_command(self, user_id: str, skill_level: SkillLevel) -> SubmitAnswerCommand:
        return SubmitAnswerCommand(
            user_id=user_id,
            content_id=self.content_id,
            user_answer=self.user_answer,
            correct_answer=self.correct_answer or "",
            is_correct=bool(self.is_correct),
            exercise_type=self.exercise_type,
            exercise_question=self.exercise_question or "",
            skill_level=skill_level,
            evaluation_criteria=self.evaluation_criteria,
            response_time=self.response_time,
        )


class TopicProgressRequest(CamelRequest):
    """Body of POST /api/progress/topic."""

    learning_path_id: str = Field(..., min_length=1)
    topic_id: str = Field(..., min_length=1)


# ===========================================
# API Responses
# ===========================================


class SavedAnswerResponse(CamelResponse):
    """Keyed by exercise id; empty when the learner has not answered yet."""

    success: bool = True
    data: dict[str, SavedAnswerStatus] = Field(default_factory=dict)


class ExerciseStatsResponse(CamelResponse):
    success: bool = True
    data: ExerciseStats


class TopicProgressCreateResponse(CamelResponse):
    success: bool = True
    data: TopicProgressRecord
    message: str


class TopicProgressResponse(CamelResponse):
    success: bool = True
    data: Optional[TopicProgressRecord] = None
    all_exercises_completed: bool


class LearningPathProgressResponse(CamelResponse):
    success: bool = True
    data: list[TopicProgressRecord] = Field(default_factory=list)
