"""
SQLAlchemy Database Models for the Exercise Tracker

Tables:
- users: Learners, only the fields needed to calibrate AI calls
- exercises: Exercises attached to a lesson topic (read-only here)
- exercise_attempts: Append-only log of learner attempts
- topic_progress: Aggregated per-topic completion records

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    There is a corresponding Pydantic file: tutor/models/learning.py

    Rows are converted into Pydantic records inside AttemptStore, so the
    service layer never touches ORM objects.

    Column types are kept portable (JSON instead of JSONB/ARRAY) so the
    same schema runs on SQLite in tests.
"""

from datetime import datetime, timezone
from typing import Optional
import uuid


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


from sqlalchemy import (  # noqa: E402
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column  # noqa: E402

from tutor.db.base import Base  # noqa: E402


class User(Base):
    """
    Learner account.

    Attributes:
        id: Identity supplied by the auth provider.
        email: Optional contact address.
        skill_level: "beginner" or "intermediate". Passed to the AI judge
            and feedback generator to calibrate tone and strictness.
        created_at: Timestamp when the row was created.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    skill_level: Mapped[str] = mapped_column(String(20), default="beginner")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


class Exercise(Base):
    """
    Exercise attached to a topic of a learning path.

    Created by the content pipeline; this service only reads it.

    Attributes:
        id: Content id (UUID string).
        topic_id: Topic the exercise belongs to.
        learning_path_id: Owning learning path, if known.
        exercise_type: One of multiple-choice, code-completion, debugging, coding.
        question: Exercise prompt shown to the learner.
        correct_answer: Reference answer. Empty for coding exercises.
        evaluation_criteria: Grading hints for the AI judge (coding only).
        order_index: Position within the topic.
        is_active: Inactive exercises are ignored by topic aggregation.
    """

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    topic_id: Mapped[str] = mapped_column(String(64), index=True)
    learning_path_id: Mapped[Optional[str]] = mapped_column(String(64))
    exercise_type: Mapped[str] = mapped_column(String(30))
    question: Mapped[str] = mapped_column(Text, default="")
    correct_answer: Mapped[str] = mapped_column(Text, default="")
    evaluation_criteria: Mapped[Optional[str]] = mapped_column(Text)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


class ExerciseAttempt(Base):
    """
    One learner answer to one exercise.

    Rows are append-only. The unique (user_id, content_id, attempt_number)
    constraint turns a lost race between two concurrent submissions into an
    IntegrityError instead of a fourth attempt.

    Attributes:
        id: Primary key, UUID string.
        user_id: Learner who answered.
        content_id: Exercise answered.
        attempt_number: 1-based position in the learner's history for this exercise.
        user_answer: Raw answer text.
        correct_answer: Reference answer at submission time (empty for coding).
        is_correct: Final correctness verdict.
        score: 0-100. 100/0 for closed-form exercises, judge score for coding.
        ai_feedback: Feedback from the judge or feedback generator.
        ai_suggestions: Suggestions (coding) or progressive hints (other types).
        related_concepts: Concepts named by the feedback generator.
        response_time: Seconds the learner spent, as reported by the client.
        created_at: Submission timestamp.
    """

    __tablename__ = "exercise_attempts"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "content_id", "attempt_number", name="uq_attempt_number"
        ),
        Index("ix_attempts_user_content", "user_id", "content_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64))
    content_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("exercises.id", ondelete="CASCADE")
    )
    attempt_number: Mapped[int] = mapped_column(Integer)

    user_answer: Mapped[str] = mapped_column(Text)
    correct_answer: Mapped[str] = mapped_column(Text, default="")
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    score: Mapped[Optional[float]] = mapped_column(Float)

    ai_feedback: Mapped[Optional[str]] = mapped_column(Text)
    ai_suggestions: Mapped[list] = mapped_column(JSON, default=list)
    related_concepts: Mapped[list] = mapped_column(JSON, default=list)

    response_time: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )


class TopicProgress(Base):
    """
    Aggregated progress of a learner on one topic of a learning path.

    Written only when the learner marks the topic complete; every write
    recomputes the metrics from the attempt log.

    Attributes:
        status: not_started, in_progress, completed or mastered.
        score: Mean of attempt scores, rounded to 2 decimals.
        attempts: Total attempts across the topic's exercises.
        time_spent: Sum of reported response times in seconds.
        recent_scores: Chronological list of attempt scores.
        started_at: Timestamp of the first attempt.
        completed_at: Timestamp of the latest "mark complete".
    """

    __tablename__ = "topic_progress"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "learning_path_id", "topic_id", name="uq_topic_progress"
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    learning_path_id: Mapped[str] = mapped_column(String(64))
    topic_id: Mapped[str] = mapped_column(String(64))

    status: Mapped[str] = mapped_column(String(20), default="not_started")
    score: Mapped[float] = mapped_column(Float, default=0.0)
    attempts: Mapped[int] = mapped_column(Integer, default=0)
    time_spent: Mapped[float] = mapped_column(Float, default=0.0)
    recent_scores: Mapped[list] = mapped_column(JSON, default=list)

    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )
