"""
Attempt Store

Persistence for the exercise tracker over an explicit AsyncSession. The
store is the only place that touches ORM rows; everything it returns is a
validated Pydantic record.

Responsibilities:
- Append-only attempt log per (user, exercise)
- Active exercises of a topic, in lesson order
- Topic progress upsert keyed by (user, learning path, topic)
- Learner lookups (skill level, aggregate stats)

Attempt numbers are protected by a unique (user_id, content_id,
attempt_number) constraint. When two submissions race for the same number
the loser gets an AttemptConflictError instead of a fourth attempt.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tutor.db.models import Exercise, ExerciseAttempt, TopicProgress, User
from tutor.enums import ProgressStatus, SkillLevel
from tutor.middleware.error_handling import AttemptConflictError
from tutor.models.learning import (
    AttemptDraft,
    AttemptRecord,
    ExerciseRecord,
    ExerciseStats,
    ProgressMetrics,
    TopicProgressRecord,
)

logger = logging.getLogger(__name__)


class AttemptStore:
    """Repository for attempts, exercises and topic progress."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ===========================================
    # Attempts
    # ===========================================

    async def list_attempts(self, user_id: str, content_id: str) -> list[AttemptRecord]:
        """All attempts of a learner at one exercise, oldest first."""
        result = await self.db.execute(
            select(ExerciseAttempt)
            .where(
                ExerciseAttempt.user_id == user_id,
                ExerciseAttempt.content_id == content_id,
            )
            .order_by(ExerciseAttempt.attempt_number)
        )
        return [AttemptRecord.model_validate(row) for row in result.scalars().all()]

    async def list_attempts_for_exercises(
        self, user_id: str, content_ids: list[str]
    ) -> list[AttemptRecord]:
        """Attempts of a learner across several exercises, in submission order."""
        if not content_ids:
            return []
        result = await self.db.execute(
            select(ExerciseAttempt)
            .where(
                ExerciseAttempt.user_id == user_id,
                ExerciseAttempt.content_id.in_(content_ids),
            )
            .order_by(ExerciseAttempt.created_at, ExerciseAttempt.attempt_number)
        )
        return [AttemptRecord.model_validate(row) for row in result.scalars().all()]

    async def append_attempt(self, draft: AttemptDraft) -> AttemptRecord:
        """
        Append one attempt and commit.

        Raises:
            AttemptConflictError: If the attempt number is already taken
            IntegrityError: For any other constraint violation
        """
        row = ExerciseAttempt(**draft.model_dump())
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not await self._attempt_exists(draft):
                raise
            logger.warning(
                f"Attempt {draft.attempt_number} for user={draft.user_id} "
                f"content={draft.content_id} already exists"
            )
            raise AttemptConflictError(
                "Another submission for this exercise was recorded first",
                details={
                    "content_id": draft.content_id,
                    "attempt_number": draft.attempt_number,
                },
            ) from e

        await self.db.refresh(row)
        return AttemptRecord.model_validate(row)

    async def _attempt_exists(self, draft: AttemptDraft) -> bool:
        result = await self.db.execute(
            select(ExerciseAttempt.id).where(
                ExerciseAttempt.user_id == draft.user_id,
                ExerciseAttempt.content_id == draft.content_id,
                ExerciseAttempt.attempt_number == draft.attempt_number,
            )
        )
        return result.first() is not None

    # ===========================================
    # Exercises
    # ===========================================

    async def get_exercise(self, exercise_id: str) -> Optional[ExerciseRecord]:
        exercise = await self.db.get(Exercise, exercise_id)
        return ExerciseRecord.model_validate(exercise) if exercise else None

    async def list_active_exercises(self, topic_id: str) -> list[ExerciseRecord]:
        """Active exercises of a topic ordered by order_index."""
        result = await self.db.execute(
            select(Exercise)
            .where(Exercise.topic_id == topic_id, Exercise.is_active.is_(True))
            .order_by(Exercise.order_index)
        )
        return [ExerciseRecord.model_validate(row) for row in result.scalars().all()]

    # ===========================================
    # Topic Progress
    # ===========================================

    async def _get_progress_row(
        self, user_id: str, learning_path_id: str, topic_id: str
    ) -> Optional[TopicProgress]:
        result = await self.db.execute(
            select(TopicProgress).where(
                TopicProgress.user_id == user_id,
                TopicProgress.learning_path_id == learning_path_id,
                TopicProgress.topic_id == topic_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_topic_progress(
        self, user_id: str, learning_path_id: str, topic_id: str
    ) -> Optional[TopicProgressRecord]:
        row = await self._get_progress_row(user_id, learning_path_id, topic_id)
        return TopicProgressRecord.model_validate(row) if row else None

    async def upsert_topic_progress(
        self,
        user_id: str,
        learning_path_id: str,
        topic_id: str,
        status: ProgressStatus,
        metrics: ProgressMetrics,
    ) -> TopicProgressRecord:
        """
        Create or overwrite the progress row and stamp completed_at.

        A concurrent insert of the same key is retried once as an update.
        """
        try:
            row = await self._write_progress(
                user_id, learning_path_id, topic_id, status, metrics
            )
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                f"Progress row for topic={topic_id} created concurrently, updating"
            )
            row = await self._write_progress(
                user_id, learning_path_id, topic_id, status, metrics
            )

        await self.db.refresh(row)
        return TopicProgressRecord.model_validate(row)

    async def _write_progress(
        self,
        user_id: str,
        learning_path_id: str,
        topic_id: str,
        status: ProgressStatus,
        metrics: ProgressMetrics,
    ) -> TopicProgress:
        row = await self._get_progress_row(user_id, learning_path_id, topic_id)
        if row is None:
            row = TopicProgress(
                user_id=user_id,
                learning_path_id=learning_path_id,
                topic_id=topic_id,
            )
            self.db.add(row)

        row.status = status.value
        row.score = metrics.score
        row.attempts = metrics.attempts
        row.time_spent = metrics.time_spent
        row.recent_scores = list(metrics.recent_scores)
        row.started_at = metrics.started_at
        row.completed_at = datetime.now(timezone.utc)

        await self.db.commit()
        return row

    async def list_learning_path_progress(
        self, user_id: str, learning_path_id: str
    ) -> list[TopicProgressRecord]:
        """All progress rows of a learning path, most recently updated first."""
        result = await self.db.execute(
            select(TopicProgress)
            .where(
                TopicProgress.user_id == user_id,
                TopicProgress.learning_path_id == learning_path_id,
            )
            .order_by(TopicProgress.updated_at.desc())
        )
        return [
            TopicProgressRecord.model_validate(row) for row in result.scalars().all()
        ]

    # ===========================================
    # Learners
    # ===========================================

    async def get_user_skill_level(self, user_id: str) -> SkillLevel:
        """Skill level of a learner, beginner when unknown."""
        result = await self.db.execute(
            select(User.skill_level).where(User.id == user_id)
        )
        level = result.scalar_one_or_none()
        try:
            return SkillLevel(level) if level else SkillLevel.BEGINNER
        except ValueError:
            logger.warning(f"Unknown skill level {level!r} for user={user_id}")
            return SkillLevel.BEGINNER

    async def get_user_stats(self, user_id: str) -> ExerciseStats:
        """Attempt totals, average score and success rate of a learner."""
        result = await self.db.execute(
            select(
                func.count(ExerciseAttempt.id),
                func.sum(case((ExerciseAttempt.is_correct.is_(True), 1), else_=0)),
                func.avg(ExerciseAttempt.score),
            ).where(ExerciseAttempt.user_id == user_id)
        )
        total, correct, average = result.one()
        total = total or 0
        correct = int(correct or 0)

        return ExerciseStats(
            total_attempts=total,
            correct_answers=correct,
            average_score=round(float(average or 0.0), 2),
            success_rate=round(correct / total * 100, 2) if total else 0.0,
        )
