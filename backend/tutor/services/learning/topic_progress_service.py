"""
Topic Progress Service

Rolls a learner's attempts at a topic's exercises up into one progress
record. Metrics are always recomputed from the attempt log, so marking a
topic complete twice yields the same numbers (only completed_at moves).

Status thresholds (configurable):
- mastered:    mean score >= MASTERY_SCORE_THRESHOLD (90)
- completed:   mean score >= COMPLETION_SCORE_THRESHOLD (70)
- in_progress: anything lower

A topic counts as finished only when every active exercise has a correct
attempt; running out of attempts is not completion.
"""

import logging
from typing import Optional

from tutor.config import settings
from tutor.enums import ProgressStatus
from tutor.middleware.error_handling import NoInteractionsFoundError
from tutor.models.learning import ProgressMetrics, TopicProgressRecord
from tutor.services.learning.attempt_store import AttemptStore

logger = logging.getLogger(__name__)


def derive_status(score: float) -> ProgressStatus:
    """Map a mean attempt score to a topic status."""
    if score >= settings.MASTERY_SCORE_THRESHOLD:
        return ProgressStatus.MASTERED
    if score >= settings.COMPLETION_SCORE_THRESHOLD:
        return ProgressStatus.COMPLETED
    return ProgressStatus.IN_PROGRESS


class TopicProgressService:
    """Topic aggregator over the attempt store."""

    def __init__(self, store: AttemptStore):
        self.store = store

    async def are_all_exercises_completed(self, user_id: str, topic_id: str) -> bool:
        """
        True when every active exercise of the topic has a correct attempt.

        A topic without active exercises is never complete.
        """
        exercises = await self.store.list_active_exercises(topic_id)
        if not exercises:
            logger.info(f"Topic {topic_id} has no active exercises")
            return False

        for exercise in exercises:
            attempts = await self.store.list_attempts(user_id, exercise.id)
            if not any(a.is_correct for a in attempts):
                return False

        return True

    async def calculate_progress(
        self, user_id: str, topic_id: str
    ) -> Optional[ProgressMetrics]:
        """
        Aggregate every attempt at the topic's active exercises.

        Returns:
            ProgressMetrics, or None when the topic has no exercises or the
            learner has no attempts
        """
        exercises = await self.store.list_active_exercises(topic_id)
        if not exercises:
            return None

        attempts = await self.store.list_attempts_for_exercises(
            user_id, [e.id for e in exercises]
        )
        if not attempts:
            return None

        attempts.sort(key=lambda a: a.created_at)
        scores = [a.score for a in attempts if a.score is not None]

        return ProgressMetrics(
            score=round(sum(scores) / len(scores), 2) if scores else 0.0,
            attempts=len(attempts),
            time_spent=sum(a.response_time or 0 for a in attempts),
            started_at=attempts[0].created_at,
            recent_scores=scores,
        )

    async def create_topic_progress(
        self, user_id: str, learning_path_id: str, topic_id: str
    ) -> TopicProgressRecord:
        """
        Recompute and upsert the topic's progress record.

        Raises:
            NoInteractionsFoundError: If there is nothing to aggregate
        """
        metrics = await self.calculate_progress(user_id, topic_id)
        if metrics is None:
            raise NoInteractionsFoundError(
                "No interactions found to calculate progress",
                details={"topic_id": topic_id},
            )

        status = derive_status(metrics.score)
        record = await self.store.upsert_topic_progress(
            user_id, learning_path_id, topic_id, status, metrics
        )

        logger.info(
            f"Topic progress user={user_id} topic={topic_id}: {status.value} "
            f"(score={metrics.score}, attempts={metrics.attempts})"
        )
        return record

    async def get_topic_progress(
        self, user_id: str, learning_path_id: str, topic_id: str
    ) -> Optional[TopicProgressRecord]:
        return await self.store.get_topic_progress(user_id, learning_path_id, topic_id)

    async def list_learning_path_progress(
        self, user_id: str, learning_path_id: str
    ) -> list[TopicProgressRecord]:
        return await self.store.list_learning_path_progress(user_id, learning_path_id)
