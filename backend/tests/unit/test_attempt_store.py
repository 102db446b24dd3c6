"""
Unit tests for AttemptStore against an in-memory SQLite database.

Tests:
- Attempt append/list and the unique attempt-number constraint
- Active exercise lookup ordering
- Topic progress upsert (create then overwrite)
- Learner skill level and stats
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from tutor.db.models import Exercise, User
from tutor.enums import ExerciseType, ProgressStatus, SkillLevel
from tutor.middleware.error_handling import AttemptConflictError
from tutor.models.learning import AttemptDraft, ProgressMetrics
from tutor.services.learning.attempt_store import AttemptStore


@pytest.fixture
def store(db_session):
    return AttemptStore(db_session)


async def seed_exercises(db_session):
    db_session.add_all(
        [
            Exercise(id="ex-2", topic_id="topic-1", exercise_type="coding", order_index=2),
            Exercise(id="ex-1", topic_id="topic-1", exercise_type="multiple-choice", order_index=1),
            Exercise(
                id="ex-old",
                topic_id="topic-1",
                exercise_type="debugging",
                order_index=0,
                is_active=False,
            ),
            Exercise(id="ex-other", topic_id="topic-2", exercise_type="debugging"),
        ]
    )
    await db_session.commit()


def draft(attempt_number=1, is_correct=False, score=0.0, content_id="ex-1", **kwargs):
    return AttemptDraft(
        user_id="user-1",
        content_id=content_id,
        attempt_number=attempt_number,
        user_answer="var x = 5",
        correct_answer="let x = 5",
        is_correct=is_correct,
        score=score,
        **kwargs,
    )


class TestAttempts:
    """Append-only attempt log."""

    @pytest.mark.asyncio
    async def test_append_and_list(self, store, db_session):
        await seed_exercises(db_session)

        first = await store.append_attempt(
            draft(1, ai_feedback="Think again", ai_suggestions=["Hint"])
        )
        await store.append_attempt(draft(2, is_correct=True, score=100))

        attempts = await store.list_attempts("user-1", "ex-1")

        assert [a.attempt_number for a in attempts] == [1, 2]
        assert attempts[0].ai_suggestions == ["Hint"]
        assert attempts[1].is_correct is True
        assert first.id
        assert first.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_attempt_number_conflicts(self, store, db_session):
        await seed_exercises(db_session)
        await store.append_attempt(draft(1))

        with pytest.raises(AttemptConflictError):
            await store.append_attempt(draft(1))

        assert len(await store.list_attempts("user-1", "ex-1")) == 1

    @pytest.mark.asyncio
    async def test_unknown_exercise_is_not_a_conflict(self, store, db_session):
        await db_session.execute(text("PRAGMA foreign_keys=ON"))
        await db_session.commit()
        await seed_exercises(db_session)

        with pytest.raises(IntegrityError):
            await store.append_attempt(draft(1, content_id="does-not-exist"))

        assert await store.list_attempts("user-1", "does-not-exist") == []

    @pytest.mark.asyncio
    async def test_list_attempts_is_per_user_and_exercise(self, store, db_session):
        await seed_exercises(db_session)
        await store.append_attempt(draft(1))
        await store.append_attempt(draft(1, content_id="ex-2"))

        assert len(await store.list_attempts("user-1", "ex-1")) == 1
        assert await store.list_attempts("user-2", "ex-1") == []

    @pytest.mark.asyncio
    async def test_list_attempts_for_exercises(self, store, db_session):
        await seed_exercises(db_session)
        await store.append_attempt(draft(1, content_id="ex-2"))
        await store.append_attempt(draft(1))

        attempts = await store.list_attempts_for_exercises("user-1", ["ex-1", "ex-2"])

        assert {a.content_id for a in attempts} == {"ex-1", "ex-2"}
        assert await store.list_attempts_for_exercises("user-1", []) == []


class TestExercises:

    @pytest.mark.asyncio
    async def test_active_exercises_in_order(self, store, db_session):
        await seed_exercises(db_session)

        exercises = await store.list_active_exercises("topic-1")

        assert [e.id for e in exercises] == ["ex-1", "ex-2"]
        assert exercises[1].exercise_type == ExerciseType.CODING

    @pytest.mark.asyncio
    async def test_get_exercise(self, store, db_session):
        await seed_exercises(db_session)

        exercise = await store.get_exercise("ex-2")

        assert exercise.topic_id == "topic-1"
        assert await store.get_exercise("does-not-exist") is None


class TestTopicProgress:
    """Upsert keyed by (user, learning path, topic)."""

    @pytest.mark.asyncio
    async def test_create_then_overwrite(self, store):
        started = datetime(2026, 1, 1, tzinfo=timezone.utc)
        metrics = ProgressMetrics(
            score=50.0, attempts=2, time_spent=30.0, started_at=started,
            recent_scores=[0, 100],
        )

        created = await store.upsert_topic_progress(
            "user-1", "lp-1", "topic-1", ProgressStatus.IN_PROGRESS, metrics
        )
        updated = await store.upsert_topic_progress(
            "user-1",
            "lp-1",
            "topic-1",
            ProgressStatus.COMPLETED,
            metrics.model_copy(update={"score": 75.0, "attempts": 3}),
        )

        assert created.id == updated.id
        assert updated.status == ProgressStatus.COMPLETED
        assert updated.score == 75.0
        assert updated.attempts == 3
        assert updated.recent_scores == [0, 100]
        assert updated.completed_at is not None

        fetched = await store.get_topic_progress("user-1", "lp-1", "topic-1")
        assert fetched.score == 75.0
        assert len(await store.list_learning_path_progress("user-1", "lp-1")) == 1

    @pytest.mark.asyncio
    async def test_missing_progress_is_none(self, store):
        assert await store.get_topic_progress("user-1", "lp-1", "topic-1") is None


class TestLearners:

    @pytest.mark.asyncio
    async def test_skill_level_defaults_to_beginner(self, store):
        assert await store.get_user_skill_level("nobody") == SkillLevel.BEGINNER

    @pytest.mark.asyncio
    async def test_skill_level_from_user_row(self, store, db_session):
        db_session.add(User(id="user-1", skill_level="intermediate"))
        await db_session.commit()

        assert await store.get_user_skill_level("user-1") == SkillLevel.INTERMEDIATE

    @pytest.mark.asyncio
    async def test_user_stats(self, store, db_session):
        await seed_exercises(db_session)
        await store.append_attempt(draft(1, score=0))
        await store.append_attempt(draft(2, is_correct=True, score=100))
        await store.append_attempt(draft(1, is_correct=True, score=85, content_id="ex-2"))

        stats = await store.get_user_stats("user-1")

        assert stats.total_attempts == 3
        assert stats.correct_answers == 2
        assert stats.average_score == 61.67
        assert stats.success_rate == 66.67

    @pytest.mark.asyncio
    async def test_user_stats_without_attempts(self, store):
        stats = await store.get_user_stats("user-1")

        assert stats.total_attempts == 0
        assert stats.success_rate == 0.0
