"""
Unit tests for TopicProgressService.

Tests topic aggregation including:
- Status thresholds
- All-exercises-completed checks
- Metric calculation from the attempt log
- Progress creation and the no-interactions error
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.factories import BASE_TIME, make_attempt, make_exercise
from tutor.enums import ProgressStatus
from tutor.middleware.error_handling import NoInteractionsFoundError
from tutor.models.learning import TopicProgressRecord
from tutor.services.learning.topic_progress_service import (
    TopicProgressService,
    derive_status,
)


# ============================================================================
# Shared Fixtures
# ============================================================================


@pytest.fixture
def store():
    mock = MagicMock()
    mock.list_active_exercises = AsyncMock(return_value=[])
    mock.list_attempts = AsyncMock(return_value=[])
    mock.list_attempts_for_exercises = AsyncMock(return_value=[])
    mock.upsert_topic_progress = AsyncMock()
    mock.get_topic_progress = AsyncMock(return_value=None)
    mock.list_learning_path_progress = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def service(store):
    return TopicProgressService(store)


def progress_record(status=ProgressStatus.COMPLETED, **overrides) -> TopicProgressRecord:
    data = {
        "id": "progress-1",
        "user_id": "user-1",
        "learning_path_id": "lp-1",
        "topic_id": "topic-1",
        "status": status,
        "score": 80.0,
        "attempts": 3,
        "time_spent": 0.0,
    }
    data.update(overrides)
    return TopicProgressRecord(**data)


# ============================================================================
# derive_status
# ============================================================================


class TestDeriveStatus:
    """Tests for the score to status mapping."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, ProgressStatus.MASTERED),
            (90, ProgressStatus.MASTERED),
            (89.99, ProgressStatus.COMPLETED),
            (70, ProgressStatus.COMPLETED),
            (69.99, ProgressStatus.IN_PROGRESS),
            (0, ProgressStatus.IN_PROGRESS),
        ],
        ids=["perfect", "mastery_threshold", "just_below_mastery",
             "completion_threshold", "just_below_completion", "zero"],
    )
    def test_thresholds(self, score, expected):
        assert derive_status(score) == expected


# ============================================================================
# are_all_exercises_completed
# ============================================================================


class TestAreAllExercisesCompleted:
    """A topic is complete only when every exercise has a correct attempt."""

    @pytest.mark.asyncio
    async def test_empty_topic_is_not_complete(self, service):
        assert await service.are_all_exercises_completed("user-1", "topic-1") is False

    @pytest.mark.asyncio
    async def test_all_exercises_correct(self, service, store):
        store.list_active_exercises.return_value = [
            make_exercise("ex-1"), make_exercise("ex-2", order_index=1)
        ]
        store.list_attempts.side_effect = [
            [make_attempt(1, is_correct=True, score=100, content_id="ex-1")],
            [
                make_attempt(1, content_id="ex-2"),
                make_attempt(2, is_correct=True, score=100, content_id="ex-2"),
            ],
        ]

        assert await service.are_all_exercises_completed("user-1", "topic-1") is True

    @pytest.mark.asyncio
    async def test_exhausted_exercise_is_not_completion(self, service, store):
        store.list_active_exercises.return_value = [
            make_exercise("ex-1"), make_exercise("ex-2", order_index=1)
        ]
        store.list_attempts.side_effect = [
            [make_attempt(1, is_correct=True, score=100, content_id="ex-1")],
            [make_attempt(i, content_id="ex-2") for i in (1, 2, 3)],
        ]

        assert await service.are_all_exercises_completed("user-1", "topic-1") is False

    @pytest.mark.asyncio
    async def test_short_circuits_on_first_incomplete(self, service, store):
        store.list_active_exercises.return_value = [
            make_exercise("ex-1"), make_exercise("ex-2", order_index=1)
        ]
        store.list_attempts.return_value = []

        assert await service.are_all_exercises_completed("user-1", "topic-1") is False
        store.list_attempts.assert_awaited_once_with("user-1", "ex-1")


# ============================================================================
# calculate_progress
# ============================================================================


class TestCalculateProgress:
    """Metrics are recomputed from the whole attempt log."""

    @pytest.mark.asyncio
    async def test_none_without_exercises(self, service):
        assert await service.calculate_progress("user-1", "topic-1") is None

    @pytest.mark.asyncio
    async def test_none_without_attempts(self, service, store):
        store.list_active_exercises.return_value = [make_exercise("ex-1")]

        assert await service.calculate_progress("user-1", "topic-1") is None

    @pytest.mark.asyncio
    async def test_aggregates_in_chronological_order(self, service, store):
        store.list_active_exercises.return_value = [
            make_exercise("ex-1"), make_exercise("ex-2", order_index=1)
        ]
        store.list_attempts_for_exercises.return_value = [
            make_attempt(1, is_correct=True, score=100, content_id="ex-2",
                         response_time=20, minutes=10),
            make_attempt(1, score=0, content_id="ex-1", response_time=15, minutes=0),
            make_attempt(2, is_correct=True, score=100, content_id="ex-1",
                         response_time=None, minutes=5),
        ]

        metrics = await service.calculate_progress("user-1", "topic-1")

        assert metrics.score == 66.67
        assert metrics.attempts == 3
        assert metrics.time_spent == 35
        assert metrics.started_at == BASE_TIME
        assert metrics.recent_scores == [0, 100, 100]
        store.list_attempts_for_exercises.assert_awaited_once_with(
            "user-1", ["ex-1", "ex-2"]
        )

    @pytest.mark.asyncio
    async def test_null_scores_excluded_from_mean(self, service, store):
        store.list_active_exercises.return_value = [make_exercise("ex-1")]
        store.list_attempts_for_exercises.return_value = [
            make_attempt(1, score=None, minutes=0),
            make_attempt(2, is_correct=True, score=80, minutes=1),
        ]

        metrics = await service.calculate_progress("user-1", "topic-1")

        assert metrics.score == 80
        assert metrics.attempts == 2
        assert metrics.recent_scores == [80]


# ============================================================================
# create_topic_progress
# ============================================================================


class TestCreateTopicProgress:
    """Tests for the progress upsert."""

    @pytest.mark.asyncio
    async def test_raises_without_interactions(self, service, store):
        store.list_active_exercises.return_value = [make_exercise("ex-1")]

        with pytest.raises(NoInteractionsFoundError):
            await service.create_topic_progress("user-1", "lp-1", "topic-1")

        store.upsert_topic_progress.assert_not_called()

    @pytest.mark.asyncio
    async def test_upserts_with_derived_status(self, service, store):
        store.list_active_exercises.return_value = [make_exercise("ex-1")]
        store.list_attempts_for_exercises.return_value = [
            make_attempt(1, score=0, minutes=0),
            make_attempt(2, is_correct=True, score=100, minutes=1),
        ]
        store.upsert_topic_progress.return_value = progress_record(
            status=ProgressStatus.IN_PROGRESS, score=50.0, attempts=2
        )

        record = await service.create_topic_progress("user-1", "lp-1", "topic-1")

        args = store.upsert_topic_progress.call_args.args
        assert args[:3] == ("user-1", "lp-1", "topic-1")
        assert args[3] == ProgressStatus.IN_PROGRESS
        assert args[4].score == 50.0
        assert record.status == ProgressStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_repeated_calls_compute_same_metrics(self, service, store):
        store.list_active_exercises.return_value = [make_exercise("ex-1")]
        store.list_attempts_for_exercises.return_value = [
            make_attempt(1, is_correct=True, score=100, response_time=30)
        ]
        store.upsert_topic_progress.return_value = progress_record()

        await service.create_topic_progress("user-1", "lp-1", "topic-1")
        await service.create_topic_progress("user-1", "lp-1", "topic-1")

        first, second = store.upsert_topic_progress.call_args_list
        assert first.args == second.args
        assert first.args[3] == ProgressStatus.MASTERED


class TestReadProgress:
    """Read-through lookups."""

    @pytest.mark.asyncio
    async def test_get_topic_progress(self, service, store):
        store.get_topic_progress.return_value = progress_record()

        record = await service.get_topic_progress("user-1", "lp-1", "topic-1")

        assert record.topic_id == "topic-1"
        store.get_topic_progress.assert_awaited_once_with("user-1", "lp-1", "topic-1")

    @pytest.mark.asyncio
    async def test_list_learning_path_progress(self, service, store):
        store.list_learning_path_progress.return_value = [progress_record()]

        records = await service.list_learning_path_progress("user-1", "lp-1")

        assert len(records) == 1
