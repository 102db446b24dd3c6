"""
Progress API Router

Endpoints:
- POST /api/progress/topic - Mark a topic complete and store its progress
- GET /api/progress/topic - Progress of one topic plus completion flag
- GET /api/progress/learning-path/{learning_path_id} - All topic progress of a path
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from tutor.dependencies import get_current_user_id
from tutor.models.learning import (
    LearningPathProgressResponse,
    TopicProgressCreateResponse,
    TopicProgressRequest,
    TopicProgressResponse,
)
from tutor.routers.exercises import get_attempt_store
from tutor.services.learning import AttemptStore, TopicProgressService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/progress", tags=["progress"])


async def get_topic_progress_service(
    store: AttemptStore = Depends(get_attempt_store),
) -> TopicProgressService:
    """Get topic aggregator."""
    return TopicProgressService(store)


@router.post("/topic", response_model=TopicProgressCreateResponse)
async def complete_topic(
    payload: TopicProgressRequest,
    user_id: str = Depends(get_current_user_id),
    service: TopicProgressService = Depends(get_topic_progress_service),
):
    """
    Mark a topic complete.

    Refused with 400 until every exercise of the topic has a correct
    attempt. Metrics are recomputed from the attempt log on every call.
    """
    if not await service.are_all_exercises_completed(user_id, payload.topic_id):
        logger.info(
            f"Topic {payload.topic_id} not complete for user={user_id}, refusing"
        )
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "You must complete all exercises before marking the topic as completed",
                "allExercisesCompleted": False,
            },
        )

    record = await service.create_topic_progress(
        user_id, payload.learning_path_id, payload.topic_id
    )
    return TopicProgressCreateResponse(
        data=record,
        message="Topic marked as completed",
    )


@router.get("/topic", response_model=TopicProgressResponse)
async def get_topic_progress(
    learning_path_id: str = Query(..., alias="learningPathId", min_length=1),
    topic_id: str = Query(..., alias="topicId", min_length=1),
    user_id: str = Depends(get_current_user_id),
    service: TopicProgressService = Depends(get_topic_progress_service),
) -> TopicProgressResponse:
    """Stored progress (or null) and whether every exercise is completed."""
    progress = await service.get_topic_progress(user_id, learning_path_id, topic_id)
    all_completed = await service.are_all_exercises_completed(user_id, topic_id)
    return TopicProgressResponse(
        data=progress,
        all_exercises_completed=all_completed,
    )


@router.get("/learning-path/{learning_path_id}", response_model=LearningPathProgressResponse)
async def get_learning_path_progress(
    learning_path_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TopicProgressService = Depends(get_topic_progress_service),
) -> LearningPathProgressResponse:
    """All stored topic progress for a learning path."""
    return LearningPathProgressResponse(
        data=await service.list_learning_path_progress(user_id, learning_path_id)
    )
