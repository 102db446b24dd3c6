"""
Exercises API Router

Endpoints for submitting answers and restoring saved exercise state.

Endpoints:
- POST /api/exercises/interactions - Submit an answer (graded, capped at 3 attempts)
- GET /api/exercises/interactions - Latest saved answer for an exercise
- GET /api/exercises/stats - Attempt statistics for the current learner
"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tutor.config import settings
from tutor.db.base import get_db
from tutor.dependencies import get_current_user_id
from tutor.enums import RateLimitType
from tutor.middleware.rate_limit import limiter
from tutor.models.learning import (
    ExerciseStatsResponse,
    SavedAnswerResponse,
    SubmitAnswerRequest,
    SubmitAnswerResult,
)
from tutor.services.learning import (
    AttemptStore,
    CodeEvaluator,
    ExerciseInteractionService,
    FeedbackGenerator,
)
from tutor.services.llm.client import get_llm_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/exercises", tags=["exercises"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_attempt_store(db: AsyncSession = Depends(get_db)) -> AttemptStore:
    """Get attempt store bound to the request's session."""
    return AttemptStore(db)


async def get_interaction_service(
    store: AttemptStore = Depends(get_attempt_store),
) -> ExerciseInteractionService:
    """Get attempt orchestrator with AI collaborators."""
    llm_client = get_llm_client()  # Synchronous - returns singleton
    return ExerciseInteractionService(
        store,
        CodeEvaluator(llm_client),
        FeedbackGenerator(llm_client),
    )


# ===========================================
# Interaction Endpoints
# ===========================================


@router.post("/interactions", response_model=SubmitAnswerResult)
@limiter.limit(settings.get_rate_limit(RateLimitType.LLM_HEAVY))
async def submit_answer(
    request: Request,
    payload: SubmitAnswerRequest,
    user_id: str = Depends(get_current_user_id),
    store: AttemptStore = Depends(get_attempt_store),
    service: ExerciseInteractionService = Depends(get_interaction_service),
):
    """
    Submit an answer to an exercise.

    Returns 200 with the graded attempt, or 400 with a rejection when the
    exercise is already completed or out of attempts.
    """
    skill_level = await store.get_user_skill_level(user_id)
    result = await service.submit_answer(payload.to_command(user_id, skill_level))

    if not result.success:
        return JSONResponse(
            status_code=400,
            content=result.model_dump(mode="json", by_alias=True),
        )
    return result


@router.get("/interactions", response_model=SavedAnswerResponse)
async def get_saved_answer(
    content_id: str = Query(..., alias="contentId", min_length=1),
    exercise_id: str = Query(..., alias="exerciseId", min_length=1),
    user_id: str = Depends(get_current_user_id),
    service: ExerciseInteractionService = Depends(get_interaction_service),
) -> SavedAnswerResponse:
    """
    Latest saved answer for an exercise, keyed by exercise id.

    data is empty when the learner has not answered yet.
    """
    status = await service.get_latest_status(user_id, content_id)
    if status is None:
        return SavedAnswerResponse(data={})
    return SavedAnswerResponse(data={exercise_id: status})


@router.get("/stats", response_model=ExerciseStatsResponse)
async def get_exercise_stats(
    user_id: str = Depends(get_current_user_id),
    store: AttemptStore = Depends(get_attempt_store),
) -> ExerciseStatsResponse:
    """Attempt totals, average score and success rate for the learner."""
    return ExerciseStatsResponse(data=await store.get_user_stats(user_id))
