"""
Exercise Interaction Service

Decides whether a submission may be recorded, grades it, attaches AI
feedback and appends exactly one attempt.

Submission flow:
1. Look up the exercise (unknown ids are a 404, before any AI call)
2. Read the learner's attempt history for the exercise
3. Reject if a correct attempt exists (completion is sticky)
4. Reject if the attempt cap is exhausted
5. Grade:
   - coding: the AI judge decides correctness and score
   - other types: the client's verdict, score 100/0, plus AI hints for a
     wrong answer while attempts remain
6. Append the attempt; a lost insert race becomes a rejection

Rejections are returned as results, never raised. AI failures degrade the
attempt (no feedback, or a failed verdict for coding) instead of failing
the request.

Usage:
    service = ExerciseInteractionService(store, code_evaluator, feedback_generator)
    result = await service.submit_answer(command)
"""

import logging
from typing import Optional

from tutor.config import settings
from tutor.enums import RejectionReason
from tutor.middleware.error_handling import AttemptConflictError, LLMError, NotFoundError
from tutor.models.learning import (
    AttemptDraft,
    AttemptRecord,
    SavedAnswerStatus,
    SubmitAnswerCommand,
    SubmitAnswerResult,
)
from tutor.services.learning.attempt_store import AttemptStore
from tutor.services.learning.code_evaluator import CodeEvaluator
from tutor.services.learning.feedback_generator import FeedbackGenerator

logger = logging.getLogger(__name__)

CODE_EVALUATION_FALLBACK_FEEDBACK = (
    "We couldn't evaluate your code automatically right now. "
    "Review the exercise requirements and try again."
)

REJECTION_MESSAGES = {
    RejectionReason.ALREADY_COMPLETED: "You have already completed this exercise.",
    RejectionReason.MAX_ATTEMPTS_REACHED: "You have used all attempts for this exercise.",
    RejectionReason.CONCURRENT_SUBMISSION: "Another answer to this exercise was submitted at the same time.",
}


class ExerciseInteractionService:
    """Attempt orchestrator for exercise submissions."""

    def __init__(
        self,
        store: AttemptStore,
        code_evaluator: CodeEvaluator,
        feedback_generator: FeedbackGenerator,
        max_attempts: Optional[int] = None,
    ):
        self.store = store
        self.code_evaluator = code_evaluator
        self.feedback_generator = feedback_generator
        self.max_attempts = max_attempts or settings.MAX_ATTEMPTS

    async def submit_answer(self, command: SubmitAnswerCommand) -> SubmitAnswerResult:
        """
        Grade and record one submission.

        Returns:
            SubmitAnswerResult with success=True when an attempt was
            appended, or a rejection (success=False, reason set) when the
            exercise is already completed or out of attempts.

        Raises:
            NotFoundError: If the exercise does not exist
        """
        if await self.store.get_exercise(command.content_id) is None:
            raise NotFoundError(
                "Exercise not found", details={"content_id": command.content_id}
            )

        history = await self.store.list_attempts(command.user_id, command.content_id)

        rejection = self._check_guards(history)
        if rejection:
            logger.warning(
                f"Rejected submission user={command.user_id} "
                f"content={command.content_id}: {rejection.reason.value}"
            )
            return rejection

        attempt_number = len(history) + 1
        draft = await self._grade(command, attempt_number)

        try:
            record = await self.store.append_attempt(draft)
        except AttemptConflictError:
            history = await self.store.list_attempts(command.user_id, command.content_id)
            logger.warning(
                f"Concurrent submission user={command.user_id} "
                f"content={command.content_id} attempt={attempt_number}"
            )
            return self._rejection(
                RejectionReason.CONCURRENT_SUBMISSION,
                len(history),
                max_attempts_reached=len(history) >= self.max_attempts,
            )

        logger.info(
            f"Recorded attempt {record.attempt_number}/{self.max_attempts} "
            f"user={record.user_id} content={record.content_id} "
            f"type={command.exercise_type.value} correct={record.is_correct} "
            f"score={record.score}"
        )

        return SubmitAnswerResult(
            success=True,
            attempt_number=record.attempt_number,
            max_attempts_reached=record.attempt_number >= self.max_attempts,
            is_correct=record.is_correct,
            score=record.score,
            ai_feedback=record.ai_feedback,
            ai_suggestions=record.ai_suggestions,
            related_concepts=record.related_concepts,
        )

    async def get_latest_status(
        self, user_id: str, content_id: str
    ) -> Optional[SavedAnswerStatus]:
        """
        Latest answer plus aggregate attempt status, or None if never answered.

        attempt_number and max_attempts_reached come from the attempt count;
        is_completed is true if any attempt was correct.
        """
        history = await self.store.list_attempts(user_id, content_id)
        if not history:
            return None

        latest = history[-1]
        return SavedAnswerStatus(
            user_answer=latest.user_answer,
            is_correct=latest.is_correct,
            timestamp=latest.created_at,
            attempt_number=len(history),
            max_attempts_reached=len(history) >= self.max_attempts,
            is_completed=any(a.is_correct for a in history),
            ai_feedback=latest.ai_feedback,
            ai_suggestions=latest.ai_suggestions,
        )

    # ===========================================
    # Helpers
    # ===========================================

    def _check_guards(self, history: list[AttemptRecord]) -> Optional[SubmitAnswerResult]:
        if any(a.is_correct for a in history):
            return self._rejection(RejectionReason.ALREADY_COMPLETED, len(history))
        if len(history) >= self.max_attempts:
            return self._rejection(RejectionReason.MAX_ATTEMPTS_REACHED, len(history))
        return None

    def _rejection(
        self,
        reason: RejectionReason,
        attempt_count: int,
        max_attempts_reached: bool = True,
    ) -> SubmitAnswerResult:
        return SubmitAnswerResult(
            success=False,
            attempt_number=attempt_count,
            max_attempts_reached=max_attempts_reached,
            reason=reason,
            message=REJECTION_MESSAGES[reason],
        )

    async def _grade(self, command: SubmitAnswerCommand, attempt_number: int) -> AttemptDraft:
        draft = AttemptDraft(
            user_id=command.user_id,
            content_id=command.content_id,
            attempt_number=attempt_number,
            user_answer=command.user_answer,
            correct_answer=command.correct_answer,
            is_correct=False,
            score=0,
            response_time=command.response_time,
        )

        if command.exercise_type.is_ai_graded:
            return await self._grade_code(command, draft)

        draft.is_correct = command.is_correct
        draft.score = 100 if command.is_correct else 0

        # No hints after the last attempt; the solution is revealed instead
        if not command.is_correct and attempt_number < self.max_attempts:
            try:
                feedback = await self.feedback_generator.generate_feedback(
                    question=command.exercise_question,
                    exercise_type=command.exercise_type,
                    user_answer=command.user_answer,
                    correct_answer=command.correct_answer,
                    attempt_number=attempt_number,
                    skill_level=command.skill_level,
                )
                draft.ai_feedback = feedback.feedback
                draft.ai_suggestions = feedback.hints
                draft.related_concepts = feedback.related_concepts
            except LLMError as e:
                logger.error(
                    f"Feedback unavailable for content={command.content_id}, "
                    f"recording attempt without it: {e.message}"
                )

        return draft

    async def _grade_code(self, command: SubmitAnswerCommand, draft: AttemptDraft) -> AttemptDraft:
        try:
            verdict = await self.code_evaluator.evaluate_code(
                question=command.exercise_question,
                code=command.user_answer,
                attempt_number=draft.attempt_number,
                skill_level=command.skill_level,
                criteria=command.evaluation_criteria,
            )
        except LLMError as e:
            logger.error(
                f"Code evaluation unavailable for content={command.content_id}, "
                f"recording a failed attempt: {e.message}"
            )
            draft.ai_feedback = CODE_EVALUATION_FALLBACK_FEEDBACK
            return draft

        draft.is_correct = verdict.is_passing
        draft.score = verdict.score
        draft.ai_feedback = verdict.feedback
        draft.ai_suggestions = verdict.suggestions
        return draft
