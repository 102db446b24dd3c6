"""
Exercise Feedback Service

Generates personalised hints for a wrong answer to a closed-form exercise
(multiple-choice, code-completion, debugging). The correct answer is sent to
the model so it can steer the learner, but the prompt forbids revealing it.

Only called while the learner still has attempts left; after the last attempt
the UI shows the solution instead.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from tutor.config import settings
from tutor.enums import ExerciseType, LLMOperation, SkillLevel
from tutor.middleware.error_handling import LLMError
from tutor.models.learning import ExerciseFeedback
from tutor.services.learning.evaluation_prompts import (
    EXERCISE_FEEDBACK_PROMPT,
    FEEDBACK_FIRST_ATTEMPT_CONTEXT,
    FEEDBACK_LATER_ATTEMPT_CONTEXT,
    FEEDBACK_LEVEL_DESCRIPTIONS,
    TUTOR_SYSTEM_PROMPT,
)
from tutor.services.llm.client import LLMClient, build_messages

logger = logging.getLogger(__name__)


class FeedbackGenerator:
    """Hint generator for wrong closed-form answers."""

    def __init__(self, llm_client: LLMClient, model: Optional[str] = None):
        self.llm = llm_client
        self.model = model

    async def generate_feedback(
        self,
        question: str,
        exercise_type: ExerciseType,
        user_answer: str,
        correct_answer: str,
        attempt_number: int,
        skill_level: SkillLevel = SkillLevel.BEGINNER,
    ) -> ExerciseFeedback:
        """
        Generate feedback, progressive hints and related concepts.

        Raises:
            LLMError: If the provider call fails or the output is malformed
        """
        if attempt_number == 1:
            attempt_context = FEEDBACK_FIRST_ATTEMPT_CONTEXT
        else:
            attempt_context = FEEDBACK_LATER_ATTEMPT_CONTEXT.format(
                attempt_number=attempt_number
            )

        prompt = EXERCISE_FEEDBACK_PROMPT.format(
            level_description=FEEDBACK_LEVEL_DESCRIPTIONS[SkillLevel(skill_level).value],
            exercise_type=ExerciseType(exercise_type).value,
            question=question,
            user_answer=user_answer,
            correct_answer=correct_answer,
            attempt_context=attempt_context,
            max_attempts=settings.MAX_ATTEMPTS,
        )

        try:
            response, usage = await self.llm.complete(
                operation=LLMOperation.EXERCISE_FEEDBACK,
                messages=build_messages(prompt, TUTOR_SYSTEM_PROMPT),
                model=self.model,
                temperature=settings.FEEDBACK_TEMPERATURE,
                json_mode=True,
            )
            data = response if isinstance(response, dict) else json.loads(response)
            feedback = ExerciseFeedback.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Feedback generation returned malformed output: {e}")
            raise LLMError("Feedback generation returned malformed output") from e
        except Exception as e:
            logger.error(f"Feedback generation failed: {e}")
            raise LLMError("Feedback generation failed") from e

        logger.info(
            f"Generated feedback for attempt {attempt_number} "
            f"({len(feedback.hints)} hints, {usage})"
        )
        return feedback
