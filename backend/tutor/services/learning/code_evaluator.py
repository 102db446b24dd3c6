"""
Code Evaluation Service

LLM-powered judge for "coding" exercises. Unlike closed-form exercises there
is no single right answer, so the model decides whether the learner's code
meets the exercise requirements and grades it.

The judge's verdict is authoritative: whatever correctness flag the client
sends for a coding exercise is ignored by the orchestrator.

Usage:
    from tutor.services.learning.code_evaluator import CodeEvaluator

    evaluator = CodeEvaluator(get_llm_client())
    verdict = await evaluator.evaluate_code(
        question="Declare a variable x equal to 5",
        code="let x = 5;",
        attempt_number=1,
        skill_level=SkillLevel.BEGINNER,
    )
    print(verdict.is_passing, verdict.score)
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from tutor.config import settings
from tutor.enums import LLMOperation, SkillLevel
from tutor.middleware.error_handling import LLMError
from tutor.models.learning import CodeEvaluation
from tutor.services.learning.evaluation_prompts import (
    CODE_ATTEMPT_CONTEXT,
    CODE_EVALUATION_PROMPT,
    CODE_LAST_ATTEMPT_CONTEXT,
    CODE_LEVEL_DESCRIPTIONS,
    CRITERIA_BLOCK,
    TUTOR_SYSTEM_PROMPT,
)
from tutor.services.llm.client import LLMClient, build_messages

logger = logging.getLogger(__name__)


class CodeEvaluator:
    """AI judge for coding exercises."""

    def __init__(self, llm_client: LLMClient, model: Optional[str] = None):
        self.llm = llm_client
        self.model = model

    async def evaluate_code(
        self,
        question: str,
        code: str,
        attempt_number: int,
        skill_level: SkillLevel = SkillLevel.BEGINNER,
        criteria: Optional[str] = None,
    ) -> CodeEvaluation:
        """
        Judge a learner's code.

        Args:
            question: Exercise statement
            code: Learner's JavaScript
            attempt_number: 1-based attempt, tunes the tone of the feedback
            skill_level: Learner level, tunes strictness
            criteria: Optional grading criteria stored with the exercise

        Returns:
            Validated CodeEvaluation

        Raises:
            LLMError: If the provider call fails or the output is malformed
        """
        prompt = CODE_EVALUATION_PROMPT.format(
            level_description=CODE_LEVEL_DESCRIPTIONS[SkillLevel(skill_level).value],
            question=question,
            criteria_block=CRITERIA_BLOCK.format(criteria=criteria) if criteria else "",
            code=code,
            attempt_number=attempt_number,
            max_attempts=settings.MAX_ATTEMPTS,
            attempt_context=_attempt_context(attempt_number),
        )

        logger.info(f"Evaluating code (attempt {attempt_number}, level={skill_level})")

        try:
            response, usage = await self.llm.complete(
                operation=LLMOperation.CODE_EVALUATION,
                messages=build_messages(prompt, TUTOR_SYSTEM_PROMPT),
                model=self.model,
                temperature=settings.CODE_EVALUATION_TEMPERATURE,
                json_mode=True,
            )
            data = response if isinstance(response, dict) else json.loads(response)
            verdict = CodeEvaluation.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Code evaluation returned malformed output: {e}")
            raise LLMError("Code evaluation returned malformed output") from e
        except Exception as e:
            logger.error(f"Code evaluation failed: {e}")
            raise LLMError("Code evaluation failed") from e

        logger.info(
            f"Code evaluated - passing={verdict.is_passing}, score={verdict.score} ({usage})"
        )
        return verdict


def _attempt_context(attempt_number: int) -> str:
    if attempt_number >= settings.MAX_ATTEMPTS:
        return CODE_LAST_ATTEMPT_CONTEXT
    return CODE_ATTEMPT_CONTEXT.get(attempt_number, CODE_ATTEMPT_CONTEXT[2])
