"""
Unit tests for the AI collaborators.

Tests CodeEvaluator and FeedbackGenerator against a mocked LLMClient:
- Prompt contents and sampling parameters
- Output validation and score clamping
- Provider and parsing failures surfaced as LLMError
"""

import json

import pytest

from tutor.config import settings
from tutor.enums import ExerciseType, LLMOperation, SkillLevel
from tutor.middleware.error_handling import LLMError
from tutor.services.learning.code_evaluator import CodeEvaluator
from tutor.services.learning.feedback_generator import FeedbackGenerator
from tutor.services.llm.usage import LLMUsage


def user_prompt(mock_llm_client) -> str:
    messages = mock_llm_client.complete.call_args.kwargs["messages"]
    return messages[-1]["content"]


# ============================================================================
# CodeEvaluator
# ============================================================================


class TestCodeEvaluator:
    """Tests for the coding exercise judge."""

    @pytest.mark.asyncio
    async def test_returns_validated_verdict(self, mock_llm_client):
        mock_llm_client.complete.return_value = (
            {
                "is_passing": True,
                "score": 92,
                "feedback": "Great job!",
                "suggestions": ["Prefer const", "Add a comment"],
                "correctness_analysis": "Works",
                "code_quality": "Clean",
            },
            LLMUsage(model="gemini/gemini-2.5-flash"),
        )
        evaluator = CodeEvaluator(mock_llm_client)

        verdict = await evaluator.evaluate_code(
            question="Declare x equal to 5",
            code="let x = 5;",
            attempt_number=1,
        )

        assert verdict.is_passing is True
        assert verdict.score == 92
        assert verdict.suggestions == ["Prefer const", "Add a comment"]

        kwargs = mock_llm_client.complete.call_args.kwargs
        assert kwargs["operation"] == LLMOperation.CODE_EVALUATION
        assert kwargs["temperature"] == settings.CODE_EVALUATION_TEMPERATURE
        assert kwargs["json_mode"] is True

    @pytest.mark.asyncio
    async def test_prompt_includes_code_criteria_and_attempt(self, mock_llm_client):
        mock_llm_client.complete.return_value = (
            {"is_passing": False, "score": 10, "feedback": "Keep going"},
            LLMUsage(),
        )
        evaluator = CodeEvaluator(mock_llm_client)

        await evaluator.evaluate_code(
            question="Sum an array",
            code="function sum(a) {}",
            attempt_number=3,
            skill_level=SkillLevel.INTERMEDIATE,
            criteria="Must use reduce",
        )

        prompt = user_prompt(mock_llm_client)
        assert "function sum(a) {}" in prompt
        assert "Must use reduce" in prompt
        assert "ATTEMPT: 3/3" in prompt
        assert "last attempt" in prompt
        assert "intermediate" in prompt

    @pytest.mark.asyncio
    async def test_accepts_json_string(self, mock_llm_client):
        mock_llm_client.complete.return_value = (
            json.dumps({"is_passing": True, "score": 75, "feedback": "OK"}),
            LLMUsage(),
        )

        verdict = await CodeEvaluator(mock_llm_client).evaluate_code("q", "code", 1)

        assert verdict.score == 75

    @pytest.mark.asyncio
    async def test_clamps_out_of_range_score(self, mock_llm_client):
        mock_llm_client.complete.return_value = (
            {"is_passing": True, "score": 105, "feedback": "Wow"},
            LLMUsage(),
        )

        verdict = await CodeEvaluator(mock_llm_client).evaluate_code("q", "code", 1)

        assert verdict.score == 100

    @pytest.mark.asyncio
    async def test_malformed_output_raises_llm_error(self, mock_llm_client):
        mock_llm_client.complete.return_value = ({"score": 50}, LLMUsage())

        with pytest.raises(LLMError):
            await CodeEvaluator(mock_llm_client).evaluate_code("q", "code", 1)

    @pytest.mark.asyncio
    async def test_provider_failure_raises_llm_error(self, mock_llm_client):
        mock_llm_client.complete.side_effect = RuntimeError("503 from provider")

        with pytest.raises(LLMError):
            await CodeEvaluator(mock_llm_client).evaluate_code("q", "code", 1)


# ============================================================================
# FeedbackGenerator
# ============================================================================


class TestFeedbackGenerator:
    """Tests for hints on wrong closed-form answers."""

    @pytest.mark.asyncio
    async def test_returns_feedback(self, mock_llm_client):
        mock_llm_client.complete.return_value = (
            {
                "feedback": "Close! Think about block scope.",
                "hints": ["Which keywords exist?", "Which one can be reassigned?"],
                "related_concepts": ["let", "const"],
            },
            LLMUsage(),
        )
        generator = FeedbackGenerator(mock_llm_client)

        feedback = await generator.generate_feedback(
            question="Declare a reassignable block-scoped x",
            exercise_type=ExerciseType.CODE_COMPLETION,
            user_answer="var x = 5",
            correct_answer="let x = 5",
            attempt_number=1,
        )

        assert feedback.hints == ["Which keywords exist?", "Which one can be reassigned?"]
        assert feedback.related_concepts == ["let", "const"]

        kwargs = mock_llm_client.complete.call_args.kwargs
        assert kwargs["operation"] == LLMOperation.EXERCISE_FEEDBACK
        assert kwargs["temperature"] == settings.FEEDBACK_TEMPERATURE

    @pytest.mark.asyncio
    async def test_prompt_marks_answer_as_secret(self, mock_llm_client):
        mock_llm_client.complete.return_value = ({"feedback": "Hmm"}, LLMUsage())

        await FeedbackGenerator(mock_llm_client).generate_feedback(
            question="q",
            exercise_type=ExerciseType.DEBUGGING,
            user_answer="var x = 5",
            correct_answer="let x = 5",
            attempt_number=2,
        )

        prompt = user_prompt(mock_llm_client)
        assert "CORRECT ANSWER (DO NOT REVEAL):\nlet x = 5" in prompt
        assert "attempt 2" in prompt
        assert "debugging" in prompt

    @pytest.mark.asyncio
    async def test_failure_raises_llm_error(self, mock_llm_client):
        mock_llm_client.complete.side_effect = json.JSONDecodeError("bad", "{", 0)

        with pytest.raises(LLMError):
            await FeedbackGenerator(mock_llm_client).generate_feedback(
                question="q",
                exercise_type=ExerciseType.MULTIPLE_CHOICE,
                user_answer="b",
                correct_answer="a",
                attempt_number=1,
            )
