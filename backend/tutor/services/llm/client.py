"""
Unified LLM Client supporting multiple providers via LiteLLM.

LiteLLM provides a unified interface to 100+ LLM providers using
the format "provider/model-name". Key features:
- Operation-based model selection via LLMOperation enum
- Usage tracking via LLMUsage
- Optional retries with exponential backoff (LLM_MAX_ATTEMPTS)
- Native async support

See: https://docs.litellm.ai/

Usage:
    from tutor.enums import LLMOperation
    from tutor.services.llm import get_llm_client, build_messages

    client = get_llm_client()

    data, usage = await client.complete(
        operation=LLMOperation.CODE_EVALUATION,
        messages=build_messages(prompt, system_prompt),
        temperature=0.3,
        json_mode=True,
    )
"""

import json
import logging
import os
import time
from typing import Any, Optional, Union

import litellm
from litellm import acompletion
from tenacity import retry, stop_after_attempt, wait_exponential

from tutor.config.settings import settings
from tutor.enums.api import LLMOperation
from tutor.services.llm.usage import (
    LLMUsage,
    create_error_usage,
    extract_usage_from_response,
)

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"


def get_default_text_model() -> str:
    """Get the default text model from settings."""
    return settings.TEXT_MODEL


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def _adjust_temperature_for_model(model: str, temperature: float) -> float:
    """
    Adjust temperature based on model requirements.

    Gemini 3 models require temperature=1.0 to avoid infinite loops
    and degraded reasoning performance.
    """
    if "gemini-3" in model.lower():
        return 1.0
    return temperature


class LLMClient:
    """
    LLM client with operation-based model selection and usage tracking.

    Attributes:
        MODELS: Operation -> model mapping from settings. Unset entries
            fall back to TEXT_MODEL.
    """

    MODELS = {
        LLMOperation.CODE_EVALUATION: settings.CODE_EVALUATION_MODEL,
        LLMOperation.EXERCISE_FEEDBACK: settings.FEEDBACK_MODEL,
    }

    def __init__(self):
        self._validate_api_keys()

    def _validate_api_keys(self):
        """Warn when no provider key is configured; calls will then fail."""
        available_keys = []

        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available_keys.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available_keys.append("Anthropic")
        if os.getenv("GEMINI_API_KEY") or settings.GEMINI_API_KEY:
            available_keys.append("Google/Gemini")

        if not available_keys:
            logger.warning(
                "No LLM API keys configured. Set at least one of: "
                "OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY"
            )
        else:
            logger.info(f"LLM client initialized with providers: {available_keys}")

    def get_model_for_operation(self, operation: Union[LLMOperation, str]) -> str:
        """
        Get the configured model for a specific operation.

        Args:
            operation: LLMOperation enum value

        Returns:
            Model identifier in LiteLLM format (provider/model-name)
        """
        if isinstance(operation, str) and not isinstance(operation, LLMOperation):
            try:
                operation = LLMOperation(operation)
            except ValueError:
                logger.warning(
                    f"Unknown operation type: {operation}, using default model"
                )
                return settings.TEXT_MODEL
        return self.MODELS.get(operation) or settings.TEXT_MODEL

    @retry(
        stop=stop_after_attempt(max(1, settings.LLM_MAX_ATTEMPTS)),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def complete(
        self,
        operation: Union[LLMOperation, str],
        messages: list[dict],
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
        model: Optional[str] = None,
    ) -> tuple[Union[str, Any], LLMUsage]:
        """
        Generate a completion using the appropriate model for the operation.

        Args:
            operation: LLMOperation specifying the operation type.
                Used for both model selection and usage attribution.
            messages: Chat messages in OpenAI format
            temperature: Sampling temperature (0-1, lower = more deterministic)
            max_tokens: Maximum tokens in response (defaults to LLM_MAX_TOKENS)
            json_mode: Request structured JSON output and parse response as JSON.
            model: Optional model override (bypasses operation-based selection)

        Returns:
            Tuple of (response_text or parsed JSON if json_mode, LLMUsage)

        Raises:
            json.JSONDecodeError: If json_mode=True and response is not valid JSON
            Exception: If the provider call fails
        """
        model = model or self.get_model_for_operation(operation)
        adjusted_temp = _adjust_temperature_for_model(model, temperature)
        operation_name = getattr(operation, "value", operation)

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": adjusted_temp,
            "max_tokens": max_tokens or settings.LLM_MAX_TOKENS,
            "timeout": settings.LLM_TIMEOUT_SECONDS,
        }

        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        start_time = time.perf_counter()

        try:
            response = await acompletion(**kwargs)
            latency_ms = int((time.perf_counter() - start_time) * 1000)

            usage = extract_usage_from_response(
                response=response,
                model=model,
                latency_ms=latency_ms,
                operation=operation_name,
            )

            logger.debug(
                f"LLM completion [{model}] {operation_name} - "
                f"Tokens: {usage.total_tokens}, Latency: {latency_ms}ms"
            )

            content = response.choices[0].message.content

            if json_mode:
                content = json.loads(_strip_code_fence(content))

            return content, usage

        except json.JSONDecodeError:
            logger.warning(f"JSON decode error (model={model}, operation={operation_name})")
            raise
        except Exception as e:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            error_usage = create_error_usage(
                model=model,
                latency_ms=latency_ms,
                error_message=str(e),
                operation=operation_name,
            )
            logger.error(f"LLM completion failed: {e} ({error_usage})")
            raise


def _strip_code_fence(content: str) -> str:
    """Remove a ```json fence some providers wrap around JSON output."""
    text = (content or "").strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


# Module-level singleton
_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """
    Get or create the LLM client singleton.

    The client holds no request state, so sharing it is safe.
    """
    global _client
    if _client is None:
        _client = LLMClient()
    return _client


def reset_llm_client():
    """Reset the singleton (for testing)."""
    global _client
    _client = None
