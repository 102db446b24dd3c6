"""
LLM Service Module

Provides a unified interface to multiple LLM providers via LiteLLM.

Key Components:
- client.py: LLMClient with operation-based model selection
- usage.py: LLMUsage records returned alongside every completion

Usage:
    from tutor.enums import LLMOperation
    from tutor.services.llm import get_llm_client, build_messages

    client = get_llm_client()
    data, usage = await client.complete(
        operation=LLMOperation.EXERCISE_FEEDBACK,
        messages=build_messages("..."),
        json_mode=True,
    )
"""

from tutor.services.llm.client import (
    LLMClient,
    build_messages,
    get_default_text_model,
    get_llm_client,
    reset_llm_client,
)
from tutor.services.llm.usage import LLMUsage

__all__ = [
    "LLMClient",
    "LLMUsage",
    "build_messages",
    "get_default_text_model",
    "get_llm_client",
    "reset_llm_client",
]
