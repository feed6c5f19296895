"""
LLM client utilities.

Provides factory functions for creating the chat models that back the
judgment oracle.
"""

import logging
from typing import Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI

from paystream.core.config import settings

logger = logging.getLogger(__name__)


def get_llm_client(
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    api_key: Optional[str] = None,
) -> BaseChatModel:
    """
    Get an LLM client instance.

    Args:
        model: Model identifier (e.g., "anthropic/claude-sonnet-4", "openai/gpt-4o")
        temperature: Sampling temperature
        max_tokens: Maximum tokens in response
        api_key: Optional API key (uses settings if not provided)

    Returns:
        Configured LLM instance
    """
    model = model or settings.default_model
    temperature = settings.oracle_temperature if temperature is None else temperature
    max_tokens = max_tokens or settings.oracle_max_tokens
    model_lower = model.lower()
    model_name = model.split("/", 1)[-1]

    if "anthropic" in model_lower or "claude" in model_lower:
        return ChatAnthropic(
            model=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=api_key or settings.anthropic_api_key,
        )
    elif "openai" in model_lower or "gpt" in model_lower:
        return ChatOpenAI(
            model=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=api_key or settings.openai_api_key,
        )
    else:
        logger.warning(f"Unknown model '{model}', defaulting to Claude Sonnet 4")
        return ChatAnthropic(
            model="claude-sonnet-4",
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=api_key or settings.anthropic_api_key,
        )
