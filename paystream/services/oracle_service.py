"""
Judgment oracle service.

The oracle is the external reasoning backend the evaluators consult. Its
contract is narrow: given a prompt, return the reply text or raise
OracleError. Timeouts, transport failures and empty replies all surface as
OracleError so callers only have one failure type to absorb.
"""

import asyncio
import logging
from typing import Any, Callable

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from paystream.core.config import settings
from paystream.core.errors import OracleError
from paystream.utils.llm import get_llm_client

logger = logging.getLogger(__name__)


class JudgmentOracle:
    """Async wrapper around a LangChain chat model."""

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        llm_factory: Callable[[], BaseChatModel] = get_llm_client,
        timeout_seconds: float | None = None,
    ):
        """
        Initialize the oracle.

        Args:
            llm: Chat model to use; built lazily from llm_factory when omitted
            llm_factory: Factory used on first call when no model was given
            timeout_seconds: Per-call timeout (defaults to settings)
        """
        self._llm = llm
        self._llm_factory = llm_factory
        self.timeout_seconds = timeout_seconds or settings.oracle_timeout_seconds

    def _get_llm(self) -> BaseChatModel:
        if self._llm is None:
            try:
                self._llm = self._llm_factory()
            except Exception as e:
                raise OracleError(f"LLM client unavailable: {e}") from e
        return self._llm

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt to the oracle and return its text reply.

        Args:
            prompt: Prompt text

        Returns:
            Reply text

        Raises:
            OracleError: On timeout, transport failure or an empty reply
        """
        llm = self._get_llm()
        try:
            message = await asyncio.wait_for(
                llm.ainvoke([HumanMessage(content=prompt)]),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Oracle timed out after {self.timeout_seconds}s")
            raise OracleError(f"oracle timed out after {self.timeout_seconds}s") from e
        except Exception as e:
            logger.warning(f"Oracle request failed: {e}")
            raise OracleError(f"oracle request failed: {e}") from e

        text = _message_text(getattr(message, "content", message))
        if not text.strip():
            raise OracleError("oracle returned no content")
        return text


def _message_text(content: Any) -> str:
    """Flatten LangChain message content (string or content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return str(content) if content is not None else ""
