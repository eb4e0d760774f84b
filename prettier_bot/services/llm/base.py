from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from prettier_bot.logging_config import get_logger
from prettier_bot.services.result import AI_ERROR, Result

logger = get_logger("llm")


class CompletionError(Exception):
    """Transport or HTTP-level failure talking to the completion API."""


@dataclass
class LLMResponse:
    content: str
    model: str
    usage: Optional[dict] = None


class LLMProvider(ABC):
    """Abstract base class for chat-completion providers."""

    @abstractmethod
    def generate(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: int = 1000,
    ) -> LLMResponse:
        """Generate one reply for a list of role-tagged messages. Raises on failure."""
        pass

    def complete(self, messages: List[dict], **kwargs) -> Result[str]:
        """Like generate, but reports failures (including empty replies) as a Result."""
        try:
            response = self.generate(messages, **kwargs)
        except Exception as e:
            logger.error(f"Completion failed: {e}")
            return Result.failure(str(e), AI_ERROR)

        content = (response.content or "").strip()
        if not content:
            return Result.failure("Empty completion", AI_ERROR)
        return Result.success(content)
