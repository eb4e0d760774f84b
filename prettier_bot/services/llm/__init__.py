from prettier_bot.services.llm.base import CompletionError, LLMProvider, LLMResponse
from prettier_bot.services.llm.openai_provider import OpenAIProvider

__all__ = ["CompletionError", "LLMProvider", "LLMResponse", "OpenAIProvider"]
