from fastapi import Request

from prettier_bot.config import settings
from prettier_bot.services.llm import LLMProvider, OpenAIProvider
from prettier_bot.services.session_registry import SessionRegistry
from prettier_bot.services.telegram_service import TelegramService


def get_sessions(request: Request) -> SessionRegistry:
    """The application's session registry, created at startup."""
    return request.app.state.sessions


def get_telegram() -> TelegramService:
    return TelegramService(settings.telegram_bot_token)


def get_llm() -> LLMProvider:
    return OpenAIProvider(
        api_key=settings.openai_api_key,
        default_model=settings.openai_model,
        default_temperature=settings.openai_temperature,
    )
