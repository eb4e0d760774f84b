from dataclasses import dataclass

from prettier_bot.services.llm.base import LLMProvider
from prettier_bot.services.preference_store import PreferenceStore
from prettier_bot.services.session_registry import SessionRegistry
from prettier_bot.services.telegram_service import TelegramService

SYSTEM_PROMPT = "You are Prettier, a Telegram bot designed to help users improve and modify their text."


@dataclass
class BotContext:
    """Collaborators needed to handle one inbound event."""

    store: PreferenceStore
    telegram: TelegramService
    llm: LLMProvider
    sessions: SessionRegistry
    custom_command_trigger: str = "Create a command"
    system_prompt: str = SYSTEM_PROMPT
