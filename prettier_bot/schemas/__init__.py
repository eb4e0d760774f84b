from prettier_bot.schemas.telegram import (
    TelegramCallbackQuery,
    TelegramChat,
    TelegramMessage,
    TelegramPollAnswer,
    TelegramUpdate,
    TelegramUser,
)

__all__ = [
    "TelegramUpdate",
    "TelegramMessage",
    "TelegramCallbackQuery",
    "TelegramPollAnswer",
    "TelegramChat",
    "TelegramUser",
]
