from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramUser(BaseModel):
    id: int
    is_bot: bool = False
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class TelegramChat(BaseModel):
    id: int
    type: str  # private, group, supergroup, channel
    title: Optional[str] = None
    username: Optional[str] = None


class TelegramMessage(BaseModel):
    message_id: int
    date: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")  # "from" is reserved in Python
    text: Optional[str] = None
    reply_to_message: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_command(self) -> bool:
        return bool(self.text) and self.text.startswith("/")

    @property
    def command(self) -> Optional[str]:
        """Bot command without arguments or @botname suffix, e.g. "/config"."""
        if not self.is_command:
            return None
        head = self.text.split(maxsplit=1)[0]
        return head.split("@", 1)[0].lower()


class TelegramCallbackQuery(BaseModel):
    id: str
    from_user: TelegramUser = Field(alias="from")
    message: Optional[TelegramMessage] = None
    data: Optional[str] = None  # callback_data from button

    model_config = ConfigDict(populate_by_name=True)


class TelegramPollAnswer(BaseModel):
    poll_id: str
    user: Optional[TelegramUser] = None
    option_ids: list[int] = []


class TelegramUpdate(BaseModel):
    update_id: int
    message: Optional[TelegramMessage] = None
    callback_query: Optional[TelegramCallbackQuery] = None
    poll_answer: Optional[TelegramPollAnswer] = None

    @property
    def chat_id(self) -> Optional[str]:
        """Conversation identity for whichever event this update carries."""
        if self.message:
            return str(self.message.chat.id)
        if self.callback_query and self.callback_query.message:
            return str(self.callback_query.message.chat.id)
        if self.poll_answer and self.poll_answer.user:
            return str(self.poll_answer.user.id)
        return None

    @property
    def sender(self) -> Optional[TelegramUser]:
        if self.message:
            return self.message.from_user
        if self.callback_query:
            return self.callback_query.from_user
        if self.poll_answer:
            return self.poll_answer.user
        return None
