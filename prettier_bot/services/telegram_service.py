from typing import Iterable, Optional, Tuple

import httpx

from prettier_bot.logging_config import get_logger
from prettier_bot.services.command_catalog import Command
from prettier_bot.services.result import TELEGRAM_ERROR, Result

logger = get_logger("telegram_service")

# callback_data layout: "<action>:<argument>"
ACTION_RUN = "run"
ACTION_TOGGLE = "toggle"
ACTION_ADD_CUSTOM = "addcustom"
ACTION_DONE = "done"

MARK_ON = "✅"
MARK_OFF = "▫️"


class TelegramService:
    """Outbound calls to the Telegram Bot API. Every call returns a Result instead of raising."""

    BASE_URL = "https://api.telegram.org/bot{token}"

    def __init__(self, bot_token: str, timeout: float = 30.0):
        self.bot_token = bot_token
        self.base_url = self.BASE_URL.format(token=bot_token)
        self.timeout = timeout

    def _make_request(self, method: str, data: Optional[dict] = None) -> Result[dict]:
        """Make request to Telegram API."""
        url = f"{self.base_url}/{method}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, json=data or {})
                body = response.json()
        except Exception as e:
            logger.error(f"Telegram API error: {e}", extra={"context": {"method": method}})
            return Result.failure(str(e), TELEGRAM_ERROR)

        if not body.get("ok"):
            description = body.get("description") or f"HTTP {response.status_code}"
            logger.warning(f"Telegram {method} rejected: {description}")
            return Result.failure(description, TELEGRAM_ERROR)

        return Result.success(body.get("result"))

    def send_message(
        self,
        chat_id: str,
        text: str,
        reply_markup: Optional[dict] = None,
        parse_mode: Optional[str] = None,
    ) -> Result[dict]:
        """Send message to Telegram chat."""
        data = {
            "chat_id": chat_id,
            "text": text,
        }
        if reply_markup:
            data["reply_markup"] = reply_markup
        if parse_mode:
            data["parse_mode"] = parse_mode

        return self._make_request("sendMessage", data)

    def edit_message(
        self,
        chat_id: str,
        message_id: int,
        text: str,
        reply_markup: Optional[dict] = None,
        parse_mode: Optional[str] = None,
    ) -> Result[dict]:
        """Replace text and buttons of an existing message."""
        data = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
        }
        if reply_markup:
            data["reply_markup"] = reply_markup
        if parse_mode:
            data["parse_mode"] = parse_mode

        return self._make_request("editMessageText", data)

    def delete_message(self, chat_id: str, message_id: int) -> Result[dict]:
        data = {
            "chat_id": chat_id,
            "message_id": message_id,
        }
        return self._make_request("deleteMessage", data)

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: bool = False,
    ) -> Result[dict]:
        """Dismiss the loading indicator on a pressed button."""
        data = {"callback_query_id": callback_query_id}
        if text:
            data["text"] = text
        if show_alert:
            data["show_alert"] = True
        return self._make_request("answerCallbackQuery", data)


def callback_data(action: str, argument: str = "") -> str:
    return f"{action}:{argument}"


def parse_callback_data(data: str) -> Tuple[str, str]:
    """Split "action:argument". Data without a separator is an action with no argument."""
    action, _, argument = data.partition(":")
    return action, argument


def build_options_keyboard(commands: Iterable[Command]) -> dict:
    """One button per enabled command, applied to the text of the message it is attached to."""
    return {
        "inline_keyboard": [
            [{"text": command.title, "callback_data": callback_data(ACTION_RUN, command.id)}]
            for command in commands
        ]
    }


def build_config_keyboard(options: Iterable[Tuple[Command, bool]]) -> dict:
    """Toggle buttons marked on/off, followed by the add-custom and done actions."""
    rows = [
        [
            {
                "text": f"{MARK_ON if enabled else MARK_OFF} {command.title}",
                "callback_data": callback_data(ACTION_TOGGLE, command.id),
            }
        ]
        for command, enabled in options
    ]
    rows.append([{"text": "➕ Add custom command", "callback_data": callback_data(ACTION_ADD_CUSTOM)}])
    rows.append([{"text": "💾 Done", "callback_data": callback_data(ACTION_DONE)}])
    return {"inline_keyboard": rows}
