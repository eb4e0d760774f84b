from typing import Optional

from prettier_bot.logging_config import conversation_logger, get_logger
from prettier_bot.services.bot_context import BotContext
from prettier_bot.services.command_catalog import Command, resolve_builtin
from prettier_bot.services.preference_service import find_command
from prettier_bot.services.result import Result
from prettier_bot.services.session_registry import ROLE_ASSISTANT, ROLE_USER
from prettier_bot.services.telegram_service import build_options_keyboard

logger = get_logger("transform_service")

MSG_AI_ERROR = "😔 Sorry, something went wrong. Please try again later."
MSG_UNKNOWN_COMMAND = "This command is no longer available"
MSG_NO_TEXT = "Nothing to transform"


def build_completion_messages(ctx: BotContext, chat_id: str, command: Command, text: str) -> list[dict]:
    """System instruction, the recent history window, then the command prompt applied to the text."""
    return [
        {"role": "system", "content": ctx.system_prompt},
        *ctx.sessions.recent(chat_id),
        {"role": "user", "content": command.prompt + text},
    ]


def present_options(ctx: BotContext, chat_id: str, text: str) -> Result[dict]:
    """Reply to plain text with one button per enabled command."""
    ctx.sessions.append(chat_id, ROLE_USER, text)
    commands = ctx.store.get(chat_id)

    result = ctx.telegram.send_message(chat_id, text, reply_markup=build_options_keyboard(commands))
    if not result.ok:
        conversation_logger(logger, chat_id).error(f"Failed to present options: {result.describe()}")
    return result


def resolve_selected_command(ctx: BotContext, chat_id: str, command_id: str) -> Optional[Command]:
    """Enabled command with this id, or the catalog definition for a stale built-in button."""
    commands = ctx.store.get(chat_id)
    return find_command(commands, command_id) or resolve_builtin(command_id)


def run_command(
    ctx: BotContext,
    chat_id: str,
    message_id: int,
    text: Optional[str],
    callback_query_id: str,
    command_id: str,
) -> Result[str]:
    """Apply a command to the text of the pressed message and edit that message in place."""
    log = conversation_logger(logger, chat_id)

    if not text:
        ctx.telegram.answer_callback_query(callback_query_id, MSG_NO_TEXT)
        return Result.failure("Message has no text", "no_text")

    command = resolve_selected_command(ctx, chat_id, command_id)
    if command is None:
        ctx.telegram.answer_callback_query(callback_query_id, MSG_UNKNOWN_COMMAND)
        return Result.failure(f"Unknown command {command_id}", "unknown_command")

    ctx.telegram.answer_callback_query(callback_query_id)

    completion = ctx.llm.complete(build_completion_messages(ctx, chat_id, command, text))
    if not completion.ok:
        log.error(f"Transform failed: {completion.describe()}", context={"command_id": command_id})
        ctx.telegram.send_message(chat_id, MSG_AI_ERROR)
        return completion

    reply = completion.value
    ctx.sessions.append(chat_id, ROLE_ASSISTANT, reply)

    keyboard = build_options_keyboard(ctx.store.get(chat_id))
    edited = ctx.telegram.edit_message(chat_id, message_id, reply, reply_markup=keyboard)
    if not edited.ok:
        # e.g. the message is too old to edit or the text did not change
        log.warning(f"Edit in place failed, sending new message: {edited.describe()}")
        ctx.telegram.send_message(chat_id, reply, reply_markup=keyboard)

    log.info("Command applied", context={"command_id": command_id, "chars": len(reply)})
    return Result.success(reply)
