from typing import List, Tuple

from prettier_bot.logging_config import conversation_logger, get_logger
from prettier_bot.services import state_machine
from prettier_bot.services.bot_context import BotContext
from prettier_bot.services.command_catalog import Command, resolve_builtin
from prettier_bot.services.preference_service import (
    config_options,
    enabled_titles,
    find_command,
    toggle_command,
)
from prettier_bot.services.result import Result
from prettier_bot.services.telegram_service import build_config_keyboard

logger = get_logger("config_service")

CONFIG_HEADER = "⚙️ Choose the commands shown under your messages. Tap a command to switch it on or off."
MSG_CANNOT_RESTORE = "This custom command was removed. Add it again with ➕"
MSG_CANCELLED = "Okay, configuration closed."


def intake_instructions(trigger: str) -> str:
    return (
        f"✍️ Describe your new command in one message starting with \"{trigger}\".\n"
        f"For example: \"{trigger} that formats my text for WhatsApp\"."
    )


def render_config_view(commands: List[Command]) -> Tuple[str, dict]:
    """Text and toggle keyboard for the current preference set."""
    enabled = len(commands)
    text = f"{CONFIG_HEADER}\n\nEnabled: {enabled}"
    return text, build_config_keyboard(config_options(commands))


def format_confirmation(commands: List[Command]) -> str:
    lines = "\n".join(f"• {title}" for title in enabled_titles(commands))
    return f"💾 Saved! Your commands:\n{lines}"


def _enter_presenting(ctx: BotContext, chat_id: str) -> None:
    # Presses on a config message are honoured even if process state was lost.
    ctx.sessions.set_state(chat_id, state_machine.open_config(ctx.sessions.get_state(chat_id)))


def show_config(ctx: BotContext, chat_id: str) -> Result[dict]:
    """Entry command: send the options view with on/off markers."""
    _enter_presenting(ctx, chat_id)
    commands = ctx.store.get(chat_id)
    text, keyboard = render_config_view(commands)

    result = ctx.telegram.send_message(chat_id, text, reply_markup=keyboard)
    if not result.ok:
        conversation_logger(logger, chat_id).error(f"Failed to send config view: {result.describe()}")
    return result


def handle_toggle(
    ctx: BotContext,
    chat_id: str,
    message_id: int,
    callback_query_id: str,
    command_id: str,
) -> List[Command]:
    """Flip one command, persist immediately and redraw the config message. Returns the resulting set."""
    log = conversation_logger(logger, chat_id)
    _enter_presenting(ctx, chat_id)

    commands = ctx.store.get(chat_id)
    updated, changed = toggle_command(commands, command_id)
    if not changed:
        notice = MSG_CANNOT_RESTORE if resolve_builtin(command_id) is None else None
        ctx.telegram.answer_callback_query(callback_query_id, notice)
        log.info(f"Toggle ignored for unknown command {command_id}")
        return commands

    saved = ctx.store.save(chat_id, updated)
    if not saved.ok:
        log.warning("Toggle not persisted, continuing with in-memory set", context={"command_id": command_id})

    text, keyboard = render_config_view(updated)
    edited = ctx.telegram.edit_message(chat_id, message_id, text, reply_markup=keyboard)
    if not edited.ok:
        log.error(f"Failed to redraw config view: {edited.describe()}")

    toggled = find_command(updated, command_id)
    notice = f"{toggled.title} on" if toggled is not None else "Removed"
    ctx.telegram.answer_callback_query(callback_query_id, notice)

    log.info(
        "Command toggled",
        context={"command_id": command_id, "enabled": toggled is not None, "count": len(updated)},
    )
    return updated


def handle_add_custom(ctx: BotContext, chat_id: str, callback_query_id: str) -> Result[dict]:
    """Switch the conversation to intake mode and explain the expected input."""
    _enter_presenting(ctx, chat_id)
    ctx.sessions.set_state(chat_id, state_machine.request_custom_input(ctx.sessions.get_state(chat_id)))
    ctx.telegram.answer_callback_query(callback_query_id)

    result = ctx.telegram.send_message(chat_id, intake_instructions(ctx.custom_command_trigger))
    if not result.ok:
        conversation_logger(logger, chat_id).error(f"Failed to send intake instructions: {result.describe()}")
    return result


def handle_done(ctx: BotContext, chat_id: str, message_id: int, callback_query_id: str) -> List[Command]:
    """Confirm the configuration. Toggles are already persisted; this saves once more and closes the view."""
    log = conversation_logger(logger, chat_id)
    _enter_presenting(ctx, chat_id)

    commands = ctx.store.get(chat_id)
    saved = ctx.store.save(chat_id, commands)
    if not saved.ok:
        log.warning("Final save failed, confirmation reflects in-memory set")

    edited = ctx.telegram.edit_message(chat_id, message_id, format_confirmation(commands))
    if not edited.ok:
        ctx.telegram.send_message(chat_id, format_confirmation(commands))

    ctx.telegram.answer_callback_query(callback_query_id, "Saved")
    ctx.sessions.set_state(chat_id, state_machine.finish_config(ctx.sessions.get_state(chat_id)))
    return commands


def cancel(ctx: BotContext, chat_id: str) -> Result[dict]:
    """/cancel: leave presenting or intake mode."""
    ctx.sessions.set_state(chat_id, state_machine.cancel(ctx.sessions.get_state(chat_id)))
    return ctx.telegram.send_message(chat_id, MSG_CANCELLED)
