import json
import re

from pydantic import ValidationError

from prettier_bot.logging_config import conversation_logger, get_logger
from prettier_bot.schemas.command import CommandDefinition
from prettier_bot.services import state_machine
from prettier_bot.services.bot_context import BotContext
from prettier_bot.services.command_catalog import CustomCommand
from prettier_bot.services.config_service import show_config
from prettier_bot.services.preference_service import upsert_custom_command
from prettier_bot.services.result import PARSE_ERROR, Result

logger = get_logger("intake_service")

MSG_REJECTED = (
    "❌ That doesn't look like a command description. "
    "Tap ➕ Add custom command in /config to try again."
)
MSG_FAILED = "😔 Sorry, I couldn't create that command. Please try again from /config."
MSG_CREATED = "✅ Command \"{title}\" added."
MSG_UPDATED = "✅ Command \"{title}\" updated."

DEFINITION_PROMPT = (
    "You turn a user's request into a reusable text-transformation command for a Telegram bot. "
    "Reply with a single JSON object and nothing else, with exactly these keys: "
    '"id" (short lowercase slug using letters, digits and hyphens), '
    '"title" (button label, at most 4 words), '
    '"prompt" (instruction that will be followed by the text to transform, ending with ": ").'
)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class CommandDefinitionError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def passes_gate(text: str, trigger: str) -> bool:
    """Intake input must open with the trigger phrase (case-insensitive)."""
    return (text or "").strip().lower().startswith(trigger.strip().lower())


def parse_command_definition(raw: str) -> CustomCommand:
    """Parse a completion reply into a custom command. Raises CommandDefinitionError."""
    cleaned = _FENCE_PATTERN.sub("", (raw or "").strip()).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise CommandDefinitionError("No JSON object in completion")

    try:
        payload = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as e:
        raise CommandDefinitionError(f"Invalid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise CommandDefinitionError("Completion is not a JSON object")

    try:
        definition = CommandDefinition(**payload)
    except ValidationError as e:
        raise CommandDefinitionError(f"Invalid command definition: {e.errors()}") from e

    return definition.to_command()


def handle_custom_input(ctx: BotContext, chat_id: str, text: str) -> Result[CustomCommand]:
    """
    Consume one intake message.

    Intake mode is cleared before anything else, so every outcome (rejection,
    completion failure, parse failure, success) leaves the conversation out of it.
    """
    log = conversation_logger(logger, chat_id)
    ctx.sessions.set_state(chat_id, state_machine.finish_intake(ctx.sessions.get_state(chat_id)))

    # 1. Shape gate
    if not passes_gate(text, ctx.custom_command_trigger):
        log.info("Custom command input rejected by gate")
        ctx.telegram.send_message(chat_id, MSG_REJECTED)
        return Result.failure("Input does not start with trigger phrase", "rejected")

    # 2. Ask the completion API for a definition
    completion = ctx.llm.complete(
        [
            {"role": "system", "content": DEFINITION_PROMPT},
            {"role": "user", "content": text.strip()},
        ]
    )
    if not completion.ok:
        log.error(f"Custom command completion failed: {completion.describe()}")
        ctx.telegram.send_message(chat_id, MSG_FAILED)
        return Result.failure(completion.error, completion.error_code)

    # 3. Parse
    try:
        command = parse_command_definition(completion.value)
    except CommandDefinitionError as e:
        log.warning(f"Custom command definition rejected: {e.message}", context={"raw": completion.value[:500]})
        ctx.telegram.send_message(chat_id, MSG_FAILED)
        return Result.failure(e.message, PARSE_ERROR)

    # 4. Overwrite-by-id and persist
    commands = ctx.store.get(chat_id)
    updated, replaced = upsert_custom_command(commands, command)
    saved = ctx.store.save(chat_id, updated)
    if not saved.ok:
        log.warning("Custom command not persisted", context={"command_id": command.id})

    template = MSG_UPDATED if replaced else MSG_CREATED
    ctx.telegram.send_message(chat_id, template.format(title=command.title))
    log.info("Custom command saved", context={"command_id": command.id, "replaced": replaced})

    show_config(ctx, chat_id)
    return Result.success(command)
