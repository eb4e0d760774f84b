import json
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from prettier_bot.logging_config import get_logger
from prettier_bot.models import UserPreference
from prettier_bot.services.command_catalog import Command, command_from_dict, default_preferences
from prettier_bot.services.result import DB_ERROR, Result

logger = get_logger("preference_store")


def serialize_preferences(commands: list[Command]) -> str:
    return json.dumps([command.to_dict() for command in commands], ensure_ascii=False)


def deserialize_preferences(raw: str) -> list[Command]:
    """Decode stored JSON. Entries that cannot be resolved are dropped."""
    items = json.loads(raw)
    if not isinstance(items, list):
        raise ValueError(f"Expected a JSON list of commands, got {type(items).__name__}")

    commands: list[Command] = []
    seen: set[str] = set()
    for item in items:
        command = command_from_dict(item)
        if command is None:
            logger.warning("Dropping unresolvable stored command", extra={"context": {"item": item}})
            continue
        if command.id in seen:
            # Keep the later definition in the earlier slot.
            commands = [command if existing.id == command.id else existing for existing in commands]
            continue
        seen.add(command.id)
        commands.append(command)
    return commands


class PreferenceStore:
    """
    Durable mapping conversation id -> ordered list of enabled commands.

    Reads never fail the caller: on any storage or decoding error the default
    set is returned and the error is logged. Writes replace the whole set.
    """

    def __init__(self, db: Session, default_factory: Callable[[], list[Command]] = default_preferences):
        self.db = db
        self.default_factory = default_factory

    def get(self, chat_id: str, default: Optional[list[Command]] = None) -> list[Command]:
        fallback = list(default) if default is not None else self.default_factory()
        try:
            row = self.db.get(UserPreference, str(chat_id))
            if row is None or not row.commands:
                return fallback
            commands = deserialize_preferences(row.commands)
            return commands or fallback
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to load preferences: {e}",
                extra={"context": {"chat_id": str(chat_id)}},
                exc_info=True,
            )
            return fallback

    def save(self, chat_id: str, commands: list[Command]) -> Result[bool]:
        """Insert or replace the serialized set for a conversation."""
        try:
            payload = serialize_preferences(commands)
            now = datetime.now(timezone.utc)

            row = self.db.get(UserPreference, str(chat_id))
            if row is None:
                row = UserPreference(chat_id=str(chat_id), commands=payload, updated_at=now)
                self.db.add(row)
            else:
                row.commands = payload
                row.updated_at = now

            self.db.commit()
            logger.debug(f"Saved {len(commands)} commands for chat {chat_id}")
            return Result.success(True)

        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to save preferences: {e}",
                extra={"context": {"chat_id": str(chat_id)}},
            )
            return Result.failure(str(e), DB_ERROR)
