"""Pure operations on a preference set. No I/O; callers persist the result."""

from typing import List, Tuple

from prettier_bot.services.command_catalog import (
    Command,
    CustomCommand,
    builtin_commands,
    resolve_builtin,
)


def find_command(commands: List[Command], command_id: str):
    for command in commands:
        if command.id == command_id:
            return command
    return None


def toggle_command(commands: List[Command], command_id: str) -> Tuple[List[Command], bool]:
    """
    Remove `command_id` if enabled, otherwise add its catalog definition.

    Returns (new set, changed). Ids that are neither enabled nor built-in are a
    no-op: a removed custom command cannot be rebuilt from its id.
    """
    if find_command(commands, command_id) is not None:
        return [command for command in commands if command.id != command_id], True

    builtin = resolve_builtin(command_id)
    if builtin is None:
        return list(commands), False
    return [*commands, builtin], True


def upsert_custom_command(commands: List[Command], custom: CustomCommand) -> Tuple[List[Command], bool]:
    """Overwrite an entry with the same id in place, otherwise append. Returns (new set, replaced)."""
    if find_command(commands, custom.id) is None:
        return [*commands, custom], False
    return [custom if command.id == custom.id else command for command in commands], True


def config_options(commands: List[Command]) -> List[Tuple[Command, bool]]:
    """Every catalog command, then every enabled custom command, each with its enabled flag."""
    enabled_ids = {command.id for command in commands}
    options = [(command, command.id in enabled_ids) for command in builtin_commands()]
    options.extend((command, True) for command in commands if command.is_custom)
    return options


def enabled_titles(commands: List[Command]) -> List[str]:
    return [command.title for command in commands]
