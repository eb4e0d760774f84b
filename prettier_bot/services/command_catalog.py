"""Built-in text transforms and the tagged command types stored in preferences."""

from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_COMMAND_ID = "correct"


@dataclass(frozen=True)
class BuiltinCommand:
    """Reference to a catalog entry. Title and prompt always come from the catalog."""

    id: str

    @property
    def title(self) -> str:
        return BUILTIN_CATALOG[self.id]["title"]

    @property
    def prompt(self) -> str:
        return BUILTIN_CATALOG[self.id]["prompt"]

    @property
    def is_custom(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"type": "builtin", "id": self.id}


@dataclass(frozen=True)
class CustomCommand:
    """User-defined command created at intake time; cannot be rebuilt from its id."""

    id: str
    title: str
    prompt: str

    @property
    def is_custom(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {"type": "custom", "id": self.id, "title": self.title, "prompt": self.prompt}


Command = Union[BuiltinCommand, CustomCommand]


BUILTIN_CATALOG: dict[str, dict[str, str]] = {
    "correct": {
        "title": "Correct Grammar",
        "prompt": "Just correct the grammar and spelling of the following and return. Make no other changes: ",
    },
    "concise": {
        "title": "Make Concise",
        "prompt": "Rewrite the following text to be clear and concise, keeping every key point: ",
    },
    "shorter": {
        "title": "Make Shorter",
        "prompt": "Make the following text shorter without changing its meaning: ",
    },
    "longer": {
        "title": "Make Longer",
        "prompt": "Make the following text longer without changing its main meaning: ",
    },
    "variation": {
        "title": "Create Variation",
        "prompt": "Create a variation of the following text with similar length: ",
    },
    "emojis": {
        "title": "Add Emojis",
        "prompt": "Add appropriate emojis to the following text: ",
    },
    "formal": {
        "title": "Make Formal",
        "prompt": "Rewrite the following text in a polite, formal tone: ",
    },
    "casual": {
        "title": "Make Casual",
        "prompt": "Rewrite the following text in a relaxed, friendly tone: ",
    },
}


def is_builtin(command_id: str) -> bool:
    return command_id in BUILTIN_CATALOG


def resolve_builtin(command_id: str) -> Optional[BuiltinCommand]:
    """Return the canonical built-in for an id, or None when it is not in the catalog."""
    if not is_builtin(command_id):
        return None
    return BuiltinCommand(command_id)


def builtin_commands() -> list[BuiltinCommand]:
    return [BuiltinCommand(command_id) for command_id in BUILTIN_CATALOG]


def default_preferences() -> list[Command]:
    return [BuiltinCommand(DEFAULT_COMMAND_ID)]


def command_from_dict(item) -> Optional[Command]:
    """
    Decode one stored entry.

    Accepts the tagged form written by `to_dict` as well as older shapes:
    a bare id string, or an untagged object with id/title/prompt.
    """
    if isinstance(item, str):
        return resolve_builtin(item)

    if not isinstance(item, dict):
        return None

    command_id = item.get("id")
    if not isinstance(command_id, str) or not command_id:
        return None

    kind = item.get("type")
    if kind == "builtin":
        return resolve_builtin(command_id)

    title = item.get("title")
    prompt = item.get("prompt")
    has_definition = isinstance(title, str) and isinstance(prompt, str) and title and prompt

    if kind == "custom":
        return CustomCommand(command_id, title, prompt) if has_definition else None

    if is_builtin(command_id) and not item.get("prompt"):
        return BuiltinCommand(command_id)
    if has_definition:
        if is_builtin(command_id) and prompt == BUILTIN_CATALOG[command_id]["prompt"]:
            return BuiltinCommand(command_id)
        return CustomCommand(command_id, title, prompt)
    return resolve_builtin(command_id)
