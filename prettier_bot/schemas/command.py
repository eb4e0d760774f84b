import re

from pydantic import BaseModel, field_validator

from prettier_bot.services.command_catalog import CustomCommand, is_builtin

MAX_ID_LENGTH = 32
MAX_TITLE_LENGTH = 48

_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class CommandDefinition(BaseModel):
    """Command triple produced by the completion API during intake."""

    id: str
    title: str
    prompt: str

    @field_validator("id")
    @classmethod
    def normalize_id(cls, value: str) -> str:
        normalized = re.sub(r"\s+", "-", value.strip().lower())
        if not normalized or len(normalized) > MAX_ID_LENGTH:
            raise ValueError(f"id must be 1-{MAX_ID_LENGTH} characters")
        if not _ID_PATTERN.match(normalized):
            raise ValueError("id may contain only lowercase letters, digits, '-' and '_'")
        if is_builtin(normalized):
            raise ValueError(f"id '{normalized}' is reserved for a built-in command")
        return normalized

    @field_validator("title", "prompt")
    @classmethod
    def require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("title")
    @classmethod
    def limit_title(cls, value: str) -> str:
        value = value.strip()
        if len(value) > MAX_TITLE_LENGTH:
            raise ValueError(f"title must be at most {MAX_TITLE_LENGTH} characters")
        return value

    def to_command(self) -> CustomCommand:
        return CustomCommand(id=self.id, title=self.title, prompt=self.prompt)
