from prettier_bot.services.command_catalog import (
    BuiltinCommand,
    Command,
    CustomCommand,
    default_preferences,
    resolve_builtin,
)
from prettier_bot.services.result import Result
from prettier_bot.services.state_machine import (
    ConfigState,
    InvalidTransitionError,
    can_transition,
    cancel,
    finish_config,
    finish_intake,
    open_config,
    request_custom_input,
    transition,
)
