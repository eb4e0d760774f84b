from enum import Enum


class ConfigState(str, Enum):
    IDLE = "idle"
    PRESENTING = "presenting"
    AWAITING_CUSTOM_INPUT = "awaiting_custom_input"


VALID_TRANSITIONS = {
    ConfigState.IDLE: [ConfigState.PRESENTING],
    ConfigState.PRESENTING: [ConfigState.PRESENTING, ConfigState.AWAITING_CUSTOM_INPUT, ConfigState.IDLE],
    ConfigState.AWAITING_CUSTOM_INPUT: [ConfigState.PRESENTING, ConfigState.IDLE],
}


class InvalidTransitionError(Exception):
    def __init__(self, from_state: ConfigState, to_state: ConfigState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.value} -> {to_state.value}")


def can_transition(from_state: ConfigState, to_state: ConfigState) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_state, [])
    return to_state in allowed


def transition(from_state: ConfigState, to_state: ConfigState) -> ConfigState:
    """Perform state transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(from_state, to_state)
    return to_state


def open_config(current_state: ConfigState) -> ConfigState:
    """/config or a toggle press: show the options view. Re-entry from intake abandons it."""
    if current_state == ConfigState.PRESENTING:
        return current_state
    return transition(current_state, ConfigState.PRESENTING)


def request_custom_input(current_state: ConfigState) -> ConfigState:
    """"Add custom command" pressed."""
    return transition(current_state, ConfigState.AWAITING_CUSTOM_INPUT)


def finish_intake(current_state: ConfigState) -> ConfigState:
    """One intake input consumed, success or failure."""
    return transition(current_state, ConfigState.PRESENTING)


def finish_config(current_state: ConfigState) -> ConfigState:
    """"Done" pressed."""
    return transition(current_state, ConfigState.IDLE)


def cancel(current_state: ConfigState) -> ConfigState:
    if current_state == ConfigState.IDLE:
        return current_state
    return transition(current_state, ConfigState.IDLE)
