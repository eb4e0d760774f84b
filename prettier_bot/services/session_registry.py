"""
Process-local conversation state.

Holds rolling history, the configuration state (which doubles as the intake
flag) and a per-conversation lock. Nothing here is persisted: a restart
starts every conversation from an empty history in the idle state. One
registry is created per application and handed to the webhook as a dependency.
"""

import threading
from collections import defaultdict
from typing import Dict, List

from prettier_bot.services.state_machine import ConfigState

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


class SessionRegistry:
    def __init__(self, history_window: int = 5):
        self.history_window = history_window
        self._history: Dict[str, List[dict]] = defaultdict(list)
        self._states: Dict[str, ConfigState] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, chat_id: str) -> threading.Lock:
        """Lock serializing all events of one conversation."""
        with self._guard:
            lock = self._locks.get(chat_id)
            if lock is None:
                lock = self._locks[chat_id] = threading.Lock()
            return lock

    def append(self, chat_id: str, role: str, content: str) -> None:
        self._history[chat_id].append({"role": role, "content": content})

    def recent(self, chat_id: str, limit: int = None) -> List[dict]:
        """Last `limit` entries (default: the configured window), oldest first."""
        limit = self.history_window if limit is None else limit
        if limit <= 0:
            return []
        return [dict(entry) for entry in self._history.get(chat_id, [])[-limit:]]

    def history_size(self, chat_id: str) -> int:
        return len(self._history.get(chat_id, []))

    def get_state(self, chat_id: str) -> ConfigState:
        return self._states.get(chat_id, ConfigState.IDLE)

    def set_state(self, chat_id: str, state: ConfigState) -> None:
        if state == ConfigState.IDLE:
            self._states.pop(chat_id, None)
        else:
            self._states[chat_id] = state

    def is_awaiting_custom_input(self, chat_id: str) -> bool:
        return self.get_state(chat_id) == ConfigState.AWAITING_CUSTOM_INPUT

    def clear(self) -> None:
        with self._guard:
            self._history.clear()
            self._states.clear()
            self._locks.clear()
