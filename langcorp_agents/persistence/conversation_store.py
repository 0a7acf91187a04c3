"""
Where conversations live between turns.

The chatbot only ever talks to the ConversationStore protocol, so the support graph
stays persistence-agnostic. InMemoryConversationStore is the default, process-local
implementation; a durable backend only needs `load` and `save`.
"""

import threading
from typing import Dict, List, Protocol

from langcorp_agents.states.support_state import ConversationState


class ConversationStore(Protocol):
    def load(self, thread_id: str) -> ConversationState:
        """Returns the stored state, or a fresh default state for an unknown thread."""
        ...

    def save(self, thread_id: str, state: ConversationState) -> None:
        ...


class InMemoryConversationStore:
    """A dict-backed store. States are copied on the way in and out."""

    def __init__(self):
        self._states: Dict[str, ConversationState] = {}
        self._lock = threading.Lock()

    def load(self, thread_id: str) -> ConversationState:
        with self._lock:
            state = self._states.get(thread_id)
        if state is None:
            return ConversationState()
        return state.model_copy(deep=True)

    def save(self, thread_id: str, state: ConversationState) -> None:
        snapshot = state.model_copy(deep=True)
        with self._lock:
            self._states[thread_id] = snapshot

    def delete(self, thread_id: str) -> bool:
        with self._lock:
            return self._states.pop(thread_id, None) is not None

    def thread_ids(self) -> List[str]:
        with self._lock:
            return list(self._states)

    def __contains__(self, thread_id: str) -> bool:
        with self._lock:
            return thread_id in self._states
