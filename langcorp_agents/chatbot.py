"""
Entry points of the LangCorp support chatbot.

Each call loads the thread's conversation from the store, runs the support graph once,
and saves the result. A failed run raises and leaves the stored conversation as it was.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from langcorp_agents.graphs.support_graph import build_support_graph
from langcorp_agents.persistence.conversation_store import ConversationStore, InMemoryConversationStore
from langcorp_agents.routing import MachineState, Representative
from langcorp_agents.states.support_state import ConversationState, TurnResult


logger = logging.getLogger(__name__)


@dataclass
class _ThreadLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    # Calls currently holding or waiting on the lock. The entry is dropped when this reaches zero.
    users: int = 0


class SupportChatbot:
    def __init__(
        self,
        model: Optional[BaseChatModel] = None,
        store: Optional[ConversationStore] = None,
    ):
        self.graph = build_support_graph(model)
        self.store = store if store is not None else InMemoryConversationStore()

        # Turns on one thread run one at a time; different threads do not wait on each other.
        self._thread_locks: Dict[str, _ThreadLock] = {}
        self._thread_locks_guard = threading.Lock()

    @contextmanager
    def _turn(self, thread_id: str) -> Iterator[None]:
        """Holds the thread's lock for one call. Locks only exist while some call needs them."""
        with self._thread_locks_guard:
            entry = self._thread_locks.get(thread_id)
            if entry is None:
                entry = self._thread_locks[thread_id] = _ThreadLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._thread_locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._thread_locks[thread_id]

    def send_message(self, thread_id: str, text: str) -> TurnResult:
        """
        Adds a user message to the thread and runs the support team on it.

        A new message always starts over at frontline support; a refund still waiting
        for authorization on this thread is abandoned.
        """
        with self._turn(thread_id):
            state = self.store.load(thread_id)
            if state.machine_state == MachineState.REFUND_PENDING:
                logger.info("Thread %s: new message abandons the pending refund", thread_id)

            state.messages.append(HumanMessage(content=text))
            state.machine_state = MachineState.INITIAL
            state.next_representative = Representative.UNSET
            state.suspension = None
            return self._run(thread_id, state)

    def resume(self, thread_id: str, refund_authorized: bool) -> TurnResult:
        """
        Delivers the external refund authorization decision.

        The flag is only looked at while the thread is waiting in REFUND_PENDING; for any
        other thread this returns the current state and changes nothing.
        """
        with self._turn(thread_id):
            state = self.store.load(thread_id)
            if state.machine_state != MachineState.REFUND_PENDING:
                logger.info(
                    "Thread %s is in %s, not waiting on a refund; ignoring resume",
                    thread_id, state.machine_state.value,
                )
                return TurnResult.from_conversation(thread_id, state)

            state.refund_authorized = refund_authorized
            return self._run(thread_id, state)

    def get_state(self, thread_id: str) -> TurnResult:
        return TurnResult.from_conversation(thread_id, self.store.load(thread_id))

    def _run(self, thread_id: str, state: ConversationState) -> TurnResult:
        values = self.graph.invoke(state.to_graph_input())
        updated = ConversationState.from_graph_output(values)
        self.store.save(thread_id, updated)

        result = TurnResult.from_conversation(thread_id, updated)
        if result.suspended is not None:
            logger.warning("Thread %s suspended in %s: %s", thread_id, result.machine_state.value, result.suspended.reason)
        else:
            logger.info("Thread %s finished in %s", thread_id, result.machine_state.value)
        return result
