from langgraph.graph import MessagesState
from langchain_core.messages import AnyMessage, BaseMessage
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union

from langcorp_agents.routing import MachineState, Representative


# The graph state for the support chatbot. 'messages' comes from MessagesState and
# is merged by LangGraph's add_messages reducer.
class SupportState(MessagesState):
    next_representative: Representative
    refund_authorized: bool

    # Where the machine currently is. The graph's entry edge reads it, so a stored
    # state can be handed straight back to the graph to continue.
    machine_state: MachineState

    # Why the last run stopped short of END, if it did.
    suspension: Optional[str]


class ConversationState(BaseModel):
    """Everything persisted for one thread between turns."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    messages: List[AnyMessage] = Field(default_factory=list)
    next_representative: Representative = Representative.UNSET
    refund_authorized: bool = False
    machine_state: MachineState = MachineState.INITIAL
    suspension: Optional[str] = None

    def to_graph_input(self) -> Dict[str, Any]:
        return {
            "messages": list(self.messages),
            "next_representative": self.next_representative,
            "refund_authorized": self.refund_authorized,
            "machine_state": self.machine_state,
            "suspension": self.suspension,
        }

    @classmethod
    def from_graph_output(cls, values: Dict[str, Any]) -> "ConversationState":
        return cls(
            messages=list(values.get("messages", [])),
            next_representative=values.get("next_representative", Representative.UNSET),
            refund_authorized=values.get("refund_authorized", False),
            machine_state=values.get("machine_state", MachineState.INITIAL),
            suspension=values.get("suspension"),
        )


class Suspended(BaseModel):
    """The refund step could not finish and is waiting for an external signal."""
    reason: str
    state: MachineState = MachineState.REFUND_PENDING


class Completed(BaseModel):
    """The refund step finished and produced its confirmation message."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    message: BaseMessage


RefundOutcome = Union[Suspended, Completed]


class TurnResult(BaseModel):
    """What the chatbot hands back to its caller after each call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    thread_id: str
    messages: List[AnyMessage]
    machine_state: MachineState
    next_representative: Representative
    suspended: Optional[Suspended] = None

    @property
    def last_message(self) -> Optional[BaseMessage]:
        return self.messages[-1] if self.messages else None

    @classmethod
    def from_conversation(cls, thread_id: str, state: ConversationState) -> "TurnResult":
        suspended = None
        if state.suspension is not None:
            suspended = Suspended(reason=state.suspension, state=state.machine_state)
        return cls(
            thread_id=thread_id,
            messages=list(state.messages),
            machine_state=state.machine_state,
            next_representative=state.next_representative,
            suspended=suspended,
        )
