"""
The LangCorp support chatbot graph.

Four nodes, one per non-terminal machine state. Every conditional edge reads the
`machine_state` the previous node wrote, which the node computed from the transition
table. The entry edge reads the same field, so a suspended refund can be re-entered
by invoking the graph again with the stored state.
"""

from functools import partial
from typing import Dict, Optional

from langchain_core.language_models import BaseChatModel
from langgraph.graph import StateGraph, START, END

from langcorp_agents.models.hf_models import get_hf_model
from langcorp_agents.nodes.billing_support import billing_support
from langcorp_agents.nodes.handle_refund import handle_refund
from langcorp_agents.nodes.initial_support import initial_support
from langcorp_agents.nodes.technical_support import technical_support
from langcorp_agents.routing import SUPPORT_TRANSITIONS, MachineState
from langcorp_agents.states.support_state import SupportState


INITIAL_SUPPORT = "initial_support"
BILLING_SUPPORT = "billing_support"
TECHNICAL_SUPPORT = "technical_support"
HANDLE_REFUND = "handle_refund"

# Which node handles each machine state. END is LangGraph's own terminal.
NODE_FOR_STATE = {
    MachineState.INITIAL: INITIAL_SUPPORT,
    MachineState.BILLING: BILLING_SUPPORT,
    MachineState.TECHNICAL: TECHNICAL_SUPPORT,
    MachineState.REFUND_PENDING: HANDLE_REFUND,
    MachineState.END: END,
}


def route_entry(state: SupportState) -> str:
    """Start a fresh pass at frontline support unless a refund is waiting on authorization."""
    machine_state = state.get("machine_state", MachineState.INITIAL)
    if machine_state == MachineState.REFUND_PENDING:
        return HANDLE_REFUND
    return INITIAL_SUPPORT


def route_by_machine_state(state: SupportState) -> str:
    """A conditional edge that follows the transition the previous node recorded."""
    return NODE_FOR_STATE[state["machine_state"]]


def successor_nodes(state: MachineState) -> Dict[str, str]:
    """The path map out of a state's node, read off the transition table."""
    return {
        NODE_FOR_STATE[target]: NODE_FOR_STATE[target]
        for target in SUPPORT_TRANSITIONS.targets(state)
    }


def build_support_graph(model: Optional[BaseChatModel] = None):
    """Wires the support nodes into a compiled StateGraph around the given chat model."""
    if model is None:
        model = get_hf_model()

    builder = StateGraph(SupportState)

    builder.add_node(INITIAL_SUPPORT, partial(initial_support, model=model))
    builder.add_node(BILLING_SUPPORT, partial(billing_support, model=model))
    builder.add_node(TECHNICAL_SUPPORT, partial(technical_support, model=model))
    builder.add_node(HANDLE_REFUND, handle_refund)

    builder.add_conditional_edges(
        START,
        route_entry,
        {
            INITIAL_SUPPORT: INITIAL_SUPPORT,
            HANDLE_REFUND: HANDLE_REFUND,
        },
    )

    # A state with a single successor gets a plain edge. This is also what ends the run
    # after handle_refund when the refund suspends in place.
    for state, node in NODE_FOR_STATE.items():
        if SUPPORT_TRANSITIONS.is_terminal(state):
            continue
        path_map = successor_nodes(state)
        if len(path_map) == 1:
            builder.add_edge(node, next(iter(path_map)))
        else:
            builder.add_conditional_edges(node, route_by_machine_state, path_map)

    # No checkpointer: persistence belongs to the conversation store that feeds this graph.
    return builder.compile()
