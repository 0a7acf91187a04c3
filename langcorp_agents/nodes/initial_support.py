import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from langcorp_agents.models.invoke import invoke_model
from langcorp_agents.nodes.routing_classifier import InitialRoutingDecision, classify, format_instructions
from langcorp_agents.prompts import (
    initial_support_system_prompt,
    initial_routing_system_prompt,
    initial_routing_human_prompt,
)
from langcorp_agents.routing import SUPPORT_TRANSITIONS, MachineState, Trigger
from langcorp_agents.states.support_state import SupportState


logger = logging.getLogger(__name__)


def initial_support(state: SupportState, model: BaseChatModel) -> dict:
    """
    The entry point of the support team. It answers the customer conversationally and
    then decides whether the customer should be handed to billing, to technical support,
    or nowhere at all.
    """
    logger.info("--- %s: frontline support ---", MachineState.INITIAL.value)
    messages = state["messages"]

    # 1. The frontline reply sees the whole conversation.
    support_response = invoke_model(model, [SystemMessage(content=initial_support_system_prompt)] + messages)

    # 2. The classifier looks at the conversation including the reply we just produced,
    #    since the reply is where the hand-off (if any) is announced.
    label = classify(
        model,
        [SystemMessage(content=initial_routing_system_prompt)]
        + messages
        + [
            support_response,
            HumanMessage(content=initial_routing_human_prompt.format(
                format_instructions=format_instructions(InitialRoutingDecision)
            )),
        ],
        InitialRoutingDecision,
        SUPPORT_TRANSITIONS.labels_for(MachineState.INITIAL),
    )

    next_state = SUPPORT_TRANSITIONS.next(MachineState.INITIAL, Trigger.from_label(label))
    logger.info("%s -> %s", MachineState.INITIAL.value, next_state.value)

    return {
        "messages": [support_response],
        "next_representative": label,
        "machine_state": next_state,
    }
