import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from langcorp_agents.helpers import trim_trailing_ai_message
from langcorp_agents.models.invoke import invoke_model, message_text
from langcorp_agents.nodes.routing_classifier import BillingRoutingDecision, classify, format_instructions
from langcorp_agents.prompts import (
    billing_support_system_prompt,
    billing_routing_system_prompt,
    billing_routing_human_prompt,
)
from langcorp_agents.routing import SUPPORT_TRANSITIONS, MachineState, Trigger
from langcorp_agents.states.support_state import SupportState


logger = logging.getLogger(__name__)


def billing_support(state: SupportState, model: BaseChatModel) -> dict:
    """The billing specialist: answers the customer, then decides whether a refund is warranted."""
    logger.info("--- %s: billing support ---", MachineState.BILLING.value)

    # Make the user's question the most recent message in the history, helping the model stay focused.
    trimmed_history = trim_trailing_ai_message(state["messages"])
    billing_response = invoke_model(model, [SystemMessage(content=billing_support_system_prompt)] + trimmed_history)

    # Only the specialist's reply is classified, not the conversation.
    label = classify(
        model,
        [
            SystemMessage(content=billing_routing_system_prompt),
            HumanMessage(content=billing_routing_human_prompt.format(
                format_instructions=format_instructions(BillingRoutingDecision),
                reply=message_text(billing_response),
            )),
        ],
        BillingRoutingDecision,
        SUPPORT_TRANSITIONS.labels_for(MachineState.BILLING),
    )

    next_state = SUPPORT_TRANSITIONS.next(MachineState.BILLING, Trigger.from_label(label))
    logger.info("%s -> %s", MachineState.BILLING.value, next_state.value)

    return {
        "messages": [billing_response],
        "next_representative": label,
        "machine_state": next_state,
    }
