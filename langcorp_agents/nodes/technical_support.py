import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import SystemMessage

from langcorp_agents.helpers import trim_trailing_ai_message
from langcorp_agents.models.invoke import invoke_model
from langcorp_agents.prompts import technical_support_system_prompt
from langcorp_agents.routing import SUPPORT_TRANSITIONS, MachineState
from langcorp_agents.states.support_state import SupportState


logger = logging.getLogger(__name__)


def technical_support(state: SupportState, model: BaseChatModel) -> dict:
    """The technical specialist answers once and the conversation ends."""
    logger.info("--- %s: technical support ---", MachineState.TECHNICAL.value)

    trimmed_history = trim_trailing_ai_message(state["messages"])
    response = invoke_model(model, [SystemMessage(content=technical_support_system_prompt)] + trimmed_history)

    return {
        "messages": [response],
        "machine_state": SUPPORT_TRANSITIONS.unconditional_target(MachineState.TECHNICAL),
    }
