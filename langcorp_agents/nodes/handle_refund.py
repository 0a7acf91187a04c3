import logging

from langchain_core.messages import AIMessage

from langcorp_agents.prompts import refund_processed_message, refund_authorization_required
from langcorp_agents.routing import SUPPORT_TRANSITIONS, MachineState, Trigger
from langcorp_agents.states.support_state import Completed, RefundOutcome, SupportState, Suspended


logger = logging.getLogger(__name__)


def process_refund(state: SupportState) -> RefundOutcome:
    """
    Finalizes a refund only once someone outside the conversation has authorized it.
    Without authorization the step returns Suspended and leaves the conversation untouched.
    """
    if not state.get("refund_authorized", False):
        logger.warning("--- HUMAN AUTHORIZATION REQUIRED FOR REFUND ---")
        return Suspended(reason=refund_authorization_required)
    return Completed(message=AIMessage(content=refund_processed_message))


def handle_refund(state: SupportState) -> dict:
    """Graph node wrapping process_refund: maps the outcome onto a state update."""
    outcome = process_refund(state)

    if isinstance(outcome, Suspended):
        return {"machine_state": outcome.state, "suspension": outcome.reason}

    next_state = SUPPORT_TRANSITIONS.next(MachineState.REFUND_PENDING, Trigger.AUTHORIZED)
    logger.info("%s -> %s", MachineState.REFUND_PENDING.value, next_state.value)
    # An authorization covers one refund; the next one has to be approved again.
    return {
        "messages": [outcome.message],
        "machine_state": next_state,
        "refund_authorized": False,
        "suspension": None,
    }
