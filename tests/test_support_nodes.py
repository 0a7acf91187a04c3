import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from langcorp_agents.errors import ClassificationError
from langcorp_agents.nodes.billing_support import billing_support
from langcorp_agents.nodes.handle_refund import handle_refund, process_refund
from langcorp_agents.nodes.initial_support import initial_support
from langcorp_agents.nodes.technical_support import technical_support
from langcorp_agents.routing import MachineState, Representative
from langcorp_agents.states.support_state import Completed, Suspended


def route(label):
    return '{"nextRepresentative": "%s"}' % label


def test_initial_support_routes_to_billing(make_model):
    model = make_model("Please hold while I transfer you to billing.", route("BILLING"))
    state = {"messages": [HumanMessage(content="I was charged twice")]}

    update = initial_support(state, model)

    assert update["machine_state"] is MachineState.BILLING
    assert update["next_representative"] is Representative.BILLING
    assert [m.content for m in update["messages"]] == ["Please hold while I transfer you to billing."]


def test_initial_support_respond_ends(make_model):
    model = make_model("Hi there! How can I help?", route("RESPOND"))
    update = initial_support({"messages": [HumanMessage(content="hello")]}, model)
    assert update["machine_state"] is MachineState.END
    assert update["next_representative"] is Representative.RESPOND


def test_initial_support_classifies_its_own_reply(make_model):
    model = make_model("Let me get technical support for you.", route("TECHNICAL"))
    initial_support({"messages": [HumanMessage(content="my laptop won't boot")]}, model)

    reply_prompt, routing_prompt = model.received
    assert isinstance(reply_prompt[0], SystemMessage)
    assert reply_prompt[-1].content == "my laptop won't boot"

    # The classifier sees the reply that was just produced, followed by its instructions.
    assert routing_prompt[-2].content == "Let me get technical support for you."
    assert "nextRepresentative" in routing_prompt[-1].content


def test_initial_support_rejects_unknown_label(make_model):
    model = make_model("Let me transfer you to sales.", route("SALES"))
    with pytest.raises(ClassificationError):
        initial_support({"messages": [HumanMessage(content="I want to buy")]}, model)


def test_billing_support_drops_trailing_ai_message(make_model):
    model = make_model("I can refund that for you.", route("REFUND"))
    state = {
        "messages": [
            HumanMessage(content="I want a refund for order 11282818"),
            AIMessage(content="Please hold while I transfer you to billing."),
        ]
    }

    update = billing_support(state, model)

    reply_prompt = model.received[0]
    assert isinstance(reply_prompt[0], SystemMessage)
    assert [m.content for m in reply_prompt[1:]] == ["I want a refund for order 11282818"]
    assert update["machine_state"] is MachineState.REFUND_PENDING
    assert update["next_representative"] is Representative.REFUND


def test_billing_classifies_only_the_reply(make_model):
    model = make_model("Your invoice is attached.", route("RESPOND"))
    update = billing_support({"messages": [HumanMessage(content="where is my invoice")]}, model)

    routing_prompt = model.received[1]
    assert len(routing_prompt) == 2
    assert "Your invoice is attached." in routing_prompt[1].content
    assert "where is my invoice" not in routing_prompt[1].content
    assert update["machine_state"] is MachineState.END


def test_billing_rejects_initial_only_label(make_model):
    model = make_model("Let me pass you to the technical team.", route("TECHNICAL"))
    with pytest.raises(ClassificationError):
        billing_support({"messages": [HumanMessage(content="refund please")]}, model)


def test_technical_support_replies_and_ends(make_model):
    model = make_model("Hold the power button for ten seconds.")
    state = {
        "messages": [
            HumanMessage(content="what is the weather in sf"),
            AIMessage(content="Sunny."),
            HumanMessage(content="what about ny"),
            AIMessage(content="Transferring you to technical support."),
        ]
    }

    update = technical_support(state, model)

    assert model.call_count == 1
    assert model.received[0][-1].content == "what about ny"
    assert update["machine_state"] is MachineState.END
    assert "next_representative" not in update


def test_process_refund_suspends_without_authorization():
    outcome = process_refund({"messages": [], "refund_authorized": False})
    assert isinstance(outcome, Suspended)
    assert outcome.state is MachineState.REFUND_PENDING

    # A state that never set the flag is treated as unauthorized.
    assert isinstance(process_refund({"messages": []}), Suspended)


def test_process_refund_completes_when_authorized():
    outcome = process_refund({"messages": [], "refund_authorized": True})
    assert isinstance(outcome, Completed)
    assert outcome.message.content == "Refund processed!"


def test_handle_refund_suspended_update_adds_no_message():
    update = handle_refund({"messages": [], "refund_authorized": False})
    assert "messages" not in update
    assert update["machine_state"] is MachineState.REFUND_PENDING
    assert update["suspension"] == "Human authorization required."


def test_handle_refund_authorized_update():
    update = handle_refund({"messages": [], "refund_authorized": True})
    assert [m.content for m in update["messages"]] == ["Refund processed!"]
    assert isinstance(update["messages"][0], AIMessage)
    assert update["machine_state"] is MachineState.END
    assert update["suspension"] is None
    assert update["refund_authorized"] is False
