from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.tools import tool
from langgraph.checkpoint.memory import MemorySaver

from langcorp_agents.graphs.search_agent_graph import ask, build_search_agent
from langcorp_agents.nodes.search_agent_node import should_continue, tool_node


searched_queries = []


@tool
def fake_search(query: str) -> str:
    """Looks up current information on the web."""
    searched_queries.append(query)
    return f"Results for {query}: $4.85 per gallon"


def _search_call(query, call_id="call_1"):
    return AIMessage(
        content="",
        tool_calls=[{"name": "fake_search", "args": {"query": query}, "id": call_id}],
    )


def test_should_continue_routes_tool_calls():
    assert should_continue({"messages": [_search_call("gas prices")]}) == "tools"
    assert should_continue({"messages": [AIMessage(content="It is $4.85.")]}) == "__end__"


def test_tool_node_wraps_observations():
    update = tool_node({"messages": [_search_call("gas prices", "abc")]}, {"fake_search": fake_search})

    (message,) = update["messages"]
    assert isinstance(message, ToolMessage)
    assert message.tool_call_id == "abc"
    assert message.name == "fake_search"
    assert "gas prices" in message.content


def test_tool_node_reports_unknown_tool():
    call = AIMessage(content="", tool_calls=[{"name": "nope", "args": {}, "id": "x"}])
    update = tool_node({"messages": [call]}, {"fake_search": fake_search})
    assert "unknown tool" in update["messages"][0].content


def test_agent_searches_then_answers(make_tool_calling_model):
    searched_queries.clear()
    model = make_tool_calling_model(
        _search_call("weather in sf"),
        AIMessage(content="It's 60 degrees and foggy in San Francisco."),
    )
    agent = build_search_agent(model=model, tools=[fake_search])

    answer = ask(agent, "what is the weather in sf")

    assert answer == "It's 60 degrees and foggy in San Francisco."
    assert searched_queries == ["weather in sf"]
    # The second model call saw the tool result; the system prompt is never stored in the thread.
    assert isinstance(model.received[1][0], SystemMessage)
    assert isinstance(model.received[1][-1], ToolMessage)


def test_checkpointer_keeps_thread_history(make_tool_calling_model):
    model = make_tool_calling_model(
        AIMessage(content="Gas in California is about $4.85 a gallon."),
        AIMessage(content="In New York it is about $3.40 a gallon."),
    )
    agent = build_search_agent(model=model, tools=[fake_search], checkpointer=MemorySaver())

    ask(agent, "what is the cost of a gallon of gas in california?", thread_id="42")
    answer = ask(agent, "what about new york?", thread_id="42")

    assert answer == "In New York it is about $3.40 a gallon."
    follow_up_prompt = [m.content for m in model.received[1] if isinstance(m, (HumanMessage, AIMessage))]
    assert follow_up_prompt == [
        "what is the cost of a gallon of gas in california?",
        "Gas in California is about $4.85 a gallon.",
        "what about new york?",
    ]

    state = agent.get_state({"configurable": {"thread_id": "42"}})
    assert len(state.values["messages"]) == 4
    assert not any(isinstance(m, SystemMessage) for m in state.values["messages"])


def test_threads_without_checkpointer_start_fresh(make_tool_calling_model):
    model = make_tool_calling_model(
        AIMessage(content="first answer"),
        AIMessage(content="second answer"),
    )
    agent = build_search_agent(model=model, tools=[fake_search])

    ask(agent, "what is the weather in sf")
    ask(agent, "what about ny")

    assert [m.content for m in model.received[1][1:]] == ["what about ny"]
