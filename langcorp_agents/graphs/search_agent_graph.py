"""
A web-search agent: a tool-calling loop between the model and the Tavily search tool.

Compiled with a checkpointer, the agent remembers earlier turns on the same
thread_id, so a follow-up like "what about new york?" is understood in context.
"""

from functools import partial
from typing import Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.tools import BaseTool
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.graph import StateGraph, MessagesState, START, END

from langcorp_agents.config import settings
from langcorp_agents.models.hf_models import get_hf_model
from langcorp_agents.models.invoke import message_text
from langcorp_agents.nodes.search_agent_node import call_model, tool_node, should_continue
from langcorp_agents.tools.search_tools import tavily_search


def build_search_agent(
    model: Optional[BaseChatModel] = None,
    tools: Optional[Sequence[BaseTool]] = None,
    checkpointer: Optional[BaseCheckpointSaver] = None,
):
    """Compiles the agent <-> tools loop. Pass a checkpointer (e.g. MemorySaver) to keep history per thread."""
    if model is None:
        model = get_hf_model(model_name=settings.search_model_name)
    if tools is None:
        tools = [tavily_search]

    # We set up our tool-enabled model for the agent.
    model_with_tools = model.bind_tools(list(tools))
    tools_by_name = {tool.name: tool for tool in tools}

    agent_builder = StateGraph(MessagesState)

    # The thinker and the actor.
    agent_builder.add_node("agent", partial(call_model, model_with_tools=model_with_tools))
    agent_builder.add_node("tools", partial(tool_node, tools_by_name=tools_by_name))

    agent_builder.add_edge(START, "agent")

    # After the model answers, we either run the tools it asked for or stop.
    agent_builder.add_conditional_edges(
        "agent",
        should_continue,
        {
            "tools": "tools",
            "__end__": END,
        },
    )

    # Tool results always go back to the model.
    agent_builder.add_edge("tools", "agent")

    return agent_builder.compile(checkpointer=checkpointer)


def ask(agent, question: str, thread_id: Optional[str] = None) -> str:
    """Runs one question through the agent and returns the text of its final answer."""
    config = {"configurable": {"thread_id": thread_id}} if thread_id is not None else None
    final_state = agent.invoke({"messages": [HumanMessage(content=question)]}, config=config)
    return message_text(final_state["messages"][-1])
