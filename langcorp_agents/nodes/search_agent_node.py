import logging
from typing import Dict, Literal

from langchain_core.runnables import Runnable
from langchain_core.messages import SystemMessage, ToolMessage
from langchain_core.tools import BaseTool
from langgraph.graph import MessagesState

from langcorp_agents.helpers import get_today_str
from langcorp_agents.models.invoke import invoke_model
from langcorp_agents.prompts import search_agent_system_prompt


logger = logging.getLogger(__name__)


def call_model(state: MessagesState, model_with_tools: Runnable):
    """The 'brain' of the search agent: answers directly or asks for a search."""

    # The system prompt is added per call and never stored, so the thread keeps only the real conversation.
    system_message = SystemMessage(content=search_agent_system_prompt.format(date=get_today_str()))
    response = invoke_model(model_with_tools, [system_message] + state["messages"])

    # We return a list, because this will get added to the existing list.
    return {"messages": [response]}


def tool_node(state: MessagesState, tools_by_name: Dict[str, BaseTool]):
    """The 'hands' of the search agent: executes all tool calls from the previous model response."""

    # We get the most recent message from the state, which should contain the tool calls.
    tool_calls = state["messages"][-1].tool_calls

    # We execute all the planned tool calls.
    observations = []
    for tool_call in tool_calls:
        logger.info("Calling tool %s with %s", tool_call["name"], tool_call["args"])
        tool = tools_by_name.get(tool_call["name"])
        if tool is None:
            observations.append(f"Error: unknown tool '{tool_call['name']}'.")
            continue
        observations.append(tool.invoke(tool_call["args"]))

    # We format the results of the tool calls into 'ToolMessage' objects.
    tool_outputs = [
        ToolMessage(
            content=str(observation),
            name=tool_call["name"],
            tool_call_id=tool_call["id"]
        ) for observation, tool_call in zip(observations, tool_calls)
    ]

    return {"messages": tool_outputs}


def should_continue(state: MessagesState) -> Literal["tools", "__end__"]:
    """A conditional edge that determines whether to run the requested tools or reply to the user."""
    last_message = state["messages"][-1]

    # If the LLM makes a tool call, then we route to the "tools" node.
    if getattr(last_message, "tool_calls", None):
        return "tools"

    # Otherwise, we stop (reply to the user).
    return "__end__"
