import logging

from langgraph.checkpoint.memory import MemorySaver

from langcorp_agents.chatbot import SupportChatbot
from langcorp_agents.config import settings
from langcorp_agents.graphs.search_agent_graph import build_search_agent, ask
from langcorp_agents.helpers import configure_logging, configure_tracing


logger = logging.getLogger(__name__)


def run_support_demo():
    chatbot = SupportChatbot()
    thread_id = "refund_testing_id"

    # A refund request is routed frontline -> billing -> refund, where it waits for a human.
    result = chatbot.send_message(thread_id, "I've changed my mind and I want a refund for order number 11282818!")
    for message in result.messages:
        print(f"[{message.type}] {message.content}")
    print(f"--- state: {result.machine_state.value} ---")

    if result.suspended is not None:
        print(f"--- suspended: {result.suspended.reason} Authorizing... ---")
        result = chatbot.resume(thread_id, refund_authorized=True)
        print(f"[{result.last_message.type}] {result.last_message.content}")
        print(f"--- state: {result.machine_state.value} ---")


def run_search_demo():
    # The checkpointer keeps the conversation per thread, so the follow-up has context.
    agent = build_search_agent(checkpointer=MemorySaver())
    print(ask(agent, "what is the cost of a gallon of gas in california?", thread_id="42"))
    print(ask(agent, "what about new york?", thread_id="42"))


def main():
    configure_logging(settings.log_level)
    configure_tracing(settings)
    print("Hello from langcorp-agents!")
    run_support_demo()
    run_search_demo()


if __name__ == "__main__":
    try:
        main()
    except Exception:
        logger.exception("Error running agent")
        raise
