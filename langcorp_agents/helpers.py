import logging
import os
from datetime import datetime
from typing import List, Sequence

from langchain_core.messages import AIMessage, BaseMessage


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Sets up the root logger once for scripts such as main.py."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def configure_tracing(settings) -> None:
    """Exports the LangSmith settings as the environment variables the LangSmith client reads."""
    os.environ["LANGSMITH_TRACING"] = "true" if settings.langsmith_tracing else "false"
    os.environ["LANGSMITH_ENDPOINT"] = settings.langsmith_endpoint
    os.environ["LANGSMITH_PROJECT"] = settings.langsmith_project
    if settings.langsmith_api_key:
        os.environ["LANGSMITH_API_KEY"] = settings.langsmith_api_key


def is_machine_authored(message: BaseMessage) -> bool:
    """True for messages produced by the model rather than by the user or the system prompt."""
    return isinstance(message, AIMessage) or message.type == "ai"


def trim_trailing_ai_message(messages: Sequence[BaseMessage]) -> List[BaseMessage]:
    """
    Drops the last message when the model wrote it, so the user's latest question
    is the most recent thing a specialist sees.
    """
    trimmed = list(messages)
    if trimmed and is_machine_authored(trimmed[-1]):
        trimmed = trimmed[:-1]
    return trimmed


def get_today_str() -> str:
    """A simple utility function to get the current date in a human-readable string format."""
    # We format the date as "Day Mon Day, Year" (e.g., "Mon Dec 25, 2025").
    return datetime.now().strftime("%a %b %-d, %Y")
