import logging
from typing import Sequence

from langchain_core.runnables import Runnable
from langchain_core.messages import BaseMessage

from langcorp_agents.errors import ModelCallError


logger = logging.getLogger(__name__)


def invoke_model(model: Runnable, messages: Sequence[BaseMessage]) -> BaseMessage:
    """Runs one completion request and surfaces any provider failure as a ModelCallError."""
    try:
        return model.invoke(list(messages))
    except Exception as e:
        logger.error("Completion request failed: %s", e)
        raise ModelCallError(f"Completion request failed: {e}") from e


def message_text(message: BaseMessage) -> str:
    """The plain-text content of a model response, flattening content blocks if the provider returned any."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
