import threading
from typing import Any, List, Optional

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel, GenericFakeChatModel
from langchain_core.messages import BaseMessage
from pydantic import Field

from langcorp_agents.chatbot import SupportChatbot
from langcorp_agents.persistence.conversation_store import InMemoryConversationStore


class RecordingChatModel(FakeListChatModel):
    """Replies with the scripted responses in order and remembers every prompt it was sent."""

    received: List[List[BaseMessage]] = Field(default_factory=list)

    def _call(self, messages: List[BaseMessage], stop: Optional[List[str]] = None, run_manager: Any = None, **kwargs: Any) -> str:
        self.received.append(list(messages))
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)

    @property
    def call_count(self) -> int:
        return len(self.received)


class FailingChatModel(FakeListChatModel):
    """Stands in for a provider that times out."""

    def _call(self, messages: List[BaseMessage], stop: Optional[List[str]] = None, run_manager: Any = None, **kwargs: Any) -> str:
        raise TimeoutError("upstream timed out")


class ToolCallingChatModel(GenericFakeChatModel):
    """A scripted model that accepts bind_tools, for the search agent loop."""

    received: List[List[BaseMessage]] = Field(default_factory=list)

    def bind_tools(self, tools, **kwargs):
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(list(messages))
        return super()._generate(messages, stop=stop, run_manager=run_manager, **kwargs)


@pytest.fixture
def make_model():
    def _make(*responses: str) -> RecordingChatModel:
        return RecordingChatModel(responses=list(responses))
    return _make


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def make_chatbot(store):
    def _make(model) -> SupportChatbot:
        return SupportChatbot(model=model, store=store)
    return _make


@pytest.fixture
def failing_model():
    return FailingChatModel(responses=["unused"])


@pytest.fixture
def make_tool_calling_model():
    def _make(*messages) -> ToolCallingChatModel:
        return ToolCallingChatModel(messages=iter(messages))
    return _make


class GatedChatModel(FakeListChatModel):
    """
    Answers from the prompt instead of a script. A turn whose user message is "slow"
    holds its first model call until the test opens the gate.
    """

    received: List[List[BaseMessage]] = Field(default_factory=list)
    entered: threading.Event = Field(default_factory=threading.Event)
    gate: threading.Event = Field(default_factory=threading.Event)

    def _call(self, messages: List[BaseMessage], stop: Optional[List[str]] = None, run_manager: Any = None, **kwargs: Any) -> str:
        self.received.append(list(messages))
        last = messages[-1].content
        if "nextRepresentative" in last:
            return '{"nextRepresentative": "RESPOND"}'
        if last == "slow":
            self.entered.set()
            self.gate.wait(timeout=5)
        return f"reply to {last}"

    def prompts_ending_with(self, text: str) -> List[List[BaseMessage]]:
        return [messages for messages in self.received if messages[-1].content == text]


@pytest.fixture
def gated_model():
    model = GatedChatModel(responses=["unused"])
    yield model
    # Never leave a worker thread parked on the gate.
    model.gate.set()
