"""Pytest configuration and fixtures."""

import sys
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chat_ai_bridge.models import ChannelMessage, ChatEvent, CompletionResult


class FakeChatChannel:
    """Records outbound channel calls into a shared call log."""

    def __init__(self, calls: list, cid: str = "messaging:general"):
        self._cid = cid
        self._calls = calls
        self._counter = 0
        self.fail_send_message = False

    @property
    def cid(self) -> str:
        return self._cid

    async def send_message(self, text: str, ai_generated: bool = False):
        if self.fail_send_message:
            raise RuntimeError("transport down")
        self._counter += 1
        message = ChannelMessage(id=f"msg-{self._counter}", cid=self._cid)
        self._calls.append(("send_message", text, ai_generated))
        return message

    async def send_event(self, event):
        self._calls.append(("send_event", event.to_payload()))


class FakeChatClient:
    """In-memory IChatClient wired to an EventBus."""

    def __init__(self, event_bus, calls: list, user_id: str = "ai-bot-general"):
        self._event_bus = event_bus
        self._calls = calls
        self._user_id = user_id
        self.disconnected = False
        self.connected_channels: list[str] = []
        self.channels: dict[str, FakeChatChannel] = {}

    @property
    def user_id(self) -> str:
        return self._user_id

    def on(self, event_type, handler):
        self._event_bus.subscribe(event_type, handler)

    def off(self, event_type, handler):
        self._event_bus.unsubscribe(event_type, handler)

    def channel(self, channel_type, channel_id):
        cid = f"{channel_type}:{channel_id}"
        if cid not in self.channels:
            self.channels[cid] = FakeChatChannel(self._calls, cid)
        return self.channels[cid]

    async def connect(self, channel_type, channel_id):
        channel = self.channel(channel_type, channel_id)
        self.connected_channels.append(channel.cid)
        return channel

    async def partial_update_message(self, message_id, set_fields):
        self._calls.append(("partial_update_message", message_id, set_fields))

    async def disconnect(self):
        self.disconnected = True
        self._calls.append(("disconnect",))


def new_message_event(
    text="Hello", ai_generated=False, custom=None, cid="messaging:general"
) -> ChatEvent:
    """Build a message.new event for tests."""
    return ChatEvent.from_payload(
        {
            "type": "message.new",
            "cid": cid,
            "message": {
                "id": "user-msg-1",
                "text": text,
                "ai_generated": ai_generated,
                "custom": custom or {},
                "user": {"id": "alice"},
            },
        }
    )


@pytest.fixture
def event_bus():
    """Create EventBus."""
    from chat_ai_bridge.event_bus import EventBus

    return EventBus()


@pytest.fixture
def calls():
    """Shared outbound call log."""
    return []


@pytest.fixture
def chat_client(event_bus, calls):
    return FakeChatClient(event_bus, calls)


@pytest.fixture
def channel(chat_client):
    return chat_client.channel("messaging", "general")


@pytest.fixture
def mock_llm(calls):
    """Create mock LLM provider that logs when it is called."""

    async def complete(**kwargs):
        calls.append(("complete", kwargs))
        return CompletionResult(content="Test response")

    llm = Mock()
    llm.complete = AsyncMock(side_effect=complete)
    return llm


@pytest.fixture
def today():
    return date(2025, 11, 3)


@pytest_asyncio.fixture
async def agent(chat_client, channel, mock_llm, today):
    """Create an initialized MessageResponseAgent."""
    from chat_ai_bridge.agent import MessageResponseAgent

    a = MessageResponseAgent(
        chat_client, channel, llm_factory=lambda: mock_llm, today=lambda: today
    )
    await a.init()
    yield a
    await a.dispose()
