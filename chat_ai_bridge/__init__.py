"""Chat AI bridge: LLM replies for chat channel messages."""

from .agent import AgentRegistry, MessageResponseAgent
from .app import Application, IApplication
from .chat import IChatChannel, IChatClient, StreamChannel, StreamChatClient
from .config import Settings
from .errors import (
    BridgeError,
    ConfigurationError,
    ProviderError,
    TransportError,
    UninitializedUseError,
)
from .event_bus import EventBus, IEventBus
from .llm import ILLMProvider, LLMProvider
from .models import (
    AIState,
    ChannelMessage,
    ChatEvent,
    CompletionResult,
    IncomingMessage,
    IndicatorEvent,
    IndicatorEventType,
)

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "AIState",
    "ChannelMessage",
    "ChatEvent",
    "CompletionResult",
    "IncomingMessage",
    "IndicatorEvent",
    "IndicatorEventType",
    # Errors
    "BridgeError",
    "ConfigurationError",
    "ProviderError",
    "TransportError",
    "UninitializedUseError",
    # Components
    "IEventBus",
    "EventBus",
    "IChatClient",
    "IChatChannel",
    "StreamChatClient",
    "StreamChannel",
    "ILLMProvider",
    "LLMProvider",
    "MessageResponseAgent",
    "AgentRegistry",
]
