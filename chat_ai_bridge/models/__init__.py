"""Core data models for the chat AI bridge."""

from .agents import AgentInfo, AgentStatus
from .completion import CompletionResult
from .events import MESSAGE_NEW, ChatEvent, IncomingMessage
from .indicators import AIState, IndicatorEvent, IndicatorEventType
from .messages import ChannelMessage

__all__ = [
    # Events
    "MESSAGE_NEW",
    "ChatEvent",
    "IncomingMessage",
    # Outbound
    "ChannelMessage",
    "AIState",
    "IndicatorEvent",
    "IndicatorEventType",
    # Completion
    "CompletionResult",
    # Agents
    "AgentInfo",
    "AgentStatus",
]
