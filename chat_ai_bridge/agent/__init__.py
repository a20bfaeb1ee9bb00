"""Agent module."""

from .agent import IMessageResponseAgent, MessageResponseAgent
from .registry import AgentRegistry, IAgentRegistry, bot_user_id, channel_cid

__all__ = [
    "AgentRegistry",
    "IAgentRegistry",
    "IMessageResponseAgent",
    "MessageResponseAgent",
    "bot_user_id",
    "channel_cid",
]
