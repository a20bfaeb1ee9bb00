"""Chat transport module."""

from .client import IChatChannel, IChatClient, StreamChannel, StreamChatClient

__all__ = ["IChatChannel", "IChatClient", "StreamChannel", "StreamChatClient"]
