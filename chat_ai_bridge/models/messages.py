"""Outbound chat message models."""

from dataclasses import dataclass


@dataclass
class ChannelMessage:
    """Reference to a message created by the transport."""

    id: str
    cid: str
