"""Agent lifecycle models."""

from dataclasses import dataclass
from enum import Enum


class AgentStatus(str, Enum):
    """Lifecycle of a MessageResponseAgent."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    DISPOSED = "disposed"


@dataclass
class AgentInfo:
    """Snapshot of a registered agent."""

    channel_id: str
    channel_type: str
    cid: str
    status: AgentStatus
    last_interaction: int  # ms since epoch
