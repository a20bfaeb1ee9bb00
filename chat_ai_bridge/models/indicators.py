"""AI indicator event models."""

from dataclasses import dataclass
from enum import Enum


class AIState(str, Enum):
    """Indicator states shown to channel participants."""

    THINKING = "AI_STATE_THINKING"
    ERROR = "AI_STATE_ERROR"


class IndicatorEventType(str, Enum):
    """Indicator event types; clearing has its own type, not a state."""

    UPDATE = "ai_indicator.update"
    CLEAR = "ai_indicator.clear"


@dataclass
class IndicatorEvent:
    """Side-channel signal scoped to a placeholder message."""

    type: IndicatorEventType
    cid: str
    message_id: str
    ai_state: AIState | None = None

    @classmethod
    def thinking(cls, cid: str, message_id: str) -> "IndicatorEvent":
        return cls(IndicatorEventType.UPDATE, cid, message_id, AIState.THINKING)

    @classmethod
    def error(cls, cid: str, message_id: str) -> "IndicatorEvent":
        return cls(IndicatorEventType.UPDATE, cid, message_id, AIState.ERROR)

    @classmethod
    def clear(cls, cid: str, message_id: str) -> "IndicatorEvent":
        return cls(IndicatorEventType.CLEAR, cid, message_id)

    def to_payload(self) -> dict:
        """Wire payload for the chat transport."""
        payload = {
            "type": self.type.value,
            "cid": self.cid,
            "message_id": self.message_id,
        }
        if self.ai_state is not None:
            payload["ai_state"] = self.ai_state.value
        return payload
