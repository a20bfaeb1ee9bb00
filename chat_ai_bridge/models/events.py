"""Inbound chat event models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

MESSAGE_NEW = "message.new"


@dataclass
class IncomingMessage:
    """A chat message carried by an inbound event."""

    text: str | None = None
    ai_generated: bool = False
    custom: dict[str, Any] = field(default_factory=dict)
    id: str | None = None
    user_id: str | None = None

    @property
    def writing_task(self) -> str | None:
        """Optional writing-task hint from custom message data."""
        task = self.custom.get("writingTask")
        return task if isinstance(task, str) and task else None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "IncomingMessage":
        custom = payload.get("custom")
        user = payload.get("user") or {}
        return cls(
            text=payload.get("text"),
            ai_generated=payload.get("ai_generated") is True,
            custom=custom if isinstance(custom, dict) else {},
            id=payload.get("id"),
            user_id=user.get("id") if isinstance(user, dict) else None,
        )


@dataclass
class ChatEvent:
    """An event delivered by the chat transport (webhook or test)."""

    type: str
    cid: str | None = None
    message: IncomingMessage | None = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ChatEvent":
        """Parse a Stream webhook payload."""
        message_payload = payload.get("message")
        message = (
            IncomingMessage.from_payload(message_payload)
            if isinstance(message_payload, dict)
            else None
        )

        cid = payload.get("cid")
        if not cid and payload.get("channel_type") and payload.get("channel_id"):
            cid = f"{payload['channel_type']}:{payload['channel_id']}"

        return cls(type=payload.get("type", ""), cid=cid, message=message)
