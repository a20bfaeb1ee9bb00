"""MessageResponseAgent implementation."""

import time
from datetime import date
from typing import Callable, Protocol

from ..chat import IChatChannel, IChatClient
from ..config import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ..errors import UninitializedUseError
from ..llm import ILLMProvider, LLMProvider
from ..logging_config import get_channel_logger
from ..models import MESSAGE_NEW, AgentStatus, ChatEvent, IndicatorEvent
from ..prompts import build_writing_assistant_prompt, writing_task_context

FALLBACK_ERROR_TEXT = "Error generating response"


def now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)


class IMessageResponseAgent(Protocol):
    """Replies to new human messages on one channel."""

    async def init(self) -> None:
        """Create the inference client and register the message listener."""
        ...

    async def dispose(self) -> None:
        """Unregister the listener and disconnect the chat client."""
        ...

    def get_last_interaction(self) -> int:
        """Timestamp (ms) of the last processed message."""
        ...


class MessageResponseAgent:
    """Writes one AI reply per human message, bracketed by indicator events."""

    def __init__(
        self,
        chat_client: IChatClient,
        channel: IChatChannel,
        llm_factory: Callable[[], ILLMProvider] = LLMProvider,
        today: Callable[[], date] = date.today,
    ):
        self._chat_client = chat_client
        self._channel = channel
        self._llm_factory = llm_factory
        self._today = today

        self._llm: ILLMProvider | None = None
        self._status = AgentStatus.UNINITIALIZED
        self._last_interaction = now_ms()
        self._logger = get_channel_logger(__name__, channel.cid)

    @property
    def user_id(self) -> str:
        return self._chat_client.user_id

    @property
    def channel(self) -> IChatChannel:
        return self._channel

    @property
    def status(self) -> AgentStatus:
        return self._status

    def get_last_interaction(self) -> int:
        return self._last_interaction

    async def init(self) -> None:
        """Create the inference client and register the message listener.

        Raises ConfigurationError (from the LLM factory) before anything is
        registered when the access token is missing. Calling init on an
        active agent does nothing.
        """
        if self._status is AgentStatus.ACTIVE:
            self._logger.warning("Agent already initialized")
            return
        if self._status is AgentStatus.DISPOSED:
            raise RuntimeError("Agent has been disposed")

        self._llm = self._llm_factory()
        self._chat_client.on(MESSAGE_NEW, self.handle_message)
        self._status = AgentStatus.ACTIVE
        self._logger.info("Agent initialized")

    async def dispose(self) -> None:
        """Unregister the listener and disconnect. Safe to call twice."""
        if self._status is AgentStatus.DISPOSED:
            return
        self._status = AgentStatus.DISPOSED
        self._chat_client.off(MESSAGE_NEW, self.handle_message)
        await self._chat_client.disconnect()
        self._logger.info("Agent disposed")

    def build_instructions(self, writing_task: str | None) -> str:
        """System prompt for a message with an optional writing-task hint."""
        return build_writing_assistant_prompt(
            writing_task_context(writing_task), today=self._today()
        )

    async def handle_message(self, event: ChatEvent) -> None:
        """Reply to a new-message event.

        Completion failures are written into the placeholder and flagged
        with an ERROR indicator. Transport failures propagate to the caller.
        """
        if self._llm is None:
            self._logger.error(
                "Message handler invoked before init",
                exc_info=UninitializedUseError("LLM provider not initialized"),
            )
            return

        message = event.message
        if message is None or message.ai_generated:
            return
        if not message.text:
            return

        self._last_interaction = now_ms()

        instructions = self.build_instructions(message.writing_task)

        # Empty placeholder, filled in once the completion arrives
        placeholder = await self._channel.send_message("", ai_generated=True)
        log_extra = {"cid": placeholder.cid, "message_id": placeholder.id}

        await self._channel.send_event(
            IndicatorEvent.thinking(placeholder.cid, placeholder.id)
        )

        try:
            result = await self._llm.complete(
                messages=[{"role": "user", "content": message.text}],
                system=instructions,
                max_tokens=DEFAULT_MAX_TOKENS,
                temperature=DEFAULT_TEMPERATURE,
            )
        except Exception as e:
            self._logger.error(
                "Error generating AI response: %s", e, exc_info=True, extra=log_extra
            )
            await self._channel.send_event(
                IndicatorEvent.error(placeholder.cid, placeholder.id)
            )
            await self._chat_client.partial_update_message(
                placeholder.id, {"text": str(e) or FALLBACK_ERROR_TEXT}
            )
            return

        if not result.has_content:
            self._logger.warning("Completion returned no content", extra=log_extra)

        await self._chat_client.partial_update_message(
            placeholder.id, {"text": result.text}
        )
        await self._channel.send_event(
            IndicatorEvent.clear(placeholder.cid, placeholder.id)
        )
        self._logger.info("Reply written", extra=log_extra)
