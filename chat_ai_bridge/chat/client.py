"""Chat transport adapter over the Stream Chat async SDK."""

from typing import Any, Protocol

from stream_chat import StreamChatAsync

from ..config import Settings
from ..errors import ConfigurationError, TransportError
from ..event_bus import EventHandler, IEventBus
from ..logging_config import get_logger
from ..models import ChannelMessage, ChatEvent, IndicatorEvent

logger = get_logger(__name__)


class IChatChannel(Protocol):
    """A channel the agent writes into."""

    @property
    def cid(self) -> str:
        """Channel conversation id ("type:id")."""
        ...

    async def send_message(
        self, text: str, ai_generated: bool = False
    ) -> ChannelMessage:
        """Create a message; return transport-assigned identifiers."""
        ...

    async def send_event(self, event: IndicatorEvent) -> None:
        """Send a side-channel event (not a chat message)."""
        ...


class IChatClient(Protocol):
    """Connected chat user: listeners plus message updates."""

    @property
    def user_id(self) -> str:
        ...

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Register a listener for events on this client's channels."""
        ...

    def off(self, event_type: str, handler: EventHandler) -> None:
        """Remove a listener."""
        ...

    def channel(self, channel_type: str, channel_id: str) -> IChatChannel:
        ...

    async def partial_update_message(
        self, message_id: str, set_fields: dict
    ) -> None:
        """Set fields on an existing message."""
        ...

    async def disconnect(self) -> None:
        """Drop all listeners and close the connection."""
        ...


class StreamChannel:
    """IChatChannel backed by a stream_chat channel."""

    def __init__(
        self,
        client: "StreamChatClient",
        sdk_channel: Any,
        channel_type: str,
        channel_id: str,
    ):
        self._client = client
        self._sdk_channel = sdk_channel
        self._cid = f"{channel_type}:{channel_id}"

    @property
    def cid(self) -> str:
        return self._cid

    async def send_message(
        self, text: str, ai_generated: bool = False
    ) -> ChannelMessage:
        self._client._ensure_open()
        try:
            response = await self._sdk_channel.send_message(
                {"text": text, "ai_generated": ai_generated},
                self._client.user_id,
            )
        except Exception as e:
            raise TransportError(f"send_message failed: {e}") from e

        message = response["message"]
        return ChannelMessage(id=message["id"], cid=message.get("cid", self._cid))

    async def send_event(self, event: IndicatorEvent) -> None:
        self._client._ensure_open()
        try:
            await self._sdk_channel.send_event(
                event.to_payload(), self._client.user_id
            )
        except Exception as e:
            raise TransportError(f"send_event failed: {e}") from e


class StreamChatClient:
    """IChatClient over StreamChatAsync; inbound events arrive through the EventBus."""

    def __init__(self, sdk: StreamChatAsync, event_bus: IEventBus, user_id: str):
        self._sdk = sdk
        self._event_bus = event_bus
        self._user_id = user_id
        self._watched: set[str] = set()
        self._listeners: dict[tuple[str, EventHandler], EventHandler] = {}
        self._closed = False

    @classmethod
    def create(
        cls, settings: Settings, event_bus: IEventBus, user_id: str
    ) -> "StreamChatClient":
        """Build a client from settings; both Stream credentials are required."""
        if not settings.stream_api_key or not settings.stream_api_secret:
            raise ConfigurationError(
                "Stream credentials (STREAM_API_KEY, STREAM_API_SECRET) are required"
            )
        sdk = StreamChatAsync(
            api_key=settings.stream_api_key, api_secret=settings.stream_api_secret
        )
        return cls(sdk, event_bus, user_id)

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransportError("Chat client is disconnected")

    async def connect(self, channel_type: str, channel_id: str) -> StreamChannel:
        """Upsert the bot user and join it to the channel."""
        self._ensure_open()
        channel = self.channel(channel_type, channel_id)
        try:
            await self._sdk.upsert_user(
                {"id": self._user_id, "name": "AI Writing Assistant", "role": "admin"}
            )
            await channel._sdk_channel.add_members([self._user_id])
        except Exception as e:
            raise TransportError(f"connect failed for {channel.cid}: {e}") from e
        logger.info("Connected %s to %s", self._user_id, channel.cid)
        return channel

    def on(self, event_type: str, handler: EventHandler) -> None:
        key = (event_type, handler)
        if key in self._listeners:
            return

        async def forward(event: ChatEvent) -> None:
            if event.cid in self._watched:
                await handler(event)

        self._listeners[key] = forward
        self._event_bus.subscribe(event_type, forward)

    def off(self, event_type: str, handler: EventHandler) -> None:
        forward = self._listeners.pop((event_type, handler), None)
        if forward is not None:
            self._event_bus.unsubscribe(event_type, forward)

    def channel(self, channel_type: str, channel_id: str) -> StreamChannel:
        sdk_channel = self._sdk.channel(channel_type, channel_id)
        channel = StreamChannel(self, sdk_channel, channel_type, channel_id)
        self._watched.add(channel.cid)
        return channel

    async def partial_update_message(
        self, message_id: str, set_fields: dict
    ) -> None:
        self._ensure_open()
        try:
            await self._sdk.update_message_partial(
                message_id, {"set": set_fields}, self._user_id
            )
        except Exception as e:
            raise TransportError(f"partial_update_message failed: {e}") from e

    async def disconnect(self) -> None:
        if self._closed:
            return
        for event_type, handler in list(self._listeners):
            self.off(event_type, handler)
        self._watched.clear()
        self._closed = True
        await self._sdk.close()
        logger.info("Disconnected %s", self._user_id)
