"""Application bootstrap and lifecycle management."""

from typing import Callable, Protocol

from stream_chat import StreamChatAsync

from .agent import AgentRegistry, MessageResponseAgent
from .agent.registry import ChatClientFactory
from .chat import IChatChannel, IChatClient, StreamChatClient
from .config import Settings
from .event_bus import EventBus
from .llm import ILLMProvider, LLMProvider
from .logging_config import get_logger

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        chat_client_factory: ChatClientFactory | None = None,
        llm_factory: Callable[[], ILLMProvider] | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._chat_client_factory = chat_client_factory
        self._llm_factory = llm_factory or self._default_llm_factory

        # Components (will be initialized in start())
        self._event_bus: EventBus | None = None
        self._registry: AgentRegistry | None = None
        self._webhook_sdk: StreamChatAsync | None = None

    def _default_llm_factory(self) -> ILLMProvider:
        return LLMProvider(api_key=self._settings.github_token)

    def _make_agent(
        self, client: IChatClient, channel: IChatChannel
    ) -> MessageResponseAgent:
        return MessageResponseAgent(client, channel, llm_factory=self._llm_factory)

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. EventBus (no dependencies)
        self._event_bus = EventBus()

        # 2. Chat transport (depends on EventBus for inbound events)
        event_bus = self._event_bus
        if self._chat_client_factory is None:
            self._chat_client_factory = lambda user_id: StreamChatClient.create(
                self._settings, event_bus, user_id
            )
        if self._settings.stream_api_key and self._settings.stream_api_secret:
            self._webhook_sdk = StreamChatAsync(
                api_key=self._settings.stream_api_key,
                api_secret=self._settings.stream_api_secret,
            )
        elif self._settings.verify_webhooks:
            logger.warning(
                "Stream credentials not set; all webhooks will be rejected (401)"
            )
        else:
            logger.warning("Stream credentials not set; webhooks are not verified")

        # 3. AgentRegistry (depends on chat transport + LLM factory)
        self._registry = AgentRegistry(
            chat_client_factory=self._chat_client_factory,
            agent_factory=self._make_agent,
            idle_timeout_seconds=self._settings.agent_idle_timeout,
            sweep_interval_seconds=self._settings.agent_sweep_interval,
        )
        await self._registry.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._registry:
            await self._registry.stop()
            logger.info("Agents disposed")
        if self._webhook_sdk:
            await self._webhook_sdk.close()
            self._webhook_sdk = None

    def verify_webhook(self, body: bytes, signature: str | None) -> bool:
        """Check a webhook signature; always true when verification is off."""
        if not self._settings.verify_webhooks:
            return True
        if self._webhook_sdk is None or not signature:
            return False
        return self._webhook_sdk.verify_webhook(body, signature)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def registry(self) -> AgentRegistry:
        """Get agent registry instance."""
        if not self._registry:
            raise RuntimeError("Application not started")
        return self._registry
