"""AgentRegistry: one MessageResponseAgent per channel, with idle cleanup."""

import asyncio
from dataclasses import dataclass
from typing import Callable, Protocol

from ..chat import IChatChannel, IChatClient
from ..logging_config import get_logger
from ..models import AgentInfo
from .agent import MessageResponseAgent, now_ms

logger = get_logger(__name__)


class IConnectableChatClient(IChatClient, Protocol):
    async def connect(self, channel_type: str, channel_id: str) -> IChatChannel:
        """Join the bot user to a channel."""
        ...


ChatClientFactory = Callable[[str], IConnectableChatClient]  # user_id -> client
AgentFactory = Callable[[IChatClient, IChatChannel], MessageResponseAgent]


def channel_cid(channel_type: str, channel_id: str) -> str:
    """Channel ids are only unique within a type; the cid is the registry key."""
    return f"{channel_type}:{channel_id}"


def bot_user_id(channel_type: str, channel_id: str) -> str:
    """Chat user the agent posts as."""
    return f"ai-bot-{channel_type}-{channel_id.replace('!', '')}"


@dataclass
class _Entry:
    channel_type: str
    channel_id: str
    agent: MessageResponseAgent


class IAgentRegistry(Protocol):
    """Managing MessageResponseAgent lifecycle."""

    async def start_agent(
        self, channel_type: str, channel_id: str
    ) -> MessageResponseAgent:
        """Start (or return) the agent for a channel."""
        ...

    async def stop_agent(self, channel_type: str, channel_id: str) -> bool:
        """Dispose the agent for a channel."""
        ...

    async def start(self) -> None:
        """Start the idle sweep."""
        ...

    async def stop(self) -> None:
        """Stop the sweep and dispose every agent."""
        ...


class AgentRegistry:
    """Keeps at most one active agent per channel and disposes idle ones."""

    def __init__(
        self,
        chat_client_factory: ChatClientFactory,
        agent_factory: AgentFactory = MessageResponseAgent,
        idle_timeout_seconds: float = 300.0,
        sweep_interval_seconds: float = 60.0,
    ):
        self._chat_client_factory = chat_client_factory
        self._agent_factory = agent_factory
        self._idle_timeout_ms = int(idle_timeout_seconds * 1000)
        self._sweep_interval = sweep_interval_seconds

        # cid -> entry; the lock guards both maps, never network I/O
        self._agents: dict[str, _Entry] = {}
        self._starting: dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()
        self._sweep_task: asyncio.Task | None = None
        self._running = False

    def get(
        self, channel_type: str, channel_id: str
    ) -> MessageResponseAgent | None:
        entry = self._agents.get(channel_cid(channel_type, channel_id))
        return entry.agent if entry else None

    def list_agents(self) -> list[AgentInfo]:
        return [
            AgentInfo(
                channel_id=entry.channel_id,
                channel_type=entry.channel_type,
                cid=cid,
                status=entry.agent.status,
                last_interaction=entry.agent.get_last_interaction(),
            )
            for cid, entry in self._agents.items()
        ]

    async def start_agent(
        self, channel_type: str, channel_id: str
    ) -> MessageResponseAgent:
        """Start (or return) the agent for a channel.

        Concurrent starts for the same channel share one launch.
        """
        cid = channel_cid(channel_type, channel_id)
        async with self._lock:
            entry = self._agents.get(cid)
            if entry is not None:
                return entry.agent
            task = self._starting.get(cid)
            if task is None:
                task = asyncio.create_task(self._launch(channel_type, channel_id))
                self._starting[cid] = task
        return await task

    async def _launch(
        self, channel_type: str, channel_id: str
    ) -> MessageResponseAgent:
        cid = channel_cid(channel_type, channel_id)
        client = self._chat_client_factory(bot_user_id(channel_type, channel_id))
        try:
            channel = await client.connect(channel_type, channel_id)
            agent = self._agent_factory(client, channel)
            await agent.init()
        except (Exception, asyncio.CancelledError):
            async with self._lock:
                self._starting.pop(cid, None)
            await client.disconnect()
            raise

        async with self._lock:
            self._starting.pop(cid, None)
            self._agents[cid] = _Entry(channel_type, channel_id, agent)
        logger.info("Agent started for %s", cid, extra={"cid": cid})
        return agent

    async def _remove(
        self, cid: str, idle_before: int | None = None
    ) -> MessageResponseAgent | None:
        """Pop the agent for cid; with idle_before, only if still idle."""
        async with self._lock:
            entry = self._agents.get(cid)
            if entry is None:
                return None
            if (
                idle_before is not None
                and entry.agent.get_last_interaction() >= idle_before
            ):
                return None
            del self._agents[cid]
        return entry.agent

    async def stop_agent(self, channel_type: str, channel_id: str) -> bool:
        """Dispose the agent for a channel. False if none is registered."""
        cid = channel_cid(channel_type, channel_id)
        agent = await self._remove(cid)
        if agent is None:
            return False

        await agent.dispose()
        logger.info("Agent stopped for %s", cid, extra={"cid": cid})
        return True

    async def start(self) -> None:
        """Start the idle sweep."""
        if self._running:
            return
        self._running = True
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def stop(self) -> None:
        """Stop the sweep, abandon pending starts and dispose every agent."""
        self._running = False
        if self._sweep_task:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None

        for task in list(self._starting.values()):
            task.cancel()
            try:
                await task
            except (Exception, asyncio.CancelledError):
                pass

        for cid in list(self._agents):
            agent = await self._remove(cid)
            if agent is None:
                continue
            try:
                await agent.dispose()
            except Exception as e:
                logger.error("Failed to dispose agent %s: %s", cid, e, exc_info=True)

    async def sweep_idle(self) -> list[str]:
        """Dispose agents idle longer than the timeout; return their cids."""
        cutoff = now_ms() - self._idle_timeout_ms
        candidates = [
            cid
            for cid, entry in list(self._agents.items())
            if entry.agent.get_last_interaction() < cutoff
        ]

        disposed = []
        for cid in candidates:
            # Re-checked under the lock: the agent may have been replaced or used
            agent = await self._remove(cid, idle_before=cutoff)
            if agent is None:
                continue
            disposed.append(cid)
            try:
                await agent.dispose()
            except Exception as e:
                logger.error(
                    "Failed to dispose idle agent %s: %s", cid, e, exc_info=True
                )
                continue
            logger.info("Disposed idle agent %s", cid, extra={"cid": cid})
        return disposed

    async def _sweep_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._sweep_interval)
                await self.sweep_idle()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Idle sweep error: %s", e, exc_info=True)
