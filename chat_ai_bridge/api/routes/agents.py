"""Agent control routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import Application
from ...errors import BridgeError
from ...logging_config import get_logger
from .health import StatusResponse

logger = get_logger(__name__)


class StartAgentRequest(BaseModel):
    """Request model for starting an agent."""

    channel_id: str
    channel_type: str = "messaging"


class StopAgentRequest(BaseModel):
    """Request model for stopping an agent."""

    channel_id: str
    channel_type: str = "messaging"


class StartAgentResponse(BaseModel):
    status: str
    channel_id: str
    cid: str


class AgentResponse(BaseModel):
    """Response model for a registered agent."""

    channel_id: str
    channel_type: str
    cid: str
    status: str
    last_interaction: int


def create_agents_router(app: Application) -> APIRouter:
    """Create agent control router."""
    router = APIRouter(prefix="/api/agents", tags=["agents"])

    @router.post("/start", response_model=StartAgentResponse)
    async def start_agent(request: StartAgentRequest) -> dict:
        """Start the AI agent for a channel (no-op if already running)."""
        try:
            agent = await app.registry.start_agent(
                request.channel_type, request.channel_id
            )
        except BridgeError as e:
            logger.error(
                "Failed to start agent for %s:%s: %s",
                request.channel_type,
                request.channel_id,
                e,
            )
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {
            "status": "ok",
            "channel_id": request.channel_id,
            "cid": agent.channel.cid,
        }

    @router.post("/stop", response_model=StatusResponse)
    async def stop_agent(request: StopAgentRequest) -> dict:
        """Dispose the AI agent for a channel."""
        stopped = await app.registry.stop_agent(
            request.channel_type, request.channel_id
        )
        if not stopped:
            raise HTTPException(status_code=404, detail="Agent not found")
        return {"status": "ok"}

    @router.get("", response_model=list[AgentResponse])
    async def list_agents() -> list[dict]:
        """List running agents."""
        return [
            {
                "channel_id": info.channel_id,
                "channel_type": info.channel_type,
                "cid": info.cid,
                "status": info.status.value,
                "last_interaction": info.last_interaction,
            }
            for info in app.registry.list_agents()
        ]

    return router
