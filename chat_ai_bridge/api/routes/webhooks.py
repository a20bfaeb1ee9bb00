"""Inbound chat webhook route."""

import json

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, status

from ...app import Application
from ...logging_config import get_logger
from ...models import ChatEvent
from .health import StatusResponse

logger = get_logger(__name__)


def create_webhooks_router(app: Application) -> APIRouter:
    """Create webhooks router."""
    router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])

    @router.post("/stream", response_model=StatusResponse)
    async def stream_webhook(
        request: Request, background_tasks: BackgroundTasks
    ) -> dict:
        """Accept a Stream Chat event and hand it to the event bus."""
        body = await request.body()
        if not app.verify_webhook(body, request.headers.get("x-signature")):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature"
            )

        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise HTTPException(
                status_code=400, detail=f"Invalid JSON payload: {e}"
            ) from e
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Payload must be an object")

        event = ChatEvent.from_payload(payload)
        logger.debug(
            "Webhook event received",
            extra={"event_type": event.type, "cid": event.cid},
        )

        # Reply after the webhook returns; completions outlive webhook timeouts
        background_tasks.add_task(app.event_bus.publish, event)
        return {"status": "ok"}

    return router
