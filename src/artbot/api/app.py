"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from artbot.app_logging import configure_logging
from artbot.containers import AppContainer
from artbot.domain.activities import Activity
from artbot.errors import UntrustedServiceUrlError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/messages")
    async def messages(activity: Activity, request: Request) -> dict[str, str]:
        """Handle one Bot Framework activity and post the replies."""
        state_container: AppContainer = request.app.state.container
        replies = await state_container.turn_controller.run(activity)
        for reply in replies:
            try:
                await state_container.connector_client.send_activity(activity, reply)
            except (httpx.HTTPError, UntrustedServiceUrlError, ValueError):
                logger.exception(
                    "Failed to send reply",
                    extra={"conversation_id": activity.conversation.id},
                )
                break
        return {"status": "ok"}

    return app
