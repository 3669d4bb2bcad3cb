from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from .payload import render_body
from .runtime import WebhookRuntime

logger = logging.getLogger(__name__)


def create_webhook_router(rt: WebhookRuntime) -> APIRouter:
    router = APIRouter()

    @router.post("/webhook")
    async def webhook(request: Request):
        """Provider status callback (ingress). Always acknowledged."""
        content_type = request.headers.get("content-type")
        try:
            body = await request.body()
        except Exception:
            logger.warning("Could not read callback body", exc_info=True)
            body = b""

        text = render_body(content_type, body)
        logger.info("Received callback data content_type=%s bytes=%s", content_type, len(body))
        rt.vlog(text)

        snap = rt.status_store.set(text)
        try:
            delivered = await rt.connection_manager.broadcast(rt.event_name, snap.text)
        except Exception:
            # Pushes never change the acknowledgment.
            logger.exception("Broadcast failed")
            delivered = 0
        logger.debug("Broadcast %s to %s channel(s)", rt.event_name, delivered)

        return Response(content=rt.ack_body, status_code=200, media_type=rt.ack_media_type)

    return router
