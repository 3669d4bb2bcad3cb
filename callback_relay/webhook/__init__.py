"""Webhook ingress: store the latest callback and push it to browsers."""

from .runtime import WebhookRuntime
from .router import create_webhook_router

__all__ = [
    "WebhookRuntime",
    "create_webhook_router",
]
