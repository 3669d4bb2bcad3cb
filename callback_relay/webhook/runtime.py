from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..realtime import ConnectionManager
from ..status_store import StatusStore


@dataclass
class WebhookRuntime:
    # Shared state and fan-out, injected from callback_relay.main
    status_store: StatusStore
    connection_manager: ConnectionManager

    # Verbose payload logging (no-op unless LOG_VERBOSE=1)
    vlog: Callable[[str], None]

    event_name: str = "newData"
    ack_body: str = "<Response></Response>"
    ack_media_type: str = "text/xml"
