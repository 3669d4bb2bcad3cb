from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Optional

DEFAULT_PLACEHOLDER = "No callback data received yet"


@dataclass(frozen=True)
class StatusSnapshot:
    text: str
    updated_at: Optional[datetime] = None
    updates: int = 0


class StatusStore:
    """Holds the most recent callback rendering (CurrentStatus).

    One value, replaced wholesale on every callback. The lock keeps reads
    consistent when handlers run on a thread pool instead of the event loop.
    """

    def __init__(self, placeholder: str = DEFAULT_PLACEHOLDER):
        self._lock = Lock()
        self._placeholder = placeholder
        self._latest = StatusSnapshot(text=placeholder)

    def set(self, text: str) -> StatusSnapshot:
        with self._lock:
            self._latest = StatusSnapshot(
                text=text,
                updated_at=datetime.now(timezone.utc),
                updates=self._latest.updates + 1,
            )
            return self._latest

    def get(self) -> str:
        with self._lock:
            return self._latest.text

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return self._latest

    def reset(self) -> None:
        """Back to the placeholder, as after a process restart."""
        with self._lock:
            self._latest = StatusSnapshot(text=self._placeholder)
