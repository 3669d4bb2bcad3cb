from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Optional
import uuid

# NOTE: request-scoped for HTTP handlers. WebSocket handlers and broadcasts
# outside a request see None.
_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _REQUEST_ID.get()


def set_request_id(value: Optional[str] = None) -> tuple[str, Token[Optional[str]]]:
    rid = (value or "").strip() or uuid.uuid4().hex
    tok = _REQUEST_ID.set(rid)
    return rid, tok


def reset_request_id(token: Token[Optional[str]]) -> None:
    _REQUEST_ID.reset(token)
