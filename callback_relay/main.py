import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request, WebSocket
from fastapi.templating import Jinja2Templates
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response as StarletteResponse

from .observability.context import (
    get_request_id as _get_request_id,
    reset_request_id as _reset_request_id,
    set_request_id as _set_request_id,
)
from .observability.logging import configure_logging as _configure_logging
from .realtime import ConnectionManager
from .status_store import DEFAULT_PLACEHOLDER, StatusStore
from .webhook import WebhookRuntime, create_webhook_router

PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"

# Load environment variables early so defaults below can be overridden by a local `.env`.
load_dotenv()

DEFAULT_PORT = 3090


def read_port() -> int:
    return int(os.getenv("PORT", str(DEFAULT_PORT)))


PORT = read_port()
HOST = os.getenv("HOST", "0.0.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_VERBOSE = os.getenv("LOG_VERBOSE", "0") == "1"
PLACEHOLDER_TEXT = os.getenv("PLACEHOLDER_TEXT") or DEFAULT_PLACEHOLDER
ENABLE_METRICS = os.getenv("ENABLE_METRICS", "1") == "1"

try:
    _configure_logging(level=LOG_LEVEL, request_id_getter=_get_request_id)
except Exception:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

logger = logging.getLogger(__name__)


def _vlog(message: str) -> None:
    if LOG_VERBOSE:
        logger.info("Callback payload:\n%s", message)


status_store = StatusStore(placeholder=PLACEHOLDER_TEXT)
connection_manager = ConnectionManager()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

webhook_runtime = WebhookRuntime(
    status_store=status_store,
    connection_manager=connection_manager,
    vlog=_vlog,
)

app = FastAPI(title="Callback Relay", docs_url=None, redoc_url=None)
app.include_router(create_webhook_router(webhook_runtime))


# ── Request context: request_id (for tracing) ──────────────────────
@app.middleware("http")
async def request_id_middleware(request: StarletteRequest, call_next):
    incoming = (request.headers.get("x-request-id") or "").strip()
    rid, tok = _set_request_id(incoming or None)
    try:
        resp: StarletteResponse = await call_next(request)
        resp.headers["X-Request-Id"] = rid
        return resp
    finally:
        _reset_request_id(tok)


if ENABLE_METRICS:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")


@app.on_event("startup")
async def startup():
    logger.info("Server is running on http://localhost:%s", PORT)


@app.get("/")
async def index(request: Request):
    """Page pre-filled with the latest callback data."""
    response = templates.TemplateResponse(
        request,
        "index.html",
        {"data": status_store.get()},
    )
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    response.headers["Pragma"] = "no-cache"
    return response


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Real-time channel. Server pushes only; client frames (text or binary) are discarded."""
    await connection_manager.connect(websocket)
    try:
        while True:
            msg = await websocket.receive()
            if msg["type"] == "websocket.disconnect":
                break
    except Exception:
        logger.exception("WebSocket error")
    finally:
        connection_manager.disconnect(websocket)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    snap = status_store.snapshot()
    return {
        "status": "healthy",
        "connections": connection_manager.count(),
        "updates": snap.updates,
        "updated_at": snap.updated_at.isoformat() if snap.updated_at else None,
    }


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT, reload=False)


if __name__ == "__main__":
    run()
