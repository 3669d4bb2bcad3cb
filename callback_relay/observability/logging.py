from __future__ import annotations

import logging
from typing import Callable, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s request_id=%(request_id)s %(message)s"


class _RequestIdFilter(logging.Filter):
    def __init__(self, *, request_id_getter: Optional[Callable[[], Optional[str]]] = None) -> None:
        super().__init__()
        self._request_id_getter = request_id_getter

    def filter(self, record: logging.LogRecord) -> bool:
        # Formatters always reference request_id, so it must exist on every record.
        record.request_id = None
        try:
            if self._request_id_getter:
                record.request_id = self._request_id_getter()
        except Exception:
            record.request_id = None
        return True


def configure_logging(
    *,
    level: str = "INFO",
    request_id_getter: Optional[Callable[[], Optional[str]]] = None,
) -> None:
    """Configure root logging with the request id on every record.

    Safe to call more than once: the handler is only installed when the root
    logger has none (uvicorn may have configured it already) and the filter
    is only attached once.
    """
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(lvl)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(lvl)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        root.addHandler(handler)

    for existing in list(root.filters):
        if isinstance(existing, _RequestIdFilter):
            root.removeFilter(existing)
    root.addFilter(_RequestIdFilter(request_id_getter=request_id_getter))
    # Records from child loggers skip root-logger filters, so attach to handlers too.
    for handler in root.handlers:
        if not any(isinstance(f, _RequestIdFilter) for f in handler.filters):
            handler.addFilter(_RequestIdFilter(request_id_getter=request_id_getter))
