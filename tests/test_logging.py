import logging

from callback_relay.observability.context import get_request_id, reset_request_id, set_request_id
from callback_relay.observability.logging import _RequestIdFilter


def _record():
    return logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_injects_current_request_id():
    rid, tok = set_request_id("req-1")
    try:
        rec = _record()
        assert _RequestIdFilter(request_id_getter=get_request_id).filter(rec) is True
        assert rec.request_id == "req-1"
    finally:
        reset_request_id(tok)
    assert get_request_id() is None


def test_filter_defaults_to_none_when_getter_fails():
    def broken():
        raise RuntimeError("boom")

    rec = _record()
    _RequestIdFilter(request_id_getter=broken).filter(rec)
    assert rec.request_id is None


def test_blank_request_id_gets_generated():
    rid, tok = set_request_id("   ")
    try:
        assert len(rid) == 32
        assert get_request_id() == rid
    finally:
        reset_request_id(tok)
