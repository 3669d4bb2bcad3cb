import os
import pytest

# Keep payload dumps out of test output.
os.environ.setdefault("LOG_VERBOSE", "0")
os.environ.pop("PLACEHOLDER_TEXT", None)

from callback_relay import main


@pytest.fixture(autouse=True)
def fresh_state():
    main.status_store.reset()
    main.connection_manager.active_connections.clear()
    yield
    main.status_store.reset()
    main.connection_manager.active_connections.clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    with TestClient(main.app) as c:
        yield c
