from callback_relay.status_store import DEFAULT_PLACEHOLDER, StatusStore


def test_starts_with_placeholder():
    store = StatusStore()
    assert store.get() == DEFAULT_PLACEHOLDER
    snap = store.snapshot()
    assert snap.updated_at is None
    assert snap.updates == 0


def test_custom_placeholder():
    assert StatusStore(placeholder="waiting").get() == "waiting"


def test_only_latest_value_is_kept():
    store = StatusStore()
    for i in range(5):
        store.set(f"payload {i}")
    assert store.get() == "payload 4"
    assert store.snapshot().updates == 5


def test_set_returns_snapshot_with_timestamp():
    store = StatusStore()
    snap = store.set("x")
    assert snap.text == "x"
    assert snap.updated_at is not None
    assert snap.updated_at.tzinfo is not None


def test_reset_restores_placeholder():
    store = StatusStore(placeholder="none yet")
    store.set("x")
    store.reset()
    assert store.get() == "none yet"
    assert store.snapshot().updates == 0
