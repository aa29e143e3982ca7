"""Persistence adapter: load fallbacks, debounced writes, builder theme."""

import asyncio
import json

import pytest

from app_builder.schemas.design_config import default_design_config
from app_builder.services.history import HistoryStack
from app_builder.services.persistence import (
    BuilderTheme,
    PersistedState,
    PersistenceAdapter,
    SaveStatus,
    state_key,
    theme_key,
)
from app_builder.services.state_store import InMemoryStateStore

DEBOUNCE = 0.02


class FailingStore(InMemoryStateStore):
    """Reads work, writes fail while ``broken`` is set."""

    def __init__(self):
        super().__init__()
        self.broken = True

    async def set(self, key: str, value: str) -> None:
        if self.broken:
            raise ConnectionError("store down")
        await super().set(key, value)


class SlowFirstWriteStore(InMemoryStateStore):
    """The first write stalls long enough for a newer save to be scheduled."""

    def __init__(self, stall: float):
        super().__init__()
        self.stall = stall

    async def set(self, key: str, value: str) -> None:
        if not self.writes:
            self.writes.append((key, value))
            await asyncio.sleep(self.stall)
            self.data[key] = value
            return
        await super().set(key, value)


def _state_for(*names: str) -> PersistedState:
    seed = default_design_config()
    history = HistoryStack.seeded(seed)
    for name in names:
        history.commit(history.current.with_changes(app_name=name))
    return PersistedState.from_history(history)


def test_keys_are_namespaced_per_user():
    assert state_key("loc-1") == "appBuilderState:v1:loc-1"
    assert theme_key("loc-1") == "appBuilderTheme:v1:loc-1"


@pytest.mark.asyncio
async def test_load_missing_state_seeds():
    adapter = PersistenceAdapter(InMemoryStateStore(), "new-user", delay=DEBOUNCE)
    history = await adapter.load()
    assert len(history) == 1
    assert history.current == default_design_config()


@pytest.mark.asyncio
async def test_load_malformed_state_seeds():
    """Garbage, bad shapes and out-of-range cursors all fall back to the seed."""
    for raw in (
        "not json",
        json.dumps({"designConfig": {}, "historyStack": [], "currentIndex": 0}),
        _state_for("A").model_dump_json(by_alias=True).replace(
            '"currentIndex":1', '"currentIndex":7'
        ),
    ):
        store = InMemoryStateStore({state_key("u"): raw})
        history = await PersistenceAdapter(store, "u", delay=DEBOUNCE).load()
        assert len(history) == 1
        assert history.current.app_name == "Aura Aesthetics"


@pytest.mark.asyncio
async def test_load_restores_history_and_cursor():
    state = _state_for("A", "B")
    store = InMemoryStateStore({state_key("u"): state.model_dump_json(by_alias=True)})
    history = await PersistenceAdapter(store, "u", delay=DEBOUNCE).load()
    assert len(history) == 3
    assert history.cursor == 2
    assert history.current.app_name == "B"


@pytest.mark.asyncio
async def test_persisted_record_shape():
    state = _state_for("A")
    record = json.loads(state.model_dump_json(by_alias=True))
    assert set(record) == {"designConfig", "historyStack", "currentIndex"}
    assert record["designConfig"]["appName"] == "A"
    assert record["currentIndex"] == 1


@pytest.mark.asyncio
async def test_rapid_schedules_write_once_with_latest_state():
    """Three schedules inside the quiet period produce one write of the last state."""
    store = InMemoryStateStore()
    adapter = PersistenceAdapter(store, "u", delay=DEBOUNCE)
    for name in ("A", "B", "C"):
        adapter.schedule(_state_for(name))
    assert adapter.status is SaveStatus.SAVING

    await asyncio.sleep(DEBOUNCE * 5)

    assert len(store.writes) == 1
    key, value = store.writes[0]
    assert key == state_key("u")
    assert json.loads(value)["designConfig"]["appName"] == "C"
    assert adapter.status is SaveStatus.SAVED


@pytest.mark.asyncio
async def test_slow_write_never_overwrites_newer_state():
    """A newer save waits for a stalled one, so the stored record is the latest."""
    store = SlowFirstWriteStore(stall=DEBOUNCE * 10)
    adapter = PersistenceAdapter(store, "u", delay=DEBOUNCE)
    adapter.schedule(_state_for("A"))
    await asyncio.sleep(DEBOUNCE * 3)
    assert len(store.writes) == 1

    adapter.schedule(_state_for("B"))
    await asyncio.sleep(DEBOUNCE * 3)
    assert adapter.status is SaveStatus.SAVING

    await asyncio.sleep(DEBOUNCE * 15)
    assert json.loads(store.data[state_key("u")])["designConfig"]["appName"] == "B"
    assert [json.loads(v)["designConfig"]["appName"] for _, v in store.writes] == ["A", "B"]
    assert adapter.status is SaveStatus.SAVED


@pytest.mark.asyncio
async def test_flush_writes_pending_state_immediately():
    store = InMemoryStateStore()
    adapter = PersistenceAdapter(store, "u", delay=60)
    adapter.schedule(_state_for("A"))
    await adapter.flush()
    assert len(store.writes) == 1
    assert adapter.status is SaveStatus.SAVED


@pytest.mark.asyncio
async def test_flush_without_pending_write_is_noop():
    store = InMemoryStateStore()
    adapter = PersistenceAdapter(store, "u", delay=DEBOUNCE)
    await adapter.flush()
    assert store.writes == []


@pytest.mark.asyncio
async def test_write_failure_returns_to_unsaved_and_next_edit_retries():
    store = FailingStore()
    adapter = PersistenceAdapter(store, "u", delay=DEBOUNCE)
    adapter.schedule(_state_for("A"))
    await asyncio.sleep(DEBOUNCE * 5)
    assert adapter.status is SaveStatus.UNSAVED
    assert store.writes == []

    store.broken = False
    adapter.schedule(_state_for("B"))
    await asyncio.sleep(DEBOUNCE * 5)
    assert adapter.status is SaveStatus.SAVED
    assert json.loads(store.data[state_key("u")])["designConfig"]["appName"] == "B"


@pytest.mark.asyncio
async def test_load_survives_store_errors():
    class BrokenReads(InMemoryStateStore):
        async def get(self, key: str) -> str | None:
            raise ConnectionError("down")

    adapter = PersistenceAdapter(BrokenReads(), "u", delay=DEBOUNCE)
    history = await adapter.load()
    assert history.current == default_design_config()
    assert await adapter.load_builder_theme() is BuilderTheme.DEFAULT


@pytest.mark.asyncio
async def test_builder_theme_round_trip_and_fallback():
    store = InMemoryStateStore()
    adapter = PersistenceAdapter(store, "u", delay=DEBOUNCE)
    assert await adapter.load_builder_theme() is BuilderTheme.DEFAULT
    assert await adapter.save_builder_theme(BuilderTheme.SERENE)
    assert store.data[theme_key("u")] == '"Serene"'
    assert await adapter.load_builder_theme() is BuilderTheme.SERENE

    store.data[theme_key("u")] = '"Neon"'
    assert await adapter.load_builder_theme() is BuilderTheme.DEFAULT


@pytest.mark.asyncio
async def test_builder_theme_write_does_not_touch_save_status():
    adapter = PersistenceAdapter(InMemoryStateStore(), "u", delay=DEBOUNCE)
    adapter.mark_unsaved()
    await adapter.save_builder_theme(BuilderTheme.DARK)
    assert adapter.status is SaveStatus.UNSAVED
