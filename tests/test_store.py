"""Tests for the store backends' path semantics."""

from unittest.mock import MagicMock

from board_agent.services import store as store_module
from board_agent.services.store import FirebaseStore, MemoryStore


async def test_memory_store_multi_path_update_and_delete():
    store = MemoryStore()

    await store.update({
        "boards/b/objects/a": {"x": 1},
        "boards/b/objects/b": {"x": 2},
        "boards/b/meta/title": "Board",
    })
    assert await store.get("boards/b/objects") == {"a": {"x": 1}, "b": {"x": 2}}

    await store.update({"boards/b/objects/a": None, "boards/b/objects/b/x": 5})
    assert await store.get("boards/b/objects") == {"b": {"x": 5}}


async def test_memory_store_prunes_empty_parents():
    store = MemoryStore({"boards": {"b": {"agentStatus": {"phase": "thinking"}, "meta": {"t": 1}}}})

    await store.remove("boards/b/agentStatus/phase")

    assert await store.get("boards/b/agentStatus") is None
    assert await store.get("boards/b/meta") == {"t": 1}


async def test_memory_store_returns_copies():
    store = MemoryStore({"boards": {"b": {"objects": {"a": {"x": 1}}}}})
    snapshot = await store.get("boards/b/objects/a")
    snapshot["x"] = 99
    assert await store.get("boards/b/objects/a") == {"x": 1}


async def test_missing_path_reads_none():
    assert await MemoryStore().get("boards/nope") is None


async def test_firebase_store_uses_one_root_update(monkeypatch):
    fake_db = MagicMock()
    monkeypatch.setattr(store_module, "db", fake_db)
    monkeypatch.setattr(store_module.firebase_admin, "get_app", MagicMock())
    fake_db.reference.return_value.get.return_value = {"x": 1}

    store = FirebaseStore("https://example.firebaseio.com")
    assert await store.get("boards/b/objects/a") == {"x": 1}

    await store.update({"boards/b/objects/a/x": 2, "boards/b/objects/c": None})
    fake_db.reference.assert_called_with("/")
    fake_db.reference.return_value.update.assert_called_once_with({"boards/b/objects/a/x": 2, "boards/b/objects/c": None})

    await store.update({})
    assert fake_db.reference.return_value.update.call_count == 1

    await store.remove("boards/b/agentStatus")
    fake_db.reference.return_value.delete.assert_called_once()
