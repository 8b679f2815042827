"""Hierarchical document store used by the planner.

The planner only relies on three operations: read a path, apply an atomic
multi-path update (``None`` deletes), and remove a path. Paths look like
``boards/{board}/objects/{id}``.
"""

import asyncio
import copy
import logging
from typing import Any, Protocol

import firebase_admin
from firebase_admin import credentials, db

logger = logging.getLogger(__name__)


def board_path(board_id: str) -> str:
    return f"boards/{board_id}"


def objects_path(board_id: str) -> str:
    return f"boards/{board_id}/objects"


def object_path(board_id: str, object_id: str) -> str:
    return f"boards/{board_id}/objects/{object_id}"


def connections_path(board_id: str) -> str:
    return f"boards/{board_id}/connections"


def connection_path(board_id: str, connection_id: str) -> str:
    return f"boards/{board_id}/connections/{connection_id}"


def status_path(board_id: str) -> str:
    return f"boards/{board_id}/agentStatus"


class Store(Protocol):
    async def get(self, path: str) -> Any: ...

    async def update(self, updates: dict[str, Any]) -> None: ...

    async def remove(self, path: str) -> None: ...


class FirebaseStore:
    """Firebase Realtime Database backend.

    The Admin SDK is blocking, so every call runs on a worker thread.
    """

    def __init__(self, database_url: str, credentials_path: str = "") -> None:
        try:
            firebase_admin.get_app()
        except ValueError:
            cred = (
                credentials.Certificate(credentials_path)
                if credentials_path
                else credentials.ApplicationDefault()
            )
            firebase_admin.initialize_app(cred, {"databaseURL": database_url})
            logger.info("Firebase Admin initialized (database: %s)", database_url)

    async def get(self, path: str) -> Any:
        return await asyncio.to_thread(db.reference(path).get)

    async def update(self, updates: dict[str, Any]) -> None:
        if not updates:
            return
        await asyncio.to_thread(db.reference("/").update, updates)

    async def remove(self, path: str) -> None:
        await asyncio.to_thread(db.reference(path).delete)


class MemoryStore:
    """In-process store with the same path semantics as the realtime database.

    Empty nodes disappear, and reads of missing paths return None.
    """

    def __init__(self, data: dict | None = None) -> None:
        self._data: dict = copy.deepcopy(data) if data else {}

    @staticmethod
    def _split(path: str) -> list[str]:
        return [part for part in path.strip("/").split("/") if part]

    async def get(self, path: str) -> Any:
        node: Any = self._data
        for part in self._split(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return copy.deepcopy(node)

    async def update(self, updates: dict[str, Any]) -> None:
        # Applied without an await in between, so other commands never see half of it.
        for path, value in updates.items():
            if value is None:
                self._delete(path)
            else:
                self._set(path, copy.deepcopy(value))

    async def remove(self, path: str) -> None:
        self._delete(path)

    def _set(self, path: str, value: Any) -> None:
        parts = self._split(path)
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def _delete(self, path: str) -> None:
        parts = self._split(path)
        trail = []
        node: Any = self._data
        for part in parts[:-1]:
            if not isinstance(node, dict) or part not in node:
                return
            trail.append((node, part))
            node = node[part]
        if isinstance(node, dict):
            node.pop(parts[-1], None)
        for parent, key in reversed(trail):
            if parent[key] == {}:
                del parent[key]
