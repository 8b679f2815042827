"""
Pytest configuration and fixtures for board agent tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("AGENT_SHARED_SECRET", "test-agent-secret")
os.environ.setdefault("STORE_BACKEND", "memory")

import pytest
from langchain_core.messages import AIMessage

from board_agent.config import Settings
from board_agent.runtime import AgentRuntime
from board_agent.services.geometry_cache import GeometryCache
from board_agent.services.planner import MutationPlanner
from board_agent.services.store import MemoryStore
from board_agent.tracing.cost_tracker import UsageTracker
from board_agent.tracing.setup import RunTracer

BOARD_ID = "board-1"
ACTOR_ID = "user-1"


class RecordingStore(MemoryStore):
    """MemoryStore that records every read, update and remove."""

    def __init__(self, data: dict | None = None) -> None:
        super().__init__(data)
        self.reads: list[str] = []
        self.writes: list[dict] = []
        self.removes: list[str] = []

    async def get(self, path):
        self.reads.append(path)
        return await super().get(path)

    async def update(self, updates):
        self.writes.append(dict(updates))
        await super().update(updates)

    async def remove(self, path):
        self.removes.append(path)
        await super().remove(path)

    def reset_counts(self) -> None:
        self.reads.clear()
        self.writes.clear()
        self.removes.clear()

    def status_writes(self) -> list[dict]:
        return [w for w in self.writes if any(k.endswith("/agentStatus") for k in w)]

    def data_writes(self) -> list[dict]:
        return [w for w in self.writes if not any(k.endswith("/agentStatus") for k in w)]


class FakeChatModel:
    """Scripted stand-in for a LangChain chat model.

    Each entry of ``responses`` is an AIMessage to return or an Exception to
    raise, consumed one per ``ainvoke`` call. ``structured`` entries are the
    parsed objects returned by ``with_structured_output(...).ainvoke``.
    """

    def __init__(self, responses=None, structured=None, repeat_last: bool = False):
        self.responses = list(responses or [])
        self.structured = list(structured or [])
        self.repeat_last = repeat_last
        self.calls: list[list] = []
        self.structured_calls: list[type] = []
        self.bound_tools: list = []
        self.tool_choice = None

    def bind_tools(self, tools, tool_choice=None, **kwargs):
        self.bound_tools = list(tools)
        self.tool_choice = tool_choice
        return self

    async def ainvoke(self, messages, config=None, **kwargs):
        self.calls.append(list(messages))
        if not self.responses:
            return AIMessage(content="done")
        item = self.responses[0] if (self.repeat_last and len(self.responses) == 1) else self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def with_structured_output(self, schema, include_raw: bool = False, **kwargs):
        return _FakeStructured(self, schema, include_raw)


class _FakeStructured:
    def __init__(self, model: FakeChatModel, schema, include_raw: bool):
        self.model = model
        self.schema = schema
        self.include_raw = include_raw

    async def ainvoke(self, messages, config=None, **kwargs):
        self.model.structured_calls.append(self.schema)
        item = self.model.structured.pop(0)
        if isinstance(item, Exception):
            raise item
        parsed = item if isinstance(item, self.schema) else self.schema.model_validate(item)
        if not self.include_raw:
            return parsed
        raw = AIMessage(content="", usage_metadata={"input_tokens": 50, "output_tokens": 20, "total_tokens": 70})
        return {"raw": raw, "parsed": parsed, "parsing_error": None}


def tool_call(name: str, args: dict, call_id: str = "call_1") -> dict:
    return {"name": name, "args": args, "id": call_id, "type": "tool_call"}


def sticky(x: float, y: float, text: str = "", frame_id: str | None = None) -> dict:
    record = {
        "type": "stickyNote", "x": x, "y": y, "width": 160, "height": 120,
        "color": "#FEF3C7", "text": text, "createdBy": ACTOR_ID, "createdAt": 1,
    }
    if frame_id:
        record["frameId"] = frame_id
    return record


def frame(x: float, y: float, width: float = 320, height: float = 220, title: str = "Frame") -> dict:
    return {
        "type": "frame", "x": x, "y": y, "width": width, "height": height,
        "color": "#12121a", "text": title, "createdBy": ACTOR_ID, "createdAt": 1,
    }


def board_data(objects: dict | None = None, connections: dict | None = None) -> dict:
    board: dict = {"meta": {"title": "Test board"}}
    if objects:
        board["objects"] = objects
    if connections:
        board["connections"] = connections
    return {"boards": {BOARD_ID: board}}


@pytest.fixture
def store():
    return RecordingStore(board_data())


@pytest.fixture
def planner(store):
    return MutationPlanner(store, BOARD_ID, ACTOR_ID, GeometryCache())


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        agent_shared_secret="test-agent-secret",
        store_backend="memory",
        max_agent_iterations=2,
        max_agent_iterations_structured=3,
    )


@pytest.fixture
def make_runtime(test_settings):
    def _make(store, llm, extraction_llm=None):
        return AgentRuntime(
            settings=test_settings,
            store=store,
            llm=llm,
            extraction_llm=extraction_llm or llm,
            model_name="gpt-4o-mini",
            tracer=RunTracer(None),
            usage=UsageTracker(),
        )

    return _make
