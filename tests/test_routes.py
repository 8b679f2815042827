"""Tests for the HTTP surface: auth middleware, command route and error mapping."""

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from board_agent.main import app
from board_agent.models.schemas import AgentCommandRequest

from conftest import BOARD_ID, FakeChatModel, RecordingStore, board_data

SECRET = {"x-agent-secret": "test-agent-secret"}


@pytest.fixture
def client_for(make_runtime):
    def _client(store, llm):
        app.state.runtime = make_runtime(store, llm)
        return TestClient(app)

    return _client


def _body(command: str = "add a note", board_id: str = BOARD_ID) -> dict:
    return {"boardId": board_id, "command": command, "actorId": "user-1", "actorName": "Ada"}


def test_health_needs_no_secret(client_for):
    client = client_for(RecordingStore(board_data()), FakeChatModel())
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_wrong_secret_is_forbidden(client_for):
    client = client_for(RecordingStore(board_data()), FakeChatModel())
    response = client.post("/agent/command", json=_body(), headers={"x-agent-secret": "nope"})
    assert response.status_code == 403


def test_command_success(client_for):
    client = client_for(RecordingStore(board_data()), FakeChatModel([AIMessage(content="Done")]))
    response = client.post("/agent/command", json=_body(), headers=SECRET)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Executed 0 operations"}


def test_missing_board_is_404(client_for):
    client = client_for(RecordingStore(), FakeChatModel())
    response = client.post("/agent/command", json=_body(board_id="nope"), headers=SECRET)
    assert response.status_code == 404


def test_provider_failure_is_502(client_for):
    llm = FakeChatModel([RuntimeError("down"), RuntimeError("down")])
    client = client_for(RecordingStore(board_data()), llm)
    response = client.post("/agent/command", json=_body(), headers=SECRET)
    assert response.status_code == 502


def test_empty_command_is_400(client_for):
    client = client_for(RecordingStore(board_data()), FakeChatModel())
    response = client.post("/agent/command", json=_body(command="   "), headers=SECRET)
    assert response.status_code == 400


def test_request_accepts_camel_case_viewport():
    request = AgentCommandRequest.model_validate({
        **_body(), "selection": ["a"], "viewport": {"x": 1, "y": 2, "scale": 0.5},
    })
    assert request.board_id == BOARD_ID
    assert request.viewport.scale == 0.5


def test_usage_and_models(client_for):
    client = client_for(RecordingStore(board_data()), FakeChatModel([AIMessage(content="Done")]))
    client.post("/agent/command", json=_body(), headers=SECRET)

    usage = client.get("/agent/usage", headers=SECRET).json()
    assert usage["total_commands"] == 1

    models = client.get("/agent/models", headers=SECRET).json()
    assert models["default"] == "gpt-4o-mini"
    assert {m["model_id"] for m in models["models"]} >= {"gpt-4o-mini", "claude-haiku"}
