"""Tests for archetype classification and the deterministic templates."""

import pytest

from board_agent.agent.templates import (
    SWOTContent,
    TemplateContext,
    classify_archetype,
    execute_template,
    parse_arrow_chain,
)
from board_agent.models.board_objects import BoardObject

from conftest import BOARD_ID, FakeChatModel, RecordingStore


class TestClassifyArchetype:
    @pytest.mark.parametrize("command,expected", [
        ("Create a SWOT analysis for our coffee shop", "swot"),
        ("set up a kanban board for the launch", "kanban"),
        ("Make a sprint board", "kanban"),
        ("run a retro for last sprint", "kanban"),
        ("draw a flowchart of the signup process", "flowchart"),
        ("Login -> Verify -> Dashboard", "flowchart"),
        ("Idea → Prototype → Ship", "flowchart"),
        ("mind map about renewable energy", "mindmap"),
        ("let's brainstorm names", "mindmap"),
        ("add a yellow sticky note", None),
    ])
    def test_patterns(self, command, expected):
        assert classify_archetype(command) == expected

    def test_first_match_wins(self):
        # Mentions both; swot is checked first.
        assert classify_archetype("swot analysis as a mind map") == "swot"
        assert classify_archetype("kanban flowchart") == "kanban"


class TestParseArrowChain:
    def test_simple_chain(self):
        assert parse_arrow_chain("A -> B -> C") == ["A", "B", "C"]

    def test_unicode_arrows(self):
        assert parse_arrow_chain("Plan → Build → Test") == ["Plan", "Build", "Test"]

    def test_strips_prefix_before_colon(self):
        assert parse_arrow_chain("flowchart: Start -> Middle -> End") == ["Start", "Middle", "End"]

    def test_no_chain(self):
        assert parse_arrow_chain("draw a flowchart of onboarding") is None


async def _stored_objects(store) -> dict:
    return await super(RecordingStore, store).get(f"boards/{BOARD_ID}/objects") or {}


def _template_ctx(planner, llm) -> TemplateContext:
    return TemplateContext(planner=planner, llm=llm)


async def test_arrow_chain_flowchart_makes_no_completion_call(store, planner):
    llm = FakeChatModel()

    result = await execute_template("flowchart", "A -> B -> C", _template_ctx(planner, llm))

    assert result is not None
    assert result.completions == 0
    assert llm.calls == [] and llm.structured_calls == []
    objects = await _stored_objects(store)
    assert sorted(o["text"] for o in objects.values()) == ["A", "B", "C"]
    connections = await super(RecordingStore, store).get(f"boards/{BOARD_ID}/connections")
    assert len(connections) == 2
    assert len(store.data_writes()) == 1


async def test_flowchart_extracts_steps_when_no_arrows(store, planner):
    llm = FakeChatModel(structured=[{"steps": ["Sign up", "Confirm email", "Pick plan", "Pay"]}])

    result = await execute_template("flowchart", "flowchart of the signup process", _template_ctx(planner, llm))

    assert result.completions == 1
    assert result.input_tokens == 50
    assert len(await _stored_objects(store)) == 4


async def test_swot_builds_frame_quadrants_and_follow_ups(store, planner):
    content = SWOTContent(
        strengths=["Loyal customers", "Great location", "Good coffee"],
        weaknesses=["Small space"],
        opportunities=["Delivery"],
        threats=["Chain competitor"],
    )
    llm = FakeChatModel(structured=[content])

    result = await execute_template("swot", "SWOT for my coffee shop", _template_ctx(planner, llm))

    assert result.archetype == "swot"
    objects = await _stored_objects(store)
    # 1 frame + 4 x (background, heading, note)
    assert len(objects) == 13
    frames = [oid for oid, o in objects.items() if o["type"] == "frame"]
    assert len(frames) == 1
    members = [o for o in objects.values() if o.get("frameId") == frames[0]]
    assert len(members) == 12
    backgrounds = [o for o in objects.values() if o["type"] == "rectangle"]
    assert len(backgrounds) == 4
    assert all(o.get("sentToBack") for o in backgrounds)
    assert any("Loyal customers" in (o.get("text") or "") for o in objects.values())
    # Everything stored is a valid board object.
    for record in objects.values():
        BoardObject.model_validate({"id": "x", **record})
    # Geometry came from the plan, so follow-ups needed no reads.
    assert not any(path.endswith("/objects") for path in store.reads)


async def test_kanban_columns_hold_their_notes(store, planner):
    llm = FakeChatModel(structured=[{
        "columns": [
            {"name": "To Do", "items": ["Write copy", "Pick domain"]},
            {"name": "Doing", "items": ["Design logo"]},
            {"name": "Done", "items": []},
        ],
    }])

    result = await execute_template("kanban", "kanban board for the website", _template_ctx(planner, llm))

    assert result.message == "Created Kanban board with 3 columns"
    objects = await _stored_objects(store)
    frames = {oid: o for oid, o in objects.items() if o["type"] == "frame"}
    assert sorted(f["text"] for f in frames.values()) == ["Doing", "Done", "To Do"]
    todo_id = next(oid for oid, f in frames.items() if f["text"] == "To Do")
    todo_notes = [o for o in objects.values() if o.get("frameId") == todo_id]
    assert sorted(o["text"] for o in todo_notes) == ["Pick domain", "Write copy"]


async def test_kanban_notes_stay_inside_long_columns(store, planner):
    llm = FakeChatModel(structured=[{
        "columns": [
            {"name": "Backlog", "items": ["One", "Two", "Three", "Four", "Five"]},
            {"name": "Doing", "items": ["Six", "Seven", "Eight", "Nine"]},
            {"name": "Done", "items": ["Ten"]},
        ],
    }])

    await execute_template("kanban", "kanban board for the backlog", _template_ctx(planner, llm))

    objects = await _stored_objects(store)
    frames = {oid: o for oid, o in objects.items() if o["type"] == "frame"}
    for frame_id, column in frames.items():
        notes = [o for o in objects.values() if o.get("frameId") == frame_id]
        assert len(notes) <= 3
        for note in notes:
            assert note["y"] >= column["y"]
            assert note["y"] + note["height"] <= column["y"] + column["height"]
    backlog_id = next(oid for oid, f in frames.items() if f["text"] == "Backlog")
    backlog = sorted(o["text"] for o in objects.values() if o.get("frameId") == backlog_id)
    assert backlog == ["One", "Three", "Two"]


async def test_mindmap_connects_centre_branches_and_children(store, planner):
    llm = FakeChatModel(structured=[{
        "center": "Energy",
        "branches": [
            {"label": "Solar", "children": ["Panels", "Storage"]},
            {"label": "Wind", "children": ["Offshore"]},
            {"label": "Hydro", "children": []},
            {"label": "Policy", "children": ["Subsidies"]},
        ],
    }])

    result = await execute_template("mindmap", "mind map about energy", _template_ctx(planner, llm))

    assert result.objects_created == 1 + 4 + 4
    connections = await super(RecordingStore, store).get(f"boards/{BOARD_ID}/connections")
    assert len(connections) == 4 + 4
    assert len(store.data_writes()) == 1


async def test_template_failure_returns_none(store, planner):
    llm = FakeChatModel(structured=[RuntimeError("provider down")])

    result = await execute_template("swot", "SWOT for anything", _template_ctx(planner, llm))

    assert result is None
    assert store.data_writes() == []


async def test_unknown_archetype_returns_none(planner):
    assert await execute_template("gantt", "gantt chart", _template_ctx(planner, FakeChatModel())) is None
