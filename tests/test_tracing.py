"""Tests for the tracing adapter and the usage ledger."""

from unittest.mock import MagicMock

import pytest

from board_agent.tracing.cost_tracker import UsageTracker
from board_agent.tracing.setup import RunTracer


async def test_tracer_without_client_is_a_no_op():
    tracer = RunTracer(None)
    run = tracer.start_run("agent-command", user_id="u", metadata={})
    assert run is None
    tracer.end_run(run, output={"ok": True})
    tracer.record_feedback(run, "success", 1.0)
    assert tracer.callbacks(run) == []
    await tracer.flush()


async def test_tracer_failures_never_escape():
    client = MagicMock()
    client.trace.side_effect = RuntimeError("langfuse down")
    client.flush.side_effect = RuntimeError("langfuse down")
    tracer = RunTracer(client)

    assert tracer.start_run("agent-command", user_id="u", metadata={}) is None
    await tracer.flush()


def test_tracer_records_run_and_feedback():
    client = MagicMock()
    run = client.trace.return_value
    run.id = "trace-1"
    tracer = RunTracer(client)

    started = tracer.start_run("agent-command", user_id="u", metadata={"board_id": "b"}, input="hi")
    tracer.end_run(started, error=ValueError("boom"))
    tracer.record_feedback(started, "success", 0.0)

    client.trace.assert_called_once_with(name="agent-command", user_id="u", metadata={"board_id": "b"}, input="hi")
    assert run.update.call_args.kwargs["level"] == "ERROR"
    client.score.assert_called_once_with(trace_id="trace-1", name="success", value=0.0)
    assert tracer.callbacks(started) == [run.get_langchain_handler.return_value]


def test_usage_tracker_summary():
    tracker = UsageTracker()
    cost = tracker.record("b1", "gpt-4o-mini", "loop", completions=2, tool_calls=3,
                          input_tokens=1_000_000, output_tokens=0)
    tracker.record("b1", "unknown-model", "template", completions=1, tool_calls=1,
                   input_tokens=10, output_tokens=10, archetype="swot")

    assert cost == pytest.approx(0.15)
    summary = tracker.get_summary()
    assert summary["total_commands"] == 2
    assert summary["by_route"]["loop"]["tool_calls"] == 3
    assert summary["by_route"]["template"]["cost_usd"] == 0
    assert summary["recent"][-1]["archetype"] == "swot"
