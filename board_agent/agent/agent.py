"""Agent orchestrator: one natural-language command in, board mutations out.

A command is validated against the store, narrowed to a compressed board
context, then either handed to a deterministic template or run through a
bounded tool-calling loop. The live agent status is always cleared on exit.
"""

import asyncio
import json
import logging
import re
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

from board_agent.agent.dispatcher import ALL_TOOLS, dispatch_tool
from board_agent.agent.templates import TemplateContext, classify_archetype, execute_template
from board_agent.agent.tools.utils import ToolContext
from board_agent.config import Settings
from board_agent.errors import NotFound, ProviderError
from board_agent.models.schemas import AgentCommandRequest, AgentCommandResult
from board_agent.runtime import AgentRuntime
from board_agent.services.board_context import filter_board_state, viewport_center
from board_agent.services.geometry_cache import GeometryCache
from board_agent.services.layout_service import describe_board_layout
from board_agent.services.planner import MutationPlanner
from board_agent.services.store import board_path

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an AI assistant for a collaborative whiteboard.
You change the board by calling tools. ALWAYS call the tools; do not just describe what you would do.

COORDINATES:
- World coordinates, x grows right and y grows down.
- The user's screen is centred on ({center_x}, {center_y}). Place new content near it.
- Sticky notes are 160x120. Leave 20-40px gaps between objects.

CHOOSING TOOLS:
- Several related objects (and the connectors between them): use execute_plan once.
  Give each object a temp_id and reference those temp_ids in connections.
- Many similar objects: use create_many with a layout (grid, row, column, circle, x_pattern,
  cross, diamond, triangle), optionally packed into a container.
- Tidy existing objects: arrange_within. Shrink or grow a frame around its children: fit_frame_to_contents.
- Edit existing objects in place by id. NEVER recreate an object that already exists.
- Put backgrounds behind content with set_layer(send_to_back=true).
- Only call get_board_state if the context below is not enough.

COLORS: yellow, green, blue, rose, lavender, mint, peach, grey (names or hex).

BOARD LAYOUT:
{layout}

BOARD CONTEXT (compressed JSON):
{context}"""

# Commands that usually need a follow-up round (membership, layering, arrangement).
_STRUCTURAL_RE = re.compile(
    r"\b(frames?|framed|group(ed|ing)?|layers?|behind|in front|arrange|organi[sz]e|"
    r"swot|kanban|flow ?chart|mind ?map|retro(spective)?|brainstorm)\b",
    re.IGNORECASE,
)


def max_iterations_for(command: str, settings: Settings) -> int:
    if _STRUCTURAL_RE.search(command):
        return settings.max_agent_iterations_structured
    return settings.max_agent_iterations


def build_system_prompt(context: dict[str, dict], request: AgentCommandRequest) -> str:
    center_x, center_y = viewport_center(request.viewport)
    return SYSTEM_PROMPT.format(
        center_x=center_x,
        center_y=center_y,
        layout=describe_board_layout(list(context["objects"].values())),
        context=json.dumps(context, separators=(",", ":")),
    )


async def complete_with_retry(bound, messages: list[BaseMessage], config: dict) -> AIMessage:
    """One completion, retried exactly once on any provider failure."""
    try:
        return await bound.ainvoke(messages, config=config)
    except Exception as first:
        logger.warning("Completion failed, retrying once: %s", first)
    try:
        return await bound.ainvoke(messages, config=config)
    except Exception as e:
        raise ProviderError(f"Completion failed after retry: {e}") from e


async def _run_tool_call(call: dict, ctx: ToolContext) -> Any:
    try:
        return await dispatch_tool(call["name"], call.get("args"), ctx)
    except Exception as e:
        logger.warning("Tool %s failed: %s", call["name"], e)
        return {"error": str(e)}


def _tool_message(result: Any, call_id: str, name: str) -> ToolMessage:
    return ToolMessage(content=json.dumps(result, default=str), tool_call_id=call_id or "", name=name)


class _LoopStats:
    def __init__(self) -> None:
        self.iterations = 0
        self.tool_calls = 0
        self.input_tokens = 0
        self.output_tokens = 0

    def add_usage(self, message: AIMessage) -> None:
        usage = getattr(message, "usage_metadata", None) or {}
        self.input_tokens += usage.get("input_tokens", 0)
        self.output_tokens += usage.get("output_tokens", 0)


async def _run_tool_loop(
    request: AgentCommandRequest,
    runtime: AgentRuntime,
    planner: MutationPlanner,
    context: dict[str, dict],
    callbacks: list,
    stats: _LoopStats,
) -> None:
    max_iterations = max_iterations_for(request.command, runtime.settings)
    bound = runtime.llm.bind_tools(ALL_TOOLS, tool_choice="auto")
    ctx = ToolContext(planner, request.viewport)
    messages: list[BaseMessage] = [
        SystemMessage(content=build_system_prompt(context, request)),
        HumanMessage(content=request.command),
    ]

    for iteration in range(1, max_iterations + 1):
        await planner.write_agent_status("thinking", iteration=iteration, max_iterations=max_iterations)
        response = await complete_with_retry(bound, messages, {"callbacks": callbacks})
        stats.iterations = iteration
        stats.add_usage(response)
        messages.append(response)

        calls = list(response.tool_calls)
        invalid = list(getattr(response, "invalid_tool_calls", None) or [])
        if not calls and not invalid:
            break

        names = [c["name"] for c in calls] + [c.get("name") or "unknown" for c in invalid]
        await planner.write_agent_status(
            "calling_tools", iteration=iteration, max_iterations=max_iterations, tools=names,
        )
        results = await asyncio.gather(*(_run_tool_call(call, ctx) for call in calls))

        for call, result in zip(calls, results):
            messages.append(_tool_message(result, call["id"], call["name"]))
        for bad in invalid:
            error = {"error": f"Malformed arguments for {bad.get('name')}: {bad.get('error')}"}
            messages.append(_tool_message(error, bad.get("id"), bad.get("name") or "unknown"))
        stats.tool_calls += len(calls) + len(invalid)
        logger.info("Round %d/%d ran %d tool calls", iteration, max_iterations, len(names))


async def run_agent_command(request: AgentCommandRequest, runtime: AgentRuntime) -> AgentCommandResult:
    """Run one command against its board.

    Raises:
        NotFound: the board does not exist (nothing is written)
        ProviderError: a completion round failed on both attempts
    """
    board = await runtime.store.get(board_path(request.board_id))
    if not isinstance(board, dict):
        raise NotFound(f"Board not found: {request.board_id}")

    tracer = runtime.tracer
    run = tracer.start_run(
        "agent-command",
        user_id=request.actor_id,
        metadata={"board_id": request.board_id, "actor_name": request.actor_name},
        input=request.command,
    )
    callbacks = tracer.callbacks(run)
    planner = MutationPlanner(runtime.store, request.board_id, request.actor_id, GeometryCache())

    try:
        context = filter_board_state(
            board.get("objects") or {},
            board.get("connections") or {},
            request.selection,
            request.viewport,
        )
        planner.cache.seed(context["objects"])

        archetype = classify_archetype(request.command)
        if archetype is not None:
            template = await execute_template(
                archetype,
                request.command,
                TemplateContext(planner, runtime.extraction_llm, request.viewport, callbacks),
            )
            if template is not None:
                runtime.usage.record(
                    board_id=request.board_id,
                    model=runtime.model_name,
                    route="template",
                    completions=template.completions,
                    tool_calls=1,
                    input_tokens=template.input_tokens,
                    output_tokens=template.output_tokens,
                    archetype=archetype,
                )
                result = AgentCommandResult(
                    success=True, message=template.message, route="template", tool_calls=1,
                )
                tracer.end_run(run, output=result.model_dump())
                tracer.record_feedback(run, "success", 1.0)
                return result
            logger.info("Template %r gave no result, falling back to the tool loop", archetype)

        stats = _LoopStats()
        await _run_tool_loop(request, runtime, planner, context, callbacks, stats)
        runtime.usage.record(
            board_id=request.board_id,
            model=runtime.model_name,
            route="loop",
            completions=stats.iterations,
            tool_calls=stats.tool_calls,
            input_tokens=stats.input_tokens,
            output_tokens=stats.output_tokens,
            archetype=archetype or "",
        )
        result = AgentCommandResult(
            success=True,
            message=f"Executed {stats.tool_calls} operations",
            route="loop",
            tool_calls=stats.tool_calls,
            iterations=stats.iterations,
        )
        tracer.end_run(run, output=result.model_dump())
        tracer.record_feedback(run, "success", 1.0)
        return result
    except Exception as e:
        tracer.end_run(run, error=e)
        tracer.record_feedback(run, "success", 0.0)
        raise
    finally:
        try:
            await planner.clear_agent_status()
        except Exception:
            logger.exception("Failed to clear agent status for board %s", request.board_id)
        await tracer.flush()
