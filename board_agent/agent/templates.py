"""Deterministic generators for recognized diagram archetypes.

A template turns a command into a complete plan without the tool loop: at
most one structured content-extraction call, geometry computed locally, one
``execute_plan`` write, and a few follow-up writes (frame membership, sending
backgrounds to the back). Any failure returns None so the command falls
through to the general agent loop.
"""

import asyncio
import logging
import math
import re
from dataclasses import dataclass, field

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field

from board_agent.models.plan import PlanConnection, PlanObject
from board_agent.models.schemas import Viewport
from board_agent.services.board_context import viewport_center
from board_agent.services.geometry import PALETTE
from board_agent.services.layout_service import center_positions, compute_layout_positions
from board_agent.services.planner import STICKY_SIZE, MutationPlanner

logger = logging.getLogger(__name__)

# Order matters: an ambiguous command resolves to the first matching archetype.
ARCHETYPE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("swot", re.compile(r"\bswot\b", re.IGNORECASE)),
    ("kanban", re.compile(r"\b(kanban|sprint board|task board|retro|retrospective)\b", re.IGNORECASE)),
    ("flowchart", re.compile(r"\b(flow ?chart|process flow)\b|->|→", re.IGNORECASE)),
    ("mindmap", re.compile(r"\b(mind ?map|brainstorm)\b", re.IGNORECASE)),
]

_ARROW_CHAIN_RE = re.compile(r"[A-Za-z][^→\->\n]*(?:(?:→|->)[^→\->\n]+)+")
_ARROW_SPLIT_RE = re.compile(r"→|->")

STICKY_W, STICKY_H = STICKY_SIZE

# Title bar plus three notes fill a 500px column frame.
MAX_COLUMN_ITEMS = 3


def classify_archetype(command: str) -> str | None:
    for archetype, pattern in ARCHETYPE_PATTERNS:
        if pattern.search(command):
            return archetype
    return None


@dataclass
class TemplateContext:
    planner: MutationPlanner
    llm: BaseChatModel
    viewport: Viewport | None = None
    callbacks: list = field(default_factory=list)


@dataclass
class TemplateResult:
    message: str
    archetype: str
    objects_created: int
    completions: int = 0
    input_tokens: int = 0
    output_tokens: int = 0


# ── Extraction schemas ───────────────────────────────────────────────────────

class SWOTContent(BaseModel):
    strengths: list[str] = Field(description="3 concise strengths")
    weaknesses: list[str] = Field(description="3 concise weaknesses")
    opportunities: list[str] = Field(description="3 concise opportunities")
    threats: list[str] = Field(description="3 concise threats")


class FlowContent(BaseModel):
    steps: list[str] = Field(description="3-6 sequential steps with short labels")


class KanbanColumn(BaseModel):
    name: str
    items: list[str] = Field(description="2-3 short task labels")


class KanbanContent(BaseModel):
    columns: list[KanbanColumn] = Field(description="3-4 columns in workflow order")


class MindmapBranch(BaseModel):
    label: str
    children: list[str] = Field(default_factory=list, description="2-3 sub-items")


class MindmapContent(BaseModel):
    center: str
    branches: list[MindmapBranch] = Field(description="4-6 branches")


class _Extraction:
    """Runs the single structured extraction call and keeps its token usage."""

    def __init__(self, ctx: TemplateContext):
        self.ctx = ctx
        self.completions = 0
        self.input_tokens = 0
        self.output_tokens = 0

    async def __call__(self, schema: type[BaseModel], prompt: str) -> BaseModel:
        structured = self.ctx.llm.with_structured_output(schema, include_raw=True)
        self.completions += 1
        response = await structured.ainvoke(
            [
                SystemMessage(content="Extract diagram content. Keep every label under 8 words."),
                HumanMessage(content=prompt),
            ],
            config={"callbacks": self.ctx.callbacks},
        )
        usage = getattr(response.get("raw"), "usage_metadata", None) or {}
        self.input_tokens += usage.get("input_tokens", 0)
        self.output_tokens += usage.get("output_tokens", 0)
        if response.get("parsed") is None:
            raise ValueError(f"Extraction returned no {schema.__name__}: {response.get('parsing_error')}")
        return response["parsed"]

    def result(self, message: str, archetype: str, objects_created: int) -> TemplateResult:
        return TemplateResult(
            message=message,
            archetype=archetype,
            objects_created=objects_created,
            completions=self.completions,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
        )


# ── SWOT ─────────────────────────────────────────────────────────────────────

async def execute_swot(command: str, ctx: TemplateContext) -> TemplateResult:
    planner = ctx.planner
    await planner.write_agent_status("thinking", iteration=1, max_iterations=2)
    extract = _Extraction(ctx)
    content = await extract(SWOTContent, f'SWOT analysis for: "{command}". 3 concise items per category.')

    q_w, q_h, gap = 300, 310, 20
    cx, cy = viewport_center(ctx.viewport)
    cells = center_positions(compute_layout_positions("grid", 4, q_w, q_h, gap), q_w, q_h, cx, cy)
    quadrants = [
        ("strengths", "Strengths", PALETTE["green"]),
        ("weaknesses", "Weaknesses", PALETTE["rose"]),
        ("opportunities", "Opportunities", PALETTE["yellow"]),
        ("threats", "Threats", PALETTE["peach"]),
    ]
    start_x, start_y = cells[0]

    objects = [PlanObject(
        temp_id="f_swot",
        action="create_frame",
        params={
            "title": "SWOT Analysis",
            "x": start_x - 40,
            "y": start_y - 70,
            "width": q_w * 2 + gap + 80,
            "height": q_h * 2 + gap + 110,
        },
    )]
    children: list[str] = []
    for (key, label, color), (x, y) in zip(quadrants, cells):
        items = getattr(content, key)[:3]
        objects += [
            PlanObject(
                temp_id=f"bg_{key}",
                action="create_shape",
                params={"type": "rectangle", "x": x, "y": y, "width": q_w, "height": q_h, "color": color},
            ),
            PlanObject(
                temp_id=f"h_{key}",
                action="create_text",
                params={"text": label, "x": x + 10, "y": y + 8, "width": q_w - 20, "height": 36},
            ),
            PlanObject(
                temp_id=f"n_{key}",
                action="create_sticky_note",
                params={"text": "\n".join(f"• {s}" for s in items), "x": x + 10, "y": y + 52, "color": color},
            ),
        ]
        children += [f"bg_{key}", f"h_{key}", f"n_{key}"]

    await planner.write_agent_status("calling_tools", tools=["execute_plan", "add_to_frame", "set_layer"])
    result = await planner.execute_plan(objects, [])

    id_map = result.id_map
    await asyncio.gather(
        planner.add_to_frame([id_map[t] for t in children], id_map["f_swot"]),
        *(planner.set_layer(id_map[f"bg_{key}"], True) for key, _, _ in quadrants),
    )
    return extract.result(f"Created SWOT analysis ({len(objects)} objects)", "swot", len(objects))


# ── Flowchart ────────────────────────────────────────────────────────────────

def parse_arrow_chain(command: str) -> list[str] | None:
    """Parse "A -> B -> C" (or →) into step labels; None when there is no chain."""
    m = _ARROW_CHAIN_RE.search(command)
    if not m:
        return None
    steps = [s.strip() for s in _ARROW_SPLIT_RE.split(m.group(0))]
    if steps and ":" in steps[0]:
        steps[0] = steps[0].rsplit(":", 1)[1].strip()
    steps = [s for s in steps if 0 < len(s) < 60]
    return steps if len(steps) >= 2 else None


async def execute_flowchart(command: str, ctx: TemplateContext) -> TemplateResult:
    planner = ctx.planner
    await planner.write_agent_status("thinking", iteration=1, max_iterations=1)
    extract = _Extraction(ctx)

    # Explicit arrow syntax needs no completion call.
    steps = parse_arrow_chain(command)
    if not steps:
        content = await extract(FlowContent, f'Flowchart steps for: "{command}". 3-6 sequential steps, short labels.')
        steps = [s for s in content.steps if s.strip()][:8]
    if len(steps) < 2:
        steps = ["Start", "Process", "End"]

    cx, cy = viewport_center(ctx.viewport)
    positions = center_positions(
        compute_layout_positions("row", len(steps), STICKY_W, STICKY_H, 80), STICKY_W, STICKY_H, cx, cy,
    )

    objects: list[PlanObject] = []
    connections: list[PlanConnection] = []
    for i, (step, (x, y)) in enumerate(zip(steps, positions)):
        if i == 0:
            color = PALETTE["green"]
        elif i == len(steps) - 1:
            color = PALETTE["rose"]
        else:
            color = PALETTE["blue"]
        objects.append(PlanObject(
            temp_id=f"node_{i}",
            action="create_sticky_note",
            params={"text": step, "x": x, "y": y, "color": color},
        ))
        if i > 0:
            connections.append(PlanConnection(from_id=f"node_{i - 1}", to_id=f"node_{i}"))

    await planner.write_agent_status("calling_tools", tools=["execute_plan"])
    await planner.execute_plan(objects, connections)
    return extract.result(f"Created flowchart with {len(steps)} steps", "flowchart", len(objects))


# ── Kanban / column board ────────────────────────────────────────────────────

async def execute_kanban(command: str, ctx: TemplateContext) -> TemplateResult:
    planner = ctx.planner
    await planner.write_agent_status("thinking", iteration=1, max_iterations=2)
    extract = _Extraction(ctx)
    content = await extract(KanbanContent, f'Column board for: "{command}". 3 columns, 2-3 items each.')

    columns = content.columns[:4] or [
        KanbanColumn(name="To Do", items=["Item 1", "Item 2"]),
        KanbanColumn(name="In Progress", items=["Item 3"]),
        KanbanColumn(name="Done", items=["Item 4"]),
    ]
    col_w, col_h, col_gap = 260, 500, 30
    cx, cy = viewport_center(ctx.viewport)
    frames = center_positions(
        compute_layout_positions("row", len(columns), col_w, col_h, col_gap), col_w, col_h, cx, cy,
    )
    note_colors = [PALETTE["yellow"], PALETTE["blue"], PALETTE["mint"], PALETTE["lavender"]]

    objects: list[PlanObject] = []
    members: dict[str, list[str]] = {}
    for c, (column, (fx, fy)) in enumerate(zip(columns, frames)):
        frame_tid = f"frame_{c}"
        objects.append(PlanObject(
            temp_id=frame_tid,
            action="create_frame",
            params={"title": column.name, "x": fx, "y": fy, "width": col_w, "height": col_h},
        ))
        items = column.items[:MAX_COLUMN_ITEMS]
        slots = compute_layout_positions("column", len(items), STICKY_W, STICKY_H, 20)
        members[frame_tid] = []
        for i, (item, (sx, sy)) in enumerate(zip(items, slots)):
            note_tid = f"note_{c}_{i}"
            objects.append(PlanObject(
                temp_id=note_tid,
                action="create_sticky_note",
                params={
                    "text": item,
                    "x": fx + (col_w - STICKY_W) / 2 + sx,
                    "y": fy + 60 + sy,
                    "color": note_colors[c % len(note_colors)],
                },
            ))
            members[frame_tid].append(note_tid)

    await planner.write_agent_status("calling_tools", tools=["execute_plan", "add_to_frame"])
    result = await planner.execute_plan(objects, [])
    id_map = result.id_map
    await asyncio.gather(*(
        planner.add_to_frame([id_map[t] for t in notes], id_map[frame_tid])
        for frame_tid, notes in members.items()
        if notes
    ))
    return extract.result(f"Created Kanban board with {len(columns)} columns", "kanban", len(objects))


# ── Mind map ─────────────────────────────────────────────────────────────────

async def execute_mindmap(command: str, ctx: TemplateContext) -> TemplateResult:
    planner = ctx.planner
    await planner.write_agent_status("thinking", iteration=1, max_iterations=1)
    extract = _Extraction(ctx)
    content = await extract(
        MindmapContent, f'Mind map for: "{command}". Central topic + 4-6 branches, 2-3 sub-items each.',
    )
    branches = content.branches[:6]
    if not branches:
        raise ValueError("Mind map extraction returned no branches")

    cx, cy = viewport_center(ctx.viewport)
    objects = [PlanObject(
        temp_id="center",
        action="create_sticky_note",
        params={"text": content.center, "x": cx - STICKY_W / 2, "y": cy - STICKY_H / 2, "color": PALETTE["blue"]},
    )]
    connections: list[PlanConnection] = []

    ring = compute_layout_positions("circle", len(branches), STICKY_W, STICKY_H, 220)
    ring = center_positions(ring, STICKY_W, STICKY_H, cx, cy)
    branch_colors = [
        PALETTE["green"], PALETTE["rose"], PALETTE["yellow"],
        PALETTE["peach"], PALETTE["mint"], PALETTE["lavender"],
    ]
    child_radius = 200

    for b, (branch, (bx, by)) in enumerate(zip(branches, ring)):
        branch_tid = f"branch_{b}"
        objects.append(PlanObject(
            temp_id=branch_tid,
            action="create_sticky_note",
            params={"text": branch.label, "x": bx, "y": by, "color": branch_colors[b % len(branch_colors)]},
        ))
        connections.append(PlanConnection(from_id="center", to_id=branch_tid))

        bcx, bcy = bx + STICKY_W / 2, by + STICKY_H / 2
        angle = math.atan2(bcy - cy, bcx - cx)
        children = branch.children[:3]
        for i, child in enumerate(children):
            spread = angle + (i - (len(children) - 1) / 2) * 0.4
            child_tid = f"child_{b}_{i}"
            objects.append(PlanObject(
                temp_id=child_tid,
                action="create_sticky_note",
                params={
                    "text": child,
                    "x": round(bcx + child_radius * math.cos(spread) - STICKY_W / 2),
                    "y": round(bcy + child_radius * math.sin(spread) - STICKY_H / 2),
                    "color": PALETTE["grey"],
                },
            ))
            connections.append(PlanConnection(from_id=branch_tid, to_id=child_tid))

    await planner.write_agent_status("calling_tools", tools=["execute_plan"])
    await planner.execute_plan(objects, connections)
    return extract.result(f"Created mind map with {len(branches)} branches", "mindmap", len(objects))


# ── Dispatcher ───────────────────────────────────────────────────────────────

TEMPLATES = {
    "swot": execute_swot,
    "flowchart": execute_flowchart,
    "kanban": execute_kanban,
    "mindmap": execute_mindmap,
}


async def execute_template(archetype: str, command: str, ctx: TemplateContext) -> TemplateResult | None:
    """Run the archetype's template; None means "fall through to the agent loop"."""
    handler = TEMPLATES.get(archetype)
    if handler is None:
        return None
    try:
        return await handler(command, ctx)
    except Exception:
        logger.exception("Template error for archetype %r", archetype)
        return None
