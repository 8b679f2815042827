"""Plan, bulk-creation, and packing tools.

These are the tools the model should prefer for anything bigger than a
couple of objects: every call here ends in a single atomic board write.
"""

from typing import Annotated, Literal

from langchain_core.tools import InjectedToolArg, tool

from board_agent.agent.tools.utils import ToolContext
from board_agent.models.plan import PlanConnection, PlanObject, Point, Size

Ctx = Annotated[ToolContext, InjectedToolArg]

Layout = Literal["grid", "row", "column", "circle", "x_pattern", "cross", "diamond", "triangle"]


@tool
async def execute_plan(
    ctx: Ctx,
    objects: list[PlanObject],
    connections: list[PlanConnection] | None = None,
) -> dict:
    """Create objects AND the connections between them in one step.

    Give every object a temp_id and reference those temp_ids (or existing
    object ids) in connections. Returns id_map (temp_id -> real id) and
    connection_ids. Prefer this over separate create + connect calls.

    Args:
        objects: List of {temp_id, action, params}; action is create_sticky_note, create_shape, create_frame or create_text
        connections: List of {from_id, to_id, options?}
    """
    result = await ctx.planner.execute_plan(objects, connections or [])
    return result.model_dump()


@tool
async def create_batch(ctx: Ctx, operations: list[PlanObject]) -> list[dict]:
    """Create many objects in one write. Returns [{temp_id, id}] in input order."""
    return await ctx.planner.create_batch(operations)


@tool
async def create_many(
    ctx: Ctx,
    object_type: str,
    count: int,
    layout: Layout = "grid",
    anchor: Point | None = None,
    container_id: str | None = None,
    item_size: Size | None = None,
    gap: float = 20,
    color: str | None = None,
    text: str | None = None,
) -> dict:
    """Create up to 200 identical objects in a procedural layout with one call.

    Args:
        object_type: sticky_note, rectangle, circle, star, text, or frame
        count: How many objects (1-200)
        layout: grid, row, column, circle, x_pattern, cross, diamond, triangle (ignored with container_id)
        anchor: World point the layout is centered on (defaults to the user's viewport center)
        container_id: Pack the objects into this frame/shape instead; it grows if needed
        item_size: {width, height} for shapes, text, and frames (sticky notes are always 160x120)
        gap: Spacing between items in pixels
        color: Palette color name
        text: Text for every item; "{n}" becomes the 1-based item number
    """
    center = (anchor.x, anchor.y) if anchor else ctx.default_anchor()
    ids = await ctx.planner.create_many(
        object_type,
        count,
        layout=layout,
        anchor=center,
        container_id=container_id,
        item_size=(item_size.width, item_size.height) if item_size else None,
        gap=gap,
        color=color,
        text=text,
    )
    return {"count": len(ids), "ids": ids}


@tool
async def arrange_within(
    ctx: Ctx,
    object_ids: list[str],
    container_id: str,
    layout: Literal["grid", "row", "column", "fit"] = "grid",
    gap: float = 20,
    resize_to_fit: bool = True,
    add_to_frame: bool = True,
) -> dict:
    """Re-position existing objects into a tidy grid centered inside a frame or shape.

    The container grows when the grid does not fit (resize_to_fit), and
    objects become members of the container when it is a frame (add_to_frame).
    """
    return await ctx.planner.arrange_within(
        object_ids, container_id, layout=layout, gap=gap,
        resize_to_fit=resize_to_fit, add_to_frame=add_to_frame,
    )


@tool
async def fit_frame_to_contents(ctx: Ctx, frame_id: str, padding: float = 40) -> dict:
    """Resize a frame to wrap all of its member objects plus padding and the title bar."""
    return await ctx.planner.fit_frame_to_contents(frame_id, padding)


PLANNING_TOOLS = [execute_plan, create_batch, create_many, arrange_within, fit_frame_to_contents]
