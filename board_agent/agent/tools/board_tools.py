"""Object tools: create, edit, layer, frame membership, delete and read.

Each tool is a thin shim over the command's MutationPlanner. The ToolContext
argument is injected by the dispatcher and hidden from the model.
"""

from typing import Annotated, Literal

from langchain_core.tools import InjectedToolArg, tool

from board_agent.agent.tools.utils import ToolContext
from board_agent.services.board_context import compress_board_state

Ctx = Annotated[ToolContext, InjectedToolArg]


@tool
async def create_sticky_note(ctx: Ctx, text: str, x: float, y: float, color: str = "yellow") -> str:
    """Create a 160x120 sticky note. Returns the new object id.

    Args:
        text: Text content
        x: Left edge in world coordinates
        y: Top edge in world coordinates
        color: yellow, green, blue, pink, lavender, mint, peach, grey (or a palette hex)
    """
    return await ctx.planner.create_sticky_note(text, x, y, color)


@tool
async def create_shape(
    ctx: Ctx,
    shape_type: Literal["rectangle", "circle", "star"],
    x: float,
    y: float,
    width: float = 150,
    height: float = 100,
    color: str = "blue",
) -> str:
    """Create a rectangle, circle, or star. Returns the new object id."""
    return await ctx.planner.create_shape(shape_type, x, y, width, height, color)


@tool
async def create_frame(ctx: Ctx, title: str, x: float, y: float, width: float = 320, height: float = 220) -> str:
    """Create a titled frame/container (default 320x220). Returns the new object id."""
    return await ctx.planner.create_frame(title, x, y, width, height)


@tool
async def create_text(
    ctx: Ctx, text: str, x: float, y: float, width: float = 240, height: float = 60, color: str = "grey"
) -> str:
    """Create a standalone text label (default 240x60). Returns the new object id."""
    return await ctx.planner.create_text(text, x, y, width, height, color)


@tool
async def move_object(ctx: Ctx, object_id: str, x: float, y: float) -> dict:
    """Move an existing object so its top-left corner is at (x, y)."""
    await ctx.planner.move_object(object_id, x, y)
    return {"object_id": object_id, "x": x, "y": y}


@tool
async def resize_object(ctx: Ctx, object_id: str, width: float, height: float) -> dict:
    """Resize an existing object."""
    await ctx.planner.resize_object(object_id, width, height)
    return {"object_id": object_id, "width": width, "height": height}


@tool
async def update_text(ctx: Ctx, object_id: str, new_text: str) -> dict:
    """Replace the text of a sticky note, text label, shape, or frame title."""
    await ctx.planner.update_text(object_id, new_text)
    return {"object_id": object_id, "text": new_text}


@tool
async def change_color(ctx: Ctx, object_id: str, color: str) -> dict:
    """Change an object's color. Color names are mapped onto the board palette."""
    hex_color = await ctx.planner.change_color(object_id, color)
    return {"object_id": object_id, "color": hex_color}


@tool
async def rotate_object(ctx: Ctx, object_id: str, degrees: float) -> dict:
    """Set an object's rotation in degrees (clockwise)."""
    await ctx.planner.rotate_object(object_id, degrees)
    return {"object_id": object_id, "rotation": degrees % 360}


@tool
async def set_layer(ctx: Ctx, object_id: str, send_to_back: bool = True) -> dict:
    """Send an object behind connection arrows and siblings (send_to_back=true) or bring it forward."""
    await ctx.planner.set_layer(object_id, send_to_back)
    return {"object_id": object_id, "sent_to_back": send_to_back}


@tool
async def add_to_frame(ctx: Ctx, object_ids: list[str], frame_id: str) -> dict:
    """Make objects members of a frame so they move with it."""
    await ctx.planner.add_to_frame(object_ids, frame_id)
    return {"frame_id": frame_id, "added": len(object_ids)}


@tool
async def remove_from_frame(ctx: Ctx, object_ids: list[str]) -> dict:
    """Detach objects from whatever frame they belong to."""
    await ctx.planner.remove_from_frame(object_ids)
    return {"removed": len(object_ids)}


@tool
async def delete_objects(ctx: Ctx, object_ids: list[str]) -> dict:
    """Delete objects by id. Connections attached to them are deleted too."""
    return await ctx.planner.delete_objects(object_ids)


@tool
async def get_board_state(ctx: Ctx) -> dict:
    """Get all current board objects and connections (ids, positions, sizes, text, colors)."""
    state = await ctx.planner.get_board_state()
    return compress_board_state(state["objects"], state["connections"])


BOARD_TOOLS = [
    create_sticky_note,
    create_shape,
    create_frame,
    create_text,
    move_object,
    resize_object,
    update_text,
    change_color,
    rotate_object,
    set_layer,
    add_to_frame,
    remove_from_frame,
    delete_objects,
    get_board_state,
]
