"""Connector tools: pairwise, chained, sequenced, and batched."""

from typing import Annotated, Literal

from langchain_core.tools import InjectedToolArg, tool

from board_agent.agent.tools.utils import ToolContext
from board_agent.models.plan import ConnectorOptions, PlanConnection

Ctx = Annotated[ToolContext, InjectedToolArg]


@tool
async def create_connector(ctx: Ctx, from_id: str, to_id: str, options: ConnectorOptions | None = None) -> str:
    """Connect two existing objects with an arrow. Returns the connection id.

    Anchors are picked automatically from the objects' relative positions
    unless options.from_anchor / options.to_anchor are given.
    """
    return await ctx.planner.create_connector(from_id, to_id, options)


@tool
async def create_multi_point_connector(
    ctx: Ctx, object_ids: list[str], color: str | None = None, curved: bool = False
) -> list[str]:
    """Connect consecutive objects in the list, optionally with a curved midpoint. Returns connection ids."""
    return await ctx.planner.create_multi_point_connector(object_ids, color, curved)


@tool
async def connect_in_sequence(
    ctx: Ctx,
    object_ids: list[str],
    color: str | None = None,
    direction: Literal["forward", "bidirectional"] = "forward",
) -> list[str]:
    """Connect objects in order A→B→C. 'bidirectional' also adds C→B→A. Returns connection ids."""
    return await ctx.planner.connect_in_sequence(object_ids, color, direction)


@tool
async def connect_batch(ctx: Ctx, connections: list[PlanConnection]) -> list[str]:
    """Create many connections between existing objects in one write. Returns connection ids."""
    return await ctx.planner.connect_batch(connections)


CONNECTION_TOOLS = [create_connector, create_multi_point_connector, connect_in_sequence, connect_batch]
