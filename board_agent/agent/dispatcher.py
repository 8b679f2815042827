"""Maps a tool name from the model onto the matching catalog tool.

The catalog is closed: every name resolves to exactly one tool whose pydantic
schema validates the arguments, and anything else is rejected explicitly.
"""

import logging
from typing import Any

from langchain_core.tools import BaseTool

from board_agent.agent.tools.board_tools import BOARD_TOOLS
from board_agent.agent.tools.connection_tools import CONNECTION_TOOLS
from board_agent.agent.tools.planning_tools import PLANNING_TOOLS
from board_agent.agent.tools.utils import ToolContext
from board_agent.errors import InvalidPlan

logger = logging.getLogger(__name__)

ALL_TOOLS: list[BaseTool] = BOARD_TOOLS + CONNECTION_TOOLS + PLANNING_TOOLS
TOOLS_BY_NAME: dict[str, BaseTool] = {t.name: t for t in ALL_TOOLS}


async def dispatch_tool(name: str, args: Any, ctx: ToolContext) -> Any:
    """Validate ``args`` against the tool's schema and run it.

    Raises:
        InvalidPlan: unknown tool name or a non-object argument payload
        pydantic.ValidationError: arguments that do not match the schema
    """
    selected = TOOLS_BY_NAME.get(name)
    if selected is None:
        raise InvalidPlan(f"Unknown tool: {name}")
    if not isinstance(args, dict):
        raise InvalidPlan(f"Arguments for {name} must be a JSON object")
    if "ctx" in args:
        raise InvalidPlan("'ctx' is not a tool argument")

    logger.debug("Dispatching %s on board %s", name, ctx.board_id)
    return await selected.ainvoke({**args, "ctx": ctx})
