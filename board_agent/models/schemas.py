from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Agent Command ────────────────────────────────────────────────────────────

class Viewport(_CamelModel):
    x: float
    y: float
    scale: float = Field(gt=0)
    width: float | None = None
    height: float | None = None


class AgentCommandRequest(_CamelModel):
    board_id: str
    command: str
    actor_id: str
    actor_name: str = ""
    selection: list[str] | None = None
    viewport: Viewport | None = None


class AgentCommandResponse(BaseModel):
    success: bool
    message: str


class AgentCommandResult(BaseModel):
    """Internal result of one command; the HTTP layer exposes success/message."""

    success: bool
    message: str
    route: str = "loop"  # "template" or "loop"
    tool_calls: int = 0
    iterations: int = 0
