from board_agent.models.schemas import Viewport
from board_agent.services.board_context import viewport_center
from board_agent.services.planner import MutationPlanner


class ToolContext:
    """Per-command state handed to every tool call.

    Injected at dispatch time, so it never appears in the schema the model sees.
    """

    def __init__(self, planner: MutationPlanner, viewport: Viewport | None = None):
        self.planner = planner
        self.viewport = viewport

    @property
    def board_id(self) -> str:
        return self.planner.board_id

    def default_anchor(self) -> tuple[float, float]:
        return viewport_center(self.viewport)
