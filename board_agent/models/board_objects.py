from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ObjectType = Literal["stickyNote", "rectangle", "circle", "star", "frame", "text"]
ShapeType = Literal["rectangle", "circle", "star"]
AnchorName = Literal[
    "top", "bottom", "left", "right",
    "top-left", "top-right", "bottom-left", "bottom-right",
    "star-0", "star-1", "star-2", "star-3", "star-4",
]


class StoreRecord(BaseModel):
    """Base for records persisted under a board.

    Attributes are snake_case in Python and camelCase in the store, so the
    web client reads the same keys it writes.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class BoardObject(StoreRecord):
    """A positioned, sized, colored element on the canvas.

    Written by the mutation planner only. ``frame_id`` is stored as given and
    never checked against the referenced frame.
    """

    id: str
    type: ObjectType
    x: float
    y: float
    width: float
    height: float
    color: str
    text: str | None = None
    frame_id: str | None = None
    sent_to_back: bool | None = None
    rotation: float | None = None
    created_by: str
    created_at: int

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "id": "2f0c7d1e-6a43-4c1b-9b8e-0d2a5f3c9e11",
                    "type": "stickyNote",
                    "text": "User Research",
                    "x": 100,
                    "y": 100,
                    "width": 160,
                    "height": 120,
                    "color": "#f5e6ab",
                    "createdBy": "user-1",
                    "createdAt": 1760000000000,
                }
            ]
        }
    )


class Connection(StoreRecord):
    """A directed edge between two board objects."""

    id: str
    from_id: str
    to_id: str
    from_anchor: str
    to_anchor: str
    color: str
    points: list[float] | None = None
    created_by: str
    created_at: int


class AgentStatus(StoreRecord):
    """Live progress record shown to everyone viewing the board while a command runs."""

    phase: Literal["thinking", "calling_tools"]
    iteration: int | None = None
    max_iterations: int | None = None
    tools: list[str] | None = None
    updated_at: int
