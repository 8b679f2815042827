"""In-flight plan structures. Never persisted."""

from typing import Any

from pydantic import BaseModel, Field


class WaypointXY(BaseModel):
    x: float
    y: float


class ConnectorOptions(BaseModel):
    from_anchor: str | None = Field(
        default=None,
        description="top, bottom, left, right, top-left, top-right, bottom-left, bottom-right, star-0..star-4",
    )
    to_anchor: str | None = Field(default=None, description="Same names as from_anchor")
    color: str | None = Field(default=None, description="Palette color name or hex")
    points: list[WaypointXY] | None = Field(default=None, description="Waypoints for bent paths")
    points_relative: bool = Field(
        default=False,
        description="If true, points[0] is absolute and each later point is an offset from the previous one",
    )


class PlanObject(BaseModel):
    """One object to create, keyed by a caller-chosen temporary id."""

    temp_id: str = Field(description="Caller-chosen id, usable as a connection endpoint in the same plan")
    action: str = Field(description="create_sticky_note | create_shape | create_frame | create_text")
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="x, y, text, color; shapes also take type (rectangle|circle|star), width, height; "
        "frames take title, width, height",
    )


class PlanConnection(BaseModel):
    """One connection to create. Endpoints are temp ids from the same plan or existing object ids."""

    from_id: str
    to_id: str
    options: ConnectorOptions | None = None


class PlanResult(BaseModel):
    id_map: dict[str, str]
    connection_ids: list[str]


class Size(BaseModel):
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class Point(BaseModel):
    x: float
    y: float
