"""Compressed, optionally filtered view of a board for the model's context."""

from typing import Mapping

from board_agent.models.schemas import Viewport
from board_agent.services.geometry import BBox

# Reference canvas size for the viewport-to-world rectangle when the client omits it.
VIEWPORT_CANVAS_WIDTH = 1200
VIEWPORT_CANVAS_HEIGHT = 800

COMPRESS_OBJECT_KEYS = ("id", "type", "x", "y", "width", "height", "text", "color", "frameId")
COMPRESS_CONNECTION_KEYS = ("id", "fromId", "toId", "fromAnchor", "toAnchor", "color", "points")


def _pick(record: Mapping, keys: tuple[str, ...]) -> dict:
    return {k: record[k] for k in keys if record.get(k) is not None}


def compress_board_state(objects: Mapping, connections: Mapping) -> dict[str, dict]:
    return {
        "objects": {
            oid: _pick(obj, COMPRESS_OBJECT_KEYS)
            for oid, obj in objects.items()
            if isinstance(obj, Mapping)
        },
        "connections": {
            cid: _pick(conn, COMPRESS_CONNECTION_KEYS)
            for cid, conn in connections.items()
            if isinstance(conn, Mapping)
        },
    }


def viewport_rect(viewport: Viewport) -> BBox:
    width = viewport.width or VIEWPORT_CANVAS_WIDTH
    height = viewport.height or VIEWPORT_CANVAS_HEIGHT
    return BBox(
        x=-viewport.x / viewport.scale,
        y=-viewport.y / viewport.scale,
        width=width / viewport.scale,
        height=height / viewport.scale,
    )


def viewport_center(viewport: Viewport | None) -> tuple[float, float]:
    """World coordinates of the middle of the user's screen, (500, 400) without a viewport."""
    if viewport is None:
        return (500, 400)
    cx, cy = viewport_rect(viewport).center
    return (round(cx), round(cy))


def _close_over_connections(ids: set[str], connections: Mapping) -> set[str]:
    """Add the far endpoint of every connection touching ``ids`` (one hop only)."""
    closed = set(ids)
    for conn in connections.values():
        if not isinstance(conn, Mapping):
            continue
        from_id, to_id = conn.get("fromId"), conn.get("toId")
        if from_id and to_id and (from_id in ids or to_id in ids):
            closed.update((from_id, to_id))
    return closed


def filter_board_state(
    objects: Mapping,
    connections: Mapping,
    selection: list[str] | None = None,
    viewport: Viewport | None = None,
) -> dict[str, dict]:
    """Compress the board, narrowed to the selection or else the viewport.

    A non-empty selection wins over the viewport. Either way, objects at the
    other end of a connection touching a kept object are pulled in, and only
    connections with both endpoints kept are returned.
    """
    if selection:
        keep = _close_over_connections(set(selection), connections)
    elif viewport is not None:
        visible = viewport_rect(viewport)
        in_view = {
            oid for oid, obj in objects.items()
            if isinstance(obj, Mapping) and BBox.from_record(obj, 0, 0).intersects(visible)
        }
        keep = _close_over_connections(in_view, connections)
    else:
        return compress_board_state(objects, connections)

    kept_objects = {oid: objects[oid] for oid in keep if oid in objects}
    kept_connections = {
        cid: conn for cid, conn in connections.items()
        if isinstance(conn, Mapping) and conn.get("fromId") in keep and conn.get("toId") in keep
    }
    return compress_board_state(kept_objects, kept_connections)
