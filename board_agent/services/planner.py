"""Mutation planner: turns create/connect/arrange requests into atomic store writes.

Every public call performs at most one store read for geometry it cannot
find in the command's GeometryCache, then exactly one multi-path update, so
either all objects and connections of a call appear together or none do.
"""

import asyncio
import logging
import math
import time
import uuid
from typing import Any, Mapping

from board_agent.errors import InvalidPlan, NotFound
from board_agent.models.board_objects import AgentStatus, BoardObject, Connection
from board_agent.models.plan import ConnectorOptions, PlanConnection, PlanObject, PlanResult, WaypointXY
from board_agent.services.geometry import (
    ANCHOR_NAMES,
    DEFAULT_CONNECTION_COLOR,
    FRAME_COLOR,
    BBox,
    auto_select_anchors,
    flatten_waypoints,
    map_color_name_to_hex,
)
from board_agent.services.geometry_cache import GeometryCache
from board_agent.services.layout_service import center_positions, compute_layout_positions
from board_agent.services.store import (
    Store,
    connection_path,
    connections_path,
    object_path,
    objects_path,
    status_path,
)

logger = logging.getLogger(__name__)

STICKY_SIZE = (160, 120)
DEFAULT_SIZES = {
    "create_sticky_note": STICKY_SIZE,
    "create_shape": (150, 100),
    "create_frame": (320, 220),
    "create_text": (240, 60),
}
SHAPE_TYPES = ("rectangle", "circle", "star")

FRAME_TITLE_BAR = 50
CONTAINER_PADDING = 20
MAX_CREATE_MANY = 200

_KIND_ALIASES = {
    "sticky": ("create_sticky_note", None),
    "sticky_note": ("create_sticky_note", None),
    "stickynote": ("create_sticky_note", None),
    "note": ("create_sticky_note", None),
    "rectangle": ("create_shape", "rectangle"),
    "rect": ("create_shape", "rectangle"),
    "circle": ("create_shape", "circle"),
    "star": ("create_shape", "star"),
    "text": ("create_text", None),
    "frame": ("create_frame", None),
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def _num(params: Mapping[str, Any], key: str, default: float) -> float:
    value = params.get(key)
    if value is None or value == "":
        return float(default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidPlan(f"Parameter '{key}' must be a number, got {value!r}")


class MutationPlanner:
    """Planner bound to one board, one actor and one command's geometry cache."""

    def __init__(
        self,
        store: Store,
        board_id: str,
        actor_id: str,
        cache: GeometryCache | None = None,
    ) -> None:
        self.store = store
        self.board_id = board_id
        self.actor_id = actor_id
        self.cache = cache if cache is not None else GeometryCache()

    # ── Record builders ─────────────────────────────────────────────────────

    def _build_object(self, action: str, params: Mapping[str, Any]) -> BoardObject:
        if action not in DEFAULT_SIZES:
            raise InvalidPlan(f"Unknown plan action: {action}")

        default_w, default_h = DEFAULT_SIZES[action]
        fields: dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "x": _num(params, "x", 0),
            "y": _num(params, "y", 0),
            "created_by": self.actor_id,
            "created_at": _now_ms(),
        }

        if action == "create_sticky_note":
            # Sticky notes are always the same size on the client.
            fields.update(
                type="stickyNote",
                text=str(params.get("text") or ""),
                width=default_w,
                height=default_h,
                color=map_color_name_to_hex(params.get("color") or "yellow"),
            )
        elif action == "create_shape":
            shape_type = str(params.get("type") or "rectangle")
            if shape_type not in SHAPE_TYPES:
                raise InvalidPlan(f"Unknown shape type: {shape_type}")
            fields.update(
                type=shape_type,
                width=_num(params, "width", default_w),
                height=_num(params, "height", default_h),
                color=map_color_name_to_hex(params.get("color") or "blue"),
            )
            if params.get("text"):
                fields["text"] = str(params["text"])
        elif action == "create_frame":
            fields.update(
                type="frame",
                text=str(params.get("title") or params.get("text") or ""),
                width=_num(params, "width", default_w),
                height=_num(params, "height", default_h),
                color=FRAME_COLOR,
            )
        else:
            fields.update(
                type="text",
                text=str(params.get("text") or ""),
                width=_num(params, "width", default_w),
                height=_num(params, "height", default_h),
                color=map_color_name_to_hex(params.get("color") or "grey"),
            )

        # frame_id is stored as given; the referenced frame is not looked up.
        if params.get("frame_id"):
            fields["frame_id"] = str(params["frame_id"])
        if params.get("rotation") is not None:
            fields["rotation"] = _num(params, "rotation", 0) % 360
        if params.get("sent_to_back"):
            fields["sent_to_back"] = True

        return BoardObject(**fields)

    def _build_connection(
        self,
        from_id: str,
        to_id: str,
        from_box: BBox,
        to_box: BBox,
        options: ConnectorOptions | None,
    ) -> Connection:
        options = options or ConnectorOptions()
        auto_from, auto_to = auto_select_anchors(from_box, to_box)
        from_anchor = options.from_anchor or auto_from
        to_anchor = options.to_anchor or auto_to
        for anchor in (from_anchor, to_anchor):
            if anchor not in ANCHOR_NAMES:
                raise InvalidPlan(f"Unknown anchor: {anchor}")

        return Connection(
            id=str(uuid.uuid4()),
            from_id=from_id,
            to_id=to_id,
            from_anchor=from_anchor,
            to_anchor=to_anchor,
            color=map_color_name_to_hex(options.color) if options.color else DEFAULT_CONNECTION_COLOR,
            points=flatten_waypoints(options.points, options.points_relative),
            created_by=self.actor_id,
            created_at=_now_ms(),
        )

    # ── Geometry lookup ─────────────────────────────────────────────────────

    async def _resolve_geometry(
        self, object_ids: set[str], known: Mapping[str, BBox] | None = None
    ) -> dict[str, BBox]:
        """Find boxes for ``object_ids``; reads the objects node once, only on a miss."""
        known = known or {}
        boxes: dict[str, BBox] = {}
        unknown: set[str] = set()
        for oid in object_ids:
            box = known.get(oid) or self.cache.get(oid)
            if box is None:
                unknown.add(oid)
            else:
                boxes[oid] = box

        if unknown:
            logger.debug("Reading board %s for %d unknown objects", self.board_id, len(unknown))
            raw = await self.store.get(objects_path(self.board_id)) or {}
            for oid in unknown:
                record = raw.get(oid)
                if isinstance(record, Mapping):
                    boxes[oid] = self.cache.update_from_record(oid, record)
        return boxes

    async def _require_boxes(self, object_ids: list[str]) -> dict[str, BBox]:
        boxes = await self._resolve_geometry(set(object_ids))
        for oid in object_ids:
            if oid not in boxes:
                raise NotFound(f"Object not found: {oid}")
        return boxes

    # ── Plans and batches ───────────────────────────────────────────────────

    async def execute_plan(
        self,
        objects: list[PlanObject],
        connections: list[PlanConnection],
    ) -> PlanResult:
        """Create objects and connections in one atomic write.

        Connection endpoints may name temp ids from ``objects`` or existing
        object ids. Existing ids missing from the cache cost one read of the
        board's objects; anything still unresolved after that fails the whole
        call before anything is written. Repeating a temp id in ``objects`` is
        rejected the same way.
        """
        updates: dict[str, Any] = {}
        id_map: dict[str, str] = {}
        created: dict[str, BBox] = {}

        seen: set[str] = set()
        for op in objects:
            if op.temp_id in seen:
                raise InvalidPlan(f"Duplicate temp_id: {op.temp_id}")
            seen.add(op.temp_id)

        for op in objects:
            record = self._build_object(op.action, op.params)
            updates[object_path(self.board_id, record.id)] = record.to_store()
            box = BBox(record.x, record.y, record.width, record.height)
            created[record.id] = box
            self.cache.set(record.id, box)
            id_map[op.temp_id] = record.id

        resolved = [
            (id_map.get(conn.from_id, conn.from_id), id_map.get(conn.to_id, conn.to_id), conn.options)
            for conn in connections
        ]
        endpoint_ids = {oid for from_id, to_id, _ in resolved for oid in (from_id, to_id)}
        boxes = await self._resolve_geometry(endpoint_ids, created) if endpoint_ids else {}

        connection_ids: list[str] = []
        for from_id, to_id, options in resolved:
            for oid in (from_id, to_id):
                if oid not in boxes:
                    raise NotFound(f"Object not found: {oid}")
            connection = self._build_connection(from_id, to_id, boxes[from_id], boxes[to_id], options)
            updates[connection_path(self.board_id, connection.id)] = connection.to_store()
            connection_ids.append(connection.id)

        if updates:
            await self.store.update(updates)
            logger.info(
                "Plan written to board %s: %d objects, %d connections",
                self.board_id, len(id_map), len(connection_ids),
            )
        return PlanResult(id_map=id_map, connection_ids=connection_ids)

    async def create_batch(self, operations: list[PlanObject]) -> list[dict[str, str]]:
        result = await self.execute_plan(operations, [])
        return [{"temp_id": op.temp_id, "id": result.id_map[op.temp_id]} for op in operations]

    async def connect_batch(self, connections: list[PlanConnection]) -> list[str]:
        result = await self.execute_plan([], connections)
        return result.connection_ids

    # ── Single objects ──────────────────────────────────────────────────────

    async def _create_one(self, action: str, params: dict[str, Any]) -> str:
        result = await self.execute_plan([PlanObject(temp_id="new", action=action, params=params)], [])
        return result.id_map["new"]

    async def create_sticky_note(self, text: str, x: float, y: float, color: str = "yellow") -> str:
        return await self._create_one("create_sticky_note", {"text": text, "x": x, "y": y, "color": color})

    async def create_shape(
        self, shape_type: str, x: float, y: float, width: float, height: float, color: str = "blue"
    ) -> str:
        return await self._create_one(
            "create_shape",
            {"type": shape_type, "x": x, "y": y, "width": width, "height": height, "color": color},
        )

    async def create_frame(self, title: str, x: float, y: float, width: float = 320, height: float = 220) -> str:
        return await self._create_one(
            "create_frame", {"title": title, "x": x, "y": y, "width": width, "height": height}
        )

    async def create_text(
        self, text: str, x: float, y: float, width: float = 240, height: float = 60, color: str = "grey"
    ) -> str:
        return await self._create_one(
            "create_text",
            {"text": text, "x": x, "y": y, "width": width, "height": height, "color": color},
        )

    # ── Connections ─────────────────────────────────────────────────────────

    async def create_connector(self, from_id: str, to_id: str, options: ConnectorOptions | None = None) -> str:
        result = await self.execute_plan([], [PlanConnection(from_id=from_id, to_id=to_id, options=options)])
        return result.connection_ids[0]

    async def create_multi_point_connector(
        self, object_ids: list[str], color: str | None = None, curved: bool = False
    ) -> list[str]:
        if len(object_ids) < 2:
            raise InvalidPlan("Need at least 2 objects to connect")

        boxes = await self._require_boxes(object_ids)
        connections = []
        for from_id, to_id in zip(object_ids, object_ids[1:]):
            points = None
            if curved:
                (fx, fy), (tx, ty) = boxes[from_id].center, boxes[to_id].center
                points = [WaypointXY(x=(fx + tx) / 2, y=(fy + ty) / 2 + 30)]
            connections.append(PlanConnection(
                from_id=from_id, to_id=to_id, options=ConnectorOptions(color=color, points=points),
            ))
        return await self.connect_batch(connections)

    async def connect_in_sequence(
        self, object_ids: list[str], color: str | None = None, direction: str = "forward"
    ) -> list[str]:
        """Connect A→B→C...; ``bidirectional`` adds the reverse chain, 2·(K−1) edges in total."""
        if len(object_ids) < 2:
            raise InvalidPlan("Need at least 2 objects to connect")
        if direction not in ("forward", "bidirectional"):
            raise InvalidPlan(f"Unknown direction: {direction}")

        options = ConnectorOptions(color=color)
        pairs = list(zip(object_ids, object_ids[1:]))
        if direction == "bidirectional":
            reversed_ids = object_ids[::-1]
            pairs += list(zip(reversed_ids, reversed_ids[1:]))
        return await self.connect_batch(
            [PlanConnection(from_id=a, to_id=b, options=options) for a, b in pairs]
        )

    # ── Procedural creation and packing ─────────────────────────────────────

    @staticmethod
    def _resolve_kind(object_type: str) -> tuple[str, str | None]:
        key = object_type.replace("-", "_").replace(" ", "_").lower()
        if key not in _KIND_ALIASES:
            key = key.replace("_", "")
        if key not in _KIND_ALIASES:
            raise InvalidPlan(f"Unknown object type: {object_type}")
        return _KIND_ALIASES[key]

    async def create_many(
        self,
        object_type: str,
        count: int,
        layout: str = "grid",
        anchor: tuple[float, float] | None = None,
        container_id: str | None = None,
        item_size: tuple[float, float] | None = None,
        gap: float = 20,
        color: str | None = None,
        text: str | None = None,
    ) -> list[str]:
        """Create ``count`` objects laid out procedurally, written in one atomic call.

        With ``container_id`` the items are packed into a dense grid inside the
        container, which grows (one update) when the grid would overflow.
        Otherwise the layout is centered on ``anchor``. ``{n}`` in ``text`` is
        replaced with the 1-based item number.
        """
        if not 1 <= count <= MAX_CREATE_MANY:
            raise InvalidPlan(f"count must be between 1 and {MAX_CREATE_MANY}, got {count}")

        action, shape_type = self._resolve_kind(object_type)
        if action == "create_sticky_note":
            item_w, item_h = STICKY_SIZE
        else:
            item_w, item_h = item_size or DEFAULT_SIZES[action]

        frame_id = None
        if container_id:
            positions, frame_id = await self._pack_into_container(container_id, count, item_w, item_h, gap)
        else:
            cx, cy = anchor if anchor is not None else (500, 400)
            raw = compute_layout_positions(layout, count, item_w, item_h, gap)
            positions = center_positions(raw, item_w, item_h, cx, cy)

        ops = []
        for i, (x, y) in enumerate(positions):
            params: dict[str, Any] = {"x": x, "y": y, "width": item_w, "height": item_h}
            if shape_type:
                params["type"] = shape_type
            if color:
                params["color"] = color
            if text:
                params["text" if action != "create_frame" else "title"] = text.replace("{n}", str(i + 1))
            if frame_id:
                params["frame_id"] = frame_id
            ops.append(PlanObject(temp_id=f"item_{i}", action=action, params=params))

        result = await self.execute_plan(ops, [])
        return [result.id_map[op.temp_id] for op in ops]

    async def _pack_into_container(
        self, container_id: str, count: int, item_w: float, item_h: float, gap: float
    ) -> tuple[list[tuple[float, float]], str | None]:
        path = object_path(self.board_id, container_id)
        record = await self.store.get(path)
        if not isinstance(record, Mapping):
            raise NotFound(f"Container not found: {container_id}")
        box = self.cache.update_from_record(container_id, record)
        is_frame = record.get("type") == "frame"

        top = CONTAINER_PADDING + (FRAME_TITLE_BAR if is_frame else 0)
        interior_w = box.width - 2 * CONTAINER_PADDING
        cols = max(1, int((interior_w + gap) // (item_w + gap)))
        rows = math.ceil(count / cols)
        needed_w = 2 * CONTAINER_PADDING + cols * item_w + (cols - 1) * gap
        needed_h = top + rows * item_h + (rows - 1) * gap + CONTAINER_PADDING

        growth: dict[str, Any] = {}
        if needed_w > box.width:
            growth[f"{path}/width"] = needed_w
            box.width = needed_w
        if needed_h > box.height:
            growth[f"{path}/height"] = needed_h
            box.height = needed_h
        if growth:
            await self.store.update(growth)
            self.cache.set(container_id, box)
            logger.info("Grew container %s to %dx%d", container_id, box.width, box.height)

        positions = [
            (
                box.x + CONTAINER_PADDING + (i % cols) * (item_w + gap),
                box.y + top + (i // cols) * (item_h + gap),
            )
            for i in range(count)
        ]
        return positions, container_id if is_frame else None

    async def arrange_within(
        self,
        object_ids: list[str],
        container_id: str,
        layout: str = "grid",
        gap: float = 20,
        resize_to_fit: bool = True,
        add_to_frame: bool = True,
    ) -> dict[str, Any]:
        """Re-position existing objects in a grid centered inside a container.

        The container and all items are read in one parallel batch. Items that
        cannot be read are skipped without shifting the others. Positions,
        frame membership (frames only) and any container resize go out in one
        atomic update.
        """
        if not object_ids:
            raise InvalidPlan("No objects to arrange")

        container_path = object_path(self.board_id, container_id)
        container, *item_records = await asyncio.gather(
            self.store.get(container_path),
            *(self.store.get(object_path(self.board_id, oid)) for oid in object_ids),
            return_exceptions=True,
        )
        if isinstance(container, BaseException):
            raise container
        if not isinstance(container, Mapping):
            raise NotFound(f"Container not found: {container_id}")

        items: list[tuple[str, BBox]] = []
        missing: list[str] = []
        for oid, record in zip(object_ids, item_records):
            if isinstance(record, BaseException):
                logger.warning("Could not read object %s for arrange: %s", oid, record)
                missing.append(oid)
            elif not isinstance(record, Mapping):
                missing.append(oid)
            else:
                items.append((oid, self.cache.update_from_record(oid, record)))
        if not items:
            raise NotFound("None of the objects to arrange exist")

        box = self.cache.update_from_record(container_id, container)
        is_frame = container.get("type") == "frame"
        title = FRAME_TITLE_BAR if is_frame else 0
        n = len(items)
        avg_w = sum(b.width for _, b in items) / n
        avg_h = sum(b.height for _, b in items) / n

        if layout == "grid":
            cols = math.ceil(math.sqrt(n))
        elif layout == "row":
            cols = n
        elif layout == "column":
            cols = 1
        elif layout == "fit":
            cols = max(1, int((box.width - 2 * CONTAINER_PADDING + gap) // (avg_w + gap)))
        else:
            raise InvalidPlan(f"Unknown arrange layout: {layout}")
        cols = min(cols, n)
        rows = math.ceil(n / cols)

        grid_w = cols * avg_w + (cols - 1) * gap
        grid_h = rows * avg_h + (rows - 1) * gap
        updates: dict[str, Any] = {}

        needed_w = grid_w + 2 * CONTAINER_PADDING
        needed_h = grid_h + 2 * CONTAINER_PADDING + title
        resized = False
        if resize_to_fit and (needed_w > box.width or needed_h > box.height):
            box.width = max(box.width, needed_w)
            box.height = max(box.height, needed_h)
            updates[f"{container_path}/width"] = round(box.width)
            updates[f"{container_path}/height"] = round(box.height)
            self.cache.set(container_id, box)
            resized = True

        inner_x = box.x + CONTAINER_PADDING
        inner_y = box.y + title + CONTAINER_PADDING
        inner_w = box.width - 2 * CONTAINER_PADDING
        inner_h = box.height - title - 2 * CONTAINER_PADDING
        start_x = max(inner_x, inner_x + (inner_w - grid_w) / 2)
        start_y = max(inner_y, inner_y + (inner_h - grid_h) / 2)

        for k, (oid, item) in enumerate(items):
            x = round(start_x + (k % cols) * (avg_w + gap) + (avg_w - item.width) / 2)
            y = round(start_y + (k // cols) * (avg_h + gap) + (avg_h - item.height) / 2)
            path = object_path(self.board_id, oid)
            updates[f"{path}/x"] = x
            updates[f"{path}/y"] = y
            if add_to_frame and is_frame:
                updates[f"{path}/frameId"] = container_id
            self.cache.set(oid, BBox(x, y, item.width, item.height))

        await self.store.update(updates)
        return {"arranged": n, "missing": missing, "container_resized": resized}

    async def fit_frame_to_contents(self, frame_id: str, padding: float = 40) -> dict[str, float]:
        """Shrink or grow a frame around its children, leaving room for the title bar."""
        raw = await self.store.get(objects_path(self.board_id)) or {}
        self.cache.seed(raw)
        if not isinstance(raw.get(frame_id), Mapping):
            raise NotFound(f"Frame not found: {frame_id}")

        children = [
            BBox.from_record(record)
            for oid, record in raw.items()
            if oid != frame_id and isinstance(record, Mapping) and record.get("frameId") == frame_id
        ]
        if not children:
            raise InvalidPlan(f"Frame {frame_id} has no children to fit")

        min_x = min(b.x for b in children)
        min_y = min(b.y for b in children)
        max_x = max(b.right for b in children)
        max_y = max(b.bottom for b in children)
        frame = BBox(
            x=min_x - padding,
            y=min_y - padding - FRAME_TITLE_BAR,
            width=max_x - min_x + 2 * padding,
            height=max_y - min_y + 2 * padding + FRAME_TITLE_BAR,
        )

        path = object_path(self.board_id, frame_id)
        await self.store.update({
            f"{path}/x": frame.x,
            f"{path}/y": frame.y,
            f"{path}/width": frame.width,
            f"{path}/height": frame.height,
        })
        self.cache.set(frame_id, frame)
        return {"x": frame.x, "y": frame.y, "width": frame.width, "height": frame.height}

    # ── Edits ───────────────────────────────────────────────────────────────

    async def _update_fields(self, object_id: str, fields: dict[str, Any]) -> BBox:
        box = (await self._require_boxes([object_id]))[object_id]
        path = object_path(self.board_id, object_id)
        await self.store.update({f"{path}/{key}": value for key, value in fields.items()})
        return box

    async def move_object(self, object_id: str, x: float, y: float) -> None:
        box = await self._update_fields(object_id, {"x": x, "y": y})
        self.cache.set(object_id, BBox(x, y, box.width, box.height))

    async def resize_object(self, object_id: str, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise InvalidPlan("width and height must be positive")
        box = await self._update_fields(object_id, {"width": width, "height": height})
        self.cache.set(object_id, BBox(box.x, box.y, width, height))

    async def update_text(self, object_id: str, new_text: str) -> None:
        await self._update_fields(object_id, {"text": new_text})

    async def change_color(self, object_id: str, color: str) -> str:
        hex_color = map_color_name_to_hex(color)
        await self._update_fields(object_id, {"color": hex_color})
        return hex_color

    async def rotate_object(self, object_id: str, degrees: float) -> None:
        await self._update_fields(object_id, {"rotation": degrees % 360})

    async def set_layer(self, object_id: str, send_to_back: bool) -> None:
        await self._update_fields(object_id, {"sentToBack": send_to_back})

    async def add_to_frame(self, object_ids: list[str], frame_id: str) -> None:
        """Set frame membership. The frame itself is not checked, only the members."""
        if not object_ids:
            return
        await self._require_boxes(object_ids)
        await self.store.update({
            f"{object_path(self.board_id, oid)}/frameId": frame_id for oid in object_ids
        })

    async def remove_from_frame(self, object_ids: list[str]) -> None:
        if not object_ids:
            return
        await self._require_boxes(object_ids)
        await self.store.update({
            f"{object_path(self.board_id, oid)}/frameId": None for oid in object_ids
        })

    async def delete_objects(self, object_ids: list[str]) -> dict[str, int]:
        """Delete objects and every connection touching them in one atomic update."""
        if not object_ids:
            return {"deleted": 0, "connectionsRemoved": 0}

        updates: dict[str, Any] = {object_path(self.board_id, oid): None for oid in object_ids}
        doomed = set(object_ids)
        connections = await self.store.get(connections_path(self.board_id)) or {}
        removed = 0
        for conn_id, conn in connections.items():
            if isinstance(conn, Mapping) and (conn.get("fromId") in doomed or conn.get("toId") in doomed):
                updates[connection_path(self.board_id, conn_id)] = None
                removed += 1

        await self.store.update(updates)
        for oid in object_ids:
            self.cache.discard(oid)
        return {"deleted": len(object_ids), "connectionsRemoved": removed}

    # ── Board state and live status ─────────────────────────────────────────

    async def get_board_state(self) -> dict[str, dict]:
        objects, connections = await asyncio.gather(
            self.store.get(objects_path(self.board_id)),
            self.store.get(connections_path(self.board_id)),
        )
        objects = objects or {}
        self.cache.seed(objects)
        return {"objects": objects, "connections": connections or {}}

    async def write_agent_status(
        self,
        phase: str,
        iteration: int | None = None,
        max_iterations: int | None = None,
        tools: list[str] | None = None,
    ) -> None:
        status = AgentStatus(
            phase=phase,
            iteration=iteration,
            max_iterations=max_iterations,
            tools=tools,
            updated_at=_now_ms(),
        )
        await self.store.update({status_path(self.board_id): status.to_store()})

    async def clear_agent_status(self) -> None:
        await self.store.remove(status_path(self.board_id))
