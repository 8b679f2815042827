"""Layout position generators and board-layout summaries.

The generators are deterministic: the same (layout, count, size, gap) always
yields the same positions, which is what lets the planner and the templates
compute every coordinate before a single store write.
"""

import math
from typing import Iterable, Mapping

from board_agent.errors import InvalidPlan
from board_agent.services.geometry import BBox

LAYOUTS = ("grid", "row", "column", "circle", "x_pattern", "cross", "diamond", "triangle")

MIN_CIRCLE_RADIUS = 150


def _cells_to_positions(
    cells: Iterable[tuple[float, float]], item_w: float, item_h: float, gap: float
) -> list[tuple[float, float]]:
    step_x = item_w + gap
    step_y = item_h + gap
    return [(col * step_x, row * step_y) for col, row in cells]


def _grid_cells(count: int) -> list[tuple[int, int]]:
    cols = math.ceil(math.sqrt(count))
    return [(i % cols, i // cols) for i in range(count)]


def _x_pattern_cells(count: int) -> list[tuple[int, int]]:
    n = math.ceil((count + 1) / 2)
    cells = [(i, i) for i in range(n)]
    seen = set(cells)
    for i in range(n):
        cell = (n - 1 - i, i)
        if cell not in seen:
            seen.add(cell)
            cells.append(cell)
    return cells


def _cross_cells(count: int) -> list[tuple[int, int]]:
    arm = max(1, math.ceil((count - 1) / 4))
    cells = [(arm + d, arm) for d in range(-arm, arm + 1)]
    # Vertical bar shares the center cell with the horizontal one.
    cells += [(arm, arm + d) for d in range(-arm, arm + 1) if d != 0]
    return cells


def _diamond_cells(count: int) -> list[tuple[float, int]]:
    radius = round(math.sqrt(count / 2))
    cells = []
    for r in range(-radius, radius + 1):
        half = radius - abs(r)
        for c in range(-half, half + 1):
            cells.append((c + radius, r + radius))
    return cells


def _triangle_cells(count: int) -> list[tuple[float, int]]:
    rows = math.ceil((-1 + math.sqrt(1 + 8 * count)) / 2)
    cells = []
    remaining = count
    for r in range(rows):
        in_row = min(r + 1, remaining)
        offset = (rows - in_row) / 2
        cells += [(offset + c, r) for c in range(in_row)]
        remaining -= in_row
        if remaining <= 0:
            break
    return cells


def _circle_positions(count: int, item_w: float, item_h: float, gap: float) -> list[tuple[float, float]]:
    radius = max(
        MIN_CIRCLE_RADIUS,
        math.ceil(count * (max(item_w, item_h) + gap) / (2 * math.pi)),
    )
    positions = []
    for i in range(count):
        angle = -math.pi / 2 + i * (2 * math.pi / count)
        positions.append((
            round(radius + radius * math.cos(angle) - item_w / 2),
            round(radius + radius * math.sin(angle) - item_h / 2),
        ))
    return positions


def compute_layout_positions(
    layout: str,
    count: int,
    item_w: float,
    item_h: float,
    gap: float,
) -> list[tuple[float, float]]:
    """Return ``count`` top-left positions for ``layout``, relative to (0, 0).

    Args:
        layout: One of grid, row, column, circle, x_pattern, cross, diamond, triangle
        count: Number of items to place
        item_w: Item width in pixels
        item_h: Item height in pixels
        gap: Spacing between neighbouring items
    """
    if count <= 0:
        return []

    if layout == "grid":
        cells = _grid_cells(count)
    elif layout == "row":
        cells = [(i, 0) for i in range(count)]
    elif layout == "column":
        cells = [(0, i) for i in range(count)]
    elif layout == "circle":
        return _circle_positions(count, item_w, item_h, gap)
    elif layout == "x_pattern":
        cells = _x_pattern_cells(count)
    elif layout == "cross":
        cells = _cross_cells(count)
    elif layout == "diamond":
        cells = _diamond_cells(count)
    elif layout == "triangle":
        cells = _triangle_cells(count)
    else:
        raise InvalidPlan(f"Unknown layout: {layout}")

    return _cells_to_positions(cells[:count], item_w, item_h, gap)


def center_positions(
    points: list[tuple[float, float]],
    item_w: float,
    item_h: float,
    target_cx: float,
    target_cy: float,
) -> list[tuple[float, float]]:
    """Translate positions so the bounding box of all footprints is centered on the target."""
    if not points:
        return []
    min_x = min(p[0] for p in points)
    min_y = min(p[1] for p in points)
    max_x = max(p[0] for p in points) + item_w
    max_y = max(p[1] for p in points) + item_h
    dx = target_cx - (min_x + max_x) / 2
    dy = target_cy - (min_y + max_y) / 2
    return [(round(x + dx), round(y + dy)) for x, y in points]


def get_board_bounds(objects: Iterable[Mapping]) -> BBox | None:
    """Bounding box of all objects, or None for an empty board."""
    boxes = [BBox.from_record(obj) for obj in objects]
    if not boxes:
        return None
    min_x = min(b.x for b in boxes)
    min_y = min(b.y for b in boxes)
    max_x = max(b.right for b in boxes)
    max_y = max(b.bottom for b in boxes)
    return BBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


def describe_board_layout(objects: list[Mapping]) -> str:
    """Generate a human-readable description of where objects sit and where space is free."""
    bounds = get_board_bounds(objects)
    if bounds is None:
        return "The visible board area is empty. Place new content around the viewport center."

    type_counts: dict[str, int] = {}
    for obj in objects:
        t = obj.get("type", "unknown")
        type_counts[t] = type_counts.get(t, 0) + 1
    types_desc = ", ".join(f"{c} {t}{'s' if c > 1 else ''}" for t, c in type_counts.items())

    return (
        f"{len(objects)} objects ({types_desc}) occupy the area from "
        f"({int(bounds.x)}, {int(bounds.y)}) to ({int(bounds.right)}, {int(bounds.bottom)}). "
        f"Free space: to the RIGHT starting at x={int(bounds.right + 50)}, "
        f"or BELOW starting at y={int(bounds.bottom + 50)}."
    )
