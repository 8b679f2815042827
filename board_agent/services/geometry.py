"""Color, anchor and waypoint helpers shared by the planner and the templates.

Everything here is pure: no store access, no logging.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Mapping

# Board palette (must match the web client's color picker). Only these colors are allowed.
BOARD_PALETTE_HEX = (
    "#f5e6ab",  # warm yellow
    "#d4e4bc",  # sage green
    "#c5d5e8",  # soft blue
    "#e8c5c5",  # dusty rose
    "#d4c5e8",  # lavender
    "#c5e8d4",  # mint
    "#e8d4c5",  # peach
    "#e0e0d0",  # light grey
)

PALETTE = {
    "yellow": BOARD_PALETTE_HEX[0],
    "green": BOARD_PALETTE_HEX[1],
    "blue": BOARD_PALETTE_HEX[2],
    "rose": BOARD_PALETTE_HEX[3],
    "lavender": BOARD_PALETTE_HEX[4],
    "mint": BOARD_PALETTE_HEX[5],
    "peach": BOARD_PALETTE_HEX[6],
    "grey": BOARD_PALETTE_HEX[7],
}

ANCHOR_NAMES = frozenset({
    "top", "bottom", "left", "right",
    "top-left", "top-right", "bottom-left", "bottom-right",
    "star-0", "star-1", "star-2", "star-3", "star-4",
})

FRAME_COLOR = "#12121a"
DEFAULT_CONNECTION_COLOR = PALETTE["blue"]

_COLOR_MAP: dict[str, str] = {
    "yellow": PALETTE["yellow"],
    "warmyellow": PALETTE["yellow"],
    "green": PALETTE["green"],
    "sagegreen": PALETTE["green"],
    "blue": PALETTE["blue"],
    "softblue": PALETTE["blue"],
    "pink": PALETTE["rose"],
    "rose": PALETTE["rose"],
    "dustyrose": PALETTE["rose"],
    "red": PALETTE["rose"],
    "lavender": PALETTE["lavender"],
    "purple": PALETTE["lavender"],
    "violet": PALETTE["lavender"],
    "mint": PALETTE["mint"],
    "teal": PALETTE["mint"],
    "peach": PALETTE["peach"],
    "orange": PALETTE["peach"],
    "grey": PALETTE["grey"],
    "gray": PALETTE["grey"],
    "lightgrey": PALETTE["grey"],
    "lightgray": PALETTE["grey"],
}


@dataclass
class BBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def intersects(self, other: "BBox") -> bool:
        return (
            self.right >= other.x
            and self.x <= other.right
            and self.bottom >= other.y
            and self.y <= other.bottom
        )

    @classmethod
    def from_record(cls, record: Mapping, default_w: float = 160, default_h: float = 120) -> "BBox":
        """Build a box from a stored object, tolerating missing size fields."""
        return cls(
            x=float(record.get("x") or 0),
            y=float(record.get("y") or 0),
            width=float(record.get("width") or default_w),
            height=float(record.get("height") or default_h),
        )


def map_color_name_to_hex(color: str | None) -> str:
    """Map a color name, alias or palette hex onto the board palette.

    Unknown input falls back to warm yellow, so the result is always a
    palette entry and mapping twice gives the same answer.
    """
    key = "".join((color or "").lower().split())
    if key in _COLOR_MAP:
        return _COLOR_MAP[key]
    if key in BOARD_PALETTE_HEX:
        return key
    return BOARD_PALETTE_HEX[0]


def auto_select_anchors(from_box: BBox, to_box: BBox) -> tuple[str, str]:
    """Pick (from_anchor, to_anchor) facing each other along the dominant axis.

    Exact ties between |dx| and |dy| go to the horizontal axis.
    """
    from_cx, from_cy = from_box.center
    to_cx, to_cy = to_box.center
    dx = to_cx - from_cx
    dy = to_cy - from_cy

    if abs(dx) >= abs(dy):
        return ("right", "left") if dx >= 0 else ("left", "right")
    return ("bottom", "top") if dy >= 0 else ("top", "bottom")


def _anchor_offset(w: float, h: float, anchor: str) -> tuple[float, float]:
    if anchor.startswith("star-") and anchor[5:].isdigit():
        index = int(anchor[5:]) % 5
        r = min(w, h) / 2
        angle = -math.pi / 2 + index * (2 * math.pi / 5)
        return (r * math.cos(angle), r * math.sin(angle))

    offsets = {
        "top": (0, -h / 2),
        "bottom": (0, h / 2),
        "left": (-w / 2, 0),
        "right": (w / 2, 0),
        "top-left": (-w / 2, -h / 2),
        "top-right": (w / 2, -h / 2),
        "bottom-left": (-w / 2, h / 2),
        "bottom-right": (w / 2, h / 2),
    }
    return offsets.get(anchor, (w / 2, -h / 2))


def anchor_to_world_point(box: BBox, anchor: str) -> tuple[float, float]:
    cx, cy = box.center
    ox, oy = _anchor_offset(box.width, box.height, anchor)
    return (cx + ox, cy + oy)


def flatten_waypoints(points: Iterable | None, relative: bool = False) -> list[float] | None:
    """Flatten ``[{x, y}, ...]`` into ``[x1, y1, x2, y2, ...]``.

    In relative mode the first point is absolute and each later point is an
    offset from the previous absolute point. Returns None when there are no
    points. Accepts dicts or objects with ``x``/``y`` attributes.
    """
    pts = [_xy(p) for p in (points or [])]
    if not pts:
        return None

    if relative:
        absolute = [pts[0]]
        for dx, dy in pts[1:]:
            px, py = absolute[-1]
            absolute.append((px + dx, py + dy))
        pts = absolute

    return [coord for point in pts for coord in point]


def _xy(point) -> tuple[float, float]:
    if isinstance(point, Mapping):
        return (float(point["x"]), float(point["y"]))
    return (float(point.x), float(point.y))
