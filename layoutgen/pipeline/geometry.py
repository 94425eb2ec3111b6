"""Integer grid rectangles and the distance helpers built on them.

Coordinates are cell indices: ``x`` is the column (left to right), ``y``
the row (top to bottom).  A rect covers ``[x, x + width) × [y, y + height)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.geometry import box as shapely_box


MANHATTAN = "manhattan"
EUCLIDEAN = "euclidean"
METRICS = (MANHATTAN, EUCLIDEAN)


@dataclass
class Rect:
    """One axis-aligned rectangle owned by a department."""

    idx: int          # department index (-1 for obstacles)
    name: str
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_box(self):
        """The rect as a shapely polygon."""
        return shapely_box(self.x, self.y, self.x + self.width, self.y + self.height)


def rect_center(x: int, y: int, w: int, h: int) -> tuple[float, float]:
    return (x + w / 2, y + h / 2)


def manhattan(a: tuple[float, float], b: tuple[float, float]) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def distance(
    a: tuple[float, float], b: tuple[float, float], metric: str = MANHATTAN,
) -> float:
    """Centre-to-centre distance under the given metric."""
    if metric == EUCLIDEAN:
        return math.hypot(a[0] - b[0], a[1] - b[1])
    return manhattan(a, b)


def shared_edge_length(a: Rect, b: Rect) -> float:
    """Length of the boundary two non-overlapping rects have in common.

    Rects that only meet at a corner share a point, not an edge, and
    score zero.  Overlapping rects have no shared *boundary* either.
    """
    common = a.to_box().intersection(b.to_box())
    if common.is_empty or common.area > 0:
        return 0.0
    return common.length


def rects_overlap(a: Rect, b: Rect) -> bool:
    """True if the interiors of two rects intersect."""
    return a.to_box().intersection(b.to_box()).area > 0


def rect_inside_grid(rect: Rect, width: int, height: int) -> bool:
    """True if the rect lies entirely within a ``width × height`` grid."""
    return shapely_box(0, 0, width, height).covers(rect.to_box())


def edge_padding(x: int, y: int, w: int, h: int, grid_w: int, grid_h: int) -> int:
    """Smallest gap between the rect and any of the four grid edges."""
    return min(x, y, grid_w - (x + w), grid_h - (y + h))


def factor_pairs(
    cells: int,
    max_w: int,
    max_h: int,
    aspect_bounds: tuple[float | None, float | None] = (None, None),
) -> list[tuple[int, int]]:
    """All integer (w, h) with ``w * h == cells`` that fit the grid.

    Ordered near-square first (``|w - h|`` ascending, then narrower
    first).  Optional (min, max) bounds on the long/short side ratio
    drop shapes that are too square or too elongated.
    """
    lo, hi = aspect_bounds
    out: list[tuple[int, int]] = []
    if cells <= 0:
        return out
    for w in range(1, min(cells, max_w) + 1):
        if cells % w:
            continue
        h = cells // w
        if h > max_h:
            continue
        ratio = max(w, h) / min(w, h)
        if lo is not None and ratio < lo:
            continue
        if hi is not None and ratio > hi:
            continue
        out.append((w, h))
    out.sort(key=lambda wh: abs(wh[0] - wh[1]))
    return out


def near_square_footprint(area: int) -> tuple[int, int]:
    """Exact-area footprint closest to a square (width ≥ height)."""
    best = (area, 1)
    for h in range(1, math.isqrt(area) + 1):
        if area % h == 0:
            best = (area // h, h)
    return best
