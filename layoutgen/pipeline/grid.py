"""Occupancy grid — marks cells as free or occupied and records the owner.

Both engines allocate one grid per call and mutate it privately.  Cells
are stored in flat row-major arenas (``index = y * width + x``).  Obstacle
cells are occupied but have no owner, so they block placement and count
as "something to touch" without contributing any closeness weight.
"""

from __future__ import annotations

from collections.abc import Iterable

from .geometry import Rect


# Cell states
FREE = 0
OCCUPIED = 1

# Owner value for free and obstacle cells
NO_OWNER = -1


class OccupancyGrid:
    """A ``width × height`` grid of free/occupied cells with owners.

    Reads outside the grid answer "free, no owner"; callers that need a
    hard boundary use :meth:`fits`, which checks bounds explicitly.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)
        self._owner = [NO_OWNER] * (width * height)

    # ── Cell queries ───────────────────────────────────────────────

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self._cells[y * self.width + x] == OCCUPIED

    def owner_at(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return NO_OWNER
        return self._owner[y * self.width + x]

    def free_count(self) -> int:
        return len(self._cells) - sum(self._cells)

    def fits(self, x: int, y: int, w: int, h: int) -> bool:
        """True iff the rectangle is inside the grid and every cell is free."""
        if x < 0 or y < 0 or x + w > self.width or y + h > self.height:
            return False
        cells = self._cells
        for yy in range(y, y + h):
            row = yy * self.width
            if any(cells[row + x:row + x + w]):
                return False
        return True

    # ── Cell mutation ──────────────────────────────────────────────

    def mark(
        self, x: int, y: int, w: int, h: int,
        owner: int, occupied: bool = True,
    ) -> None:
        """Set (or clear) occupancy and owner over a rectangle.

        Clearing always resets the owner to :data:`NO_OWNER`.  The
        rectangle is clipped to the grid.
        """
        state = OCCUPIED if occupied else FREE
        who = owner if occupied else NO_OWNER
        for yy in range(max(0, y), min(self.height, y + h)):
            row = yy * self.width
            for xx in range(max(0, x), min(self.width, x + w)):
                self._cells[row + xx] = state
                self._owner[row + xx] = who

    def mark_rect(self, rect: Rect) -> None:
        self.mark(rect.x, rect.y, rect.width, rect.height, rect.idx)

    def pre_mark_obstacles(self, rects: Iterable[Rect]) -> None:
        """Occupy obstacle cells before any department is placed."""
        for r in rects:
            self.mark(r.x, r.y, r.width, r.height, NO_OWNER)

    # ── Search ─────────────────────────────────────────────────────

    def first_free_cell(self) -> tuple[int, int] | None:
        """First free cell in row-major order, or None if the grid is full."""
        idx = self._cells.find(FREE)
        if idx < 0:
            return None
        return (idx % self.width, idx // self.width)

    def first_fit(self, w: int, h: int) -> tuple[int, int] | None:
        """First (x, y), row-major, where a ``w × h`` box fits entirely."""
        for y in range(0, self.height - h + 1):
            for x in range(0, self.width - w + 1):
                if self.fits(x, y, w, h):
                    return (x, y)
        return None
