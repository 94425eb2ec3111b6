"""Improvement-engine output dataclasses and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass, field


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass
class PlacedDepartment:
    """A department's single rectangle in a packed assignment."""

    name: str
    x: int
    y: int
    width: int
    height: int
    kind: str
    locked: bool

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Packing:
    """One packed order: every department's rect plus those left unpacked."""

    assignment: list[PlacedDepartment]
    unplaced: list[str] = field(default_factory=list)


@dataclass
class CraftResult:
    """Best assignment found by the swap search.

    ``unplaced`` lists movable departments for which no free slot
    existed; they sit at their input coordinates and may overlap.
    """

    grid_width: int
    grid_height: int
    cell_size_m: float
    metric: str
    assignment: list[PlacedDepartment]
    total_cost: float
    initial_cost: float
    iterations: int = 0
    accepted_swaps: int = 0
    unplaced: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.unplaced) == 0


# ── Configuration ──────────────────────────────────────────────────

TIME_BUDGET_S = 60.0        # wall-clock cap; the search returns its best so far
