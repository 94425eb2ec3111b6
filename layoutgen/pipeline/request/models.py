"""Layout request dataclasses — the engines' input structure."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import CLOSENESS_LAMBDA, DEFAULT_WEIGHTS, MAX_ITERATIONS, ClosenessWeights
from ..geometry import MANHATTAN, Rect, near_square_footprint


# Department kinds
REAL = "dept"
VOID = "void"

# Seed rules for the constructive engine
SEED_MAX_TCR = "max_tcr"
SEED_MAX_AREA = "max_area"
SEED_RANDOM = "random"
SEED_RULES = (SEED_MAX_TCR, SEED_MAX_AREA, SEED_RANDOM)


class RequestError(Exception):
    """Raised when a request contradicts itself and no layout is attempted."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid layout request: " + "; ".join(errors))


@dataclass
class Department:
    """A department (or void region) to be laid out on the grid.

    Size comes from ``area`` or from an explicit ``width × height``.
    ``x``/``y`` are only meaningful when the department is fixed or
    locked.
    """

    name: str
    kind: str = REAL
    fixed: bool = False
    locked: bool = False
    x: int | None = None
    y: int | None = None
    width: int | None = None
    height: int | None = None
    area: int | None = None
    min_aspect_ratio: float | None = None
    max_aspect_ratio: float | None = None

    @property
    def is_real(self) -> bool:
        return self.kind != VOID

    @property
    def is_locked(self) -> bool:
        """Position is supplied by the caller and never moved.

        Void regions are always locked.
        """
        return self.fixed or self.locked or self.kind == VOID

    @property
    def cells(self) -> int:
        """Requested area in grid cells."""
        if self.width and self.height:
            return self.width * self.height
        return max(0, int(self.area or 0))

    @property
    def footprint(self) -> tuple[int, int]:
        """(width, height); derived near-square from the area when absent."""
        if self.width and self.height:
            return (self.width, self.height)
        if self.cells <= 0:
            return (0, 0)
        return near_square_footprint(self.cells)

    @property
    def aspect_bounds(self) -> tuple[float | None, float | None]:
        return (self.min_aspect_ratio, self.max_aspect_ratio)

    def pinned_rect(self, idx: int) -> Rect:
        w, h = self.footprint
        return Rect(idx=idx, name=self.name, x=int(self.x), y=int(self.y), width=w, height=h)


@dataclass
class LayoutOptions:
    allow_splitting: bool = True
    max_fragments: int = 3
    cell_size_m: float = 5.0     # informational, echoed in the result


@dataclass
class CorelapRequest:
    """Input to the constructive (tier-driven) engine."""

    grid_width: int
    grid_height: int
    departments: list[Department]
    closeness_matrix: list[list[str]]          # N×N over real departments
    weights: ClosenessWeights = DEFAULT_WEIGHTS
    options: LayoutOptions = field(default_factory=LayoutOptions)
    obstacles: list[Rect] = field(default_factory=list)
    seed_rule: str = SEED_MAX_TCR

    @property
    def real_departments(self) -> list[Department]:
        return [d for d in self.departments if d.is_real]


@dataclass
class CraftRequest:
    """Input to the improvement (swap search) engine.

    Every department needs a footprint; movable ones use ``x``/``y`` only
    as the fallback position when no free slot exists.
    """

    grid_width: int
    grid_height: int
    departments: list[Department]
    flow_matrix: list[list[float]] | None = None      # N×N over real departments
    closeness_matrix: list[list[str]] | None = None   # N×N over real departments
    weights: ClosenessWeights = DEFAULT_WEIGHTS
    metric: str = MANHATTAN
    closeness_lambda: float = CLOSENESS_LAMBDA
    max_iterations: int = MAX_ITERATIONS
    seed: int | None = None
    obstacles: list[Rect] = field(default_factory=list)
    cell_size_m: float = 5.0

    @property
    def real_departments(self) -> list[Department]:
        return [d for d in self.departments if d.is_real]
