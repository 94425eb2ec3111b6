"""Candidate rectangle scoring for the constructive engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..closeness import RelationshipModel
from ..geometry import Rect, edge_padding, manhattan, rect_center, shared_edge_length
from ..grid import NO_OWNER, OccupancyGrid
from .models import (
    Contact,
    EDGE_CREDIT, CORNER_CREDIT,
    CENTER_PULL, EDGE_PADDING, TOUCH_BONUS,
)


@dataclass
class CandidateScore:
    pr: float
    score: float
    touching: bool
    edges: list[Contact] = field(default_factory=list)
    corners: list[Contact] = field(default_factory=list)

    @property
    def contacts(self) -> list[Contact]:
        return self.edges + self.corners


def cluster_centroid(placed: list[Rect]) -> tuple[float, float] | None:
    """Area-weighted centroid of the placed rects, or None if none yet."""
    total = 0
    ax = ay = 0.0
    for r in placed:
        cx, cy = r.center
        ax += cx * r.area
        ay += cy * r.area
        total += r.area
    if total == 0:
        return None
    return (ax / total, ay / total)


def _edge_cells(x: int, y: int, w: int, h: int):
    """(cell_x, cell_y, side) for every cell sharing an edge with the rect."""
    for xx in range(x, x + w):
        yield xx, y - 1, "T"
        yield xx, y + h, "B"
    for yy in range(y, y + h):
        yield x - 1, yy, "L"
        yield x + w, yy, "R"


def _corner_cells(x: int, y: int, w: int, h: int):
    yield x - 1, y - 1, "TL"
    yield x + w, y - 1, "TR"
    yield x - 1, y + h, "BL"
    yield x + w, y + h, "BR"


def evaluate_candidate(
    idx: int,
    x: int, y: int, w: int, h: int,
    grid: OccupancyGrid,
    model: RelationshipModel,
    target: tuple[float, float],
    jitter: float = 0.0,
) -> CandidateScore:
    """Score a prospective rectangle for department ``idx``.  Higher = better.

    PR credits every occupied edge neighbour at full pair weight and every
    occupied diagonal corner at half.  Obstacle cells make the candidate
    touching but carry no weight.  Small biases pull the piece toward
    ``target`` and away from the grid edges.
    """
    pr = 0.0
    touching = False
    edges: list[Contact] = []
    corners: list[Contact] = []

    for cells, credit, out in (
        (_edge_cells(x, y, w, h), EDGE_CREDIT, edges),
        (_corner_cells(x, y, w, h), CORNER_CREDIT, corners),
    ):
        for nx, ny, side in cells:
            if not grid.is_occupied(nx, ny):
                continue
            touching = True
            nb = grid.owner_at(nx, ny)
            if nb == NO_OWNER:
                continue
            weight = model.pair_weight(idx, nb)
            pr += credit * weight
            out.append(Contact(with_idx=nb, weight=weight, side=side))

    center_gain = -manhattan(rect_center(x, y, w, h), target)
    padding = edge_padding(x, y, w, h, grid.width, grid.height)
    score = (
        pr
        + CENTER_PULL * center_gain
        + EDGE_PADDING * padding
        + TOUCH_BONUS
        + jitter
    )
    return CandidateScore(pr=pr, score=score, touching=touching,
                          edges=edges, corners=corners)


def closeness_score(placements: list[Rect], model: RelationshipModel) -> float:
    """Final layout score: shared boundary length × symmetric weight.

    Only true shared edges count (corner contact scores zero), and
    fragments of the same department are never paired.
    """
    total = 0.0
    for i, a in enumerate(placements):
        for b in placements[i + 1:]:
            if a.idx == b.idx:
                continue
            length = shared_edge_length(a, b)
            if length > 0:
                total += length * model.symmetric_weight(a.idx, b.idx)
    return total
