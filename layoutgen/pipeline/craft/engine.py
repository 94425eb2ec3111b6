"""Improvement search engine — locked-aware packing plus random swaps.

Algorithm overview:
  1. Validate the request; contradictions raise RequestError.
  2. Build the effective flow matrix: raw flow + λ·closeness weight,
     indexed by real departments.
  3. Split departments into locked (fixed, locked or void) and movable.
  4. Pack the movables in input order: locked rects first, then each
     movable at the first row-major slot where its box fits.
  5. Hill-climb: swap two random positions in the movable order, repack,
     keep the swap only if the packing is strictly better.

The search never accepts a worse order and keeps no tabu memory, so it
can stop in a local optimum.

A movable department with no free slot stays at its input coordinates
unmarked and is reported in ``unplaced``.  Packings are ranked by
(number unplaced, cost), so a swap that strands another department is
never accepted.
"""

from __future__ import annotations

import logging
import random
import time

from ..closeness import effective_flow, flow_distance_cost
from ..geometry import Rect
from ..grid import NO_OWNER, OccupancyGrid
from ..request.models import CraftRequest, Department, RequestError
from ..request.validation import validate_craft_request
from .models import (
    PlacedDepartment, Packing, CraftResult,
    TIME_BUDGET_S,
)


log = logging.getLogger(__name__)


def _placed(d: Department, x: int, y: int) -> PlacedDepartment:
    w, h = d.footprint
    return PlacedDepartment(
        name=d.name, x=x, y=y, width=w, height=h,
        kind=d.kind, locked=d.is_locked,
    )


# ── Packing ────────────────────────────────────────────────────────


def pack_departments(
    order: list[Department],
    locked: list[Department],
    width: int,
    height: int,
    obstacles: list[Rect] | None = None,
) -> Packing:
    """Pack movables in ``order`` around the locked departments.

    Locked rects and obstacles are marked first and never move.  Each
    movable takes the first row-major slot where its whole box fits in
    free cells.  With no slot it keeps its input position, is *not*
    marked, and is listed in ``unplaced``.
    """
    grid = OccupancyGrid(width, height)
    grid.pre_mark_obstacles(obstacles or [])

    assignment: list[PlacedDepartment] = []
    for d in locked:
        w, h = d.footprint
        grid.mark(d.x, d.y, w, h, NO_OWNER)
        assignment.append(_placed(d, d.x, d.y))

    unplaced: list[str] = []
    for d in order:
        w, h = d.footprint
        pos = grid.first_fit(w, h)
        if pos is None:
            x, y = d.x or 0, d.y or 0
            log.debug("No free %d×%d slot for %s, leaving it at (%d, %d)",
                      w, h, d.name, x, y)
            unplaced.append(d.name)
            assignment.append(_placed(d, x, y))
            continue
        grid.mark(pos[0], pos[1], w, h, NO_OWNER)
        assignment.append(_placed(d, pos[0], pos[1]))

    return Packing(assignment=assignment, unplaced=unplaced)


def packing_cost(
    packing: Packing,
    index_of: dict[str, int],
    flow: list[list[float]],
    metric: str,
) -> float:
    """Flow-weighted distance over departments in the flow index space.

    Departments without a matrix index (voids) occupy cells but add no
    cost.
    """
    centers: list[tuple[float, float]] = [(0.0, 0.0)] * len(index_of)
    for p in packing.assignment:
        k = index_of.get(p.name)
        if k is not None:
            centers[k] = p.center
    return flow_distance_cost(centers, flow, metric)


# ── Main entry point ───────────────────────────────────────────────


def optimize_layout(
    req: CraftRequest,
    *,
    rng: random.Random | None = None,
    time_budget_s: float | None = TIME_BUDGET_S,
) -> CraftResult:
    """Run the swap search on a request.

    Parameters
    ----------
    req : CraftRequest
        Grid, departments with footprints, flow/closeness matrices,
        metric and iteration budget.
    rng : random.Random | None
        Source for swap positions.  Defaults to ``random.Random(req.seed)``.
    time_budget_s : float | None
        Wall-clock cap; the search stops early and returns its best.

    Raises
    ------
    RequestError
        If the request is self-contradictory.  Nothing is packed.
    """
    errors = validate_craft_request(req)
    if errors:
        raise RequestError(errors)

    rng = rng or random.Random(req.seed)
    deadline = None if time_budget_s is None else time.monotonic() + time_budget_s

    real = req.real_departments
    index_of = {d.name: k for k, d in enumerate(real)}
    flow = effective_flow(
        req.flow_matrix, req.closeness_matrix, len(real),
        weights=req.weights, closeness_lambda=req.closeness_lambda,
    )

    locked = [d for d in req.departments if d.is_locked]
    order = [d for d in req.departments if not d.is_locked]

    log.info("CRAFT: starting — %d×%d grid, %d movable, %d locked, metric=%s, "
             "max_iterations=%d",
             req.grid_width, req.grid_height, len(order), len(locked),
             req.metric, req.max_iterations)

    def evaluate(o: list[Department]) -> tuple[Packing, float]:
        p = pack_departments(o, locked, req.grid_width, req.grid_height, req.obstacles)
        return p, packing_cost(p, index_of, flow, req.metric)

    best, best_cost = evaluate(order)
    initial_cost = best_cost
    log.info("CRAFT: initial cost %.2f (%d unplaced)", best_cost, len(best.unplaced))

    iterations = 0
    accepted = 0
    n = len(order)
    for _ in range(req.max_iterations):
        if n < 2:
            break
        if deadline is not None and time.monotonic() > deadline:
            log.warning("CRAFT: time budget of %.1fs exhausted after %d iterations",
                        time_budget_s, iterations)
            break
        iterations += 1

        i = rng.randrange(n)
        j = rng.randrange(n - 1)
        if j >= i:
            j += 1
        candidate = list(order)
        candidate[i], candidate[j] = candidate[j], candidate[i]

        packing, cost = evaluate(candidate)
        if (len(packing.unplaced), cost) < (len(best.unplaced), best_cost):
            log.debug("CRAFT: swap %s <-> %s improves cost %.2f -> %.2f",
                      order[i].name, order[j].name, best_cost, cost)
            order, best, best_cost = candidate, packing, cost
            accepted += 1

    if best.unplaced:
        log.warning("CRAFT: no free slot for %s; left at input coordinates",
                    ", ".join(best.unplaced))
    log.info("CRAFT: done — cost %.2f -> %.2f after %d iterations (%d swaps kept)",
             initial_cost, best_cost, iterations, accepted)

    by_name = {p.name: p for p in best.assignment}
    return CraftResult(
        grid_width=req.grid_width,
        grid_height=req.grid_height,
        cell_size_m=req.cell_size_m,
        metric=req.metric,
        assignment=[by_name[d.name] for d in req.departments],
        total_cost=best_cost,
        initial_cost=initial_cost,
        iterations=iterations,
        accepted_swaps=accepted,
        unplaced=list(best.unplaced),
    )
