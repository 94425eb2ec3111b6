"""Constructive placement engine — tier-driven seed-and-grow heuristic.

Algorithm overview:
  1. Validate the request; contradictions raise RequestError.
  2. Pre-mark obstacles and void regions; check capacity.
  3. Commit locked/fixed departments at their declared rects.
  4. Seed: the highest-TCR department, as a near-square block as close
     to the grid centre as possible (split into a smaller chunk if no
     whole block fits).  Skipped when locked departments were committed;
     they are the cluster growth starts from.
  5. Grow: repeatedly pick the next department by closeness tier
     (A > E > I > O > U) against the placed set, size a chunk, and
     commit the best-scoring rectangle that touches the cluster.
  6. Score the finished layout by shared boundary length × symmetric
     closeness weight.

Placement-time infeasibility is returned as a result with ``error`` set,
never raised.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass

from ..closeness import RelationshipModel
from ..config import TIER_ORDER
from ..geometry import Rect, edge_padding, factor_pairs, manhattan, rect_center
from ..grid import NO_OWNER, OccupancyGrid
from ..request.models import (
    SEED_MAX_AREA, SEED_RANDOM,
    CorelapRequest, Department, RequestError,
)
from ..request.validation import validate_corelap_request
from .models import (
    Contact, PlacementStep, CorelapResult,
    TIER_NONE, TIER_SEED, TIER_FIXED,
    EDGE_PADDING, JITTER, TIME_BUDGET_S,
)
from .scoring import CandidateScore, cluster_centroid, closeness_score, evaluate_candidate


log = logging.getLogger(__name__)


# ── Data structures used during placement ──────────────────────────


@dataclass
class DeptNode:
    """Mutable placement state for one real department."""

    idx: int            # index among real departments (= matrix index)
    name: str
    cells: int
    remaining: int
    fragments: int
    dept: Department


class _Run:
    """Request-local state for one constructive run."""

    def __init__(
        self,
        req: CorelapRequest,
        rng: random.Random,
        jitter: bool,
        deadline: float | None,
    ) -> None:
        self.req = req
        self.rng = rng
        self.jitter = jitter
        self.deadline = deadline
        self.W = req.grid_width
        self.H = req.grid_height
        self.grid = OccupancyGrid(self.W, self.H)
        self.model = RelationshipModel(req.closeness_matrix, req.weights)
        self.tcrs = self.model.tcrs
        self.nodes = [
            DeptNode(idx=i, name=d.name, cells=d.cells, remaining=d.cells,
                     fragments=0, dept=d)
            for i, d in enumerate(req.real_departments)
        ]
        self.cap = req.options.max_fragments if req.options.allow_splitting else 1
        self.placements: list[Rect] = []
        self.steps: list[PlacementStep] = []
        self.placed: set[int] = set()
        self.order: list[str] = []

    # ── Helpers ────────────────────────────────────────────────────

    def noise(self) -> float:
        return JITTER * self.rng.random() if self.jitter else 0.0

    def out_of_time(self) -> bool:
        return self.deadline is not None and time.monotonic() > self.deadline

    def commit(
        self, node: DeptNode, x: int, y: int, w: int, h: int,
        tier: str, pr: float = 0.0, score: float = 0.0,
        contacts: list[Contact] | None = None,
    ) -> None:
        rect = Rect(idx=node.idx, name=node.name, x=x, y=y, width=w, height=h)
        self.grid.mark_rect(rect)
        self.placements.append(rect)
        node.remaining -= rect.area
        node.fragments += 1
        if node.idx not in self.placed:
            self.placed.add(node.idx)
            self.order.append(node.name)
        self.steps.append(PlacementStep(
            step=len(self.steps) + 1,
            name=node.name, idx=node.idx,
            x=x, y=y, width=w, height=h,
            pr=pr, score=score, tier=tier, tcr=self.tcrs[node.idx],
            contacts=list(contacts or []),
        ))
        log.info("Placed %s %d×%d at (%d, %d) tier=%s score=%.3f (remaining %d)",
                 node.name, w, h, x, y, tier, score, node.remaining)

    def fail(self, message: str, seed: str | None = None) -> CorelapResult:
        log.error("CORELAP: %s", message)
        return self.result(seed=seed, error=message)

    def result(self, seed: str | None, error: str | None = None) -> CorelapResult:
        return CorelapResult(
            grid_width=self.W,
            grid_height=self.H,
            cell_size_m=self.req.options.cell_size_m,
            tcr=[(n.name, self.tcrs[n.idx]) for n in self.nodes],
            seed=seed,
            order=list(self.order),
            steps=list(self.steps),
            placements=list(self.placements),
            total_score=closeness_score(self.placements, self.model),
            error=error,
        )

    def _scan_positions(
        self, w: int, h: int, target: tuple[float, float],
    ) -> list[tuple[int, int]]:
        """All in-bounds (x, y) for a w×h box, nearest centre-to-target first."""
        coords = [
            (manhattan(rect_center(x, y, w, h), target), x, y)
            for y in range(self.H - h + 1)
            for x in range(self.W - w + 1)
        ]
        coords.sort(key=lambda c: c[0])
        return [(x, y) for _, x, y in coords]

    # ── Seeding ────────────────────────────────────────────────────

    def pick_seed(self, candidates: list[DeptNode]) -> DeptNode:
        rule = self.req.seed_rule
        if rule == SEED_RANDOM:
            return candidates[self.rng.randrange(len(candidates))]
        if rule == SEED_MAX_AREA:
            key = lambda n: (n.cells, self.tcrs[n.idx], -n.idx)
        else:
            key = lambda n: (self.tcrs[n.idx], n.cells, -n.idx)
        return max(candidates, key=key)

    def center_fit(self, node: DeptNode, cells: int) -> tuple[int, int, int, int] | None:
        """Best near-centre whole block of ``cells``.

        Each shape contributes its first free position nearest the grid
        centre; shapes compete on edge padding (plus jitter).
        """
        target = (self.W / 2, self.H / 2)
        best: tuple[float, tuple[int, int, int, int]] | None = None
        for w, h in factor_pairs(cells, self.W, self.H, node.dept.aspect_bounds):
            for x, y in self._scan_positions(w, h, target):
                if not self.grid.fits(x, y, w, h):
                    continue
                score = EDGE_PADDING * edge_padding(x, y, w, h, self.W, self.H) + self.noise()
                if best is None or score > best[0]:
                    best = (score, (x, y, w, h))
                break
        return best[1] if best else None

    def place_seed(self, node: DeptNode) -> bool:
        rect = self.center_fit(node, node.remaining)
        if rect is None and self.cap > 1:
            chunk = max(1, math.ceil(node.cells / self.cap))
            cells = min(chunk, node.remaining)
            while rect is None and cells > 0:
                rect = self.center_fit(node, cells)
                cells -= 1
        if rect is None and (self.cap > 1 or node.remaining == 1):
            cell = self.grid.first_free_cell()
            if cell is not None:
                log.warning("Seed %s fell back to a single free cell", node.name)
                rect = (cell[0], cell[1], 1, 1)
        if rect is None:
            return False
        self.commit(node, *rect, tier=TIER_SEED)
        return True

    # ── Growing ────────────────────────────────────────────────────

    def pick_next(self) -> tuple[DeptNode, str]:
        """Next department by tier against the placed set, else by TCR."""
        unplaced = [n for n in self.nodes if n.remaining > 0]
        key = lambda n: (self.tcrs[n.idx], -n.idx)
        for tier in TIER_ORDER:
            bucket = [
                n for n in unplaced
                if any(
                    j != n.idx and self.model.related_in_tier(n.idx, j, tier)
                    for j in self.placed
                )
            ]
            if bucket:
                return max(bucket, key=key), tier
        return max(unplaced, key=key), TIER_NONE

    def best_placement(
        self, node: DeptNode, cells: int,
    ) -> tuple[tuple[int, int, int, int], CandidateScore] | None:
        """Highest-scoring rect of ``cells`` that touches the cluster."""
        target = cluster_centroid(self.placements) or (self.W / 2, self.H / 2)
        best: tuple[tuple[int, int, int, int], CandidateScore] | None = None
        for w, h in factor_pairs(cells, self.W, self.H, node.dept.aspect_bounds):
            for x, y in self._scan_positions(w, h, target):
                if not self.grid.fits(x, y, w, h):
                    continue
                cand = evaluate_candidate(
                    node.idx, x, y, w, h, self.grid, self.model, target,
                    jitter=self.noise(),
                )
                if not cand.touching:
                    continue
                if best is None or cand.score > best[1].score:
                    best = ((x, y, w, h), cand)
        return best

    def grow(self, node: DeptNode, tier: str) -> str | None:
        """Commit one piece of ``node``.  Returns an error message on failure."""
        frags_left = self.cap - node.fragments
        if frags_left < 1:
            return (f"'{node.name}' reached the {self.cap}-fragment limit with "
                    f"{node.remaining} cells unplaced")

        if self.req.options.allow_splitting:
            chunk = max(1, math.ceil(node.remaining / max(1, frags_left)))
        else:
            chunk = node.remaining
        chunk = min(chunk, node.remaining)

        best = self.best_placement(node, chunk)
        cells = chunk
        while best is None and frags_left > 1 and cells > 1:
            cells -= 1
            log.debug("No touching fit for %s at %d cells, shrinking", node.name, cells + 1)
            best = self.best_placement(node, cells)

        if best is not None:
            (x, y, w, h), cand = best
            self.commit(node, x, y, w, h, tier=tier, pr=cand.pr, score=cand.score,
                        contacts=cand.contacts)
            return None

        if frags_left > 1 or node.remaining == 1:
            cell = self.grid.first_free_cell()
            if cell is not None:
                log.warning("%s fell back to a single free cell at %s", node.name, cell)
                self.commit(node, cell[0], cell[1], 1, 1, tier=tier)
                return None
            return f"Grid exhausted while placing '{node.name}'"
        return (f"Cannot place '{node.name}' ({node.remaining} cells) as a "
                f"single block touching the layout")


# ── Main entry point ───────────────────────────────────────────────


def generate_layout(
    req: CorelapRequest,
    *,
    rng: random.Random | None = None,
    jitter: bool = True,
    time_budget_s: float | None = TIME_BUDGET_S,
) -> CorelapResult:
    """Run the constructive engine on a request.

    Parameters
    ----------
    req : CorelapRequest
        Grid, departments, closeness matrix, weights and options.
    rng : random.Random | None
        Source for tie-break jitter and the random seed rule.  A fresh
        unseeded generator is used when *None*.
    jitter : bool
        Add tiny random noise to candidate scores to break exact ties.
        With ``jitter=False`` (and a fixed *rng*) runs are reproducible.
    time_budget_s : float | None
        Wall-clock cap; exceeding it ends the run with an error result.

    Returns
    -------
    CorelapResult
        Placements, trace and score, or a result with ``error`` set.

    Raises
    ------
    RequestError
        If the request is self-contradictory (matrix shape, fixed-rect
        conflicts, ...).  Nothing is placed.
    """
    errors = validate_corelap_request(req)
    if errors:
        raise RequestError(errors)

    deadline = None if time_budget_s is None else time.monotonic() + time_budget_s
    run = _Run(req, rng or random.Random(), jitter, deadline)
    grid = run.grid

    log.info("CORELAP: starting — %d×%d grid, %d departments, splitting=%s, "
             "max_fragments=%d",
             run.W, run.H, len(run.nodes), req.options.allow_splitting,
             req.options.max_fragments)

    # ── 1. Obstacles, voids, capacity ──────────────────────────────

    grid.pre_mark_obstacles(req.obstacles)
    voids = [d for d in req.departments if not d.is_real]
    grid.pre_mark_obstacles(d.pinned_rect(NO_OWNER) for d in voids)

    required = sum(n.cells for n in run.nodes)
    capacity = grid.free_count()
    if required > capacity:
        return run.fail(f"Cells required ({required}) exceed grid capacity ({capacity})")

    # ── 2. Locked / fixed departments ──────────────────────────────

    for node in run.nodes:
        if node.dept.is_locked:
            r = node.dept.pinned_rect(node.idx)
            run.commit(node, r.x, r.y, r.width, r.height, tier=TIER_FIXED)

    # ── 3. Seed ────────────────────────────────────────────────────

    # Locked departments already form the cluster; growth starts from them.
    locked = [n for n in run.nodes if n.dept.is_locked]
    free_nodes = [n for n in run.nodes if n.remaining > 0]
    seed_name = None
    if locked:
        seed_name = max(locked, key=lambda n: (run.tcrs[n.idx], -n.idx)).name
        log.info("CORELAP: growing from %d locked department(s)", len(locked))
    elif free_nodes:
        seed = run.pick_seed(free_nodes)
        seed_name = seed.name
        log.info("CORELAP: seed %s (TCR=%.1f, %d cells)",
                 seed.name, run.tcrs[seed.idx], seed.cells)
        if not run.place_seed(seed):
            return run.fail("Cannot place seed department", seed=seed_name)

    # ── 4. Grow ────────────────────────────────────────────────────

    while any(n.remaining > 0 for n in run.nodes):
        if run.out_of_time():
            return run.fail(
                f"Time budget of {time_budget_s:.1f}s exceeded", seed=seed_name,
            )
        node, tier = run.pick_next()
        err = run.grow(node, tier)
        if err:
            return run.fail(err, seed=seed_name)

    result = run.result(seed=seed_name)
    log.info("CORELAP: done — %d rects, closeness score %.1f",
             len(result.placements), result.total_score)
    return result
