"""Request validation — reject contradictory requests before any placement."""

from __future__ import annotations

from ..config import ClosenessWeights, LETTERS, TIER_ORDER
from ..geometry import METRICS, Rect, rect_inside_grid, rects_overlap
from .models import (
    REAL, VOID, SEED_RULES,
    Department, CorelapRequest, CraftRequest,
)


def _validate_grid(width: int, height: int) -> list[str]:
    errors: list[str] = []
    if width < 1 or height < 1:
        errors.append(f"Grid must be at least 1×1 (got {width}×{height})")
    return errors


def _validate_departments(departments: list[Department]) -> list[str]:
    errors: list[str] = []
    if not departments:
        errors.append("At least one department is required")

    seen: set[str] = set()
    for d in departments:
        if not d.name:
            errors.append("Department with empty name")
        elif d.name in seen:
            errors.append(f"Duplicate department name '{d.name}'")
        seen.add(d.name)

        if d.kind not in (REAL, VOID):
            errors.append(f"Department '{d.name}': unknown type '{d.kind}'")
        for attr in ("width", "height"):
            v = getattr(d, attr)
            if v is not None and v < 1:
                errors.append(f"Department '{d.name}': {attr} must be >= 1")
        if d.cells < 1:
            errors.append(
                f"Department '{d.name}': needs a positive area or width×height"
            )
        for attr in ("min_aspect_ratio", "max_aspect_ratio"):
            v = getattr(d, attr)
            if v is not None and v < 0.1:
                errors.append(f"Department '{d.name}': {attr} must be >= 0.1")
        lo, hi = d.aspect_bounds
        if lo is not None and hi is not None and lo > hi:
            errors.append(
                f"Department '{d.name}': min_aspect_ratio {lo} exceeds "
                f"max_aspect_ratio {hi}"
            )
        if d.is_locked and (d.x is None or d.y is None):
            what = "void" if d.kind == VOID else "fixed/locked"
            errors.append(f"Department '{d.name}': {what} department needs x and y")
        if (d.x is not None and d.x < 0) or (d.y is not None and d.y < 0):
            errors.append(f"Department '{d.name}': x and y must be >= 0")
    return errors


def _validate_matrix(
    name: str, matrix: list[list], n: int, letters: bool,
) -> list[str]:
    """Matrix must be N×N over the real departments."""
    errors: list[str] = []
    if len(matrix) != n or any(len(row) != n for row in matrix):
        errors.append(f"{name} must be {n}×{n} over the real departments")
        return errors
    if letters:
        allowed = set(LETTERS) | {""}
        for i, row in enumerate(matrix):
            for j, cell in enumerate(row):
                if str(cell or "").strip().upper() not in allowed:
                    errors.append(f"{name}[{i}][{j}]: unknown closeness letter '{cell}'")
    return errors


def _validate_weights(weights: ClosenessWeights) -> list[str]:
    values = [getattr(weights, t) for t in TIER_ORDER]
    if any(a <= b for a, b in zip(values, values[1:])):
        return ["closenessWeights must be strictly decreasing A > E > I > O > U"]
    return []


def _validate_fixed_rects(
    departments: list[Department], obstacles: list[Rect],
    width: int, height: int, pinned: list[Department],
) -> list[str]:
    """Pinned departments and obstacles must be in bounds and disjoint."""
    errors: list[str] = []
    for k, o in enumerate(obstacles):
        if o.width < 1 or o.height < 1:
            errors.append(f"Obstacle {k}: width and height must be >= 1")
        elif not rect_inside_grid(o, width, height):
            errors.append(f"Obstacle {k} at ({o.x}, {o.y}) lies outside the grid")

    rects: list[Rect] = []
    for d in pinned:
        if d.cells < 1 or d.x is None or d.y is None:
            continue  # already reported
        r = d.pinned_rect(departments.index(d))
        if not rect_inside_grid(r, width, height):
            errors.append(
                f"Department '{d.name}': fixed rect {r.width}×{r.height} at "
                f"({r.x}, {r.y}) lies outside the {width}×{height} grid"
            )
            continue
        for other in rects:
            if rects_overlap(r, other):
                errors.append(
                    f"Department '{d.name}': fixed rect overlaps '{other.name}'"
                )
        for k, o in enumerate(obstacles):
            if rects_overlap(r, o):
                errors.append(f"Department '{d.name}': fixed rect overlaps obstacle {k}")
        rects.append(r)
    return errors


def validate_corelap_request(req: CorelapRequest) -> list[str]:
    """Validate a constructive-engine request. Returns error messages (empty = valid)."""
    errors = _validate_grid(req.grid_width, req.grid_height)
    errors += _validate_departments(req.departments)
    errors += _validate_matrix(
        "closenessMatrix", req.closeness_matrix, len(req.real_departments), letters=True,
    )
    errors += _validate_weights(req.weights)

    if req.options.max_fragments < 1:
        errors.append("maxFragmentsPerDept must be >= 1")
    if req.seed_rule not in SEED_RULES:
        errors.append(f"Unknown seedRule '{req.seed_rule}'")

    if not errors:
        pinned = [d for d in req.departments if d.is_locked]
        errors += _validate_fixed_rects(
            req.departments, req.obstacles, req.grid_width, req.grid_height, pinned,
        )
    return errors


def validate_craft_request(req: CraftRequest) -> list[str]:
    """Validate an improvement-engine request. Returns error messages (empty = valid)."""
    errors = _validate_grid(req.grid_width, req.grid_height)
    errors += _validate_departments(req.departments)
    n = len(req.real_departments)
    if req.flow_matrix is not None:
        errors += _validate_matrix("flowMatrix", req.flow_matrix, n, letters=False)
    if req.closeness_matrix is not None:
        errors += _validate_matrix("closenessMatrix", req.closeness_matrix, n, letters=True)
    if req.metric not in METRICS:
        errors.append(f"Unknown metric '{req.metric}' (expected one of {list(METRICS)})")
    if req.max_iterations < 0:
        errors.append("maxIterations must be >= 0")

    if not errors:
        for d in req.departments:
            w, h = d.footprint
            if w > req.grid_width or h > req.grid_height:
                errors.append(
                    f"Department '{d.name}': footprint {w}×{h} is larger than "
                    f"the {req.grid_width}×{req.grid_height} grid"
                )
        locked = [d for d in req.departments if d.is_locked]
        errors += _validate_fixed_rects(
            req.departments, req.obstacles, req.grid_width, req.grid_height, locked,
        )
    return errors
