"""Request parsing — convert raw dicts/JSON into request dataclasses.

Wire keys are camelCase (``gridWidth``, ``maxFragmentsPerDept``, ...).
Parsing only reshapes; range and consistency checks belong to
:mod:`.validation`.
"""

from __future__ import annotations

from ..config import CLOSENESS_LAMBDA, DEFAULT_WEIGHTS, MAX_ITERATIONS, ClosenessWeights
from ..geometry import MANHATTAN, Rect
from ..grid import NO_OWNER
from .models import (
    REAL, VOID, SEED_MAX_TCR, SEED_MAX_AREA, SEED_RANDOM,
    Department, LayoutOptions, CorelapRequest, CraftRequest,
)


_KIND_ALIASES = {
    "dept": REAL, "real": REAL, "department": REAL,
    "void": VOID, "obstacle": VOID,
}

# camelCase wire name -> snake_case seed rule
_SEED_RULE_ALIASES = {
    "maxDegree": SEED_MAX_TCR, "maxTcr": SEED_MAX_TCR, "max_tcr": SEED_MAX_TCR,
    "maxArea": SEED_MAX_AREA, "max_area": SEED_MAX_AREA,
    "random": SEED_RANDOM,
}


def _opt_int(v) -> int | None:
    return None if v is None or v == "" else int(v)


def _opt_float(v) -> float | None:
    return None if v is None or v == "" else float(v)


def parse_department(d: dict) -> Department:
    raw_kind = str(d.get("type", d.get("kind", REAL)) or REAL)
    return Department(
        name=str(d["name"]),
        kind=_KIND_ALIASES.get(raw_kind.lower(), raw_kind),
        fixed=bool(d.get("fixed", False)),
        locked=bool(d.get("locked", False)),
        x=_opt_int(d.get("x")),
        y=_opt_int(d.get("y")),
        width=_opt_int(d.get("width")),
        height=_opt_int(d.get("height")),
        area=_opt_int(d.get("area")),
        min_aspect_ratio=_opt_float(d.get("minAspectRatio")),
        max_aspect_ratio=_opt_float(d.get("maxAspectRatio")),
    )


def parse_weights(data: dict | None) -> ClosenessWeights:
    """Parse a ``closenessWeights`` override; missing keys keep defaults."""
    if not data:
        return DEFAULT_WEIGHTS
    defaults = DEFAULT_WEIGHTS.as_dict()
    return ClosenessWeights(**{
        k: float(data.get(k, defaults[k])) for k in defaults
    })


def parse_obstacles(data: list | None) -> list[Rect]:
    return [
        Rect(
            idx=NO_OWNER,
            name=str(o.get("name", f"obstacle_{k}")),
            x=int(o["x"]), y=int(o["y"]),
            width=int(o["width"]), height=int(o["height"]),
        )
        for k, o in enumerate(data or [])
    ]


def _parse_letters(matrix: list | None) -> list[list[str]] | None:
    if matrix is None:
        return None
    return [[str(c or "").strip().upper() for c in row] for row in matrix]


def parse_corelap_request(data: dict) -> CorelapRequest:
    """Parse a raw dict into a CorelapRequest.

    Options may be nested under ``options`` or given at the top level,
    as older clients do.
    """
    opts = dict(data.get("options") or {})
    for key in ("allowSplitting", "maxFragmentsPerDept", "cellSizeMeters"):
        if key in data and key not in opts:
            opts[key] = data[key]

    options = LayoutOptions(
        allow_splitting=bool(opts.get("allowSplitting", True)),
        max_fragments=int(opts.get("maxFragmentsPerDept", 3)),
        cell_size_m=float(opts.get("cellSizeMeters", 5.0)),
    )

    raw_rule = data.get("seedRule", SEED_MAX_TCR)
    weights = data.get("closenessWeights", data.get("weights"))

    return CorelapRequest(
        grid_width=int(data["gridWidth"]),
        grid_height=int(data["gridHeight"]),
        departments=[parse_department(d) for d in data.get("departments", [])],
        closeness_matrix=_parse_letters(data.get("closenessMatrix")) or [],
        weights=parse_weights(weights),
        options=options,
        obstacles=parse_obstacles(data.get("obstacles")),
        seed_rule=_SEED_RULE_ALIASES.get(raw_rule, raw_rule),
    )


def parse_craft_request(data: dict) -> CraftRequest:
    """Parse a raw dict into a CraftRequest.

    A square ``gridSize`` is accepted in place of width/height.
    """
    size = data.get("gridSize")
    width = data.get("gridWidth", size)
    height = data.get("gridHeight", size)

    flow = data.get("flowMatrix")
    if flow is not None:
        flow = [[float(v or 0) for v in row] for row in flow]

    seed = data.get("seed")
    return CraftRequest(
        grid_width=int(width),
        grid_height=int(height),
        departments=[parse_department(d) for d in data.get("departments", [])],
        flow_matrix=flow,
        closeness_matrix=_parse_letters(data.get("closenessMatrix")),
        weights=parse_weights(data.get("closenessWeights")),
        metric=str(data.get("metric", MANHATTAN)).lower(),
        closeness_lambda=float(data.get("closenessLambda", CLOSENESS_LAMBDA)),
        max_iterations=int(data.get("maxIterations", MAX_ITERATIONS)),
        seed=None if seed is None else int(seed),
        obstacles=parse_obstacles(data.get("obstacles")),
        cell_size_m=float(data.get("cellSizeMeters", 5.0)),
    )
