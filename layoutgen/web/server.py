"""
FastAPI web server — stateless endpoints in front of the layout engines.

Nothing is stored: each request is parsed, validated, laid out and
returned.  Contradictory requests get a 400 with the list of problems;
placement-time infeasibility comes back as a normal result carrying an
``error`` field.
"""

from __future__ import annotations

import logging
import random

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from layoutgen.pipeline.config import DEFAULT_WEIGHTS, CLOSENESS_LAMBDA, MAX_ITERATIONS
from layoutgen.pipeline.corelap import generate_layout, corelap_result_to_dict
from layoutgen.pipeline.craft import optimize_layout, craft_result_to_dict
from layoutgen.pipeline.request import (
    LayoutOptions, RequestError, parse_corelap_request, parse_craft_request,
)


log = logging.getLogger(__name__)

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="layoutgen")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Models ─────────────────────────────────────────────────────────

class DepartmentBody(BaseModel):
    name: str
    type: str = "dept"
    fixed: bool = False
    locked: bool = False
    x: int | None = None
    y: int | None = None
    width: int | None = None
    height: int | None = None
    area: int | None = None
    minAspectRatio: float | None = None
    maxAspectRatio: float | None = None


class ObstacleBody(BaseModel):
    x: int
    y: int
    width: int
    height: int


class OptionsBody(BaseModel):
    allowSplitting: bool | None = None
    maxFragmentsPerDept: int | None = None
    cellSizeMeters: float | None = None


class CorelapGenerateRequest(BaseModel):
    name: str | None = None
    gridWidth: int
    gridHeight: int
    departments: list[DepartmentBody]
    closenessMatrix: list[list[str | None]]
    closenessWeights: dict[str, float] | None = None
    options: OptionsBody | None = None
    # Older clients send the options at the top level.
    allowSplitting: bool | None = None
    maxFragmentsPerDept: int | None = None
    cellSizeMeters: float | None = None
    obstacles: list[ObstacleBody] = []
    seedRule: str = "maxDegree"
    seed: int | None = None
    jitter: bool = True
    includeSteps: bool = True


class CraftLayoutRequest(BaseModel):
    name: str | None = None
    gridWidth: int | None = None
    gridHeight: int | None = None
    gridSize: int | None = None
    departments: list[DepartmentBody]
    flowMatrix: list[list[float | None]] | None = None
    closenessMatrix: list[list[str | None]] | None = None
    closenessWeights: dict[str, float] | None = None
    metric: str = "manhattan"
    closenessLambda: float = CLOSENESS_LAMBDA
    maxIterations: int = MAX_ITERATIONS
    seed: int | None = None
    obstacles: list[ObstacleBody] = []
    cellSizeMeters: float = 5.0


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/defaults")
def get_defaults():
    """Default closeness weights and engine options, for form pre-fill."""
    opts = LayoutOptions()
    return {
        "closenessWeights": DEFAULT_WEIGHTS.as_dict(),
        "options": {
            "allowSplitting": opts.allow_splitting,
            "maxFragmentsPerDept": opts.max_fragments,
            "cellSizeMeters": opts.cell_size_m,
        },
        "maxIterations": MAX_ITERATIONS,
        "closenessLambda": CLOSENESS_LAMBDA,
    }


@app.post("/api/corelap/generate")
def corelap_generate(req: CorelapGenerateRequest):
    """Run the constructive engine and return placements + trace."""
    try:
        layout_req = parse_corelap_request(req.model_dump(exclude_none=True))
        result = generate_layout(
            layout_req,
            rng=random.Random(req.seed),
            jitter=req.jitter,
        )
    except RequestError as e:
        log.warning("Rejected CORELAP request: %s", e.errors)
        raise HTTPException(400, e.errors)
    return corelap_result_to_dict(result, include_steps=req.includeSteps)


@app.post("/api/craft/layout")
def craft_layout(req: CraftLayoutRequest):
    """Run the swap search and return the best assignment found."""
    if req.gridSize is None and (req.gridWidth is None or req.gridHeight is None):
        raise HTTPException(400, "gridSize or gridWidth/gridHeight required")
    try:
        layout_req = parse_craft_request(req.model_dump(exclude_none=True))
        result = optimize_layout(layout_req)
    except RequestError as e:
        log.warning("Rejected CRAFT request: %s", e.errors)
        raise HTTPException(400, e.errors)
    return craft_result_to_dict(result)


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("layoutgen.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
