"""Constructive-engine result serialization — JSON conversion."""

from __future__ import annotations

from .models import CorelapResult, PlacementStep


def _step_to_dict(s: PlacementStep) -> dict:
    return {
        "step": s.step,
        "name": s.name,
        "idx": s.idx,
        "x": s.x,
        "y": s.y,
        "width": s.width,
        "height": s.height,
        "pr": s.pr,
        "score": s.score,
        "tier": s.tier,
        "tcr": s.tcr,
        "contacts": [
            {"idx": c.with_idx, "weight": c.weight, "side": c.side}
            for c in s.contacts
        ],
    }


def corelap_result_to_dict(result: CorelapResult, *, include_steps: bool = True) -> dict:
    """Serialize a CorelapResult to a JSON-safe dict.

    Failed runs carry ``error`` plus whatever was committed before the
    engine stopped.
    """
    out: dict = {
        "grid": {
            "width": result.grid_width,
            "height": result.grid_height,
            "cellSizeMeters": result.cell_size_m,
        },
        "tcr": [{"name": name, "tcr": tcr} for name, tcr in result.tcr],
    }
    if result.error is not None:
        out["error"] = result.error

    out["seed"] = result.seed
    out["order"] = list(result.order)
    if include_steps:
        out["steps"] = [_step_to_dict(s) for s in result.steps]
    out["score"] = {"total": result.total_score, "closeness": result.total_score}
    # Placements and steps are committed one-to-one.
    out["placements"] = [
        {
            "name": r.name,
            "x": r.x,
            "y": r.y,
            "width": r.width,
            "height": r.height,
            "part": k,
            "step": k + 1,
        }
        for k, r in enumerate(result.placements)
    ]
    return out
