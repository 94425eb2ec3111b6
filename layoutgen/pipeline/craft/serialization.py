"""Improvement-engine result serialization — JSON conversion."""

from __future__ import annotations

from .models import CraftResult, PlacedDepartment


def craft_result_to_dict(result: CraftResult) -> dict:
    """Serialize a CraftResult to a JSON-safe dict."""
    return {
        "grid": {
            "width": result.grid_width,
            "height": result.grid_height,
            "cellSizeMeters": result.cell_size_m,
        },
        "metric": result.metric,
        "assignment": [
            {
                "name": p.name,
                "x": p.x,
                "y": p.y,
                "width": p.width,
                "height": p.height,
                "type": p.kind,
                "locked": p.locked,
            }
            for p in result.assignment
        ],
        "totalCost": result.total_cost,
        "initialCost": result.initial_cost,
        "iterations": result.iterations,
        "acceptedSwaps": result.accepted_swaps,
        "unplaced": list(result.unplaced),
    }


def parse_craft_result(data: dict) -> CraftResult:
    """Parse a craft result dict back into a CraftResult."""
    grid = data["grid"]
    return CraftResult(
        grid_width=grid["width"],
        grid_height=grid["height"],
        cell_size_m=grid.get("cellSizeMeters", 5.0),
        metric=data["metric"],
        assignment=[
            PlacedDepartment(
                name=p["name"], x=p["x"], y=p["y"],
                width=p["width"], height=p["height"],
                kind=p["type"], locked=p["locked"],
            )
            for p in data["assignment"]
        ],
        total_cost=data["totalCost"],
        initial_cost=data.get("initialCost", data["totalCost"]),
        iterations=data.get("iterations", 0),
        accepted_swaps=data.get("acceptedSwaps", 0),
        unplaced=list(data.get("unplaced", [])),
    )
