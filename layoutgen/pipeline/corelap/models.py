"""Constructive-engine output dataclasses and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..geometry import Rect


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass
class Contact:
    """An occupied neighbour cell of a candidate rectangle."""

    with_idx: int       # department index of the neighbour
    weight: float
    side: str           # "L", "R", "T", "B" or "TL", "TR", "BL", "BR"


@dataclass
class PlacementStep:
    """One committed rectangle, in commit order."""

    step: int
    name: str
    idx: int
    x: int
    y: int
    width: int
    height: int
    pr: float
    score: float
    tier: str        # "A".."U", TIER_NONE, TIER_FIXED or TIER_SEED
    tcr: float
    contacts: list[Contact] = field(default_factory=list)


@dataclass
class CorelapResult:
    """Outcome of one constructive run.

    On failure ``error`` is set and placements hold whatever was
    committed before the engine stopped.
    """

    grid_width: int
    grid_height: int
    cell_size_m: float
    tcr: list[tuple[str, float]]
    seed: str | None = None
    order: list[str] = field(default_factory=list)
    steps: list[PlacementStep] = field(default_factory=list)
    placements: list[Rect] = field(default_factory=list)
    total_score: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def rects_for(self, name: str) -> list[Rect]:
        return [r for r in self.placements if r.name == name]


# ── Configuration ──────────────────────────────────────────────────

# Trace tier labels besides the closeness letters
TIER_NONE = "none"      # picked by global TCR fallback
TIER_SEED = "seed"
TIER_FIXED = "fixed"

# Neighbour credit per occupied cell
EDGE_CREDIT = 1.0
CORNER_CREDIT = 0.5

# Scoring weights: small biases on top of the placement rating.
CENTER_PULL = 0.06      # pull toward the area-weighted cluster centroid
EDGE_PADDING = 0.03     # prefer room between the piece and the grid edge
TOUCH_BONUS = 0.1       # flat bonus for attaching to the cluster
JITTER = 1e-3           # tie-break noise, far below any real score gap

TIME_BUDGET_S = 60.0    # wall-clock cap for one run
