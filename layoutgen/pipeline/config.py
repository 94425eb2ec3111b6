"""Shared closeness constants for both layout engines.

The closeness letter alphabet and its default numeric weights live here.
Both the **corelap** engine (tier-driven construction) and the **craft**
engine (flow-blended improvement search) read from this single source, so
a request that overrides the weights affects them the same way.
"""

from __future__ import annotations

from dataclasses import dataclass


# Closeness letters, strongest first.  X ("undesirable") and blank are
# never used to pick the next department.
TIER_ORDER: tuple[str, ...] = ("A", "E", "I", "O", "U")
LETTERS: tuple[str, ...] = TIER_ORDER + ("X",)


@dataclass(frozen=True)
class ClosenessWeights:
    """Numeric weight of each closeness letter.

    Tiers must stay strictly ordered by weight (A > E > I > O > U) for
    tier-priority selection to mean anything; the validator enforces it.
    """

    A: float = 10.0
    E: float = 8.0
    I: float = 6.0
    O: float = 4.0
    U: float = 2.0
    X: float = 0.0
    blank: float = 0.0
    """Weight for an empty or unrecognised cell.  Distinct from X, which
    is usually but not necessarily also zero."""

    def lookup(self, token: object) -> float:
        """Case-insensitive letter lookup; anything unknown is ``blank``."""
        key = str(token or "").strip().upper()
        if key in LETTERS:
            return getattr(self, key)
        return self.blank

    def as_dict(self) -> dict[str, float]:
        return {
            "A": self.A, "E": self.E, "I": self.I, "O": self.O,
            "U": self.U, "X": self.X, "blank": self.blank,
        }


# Module-level singleton, importable everywhere.
DEFAULT_WEIGHTS = ClosenessWeights()


# ── Improvement-search defaults ────────────────────────────────────

MAX_ITERATIONS = 1200       # swap attempts per run
CLOSENESS_LAMBDA = 1.0      # weight of closeness letters in the effective flow
