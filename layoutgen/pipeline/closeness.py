"""Relationship model — closeness letters to weights, TCR, flow cost.

Two different pair weights are derived from the same letter matrix and
are used at different call sites:

  symmetric_weight  w(M[i][j]) + w(M[j][i]).  Counts both directions.
                    Drives TCR, seeding, tie-breaks and the final
                    shared-boundary score.
  pair_weight       max(w(M[i][j]), w(M[j][i])).  Used while scoring a
                    single candidate so one shared boundary is credited
                    once.
"""

from __future__ import annotations

from collections.abc import Sequence

from .config import ClosenessWeights, DEFAULT_WEIGHTS
from .geometry import MANHATTAN, distance


def letter_at(letters: Sequence[Sequence[object]], i: int, j: int) -> str:
    """Upper-cased matrix cell, '' when missing."""
    try:
        cell = letters[i][j]
    except IndexError:
        return ""
    return str(cell or "").strip().upper()


def letter_weight(token: object, weights: ClosenessWeights = DEFAULT_WEIGHTS) -> float:
    return weights.lookup(token)


class RelationshipModel:
    """Closeness letters over the *real* departments, plus their weights.

    Matrix indices are positions among real departments; void/obstacle
    entries never appear here.
    """

    def __init__(
        self,
        letters: Sequence[Sequence[object]],
        weights: ClosenessWeights = DEFAULT_WEIGHTS,
    ) -> None:
        self.n = len(letters)
        self.weights = weights
        self._letters = [
            [letter_at(letters, i, j) for j in range(self.n)]
            for i in range(self.n)
        ]
        self._sym = [
            [
                0.0 if i == j else self.weight(i, j) + self.weight(j, i)
                for j in range(self.n)
            ]
            for i in range(self.n)
        ]
        self._tcr = [sum(row) for row in self._sym]

    def weight(self, i: int, j: int) -> float:
        """Directed weight of M[i][j]."""
        return self.weights.lookup(self._letters[i][j])

    def symmetric_weight(self, i: int, j: int) -> float:
        return self._sym[i][j]

    def pair_weight(self, i: int, j: int) -> float:
        if i == j:
            return 0.0
        return max(self.weight(i, j), self.weight(j, i))

    def tcr(self, i: int) -> float:
        """Total Closeness Rating: sum of symmetric weights against all others."""
        return self._tcr[i]

    @property
    def tcrs(self) -> list[float]:
        return list(self._tcr)

    def related_in_tier(self, i: int, j: int, tier: str) -> bool:
        """True if either direction between i and j carries ``tier``."""
        return self._letters[i][j] == tier or self._letters[j][i] == tier


def effective_flow(
    raw_flow: Sequence[Sequence[float]] | None,
    letters: Sequence[Sequence[object]] | None,
    n: int,
    weights: ClosenessWeights = DEFAULT_WEIGHTS,
    closeness_lambda: float = 1.0,
) -> list[list[float]]:
    """Blend numeric flow with closeness letters: ``flow + λ·w(letter)``.

    Either input may be absent.  When only letters are given the result
    is the weighted closeness matrix; blank cells add ``weights.blank``.
    """
    out = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            value = 0.0
            if raw_flow is not None:
                try:
                    value += float(raw_flow[i][j] or 0)
                except IndexError:
                    pass
            if letters is not None:
                value += closeness_lambda * weights.lookup(letter_at(letters, i, j))
            out[i][j] = value
    return out


def flow_distance_cost(
    centers: Sequence[tuple[float, float]],
    flow: Sequence[Sequence[float]],
    metric: str = MANHATTAN,
) -> float:
    """Σ over ordered pairs i≠j of ``flow[i][j] × distance(c_i, c_j)``.

    ``centers[k]`` is the centre of the department at matrix index k.
    """
    total = 0.0
    n = len(centers)
    for i in range(n):
        row = flow[i]
        for j in range(n):
            if i == j:
                continue
            f = row[j]
            if not f:
                continue
            total += f * distance(centers[i], centers[j], metric)
    return total
