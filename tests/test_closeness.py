"""Tests for the relationship model and geometry helpers.

Validates:
  - letter lookup is case-insensitive, unknown/blank map to ``blank``
  - symmetric weight sums both directions, pair weight takes the max
  - TCR sums symmetric weights
  - effective flow blends raw flow with λ·closeness
  - flow-distance cost under both metrics
  - shared edge length, factor pairs and derived footprints
"""

from __future__ import annotations

import unittest

from layoutgen.pipeline.closeness import (
    RelationshipModel, effective_flow, flow_distance_cost, letter_weight,
)
from layoutgen.pipeline.config import DEFAULT_WEIGHTS, ClosenessWeights
from layoutgen.pipeline.geometry import (
    EUCLIDEAN, MANHATTAN, Rect,
    factor_pairs, near_square_footprint, rect_inside_grid, rects_overlap,
    shared_edge_length,
)


def _r(x, y, w, h, idx=0):
    return Rect(idx=idx, name=f"d{idx}", x=x, y=y, width=w, height=h)


class TestLetterWeights(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(letter_weight("A"), 10)
        self.assertEqual(letter_weight("e"), 8)
        self.assertEqual(letter_weight(" u "), 2)
        self.assertEqual(letter_weight("X"), 0)

    def test_blank_and_unknown_use_blank_weight(self):
        w = ClosenessWeights(blank=1.5)
        self.assertEqual(letter_weight("", w), 1.5)
        self.assertEqual(letter_weight(None, w), 1.5)
        self.assertEqual(letter_weight("Q", w), 1.5)
        self.assertEqual(letter_weight("X", w), 0)


class TestRelationshipModel(unittest.TestCase):

    def setUp(self):
        self.model = RelationshipModel([
            ["", "a", ""],
            ["E", "", "O"],
            ["", "", ""],
        ])

    def test_symmetric_weight_sums_directions(self):
        self.assertEqual(self.model.symmetric_weight(0, 1), 18)
        self.assertEqual(self.model.symmetric_weight(1, 0), 18)
        self.assertEqual(self.model.symmetric_weight(1, 2), 4)
        self.assertEqual(self.model.symmetric_weight(0, 0), 0)

    def test_pair_weight_takes_max(self):
        self.assertEqual(self.model.pair_weight(0, 1), 10)
        self.assertEqual(self.model.pair_weight(2, 1), 4)
        self.assertEqual(self.model.pair_weight(0, 2), 0)

    def test_tcr(self):
        self.assertEqual(self.model.tcrs, [18, 22, 4])

    def test_related_in_tier_either_direction(self):
        self.assertTrue(self.model.related_in_tier(1, 0, "A"))
        self.assertTrue(self.model.related_in_tier(0, 1, "E"))
        self.assertTrue(self.model.related_in_tier(2, 1, "O"))
        self.assertFalse(self.model.related_in_tier(0, 2, "A"))

    def test_custom_weights(self):
        model = RelationshipModel([["", "A"], ["", ""]], ClosenessWeights(A=100))
        self.assertEqual(model.tcr(0), 100)


class TestFlow(unittest.TestCase):

    def test_effective_flow_blends_closeness(self):
        flow = effective_flow(
            [[0, 5], [1, 0]], [["", "A"], ["", ""]], 2,
            weights=DEFAULT_WEIGHTS, closeness_lambda=0.5,
        )
        self.assertEqual(flow, [[0.0, 10.0], [1.0, 0.0]])

    def test_effective_flow_without_letters(self):
        self.assertEqual(effective_flow([[0, 2], [3, 0]], None, 2), [[0.0, 2.0], [3.0, 0.0]])

    def test_flow_distance_cost_metrics(self):
        centers = [(0.5, 0.5), (3.5, 4.5)]
        flow = [[0, 2], [0, 0]]
        self.assertAlmostEqual(flow_distance_cost(centers, flow, MANHATTAN), 14.0)
        self.assertAlmostEqual(flow_distance_cost(centers, flow, EUCLIDEAN), 10.0)

    def test_flow_distance_cost_counts_both_directions(self):
        centers = [(0.5, 0.5), (2.5, 0.5)]
        self.assertAlmostEqual(flow_distance_cost(centers, [[0, 3], [1, 0]]), 8.0)


class TestGeometry(unittest.TestCase):

    def test_shared_edge_left_right(self):
        self.assertEqual(shared_edge_length(_r(0, 0, 2, 3), _r(2, 1, 2, 3, 1)), 2)

    def test_shared_edge_top_bottom(self):
        self.assertEqual(shared_edge_length(_r(0, 0, 3, 1), _r(1, 1, 1, 1, 1)), 1)

    def test_corner_touch_is_zero(self):
        self.assertEqual(shared_edge_length(_r(0, 0, 1, 1), _r(1, 1, 1, 1, 1)), 0)

    def test_separated_is_zero(self):
        self.assertEqual(shared_edge_length(_r(0, 0, 1, 1), _r(3, 0, 1, 1, 1)), 0)

    def test_overlap_and_bounds(self):
        self.assertTrue(rects_overlap(_r(0, 0, 2, 2), _r(1, 1, 2, 2)))
        self.assertFalse(rects_overlap(_r(0, 0, 2, 2), _r(2, 0, 2, 2)))
        self.assertTrue(rect_inside_grid(_r(2, 1, 2, 2), 4, 3))
        self.assertFalse(rect_inside_grid(_r(3, 1, 2, 2), 4, 3))

    def test_factor_pairs_near_square_first(self):
        self.assertEqual(factor_pairs(4, 4, 4), [(2, 2), (1, 4), (4, 1)])
        self.assertEqual(factor_pairs(6, 2, 10), [(2, 3), (1, 6)])
        self.assertEqual(factor_pairs(5, 4, 4), [])

    def test_factor_pairs_aspect_bounds(self):
        self.assertEqual(factor_pairs(6, 6, 6, (None, 2.0)), [(2, 3), (3, 2)])
        self.assertEqual(factor_pairs(4, 4, 4, (4.0, None)), [(1, 4), (4, 1)])

    def test_near_square_footprint(self):
        self.assertEqual(near_square_footprint(12), (4, 3))
        self.assertEqual(near_square_footprint(9), (3, 3))
        self.assertEqual(near_square_footprint(7), (7, 1))


if __name__ == "__main__":
    unittest.main()
