"""Tests for the occupancy grid.

Validates:
  - fits() respects bounds and occupied cells
  - mark() sets and clears occupancy and owner together
  - obstacles are occupied with no owner
  - first_free_cell() and first_fit() scan row-major
"""

from __future__ import annotations

import unittest

from layoutgen.pipeline.geometry import Rect
from layoutgen.pipeline.grid import NO_OWNER, OccupancyGrid


class TestOccupancyGrid(unittest.TestCase):

    def setUp(self):
        self.grid = OccupancyGrid(4, 3)

    def test_empty_grid_fits_whole_area(self):
        self.assertTrue(self.grid.fits(0, 0, 4, 3))
        self.assertEqual(self.grid.free_count(), 12)

    def test_fits_rejects_out_of_bounds(self):
        self.assertFalse(self.grid.fits(-1, 0, 1, 1))
        self.assertFalse(self.grid.fits(3, 0, 2, 1))
        self.assertFalse(self.grid.fits(0, 2, 1, 2))

    def test_mark_sets_owner_and_blocks_fit(self):
        self.grid.mark(1, 1, 2, 1, owner=5)
        self.assertTrue(self.grid.is_occupied(1, 1))
        self.assertTrue(self.grid.is_occupied(2, 1))
        self.assertFalse(self.grid.is_occupied(3, 1))
        self.assertEqual(self.grid.owner_at(2, 1), 5)
        self.assertFalse(self.grid.fits(0, 0, 2, 2))
        self.assertTrue(self.grid.fits(0, 0, 4, 1))
        self.assertEqual(self.grid.free_count(), 10)

    def test_mark_clear_resets_owner(self):
        self.grid.mark(0, 0, 2, 2, owner=3)
        self.grid.mark(0, 0, 1, 1, owner=3, occupied=False)
        self.assertFalse(self.grid.is_occupied(0, 0))
        self.assertEqual(self.grid.owner_at(0, 0), NO_OWNER)
        self.assertEqual(self.grid.owner_at(1, 1), 3)

    def test_obstacles_have_no_owner(self):
        self.grid.pre_mark_obstacles([Rect(idx=NO_OWNER, name="pillar", x=0, y=0, width=2, height=1)])
        self.assertTrue(self.grid.is_occupied(1, 0))
        self.assertEqual(self.grid.owner_at(1, 0), NO_OWNER)

    def test_out_of_bounds_reads_are_free(self):
        self.assertFalse(self.grid.is_occupied(-1, 0))
        self.assertEqual(self.grid.owner_at(10, 10), NO_OWNER)

    def test_first_free_cell_row_major(self):
        self.grid.mark(0, 0, 4, 1, owner=0)
        self.grid.mark(0, 1, 2, 1, owner=1)
        self.assertEqual(self.grid.first_free_cell(), (2, 1))

    def test_first_free_cell_full_grid(self):
        self.grid.mark(0, 0, 4, 3, owner=0)
        self.assertIsNone(self.grid.first_free_cell())

    def test_first_fit_skips_blocked_slots(self):
        self.grid.mark(0, 0, 2, 1, owner=NO_OWNER)
        self.assertEqual(self.grid.first_fit(2, 2), (2, 0))
        self.assertEqual(self.grid.first_fit(4, 2), (0, 1))
        self.assertIsNone(self.grid.first_fit(4, 3))


if __name__ == "__main__":
    unittest.main()
