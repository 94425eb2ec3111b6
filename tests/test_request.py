"""Tests for request parsing and validation.

Validates:
  - camelCase wire keys map onto the request dataclasses
  - options nested or at the top level, seed-rule aliases
  - partial weight overrides keep the remaining defaults
  - footprints derived from area are exact and near-square
  - validation reports every contradiction as a message
"""

from __future__ import annotations

import unittest

from layoutgen.pipeline.config import DEFAULT_WEIGHTS, ClosenessWeights
from layoutgen.pipeline.request import (
    REAL, SEED_MAX_AREA, SEED_MAX_TCR, VOID,
    Department, parse_corelap_request, parse_craft_request, parse_department,
    validate_corelap_request, validate_craft_request,
)


def _corelap_data(**overrides) -> dict:
    data = {
        "gridWidth": 6,
        "gridHeight": 4,
        "departments": [
            {"name": "Receiving", "area": 4},
            {"name": "Storage", "width": 3, "height": 2},
            {"name": "Lift", "type": "void", "x": 5, "y": 0, "width": 1, "height": 1},
        ],
        "closenessMatrix": [["", "a"], ["E", None]],
        "options": {"allowSplitting": False, "maxFragmentsPerDept": 2},
    }
    data.update(overrides)
    return data


class TestParsing(unittest.TestCase):

    def test_parse_department_kinds(self):
        self.assertEqual(parse_department({"name": "a"}).kind, REAL)
        self.assertEqual(parse_department({"name": "b", "type": "Obstacle"}).kind, VOID)
        self.assertEqual(parse_department({"name": "c", "kind": "real"}).kind, REAL)

    def test_parse_department_fields(self):
        d = parse_department({
            "name": "Paint", "area": "12", "fixed": True, "x": 1, "y": 2,
            "minAspectRatio": 1.5, "maxAspectRatio": "3",
        })
        self.assertEqual(d.cells, 12)
        self.assertTrue(d.is_locked)
        self.assertEqual(d.footprint, (4, 3))
        self.assertEqual(d.aspect_bounds, (1.5, 3.0))

    def test_parse_corelap_request(self):
        req = parse_corelap_request(_corelap_data())
        self.assertEqual((req.grid_width, req.grid_height), (6, 4))
        self.assertEqual([d.name for d in req.real_departments], ["Receiving", "Storage"])
        self.assertEqual(req.closeness_matrix, [["", "A"], ["E", ""]])
        self.assertFalse(req.options.allow_splitting)
        self.assertEqual(req.options.max_fragments, 2)
        self.assertEqual(req.seed_rule, SEED_MAX_TCR)
        self.assertIs(req.weights, DEFAULT_WEIGHTS)

    def test_top_level_options(self):
        data = _corelap_data(allowSplitting=True, cellSizeMeters=2.5)
        del data["options"]
        req = parse_corelap_request(data)
        self.assertTrue(req.options.allow_splitting)
        self.assertEqual(req.options.max_fragments, 3)
        self.assertEqual(req.options.cell_size_m, 2.5)

    def test_seed_rule_alias(self):
        req = parse_corelap_request(_corelap_data(seedRule="maxArea"))
        self.assertEqual(req.seed_rule, SEED_MAX_AREA)

    def test_partial_weights(self):
        req = parse_corelap_request(_corelap_data(closenessWeights={"A": 20, "blank": 1}))
        self.assertEqual(req.weights, ClosenessWeights(A=20.0, blank=1.0))

    def test_parse_craft_grid_size(self):
        req = parse_craft_request({
            "gridSize": 5,
            "departments": [{"name": "a", "area": 2}, {"name": "b", "area": 3}],
            "flowMatrix": [[0, "4"], [None, 0]],
            "metric": "Euclidean",
            "seed": "7",
        })
        self.assertEqual((req.grid_width, req.grid_height), (5, 5))
        self.assertEqual(req.flow_matrix, [[0.0, 4.0], [0.0, 0.0]])
        self.assertEqual(req.metric, "euclidean")
        self.assertEqual(req.seed, 7)
        self.assertIsNone(req.closeness_matrix)


class TestCorelapValidation(unittest.TestCase):

    def test_valid_request(self):
        self.assertEqual(validate_corelap_request(parse_corelap_request(_corelap_data())), [])

    def test_matrix_over_real_departments_only(self):
        data = _corelap_data(closenessMatrix=[["", "A", ""], ["A", "", ""], ["", "", ""]])
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("2×2" in e for e in errors))

    def test_unknown_letter(self):
        data = _corelap_data(closenessMatrix=[["", "Z"], ["", ""]])
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("unknown closeness letter" in e for e in errors))

    def test_duplicate_names_and_missing_area(self):
        data = _corelap_data(departments=[{"name": "a", "area": 2}, {"name": "a"}])
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("Duplicate" in e for e in errors))
        self.assertTrue(any("positive area" in e for e in errors))

    def test_fixed_needs_position(self):
        data = _corelap_data()
        data["departments"][0] = {"name": "Receiving", "area": 4, "fixed": True}
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("needs x and y" in e for e in errors))

    def test_fixed_overlapping_obstacle(self):
        data = _corelap_data(obstacles=[{"x": 0, "y": 0, "width": 1, "height": 1}])
        data["departments"][0] = {"name": "Receiving", "area": 4, "locked": True, "x": 0, "y": 0}
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertEqual(errors, ["Department 'Receiving': fixed rect overlaps obstacle 0"])

    def test_void_outside_grid(self):
        data = _corelap_data()
        data["departments"][2]["x"] = 6
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("outside" in e for e in errors))

    def test_weights_must_decrease(self):
        data = _corelap_data(closenessWeights={"E": 12})
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("strictly decreasing" in e for e in errors))

    def test_bad_options(self):
        data = _corelap_data(seedRule="biggest")
        data["options"]["maxFragmentsPerDept"] = 0
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertIn("maxFragmentsPerDept must be >= 1", errors)
        self.assertIn("Unknown seedRule 'biggest'", errors)

    def test_aspect_bounds(self):
        data = _corelap_data()
        data["departments"][0].update(minAspectRatio=3, maxAspectRatio=2)
        errors = validate_corelap_request(parse_corelap_request(data))
        self.assertTrue(any("exceeds" in e for e in errors))


class TestCraftValidation(unittest.TestCase):

    def test_matrices_optional(self):
        req = parse_craft_request({
            "gridWidth": 4, "gridHeight": 4,
            "departments": [{"name": "a", "area": 2}],
        })
        self.assertEqual(validate_craft_request(req), [])

    def test_negative_iterations(self):
        req = parse_craft_request({
            "gridWidth": 4, "gridHeight": 4, "maxIterations": -1,
            "departments": [{"name": "a", "area": 2}],
        })
        self.assertIn("maxIterations must be >= 0", validate_craft_request(req))

    def test_empty_departments(self):
        req = parse_craft_request({"gridWidth": 4, "gridHeight": 4, "departments": []})
        self.assertIn("At least one department is required", validate_craft_request(req))

    def test_zero_width_rejected(self):
        req = parse_craft_request({
            "gridWidth": 4, "gridHeight": 4,
            "departments": [{"name": "a", "width": 0, "height": 2}],
        })
        errors = validate_craft_request(req)
        self.assertIn("Department 'a': width must be >= 1", errors)
        self.assertEqual(Department(name="a", width=0, height=2).cells, 0)


if __name__ == "__main__":
    unittest.main()
