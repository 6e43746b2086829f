"""
Tests for deterministic layout generation.
"""

import math

import numpy as np
import pytest

from guided_sim.layout import cell_uniform, cell_uniforms, clamp_probability, generate_layout


class TestDeterminism:
    """Same arguments, same grid."""

    def test_identical_arguments_bit_identical(self):
        a = generate_layout(42, 400, 0.6)
        b = generate_layout(42, 400, 0.6)
        assert np.array_equal(a.cells, b.cells)

    def test_different_seed_differs(self):
        a = generate_layout(42, 400, 0.5)
        b = generate_layout(43, 400, 0.5)
        assert not np.array_equal(a.cells, b.cells)

    def test_prefix_stable(self):
        short = generate_layout(7, 10, 0.5)
        long = generate_layout(7, 100, 0.5)
        assert np.array_equal(short.cells, long.cells[:10])

    def test_cell_uniform_matches_grid(self):
        uniforms = cell_uniforms(11, 20)
        for i in (0, 5, 19):
            assert cell_uniform(11, i) == uniforms[i]

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            cell_uniform(1, -1)

    def test_negative_seed_accepted(self):
        a = generate_layout(-5, 16, 0.5)
        b = generate_layout(-5, 16, 0.5)
        assert np.array_equal(a.cells, b.cells)


class TestProbability:
    """Edge probabilities and counts."""

    def test_p_one_all_good(self):
        grid = generate_layout(1, 50, 1.0)
        assert grid.good_count == 50
        assert grid.defect_count == 0

    def test_p_zero_all_defective(self):
        grid = generate_layout(1, 50, 0.0)
        assert grid.good_count == 0

    def test_out_of_range_clamped(self):
        assert generate_layout(1, 10, 3.0).success_probability == 1.0
        assert generate_layout(1, 10, -2.0).success_probability == 0.0

    def test_nan_clamped(self):
        assert clamp_probability(float("nan")) == 0.0
        grid = generate_layout(1, 10, float("nan"))
        assert grid.good_count == 0

    def test_negative_count_empty(self):
        grid = generate_layout(1, -4, 0.5)
        assert grid.cell_count == 0
        assert grid.good_fraction == 0.0

    def test_good_fraction_near_p(self):
        grid = generate_layout(123, 10000, 0.3)
        assert math.isclose(grid.good_fraction, 0.3, abs_tol=0.03)


class TestRows:
    """Tests for row splitting."""

    def test_rows_split_by_columns(self):
        grid = generate_layout(2, 10, 0.5, columns=4)
        rows = grid.rows()
        assert [len(r) for r in rows] == [4, 4, 2]

    def test_cells_read_only(self):
        grid = generate_layout(2, 10, 0.5)
        with pytest.raises(ValueError):
            grid.cells[0] = True
