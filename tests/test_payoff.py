"""
Tests for the Payoff Analysis Module

Covers grid generation, quantity-weighted payoffs, the payoff table, the
CSV export format and breakeven detection.
"""

import pytest
import numpy as np

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from optionpricer.analytics.payoff import (
    CSV_HEADER,
    breakeven_points,
    export_csv,
    format_invariant,
    generate_grid,
    leg_payoff,
    payoff_table,
    total_payoff,
)
from optionpricer.core.option import Leg, create_call, create_put
from optionpricer.structures.strategy import iron_condor, straddle


@pytest.fixture
def call_legs():
    return [Leg(create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.2), 1)]


@pytest.fixture
def straddle_legs():
    return list(straddle(100.0, 0.02, 0.0, 1.0, 0.2, 100.0).legs)


class TestGenerateGrid:

    def test_default_grid(self):
        grid = generate_grid(100.0)
        assert len(grid) == 201
        assert grid[0] == pytest.approx(20.0)
        assert grid[-1] == pytest.approx(200.0)
        assert np.allclose(np.diff(grid), 0.9)

    def test_minimum_two_points(self):
        grid = generate_grid(100.0, points=1)
        assert len(grid) == 2
        assert grid[0] == pytest.approx(20.0)
        assert grid[1] == pytest.approx(200.0)

    def test_lower_bound_floored_at_zero(self):
        grid = generate_grid(100.0, min_pct=-0.5, max_pct=1.0, points=3)
        np.testing.assert_allclose(grid, [0.0, 50.0, 100.0])

    def test_upper_bound_above_lower(self):
        grid = generate_grid(100.0, min_pct=1.0, max_pct=0.5, points=2)
        assert grid[1] > grid[0]


class TestPayoffs:

    def test_leg_payoff(self, call_legs):
        assert leg_payoff(call_legs[0].option, 130.0) == 30.0

    def test_total_payoff_scalar(self, straddle_legs):
        assert total_payoff(straddle_legs, 80.0) == pytest.approx(20.0)
        assert isinstance(total_payoff(straddle_legs, 80.0), float)

    def test_total_payoff_vector(self):
        legs = iron_condor(100.0, 0.02, 0.0, 1.0, 0.2, 80.0, 90.0, 110.0, 120.0).legs
        np.testing.assert_allclose(
            total_payoff(legs, np.array([70.0, 100.0, 130.0])), [-10.0, 0.0, -10.0]
        )

    def test_empty_book(self):
        assert total_payoff([], 100.0) == 0.0

    def test_tuple_pairs(self):
        put = create_put(100.0, 100.0, 0.02, 0.0, 1.0, 0.2)
        assert total_payoff([(put, -2)], 90.0) == pytest.approx(-20.0)


class TestPayoffTable:

    def test_columns_and_values(self, call_legs):
        table = payoff_table(call_legs, [100.0, 120.0], premium=5.0)
        assert list(table.columns) == ['S_T', 'Payoff', 'Profit', 'PremiumInitiale']
        assert table['Payoff'].tolist() == [0.0, 20.0]
        assert table['Profit'].tolist() == [-5.0, 15.0]
        assert table['PremiumInitiale'].tolist() == [5.0, 5.0]


class TestExportCsv:

    def test_invariant_format(self):
        assert format_invariant(100.0) == "100"
        assert format_invariant(-5.0) == "-5"
        assert format_invariant(-0.0) == "0"
        assert format_invariant(0.25) == "0.25"
        assert format_invariant(1234567.5) == "1234567.5"

    @pytest.mark.parametrize("value,expected", [
        (1e-05, "1E-05"),
        (2.5e-07, "2.5E-07"),
        (0.0001, "0.0001"),
        (1e15, "1E+15"),
        (1.5e15, "1.5E+15"),
        (-2e16, "-2E+16"),
        (123456789012345.5, "123456789012345.5"),
    ])
    def test_exponent_notation(self, value, expected):
        assert format_invariant(value) == expected

    def test_non_finite(self):
        assert format_invariant(float("nan")) == "NaN"
        assert format_invariant(float("inf")) == "Infinity"
        assert format_invariant(float("-inf")) == "-Infinity"

    def test_export_lines(self, call_legs, tmp_path):
        path = export_csv(tmp_path / "payoff.csv", call_legs, [100.0, 120.0], 5.0)
        lines = path.read_text(encoding='utf-8').splitlines()
        assert lines == [CSV_HEADER, "100;0;-5;5", "120;20;15;5"]

    def test_header_literal(self):
        assert CSV_HEADER == "S_T;Payoff;Profit;PremiumInitiale"

    def test_fractional_values(self, call_legs, tmp_path):
        path = export_csv(str(tmp_path / "frac.csv"), call_legs, [110.5], 2.25)
        assert path.read_text().splitlines()[1] == "110.5;10.5;8.25;2.25"

    def test_full_grid_row_count(self, straddle_legs, tmp_path):
        path = export_csv(tmp_path / "grid.csv", straddle_legs, generate_grid(100.0), 10.0)
        assert len(path.read_text().splitlines()) == 202


class TestBreakevens:

    def test_straddle_breakevens(self, straddle_legs):
        points = breakeven_points(straddle_legs, generate_grid(100.0), premium=10.0)
        assert len(points) == 2
        assert points[0] == pytest.approx(90.0)
        assert points[1] == pytest.approx(110.0)

    def test_exact_grid_hit(self, call_legs):
        points = breakeven_points(call_legs, [90.0, 100.0, 105.0, 110.0], premium=5.0)
        assert points == [105.0]

    def test_no_breakeven(self, call_legs):
        assert breakeven_points(call_legs, [50.0, 60.0], premium=5.0) == []
