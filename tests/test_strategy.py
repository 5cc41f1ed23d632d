"""
Unit Tests for Strategy Templates and Investor Objectives

Test Categories:
    1. Template Construction Tests
        - Leg layout of every template
        - Strike ordering validation

    2. Payoff Tests
        - Terminal payoffs at reference prices

    3. Valuation Tests
        - Net premium and Greeks as weighted sums

    4. Registry and Objective Tests
"""

import pytest
import numpy as np

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from optionpricer.core.pricing import BlackScholesPricer
from optionpricer.structures.strategy import (
    MAX_OBJECTIVES,
    OBJECTIVES,
    STRATEGY_BUILDERS,
    StrategyError,
    StrategyName,
    StrategyValidationError,
    bear_put_spread,
    build_strategy,
    bull_call_spread,
    butterfly,
    calendar_spread,
    iron_condor,
    objective_for_strategy,
    objectives_for,
    straddle,
    strangle,
)


# =============================================================================
# Test Fixtures
# =============================================================================

MARKET = dict(spot=100.0, rate=0.02, dividend_yield=0.0, maturity=1.0, volatility=0.20)


@pytest.fixture
def bs():
    return BlackScholesPricer()


def _layout(strategy):
    return [
        ('C' if leg.option.is_call else 'P', leg.option.strike, leg.quantity)
        for leg in strategy.legs
    ]


# =============================================================================
# Template Construction Tests
# =============================================================================

class TestTemplateLegs:

    def test_bull_call_spread(self):
        s = bull_call_spread(**MARKET, k1=95.0, k2=105.0)
        assert s.name is StrategyName.BULL_CALL_SPREAD
        assert _layout(s) == [('C', 95.0, 1), ('C', 105.0, -1)]

    def test_bear_put_spread(self):
        s = bear_put_spread(**MARKET, k1=95.0, k2=105.0)
        assert _layout(s) == [('P', 105.0, 1), ('P', 95.0, -1)]

    def test_butterfly(self):
        s = butterfly(**MARKET, strike=100.0, width=10.0)
        assert _layout(s) == [('C', 90.0, 1), ('C', 100.0, -2), ('C', 110.0, 1)]

    def test_straddle(self):
        s = straddle(**MARKET, strike=100.0)
        assert _layout(s) == [('C', 100.0, 1), ('P', 100.0, 1)]

    def test_strangle(self):
        s = strangle(**MARKET, k1=90.0, k2=110.0)
        assert _layout(s) == [('P', 90.0, 1), ('C', 110.0, 1)]

    def test_calendar_spread(self):
        s = calendar_spread(100.0, 0.02, 0.0, 0.25, 1.0, 0.2, 100.0)
        assert [(leg.option.maturity, leg.quantity) for leg in s.legs] == [(1.0, 1), (0.25, -1)]
        assert all(leg.option.is_call for leg in s.legs)

    def test_iron_condor(self):
        s = iron_condor(**MARKET, k1=80.0, k2=90.0, k3=110.0, k4=120.0)
        assert _layout(s) == [
            ('P', 80.0, 1), ('P', 90.0, -1), ('C', 110.0, -1), ('C', 120.0, 1)
        ]

    def test_legs_share_market(self):
        s = iron_condor(**MARKET, k1=80.0, k2=90.0, k3=110.0, k4=120.0)
        for leg in s.legs:
            assert leg.option.spot == 100.0
            assert leg.option.volatility == 0.20
            assert leg.option.maturity == 1.0


class TestTemplateValidation:

    def test_bull_call_strikes_must_increase(self):
        with pytest.raises(StrategyValidationError):
            bull_call_spread(**MARKET, k1=105.0, k2=95.0)

    def test_equal_strikes_rejected(self):
        with pytest.raises(StrategyValidationError):
            strangle(**MARKET, k1=100.0, k2=100.0)

    def test_iron_condor_order(self):
        with pytest.raises(StrategyValidationError):
            iron_condor(**MARKET, k1=80.0, k2=110.0, k3=90.0, k4=120.0)

    @pytest.mark.parametrize("width", [0.0, -5.0, 100.0])
    def test_butterfly_width(self, width):
        with pytest.raises(StrategyValidationError):
            butterfly(**MARKET, strike=100.0, width=width)

    def test_calendar_maturity_order(self):
        with pytest.raises(StrategyValidationError):
            calendar_spread(100.0, 0.02, 0.0, 1.0, 0.5, 0.2, 100.0)

    def test_error_hierarchy(self):
        assert issubclass(StrategyValidationError, StrategyError)
        assert issubclass(StrategyValidationError, ValueError)


# =============================================================================
# Payoff Tests
# =============================================================================

class TestStrategyPayoff:

    def test_butterfly_payoff(self):
        s = butterfly(**MARKET, strike=100.0, width=10.0)
        assert s.payoff(100.0) == pytest.approx(10.0)
        assert s.payoff(80.0) == pytest.approx(0.0)
        assert s.payoff(130.0) == pytest.approx(0.0)

    def test_straddle_payoff(self):
        s = straddle(**MARKET, strike=100.0)
        assert s.payoff(80.0) == pytest.approx(20.0)
        assert s.payoff(100.0) == pytest.approx(0.0)
        assert s.payoff(120.0) == pytest.approx(20.0)

    def test_iron_condor_payoff(self):
        s = iron_condor(**MARKET, k1=80.0, k2=90.0, k3=110.0, k4=120.0)
        assert s.payoff(50.0) == pytest.approx(-10.0)
        assert s.payoff(100.0) == pytest.approx(0.0)
        assert s.payoff(150.0) == pytest.approx(-10.0)

    def test_bull_call_spread_payoff_capped(self):
        s = bull_call_spread(**MARKET, k1=95.0, k2=105.0)
        np.testing.assert_allclose(s.payoff(np.array([90.0, 100.0, 150.0])), [0.0, 5.0, 10.0])


# =============================================================================
# Valuation Tests
# =============================================================================

class TestStrategyValuation:

    def test_price_is_weighted_sum(self, bs):
        s = butterfly(**MARKET, strike=100.0, width=10.0)
        expected = sum(leg.quantity * bs.price(leg.option) for leg in s.legs)
        assert s.price(bs) == pytest.approx(expected)
        assert s.price(bs) > 0

    def test_straddle_greeks(self, bs):
        s = straddle(**MARKET, strike=100.0)
        assert s.gamma(bs) > 0
        assert s.vega(bs) > 0
        assert s.theta(bs) < 0
        assert abs(s.delta(bs)) < 0.25

    def test_iron_condor_is_net_credit(self, bs):
        s = iron_condor(**MARKET, k1=80.0, k2=90.0, k3=110.0, k4=120.0)
        assert s.price(bs) < 0

    def test_describe(self):
        s = bull_call_spread(**MARKET, k1=90.0, k2=100.0)
        assert s.describe() == "Long 1C(K=90, T=1) + Short 1C(K=100, T=1)"
        assert str(s).startswith("Bull Call Spread: ")

    def test_describe_fractional_values(self):
        s = straddle(100.0, 0.02, 0.0, 0.25, 0.2, 102.5)
        assert s.describe() == "Long 1C(K=102.5, T=0.25) + Long 1P(K=102.5, T=0.25)"


# =============================================================================
# Registry and Objective Tests
# =============================================================================

class TestRegistry:

    def test_every_name_has_builder(self):
        assert set(STRATEGY_BUILDERS) == set(StrategyName)

    @pytest.mark.parametrize("text", ["iron_condor", "Iron Condor", "IRON_CONDOR"])
    def test_parse_names(self, text):
        assert StrategyName.parse(text) is StrategyName.IRON_CONDOR

    def test_unknown_name(self):
        with pytest.raises(StrategyValidationError):
            StrategyName.parse("jade lizard")

    def test_build_strategy(self):
        s = build_strategy("straddle", **MARKET, strike=100.0)
        assert s.name is StrategyName.STRADDLE

    def test_build_strategy_missing_param(self):
        with pytest.raises(StrategyValidationError):
            build_strategy("butterfly", **MARKET, strike=100.0)


class TestObjectives:

    def test_catalogue(self):
        assert [o.number for o in OBJECTIVES] == list(range(1, 8))
        assert {o.strategy for o in OBJECTIVES} == set(StrategyName)

    def test_objective_for_strategy(self):
        objective = objective_for_strategy("Iron Condor")
        assert objective.number == 7
        assert objective.title == "Range trading"

    def test_selection(self):
        chosen = objectives_for("1, 4,1")
        assert [o.strategy for o in chosen] == [
            StrategyName.BULL_CALL_SPREAD, StrategyName.STRADDLE
        ]

    @pytest.mark.parametrize("selection", ["", "0", "8", "a", "1,2,3,4"])
    def test_invalid_selection(self, selection):
        with pytest.raises(StrategyValidationError):
            objectives_for(selection)

    def test_max_objectives(self):
        assert len(objectives_for("1,2,3")) == MAX_OBJECTIVES
