"""
Tests for the Implied Volatility Solver

Round-trip verification (sigma -> price -> sigma), the bisection fallback,
and precondition failures.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from optionpricer.analytics.implied_vol import (
    ImpliedVolatilityError,
    ImpliedVolSolver,
    RootNotBracketedError,
    solve_implied_volatility,
)
from optionpricer.core.option import create_call, create_put
from optionpricer.core.pricing import BlackScholesPricer, InvalidParameterError, PricingError


IV_TOL = 1e-6


@pytest.fixture
def bs():
    return BlackScholesPricer()


class TestRoundTrip:

    @pytest.mark.parametrize("sigma", [0.05, 0.2, 0.3, 0.8, 1.5])
    def test_call_round_trip(self, bs, sigma):
        call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, sigma)
        target = bs.price(call)
        guess = call.with_volatility(0.2)
        assert solve_implied_volatility(guess, target) == pytest.approx(sigma, abs=IV_TOL)

    def test_put_with_dividend(self, bs):
        put = create_put(100.0, 110.0, 0.03, 0.02, 0.5, 0.35)
        target = bs.price(put)
        assert solve_implied_volatility(put.with_volatility(0.1), target) == pytest.approx(0.35, abs=IV_TOL)

    def test_option_not_modified(self, bs):
        call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.2)
        target = bs.price(call.with_volatility(0.4))
        solve_implied_volatility(call, target)
        assert call.volatility == 0.2

    def test_zero_volatility_guess_uses_default(self, bs):
        call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.0)
        target = bs.price(call.with_volatility(0.25))
        assert solve_implied_volatility(call, target) == pytest.approx(0.25, abs=IV_TOL)

    def test_bisection_fallback(self, bs):
        # almost no vega at the initial guess, so Newton gives up immediately
        call = create_call(100.0, 150.0, 0.02, 0.0, 0.1, 0.001)
        target = bs.price(call.with_volatility(0.9))
        assert solve_implied_volatility(call, target) == pytest.approx(0.9, abs=1e-6)

    def test_solver_wrapper(self, bs):
        call = create_call(100.0, 95.0, 0.01, 0.0, 0.75, 0.2)
        target = bs.price(call.with_volatility(0.33))
        assert ImpliedVolSolver.solve(call, target) == pytest.approx(0.33, abs=IV_TOL)


class TestFailures:

    def test_not_bracketed(self):
        call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.2)
        with pytest.raises(RootNotBracketedError):
            solve_implied_volatility(call, target_price=99.0)

    def test_error_hierarchy(self):
        assert issubclass(RootNotBracketedError, ImpliedVolatilityError)
        assert issubclass(ImpliedVolatilityError, PricingError)

    @pytest.mark.parametrize("target", [0.0, -1.0])
    def test_non_positive_target(self, target):
        call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.2)
        with pytest.raises(InvalidParameterError):
            solve_implied_volatility(call, target)

    def test_expired_option(self):
        call = create_call(100.0, 100.0, 0.02, 0.0, 0.0, 0.2)
        with pytest.raises(InvalidParameterError):
            solve_implied_volatility(call, 5.0)

    def test_invalid_bounds(self):
        call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.2)
        with pytest.raises(InvalidParameterError):
            solve_implied_volatility(call, 5.0, low=0.5, high=0.1)
