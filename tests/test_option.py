"""
Unit Tests for the Option Contract

Test Categories:
    1. Construction Tests
        - Valid initialization and type parsing
        - Input validation (non-finite, non-positive, negative values)

    2. Clone Tests
        - with_* helpers return new instruments
        - The source contract is unchanged

    3. Payoff Tests
        - Scalar and vectorized payoffs for calls and puts

    4. Date Helper Tests
"""

import pytest
import numpy as np
from dataclasses import FrozenInstanceError
from datetime import date

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from optionpricer.core.option import (
    Leg,
    Option,
    OptionError,
    OptionType,
    OptionValidationError,
    create_call,
    create_put,
    years_between,
)


# =============================================================================
# Test Fixtures
# =============================================================================

SPOT = 100.0
STRIKE = 100.0
RATE = 0.02
DIV = 0.0
TIME = 1.0
SIGMA = 0.20


@pytest.fixture
def sample_call():
    return create_call(SPOT, STRIKE, RATE, DIV, TIME, SIGMA)


@pytest.fixture
def sample_put():
    return create_put(SPOT, 95.0, RATE, DIV, TIME, SIGMA)


# =============================================================================
# Construction Tests
# =============================================================================

class TestOptionConstruction:
    """Tests for Option initialization."""

    def test_create_call(self, sample_call):
        assert sample_call.option_type is OptionType.CALL
        assert sample_call.is_call
        assert not sample_call.is_put
        assert sample_call.spot == SPOT
        assert sample_call.volatility == SIGMA

    def test_create_put(self, sample_put):
        assert sample_put.option_type is OptionType.PUT
        assert sample_put.is_put
        assert sample_put.strike == 95.0

    def test_type_parsed_from_string(self):
        opt = Option('P', SPOT, STRIKE, RATE, DIV, TIME, SIGMA)
        assert opt.option_type is OptionType.PUT

    def test_invalid_type(self):
        with pytest.raises(OptionValidationError):
            Option('straddle', SPOT, STRIKE, RATE, DIV, TIME, SIGMA)

    def test_fields_are_floats(self):
        opt = Option(OptionType.CALL, 100, 100, 0, 0, 1, 0)
        assert isinstance(opt.spot, float)
        assert isinstance(opt.volatility, float)

    @pytest.mark.parametrize("field,value", [
        ('spot', 0.0),
        ('spot', -1.0),
        ('strike', 0.0),
        ('maturity', -0.1),
        ('volatility', -0.2),
        ('rate', float('nan')),
        ('spot', float('inf')),
    ])
    def test_invalid_parameters(self, field, value):
        params = dict(option_type='call', spot=SPOT, strike=STRIKE, rate=RATE,
                      dividend_yield=DIV, maturity=TIME, volatility=SIGMA)
        params[field] = value
        with pytest.raises(OptionValidationError):
            Option(**params)

    def test_validation_error_hierarchy(self):
        assert issubclass(OptionValidationError, OptionError)
        assert issubclass(OptionValidationError, ValueError)

    def test_zero_maturity_and_volatility_allowed(self):
        opt = create_call(SPOT, STRIKE, RATE, DIV, 0.0, 0.0)
        assert opt.maturity == 0.0
        assert opt.volatility == 0.0

    def test_option_is_immutable(self, sample_call):
        with pytest.raises(FrozenInstanceError):
            sample_call.volatility = 0.3


# =============================================================================
# Clone Tests
# =============================================================================

class TestOptionClones:
    """Tests for the with_* helpers."""

    def test_with_volatility(self, sample_call):
        bumped = sample_call.with_volatility(0.35)
        assert bumped.volatility == 0.35
        assert sample_call.volatility == SIGMA
        assert bumped.strike == sample_call.strike

    def test_with_spot_and_maturity(self, sample_call):
        moved = sample_call.with_spot(110.0).with_maturity(0.5)
        assert moved.spot == 110.0
        assert moved.maturity == 0.5
        assert sample_call.spot == SPOT
        assert sample_call.maturity == TIME

    def test_with_rate(self, sample_call):
        assert sample_call.with_rate(0.05).rate == 0.05

    def test_clone_is_validated(self, sample_call):
        with pytest.raises(OptionValidationError):
            sample_call.with_volatility(-0.1)


# =============================================================================
# Payoff Tests
# =============================================================================

class TestOptionPayoff:
    """Tests for terminal payoffs."""

    def test_call_payoff(self, sample_call):
        assert sample_call.payoff(120.0) == 20.0
        assert sample_call.payoff(80.0) == 0.0

    def test_put_payoff(self, sample_put):
        assert sample_put.payoff(80.0) == 15.0
        assert sample_put.payoff(100.0) == 0.0

    def test_vectorized_payoff(self, sample_call):
        prices = np.array([80.0, 100.0, 130.0])
        np.testing.assert_allclose(sample_call.payoff(prices), [0.0, 0.0, 30.0])

    def test_leg_unpacks(self, sample_call):
        option, quantity = Leg(sample_call, -2)
        assert option is sample_call
        assert quantity == -2


# =============================================================================
# Date Helper Tests
# =============================================================================

class TestYearsBetween:

    def test_half_year(self):
        assert years_between(date(2024, 1, 1), date(2024, 7, 1)) == pytest.approx(182 / 365)

    def test_past_date_is_zero(self):
        assert years_between(date(2024, 7, 1), date(2024, 1, 1)) == 0.0
