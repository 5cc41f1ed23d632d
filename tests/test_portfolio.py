"""
Unit Tests for the Portfolio Aggregator

Tests line management, flattening of strategy lines into legs, and
aggregation of prices and Greeks under both pricing engines.
"""

import pytest
import numpy as np

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from optionpricer.core.monte_carlo import MonteCarloPricer
from optionpricer.core.option import create_call, create_put
from optionpricer.core.portfolio import Portfolio, PortfolioValidationError
from optionpricer.core.pricing import GREEK_NAMES, BlackScholesPricer
from optionpricer.structures.strategy import butterfly, straddle


SPOT = 100.0
RATE = 0.02
TIME = 1.0
SIGMA = 0.20


@pytest.fixture
def bs():
    return BlackScholesPricer()


@pytest.fixture
def call():
    return create_call(SPOT, 100.0, RATE, 0.0, TIME, SIGMA)


@pytest.fixture
def put():
    return create_put(SPOT, 95.0, RATE, 0.0, TIME, SIGMA)


@pytest.fixture
def fly():
    return butterfly(SPOT, RATE, 0.0, TIME, SIGMA, 100.0, 10.0)


@pytest.fixture
def book(call, put, fly):
    portfolio = Portfolio(name="test book")
    portfolio.add_option(call, 2)
    portfolio.add_option(put, -1)
    portfolio.add_strategy(fly, 3)
    return portfolio


class TestPortfolioLines:

    def test_empty_portfolio(self, bs):
        portfolio = Portfolio()
        assert len(portfolio) == 0
        assert list(portfolio.flatten_legs()) == []
        assert portfolio.price(bs) == 0.0
        assert portfolio.delta(bs) == 0.0

    def test_zero_quantity_dropped(self, call, fly):
        portfolio = Portfolio()
        portfolio.add_option(call, 0)
        portfolio.add_strategy(fly, 0)
        assert len(portfolio) == 0
        assert portfolio.option_lines == ()
        assert portfolio.strategy_lines == ()

    @pytest.mark.parametrize("quantity", [0.5, 1.5, -2.0, True, "2", None])
    def test_non_integer_quantity_rejected(self, call, fly, quantity):
        portfolio = Portfolio()
        with pytest.raises(PortfolioValidationError):
            portfolio.add_option(call, quantity)
        with pytest.raises(PortfolioValidationError):
            portfolio.add_strategy(fly, quantity)
        assert len(portfolio) == 0

    def test_numpy_integer_quantity_accepted(self, call):
        portfolio = Portfolio()
        portfolio.add_option(call, np.int64(-3))
        (_, quantity), = portfolio.option_lines
        assert quantity == -3
        assert type(quantity) is int

    def test_lines_kept_in_order(self, book, call, put):
        assert book.option_lines == ((call, 2), (put, -1))
        assert len(book.strategy_lines) == 1
        assert len(book) == 3

    def test_flatten_multiplies_strategy_quantities(self, book, call, put):
        legs = list(book.flatten_legs())
        assert [leg.quantity for leg in legs] == [2, -1, 3, -6, 3]
        assert legs[0].option is call
        assert legs[1].option is put
        assert [leg.option.strike for leg in legs[2:]] == [90.0, 100.0, 110.0]

    def test_flatten_is_repeatable(self, book):
        first = list(book.flatten_legs())
        second = list(book.flatten_legs())
        assert first == second
        assert list(book) == first

    def test_short_strategy_line(self):
        portfolio = Portfolio()
        portfolio.add_strategy(straddle(SPOT, RATE, 0.0, TIME, SIGMA, 100.0), -2)
        assert [leg.quantity for leg in portfolio.flatten_legs()] == [-2, -2]


class TestPortfolioValuation:

    def test_price_is_weighted_sum(self, book, bs, call, put, fly):
        expected = 2 * bs.price(call) - bs.price(put) + 3 * fly.price(bs)
        assert book.price(bs) == pytest.approx(expected)

    def test_greeks_weighted(self, book, bs, call, put, fly):
        expected = 2 * bs.delta(call) - bs.delta(put) + 3 * fly.delta(bs)
        assert book.delta(bs) == pytest.approx(expected)
        greeks = book.greeks(bs)
        assert set(greeks) == {'price', *GREEK_NAMES}
        assert greeks['vega'] == pytest.approx(book.vega(bs))

    def test_monte_carlo_close_to_black_scholes(self, call, put, bs):
        portfolio = Portfolio()
        portfolio.add_option(call, 1)
        portfolio.add_option(put, 1)
        mc = MonteCarloPricer(simulations=200_000, seed=11)
        assert portfolio.price(mc) == pytest.approx(portfolio.price(bs), abs=0.15)

    def test_risk_table(self, book, bs):
        table = book.risk_table(bs)
        assert list(table.columns) == [
            'type', 'strike', 'maturity', 'quantity', 'unit_price', 'price', *GREEK_NAMES
        ]
        assert len(table) == 5
        assert table['price'].sum() == pytest.approx(book.price(bs))
        assert table['delta'].sum() == pytest.approx(book.delta(bs))

    def test_empty_risk_table(self, bs):
        table = Portfolio().risk_table(bs)
        assert table.empty
        assert 'unit_price' in table.columns

    def test_repr(self, book):
        assert repr(book) == "Portfolio(name='test book', options=2, strategies=1)"
