"""
Tests for the Portfolio Analyzer

Capital requirement, threshold-based interpretation of Greeks and the
combined summary.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from optionpricer.analytics.analyzer import (
    capital_required,
    interpret_delta,
    interpret_gamma,
    interpret_net_position,
    interpret_theta,
    interpret_vega,
    summarize,
)
from optionpricer.core.option import Leg, create_call, create_put
from optionpricer.core.portfolio import Portfolio
from optionpricer.core.pricing import BlackScholesPricer


@pytest.fixture
def bs():
    return BlackScholesPricer()


@pytest.fixture
def call():
    return create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.2)


@pytest.fixture
def put():
    return create_put(100.0, 90.0, 0.02, 0.0, 1.0, 0.2)


class TestCapitalRequired:

    def test_long_leg_pays_premium(self, bs, call):
        capital = capital_required([Leg(call, 2)], bs)
        assert capital == pytest.approx(bs.price(call) * 2 * 100)

    def test_short_leg_charged_margin(self, bs, put):
        capital = capital_required([Leg(put, -3)], bs)
        assert capital == pytest.approx(100.0 * 3 * 100 * 0.20)

    def test_custom_margin(self, bs, put):
        assert capital_required([(put, -1)], bs, margin_pct=0.5) == pytest.approx(5000.0)

    def test_mixed_book(self, bs, call, put):
        capital = capital_required([Leg(call, 1), Leg(put, -1)], bs)
        assert capital == pytest.approx(bs.price(call) * 100 + 2000.0)

    def test_empty_book(self, bs):
        assert capital_required([], bs) == 0.0


class TestInterpretation:

    @pytest.mark.parametrize("delta,word", [(0.5, "Bullish"), (-0.5, "Bearish"), (0.1, "Neutral"), (-0.05, "Neutral")])
    def test_delta(self, delta, word):
        assert interpret_delta(delta).startswith(word)

    def test_gamma(self):
        assert interpret_gamma(0.01).startswith("Positive gamma")
        assert interpret_gamma(-0.01).startswith("Negative gamma")
        assert interpret_gamma(0.0) == "Gamma neutral"

    def test_vega(self):
        assert "long vega" in interpret_vega(0.5)
        assert "short vega" in interpret_vega(-0.5)
        assert interpret_vega(0.01) == "Little sensitivity to volatility"

    def test_theta(self):
        assert interpret_theta(-0.02).startswith("Loses value")
        assert interpret_theta(0.02).startswith("Gains value")
        assert interpret_theta(-0.01) == "Little sensitivity to time"

    def test_net_position(self):
        assert interpret_net_position(12.346).startswith("Net debit: 12.35")
        assert interpret_net_position(-3.0).startswith("Net credit: 3.00")
        assert interpret_net_position(0.0).startswith("Balanced")


class TestSummarize:

    def test_summary(self, bs, call, put):
        book = Portfolio(name="summary")
        book.add_option(call, 1)
        book.add_option(put, -1)
        report = summarize(book, bs)

        assert report['greeks']['price'] == pytest.approx(book.price(bs))
        assert report['capital_required'] == pytest.approx(
            capital_required(book.flatten_legs(), bs)
        )
        assert set(report['interpretation']) == {'delta', 'gamma', 'vega', 'theta', 'net_position'}
        assert report['interpretation']['delta'].startswith("Bullish")
        assert report['interpretation']['net_position'].startswith("Net debit")
