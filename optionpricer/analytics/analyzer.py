"""
Portfolio Analyzer

Capital requirement estimate and plain-language reading of a book's
aggregate Greeks.

Capital Requirement:
    - Long line:  premium * quantity * contract multiplier (100)
    - Short line: spot * |quantity| * 100 * margin_pct (default 20% of notional)

Interpretation Thresholds:
    - Delta: bullish above +0.1, bearish below -0.1, neutral otherwise
    - Gamma: sign only
    - Vega:  long above +0.01, short below -0.01
    - Theta: losing below -0.01, earning above +0.01
    - Net position: debit when positive, credit when negative

Usage:
    from optionpricer.analytics.analyzer import summarize

    report = summarize(portfolio, BlackScholesPricer())
    print(report['interpretation']['delta'])
"""

import logging
from typing import Any, Dict, Iterable, Tuple

from optionpricer.core.option import Option
from optionpricer.core.portfolio import Portfolio
from optionpricer.core.pricing import PricingMethod

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CONTRACT_MULTIPLIER = 100.0
DEFAULT_MARGIN_PCT = 0.20

DELTA_THRESHOLD = 0.1
VEGA_THRESHOLD = 0.01
THETA_THRESHOLD = 0.01


# =============================================================================
# Capital
# =============================================================================

def capital_required(
    legs: Iterable[Tuple[Option, int]],
    method: PricingMethod,
    margin_pct: float = DEFAULT_MARGIN_PCT
) -> float:
    """
    Estimate the capital needed to carry a book.

    Long legs pay their premium; short legs are charged a broker margin
    expressed as a fraction of the underlying notional.

    Args:
        legs: (option, signed quantity) pairs
        method: Pricing method used for premiums
        margin_pct: Margin as a fraction of notional for short legs

    Returns:
        Capital in currency units
    """
    capital = 0.0
    for option, quantity in legs:
        if quantity > 0:
            capital += method.price(option) * quantity * CONTRACT_MULTIPLIER
        elif quantity < 0:
            capital += option.spot * abs(quantity) * CONTRACT_MULTIPLIER * margin_pct
    return capital


# =============================================================================
# Interpretation
# =============================================================================

def interpret_delta(delta: float) -> str:
    if delta > DELTA_THRESHOLD:
        return "Bullish portfolio (gains if the underlying rises)"
    if delta < -DELTA_THRESHOLD:
        return "Bearish portfolio (gains if the underlying falls)"
    return "Neutral portfolio (little sensitivity to price moves)"


def interpret_gamma(gamma: float) -> str:
    if gamma > 0:
        return "Positive gamma: benefits from large moves (long options)"
    if gamma < 0:
        return "Negative gamma: loses on large moves (short options)"
    return "Gamma neutral"


def interpret_vega(vega: float) -> str:
    if vega > VEGA_THRESHOLD:
        return "Gains if volatility rises (long vega)"
    if vega < -VEGA_THRESHOLD:
        return "Loses if volatility rises (short vega)"
    return "Little sensitivity to volatility"


def interpret_theta(theta: float) -> str:
    if theta < -THETA_THRESHOLD:
        return "Loses value every day (unfavourable time decay)"
    if theta > THETA_THRESHOLD:
        return "Gains value every day (favourable time decay)"
    return "Little sensitivity to time"


def interpret_net_position(total_value: float) -> str:
    """Describe whether the book was opened for a net debit or a net credit."""
    if total_value > 0:
        return (
            f"Net debit: {abs(total_value):.2f} (long positions dominate), "
            "more premium paid than received"
        )
    if total_value < 0:
        return (
            f"Net credit: {abs(total_value):.2f} (short positions dominate), "
            "more premium received than paid"
        )
    return "Balanced portfolio (zero-cost strategy)"


# =============================================================================
# Summary
# =============================================================================

def summarize(
    portfolio: Portfolio,
    method: PricingMethod,
    margin_pct: float = DEFAULT_MARGIN_PCT
) -> Dict[str, Any]:
    """
    Price a portfolio and interpret its aggregate risk.

    Returns:
        Dictionary with keys:
            - greeks: price and Greeks of the whole book
            - capital_required: estimate from capital_required()
            - interpretation: one sentence per figure (delta, gamma, vega,
              theta, net_position)
    """
    greeks = portfolio.greeks(method)
    capital = capital_required(portfolio.flatten_legs(), method, margin_pct)

    logger.info(
        f"Analyzed {portfolio.name}: value={greeks['price']:.4f}, "
        f"delta={greeks['delta']:.4f}, capital={capital:.2f}"
    )

    return {
        'greeks': greeks,
        'capital_required': capital,
        'interpretation': {
            'delta': interpret_delta(greeks['delta']),
            'gamma': interpret_gamma(greeks['gamma']),
            'vega': interpret_vega(greeks['vega']),
            'theta': interpret_theta(greeks['theta']),
            'net_position': interpret_net_position(greeks['price']),
        },
    }
