"""
Core Module for the Option Pricer

Fundamental building blocks: the European option contract, the pricing
method interface with its Black-Scholes and Monte Carlo engines, and the
portfolio aggregator.

Components:
    - option: Option contract, OptionType, Leg and factory functions
    - pricing: PricingMethod interface and BlackScholesPricer
    - monte_carlo: MonteCarloPricer (bump-and-revalue Greeks)
    - portfolio: Portfolio of option lines and strategy lines

Greeks Scaling:
    - Black-Scholes: theta per day, vega/rho per 1%
    - Monte Carlo: theta per year, vega/rho per unit

Usage:
    >>> from optionpricer.core import create_call, BlackScholesPricer
    >>> call = create_call(100, 100, 0.02, 0.0, 1.0, 0.2)
    >>> print(f"Call price: {BlackScholesPricer().price(call):.2f}")
    Call price: 8.92
"""

from optionpricer.core.option import (
    DAYS_PER_YEAR,
    Leg,
    Option,
    OptionError,
    OptionType,
    OptionValidationError,
    create_call,
    create_put,
    years_between,
)
from optionpricer.core.pricing import (
    GREEK_NAMES,
    BlackScholesPricer,
    InvalidParameterError,
    PricingError,
    PricingMethod,
)
from optionpricer.core.monte_carlo import MonteCarloPricer
from optionpricer.core.portfolio import (
    Portfolio,
    PortfolioError,
    PortfolioValidationError,
)

__all__ = [
    # Option
    'DAYS_PER_YEAR',
    'Leg',
    'Option',
    'OptionError',
    'OptionType',
    'OptionValidationError',
    'create_call',
    'create_put',
    'years_between',
    # Pricing
    'GREEK_NAMES',
    'BlackScholesPricer',
    'InvalidParameterError',
    'PricingError',
    'PricingMethod',
    'MonteCarloPricer',
    # Portfolio
    'Portfolio',
    'PortfolioError',
    'PortfolioValidationError',
]
