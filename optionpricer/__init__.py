"""
Option Pricer Package

European option pricing and risk analysis: closed-form Black-Scholes and
Monte Carlo engines, multi-leg strategy templates, portfolio aggregation,
structure recognition, payoff export, implied volatility and delta-hedging
simulation.

Modules:
    core: Option contract, pricing engines and portfolio aggregation
    structures: Strategy templates, investor objectives and structure detection
    analytics: Payoff profiles, portfolio analysis, implied volatility, hedging
    cli: Command-line interface, position books and environment management
"""

__version__ = "1.0.0"
__author__ = "Option Pricer Team"

from optionpricer.core import (
    Option,
    OptionType,
    create_call,
    create_put,
    BlackScholesPricer,
    MonteCarloPricer,
    Portfolio,
)

__all__ = [
    "__version__",
    "__author__",
    "Option",
    "OptionType",
    "create_call",
    "create_put",
    "BlackScholesPricer",
    "MonteCarloPricer",
    "Portfolio",
]
