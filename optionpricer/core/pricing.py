"""
Options Pricing Module for the Option Pricer

This module defines the pricing-method capability shared by all engines and
provides the closed-form Black-Scholes engine for European options with a
continuous dividend yield.

Mathematical Framework:
    The Black-Scholes model assumes:
    - European-style options (no early exercise)
    - Log-normal distribution of underlying returns
    - Constant volatility, risk-free rate and dividend yield
    - Continuous trading with no transaction costs

Key Formulas:
    Call Price: C = S*exp(-qT)*N(d1) - K*exp(-rT)*N(d2)
    Put Price:  P = K*exp(-rT)*N(-d2) - S*exp(-qT)*N(-d1)

    where:
        d1 = [ln(S/K) + (r - q + sigma^2/2)*T] / (sigma*sqrt(T))
        d2 = d1 - sigma*sqrt(T)
        N(x) = cumulative standard normal distribution (via erf)

Greeks Scaling:
    - Delta, Gamma: per unit of spot
    - Vega: per 1 percentage point of volatility (raw vega * 0.01)
    - Theta: per calendar day (annual theta / 365)
    - Rho: per 1 percentage point of rate (raw rho * 0.01)

Numerical Singularities:
    sigma = 0 or T = 0 make d1/d2 undefined. The engine does not guard these
    inputs; numpy arithmetic propagates nan/inf and callers are expected to
    validate before pricing.

Usage:
    from optionpricer.core.option import create_call
    from optionpricer.core.pricing import BlackScholesPricer

    bs = BlackScholesPricer()
    call = create_call(100, 100, 0.02, 0.0, 1.0, 0.2)
    price = bs.price(call)
    greeks = bs.greeks(call)

References:
    - Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate Liabilities.
    - Merton, R. C. (1973). Theory of Rational Option Pricing.
    - Hull, J. C. (2018). Options, Futures, and Other Derivatives.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Tuple

import numpy as np
from scipy.special import erf

from optionpricer.core.option import Option, DAYS_PER_YEAR

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class PricingError(Exception):
    """Base exception for pricing engine errors."""
    pass


class InvalidParameterError(PricingError, ValueError):
    """Exception raised when engine or simulation parameters are invalid."""
    pass


# =============================================================================
# Constants
# =============================================================================

# Scaling applied to vega and rho (sensitivity per one percentage point)
PERCENT = 0.01

GREEK_NAMES = ('delta', 'gamma', 'vega', 'theta', 'rho')

SQRT_2 = np.sqrt(2.0)
SQRT_2PI = np.sqrt(2.0 * np.pi)


# =============================================================================
# Helper Functions
# =============================================================================

def norm_cdf(x):
    """Standard normal cumulative distribution, N(x) = (1 + erf(x/sqrt(2))) / 2."""
    return 0.5 * (1.0 + erf(x / SQRT_2))


def norm_pdf(x):
    """Standard normal probability density."""
    return np.exp(-0.5 * x * x) / SQRT_2PI


# =============================================================================
# Pricing Method Interface
# =============================================================================

class PricingMethod(ABC):
    """
    Capability interface implemented by every pricing engine.

    Portfolios, strategies and analytical tools receive a PricingMethod
    instead of depending on a specific engine, so the same book can be
    valued side by side with Black-Scholes and Monte Carlo.
    """

    @abstractmethod
    def price(self, option: Option) -> float:
        """Fair value of one unit of the option."""

    @abstractmethod
    def delta(self, option: Option) -> float:
        """Sensitivity to the spot price."""

    @abstractmethod
    def gamma(self, option: Option) -> float:
        """Sensitivity of delta to the spot price."""

    @abstractmethod
    def vega(self, option: Option) -> float:
        """Sensitivity to volatility (scaling is engine specific)."""

    @abstractmethod
    def theta(self, option: Option) -> float:
        """Sensitivity to the passage of time."""

    @abstractmethod
    def rho(self, option: Option) -> float:
        """Sensitivity to the risk-free rate."""

    def greeks(self, option: Option) -> Dict[str, float]:
        """
        Calculate all Greeks of one option.

        Returns:
            Dictionary with keys 'delta', 'gamma', 'vega', 'theta', 'rho'
        """
        return {
            'delta': self.delta(option),
            'gamma': self.gamma(option),
            'vega': self.vega(option),
            'theta': self.theta(option),
            'rho': self.rho(option),
        }


# =============================================================================
# Black-Scholes Engine
# =============================================================================

class BlackScholesPricer(PricingMethod):
    """
    Closed-form Black-Scholes-Merton engine with continuous dividend yield.

    Example:
        >>> bs = BlackScholesPricer()
        >>> call = create_call(100, 100, 0.02, 0.0, 1.0, 0.2)
        >>> f"{bs.price(call):.4f}"
        '8.9160'
    """

    name = "black_scholes"

    @staticmethod
    def d1_d2(option: Option) -> Tuple[float, float]:
        """
        Calculate d1 and d2 for the option.

        Formula:
            d1 = [ln(S/K) + (r - q + sigma^2/2)*T] / (sigma*sqrt(T))
            d2 = d1 - sigma*sqrt(T)
        """
        sigma = np.float64(option.volatility)
        sigma_sqrt_t = sigma * np.sqrt(np.float64(option.maturity))
        with np.errstate(divide='ignore', invalid='ignore'):
            d1 = (
                np.log(option.spot / option.strike)
                + (option.rate - option.dividend_yield + 0.5 * sigma * sigma) * option.maturity
            ) / sigma_sqrt_t
        return d1, d1 - sigma_sqrt_t

    def price(self, option: Option) -> float:
        d1, d2 = self.d1_d2(option)
        df_r = np.exp(-option.rate * option.maturity)
        df_q = np.exp(-option.dividend_yield * option.maturity)

        if option.is_call:
            value = option.spot * df_q * norm_cdf(d1) - option.strike * df_r * norm_cdf(d2)
        else:
            value = option.strike * df_r * norm_cdf(-d2) - option.spot * df_q * norm_cdf(-d1)
        return float(value)

    def delta(self, option: Option) -> float:
        """
        Call: exp(-qT)*N(d1)
        Put:  exp(-qT)*(N(d1) - 1)
        """
        d1, _ = self.d1_d2(option)
        df_q = np.exp(-option.dividend_yield * option.maturity)
        if option.is_call:
            return float(df_q * norm_cdf(d1))
        return float(df_q * (norm_cdf(d1) - 1.0))

    def gamma(self, option: Option) -> float:
        """exp(-qT)*phi(d1) / (S*sigma*sqrt(T)), identical for calls and puts."""
        d1, _ = self.d1_d2(option)
        with np.errstate(divide='ignore', invalid='ignore'):
            gamma = (
                np.exp(-option.dividend_yield * option.maturity) * norm_pdf(d1)
                / (option.spot * np.float64(option.volatility) * np.sqrt(option.maturity))
            )
        return float(gamma)

    def vega(self, option: Option) -> float:
        """Vega per one percentage point of volatility."""
        return self.raw_vega(option) * PERCENT

    def raw_vega(self, option: Option) -> float:
        """Vega per unit of volatility: S*exp(-qT)*phi(d1)*sqrt(T)."""
        d1, _ = self.d1_d2(option)
        return float(
            option.spot * np.exp(-option.dividend_yield * option.maturity)
            * norm_pdf(d1) * np.sqrt(option.maturity)
        )

    def theta(self, option: Option) -> float:
        """
        Theta per calendar day.

        Per year:
            Call: -S*e^(-qT)*phi(d1)*sigma/(2*sqrt(T)) - r*K*e^(-rT)*N(d2) + q*S*e^(-qT)*N(d1)
            Put:  -S*e^(-qT)*phi(d1)*sigma/(2*sqrt(T)) + r*K*e^(-rT)*N(-d2) - q*S*e^(-qT)*N(-d1)
        """
        d1, d2 = self.d1_d2(option)
        S, K, r, q, T = (
            option.spot, option.strike, option.rate, option.dividend_yield, option.maturity
        )
        df_r = np.exp(-r * T)
        df_q = np.exp(-q * T)

        with np.errstate(divide='ignore', invalid='ignore'):
            time_decay = -S * df_q * norm_pdf(d1) * option.volatility / (2.0 * np.sqrt(np.float64(T)))

        if option.is_call:
            theta_annual = time_decay - r * K * df_r * norm_cdf(d2) + q * S * df_q * norm_cdf(d1)
        else:
            theta_annual = time_decay + r * K * df_r * norm_cdf(-d2) - q * S * df_q * norm_cdf(-d1)

        return float(theta_annual / DAYS_PER_YEAR)

    def rho(self, option: Option) -> float:
        """
        Rho per one percentage point of rate.

        Call:  K*T*exp(-rT)*N(d2)
        Put:  -K*T*exp(-rT)*N(-d2)
        """
        _, d2 = self.d1_d2(option)
        k_t_df = option.strike * option.maturity * np.exp(-option.rate * option.maturity)
        if option.is_call:
            rho = k_t_df * norm_cdf(d2)
        else:
            rho = -k_t_df * norm_cdf(-d2)
        return float(rho * PERCENT)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    'PricingError',
    'InvalidParameterError',
    'PricingMethod',
    'BlackScholesPricer',
    'norm_cdf',
    'norm_pdf',
    'PERCENT',
    'GREEK_NAMES',
]
