"""
Monte Carlo Pricing Engine for the Option Pricer

This module prices European options by simulating terminal prices of the
underlying under the risk-neutral measure and averaging discounted payoffs.
Greeks are obtained by bump-and-revalue: each sensitivity re-runs the full
simulation on a clone of the option with one input perturbed.

Mathematical Background:
    Risk-neutral GBM terminal price:
        S_T = S0 * exp((r - q - sigma^2/2)*T + sigma*sqrt(T)*Z),  Z ~ N(0, 1)

    Price estimate:
        V = exp(-rT) * mean(payoff(S_T))

    Z is produced by Box-Muller from two independent uniforms:
        Z = sqrt(-2*ln(U1)) * cos(2*pi*U2)

Finite-Difference Greeks:
    - Delta: central difference, bump = 1% of spot
    - Gamma: second-order central difference, same bump
    - Vega:  forward difference, bump = 0.01 absolute, per unit of volatility
    - Theta: -(V(T - 1 day) - V(T)) / 1 day, 0 when T <= 1 day
    - Rho:   forward difference, bump = 0.01 absolute, per unit of rate

    Vega and rho are NOT rescaled to percentage points. Black-Scholes vega
    is reported per 1% of volatility, so Monte Carlo vega is about 100 times
    larger for the same option.

Reproducibility:
    The engine owns a single numpy Generator. Every evaluation consumes fresh
    draws from the stream, so successive prices are independent samples.
    Two engines built with the same seed return bit-identical results for
    the same sequence of calls; reseed() restarts the stream.

Usage:
    from optionpricer.core.monte_carlo import MonteCarloPricer

    mc = MonteCarloPricer(simulations=100_000, seed=42)
    price = mc.price(call)
    price, stderr = mc.price_with_error(call)
    delta = mc.delta(call)

References:
    - Glasserman, P. (2003). Monte Carlo Methods in Financial Engineering.
    - Box, G. E. P., & Muller, M. E. (1958). A Note on the Generation of
      Random Normal Deviates.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from optionpricer.core.option import Option, DAYS_PER_YEAR
from optionpricer.core.pricing import InvalidParameterError, PricingMethod

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_NUM_SIMULATIONS = 50_000

SPOT_BUMP_PCT = 0.01
VOL_BUMP = 0.01
RATE_BUMP = 0.01
TIME_BUMP = 1.0 / DAYS_PER_YEAR


# =============================================================================
# Random Draws
# =============================================================================

def standard_normals(rng: np.random.Generator, size: int) -> np.ndarray:
    """
    Draw standard normal variates with the Box-Muller transform.

    Uniform samples equal to exactly 0 or 1 make ln(U1) singular; such pairs
    are discarded and redrawn so the output never contains nan or inf.

    Args:
        rng: Generator supplying the uniforms
        size: Number of normal variates

    Returns:
        Array of shape (size,)
    """
    u1 = rng.random(size)
    u2 = rng.random(size)

    bad = (u1 <= 0.0) | (u1 >= 1.0) | (u2 <= 0.0) | (u2 >= 1.0)
    while np.any(bad):
        count = int(bad.sum())
        u1[bad] = rng.random(count)
        u2[bad] = rng.random(count)
        bad = (u1 <= 0.0) | (u1 >= 1.0) | (u2 <= 0.0) | (u2 >= 1.0)

    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


# =============================================================================
# Monte Carlo Engine
# =============================================================================

class MonteCarloPricer(PricingMethod):
    """
    Monte Carlo engine for European options under risk-neutral GBM.

    Attributes:
        simulations (int): Number of terminal prices per evaluation
        seed (Optional[int]): Seed of the random stream (None for entropy)

    Example:
        >>> mc = MonteCarloPricer(simulations=10_000, seed=42)
        >>> price = mc.price(create_call(100, 100, 0.02, 0.0, 1.0, 0.2))
        >>> 8.0 < price < 10.0
        True
    """

    name = "monte_carlo"

    def __init__(self, simulations: int = DEFAULT_NUM_SIMULATIONS, seed: Optional[int] = None) -> None:
        if simulations is None or int(simulations) <= 0:
            raise InvalidParameterError(
                f"simulations must be positive, got {simulations}"
            )
        self._simulations = int(simulations)
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def simulations(self) -> int:
        return self._simulations

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def reseed(self, seed: Optional[int] = None) -> None:
        """Restart the random stream (with the construction seed if none is given)."""
        if seed is not None:
            self._seed = seed
        self._rng = np.random.default_rng(self._seed)

    # =========================================================================
    # Price
    # =========================================================================

    def _discounted_payoffs(self, option: Option) -> np.ndarray:
        sigma = option.volatility
        T = option.maturity
        drift = (option.rate - option.dividend_yield - 0.5 * sigma * sigma) * T
        vol = sigma * np.sqrt(T)

        z = standard_normals(self._rng, self._simulations)
        terminal = option.spot * np.exp(drift + vol * z)

        return np.exp(-option.rate * T) * option.payoff(terminal)

    def price(self, option: Option) -> float:
        return float(np.mean(self._discounted_payoffs(option)))

    def price_with_error(self, option: Option) -> Tuple[float, float]:
        """
        Price estimate together with its Monte Carlo standard error.

        Returns:
            Tuple of (price, standard_error)
        """
        values = self._discounted_payoffs(option)
        if values.size > 1:
            stderr = float(np.std(values, ddof=1) / np.sqrt(values.size))
        else:
            stderr = 0.0
        return float(np.mean(values)), stderr

    # =========================================================================
    # Greeks (bump-and-revalue)
    # =========================================================================

    def delta(self, option: Option) -> float:
        bump = option.spot * SPOT_BUMP_PCT
        up = self.price(option.with_spot(option.spot + bump))
        down = self.price(option.with_spot(option.spot - bump))
        return (up - down) / (2.0 * bump)

    def gamma(self, option: Option) -> float:
        bump = option.spot * SPOT_BUMP_PCT
        up = self.price(option.with_spot(option.spot + bump))
        mid = self.price(option)
        down = self.price(option.with_spot(option.spot - bump))
        return (up - 2.0 * mid + down) / (bump * bump)

    def vega(self, option: Option) -> float:
        """Vega per unit of volatility (not rescaled to percentage points)."""
        up = self.price(option.with_volatility(option.volatility + VOL_BUMP))
        base = self.price(option)
        return (up - base) / VOL_BUMP

    def theta(self, option: Option) -> float:
        if option.maturity <= TIME_BUMP:
            return 0.0
        shorter = self.price(option.with_maturity(option.maturity - TIME_BUMP))
        base = self.price(option)
        return -(shorter - base) / TIME_BUMP

    def rho(self, option: Option) -> float:
        """Rho per unit of rate (not rescaled to percentage points)."""
        up = self.price(option.with_rate(option.rate + RATE_BUMP))
        base = self.price(option)
        return (up - base) / RATE_BUMP

    def __repr__(self) -> str:
        return f"MonteCarloPricer(simulations={self._simulations}, seed={self._seed})"
