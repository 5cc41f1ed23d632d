"""
Implied Volatility Solver

Recovers the Black-Scholes volatility that reproduces an observed option
price. Newton-Raphson is tried first for its speed; when it cannot proceed
the solver falls back to bisection over [low, high].

Algorithm:
    1. Newton from sigma0 = clamp(option volatility or 0.20, low, high)
           sigma_{n+1} = sigma_n - (BS(sigma_n) - target) / vega(sigma_n)
       where vega is the raw derivative dPrice/dSigma. Newton is abandoned
       when vega < 1e-8 or is not finite, or when the step leaves (low, high).
    2. Bisection on [low, high]; the bracket must change sign. Stops when
       |f(mid)| < tol or the bracket is narrower than 1e-10, otherwise returns
       the midpoint after max_iter halvings.

The option passed in is never modified: each trial volatility is priced on
a fresh instrument built with Option.with_volatility().

Usage:
    from optionpricer.analytics.implied_vol import solve_implied_volatility

    sigma = solve_implied_volatility(call, target_price=10.45)
"""

import logging
import math

from optionpricer.core.option import Option
from optionpricer.core.pricing import BlackScholesPricer, InvalidParameterError, PricingError

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class ImpliedVolatilityError(PricingError):
    """Base exception for implied volatility failures."""
    pass


class RootNotBracketedError(ImpliedVolatilityError):
    """Exception raised when the price difference has the same sign at both bounds."""
    pass


# =============================================================================
# Constants
# =============================================================================

DEFAULT_TOLERANCE = 1e-8
DEFAULT_MAX_ITERATIONS = 50
DEFAULT_LOW = 0.001
DEFAULT_HIGH = 2.0
DEFAULT_INITIAL_GUESS = 0.20

MIN_VEGA = 1e-8
MIN_BRACKET_WIDTH = 1e-10


# =============================================================================
# Solver
# =============================================================================

def solve_implied_volatility(
    option: Option,
    target_price: float,
    tol: float = DEFAULT_TOLERANCE,
    max_iter: int = DEFAULT_MAX_ITERATIONS,
    low: float = DEFAULT_LOW,
    high: float = DEFAULT_HIGH
) -> float:
    """
    Find sigma such that the Black-Scholes price of the option equals target_price.

    Args:
        option: Contract to calibrate (its own volatility is the initial guess)
        target_price: Observed price, strictly positive
        tol: Absolute price tolerance
        max_iter: Iteration cap for each phase
        low: Lower volatility bound, strictly positive
        high: Upper volatility bound, above low

    Returns:
        Implied volatility

    Raises:
        InvalidParameterError: If target_price <= 0, maturity <= 0 or the
            bounds are not 0 < low < high
        RootNotBracketedError: If Newton fails and [low, high] does not
            bracket the root
    """
    if not target_price > 0:
        raise InvalidParameterError(f"target_price must be positive, got {target_price}")
    if not option.maturity > 0:
        raise InvalidParameterError(
            f"maturity must be positive to invert volatility, got {option.maturity}"
        )
    if not 0 < low < high:
        raise InvalidParameterError(f"bounds must satisfy 0 < low < high, got [{low}, {high}]")

    pricer = BlackScholesPricer()

    def objective(sigma: float) -> float:
        return pricer.price(option.with_volatility(sigma)) - target_price

    # Newton-Raphson
    start = option.volatility if option.volatility > 0 else DEFAULT_INITIAL_GUESS
    sigma = min(max(start, low), high)

    for iteration in range(max_iter):
        trial = option.with_volatility(sigma)
        error = pricer.price(trial) - target_price
        if abs(error) < tol:
            logger.debug(f"Newton converged to {sigma:.8f} in {iteration} iteration(s)")
            return sigma

        vega = pricer.raw_vega(trial)
        if not math.isfinite(vega) or vega < MIN_VEGA:
            logger.warning(f"Newton abandoned at sigma={sigma:.6f}: vega={vega}")
            break

        step = sigma - error / vega
        if not math.isfinite(step) or step <= low or step >= high:
            logger.warning(f"Newton step to {step} left ({low}, {high}), switching to bisection")
            break

        sigma = step

    # Bisection
    a, b = low, high
    fa = objective(a)
    fb = objective(b)

    if fa * fb > 0:
        raise RootNotBracketedError(
            f"Price {target_price} is not bracketed by volatilities [{low}, {high}] "
            f"(f(low)={fa:.6g}, f(high)={fb:.6g})"
        )

    for _ in range(max_iter):
        mid = 0.5 * (a + b)
        fm = objective(mid)

        if abs(fm) < tol or (b - a) < MIN_BRACKET_WIDTH:
            logger.debug(f"Bisection converged to {mid:.8f}")
            return mid

        if fa * fm <= 0:
            b, fb = mid, fm
        else:
            a, fa = mid, fm

    mid = 0.5 * (a + b)
    logger.warning(f"Bisection did not fully converge after {max_iter} iterations, returning {mid:.8f}")
    return mid


class ImpliedVolSolver:
    """Namespace wrapper around solve_implied_volatility()."""

    @staticmethod
    def solve(
        option: Option,
        target_price: float,
        tol: float = DEFAULT_TOLERANCE,
        max_iter: int = DEFAULT_MAX_ITERATIONS,
        low: float = DEFAULT_LOW,
        high: float = DEFAULT_HIGH
    ) -> float:
        return solve_implied_volatility(option, target_price, tol, max_iter, low, high)
